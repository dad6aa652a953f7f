"""
Fintech Classification Service
Projects raw patent titles onto the fitted TF-IDF space and flags fintech patents
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import time
import uvicorn
import joblib

from config.logging_config import setup_logging
from config.settings import DATASET, SERVICE_HOST, SERVICE_PORT
from models.errors import PreconditionViolation
from models.tfidf_model import TFIDFModel
from utils.path_utils import get_model_paths, get_tfidf_paths

logger = setup_logging("classification_service")

app = FastAPI(
    title="Fintech Classification Service",
    description="TF-IDF + decision tree classification of patent titles",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

class ClassifyRequest(BaseModel):
    texts: List[str]

class Prediction(BaseModel):
    index: int
    label: int

class ClassifyResponse(BaseModel):
    predictions: List[Prediction]
    execution_time: float

# Global variables
artifacts: Dict[str, Any] = {}

def register_artifacts(tfidf_model: TFIDFModel, tree_model: Any) -> None:
    """Install a fitted TF-IDF model and tree for request handling"""
    if not tfidf_model.is_fitted:
        raise PreconditionViolation("classification service needs a fitted TF-IDF model")
    artifacts["tfidf"] = tfidf_model
    artifacts["tree"] = tree_model
    logger.info(f"Artifacts registered, vocabulary size {tfidf_model.state.n_terms}")

def load_artifacts(data_dir: Optional[str] = None) -> None:
    """Load artifacts written by the offline patents pipeline"""
    tfidf_paths = get_tfidf_paths(DATASET, data_dir)
    model_paths = get_model_paths(DATASET, data_dir)
    try:
        tfidf_model = TFIDFModel.load(tfidf_paths["vectorizer"])
        saved = joblib.load(model_paths["model"])
    except FileNotFoundError as e:
        logger.error(f"Missing artifact for {DATASET}: {e}")
        raise
    register_artifacts(tfidf_model, saved["model"])

@app.get("/")
def root():
    return {"message": "Fintech Classification Service", "status": "running"}

@app.get("/health")
def health_check():
    tfidf_model = artifacts.get("tfidf")
    return {
        "status": "healthy",
        "service": "classification_service",
        "artifacts_loaded": "tree" in artifacts,
        "vocabulary_size": tfidf_model.state.n_terms if tfidf_model is not None else 0
    }

@app.post("/classify", response_model=ClassifyResponse)
def classify(req: ClassifyRequest):
    start_time = time.time()
    if not req.texts:
        raise HTTPException(status_code=400, detail="texts cannot be empty")
    if "tree" not in artifacts:
        raise HTTPException(status_code=503, detail="model artifacts are not loaded")

    features = artifacts["tfidf"].transform(req.texts)
    labels = artifacts["tree"].predict(features.matrix)

    return ClassifyResponse(
        predictions=[Prediction(index=i, label=int(label)) for i, label in enumerate(labels)],
        execution_time=time.time() - start_time
    )

if __name__ == "__main__":
    load_artifacts()
    uvicorn.run(app, host=SERVICE_HOST, port=SERVICE_PORT)
