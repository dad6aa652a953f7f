# offline/patents/eval_tree_patents.py

import argparse
import json

import joblib
import numpy as np

from config.logging_config import setup_logging
from config.settings import DATASET
from models.classifier import DecisionTreeTrainer, EvaluationReport, evaluate
from models.errors import DimensionMismatch
from utils.path_utils import get_model_paths, get_tfidf_paths

logger = setup_logging("eval_tree_patents")


def main(data_dir=None) -> EvaluationReport:
    tfidf_paths = get_tfidf_paths(DATASET, data_dir)
    model_paths = get_model_paths(DATASET, data_dir)

    saved = joblib.load(model_paths["model"])
    test = joblib.load(tfidf_paths["test_matrix"])
    features, labels = test["features"], test["labels"]

    if tuple(saved["vocabulary"]) != tuple(features.vocabulary):
        raise DimensionMismatch("test features were not projected onto the training vocabulary")

    predictions = DecisionTreeTrainer(n_jobs=1).predict(saved["model"], features.matrix)
    joblib.dump(
        {
            "cv_config": saved["cv_config"],
            "doc_ids": list(features.doc_ids or []),
            "predictions": predictions,
        },
        model_paths["predictions"],
    )

    report = evaluate(np.asarray(labels), predictions)
    with open(model_paths["report"], "w", encoding="utf-8") as f:
        json.dump(report.as_dict(), f, indent=2)

    logger.info(f"Evaluation for {DATASET}: {report.summary()}")
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Predict the held-out patents and report the confusion matrix")
    parser.add_argument("--data-dir", default=None)
    args = parser.parse_args()
    main(args.data_dir)
