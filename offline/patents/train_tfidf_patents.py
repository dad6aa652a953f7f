# offline/patents/train_tfidf_patents.py

import argparse
from typing import Dict

import joblib

from config.logging_config import setup_logging
from config.settings import DATASET
from models.tfidf_model import FeatureMatrix, TFIDFModel, fit_tfidf, transform_tfidf
from offline.patents.preprocess_patents import read_processed
from utils.path_utils import ensure_directory_exists, get_processed_paths, get_tfidf_paths

logger = setup_logging("train_tfidf_patents")


def main(data_dir=None) -> Dict[str, FeatureMatrix]:
    processed = get_processed_paths(DATASET, data_dir)
    paths = get_tfidf_paths(DATASET, data_dir)
    ensure_directory_exists(paths["vectorizer"].parent)

    train_df = read_processed(processed["train"])
    test_df = read_processed(processed["test"])

    state, train_features = fit_tfidf(train_df["tokens"].tolist(), train_df["doc_id"].tolist())
    test_features = transform_tfidf(test_df["tokens"].tolist(), state, test_df["doc_id"].tolist())

    # Raw text is normalized at classification time exactly as the processed corpora were
    model = TFIDFModel.from_state(state, joblib.load(processed["normalizer"]))
    model.save(paths["vectorizer"])

    joblib.dump({"features": train_features, "labels": train_df["label"].tolist()}, paths["train_matrix"])
    joblib.dump({"features": test_features, "labels": test_df["label"].tolist()}, paths["test_matrix"])

    logger.info(f"TF-IDF trained and saved for {DATASET}: train {train_features.shape}, "
                f"test {test_features.shape}")
    return {"train": train_features, "test": test_features}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fit TF-IDF on the training patents and project the test set")
    parser.add_argument("--data-dir", default=None)
    args = parser.parse_args()
    main(args.data_dir)
