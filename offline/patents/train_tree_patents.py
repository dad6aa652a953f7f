# offline/patents/train_tree_patents.py

import argparse
from typing import Optional

import joblib

from config.logging_config import setup_logging
from config.settings import CV_FOLDS, DATASET, TUNE_LENGTH
from models.classifier import DecisionTreeTrainer
from utils.path_utils import ensure_directory_exists, get_model_paths, get_tfidf_paths

logger = setup_logging("train_tree_patents")


def main(data_dir=None, cv_folds: int = CV_FOLDS, tune_length: int = TUNE_LENGTH,
         n_jobs: Optional[int] = None):
    tfidf_paths = get_tfidf_paths(DATASET, data_dir)
    model_paths = get_model_paths(DATASET, data_dir)
    ensure_directory_exists(model_paths["model"].parent)

    train = joblib.load(tfidf_paths["train_matrix"])
    features, labels = train["features"], train["labels"]

    trainer = DecisionTreeTrainer(cv_folds=cv_folds, tune_length=tune_length, n_jobs=n_jobs)
    try:
        model = trainer.fit(features.matrix, labels)
    except ValueError as e:
        logger.error(f"Decision tree training failed for {DATASET}: {e}")
        raise

    joblib.dump({"model": model, "cv_config": trainer.cv_config(), "vocabulary": features.vocabulary},
                model_paths["model"])
    logger.info(f"Decision tree saved to {model_paths['model']}")
    return model


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tune and train the fintech decision tree")
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--folds", type=int, default=CV_FOLDS)
    parser.add_argument("--tune-length", type=int, default=TUNE_LENGTH)
    parser.add_argument("--n-jobs", type=int, default=None)
    args = parser.parse_args()
    main(args.data_dir, args.folds, args.tune_length, args.n_jobs)
