from pathlib import Path
from typing import Dict, Optional, Union
from config.settings import DATA_DIR, DATASETS

def get_processed_paths(dataset_name: str, data_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
    """
    Get processed corpus file paths for a specific dataset

    Args:
        dataset_name: Name of the dataset
        data_dir: Root data directory, defaults to settings.DATA_DIR

    Returns:
        Dictionary containing paths to the normalized train/test corpora
        and the normalizer that produced them
    """
    _check_dataset(dataset_name)
    base_path = Path(data_dir or DATA_DIR) / "vectors" / dataset_name / "processed"
    return {
        "train": base_path / f"{dataset_name}_train_cleaned.tsv",
        "test": base_path / f"{dataset_name}_test_cleaned.tsv",
        "normalizer": base_path / f"{dataset_name}_normalizer.joblib",
    }

def get_tfidf_paths(dataset_name: str, data_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
    """
    Get TF-IDF file paths for a specific dataset

    Args:
        dataset_name: Name of the dataset
        data_dir: Root data directory, defaults to settings.DATA_DIR

    Returns:
        Dictionary containing paths to TF-IDF files
    """
    _check_dataset(dataset_name)
    base_path = Path(data_dir or DATA_DIR) / "vectors" / dataset_name / "tfidf"
    return {
        "vectorizer": base_path / f"{dataset_name}_tfidf_model.joblib",
        "train_matrix": base_path / f"{dataset_name}_tfidf_train.joblib",
        "test_matrix": base_path / f"{dataset_name}_tfidf_test.joblib",
    }

def get_model_paths(dataset_name: str, data_dir: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
    """
    Get classifier file paths for a specific dataset

    Args:
        dataset_name: Name of the dataset
        data_dir: Root data directory, defaults to settings.DATA_DIR

    Returns:
        Dictionary containing paths to the trained tree and its predictions
    """
    _check_dataset(dataset_name)
    base_path = Path(data_dir or DATA_DIR) / "models" / dataset_name
    return {
        "model": base_path / f"{dataset_name}_rpart_cv.joblib",
        "predictions": base_path / f"{dataset_name}_predictions.joblib",
        "report": base_path / f"{dataset_name}_evaluation.json",
    }

def _check_dataset(dataset_name: str) -> None:
    if dataset_name not in DATASETS:
        raise ValueError(f"Unknown dataset: {dataset_name}")

def ensure_directory_exists(path: Path) -> None:
    """
    Ensure that a directory exists, create it if it doesn't

    Args:
        path: Path to the directory
    """
    path.mkdir(parents=True, exist_ok=True)
