# offline/patents/preprocess_patents.py

import argparse
from pathlib import Path
from typing import Dict, Optional, Sequence

import joblib
import pandas as pd

from config.logging_config import setup_logging
from config.settings import DATASET, RANDOM_SEED, RAW_PATENTS_PATH, SAMPLE_SIZE, TEST_SIZE
from preprocessing.patent_corpus import (
    Document,
    load_documents,
    normalize_documents,
    sample_documents,
    split_documents,
)
from preprocessing.text_normalizer import TextNormalizer
from utils.path_utils import ensure_directory_exists, get_processed_paths

logger = setup_logging("preprocess_patents")


def write_processed(documents: Sequence[Document], normalizer, path: Path, desc: str) -> None:
    tokens = normalize_documents(documents, normalizer, desc=desc)
    df = pd.DataFrame(
        {
            "doc_id": [d.doc_id for d in documents],
            "text": [" ".join(t) for t in tokens],
            "label": [d.label for d in documents],
        }
    )
    df.to_csv(path, sep="\t", index=False)
    logger.info(f"Wrote {len(df)} normalized documents to {path}")


def read_processed(path: Path) -> pd.DataFrame:
    """Processed corpus with text as a list of stems"""
    df = pd.read_csv(path, sep="\t", dtype={"doc_id": str, "text": str}, keep_default_na=False)
    df["tokens"] = df["text"].str.split()
    df["label"] = df["label"].astype(int)
    return df


def main(raw_path=RAW_PATENTS_PATH, data_dir=None, sample_size: Optional[int] = SAMPLE_SIZE,
         test_size: float = TEST_SIZE, seed: int = RANDOM_SEED, normalizer=None) -> Dict[str, Path]:
    normalizer = normalizer if normalizer is not None else TextNormalizer()
    paths = get_processed_paths(DATASET, data_dir)
    ensure_directory_exists(paths["train"].parent)

    documents = load_documents(raw_path)
    documents = sample_documents(documents, sample_size, seed)
    train, test = split_documents(documents, test_size, seed)

    write_processed(train, normalizer, paths["train"], "Normalizing train")
    write_processed(test, normalizer, paths["test"], "Normalizing test")
    joblib.dump(normalizer, paths["normalizer"])
    logger.info(f"Saved normalizer to {paths['normalizer']}")
    return paths


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sample, split and normalize raw patent titles")
    parser.add_argument("--raw", default=RAW_PATENTS_PATH)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--sample-size", type=int, default=SAMPLE_SIZE)
    args = parser.parse_args()
    main(args.raw, args.data_dir, args.sample_size)
