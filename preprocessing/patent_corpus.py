"""
Patent corpus ingestion: loading, sampling and train/test partitioning
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import pandas as pd
from sklearn.model_selection import train_test_split
from tqdm import tqdm

from config.logging_config import setup_logging
from config.settings import ID_COLUMN, LABEL_COLUMN, RANDOM_SEED, TEST_SIZE, TEXT_COLUMN

logger = setup_logging("patent_corpus")


@dataclass(frozen=True)
class Document:
    doc_id: str
    text: str
    label: int


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix in (".tsv", ".tab"):
        return pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_documents(path: Union[str, Path],
                   id_column: str = ID_COLUMN,
                   text_column: str = TEXT_COLUMN,
                   label_column: str = LABEL_COLUMN) -> List[Document]:
    """
    Load labelled patents from a CSV or TSV file

    Args:
        path: File path, TSV when the extension is .tsv or .tab
        id_column: Column holding the patent number
        text_column: Column holding the title (or any raw text)
        label_column: Column holding the 0/1 fintech label

    Returns:
        Documents in file order
    """
    path = Path(path)
    df = _read_table(path)

    missing = [c for c in (id_column, text_column, label_column) if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {missing}")

    labels = pd.to_numeric(df[label_column], errors="raise").astype(int)
    bad = ~labels.isin([0, 1])
    if bad.any():
        raise ValueError(f"{path}: labels must be 0 or 1, found {sorted(labels[bad].unique())}")

    documents = [
        Document(doc_id=str(doc_id), text=str(text), label=int(label))
        for doc_id, text, label in zip(df[id_column], df[text_column], labels)
    ]
    logger.info(f"Loaded {len(documents)} documents from {path} "
                f"({int(labels.sum())} positive)")
    return documents


def documents_to_frame(documents: Sequence[Document]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "doc_id": [d.doc_id for d in documents],
            "text": [d.text for d in documents],
            "label": [d.label for d in documents],
        }
    )


def sample_documents(documents: Sequence[Document], n: Optional[int],
                     seed: int = RANDOM_SEED) -> List[Document]:
    """Reproducible random sample of n documents. n=None or n >= len keeps all, shuffled."""
    frame = documents_to_frame(documents)
    n = len(frame) if n is None else min(n, len(frame))
    sampled = frame.sample(n=n, random_state=seed)
    return [documents[i] for i in sampled.index]


def split_documents(documents: Sequence[Document], test_size: float = TEST_SIZE,
                    seed: int = RANDOM_SEED) -> Tuple[List[Document], List[Document]]:
    """Stratified train/test split on the label"""
    documents = list(documents)
    labels = [d.label for d in documents]
    stratify = labels if len(set(labels)) > 1 else None
    train, test = train_test_split(
        documents, test_size=test_size, random_state=seed, stratify=stratify
    )
    logger.info(f"Split {len(documents)} documents into {len(train)} train / {len(test)} test")
    return train, test


def normalize_documents(documents: Sequence[Document],
                        normalizer: Callable[[str], List[str]],
                        desc: str = "Normalizing documents") -> List[List[str]]:
    return [normalizer(d.text) for d in tqdm(documents, desc=desc, disable=len(documents) < 1000)]
