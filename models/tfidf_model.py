"""
TF-IDF feature construction with a fit-once vocabulary and IDF vector

fit_tfidf() derives the vocabulary and IDF weights from the training corpus
and returns them as an immutable TfidfState. transform_tfidf() projects any
corpus into that same feature space: unseen stems are dropped, missing stems
are zero and the IDF weights are never recomputed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import joblib
import numpy as np
import pandas as pd
from scipy import sparse

from config.logging_config import setup_logging
from config.settings import FEATURE_LABEL_COLUMN
from preprocessing.text_normalizer import TextNormalizer
from .count_matrix import CountMatrix, build_count_matrix, document_frequency
from .errors import DimensionMismatch, PreconditionViolation
from .numeric import log10_ratio, row_normalize, scale_columns, zero_fill_undefined_rows

logger = setup_logging("tfidf_model")


@dataclass(frozen=True, eq=False)
class TfidfState:
    """Fitted vocabulary and IDF vector. Read-only once built."""
    vocabulary: Tuple[str, ...]
    idf: np.ndarray
    n_documents: int

    def __post_init__(self):
        vocabulary = tuple(self.vocabulary)
        idf = np.array(self.idf, dtype=np.float64).ravel()
        if len(vocabulary) != idf.shape[0]:
            raise DimensionMismatch(
                f"vocabulary has {len(vocabulary)} terms but idf has {idf.shape[0]} values"
            )
        idf.setflags(write=False)
        object.__setattr__(self, "vocabulary", vocabulary)
        object.__setattr__(self, "idf", idf)

    @property
    def n_terms(self) -> int:
        return len(self.vocabulary)

    def idf_of(self, term: str) -> float:
        return float(self.idf[self.vocabulary.index(term)])

    def __setstate__(self, state):
        # Unpickling skips __post_init__
        self.__dict__.update(state)
        self.idf.setflags(write=False)


@dataclass(frozen=True, eq=False)
class FeatureMatrix:
    """TF-IDF scores, rows in document order, columns in vocabulary order"""
    matrix: sparse.csr_matrix
    vocabulary: Tuple[str, ...]
    doc_ids: Optional[Tuple] = None

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    def to_frame(self, labels: Optional[Sequence[int]] = None,
                 label_column: str = FEATURE_LABEL_COLUMN) -> pd.DataFrame:
        """Sparse DataFrame indexed by document id, one column per term, plus the label column"""
        index = list(self.doc_ids) if self.doc_ids is not None else None
        frame = pd.DataFrame.sparse.from_spmatrix(
            self.matrix, index=index, columns=list(self.vocabulary)
        ).astype(pd.SparseDtype("float64", 0.0))
        if labels is not None:
            if len(labels) != self.matrix.shape[0]:
                raise DimensionMismatch(
                    f"{len(labels)} labels for {self.matrix.shape[0]} documents"
                )
            frame[label_column] = pd.Categorical(list(labels))
        return frame


def _check_doc_ids(doc_ids, n_docs: int) -> Optional[Tuple]:
    if doc_ids is None:
        return None
    doc_ids = tuple(doc_ids)
    if len(doc_ids) != n_docs:
        raise DimensionMismatch(f"{len(doc_ids)} document ids for {n_docs} documents")
    return doc_ids


def _project(counts: CountMatrix, state: TfidfState) -> sparse.csr_matrix:
    """Term frequency scaled by the fitted IDF. Shared by fit and transform."""
    if counts.vocabulary != state.vocabulary:
        raise DimensionMismatch("count matrix columns do not match the fitted vocabulary")
    term_frequency = row_normalize(counts.counts)
    weighted = scale_columns(term_frequency, state.idf)
    return zero_fill_undefined_rows(weighted)


def fit_tfidf(token_docs: Sequence[Sequence[str]],
              doc_ids: Optional[Sequence] = None) -> Tuple[TfidfState, FeatureMatrix]:
    """
    Fit vocabulary and IDF weights on a training corpus

    Args:
        token_docs: One normalized token sequence per training document
        doc_ids: Optional row identifiers

    Returns:
        (fitted state, training feature matrix)
    """
    token_docs = list(token_docs)
    if not token_docs:
        raise PreconditionViolation("cannot fit TF-IDF on an empty training collection")
    doc_ids = _check_doc_ids(doc_ids, len(token_docs))

    counts = build_count_matrix(token_docs)
    if not counts.vocabulary:
        raise PreconditionViolation("training collection has no tokens, vocabulary would be empty")

    n_documents = len(token_docs)
    idf = log10_ratio(n_documents, document_frequency(counts.counts))
    state = TfidfState(vocabulary=counts.vocabulary, idf=idf, n_documents=n_documents)

    empty_docs = int(np.sum(np.diff(counts.counts.indptr) == 0))
    if empty_docs:
        logger.warning(f"{empty_docs} training documents have no tokens and get zero feature rows")
    logger.info(f"TF-IDF fitted on {n_documents} documents, vocabulary size {state.n_terms}")

    features = FeatureMatrix(_project(counts, state), state.vocabulary, doc_ids)
    return state, features


def transform_tfidf(token_docs: Sequence[Sequence[str]], state: TfidfState,
                    doc_ids: Optional[Sequence] = None) -> FeatureMatrix:
    """Project a corpus into the fitted feature space"""
    if state is None:
        raise PreconditionViolation("transform called before fit")
    token_docs = list(token_docs)
    doc_ids = _check_doc_ids(doc_ids, len(token_docs))

    counts = build_count_matrix(token_docs, state.vocabulary)
    logger.debug(f"Projected {len(token_docs)} documents onto {state.n_terms} terms")
    return FeatureMatrix(_project(counts, state), state.vocabulary, doc_ids)


class TFIDFModel:
    """
    Raw text -> TF-IDF features, with an explicit unfit/fit lifecycle

    fit() may run once; reset() returns the model to the unfit state.
    """

    def __init__(self, normalizer: Optional[Callable[[str], List[str]]] = None):
        self.normalizer = normalizer if normalizer is not None else TextNormalizer()
        self._state: Optional[TfidfState] = None

    @classmethod
    def from_state(cls, state: TfidfState, normalizer: Optional[Callable[[str], List[str]]] = None) -> "TFIDFModel":
        """Fitted model around a state produced by fit_tfidf()"""
        model = cls(normalizer)
        model._state = state
        return model

    @property
    def is_fitted(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> TfidfState:
        if self._state is None:
            raise PreconditionViolation("TF-IDF model is not fitted")
        return self._state

    def tokenize(self, texts: Sequence[str]) -> List[List[str]]:
        return [self.normalizer(text) for text in texts]

    def fit_transform(self, texts: Sequence[str], doc_ids: Optional[Sequence] = None) -> FeatureMatrix:
        if self._state is not None:
            raise PreconditionViolation("TF-IDF model is already fitted, call reset() first")
        state, features = fit_tfidf(self.tokenize(texts), doc_ids)
        self._state = state
        return features

    def fit(self, texts: Sequence[str], doc_ids: Optional[Sequence] = None) -> "TFIDFModel":
        self.fit_transform(texts, doc_ids)
        return self

    def transform(self, texts: Sequence[str], doc_ids: Optional[Sequence] = None) -> FeatureMatrix:
        if self._state is None:
            raise PreconditionViolation("transform called before fit")
        return transform_tfidf(self.tokenize(texts), self._state, doc_ids)

    def reset(self) -> None:
        self._state = None

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self, path)
        logger.info(f"TF-IDF model saved to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TFIDFModel":
        model = joblib.load(path)
        if not isinstance(model, cls):
            raise TypeError(f"{path} does not hold a {cls.__name__}")
        logger.info(f"TF-IDF model loaded from {path}")
        return model
