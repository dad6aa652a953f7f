"""
Vocabulary-indexed document-term count matrices
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse


@dataclass(frozen=True)
class CountMatrix:
    counts: sparse.csr_matrix
    vocabulary: Tuple[str, ...]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.counts.shape


def build_vocabulary(token_docs: Iterable[Sequence[str]]) -> Tuple[str, ...]:
    """Sorted distinct stems across all documents"""
    terms = set()
    for tokens in token_docs:
        terms.update(tokens)
    return tuple(sorted(terms))


def build_count_matrix(token_docs: Sequence[Sequence[str]],
                       vocabulary: Optional[Sequence[str]] = None) -> CountMatrix:
    """
    Build a documents x vocabulary count matrix

    Args:
        token_docs: One token sequence per document, in row order
        vocabulary: Column terms in column order. Derived from token_docs when None.
            Tokens outside the vocabulary are dropped.

    Returns:
        CountMatrix with int64 counts
    """
    token_docs = list(token_docs)
    if vocabulary is None:
        vocabulary = build_vocabulary(token_docs)
    vocabulary = tuple(vocabulary)
    column_of: Dict[str, int] = {term: j for j, term in enumerate(vocabulary)}

    indptr: List[int] = [0]
    indices: List[int] = []
    values: List[int] = []
    for tokens in token_docs:
        row = Counter(column_of[t] for t in tokens if t in column_of)
        for column in sorted(row):
            indices.append(column)
            values.append(row[column])
        indptr.append(len(indices))

    counts = sparse.csr_matrix(
        (np.asarray(values, dtype=np.int64),
         np.asarray(indices, dtype=np.int64),
         np.asarray(indptr, dtype=np.int64)),
        shape=(len(token_docs), len(vocabulary)),
    )
    return CountMatrix(counts=counts, vocabulary=vocabulary)


def document_frequency(counts) -> np.ndarray:
    """Number of rows with a non-zero count, per column"""
    counts = sparse.csr_matrix(counts)
    return np.asarray((counts > 0).sum(axis=0), dtype=np.int64).ravel()
