"""
Tests for TF-IDF fit/transform
"""

import dataclasses
import math

import numpy as np
import pytest

from config.settings import FEATURE_LABEL_COLUMN
from models.errors import DimensionMismatch, PreconditionViolation
from models.tfidf_model import TFIDFModel, TfidfState, fit_tfidf, transform_tfidf

IDF_FINANC = math.log10(3 / 2)
IDF_INSUR = math.log10(3 / 1)


def test_fit_worked_example(paper_counts):
    """financ=[1,0,2], insur=[0,1,0] over three documents"""
    state, features = fit_tfidf(paper_counts)

    assert state.vocabulary == ("financ", "insur")
    assert state.n_documents == 3
    assert state.idf_of("financ") == pytest.approx(IDF_FINANC)
    assert state.idf_of("insur") == pytest.approx(IDF_INSUR)
    assert IDF_FINANC == pytest.approx(0.176, abs=1e-3)
    assert IDF_INSUR == pytest.approx(0.477, abs=1e-3)

    dense = features.matrix.toarray()
    assert np.allclose(dense[0], [IDF_FINANC, 0.0])
    assert np.allclose(dense[1], [0.0, IDF_INSUR])
    # Second occurrence of financ does not change TF: 2/2 == 1
    assert np.allclose(dense[2], [IDF_FINANC, 0.0])


def test_transform_uses_training_idf(paper_counts):
    state, _ = fit_tfidf(paper_counts)
    projected = transform_tfidf([["auction", "financ"]], state)

    assert projected.vocabulary == state.vocabulary
    # auction is dropped before the row sum, so TF(financ) == 1
    assert np.allclose(projected.matrix.toarray(), [[IDF_FINANC, 0.0]])


def test_transform_training_corpus_matches_fit_output(paper_counts):
    state, fitted = fit_tfidf(paper_counts)
    projected = transform_tfidf(paper_counts, state)
    assert np.array_equal(fitted.matrix.toarray(), projected.matrix.toarray())


def test_refit_is_reproducible():
    docs = [["payment", "wallet"], ["engin"], ["payment", "ledger", "ledger"], []]
    first, first_features = fit_tfidf(docs)
    second, second_features = fit_tfidf(docs)

    assert first.vocabulary == second.vocabulary
    assert np.array_equal(first.idf, second.idf)
    assert np.array_equal(first_features.matrix.toarray(), second_features.matrix.toarray())


def test_idf_is_finite_and_non_negative():
    docs = [["a", "b"], ["a"], ["a", "c", "c"], ["d"]]
    state, _ = fit_tfidf(docs)
    assert np.all(np.isfinite(state.idf))
    assert np.all(state.idf >= 0)


def test_term_in_every_document_has_zero_weight():
    docs = [["patent", "payment"], ["patent", "patent", "engin"], ["patent"]]
    state, features = fit_tfidf(docs)

    column = state.vocabulary.index("patent")
    assert state.idf[column] == 0.0
    assert np.all(features.matrix.toarray()[:, column] == 0.0)


def test_empty_document_gives_zero_row():
    state, features = fit_tfidf([["financ"], [], ["insur"]])
    dense = features.matrix.toarray()
    assert np.all(np.isfinite(dense))
    assert np.array_equal(dense[1], [0.0, 0.0])

    projected = transform_tfidf([[], ["auction"]], state).matrix.toarray()
    assert np.array_equal(projected, np.zeros((2, 2)))


def test_transform_never_adds_columns(paper_counts):
    state, _ = fit_tfidf(paper_counts)
    for docs in ([["financ"]], [["insur", "financ"]], [["brand", "new", "terms"]], []):
        assert transform_tfidf(docs, state).vocabulary == state.vocabulary
        assert transform_tfidf(docs, state).shape == (len(docs), 2)


def test_fit_rejects_empty_collection():
    with pytest.raises(PreconditionViolation):
        fit_tfidf([])


def test_fit_rejects_collection_without_tokens():
    with pytest.raises(PreconditionViolation):
        fit_tfidf([[], []])


def test_transform_without_state():
    with pytest.raises(PreconditionViolation):
        transform_tfidf([["financ"]], None)


def test_doc_ids_must_match_documents(paper_counts):
    with pytest.raises(DimensionMismatch):
        fit_tfidf(paper_counts, doc_ids=["p1", "p2"])


def test_state_is_immutable(paper_counts):
    state, _ = fit_tfidf(paper_counts)
    with pytest.raises(ValueError):
        state.idf[0] = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.vocabulary = ("other",)


def test_state_rejects_mismatched_lengths():
    with pytest.raises(DimensionMismatch):
        TfidfState(vocabulary=("a",), idf=[0.1, 0.2], n_documents=2)


def test_to_frame_keys_rows_by_document_id(paper_counts):
    _, features = fit_tfidf(paper_counts, doc_ids=["p1", "p2", "p3"])
    frame = features.to_frame(labels=[1, 0, 1])

    assert list(frame.columns) == ["financ", "insur", FEATURE_LABEL_COLUMN]
    assert list(frame.index) == ["p1", "p2", "p3"]
    assert frame.loc["p3", "financ"] == pytest.approx(IDF_FINANC)
    assert frame.loc["p2", "financ"] == 0.0
    assert list(frame[FEATURE_LABEL_COLUMN]) == [1, 0, 1]


def test_to_frame_label_count_mismatch(paper_counts):
    _, features = fit_tfidf(paper_counts)
    with pytest.raises(DimensionMismatch):
        features.to_frame(labels=[1, 0])


def test_to_frame_fills_empty_documents_with_zero():
    _, features = fit_tfidf([["financ"], [], ["insur"]], doc_ids=["a", "b", "c"])
    frame = features.to_frame()

    assert all(dtype.fill_value == 0.0 for dtype in frame.dtypes)
    dense = frame.sparse.to_dense()
    assert dense.loc["b"].tolist() == [0.0, 0.0]
    assert not dense.isna().any().any()


class TestTFIDFModel:
    """Lifecycle of the stateful wrapper"""

    def test_transform_before_fit(self, normalizer):
        model = TFIDFModel(normalizer)
        assert not model.is_fitted
        with pytest.raises(PreconditionViolation):
            model.transform(["Payment terminal"])
        with pytest.raises(PreconditionViolation):
            model.state

    def test_fit_twice_requires_reset(self, normalizer):
        model = TFIDFModel(normalizer).fit(["Financing insurance", "Insurance claims"])
        with pytest.raises(PreconditionViolation):
            model.fit(["Engine rotor"])

        model.reset()
        assert not model.is_fitted
        model.fit(["Engine rotor"])
        assert model.state.vocabulary == ("engin", "rotor")

    def test_normalizes_raw_text(self, normalizer):
        model = TFIDFModel(normalizer)
        features = model.fit_transform(["Financing", "Insurance", "Financing of financing"])

        assert model.state.vocabulary == ("financ", "insur")
        assert np.allclose(features.matrix.toarray()[0], [IDF_FINANC, 0.0])

        projected = model.transform(["Auction financing"])
        assert np.allclose(projected.matrix.toarray(), [[IDF_FINANC, 0.0]])

    def test_save_and_load(self, normalizer, tmp_path):
        model = TFIDFModel(normalizer)
        model.fit(["Financing", "Insurance", "Financing"])
        path = tmp_path / "tfidf" / "model.joblib"
        model.save(path)

        loaded = TFIDFModel.load(path)
        assert loaded.state.vocabulary == model.state.vocabulary
        assert np.array_equal(loaded.state.idf, model.state.idf)
        assert np.array_equal(
            loaded.transform(["insurance"]).matrix.toarray(),
            model.transform(["insurance"]).matrix.toarray(),
        )
        with pytest.raises(ValueError):
            loaded.state.idf[0] = 1.0

    def test_from_state(self, normalizer, paper_counts):
        state, _ = fit_tfidf(paper_counts)
        model = TFIDFModel.from_state(state, normalizer)
        assert model.is_fitted
        assert model.state is state
