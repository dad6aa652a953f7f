"""
Tests for the fintech classification service
"""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from models.classifier import DecisionTreeTrainer
from models.errors import PreconditionViolation
from models.tfidf_model import TFIDFModel
from services.classification_service import main as classification_service


@pytest.fixture
def client():
    classification_service.artifacts.clear()
    yield TestClient(classification_service.app)
    classification_service.artifacts.clear()


@pytest.fixture
def trained(titles, normalizer):
    model = TFIDFModel(normalizer)
    features = model.fit_transform([t for _, t, _ in titles])
    labels = np.array([label for _, _, label in titles])
    tree = DecisionTreeTrainer(cv_folds=3, n_jobs=1).fit(features.matrix, labels)
    return model, tree


def test_health_without_artifacts(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["artifacts_loaded"] is False
    assert response.json()["vocabulary_size"] == 0


def test_classify_without_artifacts(client):
    response = client.post("/classify", json={"texts": ["Payment card"]})
    assert response.status_code == 503


def test_classify(client, trained):
    model, tree = trained
    classification_service.register_artifacts(model, tree)

    health = client.get("/health").json()
    assert health["artifacts_loaded"] is True
    assert health["vocabulary_size"] == model.state.n_terms

    response = client.post("/classify", json={
        "texts": ["Payment wallet for the card", "Engine rotor with a gear", ""]
    })
    assert response.status_code == 200
    predictions = response.json()["predictions"]
    assert [p["index"] for p in predictions] == [0, 1, 2]
    assert predictions[0]["label"] == 1
    assert predictions[1]["label"] == 0


def test_classify_empty_request(client, trained):
    classification_service.register_artifacts(*trained)
    response = client.post("/classify", json={"texts": []})
    assert response.status_code == 400


def test_register_unfitted_model(normalizer):
    with pytest.raises(PreconditionViolation):
        classification_service.register_artifacts(TFIDFModel(normalizer), object())


def test_load_artifacts_missing_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        classification_service.load_artifacts(str(tmp_path))


class _ConstantTree:
    """Any fitted estimator with predict() can back the service"""

    def __init__(self, label):
        self.label = label
        self.calls = []

    def predict(self, features):
        self.calls.append(features.shape)
        return np.full(features.shape[0], self.label)


def test_classify_uses_registered_estimator(client, trained):
    model, _ = trained
    tree = _ConstantTree(label=1)
    classification_service.register_artifacts(model, tree)

    response = client.post("/classify", json={"texts": ["Engine rotor", "Gear"]})
    assert response.status_code == 200
    assert [p["label"] for p in response.json()["predictions"]] == [1, 1]
    assert tree.calls == [(2, model.state.n_terms)]
