"""
Classifier interface and the cross-validated decision tree used for fintech flagging
"""

import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix, f1_score, precision_score, recall_score
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.tree import DecisionTreeClassifier

from config.logging_config import setup_logging
from config.settings import CV_FOLDS, RANDOM_SEED, SCORING, TUNE_LENGTH

logger = setup_logging("classifier")


class Classifier(Protocol):
    """Anything that can be trained on a feature matrix and predict labels"""

    def fit(self, features, labels) -> Any:
        ...

    def predict(self, model, features) -> np.ndarray:
        ...


def default_n_jobs() -> int:
    """All cores but one, leaving one for the operating system"""
    return max((os.cpu_count() or 1) - 1, 1)


def candidate_ccp_alphas(features, labels, tune_length: int = TUNE_LENGTH,
                         random_state: int = RANDOM_SEED) -> List[float]:
    """
    Pick tune_length complexity values spread over the cost-complexity pruning path

    The last alpha of the path prunes the tree down to its root and is skipped.
    """
    path = DecisionTreeClassifier(random_state=random_state).cost_complexity_pruning_path(features, labels)
    # Rounding can leave tiny negative alphas at the start of the path
    alphas = np.unique(np.clip(path.ccp_alphas[:-1], 0.0, None))
    if alphas.size == 0:
        return [0.0]
    if alphas.size <= tune_length:
        return alphas.tolist()
    picks = np.unique(np.linspace(0, alphas.size - 1, tune_length).round().astype(int))
    return alphas[picks].tolist()


class DecisionTreeTrainer:
    """Decision tree tuned over ccp_alpha with stratified k-fold cross-validation"""

    def __init__(self, cv_folds: int = CV_FOLDS, tune_length: int = TUNE_LENGTH,
                 scoring: str = SCORING, n_jobs: Optional[int] = None,
                 random_state: int = RANDOM_SEED):
        self.cv_folds = cv_folds
        self.tune_length = tune_length
        self.scoring = scoring
        self.n_jobs = n_jobs if n_jobs is not None else default_n_jobs()
        self.random_state = random_state

    def cv_config(self) -> Dict[str, Any]:
        return {
            "method": "cv",
            "folds": self.cv_folds,
            "stratified": True,
            "tune_length": self.tune_length,
            "scoring": self.scoring,
            "random_state": self.random_state,
        }

    def fit(self, features, labels) -> GridSearchCV:
        labels = np.asarray(labels)
        if features.shape[0] != labels.shape[0]:
            raise ValueError(f"{features.shape[0]} feature rows for {labels.shape[0]} labels")
        if np.unique(labels).size < 2:
            raise ValueError("training labels contain a single class")

        alphas = candidate_ccp_alphas(features, labels, self.tune_length, self.random_state)
        folds = StratifiedKFold(n_splits=self.cv_folds, shuffle=True, random_state=self.random_state)
        search = GridSearchCV(
            DecisionTreeClassifier(random_state=self.random_state),
            param_grid={"ccp_alpha": alphas},
            scoring=self.scoring,
            cv=folds,
            n_jobs=self.n_jobs,
            refit=True,
        )

        logger.info(f"Training decision tree: {features.shape[0]} documents, {features.shape[1]} terms, "
                    f"{len(alphas)} ccp_alpha candidates, {self.cv_folds}-fold CV, n_jobs={self.n_jobs}")
        start_time = time.time()
        search.fit(features, labels)
        logger.info(f"Training finished in {time.time() - start_time:.2f}s, "
                    f"best ccp_alpha={search.best_params_['ccp_alpha']:.6g}, "
                    f"CV {self.scoring}={search.best_score_:.4f}")
        return search

    def predict(self, model, features) -> np.ndarray:
        return np.asarray(model.predict(features))


@dataclass
class EvaluationReport:
    confusion: np.ndarray
    accuracy: float
    sensitivity: float
    specificity: float
    precision: float
    f1: float
    support: Dict[int, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "confusion_matrix": self.confusion.tolist(),
            "accuracy": self.accuracy,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "precision": self.precision,
            "f1": self.f1,
            "support": dict(self.support),
        }

    def summary(self) -> str:
        (tn, fp), (fn, tp) = self.confusion.tolist()
        return (f"Confusion matrix (rows=true 0/1, cols=predicted 0/1): [[{tn}, {fp}], [{fn}, {tp}]] | "
                f"accuracy={self.accuracy:.4f} sensitivity={self.sensitivity:.4f} "
                f"specificity={self.specificity:.4f} precision={self.precision:.4f} f1={self.f1:.4f}")


def evaluate(true_labels: Sequence[int], predicted_labels: Sequence[int]) -> EvaluationReport:
    """Binary classification report with 1 as the positive (fintech) class"""
    true_labels = np.asarray(true_labels)
    predicted_labels = np.asarray(predicted_labels)
    if true_labels.shape != predicted_labels.shape:
        raise ValueError(f"{true_labels.shape[0]} true labels for {predicted_labels.shape[0]} predictions")

    return EvaluationReport(
        confusion=confusion_matrix(true_labels, predicted_labels, labels=[0, 1]),
        accuracy=float(accuracy_score(true_labels, predicted_labels)),
        sensitivity=float(recall_score(true_labels, predicted_labels, pos_label=1, zero_division=0)),
        specificity=float(recall_score(true_labels, predicted_labels, pos_label=0, zero_division=0)),
        precision=float(precision_score(true_labels, predicted_labels, pos_label=1, zero_division=0)),
        f1=float(f1_score(true_labels, predicted_labels, pos_label=1, zero_division=0)),
        support={0: int(np.sum(true_labels == 0)), 1: int(np.sum(true_labels == 1))},
    )
