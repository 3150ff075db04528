# File: svmredlight/evaluation/metrics.py

"""
Evaluation metrics for binary decision values

Turns decision values and +1/-1 labels into the figures ``svm_classify``
reports (accuracy, precision, recall) plus F1 and ROC AUC.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

import numpy as np
from sklearn.metrics import (
    accuracy_score, f1_score, precision_score, recall_score, roc_auc_score
)

logger = logging.getLogger(__name__)


@dataclass
class ClassificationMetrics:

    accuracy: float
    precision: float
    recall: float
    f1: float
    roc_auc: Optional[float]
    n_examples: int
    n_correct: int

    def to_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


def evaluate_scores(labels: Sequence[float], scores: Sequence[float]) -> ClassificationMetrics:
    """
    Compare decision values against labels.

    Positive scores predict class +1. Examples labelled 0 are skipped.

    Args:
        labels: True labels (sign is used)
        scores: Decision values from ``Model.classify``

    Returns:
        ClassificationMetrics
    """
    labels = np.asarray(labels, dtype=np.float64)
    scores = np.asarray(scores, dtype=np.float64)
    if labels.shape != scores.shape:
        raise ValueError(f"Got {len(labels)} labels but {len(scores)} scores")

    labelled = labels != 0
    y_true = np.where(labels[labelled] > 0, 1, -1)
    y_pred = np.where(scores[labelled] > 0, 1, -1)
    y_score = scores[labelled]

    if len(y_true) == 0:
        raise ValueError("No labelled examples to evaluate")

    roc_auc = None
    if len(np.unique(y_true)) == 2:
        roc_auc = float(roc_auc_score(y_true, y_score))

    metrics = ClassificationMetrics(
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision_score(y_true, y_pred, pos_label=1, zero_division=0)),
        recall=float(recall_score(y_true, y_pred, pos_label=1, zero_division=0)),
        f1=float(f1_score(y_true, y_pred, pos_label=1, zero_division=0)),
        roc_auc=roc_auc,
        n_examples=int(len(y_true)),
        n_correct=int(np.sum(y_true == y_pred)),
    )

    logger.debug(f"Evaluated {metrics.n_examples} examples: accuracy={metrics.accuracy:.4f}")
    return metrics
