"""Metrics helpers for model evaluation."""

from __future__ import annotations

from typing import Iterable

from sklearn.metrics import accuracy_score, f1_score


def compute_accuracy(y_true: Iterable, y_pred: Iterable) -> float:
    """Compute classification accuracy."""
    return float(accuracy_score(y_true, y_pred))


def compute_f1(y_true: Iterable, y_pred: Iterable) -> float:
    """Compute the macro-averaged F1 score.

    Macro averaging keeps the score meaningful for string labels and for
    more than two classes.
    """
    return float(f1_score(y_true, y_pred, average="macro"))
