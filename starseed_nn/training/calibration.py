"""Decision-threshold calibration on the first output channel."""

from __future__ import annotations

import warnings
from typing import Sequence

import numpy as np

from ..core.mlp import MLP
from ..core.types import Array, Sample

THRESHOLD_STEPS = 50
CONSTANT_TOLERANCE = 1e-6


def f1_at(predictions: Array, labels: Array, threshold: float) -> float:
    """F1 of ``predictions >= threshold`` against boolean ``labels``.

    Precision, recall and F1 are 0 whenever their denominator is 0.
    """

    pred_pos = predictions >= threshold
    tp = int(np.sum(pred_pos & labels))
    fp = int(np.sum(pred_pos & ~labels))
    fn = int(np.sum(~pred_pos & labels))
    precision = tp / (tp + fp) if tp + fp > 0 else 0.0
    recall = tp / (tp + fn) if tp + fn > 0 else 0.0
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


def best_threshold_f1(mlp: MLP, samples: Sequence[Sample]) -> tuple[float, float]:
    """Scan evenly spaced cutoffs and return ``(threshold, f1)`` with the best F1.

    Samples are positive when ``y[0] > 0``. Constant predictions make the
    search meaningless, so their value is returned with an F1 of 0.
    """

    if not samples:
        return 0.0, 0.0
    predictions = np.asarray([mlp.predict(s.x)[0] for s in samples], dtype=np.float32)
    labels = np.asarray([float(s.y[0]) > 0 for s in samples], dtype=bool)
    min_p = predictions.min()
    max_p = predictions.max()
    if abs(float(max_p - min_p)) < CONSTANT_TOLERANCE:
        warnings.warn(
            "validation predictions are constant; threshold calibration skipped",
            RuntimeWarning,
            stacklevel=2,
        )
        return float(min_p), 0.0

    best_t = float(min_p)
    best_f1 = 0.0
    span = max_p - min_p
    for i in range(THRESHOLD_STEPS + 1):
        t = min_p + span * np.float32(i) / np.float32(THRESHOLD_STEPS)
        f1 = f1_at(predictions, labels, t)
        if f1 > best_f1:
            best_f1 = f1
            best_t = float(t)
    return best_t, best_f1


__all__ = ["best_threshold_f1", "f1_at"]
