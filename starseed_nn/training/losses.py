"""Squared-error loss used by the training loop."""

from __future__ import annotations

import numpy as np

from ..core.types import Array


def squared_error(pred: Array, target: Array) -> tuple[float, Array]:
    """Return ``sum((pred - target)**2)`` and its gradient ``2 * (pred - target)``."""

    diff = pred - np.asarray(target, dtype=np.float32)
    loss = float(np.sum(np.square(diff), dtype=np.float32))
    return loss, np.float32(2.0) * diff


__all__ = ["squared_error"]
