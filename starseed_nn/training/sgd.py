"""Per-example backpropagation and plain SGD updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ..core.mlp import MLP
from ..core.types import Array, Gradients, Sample
from .losses import squared_error


def backprop(mlp: MLP, x: Array, y: Array) -> tuple[float, Gradients]:
    """Return the squared error on ``(x, y)`` and the gradient of every parameter.

    Hidden units whose activation is ``<= 0`` receive no gradient, matching the
    ``max(0, .)`` convention of the forward pass.
    """

    x = np.asarray(x, dtype=np.float32)
    h, out = mlp.forward(x)
    loss, dy = squared_error(out, y)
    dw2 = np.outer(h, dy)
    dh = mlp.w2 @ dy
    dh = np.where(h <= 0, np.float32(0.0), dh)
    dw1 = np.outer(x, dh)
    grads: Gradients = {"w1": dw1, "b1": dh, "w2": dw2, "b2": dy}
    return loss, grads


@dataclass
class SGDOptimizer:
    """Vanilla SGD: ``p -= lr * dp`` applied in place."""

    lr: float

    def __post_init__(self) -> None:
        if not self.lr > 0:
            raise ValueError(f"learning rate must be > 0, got {self.lr}")

    def step(self, mlp: MLP, grads: Gradients) -> None:
        lr = np.float32(self.lr)
        mlp.w1 -= lr * grads["w1"]
        mlp.b1 -= lr * grads["b1"]
        mlp.w2 -= lr * grads["w2"]
        mlp.b2 -= lr * grads["b2"]


def gradient_step(mlp: MLP, sample: Sample, optimizer: SGDOptimizer) -> float:
    """Update ``mlp`` on one sample and return the loss seen before the update."""

    loss, grads = backprop(mlp, sample.x, sample.y)
    optimizer.step(mlp, grads)
    return loss


def train_epoch(mlp: MLP, samples: Iterable[Sample], optimizer: SGDOptimizer) -> float:
    """Run one online pass over ``samples`` in order; return the mean pre-update loss."""

    losses = [gradient_step(mlp, sample, optimizer) for sample in samples]
    if not losses:
        return 0.0
    return float(np.mean(np.asarray(losses, dtype=np.float32)))


__all__ = ["SGDOptimizer", "backprop", "gradient_step", "train_epoch"]
