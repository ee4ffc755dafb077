"""Epoch loop with validation-based early stopping and best-snapshot retention."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

import numpy as np

from ..core.mlp import MLP
from ..core.types import Sample
from .losses import squared_error
from .sgd import SGDOptimizer, train_epoch

IMPROVEMENT_MARGIN = 1e-6


@dataclass
class TrainResult:
    """Summary returned by :meth:`Trainer.run`."""

    best: MLP
    best_loss: float
    epochs_run: int
    stopped_early: bool
    history: List[Mapping[str, float]] = field(default_factory=list)


def split_dataset(
    samples: Sequence[Sample], val_split: float, rng: np.random.Generator
) -> tuple[list[Sample], list[Sample]]:
    """Shuffle ``samples`` once and return ``(validation, training)``.

    The validation prefix holds ``round(len * val_split)`` samples but never so
    many that the training suffix is empty.
    """

    if not 0 <= val_split < 1:
        raise ValueError("val_split must be in [0, 1)")
    n = len(samples)
    if n == 0:
        raise ValueError("cannot split an empty dataset")
    order = rng.permutation(n)
    shuffled = [samples[int(i)] for i in order]
    val_size = int(math.floor(n * val_split + 0.5))
    val_size = min(val_size, n - 1)
    return shuffled[:val_size], shuffled[val_size:]


def evaluate(mlp: MLP, samples: Sequence[Sample]) -> float:
    """Mean over ``samples`` of the summed squared error; 0.0 when empty."""

    if not samples:
        return 0.0
    losses = [squared_error(mlp.predict(s.x), s.y)[0] for s in samples]
    return float(np.mean(np.asarray(losses, dtype=np.float32)))


class Trainer:
    """Run online SGD epochs and keep the snapshot with the lowest validation loss.

    The loop does no I/O itself. Callbacks are duck-typed: ``on_epoch(epoch,
    metrics)`` is called after every epoch and ``on_improvement(epoch, mlp,
    val_loss)`` whenever the validation loss improves, which is where
    checkpoints get persisted.
    """

    def __init__(
        self,
        optimizer: SGDOptimizer,
        epochs: int,
        patience: int,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if epochs < 0:
            raise ValueError("epochs must be >= 0")
        if patience < 0:
            raise ValueError("patience must be >= 0")
        self.optimizer = optimizer
        self.epochs = int(epochs)
        self.patience = int(patience)
        self.callbacks = list(callbacks or [])

    def evaluate(self, mlp: MLP, samples: Sequence[Sample]) -> float:
        return evaluate(mlp, samples)

    def run(
        self, mlp: MLP, train: Sequence[Sample], val: Sequence[Sample]
    ) -> TrainResult:
        best = mlp.copy()
        best_loss = float("inf")
        bad_epochs = 0
        stopped_early = False
        history: list[Mapping[str, float]] = []
        epoch = 0

        for epoch in range(1, self.epochs + 1):
            train_loss = train_epoch(mlp, train, self.optimizer)
            val_loss = self.evaluate(mlp, val)
            improved = val_loss + IMPROVEMENT_MARGIN < best_loss
            if improved:
                best_loss = val_loss
                best = mlp.copy()
                bad_epochs = 0
                self._emit_improvement(epoch, best, val_loss)
            else:
                bad_epochs += 1

            metrics = {
                "train_loss": train_loss,
                "val_loss": val_loss,
                "best_val_loss": best_loss,
                "improved": float(improved),
            }
            history.append(metrics)
            self._emit_epoch(epoch, metrics)

            if not improved and bad_epochs >= self.patience:
                stopped_early = epoch < self.epochs
                break

        return TrainResult(
            best=best,
            best_loss=best_loss,
            epochs_run=epoch,
            stopped_early=stopped_early,
            history=history,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)

    def _emit_improvement(self, epoch: int, mlp: MLP, val_loss: float) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_improvement"):
                callback.on_improvement(epoch, mlp, val_loss)  # type: ignore[attr-defined]


__all__ = ["IMPROVEMENT_MARGIN", "TrainResult", "Trainer", "evaluate", "split_dataset"]
