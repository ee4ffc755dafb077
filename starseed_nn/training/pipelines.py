"""Pipeline assembly: dataset -> trained artifact, artifact -> predictions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..config import TrainConfig
from ..core.mlp import MLP
from ..core.types import Array, Sample
from ..data.jsonl import DataFormatError
from ..models import CheckpointWriter, ModelArtifact, save_artifact
from .calibration import best_threshold_f1
from .sgd import SGDOptimizer
from .trainer import Trainer, TrainResult, split_dataset


class EmptyDatasetError(ValueError):
    """Raised when training is requested on a dataset without samples."""


@dataclass(frozen=True)
class TrainReport:
    """Outcome of :func:`train_model`."""

    artifact: ModelArtifact
    result: TrainResult
    train_size: int
    val_size: int
    f1: float
    out_path: str


def train_model(
    samples: Sequence[Sample],
    config: TrainConfig,
    *,
    rng: np.random.Generator | None = None,
    callbacks: Sequence[object] = (),
) -> TrainReport:
    """Shuffle, split, train, optionally calibrate and persist the best network.

    A checkpoint is written to ``config.checkpoint_path`` on every improving
    epoch and the final artifact to ``config.out``.
    """

    if not samples:
        raise EmptyDatasetError("no samples")
    if rng is None:
        rng = np.random.default_rng(config.seed)

    first = samples[0]
    if first.y is None:
        raise DataFormatError("training samples need targets")
    input_dim, output_dim = int(first.x.size), int(first.y.size)

    optimizer = SGDOptimizer(lr=float(config.lr))
    val, train = split_dataset(samples, float(config.val_split), rng)
    mlp = MLP.initialise(input_dim, int(config.hidden), output_dim, rng)

    trainer = Trainer(
        optimizer=optimizer,
        epochs=int(config.epochs),
        patience=int(config.patience),
        callbacks=[CheckpointWriter(config.checkpoint_path), *callbacks],
    )
    result = trainer.run(mlp, train, val)

    threshold, f1 = 0.0, 0.0
    if config.calibrate:
        threshold, f1 = best_threshold_f1(result.best, val)

    artifact = ModelArtifact(mlp=result.best, threshold=threshold)
    out_path = save_artifact(config.out, artifact)
    return TrainReport(
        artifact=artifact,
        result=result,
        train_size=len(train),
        val_size=len(val),
        f1=f1,
        out_path=out_path,
    )


def predict(artifact: ModelArtifact, samples: Sequence[Sample]) -> List[Array]:
    """Return the raw output vector for every sample; the threshold is not applied."""

    outputs: List[Array] = []
    for lineno, sample in enumerate(samples, start=1):
        if sample.x.size != artifact.input:
            raise DataFormatError(
                f"sample {lineno}: model expects {artifact.input} features, "
                f"found {sample.x.size}"
            )
        outputs.append(artifact.mlp.predict(sample.x))
    return outputs


__all__ = ["EmptyDatasetError", "TrainReport", "predict", "train_model"]
