"""starseed-nn public API."""

from .config import TrainConfig, load_config
from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.mlp import MLP
from .core.types import Sample
from .data import DataFormatError, read_jsonl
from .models import CheckpointWriter, ModelArtifact, load_artifact, save_artifact
from .training import (
    EmptyDatasetError,
    Trainer,
    best_threshold_f1,
    predict,
    split_dataset,
    train_model,
)

__all__ = [
    "MLP",
    "Sample",
    "TrainConfig",
    "load_config",
    "DataFormatError",
    "EmptyDatasetError",
    "read_jsonl",
    "ModelArtifact",
    "CheckpointWriter",
    "load_artifact",
    "save_artifact",
    "Trainer",
    "best_threshold_f1",
    "predict",
    "split_dataset",
    "train_model",
    "activations",
    "types",
]
