"""Training loop, gradient steps and calibration for starseed-nn."""

from .calibration import best_threshold_f1
from .pipelines import EmptyDatasetError, TrainReport, predict, train_model
from .sgd import SGDOptimizer, backprop, gradient_step, train_epoch
from .trainer import Trainer, TrainResult, evaluate, split_dataset

__all__ = [
    "EmptyDatasetError",
    "SGDOptimizer",
    "TrainReport",
    "TrainResult",
    "Trainer",
    "backprop",
    "best_threshold_f1",
    "evaluate",
    "gradient_step",
    "predict",
    "split_dataset",
    "train_epoch",
    "train_model",
]
