"""Core typing contracts for starseed-nn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Sample:
    """A single feature/target pair.

    ``y`` is ``None`` for inference inputs that carry no targets.
    """

    x: Array
    y: Array | None = None

    @classmethod
    def of(cls, x, y=None) -> "Sample":
        targets = None if y is None else np.asarray(y, dtype=np.float32)
        return cls(x=np.asarray(x, dtype=np.float32), y=targets)


Gradients = Dict[str, Array]
