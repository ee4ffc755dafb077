"""Single hidden layer perceptron evaluated one example at a time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import numpy as np

from .activations import relu
from .types import Array

PARAMETER_NAMES = ("w1", "b1", "w2", "b2")
INIT_SCALE = 0.1


@dataclass(eq=False)
class MLP:
    """Dense ``input -> hidden (ReLU) -> output (linear)`` network.

    Parameters are float32 and mutated in place by the optimizer, so callers
    that need a stable snapshot must take :meth:`copy`.
    """

    w1: Array
    b1: Array
    w2: Array
    b2: Array

    def __post_init__(self) -> None:
        for name in PARAMETER_NAMES:
            setattr(self, name, np.asarray(getattr(self, name), dtype=np.float32))

    @classmethod
    def initialise(
        cls, input: int, hidden: int, output: int, rng: np.random.Generator
    ) -> "MLP":
        """Draw weights as ``(u - 0.5) * 0.1`` with ``u ~ U[0, 1)``; zero biases."""

        for label, size in (("input", input), ("hidden", hidden), ("output", output)):
            if int(size) < 1:
                raise ValueError(f"{label} size must be >= 1, got {size}")
        w1 = (rng.random((input, hidden), dtype=np.float32) - 0.5) * INIT_SCALE
        w2 = (rng.random((hidden, output), dtype=np.float32) - 0.5) * INIT_SCALE
        return cls(
            w1=w1,
            b1=np.zeros(hidden, dtype=np.float32),
            w2=w2,
            b2=np.zeros(output, dtype=np.float32),
        )

    @property
    def dims(self) -> Tuple[int, int, int]:
        return int(self.w1.shape[0]), int(self.b1.shape[0]), int(self.b2.shape[0])

    def forward(self, x: Array) -> Tuple[Array, Array]:
        """Return ``(hidden_activations, output_values)`` for one input vector."""

        x = np.asarray(x, dtype=np.float32)
        h = relu(self.b1 + x @ self.w1)
        y = self.b2 + h @ self.w2
        return h, y

    def predict(self, x: Array) -> Array:
        return self.forward(x)[1]

    def copy(self) -> "MLP":
        return MLP(**self.state_dict())

    def state_dict(self) -> Dict[str, Array]:
        return {name: getattr(self, name).copy() for name in PARAMETER_NAMES}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for name in PARAMETER_NAMES:
            if name not in state:
                raise KeyError(f"Missing parameter {name} in state dict")
            current = getattr(self, name)
            value = np.asarray(state[name], dtype=np.float32)
            if value.shape != current.shape:
                raise ValueError(
                    f"Parameter {name} has shape {value.shape}, expected {current.shape}"
                )
            setattr(self, name, value.copy())

    def parameter_count(self) -> int:
        return int(sum(getattr(self, name).size for name in PARAMETER_NAMES))

    def to_dict(self) -> Dict[str, list]:
        return {name: getattr(self, name).tolist() for name in PARAMETER_NAMES}

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "MLP":
        missing = [name for name in PARAMETER_NAMES if name not in payload]
        if missing:
            raise KeyError(f"Missing parameters: {', '.join(missing)}")
        return cls(**{name: payload[name] for name in PARAMETER_NAMES})


__all__ = ["MLP", "PARAMETER_NAMES"]
