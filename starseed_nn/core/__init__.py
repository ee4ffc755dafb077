"""Core numerical primitives for starseed-nn."""

from . import activations, mlp, types

__all__ = ["activations", "mlp", "types"]
