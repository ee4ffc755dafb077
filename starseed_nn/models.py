"""Model artifact serialisation and checkpoint persistence."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .core.mlp import MLP
from .data.jsonl import DataFormatError


@dataclass(frozen=True)
class ModelArtifact:
    """Self-describing snapshot: layer sizes, parameters and decision threshold."""

    mlp: MLP
    threshold: float = 0.0

    @property
    def input(self) -> int:
        return self.mlp.dims[0]

    @property
    def hidden(self) -> int:
        return self.mlp.dims[1]

    @property
    def output(self) -> int:
        return self.mlp.dims[2]

    def to_dict(self) -> dict:
        return {
            "input": self.input,
            "hidden": self.hidden,
            "output": self.output,
            "mlp": self.mlp.to_dict(),
            "threshold": float(self.threshold),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "ModelArtifact":
        if not isinstance(payload, Mapping):
            raise DataFormatError("model file must contain a JSON object")
        if not isinstance(payload.get("mlp"), Mapping):
            raise DataFormatError("model field 'mlp' must be an object")
        try:
            dims = tuple(int(payload[key]) for key in ("input", "hidden", "output"))
            mlp = MLP.from_dict(payload["mlp"])
            threshold = float(payload.get("threshold", 0.0))
        except (KeyError, TypeError, ValueError) as exc:
            raise DataFormatError(f"invalid model file: {exc}") from exc

        expected = {
            "w1": (dims[0], dims[1]),
            "b1": (dims[1],),
            "w2": (dims[1], dims[2]),
            "b2": (dims[2],),
        }
        for name, shape in expected.items():
            actual = getattr(mlp, name).shape
            if actual != shape:
                raise DataFormatError(
                    f"parameter {name} has shape {actual}, expected {shape}"
                )
        return cls(mlp=mlp, threshold=threshold)


def save_artifact(path: str | Path, artifact: ModelArtifact) -> str:
    """Write ``artifact`` to ``path``, replacing any previous file."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(artifact.to_dict()), encoding="utf-8")
    return str(path)


def load_artifact(path: str | Path) -> ModelArtifact:
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataFormatError(f"{path}: invalid JSON ({exc.msg})") from exc
    return ModelArtifact.from_dict(payload)


class CheckpointWriter:
    """Trainer callback persisting every improved snapshot with a neutral threshold."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.writes = 0

    def on_improvement(self, epoch: int, mlp: MLP, val_loss: float) -> None:
        save_artifact(self.path, ModelArtifact(mlp=mlp, threshold=0.0))
        self.writes += 1


__all__ = ["CheckpointWriter", "ModelArtifact", "load_artifact", "save_artifact"]
