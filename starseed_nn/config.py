"""Training run configuration and JSON/YAML config file loading."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class TrainConfig:
    """Options of a ``train`` run.

    ``checkpoint`` defaults to ``out`` and ``seed`` to fresh OS entropy.
    """

    out: str = "model.json"
    data: str | None = None
    hidden: int = 64
    epochs: int = 10
    lr: float = 0.01
    val_split: float = 0.2
    patience: int = 3
    checkpoint: str | None = None
    calibrate: bool = True
    seed: int | None = None
    metrics: str | None = None
    metrics_csv: str | None = None
    plot: str | None = None

    @property
    def checkpoint_path(self) -> str:
        return self.checkpoint or self.out

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TrainConfig":
        known = {f.name for f in fields(cls)}
        normalised = {str(k).replace("-", "_"): v for k, v in mapping.items()}
        unknown = set(normalised) - known
        if unknown:
            raise KeyError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**normalised)

    def merged(self, **overrides: Any) -> "TrainConfig":
        """Return a copy with every non-``None`` override applied."""

        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: str | Path) -> Mapping[str, Any]:
    """Read a JSON or YAML config file into a mapping."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


__all__ = ["TrainConfig", "load_config"]
