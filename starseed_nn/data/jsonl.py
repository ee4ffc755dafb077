"""JSON-lines dataset reader.

Each non-blank line holds one sample ``{"x": [float, ...], "y": [float, ...]}``.
Input is read from a file path, or from standard input when no path is given.
The whole load fails on the first malformed line; nothing is skipped except
blank lines.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterable, List

import numpy as np

from ..core.types import Sample


class DataFormatError(ValueError):
    """Raised when a dataset or model file does not match the expected schema."""


def _read_text(path: str | Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _vector(record: dict, key: str, lineno: int) -> np.ndarray:
    value = record.get(key)
    if not isinstance(value, list):
        raise DataFormatError(f"line {lineno}: field {key!r} must be a list of numbers")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
        raise DataFormatError(f"line {lineno}: field {key!r} must contain only numbers")
    try:
        return np.asarray(value, dtype=np.float32)
    except (OverflowError, ValueError) as exc:
        raise DataFormatError(f"line {lineno}: field {key!r} is out of range ({exc})") from exc


def parse_lines(lines: Iterable[str], *, require_targets: bool = True) -> List[Sample]:
    """Parse JSON-lines ``lines`` into samples with consistent dimensions."""

    samples: List[Sample] = []
    x_len: int | None = None
    y_len: int | None = None
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise DataFormatError(f"line {lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(record, dict):
            raise DataFormatError(f"line {lineno}: expected a JSON object")

        x = _vector(record, "x", lineno)
        y = None
        if require_targets or record.get("y") is not None:
            y = _vector(record, "y", lineno)

        if x_len is None:
            x_len = x.size
            y_len = None if y is None else y.size
        elif x.size != x_len:
            raise DataFormatError(
                f"line {lineno}: expected {x_len} features, found {x.size}"
            )
        if y is not None and y_len is not None and y.size != y_len:
            raise DataFormatError(
                f"line {lineno}: expected {y_len} targets, found {y.size}"
            )
        samples.append(Sample(x=x, y=y))
    return samples


def read_jsonl(path: str | Path | None = None, *, require_targets: bool = True) -> List[Sample]:
    """Load every sample from ``path`` (or stdin when ``None``)."""

    return parse_lines(_read_text(path).splitlines(), require_targets=require_targets)


__all__ = ["DataFormatError", "parse_lines", "read_jsonl"]
