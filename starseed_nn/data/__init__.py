"""Dataset loading for starseed-nn."""

from .jsonl import DataFormatError, parse_lines, read_jsonl

__all__ = ["DataFormatError", "parse_lines", "read_jsonl"]
