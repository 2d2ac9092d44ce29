"""Common type definitions and utilities."""

from __future__ import annotations

from pathlib import Path
from typing import TypeAlias

PathLike: TypeAlias = Path | str


def normalize_path(path: PathLike) -> Path:
    """Convert any path-like value to a Path object."""
    return Path(path) if isinstance(path, str) else path


def parse_bool(value: str) -> bool:
    """Interpret an environment-style boolean string."""
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


__all__ = ["PathLike", "normalize_path", "parse_bool"]
