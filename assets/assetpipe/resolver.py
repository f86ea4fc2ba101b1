"""Expand source patterns into concrete file paths."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable

from .errors import PatternError


def _check_brackets(pattern: str) -> None:
    depth = 0
    for ch in pattern:
        if ch == "[":
            depth += 1
        elif ch == "]" and depth:
            depth -= 1
    if depth:
        raise PatternError(pattern, "unterminated character class")


def expand(pattern: str | Path, *, root: Path | None = None) -> list[Path]:
    """
    Expand one glob pattern.

    Matches come back sorted, so a group's order only depends on the order
    its patterns were given in. A pattern with no matches expands to nothing.

    Args:
        pattern: Glob pattern or literal path
        root: Directory relative patterns are resolved against

    Returns:
        Matching files
    """
    text = str(pattern)
    if not text.strip():
        raise PatternError(text, "empty pattern")
    _check_brackets(text)

    if root is not None and not Path(text).is_absolute():
        text = str(root / text)

    if not any(ch in text for ch in "*?["):
        path = Path(text)
        return [path] if path.exists() else []

    return [Path(m) for m in sorted(glob.glob(text, recursive=True))]


def expand_all(patterns: Iterable[str | Path], *, root: Path | None = None) -> list[Path]:
    """Expand patterns in order and concatenate the results."""
    paths: list[Path] = []
    for pattern in patterns:
        paths.extend(expand(pattern, root=root))
    return paths
