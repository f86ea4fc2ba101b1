"""Load source files into fragments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .errors import NoInputError, ReadError, UnsupportedKindError
from .models import Fragment, FragmentKind

logger = logging.getLogger(__name__)


def kind_for_path(path: Path | str) -> FragmentKind:
    """Fragment kind from a file's extension."""
    ext = Path(path).suffix
    kind = FragmentKind.from_extension(ext)
    if kind is None:
        raise UnsupportedKindError(path, ext)
    return kind


def load_fragments(paths: Sequence[Path]) -> list[Fragment]:
    """
    Read every source file fully, keeping the given order.

    Raises:
        NoInputError: paths is empty (checked before touching the disk)
        UnsupportedKindError: a file has an unknown extension
        ReadError: a file can't be read
    """
    if not paths:
        raise NoInputError()

    fragments: list[Fragment] = []
    for path in paths:
        path = Path(path)
        kind = kind_for_path(path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise ReadError(path, exc.strerror or str(exc)) from exc
        logger.debug("loaded %s (%s, %d bytes)", path, kind.value, len(content))
        fragments.append(Fragment(content=content, kind=kind, sources=(path,)))
    return fragments
