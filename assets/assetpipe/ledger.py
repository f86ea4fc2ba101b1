"""
Asset-info files: what each group built last time.

One file per group and output kind, next to the artifact:

    static/asset-info-app-css

Line 1 is the artifact filename, every following line the fingerprint of
one (post-join) fragment, in order. Other tooling reads this file, so it
stays plain newline-delimited text.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from .errors import LedgerError, WriteError
from .fingerprint import is_fingerprint
from .models import FragmentKind, GroupIdentity, LedgerRecord

logger = logging.getLogger(__name__)


def is_plain_filename(name: str) -> bool:
    """A bare file name that stays inside the output directory."""
    return bool(name.strip()) and name not in (".", "..") and "/" not in name and "\\" not in name


def parse_record(text: str, path: Path) -> LedgerRecord | None:
    """
    Parse asset-info text.

    Returns None for a file too short to hold a record (treated as absent).
    Raises LedgerError for anything else that isn't well formed.
    """
    if text.endswith("\n"):
        text = text[:-1]
    lines = text.split("\n")
    if len(lines) < 2:
        return None

    filename, hashes = lines[0], lines[1:]
    if not filename.strip():
        raise LedgerError(path, "empty output filename")
    if not is_plain_filename(filename):
        raise LedgerError(path, f"output filename {filename!r} is not a plain file name")
    for lineno, value in enumerate(hashes, start=2):
        if not is_fingerprint(value):
            raise LedgerError(path, f"line {lineno}: {value!r} is not a fingerprint")
    return LedgerRecord(last_output_filename=filename, fragment_fingerprints=tuple(hashes))


def write_atomic(path: Path, data: bytes) -> None:
    """Write to a temp file in the same directory, then rename into place."""
    try:
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        raise WriteError(path, exc.strerror or str(exc)) from exc
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; served assets must be world-readable
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, str(path))
    except OSError as exc:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise WriteError(path, exc.strerror or str(exc)) from exc


class GenerationLedger:
    """
    Change detection state for one group.

    Each build owns its ledger; there is no shared instance.
    """

    def __init__(self, identity: GroupIdentity):
        self.identity = identity

    def path(self, output_kind: FragmentKind) -> Path:
        return self.identity.directory / self.identity.ledger_filename(output_kind)

    def load(self, output_kind: FragmentKind) -> tuple[LedgerRecord | None, bool]:
        """
        Read the previous record.

        Returns:
            (record, found); a missing file gives (None, False)
        """
        path = self.path(output_kind)
        try:
            raw = path.read_bytes()
        except (FileNotFoundError, NotADirectoryError):
            # a directory that is missing or is a file holds no record
            logger.debug("no asset info at %s", path)
            return None, False
        except OSError as exc:
            raise LedgerError(path, exc.strerror or str(exc)) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LedgerError(path, "not valid UTF-8") from exc

        record = parse_record(text, path)
        if record is None:
            logger.debug("asset info at %s holds no record", path)
            return None, False
        return record, True

    def recorded_filename(self, output_kind: FragmentKind) -> str | None:
        """
        Artifact name on line 1 of the record, read leniently.

        Unlike load(), a damaged record is not an error: anything that
        isn't a plain file name gives None.
        """
        try:
            raw = self.path(output_kind).read_bytes()
        except OSError:
            return None
        first = raw.split(b"\n", 1)[0].decode("utf-8", "replace")
        return first if is_plain_filename(first) else None

    @staticmethod
    def compare(previous: LedgerRecord | None, current: Sequence[str]) -> bool:
        """
        Decide whether a group changed.

        Order matters: the same fragments in another order is a change.
        """
        if previous is None:
            return True
        if len(previous.fragment_fingerprints) != len(current):
            return True
        return any(old != new for old, new in zip(previous.fragment_fingerprints, current))

    def store(self, output_kind: FragmentKind, record: LedgerRecord) -> None:
        """Replace the record in one atomic rename."""
        path = self.path(output_kind)
        write_atomic(path, record.to_text().encode("utf-8"))
        logger.debug("wrote asset info %s", path)

    def clear_previous(self, output_kind: FragmentKind) -> None:
        """Delete the record; an absent file is fine."""
        path = self.path(output_kind)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise WriteError(path, exc.strerror or str(exc)) from exc
