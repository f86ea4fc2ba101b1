"""Content fingerprints used for change detection and artifact names."""

from __future__ import annotations

import hashlib
import re

FINGERPRINT_LENGTH = 32

_FINGERPRINT_RE = re.compile(r"^[0-9a-f]{32}$")


def fingerprint(data: bytes) -> str:
    """
    Compute the fingerprint of a byte sequence.

    Args:
        data: Raw bytes (the fragment or artifact content)

    Returns:
        Hex-encoded MD5 digest (32 lowercase characters)
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"fingerprint() needs bytes, got {type(data).__name__}")
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def is_fingerprint(value: str) -> bool:
    """Check that a string looks like a fingerprint()."""
    return bool(_FINGERPRINT_RE.match(value))
