"""
Exception hierarchy for asset builds.

Every failure aborts the current build and propagates to the caller.
Nothing here is retried internally.
"""

from __future__ import annotations

from pathlib import Path


class AssetError(Exception):
    """Base class for all asset build failures."""


class NoInputError(AssetError):
    """The group resolved to zero source files."""

    def __init__(self, message: str = "no input file given"):
        super().__init__(message)


class PatternError(AssetError):
    """A source pattern could not be expanded."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"bad source pattern {pattern!r}: {reason}")


class ReadError(AssetError):
    """A source file could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"can't read {path}: {reason}")


class UnsupportedKindError(AssetError):
    """A source file has an extension no fragment kind maps to."""

    def __init__(self, path: Path | str, extension: str):
        self.path = path
        self.extension = extension
        super().__init__(f"unsupported extension {extension!r} ({path})")


class MixedKindError(AssetError):
    """CSS and JS fragments ended up in one group."""

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"can't mix CSS and JS in one asset (expected {expected}, found {found})")


class ToolError(AssetError):
    """An external tool failed, timed out, or wrote diagnostics to stderr."""

    def __init__(self, tool: str, detail: str):
        self.tool = tool
        self.detail = detail
        super().__init__(f"{tool}: {detail}")


class TransformError(ToolError):
    """A source-language compiler (LESS, CoffeeScript) failed."""


class CompressError(ToolError):
    """The output compressor failed."""


class LedgerError(AssetError):
    """The asset-info file exists but can't be read or is malformed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"bad asset info {path}: {reason}")


class WriteError(AssetError):
    """The output directory, artifact, or asset-info file couldn't be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"can't write {path}: {reason}")


class ConfigError(AssetError):
    """The asset manifest is invalid."""
