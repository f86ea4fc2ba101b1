"""Data models for asset groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class FragmentKind(str, Enum):
    CSS = "css"  # plain or compiled stylesheet
    JS = "js"  # plain or compiled script
    LESS = "less"  # stylesheet source language, compiled to CSS
    COFFEE = "coffee"  # script source language, compiled to JS

    @property
    def is_source_language(self) -> bool:
        return self in _COMPILES_TO

    @property
    def output_kind(self) -> FragmentKind:
        """Kind this fragment has once compiled (itself for CSS and JS)."""
        return _COMPILES_TO.get(self, self)

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_extension(cls, ext: str) -> FragmentKind | None:
        """Map a file extension (".less", "LESS", ...) to a kind, or None."""
        value = ext.lower().lstrip(".")
        for kind in cls:
            if kind.value == value:
                return kind
        return None


_COMPILES_TO: dict[FragmentKind, FragmentKind] = {
    FragmentKind.LESS: FragmentKind.CSS,
    FragmentKind.COFFEE: FragmentKind.JS,
}


@dataclass(frozen=True)
class Fragment:
    """One unit of source content, tagged with its kind."""

    content: bytes
    kind: FragmentKind
    sources: tuple[Path, ...] = field(default=(), compare=False)

    @property
    def label(self) -> str:
        """Readable origin for log and error messages."""
        if not self.sources:
            return f"<{self.kind.value}>"
        return "+".join(str(p) for p in self.sources)


@dataclass(frozen=True)
class GroupIdentity:
    """Where a group's artifact and asset-info file live."""

    directory: Path
    name: str = ""

    def artifact_filename(self, digest: str, kind: FragmentKind) -> str:
        """Content-addressed artifact name: [name-]<digest>.<ext>."""
        prefix = f"{self.name}-" if self.name else ""
        return f"{prefix}{digest}{kind.extension}"

    def ledger_filename(self, kind: FragmentKind) -> str:
        if self.name:
            return f"asset-info-{self.name}-{kind.value}"
        return f"asset-info-{kind.value}"


@dataclass(frozen=True)
class LedgerRecord:
    """What the last successful build of a group produced."""

    last_output_filename: str
    fragment_fingerprints: tuple[str, ...]

    def to_text(self) -> str:
        return "\n".join([self.last_output_filename, *self.fragment_fingerprints])


class GroupStatus(str, Enum):
    UP_TO_DATE = "up-to-date"
    STALE = "stale"  # inputs differ from the asset-info record
    NEW = "new"  # never built (no usable asset-info record)
    MISSING = "missing"  # record matches but the artifact file is gone


@dataclass
class CheckResult:
    """Outcome of a read-only AssetGroup.check() call."""

    status: GroupStatus
    output_kind: FragmentKind
    fragment_count: int
    filename: str | None = None  # artifact the record points at, if any

    @property
    def ok(self) -> bool:
        return self.status == GroupStatus.UP_TO_DATE


@dataclass
class BuildResult:
    """Outcome of one AssetGroup.build() call."""

    filename: str
    changed: bool
    output_kind: FragmentKind
    fragment_count: int
    removed: str | None = None  # stale artifact deleted by this build

    @property
    def status(self) -> str:
        return "written" if self.changed else "unchanged"
