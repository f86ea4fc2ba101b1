"""
Asset groups: many source files in, one content-addressed file out.

    name = create_group("style/*.css", "style/*.less").build("static", "app")

The build reads every source, joins adjacent LESS/CoffeeScript files,
fingerprints the result and compares it with the group's asset-info file.
If nothing changed, the recorded filename is returned and nothing on disk is
touched. Otherwise the sources are compiled, checked for a single output
kind, concatenated, compressed, and written as

    static/app-<md5 of output>.css

The new artifact is written before the stale one is deleted, and the
asset-info file is replaced last, so an interrupted build never leaves a
record pointing at a file that wasn't written.

Builds of the same group must not run concurrently; separate groups are
independent.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .errors import (
    CompressError,
    MixedKindError,
    NoInputError,
    ToolError,
    TransformError,
    WriteError,
)
from .fingerprint import fingerprint
from .fragments import load_fragments
from .joiner import join_adjacent
from .ledger import GenerationLedger, write_atomic
from .models import (
    BuildResult,
    CheckResult,
    Fragment,
    FragmentKind,
    GroupIdentity,
    GroupStatus,
    LedgerRecord,
)
from .resolver import expand_all
from .tools import Toolchain, Transform, default_toolchain

logger = logging.getLogger(__name__)


@dataclass
class _Prepared:
    """Pipeline state up to the changed/unchanged decision."""

    identity: GroupIdentity
    ledger: GenerationLedger
    output_kind: FragmentKind
    fragments: list[Fragment]
    fingerprints: list[str]
    previous: LedgerRecord | None
    changed: bool


def _tool_name(tool: Transform, fallback: str) -> str:
    return str(getattr(tool, "name", fallback))


def _run_tool(tool: Transform, data: bytes, error_cls: type[ToolError], fallback: str) -> bytes:
    """Call a transform or compressor, wrapping whatever it raises in error_cls."""
    try:
        return tool(data)
    except error_cls:
        raise
    except ToolError as exc:
        raise error_cls(exc.tool, exc.detail) from exc
    except Exception as exc:
        raise error_cls(_tool_name(tool, fallback), f"{type(exc).__name__}: {exc}") from exc


class AssetGroup:
    """
    An ordered list of source patterns that build into one .css or .js file.

    Mixing CSS and JS sources in one group is an error. Groups are lazy:
    nothing is read until build() or check().
    """

    def __init__(
        self,
        patterns: Sequence[str | Path] = (),
        *,
        toolchain: Toolchain | None = None,
        root: Path | None = None,
    ):
        self.patterns: list[str | Path] = list(patterns)
        self.toolchain = toolchain if toolchain is not None else default_toolchain()
        self.root = root
        self.compress = True
        self.join = True

    def add_sources(self, *patterns: str | Path) -> None:
        """Append source patterns; they go after everything added so far."""
        self.patterns.extend(patterns)

    def set_compress(self, enabled: bool) -> None:
        """Turn output compression on or off (on by default)."""
        self.compress = enabled

    def set_join(self, enabled: bool) -> None:
        """
        Turn joining of adjacent LESS/CoffeeScript sources on or off.

        With joining on (the default), consecutive .less (or .coffee) files
        are compiled as one unit, so they can share variables and mixins.
        Non-adjacent files are never joined: for "a.coffee", "b.js",
        "c.coffee", "d.coffee" only the last two are.
        """
        self.join = enabled

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _prepare(self, directory: Path | str, name: str) -> _Prepared:
        identity = GroupIdentity(Path(directory), name)

        paths = expand_all(self.patterns, root=self.root)
        if not paths:
            raise NoInputError()

        fragments = load_fragments(paths)
        output_kind = fragments[0].kind.output_kind

        if self.join:
            fragments = join_adjacent(fragments)
        fingerprints = [fingerprint(f.content) for f in fragments]

        ledger = GenerationLedger(identity)
        previous, _found = ledger.load(output_kind)
        changed = ledger.compare(previous, fingerprints)
        logger.debug(
            "group %r: %d sources, %d fragments, kind=%s, changed=%s",
            name,
            len(paths),
            len(fragments),
            output_kind.value,
            changed,
        )
        return _Prepared(
            identity=identity,
            ledger=ledger,
            output_kind=output_kind,
            fragments=fragments,
            fingerprints=fingerprints,
            previous=previous,
            changed=changed,
        )

    def _compile(self, fragments: list[Fragment]) -> list[Fragment]:
        compiled: list[Fragment] = []
        for fragment in fragments:
            if not fragment.kind.is_source_language:
                compiled.append(fragment)
                continue
            try:
                tool = self.toolchain.transform_for(fragment.kind)
            except ToolError as exc:
                raise TransformError(exc.tool, exc.detail) from exc
            logger.debug("compiling %s with %s", fragment.label, _tool_name(tool, fragment.kind.value))
            content = _run_tool(tool, fragment.content, TransformError, fragment.kind.value)
            compiled.append(
                Fragment(content=content, kind=fragment.kind.output_kind, sources=fragment.sources)
            )
        return compiled

    def _compress(self, data: bytes, kind: FragmentKind) -> bytes:
        try:
            tool = self.toolchain.compressor_for(kind)
        except ToolError as exc:
            raise CompressError(exc.tool, exc.detail) from exc
        return _run_tool(tool, data, CompressError, kind.value)

    def check(self, directory: Path | str, name: str = "") -> CheckResult:
        """Compare the sources against the asset-info record without writing anything."""
        prep = self._prepare(directory, name)
        previous = prep.previous
        if previous is None:
            status = GroupStatus.NEW
        elif prep.changed:
            status = GroupStatus.STALE
        elif not (prep.identity.directory / previous.last_output_filename).is_file():
            status = GroupStatus.MISSING
        else:
            status = GroupStatus.UP_TO_DATE
        return CheckResult(
            status=status,
            output_kind=prep.output_kind,
            fragment_count=len(prep.fragments),
            filename=previous.last_output_filename if previous else None,
        )

    def run(self, directory: Path | str, name: str = "") -> BuildResult:
        """Build the group and report what happened; see build()."""
        prep = self._prepare(directory, name)
        previous = prep.previous

        if not prep.changed and previous is not None:
            logger.info("group %r unchanged: %s", name, previous.last_output_filename)
            return BuildResult(
                filename=previous.last_output_filename,
                changed=False,
                output_kind=prep.output_kind,
                fragment_count=len(prep.fragments),
            )

        compiled = self._compile(prep.fragments)
        for fragment in compiled:
            if fragment.kind != prep.output_kind:
                raise MixedKindError(prep.output_kind.value, f"{fragment.kind.value} ({fragment.label})")

        data = b"".join(f.content for f in compiled)
        if self.compress:
            data = self._compress(data, prep.output_kind)

        filename = prep.identity.artifact_filename(fingerprint(data), prep.output_kind)
        directory = prep.identity.directory
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(directory, exc.strerror or str(exc)) from exc
        write_atomic(directory / filename, data)

        removed = None
        if previous is not None and previous.last_output_filename != filename:
            removed = self._remove_stale(directory / previous.last_output_filename)

        prep.ledger.store(prep.output_kind, LedgerRecord(filename, tuple(prep.fingerprints)))
        logger.info("group %r written: %s (%d bytes)", name, filename, len(data))
        return BuildResult(
            filename=filename,
            changed=True,
            output_kind=prep.output_kind,
            fragment_count=len(prep.fragments),
            removed=removed,
        )

    def build(self, directory: Path | str, name: str = "") -> str:
        """
        Produce the group's artifact in directory and return its filename.

        The filename is "[name-]<md5>.<css|js>". Calling build() again with
        unchanged sources returns the same name without writing anything.

        Raises:
            AssetError: any failure; see assetpipe.errors
        """
        return self.run(directory, name).filename

    def clean(self, directory: Path | str, name: str = "") -> list[str]:
        """
        Delete the group's artifacts and asset-info files, for both kinds.

        Sources are not read, so this works after they are gone, and a
        damaged asset-info file is removed rather than parsed.

        Returns:
            Names of the files that were removed
        """
        identity = GroupIdentity(Path(directory), name)
        ledger = GenerationLedger(identity)
        removed: list[str] = []
        for kind in (FragmentKind.CSS, FragmentKind.JS):
            ledger_path = ledger.path(kind)
            if not ledger_path.exists():
                continue
            filename = ledger.recorded_filename(kind)
            if filename is not None:
                stale = self._remove_stale(identity.directory / filename)
                if stale:
                    removed.append(stale)
            ledger.clear_previous(kind)
            removed.append(ledger_path.name)
        return removed

    @staticmethod
    def _remove_stale(path: Path) -> str | None:
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("stale artifact %s already gone", path)
            return None
        except OSError as exc:
            raise WriteError(path, exc.strerror or str(exc)) from exc
        logger.debug("removed stale artifact %s", path)
        return path.name


def create_group(
    *patterns: str | Path,
    toolchain: Toolchain | None = None,
    root: Path | None = None,
) -> AssetGroup:
    """
    Make an asset group from source patterns.

    Nothing is read until the group is built.

    Args:
        patterns: Glob patterns or paths, in output order
        toolchain: Compilers/compressors (default: lessc, coffee, yuicompressor)
        root: Directory relative patterns are resolved against (default: cwd)
    """
    return AssetGroup(patterns, toolchain=toolchain, root=root)
