"""
External compilers and compressors.

LESS, CoffeeScript, and compression are done by command line tools ("lessc",
"coffee", "yuicompressor"), which must be on PATH when they're needed. Each
one is a plain bytes -> bytes callable, so library callers and tests can swap
in their own.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from .errors import ToolError
from .models import FragmentKind

logger = logging.getLogger(__name__)

Transform = Callable[[bytes], bytes]

DEFAULT_TIMEOUT = 60.0

DEFAULT_COMMANDS: dict[FragmentKind, tuple[str, ...]] = {
    FragmentKind.LESS: ("lessc", "-"),
    FragmentKind.COFFEE: ("coffee", "-sc"),
    FragmentKind.CSS: ("yuicompressor", "--type", "css"),
    FragmentKind.JS: ("yuicompressor", "--type", "js"),
}


@dataclass(frozen=True)
class ExternalTool:
    """Run a command with stdin/stdout as the input/output bytes."""

    command: tuple[str, ...]
    timeout: float = DEFAULT_TIMEOUT

    @property
    def name(self) -> str:
        return self.command[0]

    def __call__(self, data: bytes) -> bytes:
        executable = shutil.which(self.name)
        if executable is None:
            raise ToolError(self.name, "executable not found on PATH")

        logger.debug("running %s (%d bytes in)", " ".join(self.command), len(data))
        try:
            proc = subprocess.run(
                [executable, *self.command[1:]],
                input=data,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolError(self.name, f"timed out after {self.timeout:g}s") from exc
        except OSError as exc:
            raise ToolError(self.name, exc.strerror or str(exc)) from exc

        # Warnings on stderr fail the call even when the exit status is 0.
        if proc.stderr:
            raise ToolError(self.name, "stderr: " + proc.stderr.decode("utf-8", "replace").strip())
        if proc.returncode != 0:
            raise ToolError(self.name, f"exited with status {proc.returncode}")
        return proc.stdout


@dataclass
class Toolchain:
    """
    Transforms for source languages and compressors for output kinds.

    Both are keyed by FragmentKind: transforms by LESS/COFFEE, compressors
    by CSS/JS.
    """

    transforms: dict[FragmentKind, Transform] = field(default_factory=dict)
    compressors: dict[FragmentKind, Transform] = field(default_factory=dict)

    @classmethod
    def from_commands(
        cls,
        commands: Mapping[FragmentKind, Sequence[str]] | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Toolchain:
        """Build a toolchain of ExternalTools, overriding the default commands."""
        merged = dict(DEFAULT_COMMANDS)
        if commands:
            merged.update({kind: tuple(cmd) for kind, cmd in commands.items()})

        chain = cls()
        for kind, cmd in merged.items():
            tool = ExternalTool(tuple(cmd), timeout=timeout)
            if kind.is_source_language:
                chain.transforms[kind] = tool
            else:
                chain.compressors[kind] = tool
        return chain

    def transform_for(self, kind: FragmentKind) -> Transform:
        try:
            return self.transforms[kind]
        except KeyError:
            raise ToolError(kind.value, "no compiler configured") from None

    def compressor_for(self, kind: FragmentKind) -> Transform:
        try:
            return self.compressors[kind]
        except KeyError:
            raise ToolError(kind.value, "no compressor configured") from None


def default_toolchain() -> Toolchain:
    return Toolchain.from_commands()
