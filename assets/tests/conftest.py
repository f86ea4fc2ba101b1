"""Pytest configuration and fixtures."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

import pytest

from assetpipe.models import FragmentKind
from assetpipe.tools import Toolchain


class RecordingTool:
    """Fake compiler/compressor that remembers every input it was given."""

    def __init__(self, name: str, func: Callable[[bytes], bytes]):
        self.name = name
        self.func = func
        self.calls: list[bytes] = []

    def __call__(self, data: bytes) -> bytes:
        self.calls.append(data)
        return self.func(data)


def fake_lessc(data: bytes) -> bytes:
    """Resolve `@name: value;` variables and drop them, like a tiny lessc."""
    variables = dict(re.findall(rb"@([\w-]+):\s*([^;]+);", data))
    body = re.sub(rb"@[\w-]+:\s*[^;]+;\s*", b"", data)
    return re.sub(rb"@([\w-]+)", lambda m: variables.get(m.group(1), m.group(0)), body)


def fake_coffee(data: bytes) -> bytes:
    return b"(function(){" + data.strip() + b"})();"


def fake_minify(data: bytes) -> bytes:
    return re.sub(rb"\s+", b"", data).replace(b";}", b"}")


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "static"


@pytest.fixture
def write_source(src_dir: Path) -> Callable[[str, str | bytes], Path]:
    """Write a source file under src_dir and return its path."""

    def _write(name: str, content: str | bytes) -> Path:
        path = src_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def tools() -> dict[FragmentKind, RecordingTool]:
    return {
        FragmentKind.LESS: RecordingTool("lessc", fake_lessc),
        FragmentKind.COFFEE: RecordingTool("coffee", fake_coffee),
        FragmentKind.CSS: RecordingTool("yuicompressor", fake_minify),
        FragmentKind.JS: RecordingTool("yuicompressor", fake_minify),
    }


@pytest.fixture
def toolchain(tools: dict[FragmentKind, RecordingTool]) -> Toolchain:
    return Toolchain(
        transforms={FragmentKind.LESS: tools[FragmentKind.LESS], FragmentKind.COFFEE: tools[FragmentKind.COFFEE]},
        compressors={FragmentKind.CSS: tools[FragmentKind.CSS], FragmentKind.JS: tools[FragmentKind.JS]},
    )
