from __future__ import annotations

from pathlib import Path

import pytest

from assetpipe.errors import NoInputError, PatternError, ReadError, UnsupportedKindError
from assetpipe.fragments import kind_for_path, load_fragments
from assetpipe.models import FragmentKind
from assetpipe.resolver import expand, expand_all


def test_kind_for_path() -> None:
    assert kind_for_path("a.css") == FragmentKind.CSS
    assert kind_for_path("lib/b.JS") == FragmentKind.JS
    assert kind_for_path("c.less") == FragmentKind.LESS
    assert kind_for_path("d.coffee") == FragmentKind.COFFEE
    with pytest.raises(UnsupportedKindError, match="'.txt'"):
        kind_for_path("notes.txt")


def test_output_kind_mapping() -> None:
    assert FragmentKind.LESS.output_kind == FragmentKind.CSS
    assert FragmentKind.COFFEE.output_kind == FragmentKind.JS
    assert FragmentKind.CSS.output_kind == FragmentKind.CSS
    assert not FragmentKind.JS.is_source_language


def test_load_fragments_keeps_order(write_source) -> None:
    b = write_source("b.css", "b{}")
    a = write_source("a.less", "a{}")

    fragments = load_fragments([b, a])

    assert [f.content for f in fragments] == [b"b{}", b"a{}"]
    assert [f.kind for f in fragments] == [FragmentKind.CSS, FragmentKind.LESS]
    assert fragments[0].sources == (b,)


def test_load_fragments_empty() -> None:
    with pytest.raises(NoInputError):
        load_fragments([])


def test_load_fragments_read_error_names_path(src_dir: Path) -> None:
    missing = src_dir / "gone.css"
    with pytest.raises(ReadError, match="gone.css") as info:
        load_fragments([missing])
    assert info.value.path == missing


def test_expand_sorts_matches_and_keeps_pattern_order(write_source, src_dir: Path) -> None:
    write_source("b.css", "")
    write_source("a.css", "")
    write_source("z.less", "")

    paths = expand_all(["*.less", "*.css"], root=src_dir)

    assert [p.name for p in paths] == ["z.less", "a.css", "b.css"]


def test_expand_literal_path(write_source, src_dir: Path) -> None:
    write_source("app.coffee", "")
    assert expand("app.coffee", root=src_dir) == [src_dir / "app.coffee"]
    assert expand("missing.coffee", root=src_dir) == []


def test_expand_recursive(write_source, src_dir: Path) -> None:
    write_source("lib/deep/x.js", "")
    assert [p.name for p in expand("**/*.js", root=src_dir)] == ["x.js"]


def test_expand_bad_patterns() -> None:
    with pytest.raises(PatternError, match="empty"):
        expand("  ")
    with pytest.raises(PatternError, match="character class"):
        expand("style/[ab.css")


def test_expand_single_char_wildcard(write_source, src_dir: Path) -> None:
    write_source("a.css", "")
    write_source("ab.css", "")
    assert [p.name for p in expand("?.css", root=src_dir)] == ["a.css"]
