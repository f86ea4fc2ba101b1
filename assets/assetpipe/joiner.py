"""
Join adjacent LESS or CoffeeScript fragments before compiling them.

Only consecutive runs are joined, so the declared order stays intact. For
"a.coffee", "b.js", "c.coffee", "d.coffee" only the last two become one
fragment.
"""

from __future__ import annotations

from typing import Sequence

from .models import Fragment


def join_adjacent(fragments: Sequence[Fragment]) -> list[Fragment]:
    """
    Merge each run of two or more same-kind source-language fragments.

    Runs are maximal from the left and never reopened once closed.

    Args:
        fragments: Fragments in declaration order (not modified)

    Returns:
        New list with every run replaced by one merged fragment
    """
    joined: list[Fragment] = []
    i = 0
    n = len(fragments)
    while i < n:
        first = fragments[i]
        end = i + 1
        if first.kind.is_source_language:
            while end < n and fragments[end].kind == first.kind:
                end += 1

        if end - i < 2:
            joined.append(first)
        else:
            run = fragments[i:end]
            joined.append(
                Fragment(
                    content=b"".join(f.content for f in run),
                    kind=first.kind,
                    sources=tuple(p for f in run for p in f.sources),
                )
            )
        i = end
    return joined
