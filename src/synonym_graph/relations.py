"""Relation graph over entry ids and the dictionary line-update semantics."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import permutations
from typing import Any

from synonym_graph.models import LoadType, ParsedLine


class RelationGraph:
    """Directed adjacency rows, most recently added target first.

    Each source id also remembers the semantic tag of the last line that
    added an edge from it; MERGE lines only extend sources whose tag matches.
    """

    def __init__(self) -> None:
        self._rows: list[list[int]] = []
        self._tags: dict[int, str | None] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def add(self, a: int, b: int, tag: str | None = None) -> None:
        while len(self._rows) <= a:
            self._rows.append([])
        self._tags[a] = tag
        row = self._rows[a]
        if b in row:
            row.remove(b)
        row.insert(0, b)

    def delete(self, a: int, b: int) -> bool:
        if a < 0 or a >= len(self._rows):
            return False
        row = self._rows[a]
        if b not in row:
            return False
        row.remove(b)
        return True

    def relations(self, a: int) -> list[int]:
        if a < 0 or a >= len(self._rows):
            return []
        return list(self._rows[a])

    def tag_of(self, a: int) -> str | None:
        return self._tags.get(a)

    def clone(self) -> RelationGraph:
        graph = RelationGraph()
        graph._rows = [list(row) for row in self._rows]
        graph._tags = dict(self._tags)
        return graph

    def clear(self) -> None:
        self._rows.clear()
        self._tags.clear()

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "rows": [list(row) for row in self._rows],
            "tags": [[k, v] for k, v in sorted(self._tags.items())],
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> RelationGraph:
        graph = cls()
        graph._rows = [[int(i) for i in row] for row in data.get("rows", [])]
        graph._tags = {int(k): v for k, v in data.get("tags", [])}
        return graph


# ---------------------------------------------------------------------------
# Line-update semantics
# ---------------------------------------------------------------------------

def add_group(graph: RelationGraph, ids: Sequence[int],
              tag: str | None = None) -> None:
    """Make every member of ``ids`` a synonym of every other member."""
    # ids may repeat when one word appears twice on a line
    for x, y in permutations(ids, 2):
        if x != y:
            graph.add(x, y, tag)


def merge_group(graph: RelationGraph, base: Sequence[int],
                related: Sequence[int], tag: str | None = None) -> None:
    """Fold ``related`` into the existing relation sets of ``base``."""
    for a in base:
        if graph.tag_of(a) != tag:
            continue
        for p in graph.relations(a):
            for r in related:
                if r == p:
                    continue
                graph.add(r, p, tag)
                graph.add(p, r, tag)
    add_group(graph, [*base, *related], tag)


def cancel_group(graph: RelationGraph, ids: Sequence[int]) -> None:
    """Remove the pairwise links among ``ids``; other edges are untouched."""
    for x, y in permutations(ids, 2):
        if x != y:
            graph.delete(x, y)


def add_directed(graph: RelationGraph, base: Sequence[int],
                 related: Sequence[int], tag: str | None = None) -> None:
    """One-way links from ``base`` to ``related``.

    Reverse edges are revoked, and so are the mutual links among the
    ``related`` side.
    """
    for a in base:
        for b in related:
            if a == b:
                continue
            graph.add(a, b, tag)
            graph.delete(b, a)
    cancel_group(graph, related)


def apply_line(graph: RelationGraph, parsed: ParsedLine) -> None:
    """Apply one decoded dictionary line to ``graph``."""
    lt = parsed.load_type
    if lt is LoadType.ADD:
        add_group(graph, [*parsed.base, *parsed.related], parsed.semantic_tag)
    elif lt is LoadType.MERGE:
        merge_group(graph, parsed.base, parsed.related, parsed.semantic_tag)
    elif lt is LoadType.CANCEL:
        cancel_group(graph, [*parsed.base, *parsed.related])
    elif lt is LoadType.DIRECTED:
        add_directed(graph, parsed.base, parsed.related, parsed.semantic_tag)
