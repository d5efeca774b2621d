"""Vocabulary index: surface string <-> entry id, with anchored prefix search."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from synonym_graph.models import Entry

# Sentinel for "match any value" in attribute filters
_UNSET: Any = type("_UNSET", (), {"__repr__": lambda self: "..."})()


def _matches(entry: Entry, part_of_speech: Any, pronunciation: Any,
             semantic_tag: Any) -> bool:
    if part_of_speech is not _UNSET and entry.part_of_speech != part_of_speech:
        return False
    if pronunciation is not _UNSET and entry.pronunciation != pronunciation:
        return False
    if semantic_tag is not _UNSET and entry.semantic_tag != semantic_tag:
        return False
    return True


class Vocabulary:
    """Maps surfaces to entries and back.

    Surfaces are stored in a character trie so that the longest registered
    surface starting at a given offset can be found in one walk. Ids are dense
    and assigned in insertion order; ``id2word[i]`` is the surface of entry
    ``i``. Inserting the same surface twice creates two distinct entries.
    """

    def __init__(self) -> None:
        self._transitions: list[dict[str, int]] = [{}]
        self._terminal: list[bool] = [False]
        self._by_surface: dict[str, list[Entry]] = {}
        self._entries: list[Entry] = []
        self._id2word: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, surface: object) -> bool:
        return surface in self._by_surface

    @property
    def id2word(self) -> list[str]:
        return self._id2word

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(
        self,
        surface: str,
        *,
        pronunciation: str | None = None,
        part_of_speech: str | None = None,
        semantic_tag: str | None = None,
    ) -> int:
        """Register a new entry for ``surface`` and return its id."""
        entry = Entry(
            id=len(self._entries),
            surface=surface,
            pronunciation=pronunciation,
            part_of_speech=part_of_speech,
            semantic_tag=semantic_tag,
        )
        bucket = self._by_surface.get(surface)
        if bucket is None:
            bucket = self._by_surface[surface] = []
            self._add_to_trie(surface)
        bucket.append(entry)
        self._entries.append(entry)
        self._id2word.append(surface)
        return entry.id

    def _add_to_trie(self, surface: str) -> None:
        state = 0
        for ch in surface:
            next_state = self._transitions[state].get(ch)
            if next_state is None:
                next_state = len(self._transitions)
                self._transitions[state][ch] = next_state
                self._transitions.append({})
                self._terminal.append(False)
            state = next_state
        self._terminal[state] = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def entry(self, entry_id: int) -> Entry:
        return self._entries[entry_id]

    def entries(self, surface: str) -> list[Entry]:
        return list(self._by_surface.get(surface, ()))

    def lookup(
        self,
        surface: str,
        *,
        part_of_speech: Any = _UNSET,
        pronunciation: Any = _UNSET,
        semantic_tag: Any = _UNSET,
    ) -> list[int]:
        """Ids registered for ``surface`` whose attributes pass the filter.

        An omitted filter field matches anything; ``None`` only matches an
        entry whose field is unset.
        """
        return [
            e.id
            for e in self._by_surface.get(surface, ())
            if _matches(e, part_of_speech, pronunciation, semantic_tag)
        ]

    def default_semantic_tag(
        self,
        surface: str,
        *,
        part_of_speech: Any = _UNSET,
        pronunciation: Any = _UNSET,
    ) -> str | None:
        """Semantic tag of the first entry for ``surface`` passing the filter."""
        for e in self._by_surface.get(surface, ()):
            if _matches(e, part_of_speech, pronunciation, _UNSET):
                return e.semantic_tag
        return None

    def longest_anchored_match(
        self, text: str, start: int = 0, end: int | None = None
    ) -> str:
        """Longest registered surface starting exactly at ``text[start]``.

        The match must lie within ``text[start:end]``. Returns ``""`` when no
        surface begins at ``start``.
        """
        if end is None or end > len(text):
            end = len(text)
        state = 0
        longest = start
        for i in range(start, end):
            nxt = self._transitions[state].get(text[i])
            if nxt is None:
                break
            state = nxt
            if self._terminal[state]:
                longest = i + 1
        return text[start:longest]

    def sorted_keys(self) -> list[str]:
        """Distinct surfaces in code point order."""
        return sorted(self._by_surface)

    def ids_to_words(self, ids: Iterable[int]) -> list[str]:
        return [self._id2word[i] for i in ids]

    # ------------------------------------------------------------------
    # Copy / snapshot
    # ------------------------------------------------------------------

    def copy(self) -> Vocabulary:
        """Independent copy; ids stay identical."""
        return Vocabulary.from_records(self.to_records())

    def to_records(self) -> list[list[str | None]]:
        """Entries in id order as ``[surface, pronunciation, pos, tag]``."""
        return [
            [e.surface, e.pronunciation, e.part_of_speech, e.semantic_tag]
            for e in self._entries
        ]

    @classmethod
    def from_records(cls, records: Iterable[list[str | None]]) -> Vocabulary:
        vocab = cls()
        for surface, pronunciation, pos, tag in records:
            if surface is None:
                raise ValueError("entry record without a surface")
            vocab.insert(
                surface,
                pronunciation=pronunciation,
                part_of_speech=pos,
                semantic_tag=tag,
            )
        return vocab
