"""SynonymDictionary: one vocabulary + relation graph loaded from dictionary files."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from synonym_graph.exceptions import DictionaryLoadError
from synonym_graph.models import WORD_SEPARATOR, LoadType, ParsedLine
from synonym_graph.parser import parse_line, phrase_key
from synonym_graph.relations import RelationGraph, apply_line as _apply
from synonym_graph.tokenizer import Tokenizer, WhitespaceTokenizer
from synonym_graph.vocabulary import Vocabulary

logger = logging.getLogger(__name__)


class SynonymDictionary:
    """A loading session: owns one Vocabulary and one RelationGraph.

    Loads are serialized on an internal lock so several threads may feed
    dictionaries into the same instance. Derive per-user dictionaries with
    :meth:`clone` rather than sharing one instance between sessions.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        *,
        restrict_mode: bool = False,
    ) -> None:
        self.tokenizer: Tokenizer = (
            tokenizer if tokenizer is not None else WhitespaceTokenizer()
        )
        self.restrict_mode = restrict_mode
        self._vocabulary = Vocabulary()
        self._graph = RelationGraph()
        self._lock = threading.Lock()

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    @property
    def graph(self) -> RelationGraph:
        return self._graph

    def __len__(self) -> int:
        return len(self._vocabulary)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_dictionary(self, path: str | Path, *, required: bool = True) -> int:
        """Load a UTF-8 dictionary file and return the number of lines applied.

        Lines are streamed from the file; lines applied before a decode
        failure stay applied.

        Raises:
            FileNotFoundError: If ``path`` does not exist and ``required`` is set.
            DictionaryLoadError: If the file cannot be read or decoded.
        """
        path = Path(path)
        if not path.exists():
            if required:
                raise FileNotFoundError(f"File not found: {path}")
            logger.warning("Dictionary %s not found, skipping", path)
            return 0

        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                applied = self.load_lines(
                    (line.rstrip("\r\n") for line in f), source=str(path)
                )
        except (OSError, UnicodeDecodeError) as e:
            raise DictionaryLoadError(f"Failed to read {path}: {e}") from e

        logger.info("Loaded dictionary %s (%d lines applied)", path, applied)
        return applied

    def load_lines(self, lines: Iterable[str], *, source: str = "<lines>") -> int:
        """Apply dictionary lines in order; returns how many were not skipped."""
        applied = 0
        with self._lock:
            for lineno, line in enumerate(lines, start=1):
                parsed = self._apply_unlocked(line)
                if parsed.load_type is LoadType.SKIP:
                    if line.strip():
                        logger.debug("%s:%d: skipped %r", source, lineno, line)
                    continue
                applied += 1
        return applied

    def apply_line(self, line: str) -> ParsedLine:
        """Parse one line and apply it to the graph."""
        with self._lock:
            return self._apply_unlocked(line)

    def _apply_unlocked(self, line: str) -> ParsedLine:
        parsed = parse_line(
            line, self._vocabulary, self.tokenizer,
            restrict_mode=self.restrict_mode,
        )
        _apply(self._graph, parsed)
        return parsed

    def load_lmf(self, path: str | Path) -> int:
        """Load every synset of a WN-LMF file as one synonym group."""
        from synonym_graph.lmf import lines_from_lmf

        applied = self.load_lines(lines_from_lmf(path), source=str(path))
        logger.info("Loaded WN-LMF %s (%d synsets applied)", path, applied)
        return applied

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def synonym_ids(
        self,
        word: str,
        pos: str | None = None,
        pronunciation: str | None = None,
        semantic_tag: str | None = None,
    ) -> list[int]:
        """Ids related to ``word``, most recently added first.

        ``pos`` and ``pronunciation`` filter the candidate entries when given.
        Without a ``semantic_tag`` the tag of the first matching entry is used.
        """
        key = phrase_key(word, self.tokenizer)
        return self._related_ids(key, pos, pronunciation, semantic_tag)

    def get(
        self,
        word: str,
        pos: str | None = None,
        pronunciation: str | None = None,
        semantic_tag: str | None = None,
    ) -> list[str]:
        """Surfaces related to ``word``; multi-word surfaces keep the separator."""
        ids = self.synonym_ids(word, pos, pronunciation, semantic_tag)
        return self._vocabulary.ids_to_words(ids)

    def synonym_ids_for_key(self, key: str) -> list[int]:
        """Relations of the first entry registered under vocabulary ``key``."""
        ids = self._vocabulary.lookup(key)
        if not ids:
            return []
        source = ids[0]
        return [i for i in self._graph.relations(source) if i != source]

    def _related_ids(
        self,
        key: str,
        pos: str | None = None,
        pronunciation: str | None = None,
        semantic_tag: str | None = None,
    ) -> list[int]:
        filters: dict[str, Any] = {}
        if pos is not None:
            filters["part_of_speech"] = pos
        if pronunciation is not None:
            filters["pronunciation"] = pronunciation
        if semantic_tag is None:
            semantic_tag = self._vocabulary.default_semantic_tag(key, **filters)
        ids = self._vocabulary.lookup(key, semantic_tag=semantic_tag, **filters)
        if not ids:
            return []
        source = ids[0]
        return [i for i in self._graph.relations(source) if i != source]

    def find(self, text: str, start: int = 0, end: int | None = None) -> list[str]:
        """Synonyms of the longest vocabulary key starting at ``text[start]``."""
        match = self._vocabulary.longest_anchored_match(text, start, end)
        if not match:
            return []
        return self._vocabulary.ids_to_words(self._related_ids(match))

    def find_in_tokens(
        self, tokens: Sequence[str], start: int = 0, end: int | None = None
    ) -> list[str]:
        """Synonyms of the longest run of ``tokens[start:end]`` that is a key."""
        if end is None or end > len(tokens):
            end = len(tokens)
        for stop in range(end, start, -1):
            key = WORD_SEPARATOR.join(tokens[start:stop])
            if key in self._vocabulary:
                return self._vocabulary.ids_to_words(self._related_ids(key))
        return []

    def words_from_id(self, entry_id: int) -> list[str]:
        if 0 <= entry_id < len(self._vocabulary):
            return [self._vocabulary.id2word[entry_id]]
        return []

    def sorted_keys(self) -> list[str]:
        return self._vocabulary.sorted_keys()

    # ------------------------------------------------------------------
    # Copy / snapshot
    # ------------------------------------------------------------------

    def clone(self) -> SynonymDictionary:
        """Deep copy sharing nothing mutable with this instance."""
        with self._lock:
            other = SynonymDictionary(self.tokenizer, restrict_mode=self.restrict_mode)
            other._vocabulary = self._vocabulary.copy()
            other._graph = self._graph.clone()
        return other

    def clear(self) -> None:
        with self._lock:
            self._vocabulary = Vocabulary()
            self._graph.clear()

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-compatible dump of entries, relations and the restrict flag."""
        with self._lock:
            return {
                "entries": self._vocabulary.to_records(),
                "relations": self._graph.to_snapshot(),
                "restrict_mode": self.restrict_mode,
            }

    @classmethod
    def from_snapshot(
        cls,
        data: dict[str, Any],
        tokenizer: Tokenizer | None = None,
    ) -> SynonymDictionary:
        dictionary = cls(tokenizer, restrict_mode=bool(data.get("restrict_mode", False)))
        dictionary._vocabulary = Vocabulary.from_records(data.get("entries", []))
        dictionary._graph = RelationGraph.from_snapshot(data.get("relations", {}))
        return dictionary
