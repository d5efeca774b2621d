"""Dictionary line parser.

Line format (UTF-8, one rule per line)::

    !! comment                     skipped, as is any line starting with a digit
    a,b,c                          ADD: a, b and c are mutual synonyms
    *a,d                           MERGE: d joins the existing group of a
    !a,b                           CANCEL: drop the links among a and b
    a,b>>c,d   or   c,d<<a,b       DIRECTED: a and b list c and d, not vice versa
    a,b,(tag)                      a trailing "(...)" field tags the whole line

``=>`` and ``<=`` are accepted as aliases of ``>>`` and ``<<``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from synonym_graph.exceptions import DictionaryParseError
from synonym_graph.models import (
    SKIP_LINE,
    WORD_SEPARATOR,
    LoadType,
    ParsedLine,
)
from synonym_graph.tokenizer import Tokenizer
from synonym_graph.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "!!"
MERGE_PREFIX = "*"
CANCEL_PREFIX = "!"
DIRECTION_MARKERS = (">>", "=>", "<<", "<=")
_REVERSED_MARKERS = frozenset({"<<", "<="})


@dataclass(frozen=True, slots=True)
class RawLine:
    """A classified line whose words have not been resolved to ids yet."""

    load_type: LoadType
    semantic_tag: str | None = None
    base_words: tuple[str, ...] = ()
    related_words: tuple[str, ...] = ()


_RAW_SKIP = RawLine(LoadType.SKIP)


def _split_tag(body: str) -> tuple[str, str | None]:
    head, sep, last = body.rpartition(",")
    last = last.strip()
    if last.startswith("("):
        return head, last
    return body, None


def _words(body: str) -> list[str]:
    return [w.strip() for w in body.split(",") if w.strip()]


def direction_marker(line: str) -> str | None:
    """The first of ``DIRECTION_MARKERS`` found in ``line``, if any."""
    for marker in DIRECTION_MARKERS:
        if marker in line:
            return marker
    return None


def split_line(line: str) -> RawLine:
    """Classify ``line`` and split it into base and related words.

    Raises:
        DictionaryParseError: If the line is structurally broken.
    """
    text = line.strip()
    if not text or text.startswith(COMMENT_PREFIX) or text[0].isdecimal():
        return _RAW_SKIP

    marker = direction_marker(text)
    if marker is not None:
        body, tag = _split_tag(text)
        segments = body.split(marker)
        if marker in _REVERSED_MARKERS:
            segments.reverse()
        base = _words(segments[0])
        related = [w for seg in segments[1:] for w in _words(seg)]
        if not base or not related:
            raise DictionaryParseError(
                f"Directed rule needs words on both sides of {marker!r}", line
            )
        return RawLine(LoadType.DIRECTED, tag, tuple(base), tuple(related))

    load_type = LoadType.ADD
    if text.startswith(MERGE_PREFIX):
        load_type = LoadType.MERGE
        text = text[len(MERGE_PREFIX):]
    elif text.startswith(CANCEL_PREFIX):
        load_type = LoadType.CANCEL
        text = text[len(CANCEL_PREFIX):]

    body, tag = _split_tag(text)
    words = _words(body)
    if not words:
        raise DictionaryParseError("Line has no words", line)
    return RawLine(load_type, tag, (words[0],), tuple(words[1:]))


def phrase_key(word: str, tokenizer: Tokenizer) -> str:
    """Vocabulary key of a (possibly multi-word) phrase."""
    return WORD_SEPARATOR.join(tokenizer.tokenize(word))


def _resolve(
    word: str,
    vocabulary: Vocabulary,
    tokenizer: Tokenizer,
    tag: str | None,
) -> int | None:
    key = phrase_key(word, tokenizer)
    if not key:
        return None
    ids = vocabulary.lookup(key, semantic_tag=tag)
    if ids:
        return ids[0]
    return vocabulary.insert(key, semantic_tag=tag)


def parse_line(
    line: str,
    vocabulary: Vocabulary,
    tokenizer: Tokenizer,
    *,
    restrict_mode: bool = False,
) -> ParsedLine:
    """Decode one dictionary line into a graph update.

    Words are registered in ``vocabulary`` as a side effect. Malformed lines
    and, in restrict mode, directed lines come back as SKIP.
    """
    try:
        raw = split_line(line)
    except DictionaryParseError as e:
        logger.debug("Skipping malformed line %r: %s", line, e)
        return SKIP_LINE

    if raw.load_type is LoadType.SKIP:
        return SKIP_LINE
    if raw.load_type is LoadType.DIRECTED and restrict_mode:
        logger.debug("Restrict mode: ignoring directed line %r", line)
        return SKIP_LINE

    tag = raw.semantic_tag
    base = [_resolve(w, vocabulary, tokenizer, tag) for w in raw.base_words]
    related = [_resolve(w, vocabulary, tokenizer, tag) for w in raw.related_words]
    return ParsedLine(
        load_type=raw.load_type,
        semantic_tag=tag,
        base=tuple(i for i in base if i is not None),
        related=tuple(i for i in related if i is not None),
    )
