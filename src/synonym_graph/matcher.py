"""Token-graph matcher: rewrites a token stream with synonym branches.

Matching produces an edit script of :class:`Keep` and :class:`Replace`
steps. A lowering function then turns each step into output tokens, either
as a token graph (:func:`lower_graph`) or as a linear stream where every
token has position length 1 (:func:`lower_flat`).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Union

from synonym_graph.models import TYPE_SYNONYM, WORD_SEPARATOR, Token
from synonym_graph.synonym_map import SynonymMap


# ---------------------------------------------------------------------------
# Edit script
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Keep:
    """Pass one input token through unchanged."""

    token: Token


@dataclass(frozen=True, slots=True)
class Replace:
    """Overlay the span ``originals`` with alternative word sequences."""

    originals: tuple[Token, ...]
    branches: tuple[tuple[str, ...], ...]

    @property
    def start_offset(self) -> int:
        return self.originals[0].start_offset

    @property
    def end_offset(self) -> int:
        return self.originals[-1].end_offset


EditStep = Union[Keep, Replace]


def _branches_for(
    synonym_map: SynonymMap, keys: list[str]
) -> tuple[tuple[str, ...], ...]:
    branches = [
        tuple(w.split(WORD_SEPARATOR))
        for key in keys
        for w in synonym_map.related_words(key)
        if w != key
    ]
    return tuple(dict.fromkeys(branches))


def _longest_match(
    buffer: deque[Token],
    synonym_map: SynonymMap,
    ignore_case: bool,
) -> tuple[int, tuple[tuple[str, ...], ...]] | None:
    vocab = synonym_map.match_vocabulary(ignore_case)
    terms = [t.term.lower() if ignore_case else t.term for t in buffer]
    joined = WORD_SEPARATOR.join(terms)

    ends = []
    pos = -1
    for term in terms:
        pos += len(term) + 1
        ends.append(pos)

    longest = vocab.longest_anchored_match(joined, 0, len(joined))
    # only keys ending on a token boundary count; shrink until one has synonyms
    for n in range(len(terms), 0, -1):
        boundary = ends[n - 1]
        if boundary > len(longest):
            continue
        candidate = joined[:boundary]
        if candidate not in vocab:
            continue
        keys = synonym_map.dictionary_keys(candidate, ignore_case)
        branches = _branches_for(synonym_map, keys)
        if branches:
            return n, branches
    return None


def edit_script(
    tokens: Iterable[Token],
    synonym_map: SynonymMap,
    *,
    ignore_case: bool = False,
) -> Iterator[EditStep]:
    """Walk ``tokens`` and yield one step per consumed span.

    At most ``max_horizontal_context`` tokens are buffered ahead of the
    current anchor.
    """
    window = max(1, synonym_map.max_horizontal_context)
    source = iter(tokens)
    buffer: deque[Token] = deque()
    exhausted = False

    while True:
        while not exhausted and len(buffer) < window:
            token = next(source, None)
            if token is None:
                exhausted = True
            else:
                buffer.append(token)
        if not buffer:
            return

        match = _longest_match(buffer, synonym_map, ignore_case)
        if match is None:
            yield Keep(buffer.popleft())
            continue

        span, branches = match
        originals = tuple(buffer.popleft() for _ in range(span))
        yield Replace(originals, branches)


# ---------------------------------------------------------------------------
# Lowering
# ---------------------------------------------------------------------------

def _lower_columns(step: Replace, graph: bool) -> list[Token]:
    originals = step.originals
    k = len(originals)
    width = max(k, max(len(b) for b in step.branches))

    out = []
    for i in range(width):
        # (term, start, end, position_length, type) for every token at slot i
        column = []
        if i < k:
            o = originals[i]
            column.append((o.term, o.start_offset, o.end_offset, k - i, o.type))
        under = originals[min(i, k - 1)]
        for branch in step.branches:
            if i >= len(branch):
                continue
            if len(branch) == 1:
                column.append(
                    (branch[0], step.start_offset, step.end_offset, k, TYPE_SYNONYM)
                )
            elif graph:
                column.append((
                    branch[i], step.start_offset, step.end_offset,
                    len(branch) - i, TYPE_SYNONYM,
                ))
            else:
                column.append(
                    (branch[i], under.start_offset, under.end_offset, 1, TYPE_SYNONYM)
                )

        for j, (term, start, end, length, type_) in enumerate(column):
            if j > 0:
                increment = 0
            elif i == 0:
                increment = originals[0].position_increment
            else:
                increment = 1
            if not graph:
                length = 1
            out.append(Token(term, start, end, increment, length, type_))
    return out


def lower_graph(step: EditStep) -> list[Token]:
    """Emit a step as a token graph.

    Slot ``i`` of the span holds sub-word ``i`` of every alternative, the
    original tokens first. Each sub-word (and each original token) has a
    position length equal to the number of its branch's sub-words not yet
    emitted, itself included; single-word synonyms cover the ``k`` slots of
    the matched span. Synonyms carry the offsets of the whole span.
    """
    if isinstance(step, Keep):
        return [step.token]
    return _lower_columns(step, graph=True)


def lower_flat(step: EditStep) -> list[Token]:
    """Emit a step as a linear stream: the same slots, every length 1.

    Multi-word sub-words take the offsets of the original token in their slot
    (the last one once the alternative outgrows the span).
    """
    if isinstance(step, Keep):
        return [step.token]
    return _lower_columns(step, graph=False)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

class _MatchingFilter:
    _lower: Callable[[EditStep], list[Token]]

    def __init__(
        self,
        tokens: Iterable[Token],
        synonym_map: SynonymMap,
        *,
        ignore_case: bool = False,
    ) -> None:
        if synonym_map.transducer is None:
            raise ValueError("synonym map has no transducer; pass tokens through instead")
        self.tokens = tokens
        self.synonym_map = synonym_map
        self.ignore_case = ignore_case

    def steps(self) -> Iterator[EditStep]:
        return edit_script(self.tokens, self.synonym_map, ignore_case=self.ignore_case)

    def __iter__(self) -> Iterator[Token]:
        lower = type(self)._lower
        for step in self.steps():
            yield from lower(step)


class SynonymGraphFilter(_MatchingFilter):
    """Graph-aware filter: multi-word synonyms become parallel paths."""

    _lower = staticmethod(lower_graph)


class SynonymFilter(_MatchingFilter):
    """Flat filter for consumers that cannot read position lengths."""

    _lower = staticmethod(lower_flat)


def with_positions(tokens: Iterable[Token]) -> list[tuple[Token, int]]:
    """Pair each token with its absolute position (first token at 0)."""
    out = []
    position = -1
    for token in tokens:
        position += token.position_increment
        out.append((token, position))
    return out
