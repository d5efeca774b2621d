"""Tokenizer capability consumed when loading dictionaries and analyzing text."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from synonym_graph.models import Token

_WHITESPACE_RUN = re.compile(r"\S+")


@runtime_checkable
class Tokenizer(Protocol):
    """Turns a raw phrase into its ordered atomic sub-words."""

    def tokenize(self, text: str) -> list[str]: ...


class WhitespaceTokenizer:
    """Splits on runs of whitespace."""

    def tokenize(self, text: str) -> list[str]:
        return _WHITESPACE_RUN.findall(text)

    def token_stream(self, text: str) -> Iterator[Token]:
        """Yield offset-carrying tokens for query text."""
        for m in _WHITESPACE_RUN.finditer(text):
            yield Token(m.group(), m.start(), m.end())


class LowercaseTokenizer:
    """Wraps another tokenizer and lower-cases what it produces."""

    def __init__(self, inner: Tokenizer | None = None) -> None:
        self.inner = inner if inner is not None else WhitespaceTokenizer()

    def tokenize(self, text: str) -> list[str]:
        return [t.lower() for t in self.inner.tokenize(text)]

    def token_stream(self, text: str) -> Iterator[Token]:
        stream = getattr(self.inner, "token_stream", None)
        if stream is None:
            raise TypeError(
                f"{type(self.inner).__name__} cannot produce a token stream"
            )
        for token in stream(text):
            yield Token(
                token.term.lower(),
                token.start_offset,
                token.end_offset,
                token.position_increment,
                token.position_length,
                token.type,
            )
