"""Domain model dataclasses and enums for synonym-graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Joins the sub-words of a multi-word phrase into one vocabulary key.
WORD_SEPARATOR = "\x01"

# Token types written by the matchers.
TYPE_WORD = "word"
TYPE_SYNONYM = "SYNONYM"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class LoadType(str, Enum):
    """How one dictionary line updates the relation graph."""

    SKIP = "skip"
    ADD = "add"
    MERGE = "merge"
    CANCEL = "cancel"
    DIRECTED = "directed"


class ValidationSeverity(str, Enum):
    """Severity level for validation results."""

    ERROR = "ERROR"
    WARNING = "WARNING"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Entry:
    """A vocabulary entry: one surface string plus its attribute tuple."""

    id: int
    surface: str
    pronunciation: str | None = None
    part_of_speech: str | None = None
    semantic_tag: str | None = None


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """The graph update a single dictionary line decodes to."""

    load_type: LoadType
    semantic_tag: str | None = None
    base: tuple[int, ...] = ()
    related: tuple[int, ...] = ()


SKIP_LINE = ParsedLine(LoadType.SKIP)


@dataclass(frozen=True, slots=True)
class Token:
    """One record of a token stream."""

    term: str
    start_offset: int
    end_offset: int
    position_increment: int = 1
    position_length: int = 1
    type: str = TYPE_WORD


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """A single validation finding (error or warning)."""

    rule_id: str
    severity: str
    entity_type: str
    entity_id: str
    message: str
    details: dict[str, Any] | None
