"""Dictionary lint: reports the lines the loader would skip or ignore."""

from __future__ import annotations

from collections.abc import Iterable

from synonym_graph.exceptions import DictionaryParseError
from synonym_graph.models import LoadType, ValidationResult, ValidationSeverity
from synonym_graph.parser import direction_marker, split_line

_ERROR = ValidationSeverity.ERROR.value
_WARNING = ValidationSeverity.WARNING.value


def validate_dictionary(
    lines: Iterable[str],
    *,
    restrict_mode: bool = False,
) -> list[ValidationResult]:
    """Run all dictionary rules; nothing is loaded or mutated."""
    results: list[ValidationResult] = []
    for lineno, line in enumerate(lines, start=1):
        result = _check_line(lineno, line, restrict_mode)
        if result is not None:
            results.append(result)
    return results


def _finding(
    rule_id: str, severity: str, lineno: int, message: str, line: str
) -> ValidationResult:
    return ValidationResult(
        rule_id=rule_id,
        severity=severity,
        entity_type="line",
        entity_id=str(lineno),
        message=message,
        details={"line": line},
    )


def _check_line(lineno: int, line: str, restrict_mode: bool) -> ValidationResult | None:
    try:
        raw = split_line(line)
    except DictionaryParseError as e:
        # DICT-002 / DICT-003
        if direction_marker(line) is not None:
            return _finding("DICT-002", _ERROR, lineno, str(e), line)
        return _finding("DICT-003", _WARNING, lineno, str(e), line)

    if raw.load_type is LoadType.SKIP:
        return None

    # DICT-001
    if raw.load_type is LoadType.DIRECTED:
        if restrict_mode:
            return _finding(
                "DICT-001", _WARNING, lineno,
                "Directed rule ignored in restrict mode", line,
            )
        return None

    # DICT-004
    if not raw.related_words:
        return _finding(
            "DICT-004", _WARNING, lineno,
            f"Line has a single word ({raw.base_words[0]!r}); no relation is created",
            line,
        )
    return None
