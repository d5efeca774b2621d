"""Custom exception hierarchy for synonym-graph."""


class SynonymGraphError(Exception):
    """Base exception for all synonym-graph errors."""


class DictionaryParseError(SynonymGraphError):
    """Malformed dictionary line (absorbed by the parser as a skip)."""

    def __init__(self, message: str, line: str | None = None) -> None:
        self.line = line
        super().__init__(message)


class ConfigError(SynonymGraphError):
    """Rejected settings (missing or conflicting dictionary sources, bad YAML)."""


class BuildError(SynonymGraphError):
    """Transducer construction failed (e.g., keys not in sorted order)."""


class DictionaryLoadError(SynonymGraphError):
    """A dictionary or binary dump exists but cannot be read."""
