"""Filter settings loaded from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from synonym_graph.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_DICT_ID = "dummy_system_dict"


@dataclass(frozen=True, slots=True)
class FilterSettings:
    """Options shared by both filter factories.

    Relative dictionary paths resolve against ``config_dir``.
    """

    ignore_case: bool = False
    restrict_mode: bool = False
    dict_list: tuple[str, ...] = ()
    dict_bin_path: str | None = None
    enable_cache: bool = False
    system_dict: str | None = None
    system_dict_id: str = DEFAULT_SYSTEM_DICT_ID
    user_dict_list: tuple[str, ...] = ()
    config_dir: Path = field(default_factory=lambda: Path("."))

    def resolve(self, path: str | Path) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path
        return self.config_dir / path


_BOOL_KEYS = frozenset({"ignore_case", "restrict_mode", "enable_cache"})
_LIST_KEYS = frozenset({"dict_list", "user_dict_list"})
_OPTIONAL_STR_KEYS = frozenset({"dict_bin_path", "system_dict"})
_KNOWN_KEYS = frozenset(f.name for f in fields(FilterSettings))


def load_settings(source: str | Path | dict[str, Any]) -> FilterSettings:
    """Load settings from a YAML file, a YAML string, or a parsed mapping.

    When loaded from a file, ``config_dir`` defaults to the file's directory.

    Raises:
        ConfigError: If the YAML is malformed or a key is unknown or mistyped.
        FileNotFoundError: If a path is given and the file does not exist.
    """
    source_path: Path | None = None

    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or (isinstance(source, str) and _is_file_path(source)):
        source_path = Path(source)
        if not source_path.exists():
            raise FileNotFoundError(f"File not found: {source_path}")
        with open(source_path, "r", encoding="utf-8") as f:
            data = _load_yaml(f)
    else:
        data = _load_yaml(source)

    return _parse_settings(data, source_path)


def _is_file_path(s: str) -> bool:
    if "\n" in s:
        return False
    if "/" in s or "\\" in s:
        return True
    return s.endswith((".yaml", ".yml"))


def _load_yaml(stream: Any) -> dict[str, Any]:
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark else None
        where = f" (line {line})" if line else ""
        logger.error("Rejected settings: invalid YAML%s", where)
        raise ConfigError(f"Invalid YAML{where}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _reject("YAML root must be a mapping (dictionary)")
    return data


def _reject(message: str) -> ConfigError:
    logger.error("Rejected settings: %s", message)
    return ConfigError(message)


def _parse_settings(data: dict[str, Any], source_path: Path | None) -> FilterSettings:
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise _reject(f"Unknown setting(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise _reject(f"Setting '{key}' must be a boolean")
            values[key] = value
        elif key in _LIST_KEYS:
            if value is None:
                value = []
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise _reject(f"Setting '{key}' must be a list of strings")
            values[key] = tuple(value)
        elif key in _OPTIONAL_STR_KEYS:
            if value is not None and not isinstance(value, str):
                raise _reject(f"Setting '{key}' must be a string")
            values[key] = value
        elif key == "system_dict_id":
            if not isinstance(value, str) or not value:
                raise _reject("Setting 'system_dict_id' must be a non-empty string")
            values[key] = value
        elif key == "config_dir":
            if not isinstance(value, (str, Path)):
                raise _reject("Setting 'config_dir' must be a path")
            values[key] = Path(value)

    if "config_dir" not in values and source_path is not None:
        values["config_dir"] = source_path.parent
    elif "config_dir" in values and source_path is not None:
        if not values["config_dir"].is_absolute():
            values["config_dir"] = source_path.parent / values["config_dir"]

    return FilterSettings(**values)
