"""Load configuration from a file, the environment and command-line flags."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import Config

ENV_PREFIX = "ECWID"
CONFIG_FILE_NAME = ".ecwid.yaml"

# Flag names (kebab-case) mapped to configuration keys (snake_case).
FLAG_BINDINGS: dict[str, str] = {
    "store-id": "store_id",
    "token": "token",
    "output": "output",
    "log-level": "log_level",
    "base-url": "base_url",
    "max-retries": "max_retries",
}

_STRING_KEYS = frozenset({"store_id", "token", "base_url", "output", "log_level"})
_INT_KEYS = frozenset({"max_retries"})
_KEYS = tuple(FLAG_BINDINGS.values())


def _default_config_path() -> Optional[Path]:
    try:
        return Path.home() / CONFIG_FILE_NAME
    except RuntimeError:
        return None


def _read_file(path: Optional[Path]) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise ValueError(f"read config: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"read config: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("read config: top level of the file must be a mapping")
    return {str(key).lower(): value for key, value in data.items()}


def _as_str(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(
        f"unmarshal config: '{key}' expected a string, got {type(value).__name__}"
    )


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        if not value:
            return 0
        try:
            return int(value, 0)
        except ValueError as exc:
            raise ValueError(
                f"unmarshal config: cannot parse '{key}' as int: {value!r}"
            ) from exc
    raise ValueError(
        f"unmarshal config: '{key}' expected an int, got {type(value).__name__}"
    )


def load(
    config_path: Optional[str] = "",
    flags: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Config:
    """Build a Config; flags override environment, which overrides the file.

    Flags are keyed by their kebab-case names; a value of None means the flag
    was not given. A missing configuration file is not an error.
    """
    environ = os.environ if env is None else env
    path = Path(config_path) if config_path else _default_config_path()

    values: dict[str, Any] = {
        key: value
        for key, value in _read_file(path).items()
        if key in _KEYS and value is not None
    }

    for key in _KEYS:
        env_value = environ.get(f"{ENV_PREFIX}_{key.upper()}")
        if env_value:
            values[key] = env_value

    for flag_name, key in FLAG_BINDINGS.items():
        if flags is not None and flags.get(flag_name) is not None:
            values[key] = flags[flag_name]

    converted: dict[str, Any] = {}
    for key, value in values.items():
        if key in _INT_KEYS:
            converted[key] = _as_int(key, value)
        elif key in _STRING_KEYS:
            converted[key] = _as_str(key, value)

    return Config(**converted).with_defaults()