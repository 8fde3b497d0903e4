"""
Persisted user configuration for dex-lookup.

The file is a flat JSON object whose keys are ClientConfig fields.  Values
given on the command line override it for a single invocation only.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from configs.constants import Constants
from src.client.base import ClientConfig
from src.client.errors import ConfigError

logger = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError("must be greater than zero")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise ValueError("must not be negative")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise ValueError("must be at least 1")
    return number


# Field name → parser for values read from the CLI or the JSON file
CONFIG_FIELDS: Dict[str, Callable[[str], Any]] = {
    "cache_dir": Path,
    "use_cache": _parse_bool,
    "calls_per_second": _positive_float,
    "max_retries": _non_negative_int,
    "timeout": _positive_int,
    "max_workers": _positive_int,
}


def _coerce(key: str, value: Any) -> Any:
    if key not in CONFIG_FIELDS:
        raise ConfigError(
            f"unknown config key '{key}' (expected one of: {', '.join(CONFIG_FIELDS)})"
        )
    try:
        return CONFIG_FIELDS[key](str(value))
    except ValueError as exc:
        raise ConfigError(f"invalid value for '{key}': {value!r} ({exc})") from exc


def config_to_dict(config: ClientConfig) -> Dict[str, Any]:
    data = asdict(config)
    data["cache_dir"] = str(config.cache_dir)
    return data


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """
    Load the stored configuration.

    A missing file yields the defaults.  A file that is not valid JSON is
    reported and ignored; unknown keys or bad values raise ConfigError.
    """
    path = Path(path) if path is not None else Constants.CONFIG_PATH
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return ClientConfig()
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning(f"Ignoring unreadable config file {path}: {exc}")
        return ClientConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return ClientConfig(**{key: _coerce(key, value) for key, value in data.items()})


def save_config(config: ClientConfig, path: Optional[Path] = None) -> Path:
    """Write *config* as indented JSON to *path* (creates parent dirs)."""
    path = Path(path) if path is not None else Constants.CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config_to_dict(config), fh, indent=2, ensure_ascii=False)
    logger.debug(f"Saved → {path}")
    return path


def set_config_value(key: str, value: str, path: Optional[Path] = None) -> ClientConfig:
    config = load_config(path)
    setattr(config, key, _coerce(key, value))
    save_config(config, path)
    return config


def reset_config(path: Optional[Path] = None) -> ClientConfig:
    config = ClientConfig()
    save_config(config, path)
    return config


def apply_overrides(config: ClientConfig, **overrides: Any) -> ClientConfig:
    """Return a copy of *config* with every non-None override applied."""
    values = {f.name: getattr(config, f.name) for f in fields(config)}
    values.update({key: value for key, value in overrides.items() if value is not None})
    return ClientConfig(**values)
