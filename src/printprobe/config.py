"""Configuration for the printprobe CLI.

Settings live in ``~/.printprobe/config.yaml``.

Precedence (highest first):
    1. Explicit parameters (e.g. from CLI flags).
    2. Environment variables (``PRINTPROBE_TIMEOUT``, ``PRINTPROBE_MAX_BYTES``,
       ``PRINTPROBE_BROAD_SWEEP``, ``PRINTPROBE_LOG_LEVEL``).
    3. The YAML config file.
    4. Built-in defaults.

The inspection engine itself reads no configuration; these values only
shape how the CLI fetches files and builds the engine.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "timeout": 30,
    "max_bytes": 512 * 1024 * 1024,
    "broad_sweep": False,
    "log_level": "WARNING",
}

_ENV_VARS: dict[str, str] = {
    "timeout": "PRINTPROBE_TIMEOUT",
    "max_bytes": "PRINTPROBE_MAX_BYTES",
    "broad_sweep": "PRINTPROBE_BROAD_SWEEP",
    "log_level": "PRINTPROBE_LOG_LEVEL",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = {"1", "true", "yes", "on"}


def get_default_config_path() -> Path:
    """Return the default config file path (``~/.printprobe/config.yaml``)."""
    return Path.home() / ".printprobe" / "config.yaml"


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Read and parse a YAML config file, returning an empty dict on any failure."""
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (yaml.YAMLError, OSError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def load_config(
    timeout: int | None = None,
    max_bytes: int | None = None,
    broad_sweep: bool | None = None,
    config_path: str | None = None,
) -> dict[str, Any]:
    """Resolve configuration from parameters, environment, file and defaults.

    Returns a dict with keys ``timeout``, ``max_bytes``, ``broad_sweep`` and
    ``log_level``.

    :raises ValueError: if a numeric setting is not a valid integer.
    """
    config: dict[str, Any] = dict(DEFAULTS)

    path = Path(config_path) if config_path else get_default_config_path()
    file_values = _load_config_file(path)
    for key in DEFAULTS:
        if file_values.get(key) is not None:
            config[key] = file_values[key]

    for key, env_name in _ENV_VARS.items():
        raw = os.environ.get(env_name, "").strip()
        if raw:
            config[key] = raw

    explicit = {"timeout": timeout, "max_bytes": max_bytes, "broad_sweep": broad_sweep}
    for key, value in explicit.items():
        if value is not None:
            config[key] = value

    config["timeout"] = int(config["timeout"])
    config["max_bytes"] = int(config["max_bytes"])
    config["broad_sweep"] = _as_bool(config["broad_sweep"])
    config["log_level"] = str(config["log_level"]).upper()
    return config


def init_config(config_path: str | None = None) -> Path:
    """Write a config file holding the defaults and return its path."""
    path = Path(config_path) if config_path else get_default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(dict(DEFAULTS), fh, default_flow_style=False, sort_keys=False)
    return path


def validate_config(config: dict[str, Any]) -> tuple[bool, str | None]:
    """Validate a resolved configuration dict.

    Returns ``(True, None)`` when valid, or ``(False, message)`` describing
    the first problem found.
    """
    timeout = config.get("timeout")
    if not isinstance(timeout, int) or timeout <= 0:
        return False, "timeout must be a positive integer"

    max_bytes = config.get("max_bytes")
    if not isinstance(max_bytes, int) or max_bytes <= 0:
        return False, "max_bytes must be a positive integer"

    if config.get("log_level") not in _LOG_LEVELS:
        return False, f"log_level must be one of {', '.join(_LOG_LEVELS)}"

    return True, None
