"""Configuration loading utilities for DialysisCareBot.

This module handles layered configuration:
1. Explicit path argument (highest precedence)
2. Environment variable CAREBOT_CONFIG
3. Fallback to "config/default.yaml"

It also supports optional overrides from environment variables with prefix
``CAREBOT__`` (e.g., CAREBOT__CHAT__TYPING_DELAY=0.25).
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

ENV_PATH = "CAREBOT_CONFIG"
ENV_PREFIX = "CAREBOT__"
DEFAULT_PATH = "config/default.yaml"

DEFAULTS: Dict[str, Any] = {
    "bot": {
        "name": "DialysisCareBot",
        "tagline": "Your dialysis education companion",
    },
    "chat": {"typing_delay": 1.0},
    "server": {"cors_origins": ["*"], "max_sessions": 500},
    "logging": {"level": "INFO"},
}


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``extra`` into a copy of ``base``."""
    out = copy.deepcopy(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _parse_scalar(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides with prefix CAREBOT__."""
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        # e.g., CAREBOT__CHAT__TYPING_DELAY -> cfg["chat"]["typing_delay"]
        parts = key[len(ENV_PREFIX):].lower().split("__")
        sub = cfg
        for p in parts[:-1]:
            if p not in sub or not isinstance(sub[p], dict):
                sub[p] = {}
            sub = sub[p]
        sub[parts[-1]] = _parse_scalar(value)
    return cfg


def load_config(path: str | None = None) -> Dict[str, Any]:
    """Load YAML configuration merged over :data:`DEFAULTS`.

    Parameters
    ----------
    path : str | None
        Optional path to a configuration file. If not provided, the
        environment variable ``CAREBOT_CONFIG`` is consulted. As a
        last resort ``config/default.yaml`` is used.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration dictionary with environment overrides applied.
    """
    if path is None:
        path = os.environ.get(ENV_PATH, DEFAULT_PATH)

    path_obj = Path(path)
    if not path_obj.exists():
        logger.warning("config file not found at %s; using defaults", path_obj)
        return _apply_env_overrides(copy.deepcopy(DEFAULTS))

    with path_obj.open("r", encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RuntimeError(f"Failed to parse config file {path_obj}: {e}") from e

    if not isinstance(loaded, dict):
        raise RuntimeError(f"Invalid config format in {path_obj}, expected dict.")

    return _apply_env_overrides(_merge(DEFAULTS, loaded))


def typing_delay(cfg: Dict[str, Any]) -> float:
    return max(0.0, float(cfg.get("chat", {}).get("typing_delay", 1.0)))


def setup_logging(cfg: Dict[str, Any]) -> None:
    level = str(cfg.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
