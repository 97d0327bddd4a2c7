# common/config_loader.py
import copy
import os
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from common.logging_config import LOGGER_NAME

_log = logging.getLogger(LOGGER_NAME)

DEFAULT_CONFIG: Dict[str, Any] = {
    "matching": {
        "anchor_end": False,
        "misspellings": True,
        "mistakes_path": None,
    },
    "slots": {
        "timezone": "America/Los_Angeles",
        "cancel_phrases": None,
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[os.PathLike] = None) -> Dict[str, Any]:
    """Load YAML from `path`, NLC_CONFIG_PATH or ./nlc.yaml, layered over safe defaults."""
    load_dotenv(override=False)
    config_path = Path(path or os.getenv("NLC_CONFIG_PATH", "nlc.yaml"))
    cfg: Dict[str, Any] = {}
    if not config_path.exists():
        _log.warning("Config file not found at %s. Using built-in defaults.", config_path)
    else:
        try:
            with config_path.open("r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            _log.error("Failed to parse %s: %s. Using built-in defaults.", config_path, e)
            cfg = {}

    merged = _merge(DEFAULT_CONFIG, cfg)
    env_level = os.getenv("NLC_LOGLEVEL")
    if env_level:
        merged["logging"]["level"] = env_level
    return merged


def cfg_get(d: Dict[str, Any], path: str, default=None):
    """Safely fetch a nested key via dotted path, e.g. cfg_get(cfg, 'matching.anchor_end')."""
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return default if cur is None else cur
