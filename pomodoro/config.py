"""Application configuration loading.

Settings are read from ``~/.config/pomodoro/config.json`` (or the file
named by ``POMODORO_CONFIG``) and may be overridden per run from the
command line. Nothing here writes to disk.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pomodoro.models import AppConfig

log = logging.getLogger(__name__)

_ENV_VAR = "POMODORO_CONFIG"
_CONFIG_DIR = Path.home() / ".config" / "pomodoro"
_CONFIG_FILE = _CONFIG_DIR / "config.json"


def config_path() -> Path:
    """Location of the config file, honouring ``POMODORO_CONFIG``."""
    override = os.environ.get(_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _CONFIG_FILE


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load config from disk, returning defaults if none exists or it is unusable."""
    path = path or config_path()
    if not path.exists():
        return AppConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        log.warning("Ignoring config file %s: %s", path, exc)
        return AppConfig()


def resolve_config(
    work_minutes: Optional[int] = None,
    break_minutes: Optional[int] = None,
    interval_ms: Optional[int] = None,
    path: Optional[Path] = None,
) -> AppConfig:
    """File settings with any non-None argument taking precedence.

    Raises ``ValidationError`` if an override is out of range.
    """
    base = load_config(path)
    overrides = {
        "work_minutes": work_minutes,
        "break_minutes": break_minutes,
        "interval_ms": interval_ms,
    }
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return AppConfig.model_validate(data)
