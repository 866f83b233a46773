"""
Settings — ~/.zensoul/config.json overlaid with environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from zensoul.errors import ConfigError
from zensoul.timer import SETTLE_DELAY_S, TICK_INTERVAL_S
from zensoul.transport.http import DEFAULT_BASE_URL, DEFAULT_MODEL

CONFIG_FILE = Path.home() / ".zensoul" / "config.json"

ENV_VARS = {
    "gemini_api_key": "GEMINI_API_KEY",
    "gemini_model": "ZENSOUL_GEMINI_MODEL",
    "base_url": "ZENSOUL_BASE_URL",
}


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    tick_interval: float = Field(default=TICK_INTERVAL_S, gt=0)
    settle_delay: float = Field(default=SETTLE_DELAY_S, ge=0)


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    try:
        cfg = json.loads((path or CONFIG_FILE).read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


def load_settings(path: Optional[Path] = None, environ: Optional[dict[str, str]] = None) -> Settings:
    """Config file values, with any set environment variable taking precedence."""
    env = os.environ if environ is None else environ
    values = load_config(path)
    for field, var in ENV_VARS.items():
        if env.get(var):
            values[field] = env[var]
    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path or CONFIG_FILE}: {e}")
