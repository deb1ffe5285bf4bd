import os
import logging
from typing import Optional, Union
from pathlib import Path

import yaml
from pydantic import BaseModel

logger = logging.getLogger(__name__)

CONFIG_ENV = "DESK_CORE_CONFIG"


class ConfigError(RuntimeError):
    """The settings file could not be read."""


class Settings(BaseModel):
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    log_level: str = "INFO"
    export_format: str = "glb"


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Defaults -> YAML file (explicit path or $DESK_CORE_CONFIG) -> environment.
    """
    data = {}
    path = path or os.environ.get(CONFIG_ENV)
    if path:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
        logger.debug("Loaded settings from %s", path)

    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    if api_key:
        data['api_key'] = api_key
    if os.environ.get("DESK_CORE_MODEL"):
        data['model'] = os.environ["DESK_CORE_MODEL"]
    if os.environ.get("DESK_CORE_LOG_LEVEL"):
        data['log_level'] = os.environ["DESK_CORE_LOG_LEVEL"]

    return Settings(**data)
