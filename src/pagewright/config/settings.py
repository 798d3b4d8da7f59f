"""
Environment/.env settings.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _load_dotenv() -> None:
    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(dotenv_path=cwd_env, override=True)


_load_dotenv()


class EnvironmentSettings(BaseModel):
    """
    Overrides read from environment variables.

    Attributes:
        log_level: Logging level that wins over ``--log-level``.
        config_path: Config file used when ``--config`` is not given.
    """
    log_level: Optional[str] = Field(default=None, alias="PAGEWRIGHT_LOG_LEVEL")
    config_path: Optional[Path] = Field(default=None, alias="PAGEWRIGHT_CONFIG")

    model_config = {
        "populate_by_name": True,
    }


@lru_cache(maxsize=1)
def get_settings() -> EnvironmentSettings:
    """
    Load settings from environment/.env exactly once.
    """
    values = {field.alias: os.getenv(field.alias) or None for field in EnvironmentSettings.model_fields.values()}
    return EnvironmentSettings(**values)
