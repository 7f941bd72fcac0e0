"""
Settings
========

Process-level settings for tag containers, read from the environment.

Environment variables (a `.env` file in the working directory is loaded
first):
- TAGMAP_KEY_ORDER: "insertion" (default) or "sorted"
- TAGMAP_LOG_LEVEL: logging level name for the `tagmap` logger
"""

import logging
import os
from enum import Enum
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator


class KeyOrder(str, Enum):
    """Order in which a container walks its keys during a query."""

    INSERTION = "insertion"
    """Native dict order. No allocation per query."""

    SORTED = "sorted"
    """Ascending key order, like an ordered backing store."""


class TagMapSettings(BaseModel):
    """Settings shared by containers that are not given an explicit order."""

    model_config = ConfigDict(frozen=True)

    key_order: KeyOrder = KeyOrder.INSERTION
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


def load_settings(env_file: Optional[str] = None) -> TagMapSettings:
    """
    Build settings from the process environment.

    Parameters
    ----------
    env_file : str, optional
        Path to a dotenv file. If None, `.env` is searched for from the
        working directory. Variables already set in the environment win.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    values: dict[str, str] = {}
    key_order = os.getenv("TAGMAP_KEY_ORDER")
    if key_order:
        values["key_order"] = key_order.strip().lower()
    log_level = os.getenv("TAGMAP_LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level

    return TagMapSettings(**values)


def configure_logging(settings: TagMapSettings) -> None:
    """Apply the configured level to the package logger. Installs no handlers."""
    logging.getLogger("tagmap").setLevel(settings.log_level)
