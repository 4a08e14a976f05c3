"""Configuration management for Taskboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.models import Group

logger = logging.getLogger(__name__)

TASKBOARD_HOME = Path(os.environ.get("TASKBOARD_HOME", Path.home() / "taskboard"))
CONFIG_FILE = TASKBOARD_HOME / "config" / "taskboard.conf"

DEFAULT_BACKEND_URL = "http://localhost:8080"


@dataclass
class Config:
    """Taskboard configuration."""

    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout: float = 10.0
    default_group: Group = Group.DEV


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    # Handle quoted values with inline comments: "value" # comment
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskboard.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "backend_url":
                config.backend_url = value.rstrip("/") or DEFAULT_BACKEND_URL
            case "request_timeout":
                try:
                    config.request_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid REQUEST_TIMEOUT {value!r}, using {config.request_timeout}")
            case "default_group":
                try:
                    config.default_group = Group.parse(value)
                except ValueError:
                    logger.warning(f"Invalid DEFAULT_GROUP {value!r}, using {config.default_group.value}")

    return config
