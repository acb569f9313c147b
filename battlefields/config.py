"""Central configuration for battlefields.

Values come from environment variables; a ``.env`` file in the working
directory is loaded first when present.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.battlefieldsmc.net/api/"
DEFAULT_SERVER_LIST_URL = "https://api.battlefieldsmc.net/servers.json"
DEFAULT_SERVER_STATUS_URL = "https://api.battlefieldsmc.net/api/?type=status"
DEFAULT_SERVER_INFO_URL = "https://api.mcsrvstat.us/2/"
DEFAULT_COSMETIC_URL = "https://cosmetics.battlefieldsmc.net/"


def _float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Connector settings.

    ``CACHE_TIME`` and ``SHUTDOWN_TIMEOUT`` are in seconds. A ``CACHE_TIME``
    of zero or less disables caching.
    """

    API_URL: str = DEFAULT_API_URL
    SERVER_LIST_URL: str = DEFAULT_SERVER_LIST_URL
    SERVER_STATUS_URL: str = DEFAULT_SERVER_STATUS_URL
    SERVER_INFO_URL: str = DEFAULT_SERVER_INFO_URL
    COSMETIC_URL: str = DEFAULT_COSMETIC_URL
    CACHE_TIME: float = 60.0
    CACHE_ERRORS: bool = True
    SHUTDOWN_TIMEOUT: float = 10.0
    WORKERS: int = 4
    LOG_LEVEL: str = "INFO"


def _read_settings() -> Settings:
    return Settings(
        API_URL=os.environ.get("BF_API_URL") or DEFAULT_API_URL,
        SERVER_LIST_URL=os.environ.get("BF_SERVER_LIST_URL") or DEFAULT_SERVER_LIST_URL,
        SERVER_STATUS_URL=os.environ.get("BF_SERVER_STATUS_URL") or DEFAULT_SERVER_STATUS_URL,
        SERVER_INFO_URL=os.environ.get("BF_SERVER_INFO_URL") or DEFAULT_SERVER_INFO_URL,
        COSMETIC_URL=os.environ.get("BF_COSMETIC_URL") or DEFAULT_COSMETIC_URL,
        CACHE_TIME=_float("BF_CACHE_TIME", 60.0),
        CACHE_ERRORS=_bool("BF_CACHE_ERRORS", True),
        SHUTDOWN_TIMEOUT=_float("BF_SHUTDOWN_TIMEOUT", 10.0),
        WORKERS=max(1, _int("BF_WORKERS", 4)),
        LOG_LEVEL=os.environ.get("BF_LOG_LEVEL") or "INFO",
    )


def load_settings() -> Settings:
    """Load ``.env`` (without overriding real environment variables) and read settings."""
    load_dotenv(find_dotenv(usecwd=True))
    return _read_settings()
