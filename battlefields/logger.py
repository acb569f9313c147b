"""Logging helpers for battlefields

Everything logs under the ``battlefields`` logger. Handlers belong to the
application; ``setup_logging`` only adds one when nothing is configured.
"""
import logging

logger = logging.getLogger("battlefields")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Set the ``battlefields`` logger level, e.g. from ``BF_LOG_LEVEL``.

    A stream handler is attached only when neither the root logger nor the
    ``battlefields`` logger has one, so failure reports are never lost.
    """
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not logging.getLogger().handlers and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)


def log_failure(exc: Exception) -> None:
    """Default failure sink: report a swallowed API error."""
    logger.warning("Battlefields API request failed: %s", exc, exc_info=exc)


__all__ = ["setup_logging", "log_failure"]
