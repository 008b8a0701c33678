"""
Logging for the ``banking_ledger`` package.

Modules take a logger from ``get_logger(__name__)`` and stay silent until the
CLI calls ``configure_logging`` once at startup.
"""
import logging
import os

PACKAGE_LOGGER = "banking_ledger"
LEVEL_ENV = "BANKING_LEDGER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def _resolve_level(level: str | None) -> int:
    """Named level, else BANKING_LEDGER_LOG_LEVEL, else WARNING. Unknown names count as unset."""
    for name in (level, os.getenv(LEVEL_ENV)):
        numeric = logging.getLevelName(name.strip().upper()) if name else None
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(level: str | None = None) -> None:
    """Send package records to stderr at the resolved level. Later calls do nothing."""
    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
