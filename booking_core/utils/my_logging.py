# booking_core/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from booking_core.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Commit outcomes (committed, rejected, timed out) stay visible in quiet mode
BOOKING_AUDIT_LOGGERS = (
    "booking_core.services.booking.booking_service",
    "booking_core.main",
)

FRAMEWORK_LOGGERS = (
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "sqlalchemy.dialects",
    "alembic",
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
)


def setup_logging(verbose=True):
    """
    Configure application logging.

    Quiet mode drops framework chatter to ERROR but keeps booking commit
    outcomes at INFO. SQL statements are left to the engine's own echo
    handler when DB_ECHO is on.
    """
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    if verbose:
        return

    noisy_loggers = list(FRAMEWORK_LOGGERS)
    if not settings.DB_ECHO:
        noisy_loggers += ["sqlalchemy", "sqlalchemy.engine"]
    for name in noisy_loggers:
        logger = logging.getLogger(name)
        logger.setLevel(logging.ERROR)
        logger.propagate = False

    for name in BOOKING_AUDIT_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)
