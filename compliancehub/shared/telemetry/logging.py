"""Stdout logging for the API process and the migration scripts."""

import logging
import sys

from compliancehub.core.config import get_settings


def setup_logging() -> None:
    """Configure the root logger once per process (lifespan startup or script main).

    DEBUG when settings.debug, else settings.log_level. Integrity warnings
    from the row mapper and per-row migration failures are logged at WARNING
    and ERROR, so LOG_LEVEL=ERROR keeps only the latter.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; call as get_logger(__name__)."""
    return logging.getLogger(name)
