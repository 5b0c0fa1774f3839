"""Application lifespan: startup and shutdown.

Only wiring of infrastructure: logging setup, opening the configured record
store, and releasing its connections on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from compliancehub.core.config import get_settings
from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.store.factory import close_record_store, open_record_store
from compliancehub.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    A record store injected before startup (tests) is kept as is. When the
    configured backend cannot be opened the app still starts; store-backed
    routes then answer 503 and /health reports the store as unavailable.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    opened_here = False
    if getattr(app.state, "record_store", None) is None:
        try:
            app.state.record_store = await open_record_store(settings)
            opened_here = True
        except StoreNotConfiguredException as exc:
            logger.error("Record store unavailable: %s", exc.message)
            app.state.record_store = None

    yield

    # ---- Shutdown ----
    if opened_here:
        await close_record_store(settings)
        app.state.record_store = None
        logger.info("Record store closed")
