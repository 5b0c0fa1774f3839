"""Build the configured record store backend (memory, firestore or postgres)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.store.memory_store import InMemoryRecordStore
from compliancehub.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from compliancehub.application.interfaces.store import IRecordStore
    from compliancehub.core.config import Settings

logger = get_logger(__name__)


async def open_record_store(settings: Settings) -> IRecordStore:
    """Create the store for settings.store_backend.

    Raises:
        StoreNotConfiguredException: When the firestore or postgres backend
            cannot be initialized.
    """
    backend = settings.store_backend
    if backend == "firestore":
        from compliancehub.infrastructure.firebase.client import connect_firestore
        from compliancehub.infrastructure.store.firestore_store import FirestoreRecordStore

        store = FirestoreRecordStore(connect_firestore(settings))
        logger.info("Record store: Firestore")
        return store
    if backend == "postgres":
        from compliancehub.infrastructure.persistence.database import (
            create_schema,
            get_session_factory,
        )
        from compliancehub.infrastructure.store.sql_store import SqlRecordStore

        await create_schema()
        logger.info("Record store: Postgres")
        return SqlRecordStore(get_session_factory())
    logger.info("Record store: in-memory")
    return InMemoryRecordStore()


async def close_record_store(settings: Settings) -> None:
    """Release connections held by the configured backend."""
    if settings.store_backend == "firestore":
        from compliancehub.infrastructure.firebase.client import close_firestore

        await close_firestore()
    elif settings.store_backend == "postgres":
        from compliancehub.infrastructure.persistence.database import dispose_engine

        await dispose_engine()
        logger.info("Database engine disposed")
