"""Postgres-backed record store: one JSON document per (collection, id) in store_records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from compliancehub.application.interfaces.store import WriteResult
from compliancehub.domain.exceptions import StoreReadException, StoreWriteException
from compliancehub.infrastructure.persistence.models import StoreRecord
from compliancehub.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlRecordStore:
    """Record store over the store_records table. Same contract as InMemoryRecordStore.

    Each call runs in its own short transaction. create_if_absent is a single
    INSERT ... ON CONFLICT DO NOTHING on the (collection, record_id) key.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        stmt = (
            select(StoreRecord.record_id, StoreRecord.data)
            .where(StoreRecord.collection == collection)
            .order_by(StoreRecord.seq)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as e:
            raise StoreReadException(collection, str(e)) from e
        return [{**data, "id": record_id} for record_id, data in rows]

    async def get_one(self, collection: str, record_id: str) -> dict[str, Any] | None:
        stmt = select(StoreRecord.data).where(
            StoreRecord.collection == collection, StoreRecord.record_id == record_id
        )
        try:
            async with self._session_factory() as session:
                data = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreReadException(collection, str(e)) from e
        if data is None:
            return None
        return {**data, "id": record_id}

    async def save(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> WriteResult:
        stmt = insert(StoreRecord).values(collection=collection, record_id=record_id, data=row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[StoreRecord.collection, StoreRecord.record_id],
            set_={"data": stmt.excluded.data, "updated_at": func.now()},
        )
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(stmt)
        except SQLAlchemyError as e:
            logger.warning("SQL save %s/%s failed: %s", collection, record_id, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True)

    async def delete(self, collection: str, record_id: str) -> WriteResult:
        stmt = delete(StoreRecord).where(
            StoreRecord.collection == collection, StoreRecord.record_id == record_id
        )
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(stmt)
        except SQLAlchemyError as e:
            logger.warning("SQL delete %s/%s failed: %s", collection, record_id, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True)

    async def create_if_absent(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> bool:
        stmt = (
            insert(StoreRecord)
            .values(collection=collection, record_id=record_id, data=row)
            .on_conflict_do_nothing(index_elements=[StoreRecord.collection, StoreRecord.record_id])
            .returning(StoreRecord.record_id)
        )
        try:
            async with self._session_factory() as session, session.begin():
                inserted = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreWriteException(collection, record_id, str(e)) from e
        return inserted is not None
