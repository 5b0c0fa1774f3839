"""Firestore-backed record store (implements IRecordStore over the REST client)."""

from __future__ import annotations

from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError

from compliancehub.application.interfaces.store import WriteResult
from compliancehub.domain.exceptions import StoreReadException, StoreWriteException
from compliancehub.infrastructure.firebase.rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from compliancehub.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Transport and token refresh failures
_BACKEND_ERRORS = (httpx.HTTPError, GoogleAuthError)


def _with_id(record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Document id wins over any stored "id" field."""
    return {**data, "id": record_id}


class FirestoreRecordStore:
    """Record store over Firestore collections. Same contract as InMemoryRecordStore.

    create_if_absent maps to createDocument with a fixed document id, which
    Firestore rejects with 409 when the id exists (atomic conditional create).
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        try:
            return [
                _with_id(doc_id, data)
                async for doc_id, data in self._client.list_documents(collection)
            ]
        except _BACKEND_ERRORS as e:
            raise StoreReadException(collection, str(e)) from e

    async def get_one(self, collection: str, record_id: str) -> dict[str, Any] | None:
        try:
            data = await self._client.get_document(collection, record_id)
        except _BACKEND_ERRORS as e:
            raise StoreReadException(collection, str(e)) from e
        return None if data is None else _with_id(record_id, data)

    async def save(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> WriteResult:
        try:
            await self._client.set_document(collection, record_id, row)
        except _BACKEND_ERRORS as e:
            logger.warning("Firestore save %s/%s failed: %s", collection, record_id, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True)

    async def delete(self, collection: str, record_id: str) -> WriteResult:
        try:
            await self._client.delete_document(collection, record_id)
        except _BACKEND_ERRORS as e:
            logger.warning("Firestore delete %s/%s failed: %s", collection, record_id, e)
            return WriteResult(success=False, error=str(e))
        return WriteResult(success=True)

    async def create_if_absent(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> bool:
        try:
            await self._client.create_document(collection, record_id, row)
        except DocumentExistsError:
            return False
        except _BACKEND_ERRORS as e:
            raise StoreWriteException(collection, record_id, str(e)) from e
        return True
