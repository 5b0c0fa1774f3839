"""Record store port: generic get/save/delete by collection name and id.

Implemented by the in-memory, Firestore and Postgres backends. No
cross-collection transactions are assumed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a single write."""

    success: bool
    error: str | None = None


class IRecordStore(Protocol):
    """Protocol for schemaless record stores (DIP).

    Rows are plain dicts. Returned rows always carry their document id under
    "id". Read methods raise StoreReadException on backend failure.
    """

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every row of the collection, in store order."""

    async def get_one(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return one row or None if absent."""

    async def save(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> WriteResult:
        """Create or fully replace a row."""

    async def delete(self, collection: str, record_id: str) -> WriteResult:
        """Delete a row. Deleting a missing row succeeds."""

    async def create_if_absent(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> bool:
        """Create the row only if no row has this id.

        Returns True when created, False when the id already existed. Raises
        StoreWriteException on backend failure. Backends implement this as a
        single conditional write where they can.
        """
