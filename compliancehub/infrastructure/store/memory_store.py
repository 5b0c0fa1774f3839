"""In-memory record store (tests, demos, local runs without infrastructure)."""

from __future__ import annotations

import copy
from typing import Any

from compliancehub.application.interfaces.store import WriteResult


class InMemoryRecordStore:
    """Dict-of-dicts store that implements IRecordStore.

    Collections keep insertion order, which stands in for store order. Rows
    are deep-copied on the way in and out so callers never share state with
    the store. write_count counts rows actually created or replaced.
    """

    def __init__(self, seed: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.write_count = 0
        for collection, rows in (seed or {}).items():
            for row in rows:
                self._collections.setdefault(collection, {})[row["id"]] = copy.deepcopy(row)

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        return [
            {**copy.deepcopy(row), "id": record_id}
            for record_id, row in self._collections.get(collection, {}).items()
        ]

    async def get_one(self, collection: str, record_id: str) -> dict[str, Any] | None:
        row = self._collections.get(collection, {}).get(record_id)
        if row is None:
            return None
        return {**copy.deepcopy(row), "id": record_id}

    async def save(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> WriteResult:
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(row)
        self.write_count += 1
        return WriteResult(success=True)

    async def delete(self, collection: str, record_id: str) -> WriteResult:
        self._collections.get(collection, {}).pop(record_id, None)
        return WriteResult(success=True)

    async def create_if_absent(
        self, collection: str, record_id: str, row: dict[str, Any]
    ) -> bool:
        rows = self._collections.setdefault(collection, {})
        if record_id in rows:
            return False
        rows[record_id] = copy.deepcopy(row)
        self.write_count += 1
        return True

    def snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Deep copy of every collection, for before/after comparisons in tests and tools."""
        return copy.deepcopy(self._collections)

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))
