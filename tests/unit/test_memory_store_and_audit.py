"""InMemoryRecordStore contract and StoreAuditSink behavior."""

from unittest.mock import AsyncMock

from compliancehub.application.dtos.audit import AuditEntry
from compliancehub.application.interfaces.store import WriteResult
from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import InMemoryRecordStore
from compliancehub.shared.enums import ActorType, AuditAction


def _entry(**overrides) -> AuditEntry:
    data = {
        "tenant_id": "T1",
        "actor_id": "admin-1",
        "action": AuditAction.CREATED,
        "entity_type": "entitlementAssignment",
        "entity_id": "eas-1",
        "after": {"status": "active", "token": "s3cret"},
    }
    data.update(overrides)
    return AuditEntry(**data)


class TestInMemoryRecordStore:
    async def test_rows_are_copied(self) -> None:
        store = InMemoryRecordStore({"users": [{"id": "U1", "jobIds": ["A"]}]})
        row = await store.get_one("users", "U1")
        row["jobIds"].append("B")
        assert (await store.get_one("users", "U1"))["jobIds"] == ["A"]

    async def test_create_if_absent_counts_only_creations(self) -> None:
        store = InMemoryRecordStore()
        assert await store.create_if_absent("orgUnits", "ou-1", {"name": "IT"}) is True
        assert await store.create_if_absent("orgUnits", "ou-1", {"name": "Other"}) is False
        assert store.write_count == 1
        assert (await store.get_one("orgUnits", "ou-1"))["name"] == "IT"

    async def test_get_all_keeps_insertion_order_and_ids(self) -> None:
        store = InMemoryRecordStore()
        await store.save("tenants", "b", {"name": "B"})
        await store.save("tenants", "a", {"name": "A"})
        assert [r["id"] for r in await store.get_all("tenants")] == ["b", "a"]
        assert await store.get_all("missing") == []

    async def test_delete_missing_row_succeeds(self) -> None:
        store = InMemoryRecordStore()
        assert (await store.delete("tenants", "nope")).success


class TestStoreAuditSink:
    async def test_writes_redacted_row(self) -> None:
        store = InMemoryRecordStore()
        await StoreAuditSink(store).record(_entry(actor_type=ActorType.SYSTEM))
        [row] = await store.get_all("auditEvents")
        assert row["id"].startswith("audit-")
        assert row["action"] == "created"
        assert row["actorType"] == "system"
        assert row["after"] == {"status": "active", "token": "[REDACTED]"}
        assert row["timestamp"]

    async def test_store_errors_never_reach_caller(self) -> None:
        store = AsyncMock()
        store.save.side_effect = RuntimeError("connection reset")
        await StoreAuditSink(store).record(_entry())

        store.save.side_effect = None
        store.save.return_value = WriteResult(success=False, error="quota")
        await StoreAuditSink(store).record(_entry())
        assert store.save.await_count == 2
