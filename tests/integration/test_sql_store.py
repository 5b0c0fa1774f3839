"""SqlRecordStore integration tests. Require Postgres (STORE_BACKEND=postgres, DATABASE_URL).

Each test uses its own collection name; rows persist, so run against a test DB.
"""

import uuid

import pytest

from compliancehub.application.dtos.migration import BackfillScope
from compliancehub.application.use_cases.migration import BackfillMigrationUseCase
from compliancehub.core.config import get_settings
from compliancehub.infrastructure.persistence.database import (
    create_schema,
    dispose_engine,
    get_session_factory,
)
from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import StoreEntitlementRepository
from compliancehub.infrastructure.store.sql_store import SqlRecordStore


@pytest.fixture
async def sql_store():
    if get_settings().store_backend != "postgres":
        pytest.skip("Postgres not configured: set STORE_BACKEND=postgres and DATABASE_URL")
    await create_schema()
    yield SqlRecordStore(get_session_factory())
    await dispose_engine()


@pytest.fixture
def collection() -> str:
    return f"test-{uuid.uuid4().hex[:12]}"


@pytest.mark.requires_db
async def test_create_if_absent_and_order(sql_store: SqlRecordStore, collection: str) -> None:
    assert await sql_store.create_if_absent(collection, "b", {"name": "B"}) is True
    assert await sql_store.create_if_absent(collection, "a", {"name": "A"}) is True
    assert await sql_store.create_if_absent(collection, "b", {"name": "other"}) is False
    rows = await sql_store.get_all(collection)
    assert [(r["id"], r["name"]) for r in rows] == [("b", "B"), ("a", "A")]


@pytest.mark.requires_db
async def test_save_replaces_and_delete(sql_store: SqlRecordStore, collection: str) -> None:
    assert (await sql_store.save(collection, "x", {"status": "active"})).success
    assert (await sql_store.save(collection, "x", {"status": "archived"})).success
    assert (await sql_store.get_one(collection, "x"))["status"] == "archived"
    assert (await sql_store.delete(collection, "x")).success
    assert await sql_store.get_one(collection, "x") is None


@pytest.mark.requires_db
async def test_backfill_is_idempotent_on_postgres(sql_store: SqlRecordStore) -> None:
    tenant = f"T-{uuid.uuid4().hex[:8]}"
    await sql_store.save("tenants", tenant, {"name": "Integration"})
    await sql_store.save(
        "jobTitles",
        f"jt-{tenant}",
        {"tenantId": tenant, "name": "Admin", "entitlementIds": ["ent-root"]},
    )
    repo = StoreEntitlementRepository(sql_store)
    use_case = BackfillMigrationUseCase(repo, StoreAuditSink(sql_store))

    first = await use_case.run(BackfillScope(tenant_id=tenant))
    second = await use_case.run(BackfillScope(tenant_id=tenant))

    assert first.data.counters.positions_created == 1
    assert first.data.counters.entitlement_assignments_created == 1
    assert second.data.counters.total_created == 0
