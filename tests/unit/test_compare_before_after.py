"""CompareBeforeAfterUseCase: legacy access vs resolved access per person."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

from compliancehub.application.dtos.migration import BackfillScope
from compliancehub.application.use_cases.migration import (
    BackfillMigrationUseCase,
    CompareBeforeAfterUseCase,
)
from compliancehub.domain.exceptions import StoreReadException
from compliancehub.infrastructure.store import InMemoryRecordStore, StoreEntitlementRepository


async def _migrate(store: InMemoryRecordStore) -> None:
    result = await BackfillMigrationUseCase(StoreEntitlementRepository(store), AsyncMock()).run(
        BackfillScope()
    )
    assert result.success


async def _verify(store: InMemoryRecordStore, tenant_id: str | None = None):
    result = await CompareBeforeAfterUseCase(StoreEntitlementRepository(store)).run(tenant_id)
    assert result.success
    return result.data


async def test_no_diff_after_correct_migration(store: InMemoryRecordStore) -> None:
    await _migrate(store)
    report = await _verify(store)
    assert report.summary.users_checked == 2
    assert report.summary.users_with_diff == 0
    assert report.summary.users_without_diff == 2
    assert report.summary.total_missing_after == 0
    assert report.diffs == []


async def test_everything_missing_before_migration(store: InMemoryRecordStore) -> None:
    report = await _verify(store)
    assert report.summary.total_missing_after == 2
    assert {d.user_id: d.missing_after for d in report.diffs} == {
        "U1": ("ent-root",),
        "U2": ("ent-x",),
    }
    assert report.diffs[0].after_count == 0


async def test_regression_reported_as_missing(store: InMemoryRecordStore) -> None:
    await _migrate(store)
    row = await store.get_one("entitlementAssignments", "eas-legacy-la-1")
    await store.save("entitlementAssignments", row["id"], {**row, "status": "archived"})

    report = await _verify(store)
    assert report.summary.users_with_diff == 1
    diff = report.diffs[0]
    assert diff.user_id == "U2"
    assert diff.display_name == "Udo Two"
    assert diff.missing_after == ("ent-x",)
    assert diff.gained_after == ()
    assert (diff.before_count, diff.after_count) == (1, 0)


async def test_expansion_reported_as_gained(store: InMemoryRecordStore) -> None:
    await _migrate(store)
    await store.save(
        "entitlementAssignments",
        "eas-extra",
        {
            "id": "eas-extra",
            "tenantId": "T1",
            "subjectType": "person",
            "subjectId": "U1",
            "entitlementId": "ent-global",
            "status": "active",
        },
    )
    report = await _verify(store)
    assert report.summary.total_gained_after == 1
    assert report.summary.total_missing_after == 0
    assert report.diffs[0].gained_after == ("ent-global",)


async def test_entitlement_removed_from_catalog_is_uncatalogued(seed_rows: dict) -> None:
    seed_rows["assignments"].append(
        {"id": "la-2", "userId": "U2", "entitlementId": "ent-retired", "status": "active"}
    )
    store = InMemoryRecordStore(seed_rows)
    await _migrate(store)
    report = await _verify(store)
    assert report.summary.total_missing_after == 0
    assert report.summary.total_uncatalogued == 1
    assert report.diffs[0].uncatalogued == ("ent-retired",)


async def test_tenant_filter(store: InMemoryRecordStore) -> None:
    report = await _verify(store, tenant_id="T2")
    assert report.summary.users_checked == 0
    assert report.tenant_id == "T2"


async def test_verification_is_read_only(store: InMemoryRecordStore) -> None:
    await _migrate(store)
    writes = store.write_count
    await _verify(store)
    assert store.write_count == writes


async def test_read_failure_returns_failed_result() -> None:
    repo = AsyncMock()
    repo.list_persons.side_effect = StoreReadException("users", "permission denied")
    result = await CompareBeforeAfterUseCase(repo).run()
    assert not result.success
    assert result.error_code == "STORE_READ_FAILURE"


async def test_expired_legacy_grant_reported_as_missing(seed_rows: dict) -> None:
    seed_rows["assignments"][0]["validUntil"] = "2024-02-01T00:00:00Z"
    store = InMemoryRecordStore(seed_rows)
    await _migrate(store)

    report = await _verify(store)
    assert {d.user_id: d.missing_after for d in report.diffs} == {"U2": ("ent-x",)}
    migrated = await store.get_one("entitlementAssignments", "eas-legacy-la-1")
    assert migrated["validUntil"].startswith("2024-02-01")


async def test_as_of_before_the_run_misses_backfilled_bundles(store: InMemoryRecordStore) -> None:
    await _migrate(store)
    result = await CompareBeforeAfterUseCase(StoreEntitlementRepository(store)).run(
        as_of=datetime(2020, 1, 1, tzinfo=UTC)
    )
    assert {d.user_id: d.missing_after for d in result.data.diffs} == {"U1": ("ent-root",)}
