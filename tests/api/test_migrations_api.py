"""POST /api/v1/migrations/backfill and GET /api/v1/migrations/verification."""

from httpx import AsyncClient

from compliancehub.infrastructure.store import InMemoryRecordStore


async def test_backfill_then_rerun(client: AsyncClient, store: InMemoryRecordStore) -> None:
    first = await client.post(
        "/api/v1/migrations/backfill", json={"tenant_id": "T1"}, headers={"X-Actor-Id": "ops-7"}
    )
    assert first.status_code == 200
    data = first.json()
    assert data["tenant_ids"] == ["T1"]
    assert data["total_created"] == 10
    assert data["counters"]["entitlement_assignments_created"] == 2
    assert data["include_requested_assignments"] is False

    second = await client.post("/api/v1/migrations/backfill", json={"tenant_id": "T1"})
    assert second.json()["total_created"] == 0
    assert second.json()["counters"]["skipped_existing"] == 10

    [first_audit, _] = await store.get_all("auditEvents")
    assert first_audit["action"] == "migration_run"
    assert first_audit["actorUid"] == "ops-7"
    assert first_audit["tenantId"] == "T1"
    assert first_audit["after"]["entitlementAssignmentsCreated"] == 2


async def test_backfill_unknown_tenant_returns_404(client: AsyncClient) -> None:
    response = await client.post("/api/v1/migrations/backfill", json={"tenant_id": "nope"})
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_backfill_rejects_bad_body(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/migrations/backfill", json={"include_requested_assignments": "maybe"}
    )
    assert response.status_code == 422


async def test_verification_before_and_after(client: AsyncClient) -> None:
    before = await client.get("/api/v1/migrations/verification")
    assert before.status_code == 200
    assert before.json()["summary"]["total_missing_after"] == 2

    await client.post("/api/v1/migrations/backfill", json={})
    after = await client.get("/api/v1/migrations/verification", params={"tenant_id": "T1"})
    summary = after.json()["summary"]
    assert summary["users_checked"] == 2
    assert summary["users_with_diff"] == 0
    assert after.json()["diffs"] == []
