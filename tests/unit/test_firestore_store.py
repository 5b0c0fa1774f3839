"""FirestoreRecordStore over the REST client, with HTTP served by httpx.MockTransport."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from google.auth.exceptions import RefreshError

from compliancehub.application.dtos.migration import BackfillScope
from compliancehub.application.use_cases.migration import BackfillMigrationUseCase
from compliancehub.core.config import Settings
from compliancehub.domain.exceptions import (
    StoreNotConfiguredException,
    StoreReadException,
    StoreWriteException,
)
from compliancehub.infrastructure.firebase import FirestoreRESTClient, connect_firestore
from compliancehub.infrastructure.firebase.codec import decode_fields, encode_fields
from compliancehub.infrastructure.store import StoreEntitlementRepository
from compliancehub.infrastructure.store.firestore_store import FirestoreRecordStore


class _StaticCredentials:
    """Stands in for service account credentials that already hold a token."""

    valid = True
    token = "test-token"


class _UnrefreshableCredentials:
    """Expired credentials whose token endpoint is unreachable."""

    valid = False
    token = None

    def refresh(self, request) -> None:
        raise RefreshError("token endpoint down")


def _document(collection: str, doc_id: str, data: dict) -> dict:
    name = f"projects/demo/databases/(default)/documents/{collection}/{doc_id}"
    return {"name": name, **encode_fields(data)}


class FakeFirestore:
    """Minimal Firestore REST v1 emulation for one test."""

    def __init__(self) -> None:
        self.docs: dict[str, dict[str, dict]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_collections: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.split("/documents/", 1)[1]
        parts = path.split("/")
        collection = parts[0]
        if collection in self.fail_collections:
            return httpx.Response(503, json={"error": {"message": "unavailable"}})
        rows = self.docs.setdefault(collection, {})

        if len(parts) == 1 and request.method == "GET":
            ids = sorted(rows)
            page_token = request.url.params.get("pageToken")
            start = int(page_token) if page_token else 0
            page = ids[start : start + 2]
            body: dict = {"documents": [_document(collection, i, rows[i]) for i in page]}
            if start + 2 < len(ids):
                body["nextPageToken"] = str(start + 2)
            return httpx.Response(200, json=body)
        if len(parts) == 1 and request.method == "POST":
            doc_id = request.url.params["documentId"]
            if doc_id in rows:
                return httpx.Response(409, json={"error": {"status": "ALREADY_EXISTS"}})
            rows[doc_id] = _decoded(request)
            return httpx.Response(200, json=_document(collection, doc_id, rows[doc_id]))

        doc_id = parts[1]
        if request.method == "GET":
            if doc_id not in rows:
                return httpx.Response(404, json={"error": {"status": "NOT_FOUND"}})
            return httpx.Response(200, json=_document(collection, doc_id, rows[doc_id]))
        if request.method == "PATCH":
            rows[doc_id] = _decoded(request)
            return httpx.Response(200, json=_document(collection, doc_id, rows[doc_id]))
        if request.method == "DELETE":
            rows.pop(doc_id, None)
            return httpx.Response(200, json={})
        return httpx.Response(405)


def _decoded(request: httpx.Request) -> dict:
    return decode_fields(json.loads(request.content)["fields"])


@pytest.fixture
def fake() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
async def firestore_store(fake: FakeFirestore):
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    client = FirestoreRESTClient("demo", _StaticCredentials(), http_client=http)
    yield FirestoreRecordStore(client)
    await http.aclose()


async def test_get_all_follows_pagination(fake: FakeFirestore, firestore_store) -> None:
    fake.docs["users"] = {
        f"U{i}": {"tenantId": "T1", "jobIds": ["Admin"], "id": "stale"} for i in range(5)
    }
    rows = await firestore_store.get_all("users")
    assert [r["id"] for r in rows] == ["U0", "U1", "U2", "U3", "U4"]
    assert rows[0]["jobIds"] == ["Admin"]
    assert len([r for r in fake.requests if r.method == "GET"]) == 3
    assert fake.requests[0].headers["Authorization"] == "Bearer test-token"


async def test_get_one_missing_returns_none(firestore_store) -> None:
    assert await firestore_store.get_one("users", "nobody") is None


async def test_create_if_absent_is_conditional(fake: FakeFirestore, firestore_store) -> None:
    row = {"tenantId": "T1", "key": "company", "sortOrder": 0, "enabled": True}
    assert await firestore_store.create_if_absent("orgUnitTypes", "out-T1-company", row) is True
    assert await firestore_store.create_if_absent("orgUnitTypes", "out-T1-company", row) is False
    assert fake.docs["orgUnitTypes"]["out-T1-company"]["sortOrder"] == 0


async def test_save_and_delete(fake: FakeFirestore, firestore_store) -> None:
    result = await firestore_store.save("auditEvents", "audit-1", {"action": "created"})
    assert result.success
    assert (await firestore_store.get_one("auditEvents", "audit-1"))["action"] == "created"
    assert (await firestore_store.delete("auditEvents", "audit-1")).success
    assert "audit-1" not in fake.docs["auditEvents"]


async def test_backend_errors_map_to_store_exceptions(
    fake: FakeFirestore, firestore_store
) -> None:
    fake.fail_collections.add("entitlements")
    with pytest.raises(StoreReadException):
        await firestore_store.get_all("entitlements")
    with pytest.raises(StoreWriteException):
        await firestore_store.create_if_absent("entitlements", "ent-1", {"name": "x"})
    result = await firestore_store.save("entitlements", "ent-1", {"name": "x"})
    assert not result.success


async def test_timestamps_and_nested_values_decode(fake: FakeFirestore, firestore_store) -> None:
    fake.docs["serviceAccounts"] = {}
    body = encode_fields({"scope": {"orgUnitId": "ou-1", "includeChildren": False}})
    body["fields"]["validUntil"] = {"timestampValue": "2025-01-31T00:00:00Z"}
    fake.docs["serviceAccounts"]["svc-1"] = decode_fields(body["fields"])
    row = await firestore_store.get_one("serviceAccounts", "svc-1")
    assert row["scope"] == {"orgUnitId": "ou-1", "includeChildren": False}
    assert row["validUntil"].isoformat() == "2025-01-31T00:00:00+00:00"


@pytest.mark.parametrize(
    "overrides",
    [
        {"firebase_service_account_key": "not json"},
        {"firebase_service_account_key": '{"client_email": "svc@demo.test"}'},
        {"firebase_service_account_path": "/nonexistent/service-account.json"},
    ],
)
def test_connect_without_usable_credentials_is_not_configured(overrides: dict) -> None:
    settings = Settings(store_backend="firestore", **overrides)
    with pytest.raises(StoreNotConfiguredException):
        connect_firestore(settings)


@pytest.fixture
async def unauthorized_store(fake: FakeFirestore):
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    client = FirestoreRESTClient("demo", _UnrefreshableCredentials(), http_client=http)
    yield FirestoreRecordStore(client)
    await http.aclose()


async def test_token_refresh_failure_maps_to_store_exceptions(
    fake: FakeFirestore, unauthorized_store
) -> None:
    with pytest.raises(StoreReadException):
        await unauthorized_store.get_one("users", "U1")
    with pytest.raises(StoreWriteException):
        await unauthorized_store.create_if_absent("orgUnits", "ou-1", {"name": "IT"})
    assert not (await unauthorized_store.save("orgUnits", "ou-1", {"name": "IT"})).success
    assert fake.requests == []


async def test_backfill_over_unauthorized_store_fails_cleanly(unauthorized_store) -> None:
    audit = AsyncMock()
    use_case = BackfillMigrationUseCase(StoreEntitlementRepository(unauthorized_store), audit)
    result = await use_case.run(BackfillScope())
    assert not result.success
    assert result.error_code == "STORE_READ_FAILURE"
    audit.record.assert_not_awaited()
