"""Pytest configuration and fixtures for compliancehub.

Uses an in-memory record store seeded with a small tenant: department IT,
job title Admin bundling ent-root, user U1 holding the Admin job title, and
user U2 with an active legacy grant for ent-x. HTTP tests run the FastAPI
app over ASGI with that store on app.state.
"""

import copy
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import InMemoryRecordStore, StoreEntitlementRepository
from compliancehub.main import create_app

SEED_ROWS: dict[str, list[dict[str, Any]]] = {
    "tenants": [{"id": "T1", "name": "Acme GmbH"}],
    "departments": [{"id": "dep-it", "tenantId": "T1", "name": "IT"}],
    "jobTitles": [
        {
            "id": "Admin",
            "tenantId": "T1",
            "name": "Admin",
            "departmentId": "dep-it",
            "entitlementIds": ["ent-root"],
        }
    ],
    "entitlements": [
        {"id": "ent-root", "tenantId": "T1", "resourceId": "res-erp", "name": "ERP root",
         "isAdmin": True},
        {"id": "ent-x", "tenantId": "T1", "resourceId": "res-crm", "name": "CRM user"},
        {"id": "ent-y", "tenantId": "T1", "resourceId": "res-crm", "name": "CRM reports"},
        {"id": "ent-global", "resourceId": "res-mail", "name": "Mail"},
    ],
    "users": [
        {
            "id": "U1",
            "tenantId": "T1",
            "displayName": "Ursula One",
            "email": "u1@acme.test",
            "department": "it",
            "jobIds": ["Admin"],
        },
        {
            "id": "U2",
            "tenantId": "T1",
            "displayName": "Udo Two",
            "email": "u2@acme.test",
            "department": "IT",
            "jobIds": [],
        },
    ],
    "assignments": [
        {
            "id": "la-1",
            "userId": "U2",
            "entitlementId": "ent-x",
            "status": "active",
            "grantedBy": "admin-1",
            "grantedAt": "2024-01-10T09:00:00Z",
        }
    ],
    "serviceAccounts": [
        {
            "id": "svc-ci",
            "tenantId": "T1",
            "name": "CI runner",
            "entitlementIds": ["ent-x", "ent-unknown"],
        }
    ],
}


@pytest.fixture
def seed_rows() -> dict[str, list[dict[str, Any]]]:
    """Fresh copy of the seed rows (tests may extend it before building the store)."""
    return copy.deepcopy(SEED_ROWS)


@pytest.fixture
def store(seed_rows: dict[str, list[dict[str, Any]]]) -> InMemoryRecordStore:
    return InMemoryRecordStore(seed_rows)


@pytest.fixture
def repo(store: InMemoryRecordStore) -> StoreEntitlementRepository:
    return StoreEntitlementRepository(store)


@pytest.fixture
def audit_sink(store: InMemoryRecordStore) -> StoreAuditSink:
    return StoreAuditSink(store)


@pytest.fixture
def app(store: InMemoryRecordStore):
    """FastAPI app with the seeded store installed (lifespan keeps an injected store)."""
    application = create_app()
    application.state.record_store = store
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
