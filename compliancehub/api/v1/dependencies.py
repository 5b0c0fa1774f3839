"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the record store and application use cases.
The store is opened once in the lifespan and kept on app.state; every
repository, audit sink and use case is built per request on top of it.
Switch backends via STORE_BACKEND in config.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from compliancehub.application.interfaces.store import IRecordStore
from compliancehub.application.use_cases.access import ResolveEffectiveAccessUseCase
from compliancehub.application.use_cases.assignments import AssignmentService
from compliancehub.application.use_cases.migration import (
    BackfillMigrationUseCase,
    CompareBeforeAfterUseCase,
)
from compliancehub.core.config import get_settings
from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import StoreEntitlementRepository


def get_record_store(request: Request) -> IRecordStore:
    """Record store opened at startup. 503 when the backend is unavailable."""
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise StoreNotConfiguredException(get_settings().store_backend)
    return store


def get_entitlement_repository(
    store: Annotated[IRecordStore, Depends(get_record_store)],
) -> StoreEntitlementRepository:
    return StoreEntitlementRepository(store)


def get_audit_sink(
    store: Annotated[IRecordStore, Depends(get_record_store)],
) -> StoreAuditSink:
    return StoreAuditSink(store)


def get_actor_id(
    x_actor_id: Annotated[str | None, Header()] = None,
) -> str:
    """Actor recorded in audit entries: X-Actor-Id header, else the configured migration actor."""
    if x_actor_id and x_actor_id.strip():
        return x_actor_id.strip()
    return get_settings().migration_actor_id


def get_resolve_effective_access_use_case(
    repo: Annotated[StoreEntitlementRepository, Depends(get_entitlement_repository)],
) -> ResolveEffectiveAccessUseCase:
    return ResolveEffectiveAccessUseCase(repo)


def get_assignment_service(
    repo: Annotated[StoreEntitlementRepository, Depends(get_entitlement_repository)],
    audit_sink: Annotated[StoreAuditSink, Depends(get_audit_sink)],
) -> AssignmentService:
    return AssignmentService(repo, audit_sink)


def get_backfill_migration_use_case(
    repo: Annotated[StoreEntitlementRepository, Depends(get_entitlement_repository)],
    audit_sink: Annotated[StoreAuditSink, Depends(get_audit_sink)],
) -> BackfillMigrationUseCase:
    return BackfillMigrationUseCase(repo, audit_sink)


def get_compare_before_after_use_case(
    repo: Annotated[StoreEntitlementRepository, Depends(get_entitlement_repository)],
) -> CompareBeforeAfterUseCase:
    return CompareBeforeAfterUseCase(repo)
