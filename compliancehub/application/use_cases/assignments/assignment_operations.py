"""Assignment operations: upsert, list by subject, status transitions (audited)."""

from __future__ import annotations

from dataclasses import asdict, replace
from typing import TYPE_CHECKING, Any

from compliancehub.application.dtos.audit import AuditEntry
from compliancehub.core.constants import ID_PREFIX_ASSIGNMENT
from compliancehub.domain.entities import EntitlementAssignment
from compliancehub.domain.enums import (
    ASSIGNMENT_STATUS_TRANSITIONS,
    AssignmentStatus,
    SubjectType,
)
from compliancehub.domain.exceptions import (
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from compliancehub.domain.value_objects import AssignmentScope, ValidityWindow
from compliancehub.shared.enums import AuditAction
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import ensure_utc, to_iso, utc_now
from compliancehub.shared.utils.generators import composite_id, generate_cuid

if TYPE_CHECKING:
    from compliancehub.application.dtos.assignment import AssignmentInput
    from compliancehub.application.interfaces.repositories import IEntitlementRepository
    from compliancehub.application.interfaces.services import IAuditSink

logger = get_logger(__name__)

ENTITY_TYPE = "entitlementAssignment"


class AssignmentService:
    """Create, update and transition EntitlementAssignment rows. One audit entry per write."""

    def __init__(self, repo: IEntitlementRepository, audit_sink: IAuditSink) -> None:
        self.repo = repo
        self.audit_sink = audit_sink

    async def upsert_assignment(
        self, data: AssignmentInput, actor_id: str
    ) -> EntitlementAssignment:
        """Create (data.id None) or replace an assignment.

        New rows get an eas-<cuid> id; granted_by and granted_at default to the
        actor and now.
        """
        for name in ("tenant_id", "subject_id", "entitlement_id"):
            if not (getattr(data, name) or "").strip():
                raise ValidationException(f"{name} is required", field=name)
        if (
            data.valid_from is not None
            and data.valid_until is not None
            and ensure_utc(data.valid_until) < ensure_utc(data.valid_from)
        ):
            raise ValidationException(
                "valid_until must not precede valid_from", field="valid_until"
            )

        existing = await self.repo.get_assignment(data.id) if data.id else None
        if existing is not None and existing.tenant_id != data.tenant_id:
            raise ResourceNotFoundException(ENTITY_TYPE, data.id)

        now = utc_now()
        record = EntitlementAssignment(
            id=data.id or composite_id(ID_PREFIX_ASSIGNMENT, generate_cuid()),
            tenant_id=data.tenant_id,
            subject_type=data.subject_type,
            subject_id=data.subject_id.strip(),
            entitlement_id=data.entitlement_id.strip(),
            status=data.status,
            assignment_source=data.assignment_source,
            window=ValidityWindow(valid_from=data.valid_from, valid_until=data.valid_until),
            scope=AssignmentScope(
                org_unit_id=data.scope_org_unit_id,
                include_children=data.scope_include_children,
                resource_context=data.scope_resource_context,
            ),
            granted_by=data.granted_by or actor_id,
            granted_at=data.granted_at or now,
            ticket_ref=data.ticket_ref,
            notes=data.notes,
            reason=data.reason,
        )
        await self.repo.save(record)
        await self.audit_sink.record(
            AuditEntry(
                tenant_id=record.tenant_id,
                actor_id=actor_id,
                action=AuditAction.UPDATED if existing else AuditAction.CREATED,
                entity_type=ENTITY_TYPE,
                entity_id=record.id,
                before=_audit_view(existing) if existing else None,
                after=_audit_view(record),
            )
        )
        return record

    async def list_assignments_by_subject(
        self, tenant_id: str, subject_type: SubjectType, subject_id: str
    ) -> list[EntitlementAssignment]:
        """Return every assignment row of the subject (all statuses), in store order."""
        rows = await self.repo.list_assignments(tenant_id=tenant_id)
        return [
            row
            for row in rows
            if row.subject_type is subject_type and row.subject_id == subject_id
        ]

    async def transition_assignment_status(
        self,
        assignment_id: str,
        new_status: AssignmentStatus,
        actor_id: str,
        tenant_id: str | None = None,
    ) -> EntitlementAssignment:
        """Change only the status of an assignment, following the allowed transitions.

        Raises:
            ResourceNotFoundException: Unknown id (or id of another tenant).
            InvalidStatusTransitionException: Transition not allowed from the current status.
        """
        current = await self.repo.get_assignment(assignment_id)
        if current is None or (tenant_id is not None and current.tenant_id != tenant_id):
            raise ResourceNotFoundException(ENTITY_TYPE, assignment_id)
        if new_status not in ASSIGNMENT_STATUS_TRANSITIONS[current.status]:
            raise InvalidStatusTransitionException(
                assignment_id, current.status.value, new_status.value
            )

        updated = replace(current, status=new_status)
        await self.repo.save(updated)
        logger.info(
            "Assignment %s status %s -> %s by %s",
            assignment_id,
            current.status.value,
            new_status.value,
            actor_id,
        )
        await self.audit_sink.record(
            AuditEntry(
                tenant_id=current.tenant_id,
                actor_id=actor_id,
                action=AuditAction.STATUS_CHANGED,
                entity_type=ENTITY_TYPE,
                entity_id=assignment_id,
                before={"status": current.status.value},
                after={"status": new_status.value},
            )
        )
        return updated


def _audit_view(record: EntitlementAssignment) -> dict[str, Any]:
    """Flat JSON-friendly view of an assignment for audit before/after."""
    view = asdict(record)
    window = view.pop("window")
    view["subject_type"] = record.subject_type.value
    view["status"] = record.status.value
    view["assignment_source"] = record.assignment_source.value
    view["valid_from"] = to_iso(window["valid_from"])
    view["valid_until"] = to_iso(window["valid_until"])
    view["granted_at"] = to_iso(record.granted_at)
    return view
