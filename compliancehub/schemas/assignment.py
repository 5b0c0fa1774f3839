"""Entitlement assignment API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from compliancehub.application.dtos.assignment import AssignmentInput
from compliancehub.domain.entities import EntitlementAssignment
from compliancehub.domain.enums import AssignmentSource, AssignmentStatus, SubjectType


class AssignmentUpsertRequest(BaseModel):
    """Request body for creating (no id) or replacing an assignment."""

    id: str | None = Field(default=None, min_length=1, max_length=128)
    tenant_id: str = Field(..., min_length=1, max_length=128)
    subject_type: SubjectType
    subject_id: str = Field(..., min_length=1, max_length=128)
    entitlement_id: str = Field(..., min_length=1, max_length=128)
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    assignment_source: AssignmentSource = AssignmentSource.MANUAL
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    scope_org_unit_id: str | None = None
    scope_include_children: bool = False
    scope_resource_context: str | None = None
    ticket_ref: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=2000)
    reason: str | None = Field(default=None, max_length=500)

    def to_input(self) -> AssignmentInput:
        return AssignmentInput(
            id=self.id,
            tenant_id=self.tenant_id,
            subject_type=self.subject_type,
            subject_id=self.subject_id,
            entitlement_id=self.entitlement_id,
            status=self.status,
            assignment_source=self.assignment_source,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            scope_org_unit_id=self.scope_org_unit_id,
            scope_include_children=self.scope_include_children,
            scope_resource_context=self.scope_resource_context,
            ticket_ref=self.ticket_ref,
            notes=self.notes,
            reason=self.reason,
        )


class AssignmentStatusRequest(BaseModel):
    """Request body for a status transition."""

    status: AssignmentStatus
    tenant_id: str | None = Field(default=None, min_length=1, max_length=128)


class AssignmentResponse(BaseModel):
    """Assignment row as stored."""

    id: str
    tenant_id: str
    subject_type: str
    subject_id: str
    entitlement_id: str
    status: str
    assignment_source: str
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    scope_org_unit_id: str | None = None
    scope_include_children: bool = False
    scope_resource_context: str | None = None
    granted_by: str | None = None
    granted_at: datetime | None = None
    ticket_ref: str | None = None
    notes: str | None = None
    reason: str | None = None

    @classmethod
    def from_entity(cls, record: EntitlementAssignment) -> AssignmentResponse:
        return cls(
            id=record.id,
            tenant_id=record.tenant_id,
            subject_type=record.subject_type.value,
            subject_id=record.subject_id,
            entitlement_id=record.entitlement_id,
            status=record.status.value,
            assignment_source=record.assignment_source.value,
            valid_from=record.window.valid_from,
            valid_until=record.window.valid_until,
            scope_org_unit_id=record.scope.org_unit_id,
            scope_include_children=record.scope.include_children,
            scope_resource_context=record.scope.resource_context,
            granted_by=record.granted_by,
            granted_at=record.granted_at,
            ticket_ref=record.ticket_ref,
            notes=record.notes,
            reason=record.reason,
        )
