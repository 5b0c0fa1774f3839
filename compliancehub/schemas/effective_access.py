"""Effective access API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from compliancehub.application.dtos.effective_access import (
    EffectiveAccessReport,
    EffectiveGrant,
    GrantSource,
)


class GrantSourceResponse(BaseModel):
    """One assignment (or service account) contributing to a grant."""

    assignment_id: str
    subject_type: str | None
    subject_id: str
    scope_org_unit_id: str | None = None
    scope_include_children: bool = False
    scope_resource_context: str | None = None

    @classmethod
    def from_source(cls, source: GrantSource) -> GrantSourceResponse:
        return cls(
            assignment_id=source.assignment_id,
            subject_type=source.subject_type.value if source.subject_type else None,
            subject_id=source.subject_id,
            scope_org_unit_id=source.scope.org_unit_id,
            scope_include_children=source.scope.include_children,
            scope_resource_context=source.scope.resource_context,
        )


class EffectiveGrantResponse(BaseModel):
    """An entitlement the subject holds right now."""

    entitlement_id: str
    resource_id: str
    name: str
    is_admin: bool
    contributing_assignment_ids: list[str]
    sources: list[GrantSourceResponse]

    @classmethod
    def from_grant(cls, grant: EffectiveGrant) -> EffectiveGrantResponse:
        return cls(
            entitlement_id=grant.entitlement_id,
            resource_id=grant.resource_id,
            name=grant.name,
            is_admin=grant.is_admin,
            contributing_assignment_ids=grant.contributing_assignment_ids,
            sources=[GrantSourceResponse.from_source(s) for s in grant.sources],
        )


class ResolutionStatsResponse(BaseModel):
    """Rows considered by the resolver and why some were dropped."""

    model_config = ConfigDict(from_attributes=True)

    matched_rows: int
    excluded_by_status: int
    excluded_by_window: int
    malformed_rows: int
    dangling_entitlement_ids: list[str] = Field(default_factory=list)


class EffectiveAccessResponse(BaseModel):
    """Effective access of one person or service account at as_of."""

    subject_id: str
    subject_kind: str
    tenant_id: str
    as_of: datetime
    grants: list[EffectiveGrantResponse]
    stats: ResolutionStatsResponse

    @classmethod
    def from_report(cls, report: EffectiveAccessReport) -> EffectiveAccessResponse:
        return cls(
            subject_id=report.subject_id,
            subject_kind=report.subject_kind,
            tenant_id=report.tenant_id,
            as_of=report.as_of,
            grants=[EffectiveGrantResponse.from_grant(g) for g in report.grants],
            stats=ResolutionStatsResponse.model_validate(report.stats),
        )
