"""Backfill migration and verification API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from compliancehub.application.dtos.migration import BackfillRunResult
from compliancehub.application.dtos.verification import VerificationReport


class BackfillRequest(BaseModel):
    """Request body for a backfill run. Omit tenant_id to migrate every tenant."""

    tenant_id: str | None = Field(default=None, min_length=1, max_length=128)
    include_requested_assignments: bool | None = Field(
        default=None,
        description="Also migrate legacy rows in requested/pending_removal "
        "(defaults to MIGRATION_INCLUDE_REQUESTED_ASSIGNMENTS)",
    )


class BackfillCountersResponse(BaseModel):
    """Aggregate counters of one run."""

    model_config = ConfigDict(from_attributes=True)

    org_unit_types_created: int
    org_units_created: int
    positions_created: int
    user_org_units_created: int
    user_positions_created: int
    entitlement_assignments_created: int
    skipped_existing: int
    departments_unmatched: int
    legacy_owners_missing: int
    legacy_status_excluded: int
    write_failures: int


class BackfillRunResponse(BaseModel):
    """Result of a backfill run."""

    tenant_id: str | None
    tenant_ids: list[str]
    include_requested_assignments: bool
    counters: BackfillCountersResponse
    total_created: int
    started_at: datetime
    finished_at: datetime
    failed_record_ids: list[str]

    @classmethod
    def from_result(cls, result: BackfillRunResult) -> BackfillRunResponse:
        return cls(
            tenant_id=result.scope.tenant_id,
            tenant_ids=list(result.tenant_ids),
            include_requested_assignments=result.scope.include_requested_assignments,
            counters=BackfillCountersResponse.model_validate(result.counters),
            total_created=result.counters.total_created,
            started_at=result.started_at,
            finished_at=result.finished_at,
            failed_record_ids=list(result.failed_record_ids),
        )


class AccessDiffResponse(BaseModel):
    """Per-person before/after difference."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    missing_after: list[str]
    gained_after: list[str]
    uncatalogued: list[str]
    before_count: int
    after_count: int


class VerificationSummaryResponse(BaseModel):
    """Aggregate counts over all checked persons."""

    model_config = ConfigDict(from_attributes=True)

    users_checked: int
    users_with_diff: int
    users_without_diff: int
    total_missing_after: int
    total_gained_after: int
    total_uncatalogued: int


class VerificationResponse(BaseModel):
    """Result of comparing legacy access with resolved access."""

    tenant_id: str | None
    verified_at: datetime
    summary: VerificationSummaryResponse
    diffs: list[AccessDiffResponse]

    @classmethod
    def from_report(cls, report: VerificationReport) -> VerificationResponse:
        return cls(
            tenant_id=report.tenant_id,
            verified_at=report.verified_at,
            summary=VerificationSummaryResponse.model_validate(report.summary),
            diffs=[AccessDiffResponse.model_validate(d) for d in report.diffs],
        )
