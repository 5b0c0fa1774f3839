"""Application DTOs: results and inputs for use cases (no dependency on storage)."""

from compliancehub.application.dtos.assignment import AssignmentInput
from compliancehub.application.dtos.audit import AuditEntry
from compliancehub.application.dtos.effective_access import (
    EffectiveAccessReport,
    EffectiveGrant,
    GrantSource,
    ResolutionStats,
)
from compliancehub.application.dtos.migration import (
    BackfillCounters,
    BackfillRunResult,
    BackfillScope,
)
from compliancehub.application.dtos.operation import OperationResult
from compliancehub.application.dtos.verification import (
    AccessDiff,
    VerificationReport,
    VerificationSummary,
)

__all__ = [
    "AccessDiff",
    "AssignmentInput",
    "AuditEntry",
    "BackfillCounters",
    "BackfillRunResult",
    "BackfillScope",
    "EffectiveAccessReport",
    "EffectiveGrant",
    "GrantSource",
    "OperationResult",
    "ResolutionStats",
    "VerificationReport",
    "VerificationSummary",
]
