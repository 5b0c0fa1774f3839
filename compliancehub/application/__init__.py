"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (record stores, audit sink).
"""

from compliancehub.application.interfaces import (
    IAuditSink,
    IEntitlementRepository,
    IRecordStore,
)
from compliancehub.application.use_cases import (
    AssignmentService,
    BackfillMigrationUseCase,
    CompareBeforeAfterUseCase,
    ResolveEffectiveAccessUseCase,
)

__all__ = [
    "AssignmentService",
    "BackfillMigrationUseCase",
    "CompareBeforeAfterUseCase",
    "IAuditSink",
    "IEntitlementRepository",
    "IRecordStore",
    "ResolveEffectiveAccessUseCase",
]
