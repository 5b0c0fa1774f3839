"""Application use cases: one entry point per workflow."""

from compliancehub.application.use_cases.access import ResolveEffectiveAccessUseCase
from compliancehub.application.use_cases.assignments import AssignmentService
from compliancehub.application.use_cases.migration import (
    BackfillMigrationUseCase,
    CompareBeforeAfterUseCase,
)

__all__ = [
    "AssignmentService",
    "BackfillMigrationUseCase",
    "CompareBeforeAfterUseCase",
    "ResolveEffectiveAccessUseCase",
]
