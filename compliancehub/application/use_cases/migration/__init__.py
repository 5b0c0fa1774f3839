"""Migration use cases: backfill and before/after verification."""

from compliancehub.application.use_cases.migration.compare_before_after import (
    CompareBeforeAfterUseCase,
)
from compliancehub.application.use_cases.migration.run_backfill_migration import (
    BackfillMigrationUseCase,
)

__all__ = ["BackfillMigrationUseCase", "CompareBeforeAfterUseCase"]
