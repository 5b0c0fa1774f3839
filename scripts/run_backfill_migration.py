"""Run the entitlement backfill migration against the configured record store.

Usage:
    uv run python -m scripts.run_backfill_migration [tenant_id] [--include-requested]
Without tenant_id every tenant is migrated. Safe to re-run: existing records
are skipped. Uses STORE_BACKEND (firestore or postgres; memory has nothing to migrate).
"""

import asyncio
import sys

from compliancehub.application.dtos.migration import BackfillScope
from compliancehub.application.use_cases.migration import BackfillMigrationUseCase
from compliancehub.core.config import get_settings
from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.services import StoreAuditSink
from compliancehub.infrastructure.store import (
    StoreEntitlementRepository,
    close_record_store,
    open_record_store,
)
from compliancehub.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Run one backfill and print its counters."""
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    flags = {a for a in sys.argv[1:] if a.startswith("--")}
    unknown = flags - {"--include-requested"}
    if unknown or len(args) > 1:
        print(
            "Usage: uv run python -m scripts.run_backfill_migration "
            "[tenant_id] [--include-requested]",
            file=sys.stderr,
        )
        sys.exit(1)

    settings = get_settings()
    setup_logging()
    try:
        store = await open_record_store(settings)
    except StoreNotConfiguredException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)

    try:
        use_case = BackfillMigrationUseCase(
            StoreEntitlementRepository(store), StoreAuditSink(store)
        )
        scope = BackfillScope(
            tenant_id=args[0] if args else None,
            include_requested_assignments=(
                "--include-requested" in flags
                or settings.migration_include_requested_assignments
            ),
            actor_id=settings.migration_actor_id,
        )
        result = await use_case.run(scope)
    finally:
        await close_record_store(settings)

    if not result.success or result.data is None:
        print(f"Backfill failed ({result.error_code}): {result.error}", file=sys.stderr)
        sys.exit(1)
    run = result.data
    print(f"Tenants: {', '.join(run.tenant_ids) or '-'}")
    for key, value in run.counters.to_dict().items():
        print(f"  {key}: {value}")
    for record_id in run.failed_record_ids:
        print(f"  failed: {record_id}")
    if run.counters.write_failures:
        sys.exit(2)


if __name__ == "__main__":
    asyncio.run(main())
