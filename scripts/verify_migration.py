"""Compare legacy access with resolved access after the backfill migration.

Usage:
    uv run python -m scripts.verify_migration [tenant_id]
Prints one line per person whose access differs. Exit code 2 when any
person lost access (missing after migration). Read-only.
"""

import asyncio
import sys

from compliancehub.application.use_cases.migration import CompareBeforeAfterUseCase
from compliancehub.core.config import get_settings
from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.store import (
    StoreEntitlementRepository,
    close_record_store,
    open_record_store,
)
from compliancehub.shared.telemetry.logging import setup_logging


async def main() -> None:
    if len(sys.argv) > 2:
        print("Usage: uv run python -m scripts.verify_migration [tenant_id]", file=sys.stderr)
        sys.exit(1)
    tenant_id = sys.argv[1] if len(sys.argv) == 2 else None

    settings = get_settings()
    setup_logging()
    try:
        store = await open_record_store(settings)
    except StoreNotConfiguredException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    try:
        result = await CompareBeforeAfterUseCase(StoreEntitlementRepository(store)).run(
            tenant_id=tenant_id
        )
    finally:
        await close_record_store(settings)

    if not result.success or result.data is None:
        print(f"Verification failed ({result.error_code}): {result.error}", file=sys.stderr)
        sys.exit(1)
    report = result.data
    summary = report.summary
    for diff in report.diffs:
        print(
            f"{diff.user_id} ({diff.display_name}): "
            f"missing={list(diff.missing_after)} gained={list(diff.gained_after)} "
            f"uncatalogued={list(diff.uncatalogued)}"
        )
    print(
        f"Checked {summary.users_checked} users: {summary.users_with_diff} with diff, "
        f"{summary.total_missing_after} missing, {summary.total_gained_after} gained"
    )
    if summary.total_missing_after:
        sys.exit(2)


if __name__ == "__main__":
    asyncio.run(main())
