"""Application services: effective access resolution and legacy access computation."""

from compliancehub.application.services.effective_access import (
    build_membership,
    compute_effective_access,
    compute_service_account_access,
    partition_assignments,
)
from compliancehub.application.services.legacy_access import compute_legacy_access

__all__ = [
    "build_membership",
    "compute_effective_access",
    "compute_legacy_access",
    "compute_service_account_access",
    "partition_assignments",
]
