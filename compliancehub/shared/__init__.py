"""Shared utilities: enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from compliancehub.shared.enums import ActorType, AuditAction
from compliancehub.shared.utils import (
    ensure_utc,
    generate_cuid,
    parse_datetime,
    utc_now,
)

__all__ = [
    "ActorType",
    "AuditAction",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_datetime",
]
