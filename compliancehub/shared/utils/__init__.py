"""Shared utilities: datetime and generators."""

from compliancehub.shared.utils.datetime import (
    ensure_utc,
    parse_datetime,
    to_iso,
    utc_now,
)
from compliancehub.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_datetime",
    "to_iso",
]
