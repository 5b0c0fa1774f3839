"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from compliancehub.application.dtos.audit import AuditEntry


class IAuditSink(Protocol):
    """Append-only audit log (actor / action / entity / before / after).

    Fire-and-forget: implementations must not raise into the caller.
    """

    async def record(self, entry: AuditEntry) -> None:
        """Append one audit entry."""
