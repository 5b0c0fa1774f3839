"""DTO for audit sink entries."""

from dataclasses import dataclass
from typing import Any

from compliancehub.shared.enums import ActorType, AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """One append-only audit record: who did what to which entity."""

    tenant_id: str
    actor_id: str
    action: AuditAction
    entity_type: str
    entity_id: str
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    actor_type: ActorType = ActorType.USER
