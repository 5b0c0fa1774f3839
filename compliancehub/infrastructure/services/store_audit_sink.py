"""Store-backed audit sink: appends entries to the auditEvents collection (IAuditSink)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from compliancehub.core.constants import COLLECTION_AUDIT_EVENTS, ID_PREFIX_AUDIT
from compliancehub.shared.telemetry.logging import get_logger
from compliancehub.shared.utils.datetime import utc_now
from compliancehub.shared.utils.generators import composite_id, generate_cuid

if TYPE_CHECKING:
    from compliancehub.application.dtos.audit import AuditEntry
    from compliancehub.application.interfaces.store import IRecordStore

logger = get_logger(__name__)

_SENSITIVE_KEYS = frozenset(
    {"password", "secret", "api_key", "token", "credentials", "access_token", "refresh_token"}
)


class StoreAuditSink:
    """Writes one auditEvents row per entry. Never raises into the caller."""

    def __init__(self, store: IRecordStore) -> None:
        self._store = store

    async def record(self, entry: AuditEntry) -> None:
        event_id = composite_id(ID_PREFIX_AUDIT, generate_cuid())
        row = {
            "id": event_id,
            "tenantId": entry.tenant_id,
            "actorUid": entry.actor_id,
            "actorType": entry.actor_type.value,
            "action": entry.action.value,
            "entityType": entry.entity_type,
            "entityId": entry.entity_id,
            "before": _sanitize(entry.before),
            "after": _sanitize(entry.after),
            "timestamp": utc_now().isoformat(),
        }
        try:
            result = await self._store.save(COLLECTION_AUDIT_EVENTS, event_id, row)
        except Exception:
            logger.exception(
                "Audit write failed for %s %s (%s)",
                entry.entity_type,
                entry.entity_id,
                entry.action.value,
            )
            return
        if not result.success:
            logger.error(
                "Audit write failed for %s %s (%s): %s",
                entry.entity_type,
                entry.entity_id,
                entry.action.value,
                result.error,
            )
        else:
            logger.debug(
                "Recorded audit event %s for %s.%s (entity_id: %s)",
                event_id,
                entry.entity_type,
                entry.action.value,
                entry.entity_id,
            )


def _sanitize(data: dict[str, Any] | None) -> dict[str, Any] | None:
    """JSON-safe copy with secrets redacted."""
    if data is None:
        return None
    return {key: _sanitize_value(key, value) for key, value in data.items()}


def _sanitize_value(key: str, value: Any) -> Any:
    if key.lower() in _SENSITIVE_KEYS:
        return "[REDACTED]"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _sanitize_value(k, v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [_sanitize_value(key, item) for item in value]
    return value
