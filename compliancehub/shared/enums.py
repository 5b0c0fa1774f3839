"""Shared enumerations for the entitlement engine.

Cross-cutting enums used by application and infrastructure (audit, actor
type). Entitlement-specific enums (assignment status, subject type) live in
compliancehub.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActorType(_ValuesMixin, str, Enum):
    """Actor type for audit tracking (who performed the action)."""

    USER = "user"
    SYSTEM = "system"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types recorded by the audit sink."""

    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    MIGRATION_RUN = "migration_run"
