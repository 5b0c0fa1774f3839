"""Entitlement catalog entity (immutable reference data)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Entitlement:
    """A grantable unit of access to a resource."""

    id: str
    resource_id: str
    name: str
    tenant_id: str | None = None
    is_admin: bool = False
    description: str | None = None
