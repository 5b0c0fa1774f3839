"""Infrastructure services: implementations of application service ports."""

from compliancehub.infrastructure.services.store_audit_sink import StoreAuditSink

__all__ = ["StoreAuditSink"]
