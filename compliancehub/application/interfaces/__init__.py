"""Application interfaces (ports): store, repository and service protocols."""

from compliancehub.application.interfaces.repositories import IEntitlementRepository
from compliancehub.application.interfaces.services import IAuditSink
from compliancehub.application.interfaces.store import IRecordStore, WriteResult

__all__ = [
    "IAuditSink",
    "IEntitlementRepository",
    "IRecordStore",
    "WriteResult",
]
