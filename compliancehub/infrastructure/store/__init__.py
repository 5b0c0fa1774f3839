"""Record store backends and the typed entitlement repository built on them."""

from compliancehub.infrastructure.store.entitlement_repository import StoreEntitlementRepository
from compliancehub.infrastructure.store.factory import close_record_store, open_record_store
from compliancehub.infrastructure.store.memory_store import InMemoryRecordStore

__all__ = [
    "InMemoryRecordStore",
    "StoreEntitlementRepository",
    "close_record_store",
    "open_record_store",
]
