"""Persistence models."""

from compliancehub.infrastructure.persistence.models.store_record import StoreRecord

__all__ = ["StoreRecord"]
