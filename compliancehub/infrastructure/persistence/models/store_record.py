"""StoreRecord ORM model: one schemaless JSON document per (collection, record id)."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Identity, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from compliancehub.infrastructure.persistence.database import Base


class StoreRecord(Base):
    """Row of a platform collection. Table: store_records.

    The composite primary key makes conditional create a plain
    INSERT ... ON CONFLICT DO NOTHING. seq preserves insertion (store) order.
    """

    __tablename__ = "store_records"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    record_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    seq: Mapped[int] = mapped_column(BigInteger, Identity(), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_store_records_collection_seq", "collection", "seq"),)
