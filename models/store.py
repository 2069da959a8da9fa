from sqlalchemy import Column, String, DateTime, LargeBinary, ForeignKey, Index
from datetime import datetime
from models.base import Base


class Collection(Base):
    """
    A named durable collection ("bucket") inside the store.

    Design:
    - One row per entity kind (products, prices, ...)
    - Created idempotently before the first write
    """
    __tablename__ = "kv_collections"

    name = Column(String(100), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Entry(Base):
    """
    One serialized storage entity keyed by its identifier.

    Design:
    - (collection, key) is unique, so a re-fetch overwrites the prior value
    - value holds the JSON-encoded storage entity as bytes
    - Entries are never deleted by a sync
    """
    __tablename__ = "kv_entries"

    collection = Column(
        String(100),
        ForeignKey("kv_collections.name"),
        primary_key=True
    )
    key = Column(String(255), primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_kv_entries_collection", "collection"),
    )
