from sqlalchemy import Column, Integer, String, Enum, DateTime, Float, Text, Index
from datetime import datetime
import uuid
from models.base import Base, SyncStatus


class SyncRun(Base):
    """
    Tracks metadata for each entity-kind sync.

    Purpose:
    - Audit trail of every full re-pull
    - Last-success / last-failure reporting on the health endpoint
    """
    __tablename__ = "sync_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(String(36), default=lambda: str(uuid.uuid4()), unique=True, nullable=False)

    entity_kind = Column(String(100), nullable=False, index=True)
    status = Column(Enum(SyncStatus), default=SyncStatus.RUNNING, nullable=False)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    pages_fetched = Column(Integer, default=0)
    records_loaded = Column(Integer, default=0)
    total_records_reported = Column(Integer, nullable=True)

    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_sync_run_kind_started", "entity_kind", "started_at"),
    )
