"""ProjectHistory model: append-only per-field audit trail."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid

from buildsketch.db.base import Base
from buildsketch.db.types import UTCDateTime


class ProjectHistory(Base):
    __tablename__ = "project_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)

    changed_by = Column(String(255), nullable=False)  # display name at the time of the change
    changed_by_id = Column(String(255), nullable=True)  # null for system actors
    field_name = Column(String(100), nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    sequence = Column(Integer, nullable=False, default=0)  # position within one update call

    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(UTC), index=True)
    # NO updated_at -- history rows are immutable (append-only)
