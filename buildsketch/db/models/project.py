"""Project model: one row per construction job."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, Integer, String, Text, Uuid

from buildsketch.db.base import Base
from buildsketch.db.types import UTCDateTime


class Project(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_code = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)

    house_type = Column(String(20), nullable=False)  # Single, Double
    stage = Column(String(100), nullable=False)
    percent_complete = Column(Integer, nullable=False, default=0)  # derived from stage_configs
    status = Column(String(50), nullable=False, default="On Track")

    start_date = Column(UTCDateTime, nullable=False)
    original_target = Column(UTCDateTime, nullable=False)  # SLA baseline, never touched by automation
    target_finish = Column(UTCDateTime, nullable=False)
    actual_finish = Column(UTCDateTime, nullable=True)

    delay_days = Column(Integer, nullable=False, default=0)  # high-water mark, SLA owned
    client_delay_days = Column(Integer, nullable=False, default=0)  # manual, caller owned
    is_delayed = Column(Boolean, nullable=False, default=False)
    delay_reason = Column(Text, nullable=True)

    assigned_to_id = Column(String(255), nullable=True)
    client_name = Column(String(255), nullable=True)
    client_requirements = Column(Text, nullable=True)
    notes = Column(Text, nullable=False, default="")

    created_by_id = Column(String(255), nullable=False)
    version = Column(Integer, nullable=False)

    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Optimistic lost-update detection on top of the row lock
    __mapper_args__ = {"version_id_col": version}
