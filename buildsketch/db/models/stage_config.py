"""StageConfig model: read-only (house_type, stage_name) -> percent catalog."""

import uuid

from sqlalchemy import Column, Integer, String, UniqueConstraint, Uuid

from buildsketch.db.base import Base


class StageConfig(Base):
    __tablename__ = "stage_configs"
    __table_args__ = (UniqueConstraint("house_type", "stage_name", name="uq_house_type_stage"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    house_type = Column(String(20), nullable=False, index=True)
    stage_name = Column(String(100), nullable=False)
    percent = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)  # order within the house type's list
