"""Pydantic schemas for project create/update requests and responses."""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from buildsketch.domain.stages import HouseType
from buildsketch.domain.status import ProjectStatus

# Fields that may be explicitly cleared with null in an update
NULLABLE_UPDATE_FIELDS = frozenset(
    {"actual_finish", "assigned_to_id", "delay_reason", "client_name", "client_requirements"}
)

_DATE_FIELDS = ("start_date", "target_finish", "actual_finish")


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ProjectCreate(BaseModel):
    external_code: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    house_type: HouseType
    target_finish: datetime
    assigned_to_id: str | None = None
    client_name: str | None = None
    client_requirements: str | None = None
    notes: str = ""

    @field_validator("target_finish")
    @classmethod
    def _utc_target(cls, value: datetime) -> datetime:
        return _as_utc(value)


class ProjectUpdate(BaseModel):
    """Partial change set. Only fields the caller actually sent are applied.

    ``percent_complete``, ``delay_days`` and ``original_target`` are not
    accepted: they are owned by the engine.
    """

    model_config = ConfigDict(extra="forbid")

    external_code: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    house_type: HouseType | None = None
    stage: str | None = Field(default=None, min_length=1, max_length=100)
    status: ProjectStatus | None = None
    start_date: datetime | None = None
    target_finish: datetime | None = None
    actual_finish: datetime | None = None
    client_delay_days: int | None = Field(default=None, ge=0)
    is_delayed: bool | None = None
    delay_reason: str | None = None
    assigned_to_id: str | None = None
    client_name: str | None = None
    client_requirements: str | None = None
    notes: str | None = None

    @field_validator(*_DATE_FIELDS)
    @classmethod
    def _utc_dates(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @model_validator(mode="after")
    def _reject_null_for_required(self) -> "ProjectUpdate":
        cleared = [
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name not in NULLABLE_UPDATE_FIELDS
        ]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(cleared))}")
        return self

    def supplied(self) -> dict[str, Any]:
        """Fields the caller sent, including explicit nulls."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    external_code: str
    name: str
    house_type: HouseType
    stage: str
    percent_complete: int
    status: ProjectStatus
    start_date: datetime
    original_target: datetime
    target_finish: datetime
    actual_finish: datetime | None
    delay_days: int
    client_delay_days: int
    is_delayed: bool
    delay_reason: str | None
    assigned_to_id: str | None
    client_name: str | None
    client_requirements: str | None
    notes: str
    created_at: datetime
    updated_at: datetime


class HistoryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    changed_by: str
    changed_by_id: str | None
    field_name: str
    old_value: str | None
    new_value: str | None
    created_at: datetime


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage_name: str
    percent: int
    position: int
