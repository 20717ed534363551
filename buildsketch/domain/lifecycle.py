"""Project lifecycle planning: turn a partial change set into staged field changes.

Pure domain logic. The caller loads the current state, looks up the stage
percent, and persists the returned plan; nothing here touches the database.
"""
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime, tzinfo
from enum import Enum
from typing import Any

from buildsketch.domain.schedule import delay_days, shifted_target
from buildsketch.domain.stages import HouseType
from buildsketch.domain.status import ProjectStatus, derive_status

# Fields diffed verbatim when present in a change set, in audit order
MANUAL_FIELDS = (
    "external_code",
    "name",
    "house_type",
    "notes",
    "client_name",
    "client_requirements",
    "delay_reason",
    "status",
)


@dataclass(frozen=True)
class ProjectState:
    """Snapshot of the mutable project fields the engine reasons about."""

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

    @classmethod
    def from_attrs(cls, obj: Any) -> "ProjectState":
        """Build a snapshot from any object exposing the same attribute names (e.g. an ORM row)."""
        values = {f.name: getattr(obj, f.name) for f in fields(cls)}
        values["house_type"] = HouseType(values["house_type"])
        values["status"] = ProjectStatus(values["status"])
        return cls(**values)


@dataclass(frozen=True)
class FieldChange:
    field: str
    old: Any
    new: Any


@dataclass
class UpdatePlan:
    """Staged changes plus one FieldChange per changed field."""

    current: ProjectState
    changes: dict[str, Any] = field(default_factory=dict)
    history: list[FieldChange] = field(default_factory=list)

    def stage(self, name: str, new: Any) -> None:
        """Stage ``new`` for ``name`` if it differs from the current value."""
        old = getattr(self.current, name)
        if old == new:
            return
        self.changes[name] = new
        self.history.append(FieldChange(name, old, new))

    def value(self, name: str) -> Any:
        """Post-change value of ``name``."""
        if name in self.changes:
            return self.changes[name]
        return getattr(self.current, name)

    @property
    def resulting_status(self) -> ProjectStatus:
        return ProjectStatus(self.value("status"))


def plan_update(
    current: ProjectState,
    update: dict[str, Any],
    *,
    stage_percent: int | None,
    now: datetime,
    tz: tzinfo = UTC,
) -> UpdatePlan:
    """Compute every field change an update implies.

    Args:
        current: State loaded inside the caller's transaction
        update: Fields the caller supplied; absent keys mean "leave alone",
            explicit None means "clear" for nullable fields
        stage_percent: Catalog percent for the effective (house_type, stage),
            or None when the pair is missing from the catalog
        now: Call time from the injected clock
        tz: Zone for noon-normalized delay math

    Returns:
        UpdatePlan; ``plan.value()`` and ``plan.resulting_status`` give the
        post-change values the accountability rule is checked against.
    """
    plan = UpdatePlan(current)

    for name in MANUAL_FIELDS:
        if name in update and update[name] is not None:
            plan.stage(name, update[name])
    if "delay_reason" in update and update["delay_reason"] is None:
        plan.stage("delay_reason", None)
    for name in ("client_name", "client_requirements"):
        if name in update and update[name] is None:
            plan.stage(name, None)

    # Client delay drives the working target: original + system + client
    if "client_delay_days" in update and update["client_delay_days"] != current.client_delay_days:
        plan.stage("client_delay_days", update["client_delay_days"])
        plan.stage(
            "target_finish",
            shifted_target(current.original_target, current.delay_days, update["client_delay_days"]),
        )

    # Stage automation
    if update.get("stage") is not None:
        plan.stage("stage", update["stage"])

    actual_finish = current.actual_finish
    if ("stage" in plan.changes or "house_type" in plan.changes) and stage_percent is not None:
        plan.stage("percent_complete", stage_percent)
        if stage_percent == 100 and current.actual_finish is None:
            actual_finish = now

    # Manual actual_finish always wins over stage-driven completion
    if "actual_finish" in update:
        actual_finish = update["actual_finish"]
    plan.stage("actual_finish", actual_finish)

    if update.get("start_date") is not None:
        plan.stage("start_date", update["start_date"])

    # A computed client-delay shift takes precedence over a manual target
    if update.get("target_finish") is not None and "target_finish" not in plan.changes:
        plan.stage("target_finish", update["target_finish"])

    if "assigned_to_id" in update:
        plan.stage("assigned_to_id", update["assigned_to_id"])

    flagged = current.is_delayed or update.get("is_delayed") is True
    if update.get("is_delayed") is True:
        plan.stage("is_delayed", True)

    explicit_status = update.get("status")
    if explicit_status is None:
        effective_delay = delay_days(
            plan.value("target_finish"),
            plan.value("actual_finish"),
            now,
            tz,
        )
        plan.stage(
            "status",
            derive_status(current.status, plan.value("percent_complete"), effective_delay, flagged),
        )

    return plan


def format_value(value: Any) -> str:
    """Render a field value the way the audit trail stores it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
