"""SLA compliance planning: unattended-age flagging and rolling baseline.

Pure functions with no external dependencies.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from buildsketch.domain.lifecycle import FieldChange, ProjectState
from buildsketch.domain.schedule import hours_between, rolling_delay_days, shifted_target
from buildsketch.domain.status import ProjectStatus

DEFAULT_UNATTENDED_HOURS = 24


@dataclass
class CompliancePlan:
    """Changes an SLA scan would apply, split by the system actor that owns them."""

    changes: dict[str, Any] = field(default_factory=dict)
    flag_changes: list[FieldChange] = field(default_factory=list)
    shift_changes: list[FieldChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def plan_compliance(
    current: ProjectState,
    now: datetime,
    threshold_hours: int = DEFAULT_UNATTENDED_HOURS,
) -> CompliancePlan:
    """Decide what a compliance scan changes.

    Rules:
        - Completed projects are never touched
        - Nothing happens until the project is older than ``threshold_hours``
        - is_delayed flips false -> true once and stays
        - delay_days only grows: it takes the rolling lateness against
          original_target when that is positive and larger, and target_finish
          is re-based on original_target

    Idempotent: re-running with the same ``now`` yields an empty plan.
    """
    plan = CompliancePlan()

    if current.status == ProjectStatus.COMPLETED:
        return plan

    if hours_between(current.start_date, now) <= threshold_hours:
        return plan

    if not current.is_delayed:
        plan.changes["is_delayed"] = True
        plan.flag_changes.append(FieldChange("is_delayed", False, True))

    rolling = rolling_delay_days(now, current.original_target)
    if rolling > current.delay_days and rolling > 0:
        plan.changes["delay_days"] = rolling
        plan.shift_changes.append(FieldChange("delay_days", current.delay_days, rolling))

        new_target = shifted_target(current.original_target, rolling, current.client_delay_days)
        if new_target != current.target_finish:
            plan.changes["target_finish"] = new_target
            plan.shift_changes.append(FieldChange("target_finish", current.target_finish, new_target))

    return plan
