"""Project status derivation and the delay accountability rule.

Pure functions with no external dependencies.
"""
from dataclasses import dataclass
from enum import Enum


class ProjectStatus(str, Enum):
    """Schedule status shown to users. CLIENT_DELAY is sticky against automation."""

    ON_TRACK = "On Track"
    CLIENT_DELAY = "Client Delay"
    PAST_TARGET = "Past Target"
    COMPLETED = "Completed"


def derive_status(
    current_status: ProjectStatus,
    percent_complete: int,
    effective_delay: int,
    is_delayed: bool,
) -> ProjectStatus:
    """Compute the status automation would assign.

    Rules, in order:
        - 100% complete -> COMPLETED (always wins)
        - positive delay -> PAST_TARGET, else ON_TRACK
        - SLA-flagged projects are forced to PAST_TARGET unless complete
        - a current CLIENT_DELAY is kept unless the result is COMPLETED

    Returns:
        The derived status; equal to ``current_status`` when nothing should change.
    """
    if percent_complete == 100:
        auto_status = ProjectStatus.COMPLETED
    elif effective_delay > 0:
        auto_status = ProjectStatus.PAST_TARGET
    else:
        auto_status = ProjectStatus.ON_TRACK

    if is_delayed and auto_status != ProjectStatus.COMPLETED:
        auto_status = ProjectStatus.PAST_TARGET

    if current_status == ProjectStatus.CLIENT_DELAY and auto_status != ProjectStatus.COMPLETED:
        return current_status

    return auto_status


@dataclass
class AccountabilityResult:
    """Outcome of the delay accountability check."""

    allowed: bool
    reason: str = ""


def check_accountability(
    is_delayed: bool,
    resulting_status: ProjectStatus,
    resulting_reason: str | None,
) -> AccountabilityResult:
    """A delayed project may only be stored as Completed with a delay reason on record.

    Checked against the values that would be saved, so clearing the reason
    on a completed project is caught as well as completing without one.
    """
    if not (is_delayed and resulting_status == ProjectStatus.COMPLETED):
        return AccountabilityResult(True)

    if _has_text(resulting_reason):
        return AccountabilityResult(True)

    return AccountabilityResult(
        False,
        "SLA violation: a reason for delay must be provided before completing a delayed project",
    )


def _has_text(value: str | None) -> bool:
    return value is not None and value.strip() != ""
