"""Tests for status derivation and the accountability rule."""
import pytest

from buildsketch.domain.status import (
    AccountabilityResult,
    ProjectStatus,
    check_accountability,
    derive_status,
)

pytestmark = pytest.mark.unit


class TestProjectStatusEnum:
    def test_values(self):
        assert ProjectStatus.ON_TRACK.value == "On Track"
        assert ProjectStatus.CLIENT_DELAY.value == "Client Delay"
        assert ProjectStatus.PAST_TARGET.value == "Past Target"
        assert ProjectStatus.COMPLETED.value == "Completed"


class TestDeriveStatus:
    def test_on_track_when_no_delay(self):
        assert derive_status(ProjectStatus.ON_TRACK, 40, 0, False) == ProjectStatus.ON_TRACK

    def test_past_target_when_late(self):
        assert derive_status(ProjectStatus.ON_TRACK, 40, 2, False) == ProjectStatus.PAST_TARGET

    def test_back_on_track_when_delay_cleared(self):
        assert derive_status(ProjectStatus.PAST_TARGET, 40, 0, False) == ProjectStatus.ON_TRACK

    def test_completion_wins_over_delay(self):
        assert derive_status(ProjectStatus.PAST_TARGET, 100, 9, True) == ProjectStatus.COMPLETED

    def test_sla_flag_forces_past_target(self):
        assert derive_status(ProjectStatus.ON_TRACK, 40, 0, True) == ProjectStatus.PAST_TARGET

    def test_client_delay_is_sticky(self):
        assert derive_status(ProjectStatus.CLIENT_DELAY, 40, 5, False) == ProjectStatus.CLIENT_DELAY
        assert derive_status(ProjectStatus.CLIENT_DELAY, 40, 0, False) == ProjectStatus.CLIENT_DELAY

    def test_sla_flag_does_not_break_client_delay(self):
        assert derive_status(ProjectStatus.CLIENT_DELAY, 40, 5, True) == ProjectStatus.CLIENT_DELAY

    def test_completion_breaks_client_delay(self):
        assert derive_status(ProjectStatus.CLIENT_DELAY, 100, 5, True) == ProjectStatus.COMPLETED


class TestCheckAccountability:
    def test_not_delayed_always_allowed(self):
        assert check_accountability(False, ProjectStatus.COMPLETED, None).allowed is True

    def test_not_completed_always_allowed(self):
        assert check_accountability(True, ProjectStatus.PAST_TARGET, None).allowed is True
        assert check_accountability(True, ProjectStatus.CLIENT_DELAY, "").allowed is True

    def test_delayed_completion_without_reason_rejected(self):
        result = check_accountability(True, ProjectStatus.COMPLETED, None)
        assert isinstance(result, AccountabilityResult)
        assert result.allowed is False
        assert "reason" in result.reason.lower()

    def test_empty_and_whitespace_are_not_reasons(self):
        assert check_accountability(True, ProjectStatus.COMPLETED, "").allowed is False
        assert check_accountability(True, ProjectStatus.COMPLETED, "   ").allowed is False

    def test_reason_on_record_accepted(self):
        assert check_accountability(True, ProjectStatus.COMPLETED, "Steel supplier strike").allowed is True
