"""Integration tests for SlaMonitor."""

import uuid
from datetime import timedelta

import pytest

from buildsketch.core.config import Settings
from buildsketch.core.exceptions import PolicyViolationError, ProjectNotFoundError
from buildsketch.services.project_engine import ProjectUpdateEngine
from buildsketch.services.sla_monitor import SlaMonitor
from tests.conftest import NOW

pytestmark = pytest.mark.integration


@pytest.fixture
def monitor(session_factory, clock):
    return SlaMonitor(session_factory, clock, settings=Settings())


class TestCheckCompliance:
    async def test_young_project_is_a_no_op(self, monitor, make_project, load_history):
        project = await make_project(start_date=NOW - timedelta(hours=3))

        assert await monitor.check_compliance(project.id) is False
        assert await load_history(project.id) == []

    async def test_unattended_project_flagged_and_shifted(
        self, monitor, make_project, load_project, load_history
    ):
        original = NOW - timedelta(hours=36)
        project = await make_project(start_date=NOW - timedelta(days=30), original_target=original)

        assert await monitor.check_compliance(project.id) is True

        reloaded = await load_project(project.id)
        assert reloaded.is_delayed is True
        assert reloaded.delay_days == 2
        assert reloaded.target_finish == original + timedelta(days=2)
        assert reloaded.original_target == original

        history = await load_history(project.id)
        assert [(h.field_name, h.changed_by) for h in history] == [
            ("is_delayed", "System (SLA)"),
            ("delay_days", "System (Auto-Shift)"),
            ("target_finish", "System (Auto-Shift)"),
        ]
        assert all(h.changed_by_id is None for h in history)

    async def test_repeat_scan_is_idempotent(self, monitor, make_project, load_project, load_history):
        project = await make_project(
            start_date=NOW - timedelta(days=30), original_target=NOW - timedelta(days=2)
        )
        await monitor.check_compliance(project.id)
        first = await load_project(project.id)
        entries = len(await load_history(project.id))

        assert await monitor.check_compliance(project.id) is False

        second = await load_project(project.id)
        assert second.version == first.version
        assert len(await load_history(project.id)) == entries

    async def test_delay_grows_as_time_passes(self, monitor, clock, make_project, load_project):
        project = await make_project(
            start_date=NOW - timedelta(days=30), original_target=NOW - timedelta(hours=1)
        )
        await monitor.check_compliance(project.id)
        assert (await load_project(project.id)).delay_days == 1

        clock.advance(days=3)
        await monitor.check_compliance(project.id)

        assert (await load_project(project.id)).delay_days == 4

    async def test_completed_project_untouched(self, monitor, make_project, load_history):
        project = await make_project(
            start_date=NOW - timedelta(days=60),
            original_target=NOW - timedelta(days=5),
            status="Completed",
            stage="Finalisation",
            percent_complete=100,
        )

        assert await monitor.check_compliance(project.id) is False
        assert await load_history(project.id) == []

    async def test_unknown_project(self, monitor):
        with pytest.raises(ProjectNotFoundError):
            await monitor.check_compliance(uuid.uuid4())

    async def test_flagged_project_needs_reason_to_complete(
        self, monitor, session_factory, clock, actor, make_project
    ):
        project = await make_project(
            start_date=NOW - timedelta(days=3), stage="Engineer Review", percent_complete=90
        )
        await monitor.check_compliance(project.id)
        engine = ProjectUpdateEngine(session_factory, clock)

        with pytest.raises(PolicyViolationError):
            await engine.apply_update(project.id, {"stage": "Finalisation"}, actor)

        updated = await engine.apply_update(
            project.id, {"stage": "Finalisation", "delay_reason": "Waited on engineer"}, actor
        )
        assert updated.status == "Completed"


class TestSweep:
    async def test_sweep_scans_open_projects(self, monitor, make_project, load_project):
        young = await make_project(start_date=NOW - timedelta(hours=2))
        aged = await make_project(start_date=NOW - timedelta(days=2))
        done = await make_project(
            start_date=NOW - timedelta(days=40),
            status="Completed",
            stage="Finalisation",
            percent_complete=100,
        )

        assert await monitor.sweep() == 1

        assert (await load_project(aged.id)).is_delayed is True
        assert (await load_project(young.id)).is_delayed is False
        assert (await load_project(done.id)).is_delayed is False

    async def test_second_sweep_changes_nothing(self, monitor, make_project):
        await make_project(start_date=NOW - timedelta(days=2))

        assert await monitor.sweep() == 1
        assert await monitor.sweep() == 0
