"""SlaMonitor: opportunistic schedule-compliance scans.

Triggered from read paths (and by external sweeps), never by an internal
timer. Each scan runs in its own transaction with the project row locked.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from buildsketch.core.clock import Clock, SystemClock
from buildsketch.core.config import Settings, get_settings
from buildsketch.core.exceptions import ConflictRetryError, ProjectNotFoundError
from buildsketch.core.locking import lock_project
from buildsketch.db.models.project import Project
from buildsketch.domain.actors import Actor
from buildsketch.domain.lifecycle import ProjectState
from buildsketch.domain.sla import plan_compliance
from buildsketch.domain.status import ProjectStatus
from buildsketch.services.audit_trail import AuditTrailWriter

logger = structlog.get_logger(__name__)


class SlaMonitor:
    """Flags unattended projects and rolls the working target forward."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock | None = None,
        settings: Settings | None = None,
        audit: AuditTrailWriter | None = None,
    ):
        self.session_factory = session_factory
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()
        self.audit = audit or AuditTrailWriter()
        self.sla_actor = Actor.system(self.settings.system_sla_actor)
        self.shift_actor = Actor.system(self.settings.system_shift_actor)

    async def check_compliance(self, project_id: uuid.UUID | str) -> bool:
        """Run one compliance scan.

        Returns:
            True if the project was changed, False for a no-op scan.

        Raises:
            ProjectNotFoundError: unknown project
            ConflictRetryError: a concurrent writer won the race
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    project = await lock_project(session, project_id)
                    now = self.clock.now()
                    plan = plan_compliance(
                        ProjectState.from_attrs(project),
                        now,
                        self.settings.sla_unattended_hours,
                    )
                    if not plan.changed:
                        return False

                    for name, value in plan.changes.items():
                        setattr(project, name, value)
                    await session.flush()

                    entries = self.audit.build(project.id, plan.flag_changes, self.sla_actor, now)
                    entries += self.audit.build(
                        project.id, plan.shift_changes, self.shift_actor, now, start=len(entries)
                    )
                    await self.audit.append(session, entries)
        except StaleDataError as exc:
            logger.warning("project_update_conflict", project_id=str(project_id), source="sla_monitor")
            raise ConflictRetryError(project_id) from exc

        if "is_delayed" in plan.changes:
            logger.info("sla_flagged_delayed", project_id=str(project.id))
        if "delay_days" in plan.changes:
            logger.info(
                "sla_target_shifted",
                project_id=str(project.id),
                delay_days=plan.changes["delay_days"],
                target_finish=project.target_finish.isoformat(),
            )
        return True

    async def sweep(self) -> int:
        """Scan every open project once. Returns how many were changed."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Project.id).where(Project.status != ProjectStatus.COMPLETED.value)
            )
            project_ids = list(result.scalars().all())

        changed = 0
        for project_id in project_ids:
            try:
                if await self.check_compliance(project_id):
                    changed += 1
            except ProjectNotFoundError:
                # Removed between the listing and the scan
                continue
            except ConflictRetryError:
                logger.info("sla_sweep_conflict_skipped", project_id=str(project_id))
                continue

        logger.info("sla_sweep_complete", scanned=len(project_ids), changed=changed)
        return changed
