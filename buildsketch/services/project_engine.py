"""ProjectUpdateEngine: applies partial updates to a project atomically.

This is the integration point where the pure lifecycle planner meets
SQLAlchemy. One call = one transaction: lock, plan, enforce policy, write
state, write audit. Either everything commits or nothing does.
"""

import uuid
from datetime import tzinfo
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from buildsketch.core.clock import Clock, SystemClock
from buildsketch.core.config import get_schedule_tz
from buildsketch.core.exceptions import (
    ActorRequiredError,
    ConflictRetryError,
    InvalidUpdateError,
    PolicyViolationError,
)
from buildsketch.core.locking import lock_project
from buildsketch.db.models.project import Project
from buildsketch.domain.actors import Actor
from buildsketch.domain.lifecycle import ProjectState, plan_update
from buildsketch.domain.status import check_accountability
from buildsketch.schemas.projects import ProjectUpdate
from buildsketch.services.audit_trail import AuditTrailWriter
from buildsketch.services.stage_catalog import StageCatalog

logger = structlog.get_logger(__name__)


def require_actor(actor: Actor | None) -> Actor:
    """Fail fast when there is nobody to attribute a change to."""
    if actor is None or actor.is_system or not actor.id or not actor.display_name:
        raise ActorRequiredError()
    return actor


def column_value(value: Any) -> Any:
    """Enums are stored by value."""
    if isinstance(value, Enum):
        return value.value
    return value


class ProjectUpdateEngine:
    """Validates, plans and commits project updates.

    Dependencies are injected (session factory, clock) so tests can pin
    "now" and inject persistence faults.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock | None = None,
        catalog: StageCatalog | None = None,
        audit: AuditTrailWriter | None = None,
        tz: tzinfo | None = None,
    ):
        self.session_factory = session_factory
        self.clock = clock or SystemClock()
        self.catalog = catalog or StageCatalog()
        self.audit = audit or AuditTrailWriter()
        self.tz = tz or get_schedule_tz()

    async def apply_update(
        self,
        project_id: uuid.UUID | str,
        changes: ProjectUpdate | dict[str, Any],
        actor: Actor | None,
    ) -> Project:
        """Apply a partial change set.

        Args:
            project_id: Project to update
            changes: Only the supplied fields are considered; explicit None
                clears nullable fields
            actor: Authenticated caller, used for every audit entry

        Returns:
            The project as committed (detached from its session).

        Raises:
            ActorRequiredError: no actor supplied
            ProjectNotFoundError: unknown project
            PolicyViolationError: a delayed project would be stored as Completed with no reason
            InvalidUpdateError: duplicate code or clearing the SLA flag
            ConflictRetryError: lost a race with another writer; reload and retry
        """
        actor = require_actor(actor)
        if not isinstance(changes, ProjectUpdate):
            changes = ProjectUpdate.model_validate(changes)
        update = changes.supplied()

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    project = await lock_project(session, project_id)
                    current = ProjectState.from_attrs(project)
                    await self._validate(session, project, current, update)

                    now = self.clock.now()
                    stage_percent = await self._lookup_percent(session, project, current, update)
                    plan = plan_update(current, update, stage_percent=stage_percent, now=now, tz=self.tz)

                    gate = check_accountability(
                        is_delayed=plan.value("is_delayed"),
                        resulting_status=plan.resulting_status,
                        resulting_reason=plan.value("delay_reason"),
                    )
                    if not gate.allowed:
                        logger.warning(
                            "accountability_gate_rejected",
                            project_id=str(project.id),
                            actor_id=actor.id,
                        )
                        raise PolicyViolationError(gate.reason)

                    if plan.changes:
                        for name, value in plan.changes.items():
                            setattr(project, name, column_value(value))
                        await session.flush()

                    entries = self.audit.build(project.id, plan.history, actor, now)
                    await self.audit.append(session, entries)

                    if plan.changes:
                        await session.refresh(project)
        except StaleDataError as exc:
            logger.warning("project_update_conflict", project_id=str(project_id), actor_id=actor.id)
            raise ConflictRetryError(project_id) from exc

        if plan.changes:
            logger.info(
                "project_updated",
                project_id=str(project.id),
                actor_id=actor.id,
                fields=[change.field for change in plan.history],
            )
        return project

    async def _validate(
        self, session: AsyncSession, project: Project, current: ProjectState, update: dict[str, Any]
    ) -> None:
        if update.get("is_delayed") is False and current.is_delayed:
            raise InvalidUpdateError("is_delayed cannot be cleared once a project has been flagged")

        code = update.get("external_code")
        if code is not None and code != current.external_code:
            result = await session.execute(
                select(Project.id).where(Project.external_code == code, Project.id != project.id)
            )
            if result.first() is not None:
                raise InvalidUpdateError(f"Project code {code!r} is already in use")

    async def _lookup_percent(
        self, session: AsyncSession, project: Project, current: ProjectState, update: dict[str, Any]
    ) -> int | None:
        """Catalog percent for the effective (house_type, stage) when either changes."""
        house_type = update.get("house_type") or current.house_type
        stage = update.get("stage") or current.stage
        if (house_type, stage) == (current.house_type, current.stage):
            return None

        percent = await self.catalog.percent_for(session, house_type, stage)
        if percent is None:
            # Tolerated: a stage missing from the catalog leaves percent as-is
            logger.warning(
                "stage_not_in_catalog",
                project_id=str(project.id),
                house_type=column_value(house_type),
                stage=stage,
            )
        return percent
