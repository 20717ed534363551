"""ProjectService: creation and read paths around the lifecycle engine."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from buildsketch.core.clock import Clock, SystemClock
from buildsketch.core.exceptions import InvalidUpdateError, ProjectNotFoundError
from buildsketch.core.locking import coerce_project_id
from buildsketch.db.models.project import Project
from buildsketch.db.models.project_history import ProjectHistory
from buildsketch.db.models.stage_config import StageConfig
from buildsketch.domain.actors import Actor
from buildsketch.domain.stages import INITIAL_STAGE, HouseType
from buildsketch.domain.status import ProjectStatus
from buildsketch.schemas.projects import ProjectCreate
from buildsketch.services.audit_trail import AuditTrailWriter
from buildsketch.services.project_engine import require_actor
from buildsketch.services.sla_monitor import SlaMonitor
from buildsketch.services.stage_catalog import StageCatalog

logger = structlog.get_logger(__name__)


class ProjectService:
    """Uses dependency injection (session factory, clock, monitor) for testability."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock | None = None,
        monitor: SlaMonitor | None = None,
        catalog: StageCatalog | None = None,
        audit: AuditTrailWriter | None = None,
    ):
        self.session_factory = session_factory
        self.clock = clock or SystemClock()
        self.monitor = monitor or SlaMonitor(session_factory, self.clock)
        self.catalog = catalog or StageCatalog()
        self.audit = audit or AuditTrailWriter()

    async def create_project(self, data: ProjectCreate, actor: Actor | None) -> Project:
        """Create a project at the first stage with the SLA baseline pinned to its target.

        Raises:
            ActorRequiredError: no actor supplied
            InvalidUpdateError: the project code is already taken
        """
        actor = require_actor(actor)
        now = self.clock.now()

        async with self.session_factory() as session:
            async with session.begin():
                existing = await session.execute(
                    select(Project.id).where(Project.external_code == data.external_code)
                )
                if existing.first() is not None:
                    raise InvalidUpdateError(f"Project code {data.external_code!r} is already in use")

                percent = await self.catalog.percent_for(session, data.house_type, INITIAL_STAGE)
                project = Project(
                    external_code=data.external_code,
                    name=data.name,
                    house_type=data.house_type.value,
                    stage=INITIAL_STAGE,
                    percent_complete=percent if percent is not None else 0,
                    status=ProjectStatus.ON_TRACK.value,
                    start_date=now,
                    original_target=data.target_finish,
                    target_finish=data.target_finish,
                    assigned_to_id=data.assigned_to_id,
                    client_name=data.client_name,
                    client_requirements=data.client_requirements,
                    notes=data.notes,
                    created_by_id=actor.id,
                    created_at=now,
                    updated_at=now,
                )
                session.add(project)
                await session.flush()
                await session.refresh(project)

        logger.info(
            "project_created",
            project_id=str(project.id),
            external_code=project.external_code,
            actor_id=actor.id,
        )
        return project

    async def get_project(self, project_id: uuid.UUID | str) -> Project:
        """Catch up on SLA compliance, then return the project."""
        pid = coerce_project_id(project_id)
        await self.monitor.check_compliance(pid)

        async with self.session_factory() as session:
            project = await session.get(Project, pid)
            if project is None:
                raise ProjectNotFoundError(pid)
            return project

    async def list_projects(self) -> list[Project]:
        async with self.session_factory() as session:
            result = await session.execute(select(Project).order_by(Project.created_at.desc()))
            return list(result.scalars().all())

    async def get_history(self, project_id: uuid.UUID | str) -> list[ProjectHistory]:
        pid = coerce_project_id(project_id)
        async with self.session_factory() as session:
            if await session.get(Project, pid) is None:
                raise ProjectNotFoundError(pid)
            return await self.audit.list_history(session, pid)

    async def list_stages(self, house_type: HouseType | str) -> list[StageConfig]:
        async with self.session_factory() as session:
            return await self.catalog.stages_for(session, house_type)
