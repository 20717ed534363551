"""Shared test fixtures: per-test SQLite database, frozen clock, project factory."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import buildsketch.db.models  # noqa: F401
from buildsketch.core.clock import FrozenClock
from buildsketch.db.base import Base, make_session_factory
from buildsketch.db.models.project import Project
from buildsketch.db.models.project_history import ProjectHistory
from buildsketch.db.seed import seed_stage_configs
from buildsketch.domain.actors import Actor

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

# Columns compared when asserting a project was left untouched
PROJECT_COLUMNS = [c.key for c in Project.__table__.columns]


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """File-backed SQLite engine so separate sessions see real transactions."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'buildsketch_test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the stage catalog seeded."""
    factory = make_session_factory(engine)
    await seed_stage_configs(factory)
    return factory


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def actor() -> Actor:
    return Actor(id="user-42", display_name="Priya Shah")


@pytest.fixture
def make_project(session_factory, clock):
    """Insert a project directly (bypassing the engine) and return it."""

    async def _make(**overrides) -> Project:
        target = overrides.pop("original_target", clock.now() + timedelta(days=30))
        values = {
            "external_code": f"BS-{uuid.uuid4().hex[:6].upper()}",
            "name": "Lot 12 Harbour St",
            "house_type": "Single",
            "stage": "Project Setup",
            "percent_complete": 10,
            "status": "On Track",
            "start_date": clock.now(),
            "original_target": target,
            "target_finish": target,
            "notes": "",
            "created_by_id": "admin-1",
        }
        values.update(overrides)
        async with session_factory() as session:
            project = Project(**values)
            session.add(project)
            await session.commit()
            await session.refresh(project)
        return project

    return _make


@pytest.fixture
def load_project(session_factory):
    async def _load(project_id: uuid.UUID) -> Project:
        async with session_factory() as session:
            return await session.get(Project, project_id)

    return _load


@pytest.fixture
def load_history(session_factory):
    async def _load(project_id: uuid.UUID) -> list[ProjectHistory]:
        async with session_factory() as session:
            result = await session.execute(
                select(ProjectHistory)
                .where(ProjectHistory.project_id == project_id)
                .order_by(ProjectHistory.created_at, ProjectHistory.sequence)
            )
            return list(result.scalars().all())

    return _load


def snapshot(project: Project) -> dict:
    """Every persisted column value of a project."""
    return {key: getattr(project, key) for key in PROJECT_COLUMNS}
