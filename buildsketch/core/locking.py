"""Per-project row locking for the lifecycle engine.

Every load -> compute -> write cycle holds the project row lock for the
length of its transaction, so two writers on the same project serialize
and each one diffs against the true prior value. Backends without row locks
(SQLite) fall back to the ``version`` column check on flush.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from buildsketch.core.exceptions import ProjectNotFoundError
from buildsketch.db.models.project import Project


def coerce_project_id(project_id: uuid.UUID | str) -> uuid.UUID:
    """Parse a project id, treating malformed ids as not found."""
    if isinstance(project_id, uuid.UUID):
        return project_id
    try:
        return uuid.UUID(str(project_id))
    except ValueError as exc:
        raise ProjectNotFoundError(project_id) from exc


async def lock_project(session: AsyncSession, project_id: uuid.UUID | str) -> Project:
    """Load a project with ``SELECT ... FOR UPDATE`` inside the caller's transaction.

    Always re-reads the row, even if the session already holds a copy.

    Raises:
        ProjectNotFoundError: no project with this id
    """
    pid = coerce_project_id(project_id)
    result = await session.execute(
        select(Project)
        .where(Project.id == pid)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise ProjectNotFoundError(pid)
    return project
