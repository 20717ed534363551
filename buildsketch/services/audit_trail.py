"""AuditTrailWriter: append-only per-field project history."""

import uuid
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from buildsketch.db.models.project_history import ProjectHistory
from buildsketch.domain.actors import Actor
from buildsketch.domain.lifecycle import FieldChange, format_value


class AuditTrailWriter:
    """Builds and appends ProjectHistory rows. Never updates or deletes them."""

    def build(
        self,
        project_id: uuid.UUID,
        changes: Iterable[FieldChange],
        actor: Actor,
        at: datetime,
        start: int = 0,
    ) -> list[ProjectHistory]:
        """One ProjectHistory row per FieldChange, all stamped with ``at``.

        Args:
            project_id: Project the changes belong to
            changes: Field changes in audit order
            actor: Attribution for every row in the batch
            at: Commit-time timestamp from the injected clock
            start: First ``sequence`` value, for batches split across actors
        """
        return [
            ProjectHistory(
                project_id=project_id,
                changed_by=actor.display_name,
                changed_by_id=actor.id,
                field_name=change.field,
                old_value=format_value(change.old),
                new_value=format_value(change.new),
                sequence=start + offset,
                created_at=at,
            )
            for offset, change in enumerate(changes)
        ]

    async def append(self, session: AsyncSession, entries: list[ProjectHistory]) -> None:
        """Write a batch inside the caller's transaction."""
        if not entries:
            return
        session.add_all(entries)
        await session.flush()

    async def list_history(self, session: AsyncSession, project_id: uuid.UUID) -> list[ProjectHistory]:
        """History in canonical audit order (oldest first)."""
        result = await session.execute(
            select(ProjectHistory)
            .where(ProjectHistory.project_id == project_id)
            .order_by(ProjectHistory.created_at, ProjectHistory.sequence)
        )
        return list(result.scalars().all())
