"""Idempotent seed data for the stage catalog."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from buildsketch.db.base import get_session_factory
from buildsketch.db.models.stage_config import StageConfig
from buildsketch.domain.stages import STAGE_CATALOG, validate_catalog

logger = structlog.get_logger(__name__)


async def seed_stage_configs(factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    """Upsert every (house_type, stage) row from STAGE_CATALOG."""
    validate_catalog(STAGE_CATALOG)
    factory = factory or get_session_factory()

    async with factory() as session:
        for house_type, entries in STAGE_CATALOG.items():
            for position, (stage_name, percent) in enumerate(entries):
                result = await session.execute(
                    select(StageConfig).where(
                        StageConfig.house_type == house_type.value,
                        StageConfig.stage_name == stage_name,
                    )
                )
                existing = result.scalar_one_or_none()

                if existing is None:
                    session.add(
                        StageConfig(
                            house_type=house_type.value,
                            stage_name=stage_name,
                            percent=percent,
                            position=position,
                        )
                    )
                else:
                    existing.percent = percent
                    existing.position = position

        await session.commit()

    logger.info("stage_configs_seeded", house_types=[h.value for h in STAGE_CATALOG])
