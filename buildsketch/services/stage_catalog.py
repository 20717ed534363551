"""StageCatalog: read-only lookups against the stage_configs table."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from buildsketch.db.models.stage_config import StageConfig
from buildsketch.domain.stages import HouseType


class StageCatalog:
    """Exact-match (house_type, stage_name) -> percent lookups.

    The catalog is reference data: reseeding or reordering it is an
    administrative job (see ``buildsketch.db.seed``), never done here.
    """

    async def percent_for(
        self, session: AsyncSession, house_type: HouseType | str, stage_name: str
    ) -> int | None:
        """Return the percent for the pair, or None when it is not in the catalog.

        Matching is exact: no case folding or whitespace trimming.
        """
        try:
            house_type = HouseType(house_type)
        except ValueError:
            return None
        result = await session.execute(
            select(StageConfig.percent).where(
                StageConfig.house_type == house_type.value,
                StageConfig.stage_name == stage_name,
            )
        )
        return result.scalar_one_or_none()

    async def stages_for(self, session: AsyncSession, house_type: HouseType | str) -> list[StageConfig]:
        """Ordered stage list for one house type."""
        result = await session.execute(
            select(StageConfig)
            .where(StageConfig.house_type == HouseType(house_type).value)
            .order_by(StageConfig.position)
        )
        return list(result.scalars().all())
