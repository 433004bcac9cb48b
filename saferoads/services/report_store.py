import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from saferoads.models.report import Report

logger = logging.getLogger(__name__)


async def insert_report(db: AsyncSession, damage_score: int) -> None:
    """Append a score; the new row id is never read back."""
    db.add(Report(damage_score=damage_score))
    await db.commit()
    logger.info("Stored report damage_score=%s", damage_score)


async def list_reports(db: AsyncSession) -> list[Report]:
    # created_at has one-second resolution, id breaks ties
    result = await db.execute(
        select(Report).order_by(Report.created_at.desc(), Report.id.desc())
    )
    return list(result.scalars().all())
