"""Match repository for database operations"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from backend.app.models.athlete import Athlete
from backend.app.models.match import AthleteBrandMatch
from backend.app.models.base import utcnow
from backend.app.core.logging import get_logger
from nil_engine.scoring import MatchComputation

logger = get_logger(__name__)


class MatchRepository:
    """Repository for precomputed athlete-brand match scores"""

    def __init__(self, db: AsyncSession):
        """
        Initialize match repository

        Args:
            db: Database session
        """
        self.db = db

    async def get_by_pair(self, athlete_id: UUID, brand_id: UUID) -> Optional[AthleteBrandMatch]:
        """
        Get the match row for one athlete-brand pair

        Args:
            athlete_id: Athlete UUID
            brand_id: Brand UUID

        Returns:
            Match if found, None otherwise
        """
        stmt = select(AthleteBrandMatch).where(
            and_(
                AthleteBrandMatch.athlete_id == athlete_id,
                AthleteBrandMatch.brand_id == brand_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        athlete_id: UUID,
        brand_id: UUID,
        computation: MatchComputation
    ) -> AthleteBrandMatch:
        """
        Insert or overwrite the match row for a pair

        Args:
            athlete_id: Athlete UUID
            brand_id: Brand UUID
            computation: Freshly computed score and flags

        Returns:
            Stored match
        """
        match = await self.get_by_pair(athlete_id, brand_id)
        if match is None:
            match = AthleteBrandMatch(athlete_id=athlete_id, brand_id=brand_id)
            self.db.add(match)

        self._apply(match, computation)

        try:
            await self.db.commit()
        except IntegrityError:
            # Another writer inserted the pair first; overwrite theirs
            await self.db.rollback()
            match = await self.get_by_pair(athlete_id, brand_id)
            if match is None:
                raise
            self._apply(match, computation)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        await self.db.refresh(match)
        logger.info(f"Stored match {athlete_id}/{brand_id}: {computation.score}")
        return match

    @staticmethod
    def _apply(match: AthleteBrandMatch, computation: MatchComputation) -> None:
        match.match_score = computation.score
        match.major_match = computation.major_match
        match.industry_match = computation.industry_match
        match.values_match = computation.values_match
        match.calculated_at = utcnow()

    async def get_top_for_athlete(
        self,
        athlete_id: UUID,
        limit: int = 10,
        min_score: Optional[int] = None
    ) -> List[AthleteBrandMatch]:
        """
        Get an athlete's best brand matches

        Args:
            athlete_id: Athlete UUID
            limit: Maximum number of matches to return
            min_score: Minimum score threshold

        Returns:
            Matches ordered by score descending, brand loaded
        """
        stmt = select(AthleteBrandMatch).where(AthleteBrandMatch.athlete_id == athlete_id)

        if min_score is not None:
            stmt = stmt.where(AthleteBrandMatch.match_score >= min_score)

        stmt = stmt.order_by(
            desc(AthleteBrandMatch.match_score),
            desc(AthleteBrandMatch.calculated_at)
        ).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_for_brand(
        self,
        brand_id: UUID,
        min_score: Optional[int] = None
    ) -> List[AthleteBrandMatch]:
        """
        Get every match for a brand whose athlete is open to deals

        Args:
            brand_id: Brand UUID
            min_score: Minimum score threshold

        Returns:
            Matches ordered by score descending, athlete loaded
        """
        stmt = select(AthleteBrandMatch).join(
            Athlete, Athlete.id == AthleteBrandMatch.athlete_id
        ).where(
            and_(
                AthleteBrandMatch.brand_id == brand_id,
                Athlete.is_searchable == True,
                Athlete.accepting_deals == True
            )
        )

        if min_score is not None:
            stmt = stmt.where(AthleteBrandMatch.match_score >= min_score)

        stmt = stmt.order_by(
            desc(AthleteBrandMatch.match_score),
            desc(AthleteBrandMatch.calculated_at)
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_all_for_athlete(self, athlete_id: UUID) -> List[AthleteBrandMatch]:
        """Every match row for an athlete, for aggregation"""
        result = await self.db.execute(
            select(AthleteBrandMatch).where(AthleteBrandMatch.athlete_id == athlete_id)
        )
        return list(result.scalars().all())
