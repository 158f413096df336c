"""Athlete repository for database operations"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc

from backend.app.models.athlete import Athlete
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class AthleteRepository:
    """Repository for athlete lookups used by matching and scheduling"""

    def __init__(self, db: AsyncSession):
        """
        Initialize athlete repository

        Args:
            db: Database session
        """
        self.db = db

    async def get_by_id(self, athlete_id: UUID) -> Optional[Athlete]:
        """
        Get athlete by ID, with school, sport and major category loaded

        Args:
            athlete_id: Athlete UUID

        Returns:
            Athlete if found, None otherwise
        """
        result = await self.db.execute(select(Athlete).where(Athlete.id == athlete_id))
        return result.scalar_one_or_none()

    async def get_available_for_deals(self) -> List[Athlete]:
        """
        Get every athlete brands may be matched against

        Returns:
            Athletes that are searchable and accepting deals
        """
        stmt = select(Athlete).where(
            and_(
                Athlete.is_searchable == True,
                Athlete.accepting_deals == True
            )
        ).order_by(Athlete.created_at)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_by_major_categories(
        self,
        category_ids: List[UUID],
        min_gpa: Optional[float] = None,
        limit: int = 20
    ) -> List[Athlete]:
        """
        Find searchable athletes studying in any of the given major categories

        Args:
            category_ids: Major category UUIDs
            min_gpa: Optional floor on the athlete's term GPA
            limit: Maximum number of athletes to return

        Returns:
            Athletes ordered by GradeUp score descending
        """
        if not category_ids:
            return []

        stmt = select(Athlete).where(
            and_(
                Athlete.major_category_id.in_(category_ids),
                Athlete.is_searchable == True,
                Athlete.accepting_deals == True
            )
        )

        if min_gpa is not None:
            stmt = stmt.where(Athlete.gpa >= min_gpa)

        stmt = stmt.order_by(desc(Athlete.gradeup_score)).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

