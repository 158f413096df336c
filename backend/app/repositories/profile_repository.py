"""Profile repository for identity resolution"""

from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.profile import Profile
from backend.app.models.athlete import Athlete
from backend.app.models.brand import Brand


class ProfileRepository:
    """Resolves an authenticated profile to its domain records"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, profile_id: UUID) -> Optional[Profile]:
        """Get profile by ID"""
        result = await self.db.execute(
            select(Profile).where(Profile.id == profile_id)
        )
        return result.scalar_one_or_none()

    async def get_athlete_id(self, profile_id: UUID) -> Optional[UUID]:
        """Athlete ID owned by the profile, if any"""
        result = await self.db.execute(
            select(Athlete.id).where(Athlete.profile_id == profile_id)
        )
        return result.scalar_one_or_none()

    async def get_brand_id(self, profile_id: UUID) -> Optional[UUID]:
        """Brand ID owned by the profile, if any"""
        result = await self.db.execute(
            select(Brand.id).where(Brand.profile_id == profile_id)
        )
        return result.scalar_one_or_none()
