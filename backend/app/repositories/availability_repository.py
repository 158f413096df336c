"""Athlete availability repository for database operations"""

from typing import Optional, Dict, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.models.calendar import AthleteAvailability
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class AvailabilityRepository:
    """Repository for the one-per-athlete availability row"""

    def __init__(self, db: AsyncSession):
        """
        Initialize availability repository

        Args:
            db: Database session
        """
        self.db = db

    async def get_by_athlete_id(self, athlete_id: UUID) -> Optional[AthleteAvailability]:
        """
        Get the stored availability of an athlete

        Args:
            athlete_id: Athlete UUID

        Returns:
            Availability row if the athlete ever saved one, None otherwise
        """
        result = await self.db.execute(
            select(AthleteAvailability).where(AthleteAvailability.athlete_id == athlete_id)
        )
        return result.scalar_one_or_none()

    async def create(self, athlete_id: UUID, values: Dict[str, Any]) -> AthleteAvailability:
        """
        Create the availability row for an athlete

        Args:
            athlete_id: Athlete UUID
            values: Column values; unspecified columns take their defaults

        Returns:
            Created row
        """
        availability = AthleteAvailability(athlete_id=athlete_id, **values)
        self.db.add(availability)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(availability)

        logger.info(f"Created availability for athlete {athlete_id}")
        return availability

    async def update(self, availability: AthleteAvailability, values: Dict[str, Any]) -> AthleteAvailability:
        """
        Write new values to an availability row

        The mapper's version counter guards the UPDATE, so a row changed by
        someone else since it was loaded raises StaleDataError.

        Args:
            availability: Loaded row
            values: Column values to overwrite

        Returns:
            Updated row
        """
        for key, value in values.items():
            setattr(availability, key, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(availability)

        logger.info(f"Updated availability for athlete {availability.athlete_id} (version {availability.version})")
        return availability
