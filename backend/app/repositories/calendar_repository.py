"""Academic calendar repository for database operations"""

from datetime import date
from typing import List, Optional, Dict, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from backend.app.models.calendar import AcademicEvent, EventType, Semester
from backend.app.models.school import School, AthleticDirector
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class CalendarRepository:
    """Repository for school calendars and the directors who maintain them"""

    def __init__(self, db: AsyncSession):
        """
        Initialize calendar repository

        Args:
            db: Database session
        """
        self.db = db

    async def get_school(self, school_id: UUID) -> Optional[School]:
        """Get school by ID"""
        result = await self.db.execute(select(School).where(School.id == school_id))
        return result.scalar_one_or_none()

    async def get_events(
        self,
        school_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        semester: Optional[Semester] = None,
        academic_year: Optional[str] = None,
        event_types: Optional[List[EventType]] = None
    ) -> List[AcademicEvent]:
        """
        Get calendar events for a school

        Args:
            school_id: School UUID
            start_date: Only events ending on or after this date
            end_date: Only events starting on or before this date
            semester: Optional semester filter
            academic_year: Optional academic year filter (e.g. "2026-2027")
            event_types: Optional event type filter

        Returns:
            Events ordered by start date
        """
        stmt = select(AcademicEvent).where(AcademicEvent.school_id == school_id)

        if start_date is not None:
            stmt = stmt.where(AcademicEvent.end_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(AcademicEvent.start_date <= end_date)
        if semester is not None:
            stmt = stmt.where(AcademicEvent.semester == semester)
        if academic_year is not None:
            stmt = stmt.where(AcademicEvent.academic_year == academic_year)
        if event_types:
            stmt = stmt.where(AcademicEvent.event_type.in_(event_types))

        stmt = stmt.order_by(AcademicEvent.start_date)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_blocking_events(
        self,
        school_id: UUID,
        start_date: date,
        end_date: date
    ) -> List[AcademicEvent]:
        """
        Get no-NIL-activity events overlapping [start_date, end_date]

        Args:
            school_id: School UUID
            start_date: Window start
            end_date: Window end

        Returns:
            Events ordered by start date
        """
        stmt = select(AcademicEvent).where(
            and_(
                AcademicEvent.school_id == school_id,
                AcademicEvent.no_nil_activity == True,
                AcademicEvent.start_date <= end_date,
                AcademicEvent.end_date >= start_date
            )
        ).order_by(AcademicEvent.start_date)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_event(self, event_id: UUID) -> Optional[AcademicEvent]:
        """Get calendar event by ID"""
        result = await self.db.execute(select(AcademicEvent).where(AcademicEvent.id == event_id))
        return result.scalar_one_or_none()

    async def create_event(self, event_data: Dict[str, Any]) -> AcademicEvent:
        """
        Create a calendar event

        Args:
            event_data: Column values

        Returns:
            Created event
        """
        event = AcademicEvent(**event_data)
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)

        logger.info(f"Created calendar event: {event.id} ({event.event_type.value}) for school {event.school_id}")
        return event

    async def update_event(self, event: AcademicEvent, updates: Dict[str, Any]) -> AcademicEvent:
        """
        Apply updates to a calendar event

        Args:
            event: Loaded event
            updates: Column values to overwrite

        Returns:
            Updated event
        """
        for key, value in updates.items():
            setattr(event, key, value)

        await self.db.commit()
        await self.db.refresh(event)

        logger.info(f"Updated calendar event: {event.id}")
        return event

    async def delete_event(self, event: AcademicEvent) -> None:
        """Delete a calendar event"""
        await self.db.delete(event)
        await self.db.commit()
        logger.info(f"Deleted calendar event: {event.id}")

    async def get_director_school_ids(self, profile_id: UUID) -> List[UUID]:
        """Schools whose calendar this profile administers"""
        result = await self.db.execute(
            select(AthleticDirector.school_id).where(AthleticDirector.profile_id == profile_id)
        )
        return list(result.scalars().all())
