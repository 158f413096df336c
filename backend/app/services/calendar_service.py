"""Academic calendar service for schools and their athletic directors"""

from datetime import date
from typing import List, Optional, Dict, Any
from uuid import UUID

from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.calendar_repository import CalendarRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.models.calendar import AcademicEvent, EventType, Semester
from backend.app.models.profile import Profile, ProfileRole
from backend.app.core.logging import get_logger
from backend.app.core.exceptions import (
    ValidationException, NotFoundException, AuthorizationException
)
from nil_engine.scheduling import EVENT_TYPES, SEMESTERS, parse_date

logger = get_logger(__name__)

EVENT_FIELDS = (
    "school_id",
    "event_type",
    "name",
    "start_date",
    "end_date",
    "no_nil_activity",
    "academic_year",
    "semester",
)


def validate_calendar_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a calendar event payload and convert it to column values

    Raises:
        ValidationException: On an unknown event type or semester, or inverted dates
    """
    event_type = getattr(event.get("event_type"), "value", event.get("event_type"))
    if event_type not in EVENT_TYPES:
        raise ValidationException(f"Invalid event type: {event_type}")

    semester = getattr(event.get("semester"), "value", event.get("semester"))
    if semester is not None and semester not in SEMESTERS:
        raise ValidationException(f"Invalid semester: {semester}")

    if not event.get("start_date") or not event.get("end_date"):
        raise ValidationException("Calendar events must have start_date and end_date")
    start = parse_date(event["start_date"])
    end = parse_date(event["end_date"])
    if start > end:
        raise ValidationException("Start date must be before end date")

    no_nil_activity = event.get("no_nil_activity")

    return {
        "school_id": event.get("school_id"),
        "event_type": EventType(event_type),
        "name": event.get("name"),
        "start_date": start,
        "end_date": end,
        "no_nil_activity": True if no_nil_activity is None else no_nil_activity,
        "academic_year": event.get("academic_year"),
        "semester": Semester(semester) if semester is not None else None,
    }


class CalendarService:
    """Service for reading and maintaining school academic calendars"""

    def __init__(
        self,
        calendar_repository: CalendarRepository,
        athlete_repository: AthleteRepository,
        profile_repository: ProfileRepository
    ):
        """
        Initialize calendar service

        Args:
            calendar_repository: Calendar repository
            athlete_repository: Athlete repository
            profile_repository: Profile repository used to resolve the caller
        """
        self.calendar_repo = calendar_repository
        self.athlete_repo = athlete_repository
        self.profile_repo = profile_repository

    async def get_academic_calendar(
        self,
        school_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        semester: Optional[Semester] = None,
        academic_year: Optional[str] = None,
        event_types: Optional[List[EventType]] = None
    ) -> List[AcademicEvent]:
        """
        Events of a school overlapping the optional window

        Returns:
            Events ordered by start date
        """
        return await self.calendar_repo.get_events(
            school_id,
            start_date=start_date,
            end_date=end_date,
            semester=semester,
            academic_year=academic_year,
            event_types=event_types,
        )

    async def get_my_school_calendar(self, profile_id: UUID, **filters) -> List[AcademicEvent]:
        """
        Calendar of the caller's school

        Raises:
            NotFoundException: If the caller is not an athlete or has no school
        """
        athlete_id = await self.profile_repo.get_athlete_id(profile_id)
        if athlete_id is None:
            raise NotFoundException("Athlete profile not found")

        athlete = await self.athlete_repo.get_by_id(athlete_id)
        if athlete is None or athlete.school_id is None:
            raise NotFoundException("School not found for athlete")

        return await self.get_academic_calendar(athlete.school_id, **filters)

    async def _authorize_school(self, profile: Profile, school_id: UUID) -> None:
        if profile.role == ProfileRole.ADMIN:
            return

        if profile.role == ProfileRole.ATHLETIC_DIRECTOR:
            school_ids = await self.calendar_repo.get_director_school_ids(profile.id)
            if school_id in school_ids:
                return

        logger.warning(
            f"Profile {profile.id} with role {profile.role} attempted to edit calendar of school {school_id}"
        )
        raise AuthorizationException("Only an athletic director of this school can edit its calendar")

    async def save_calendar_event(self, profile: Profile, event: Dict[str, Any]) -> AcademicEvent:
        """
        Create a calendar event, or update it when `id` is given

        Args:
            profile: Caller's profile
            event: Event payload

        Returns:
            Stored event

        Raises:
            ValidationException: If the payload is invalid
            NotFoundException: If the school or the event to update is missing
            AuthorizationException: If the caller may not edit this school's calendar
        """
        values = validate_calendar_event(event)

        school = await self.calendar_repo.get_school(values["school_id"])
        if school is None:
            raise NotFoundException("School not found")

        await self._authorize_school(profile, school.id)

        event_id = event.get("id")
        if event_id is None:
            return await self.calendar_repo.create_event(values)

        existing = await self.calendar_repo.get_event(event_id)
        if existing is None:
            raise NotFoundException("Calendar event not found")
        if existing.school_id != school.id:
            # Moving an event between schools needs rights on both
            await self._authorize_school(profile, existing.school_id)

        return await self.calendar_repo.update_event(existing, values)

    async def delete_calendar_event(self, profile: Profile, event_id: UUID) -> None:
        """
        Delete a calendar event

        Raises:
            NotFoundException: If the event does not exist
            AuthorizationException: If the caller may not edit this school's calendar
        """
        event = await self.calendar_repo.get_event(event_id)
        if event is None:
            raise NotFoundException("Calendar event not found")

        await self._authorize_school(profile, event.school_id)
        await self.calendar_repo.delete_event(event)
