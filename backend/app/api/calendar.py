"""Academic calendar API endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import get_current_profile, require_calendar_editor
from backend.app.models.calendar import EventType, Semester
from backend.app.models.profile import Profile
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.calendar_repository import CalendarRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.services.calendar_service import CalendarService
from backend.app.schemas.calendar import CalendarEventRequest, CalendarEventResponse
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_calendar_service(db: AsyncSession = Depends(get_db)) -> CalendarService:
    """Dependency to get calendar service"""
    return CalendarService(CalendarRepository(db), AthleteRepository(db), ProfileRepository(db))


@router.get("/me", response_model=List[CalendarEventResponse])
async def get_my_school_calendar(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    semester: Optional[Semester] = Query(None),
    academic_year: Optional[str] = Query(None, max_length=20),
    event_types: Optional[List[EventType]] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    calendar_service: CalendarService = Depends(get_calendar_service)
):
    """Calendar of the calling athlete's school"""
    events = await calendar_service.get_my_school_calendar(
        current_profile.id,
        start_date=start_date,
        end_date=end_date,
        semester=semester,
        academic_year=academic_year,
        event_types=event_types
    )
    return [CalendarEventResponse.model_validate(e) for e in events]


@router.get("/schools/{school_id}", response_model=List[CalendarEventResponse])
async def get_academic_calendar(
    school_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    semester: Optional[Semester] = Query(None),
    academic_year: Optional[str] = Query(None, max_length=20),
    event_types: Optional[List[EventType]] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    calendar_service: CalendarService = Depends(get_calendar_service)
):
    """
    Events of a school, ordered by start date

    `start_date`/`end_date` keep events overlapping the window.
    """
    events = await calendar_service.get_academic_calendar(
        school_id,
        start_date=start_date,
        end_date=end_date,
        semester=semester,
        academic_year=academic_year,
        event_types=event_types
    )
    return [CalendarEventResponse.model_validate(e) for e in events]


@router.post("/events", response_model=CalendarEventResponse)
async def save_calendar_event(
    request: CalendarEventRequest,
    current_profile: Profile = Depends(require_calendar_editor),
    calendar_service: CalendarService = Depends(get_calendar_service)
):
    """
    Create an event, or update it when `id` is set

    **Permissions:** admins, or athletic directors of the event's school.
    """
    logger.info(f"Calendar event save by profile {current_profile.id} for school {request.school_id}")
    event = await calendar_service.save_calendar_event(
        current_profile,
        request.model_dump()
    )
    return CalendarEventResponse.model_validate(event)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calendar_event(
    event_id: UUID,
    current_profile: Profile = Depends(require_calendar_editor),
    calendar_service: CalendarService = Depends(get_calendar_service)
):
    """Delete an event (admins, or athletic directors of its school)"""
    await calendar_service.delete_calendar_event(current_profile, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
