"""Athlete availability API endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import get_current_profile
from backend.app.models.profile import Profile
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.availability_repository import AvailabilityRepository
from backend.app.repositories.calendar_repository import CalendarRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.services.availability_service import AvailabilityService
from backend.app.schemas.availability import (
    AvailabilityUpdateRequest, AvailabilityResponse, AvailabilityCheckResponse,
    BlockedPeriodInput, BlockedPeriodResponse, SuggestedDateResponse,
    AvailabilitySummaryResponse
)
from backend.app.schemas.calendar import CalendarEventResponse
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_availability_service(db: AsyncSession = Depends(get_db)) -> AvailabilityService:
    """Dependency to get availability service"""
    return AvailabilityService(
        AthleteRepository(db),
        AvailabilityRepository(db),
        CalendarRepository(db),
        ProfileRepository(db)
    )


# Caller's own availability. Declared before the /{athlete_id} routes so
# "me" is never parsed as an athlete id.

@router.get("/me", response_model=AvailabilityResponse)
async def get_my_availability(
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Calling athlete's preferences, or the defaults if never saved"""
    return await availability_service.get_my_availability(current_profile.id)


@router.put("/me", response_model=AvailabilityResponse)
async def update_my_availability(
    request: AvailabilityUpdateRequest,
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """
    Update the calling athlete's preferences

    **Validation (400):**
    - `max_deals_per_month` 0-100, `min_notice_days` 0-30, `max_hours_per_week` 0-40
    - blocked periods need `start_date <= end_date`
    - `preferred_deal_days` must be weekday names (any case; stored lowercase)

    **Concurrency (409):** send the `version` you last read to reject the
    write if someone else changed the preferences in between.
    """
    logger.info(f"Availability update from profile {current_profile.id}")
    return await availability_service.update_availability(
        current_profile.id,
        request.settings(),
        expected_version=request.version
    )


@router.post("/me/blocked-periods", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
async def add_my_blocked_period(
    period: BlockedPeriodInput,
    version: Optional[int] = Query(None, ge=0, description="Version last read"),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Add a custom blocked period; it gets a generated `id`"""
    return await availability_service.add_blocked_period(
        current_profile.id,
        period.model_dump(mode="json", exclude_unset=True),
        expected_version=version
    )


@router.delete("/me/blocked-periods/{period_id}", response_model=AvailabilityResponse)
async def remove_my_blocked_period(
    period_id: str,
    version: Optional[int] = Query(None, ge=0, description="Version last read"),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Remove a custom blocked period by id"""
    return await availability_service.remove_blocked_period(
        current_profile.id,
        period_id,
        expected_version=version
    )


@router.get("/me/check", response_model=AvailabilityCheckResponse)
async def check_my_availability(
    day: date = Query(..., alias="date"),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Whether the calling athlete can take NIL work on a date"""
    check = await availability_service.check_my_availability(current_profile.id, day)
    return AvailabilityCheckResponse(athlete_id=check.athlete_id, date=day, available=check.available, reason=check.reason)


@router.get("/me/blocked-periods", response_model=List[BlockedPeriodResponse])
async def get_my_blocked_periods(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Calling athlete's blackout windows (default: the next 180 days)"""
    periods = await availability_service.get_my_blocked_periods(current_profile.id, start_date, end_date)
    return [BlockedPeriodResponse.model_validate(p) for p in periods]


@router.get("/me/suggestions", response_model=List[SuggestedDateResponse])
async def suggest_my_deal_timing(
    within_days: Optional[int] = Query(None, ge=0, le=365),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Best dates for the calling athlete, highest score first"""
    suggestions = await availability_service.suggest_my_deal_timing(current_profile.id, within_days)
    return [SuggestedDateResponse.model_validate(s) for s in suggestions]


# Any athlete

@router.get("/{athlete_id}", response_model=AvailabilityResponse)
async def get_athlete_availability(
    athlete_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """An athlete's preferences, or the defaults if never saved"""
    return await availability_service.get_availability(athlete_id)


@router.get("/{athlete_id}/check", response_model=AvailabilityCheckResponse)
async def check_availability(
    athlete_id: UUID,
    day: date = Query(..., alias="date"),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """
    Whether an athlete can take NIL work on a date

    `reason` is advisory: it names the first blackout covering the date.
    """
    check = await availability_service.check_availability(athlete_id, day)
    return AvailabilityCheckResponse(athlete_id=athlete_id, date=day, available=check.available, reason=check.reason)


@router.get("/{athlete_id}/blocked-periods", response_model=List[BlockedPeriodResponse])
async def get_blocked_periods(
    athlete_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Calendar and custom blackout windows, sorted by start date"""
    periods = await availability_service.get_blocked_periods(athlete_id, start_date, end_date)
    return [BlockedPeriodResponse.model_validate(p) for p in periods]


@router.get("/{athlete_id}/suggestions", response_model=List[SuggestedDateResponse])
async def suggest_deal_timing(
    athlete_id: UUID,
    within_days: Optional[int] = Query(None, ge=0, le=365),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """
    Available dates for a deal, best first

    **Scoring:** 50 base, +30 preferred day, +10 weekend, +10 beyond the
    athlete's minimum notice period.
    """
    suggestions = await availability_service.suggest_deal_timing(athlete_id, within_days)
    return [SuggestedDateResponse.model_validate(s) for s in suggestions]


@router.get("/{athlete_id}/upcoming-events", response_model=List[CalendarEventResponse])
async def get_upcoming_blocking_events(
    athlete_id: UUID,
    within_days: Optional[int] = Query(None, ge=0, le=365),
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """School no-NIL events ahead that apply to this athlete's preferences"""
    events = await availability_service.get_upcoming_blocking_events(athlete_id, within_days)
    return [CalendarEventResponse.model_validate(e) for e in events]


@router.get("/{athlete_id}/summary", response_model=AvailabilitySummaryResponse)
async def get_availability_summary(
    athlete_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    availability_service: AvailabilityService = Depends(get_availability_service)
):
    """Preferences, the first blackouts and the best dates in one call"""
    return await availability_service.get_availability_summary(athlete_id)
