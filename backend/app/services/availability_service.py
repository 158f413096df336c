"""Availability service for athlete scheduling and deal timing"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Dict, Any
from uuid import UUID
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.availability_repository import AvailabilityRepository
from backend.app.repositories.calendar_repository import CalendarRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.models.athlete import Athlete
from backend.app.models.calendar import AcademicEvent, AthleteAvailability
from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.core.exceptions import (
    ValidationException, NotFoundException, ConflictException
)
from nil_engine.scheduling import (
    DAYS_OF_WEEK,
    DEFAULT_AVAILABILITY,
    AvailabilityRules,
    BlockedPeriod,
    SuggestedDate,
    build_rules,
    parse_date,
    rank_suggestions,
)

logger = get_logger(__name__)

SUMMARY_PREVIEW_SIZE = 5

# Columns a caller may write through update_availability
AVAILABILITY_FIELDS = (
    "blocked_periods",
    "study_hours",
    "max_deals_per_month",
    "no_finals_deals",
    "no_midterms_deals",
    "preferred_deal_days",
    "min_notice_days",
    "max_hours_per_week",
    "notes",
)


@dataclass(frozen=True)
class AvailabilityCheck:
    """Answer to "can this athlete do NIL work on this day"; reason is advisory"""
    athlete_id: UUID
    available: bool
    reason: Optional[str] = None


def _check_range(values: Dict[str, Any], key: str, low: int, high: int, message: str) -> None:
    value = values.get(key)
    if value is not None and not (low <= value <= high):
        raise ValidationException(message, details={key: value})


def validate_availability_settings(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize a partial availability update

    Only keys present in `values` are checked. Nothing is written here.

    Args:
        values: Partial settings

    Returns:
        A normalized copy: weekday names lowercased, blocked period dates as ISO strings

    Raises:
        ValidationException: On the first invalid setting
    """
    _check_range(values, "max_deals_per_month", 0, 100, "Max deals per month must be between 0 and 100")
    _check_range(values, "min_notice_days", 0, 30, "Minimum notice days must be between 0 and 30")
    _check_range(values, "max_hours_per_week", 0, 40, "Max hours per week must be between 0 and 40")

    normalized = dict(values)

    if values.get("blocked_periods") is not None:
        periods = []
        for period in values["blocked_periods"]:
            if not period.get("start_date") or not period.get("end_date"):
                raise ValidationException("Blocked periods must have start_date and end_date")
            try:
                start = parse_date(period["start_date"])
                end = parse_date(period["end_date"])
            except ValueError:
                raise ValidationException(
                    "Blocked period dates must be ISO dates (YYYY-MM-DD)",
                    details={"start_date": str(period["start_date"]), "end_date": str(period["end_date"])}
                )
            if start > end:
                raise ValidationException("Blocked period start date must be before end date")
            periods.append({**period, "start_date": start.isoformat(), "end_date": end.isoformat()})
        normalized["blocked_periods"] = periods

    if values.get("preferred_deal_days") is not None:
        days = [str(day) for day in values["preferred_deal_days"]]
        invalid = [day for day in days if day.lower() not in DAYS_OF_WEEK]
        if invalid:
            raise ValidationException(f"Invalid days: {', '.join(invalid)}", details={"invalid_days": invalid})
        normalized["preferred_deal_days"] = [day.lower() for day in days]

    return normalized


def availability_to_dict(athlete_id: UUID, availability: Optional[AthleteAvailability]) -> Dict[str, Any]:
    """
    Stored preferences, or the defaults when the athlete never saved any

    `version` is None for defaults; pass it back on update to detect conflicts.
    """
    if availability is None:
        data = {
            key: (list(value) if isinstance(value, tuple) else value)
            for key, value in DEFAULT_AVAILABILITY.items()
        }
        data["study_hours"] = {}
        data.update({"athlete_id": athlete_id, "version": None, "updated_at": None})
        return data

    data = {key: getattr(availability, key) for key in AVAILABILITY_FIELDS}
    data["blocked_periods"] = list(availability.blocked_periods or [])
    data["preferred_deal_days"] = list(availability.preferred_deal_days or [])
    data.update({
        "athlete_id": availability.athlete_id,
        "version": availability.version,
        "updated_at": availability.updated_at,
    })
    return data


class AvailabilityService:
    """Service for athlete availability, blackout windows and deal timing"""

    def __init__(
        self,
        athlete_repository: AthleteRepository,
        availability_repository: AvailabilityRepository,
        calendar_repository: CalendarRepository,
        profile_repository: ProfileRepository
    ):
        """
        Initialize availability service

        Args:
            athlete_repository: Athlete repository
            availability_repository: Availability repository
            calendar_repository: Calendar repository
            profile_repository: Profile repository used to resolve the caller
        """
        self.athlete_repo = athlete_repository
        self.availability_repo = availability_repository
        self.calendar_repo = calendar_repository
        self.profile_repo = profile_repository

    async def _require_my_athlete_id(self, profile_id: UUID) -> UUID:
        athlete_id = await self.profile_repo.get_athlete_id(profile_id)
        if athlete_id is None:
            raise NotFoundException("Athlete profile not found")
        return athlete_id

    async def _require_athlete(self, athlete_id: UUID) -> Athlete:
        athlete = await self.athlete_repo.get_by_id(athlete_id)
        if athlete is None:
            raise NotFoundException("Athlete not found")
        return athlete

    async def _load_rules(
        self,
        athlete: Athlete,
        start: date,
        end: date,
        availability: Optional[AthleteAvailability] = None
    ) -> AvailabilityRules:
        """Rules covering [start, end]; athletes without a school only have custom blackouts"""
        if availability is None:
            availability = await self.availability_repo.get_by_athlete_id(athlete.id)

        events: List[AcademicEvent] = []
        if athlete.school_id is not None:
            events = await self.calendar_repo.get_blocking_events(athlete.school_id, start, end)

        return build_rules(events, availability)

    # Preferences

    async def get_availability(self, athlete_id: UUID) -> Dict[str, Any]:
        """Stored availability of an athlete, or the defaults"""
        availability = await self.availability_repo.get_by_athlete_id(athlete_id)
        return availability_to_dict(athlete_id, availability)

    async def get_my_availability(self, profile_id: UUID) -> Dict[str, Any]:
        athlete_id = await self._require_my_athlete_id(profile_id)
        return await self.get_availability(athlete_id)

    async def update_availability(
        self,
        profile_id: UUID,
        values: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Validate and upsert the caller's availability settings

        Args:
            profile_id: Caller's profile UUID
            values: Partial settings; absent keys keep their stored value
            expected_version: When given, the write only succeeds if the stored
                row still has this version (None/0 means "no row yet")

        Returns:
            The stored availability

        Raises:
            NotFoundException: If the caller has no athlete profile
            ValidationException: If a setting is invalid
            ConflictException: If another writer got there first
        """
        athlete_id = await self._require_my_athlete_id(profile_id)
        normalized = validate_availability_settings(values)
        # An explicit null only clears notes; the other columns keep their value
        normalized = {
            key: value for key, value in normalized.items()
            if key in AVAILABILITY_FIELDS and (value is not None or key == "notes")
        }

        current = await self.availability_repo.get_by_athlete_id(athlete_id)
        current_version = current.version if current is not None else 0

        if expected_version is not None and expected_version != current_version:
            logger.warning(
                f"Availability version conflict for athlete {athlete_id}",
                extra={"athlete_id": str(athlete_id), "expected": expected_version, "current": current_version}
            )
            raise ConflictException(
                "Availability was changed by another request",
                details={"expected_version": expected_version, "current_version": current_version}
            )

        try:
            if current is None:
                stored = await self.availability_repo.create(athlete_id, normalized)
            else:
                stored = await self.availability_repo.update(current, normalized)
        except (StaleDataError, IntegrityError) as e:
            logger.warning(
                f"Concurrent availability write for athlete {athlete_id}: {str(e)}",
                extra={"athlete_id": str(athlete_id)}
            )
            raise ConflictException("Availability was changed by another request")

        logger.info(
            f"Updated availability for athlete {athlete_id}",
            extra={"athlete_id": str(athlete_id), "fields": sorted(normalized)}
        )
        return availability_to_dict(athlete_id, stored)

    async def add_blocked_period(
        self,
        profile_id: UUID,
        period: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Append a custom blocked period to the caller's list

        The write is checked against the version that was read, so a
        concurrent edit surfaces as a ConflictException instead of being lost.
        """
        current = await self.get_my_availability(profile_id)
        new_period = {
            **period,
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return await self.update_availability(
            profile_id,
            {"blocked_periods": current["blocked_periods"] + [new_period]},
            expected_version=_read_version(current, expected_version),
        )

    async def remove_blocked_period(
        self,
        profile_id: UUID,
        period_id: str,
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """Drop a custom blocked period by id; unknown ids leave the list unchanged"""
        current = await self.get_my_availability(profile_id)
        remaining = [p for p in current["blocked_periods"] if p.get("id") != period_id]
        return await self.update_availability(
            profile_id,
            {"blocked_periods": remaining},
            expected_version=_read_version(current, expected_version),
        )

    # Availability queries

    async def check_availability(self, athlete_id: UUID, day: date) -> AvailabilityCheck:
        """
        Whether the athlete can take NIL work on `day`

        Raises:
            NotFoundException: If the athlete does not exist
        """
        athlete = await self._require_athlete(athlete_id)
        rules = await self._load_rules(athlete, day, day)

        if rules.is_available(day):
            return AvailabilityCheck(athlete_id=athlete_id, available=True)

        periods = rules.blocked_periods(day, day)
        if periods:
            reason = f"Blocked: {periods[0].name} ({periods[0].period_type})"
        else:
            reason = "Athlete is not available on this date"
        return AvailabilityCheck(athlete_id=athlete_id, available=False, reason=reason)

    async def check_my_availability(self, profile_id: UUID, day: date) -> AvailabilityCheck:
        athlete_id = await self._require_my_athlete_id(profile_id)
        return await self.check_availability(athlete_id, day)

    async def get_blocked_periods(
        self,
        athlete_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None
    ) -> List[BlockedPeriod]:
        """
        Calendar and custom blackouts overlapping the window

        Args:
            athlete_id: Athlete UUID
            start_date: Window start (defaults to today)
            end_date: Window end (defaults to today + the configured window)
            today: Override for the current date

        Returns:
            Blocked periods sorted by start date; empty when only a start
            past the default window end is given

        Raises:
            ValidationException: If an explicit start is after an explicit end
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationException("Start date must be before end date")

        today = today or date.today()
        start = start_date or today
        end = end_date or today + timedelta(days=settings.BLOCKED_PERIODS_WINDOW_DAYS)

        athlete = await self._require_athlete(athlete_id)
        if start > end:
            return []
        rules = await self._load_rules(athlete, start, end)
        return rules.blocked_periods(start, end)

    async def get_my_blocked_periods(
        self,
        profile_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None
    ) -> List[BlockedPeriod]:
        athlete_id = await self._require_my_athlete_id(profile_id)
        return await self.get_blocked_periods(athlete_id, start_date, end_date, today=today)

    async def suggest_deal_timing(
        self,
        athlete_id: UUID,
        within_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[SuggestedDate]:
        """
        Available dates in [today, today + within_days], best first

        Returns:
            Suggestions sorted by score descending, chronological within a score
        """
        today = today or date.today()
        within_days = settings.SUGGESTION_WINDOW_DAYS if within_days is None else within_days
        if within_days < 0:
            raise ValidationException("Days ahead must not be negative")

        athlete = await self._require_athlete(athlete_id)
        rules = await self._load_rules(athlete, today, today + timedelta(days=within_days))
        return rank_suggestions(rules.suggest_dates(today, within_days))

    async def suggest_my_deal_timing(
        self,
        profile_id: UUID,
        within_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[SuggestedDate]:
        athlete_id = await self._require_my_athlete_id(profile_id)
        return await self.suggest_deal_timing(athlete_id, within_days, today=today)

    async def get_upcoming_blocking_events(
        self,
        athlete_id: UUID,
        within_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[AcademicEvent]:
        """
        School no-NIL events in the coming window that apply to this athlete

        Finals and midterms drop out when the athlete has opted to take deals
        during them.

        Raises:
            NotFoundException: If the athlete or their school is missing
        """
        today = today or date.today()
        within_days = settings.UPCOMING_EVENTS_WINDOW_DAYS if within_days is None else within_days

        athlete = await self._require_athlete(athlete_id)
        if athlete.school_id is None:
            raise NotFoundException("School not found")

        availability = await self.availability_repo.get_by_athlete_id(athlete_id)
        rules = build_rules([], availability)

        events = await self.calendar_repo.get_blocking_events(
            athlete.school_id, today, today + timedelta(days=within_days)
        )
        return [event for event in events if rules.blocks_event(event.event_type.value)]

    async def get_availability_summary(
        self,
        athlete_id: UUID,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Preferences, upcoming blackouts and best dates in one view

        Inputs are read once and every part is derived from the same
        snapshot, so the summary either comes back whole or fails whole.
        """
        today = today or date.today()
        athlete = await self._require_athlete(athlete_id)
        availability = await self.availability_repo.get_by_athlete_id(athlete_id)

        blocked_end = today + timedelta(days=settings.BLOCKED_PERIODS_WINDOW_DAYS)
        suggestion_days = settings.SUGGESTION_WINDOW_DAYS
        window_end = max(blocked_end, today + timedelta(days=suggestion_days))

        rules = await self._load_rules(athlete, today, window_end, availability=availability)
        blocked = rules.blocked_periods(today, blocked_end)
        suggestions = rank_suggestions(rules.suggest_dates(today, suggestion_days))

        preferences = availability_to_dict(athlete_id, availability)

        return {
            "athlete_id": athlete_id,
            "preferences": {
                "max_deals_per_month": preferences["max_deals_per_month"],
                "no_finals_deals": preferences["no_finals_deals"],
                "no_midterms_deals": preferences["no_midterms_deals"],
                "preferred_days": preferences["preferred_deal_days"],
                "min_notice_days": preferences["min_notice_days"],
                "max_hours_per_week": preferences["max_hours_per_week"],
            },
            "blocked_periods_count": len(blocked),
            "upcoming_blocked": blocked[:SUMMARY_PREVIEW_SIZE],
            "next_available_dates": suggestions[:SUMMARY_PREVIEW_SIZE],
            "best_day_score": suggestions[0].availability_score if suggestions else None,
        }


def _read_version(current: Dict[str, Any], expected_version: Optional[int]) -> int:
    # Caller-supplied version wins; otherwise guard against changes since our own read
    if expected_version is not None:
        return expected_version
    return current["version"] or 0
