"""Athlete availability rules over academic calendars and custom blackouts"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from types import MappingProxyType
from typing import Any, Iterable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = (
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
)

EVENT_TYPES = ("finals", "midterms", "break", "graduation", "registration", "other")

SEMESTERS = ("fall", "spring", "summer", "winter")

WEEKEND_DAYS = frozenset({"saturday", "sunday"})

CALENDAR_SOURCE = "academic_calendar"
ATHLETE_SOURCE = "athlete_preference"
CUSTOM_PERIOD_TYPE = "custom"
DEFAULT_BLOCKED_PERIOD_NAME = "Blocked Period"

# Preferences assumed for an athlete who has never saved any
DEFAULT_AVAILABILITY = MappingProxyType({
    "blocked_periods": (),
    "study_hours": MappingProxyType({}),
    "max_deals_per_month": 5,
    "no_finals_deals": True,
    "no_midterms_deals": True,
    "preferred_deal_days": ("friday", "saturday", "sunday"),
    "min_notice_days": 3,
    "max_hours_per_week": 10,
    "notes": None,
})


def day_name(day: date) -> str:
    """Lowercase English weekday name, independent of locale"""
    # date.weekday() is Monday=0; DAYS_OF_WEEK starts on Sunday
    return DAYS_OF_WEEK[(day.weekday() + 1) % 7]


def parse_date(value: Any) -> date:
    """Accept a date or an ISO-8601 string (a time part is ignored)"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _overlaps(start: date, end: date, window_start: date, window_end: date) -> bool:
    return start <= window_end and end >= window_start


@dataclass(frozen=True)
class CalendarBlackout:
    """A school calendar event flagged as no-NIL-activity"""
    event_type: str
    name: str
    start_date: date
    end_date: date

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class CustomBlock:
    """A blackout the athlete added themselves"""
    start_date: date
    end_date: date
    name: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CustomBlock":
        return cls(
            start_date=parse_date(data["start_date"]),
            end_date=parse_date(data["end_date"]),
            name=data.get("name"),
            id=data.get("id"),
        )

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class BlockedPeriod:
    """A blackout window as reported to callers"""
    period_type: str
    name: str
    start_date: date
    end_date: date
    source: str


@dataclass(frozen=True)
class SuggestedDate:
    """An available date with its desirability score"""
    suggested_date: date
    day_of_week: str
    is_preferred_day: bool
    availability_score: int


@dataclass(frozen=True)
class AvailabilityRules:
    """
    Everything needed to decide whether an athlete can take NIL work on a day

    Built once per request from the athlete's school calendar (no-NIL events
    only) and stored preferences, then queried in memory.
    """
    school_events: Tuple[CalendarBlackout, ...] = ()
    custom_periods: Tuple[CustomBlock, ...] = ()
    no_finals_deals: bool = True
    no_midterms_deals: bool = True
    # Empty means the athlete has no preference and every day counts as preferred
    preferred_days: Tuple[str, ...] = ()
    min_notice_days: int = 3

    base_score: int = field(default=50, repr=False)
    preferred_bonus: int = field(default=30, repr=False)
    weekend_bonus: int = field(default=10, repr=False)
    notice_bonus: int = field(default=10, repr=False)

    def blocks_event(self, event_type: str) -> bool:
        """Whether a no-NIL event of this type applies given the athlete's preferences"""
        if event_type == "finals":
            return self.no_finals_deals
        if event_type == "midterms":
            return self.no_midterms_deals
        return True

    def is_available(self, day: date) -> bool:
        """
        Availability predicate for a single day

        Preferred days and notice period only shape suggestions; they never
        make a day unavailable.
        """
        for event in self.school_events:
            if event.covers(day) and self.blocks_event(event.event_type):
                return False
        return not any(period.covers(day) for period in self.custom_periods)

    def blocked_periods(self, start: date, end: date) -> List[BlockedPeriod]:
        """
        Merge calendar and custom blackouts overlapping [start, end]

        Returns:
            Blocked periods sorted by start date, calendar events first on ties
        """
        periods = [
            BlockedPeriod(
                period_type=event.event_type,
                name=event.name,
                start_date=event.start_date,
                end_date=event.end_date,
                source=CALENDAR_SOURCE,
            )
            for event in self.school_events
            if _overlaps(event.start_date, event.end_date, start, end)
            and self.blocks_event(event.event_type)
        ]
        periods.extend(
            BlockedPeriod(
                period_type=CUSTOM_PERIOD_TYPE,
                name=custom.name or DEFAULT_BLOCKED_PERIOD_NAME,
                start_date=custom.start_date,
                end_date=custom.end_date,
                source=ATHLETE_SOURCE,
            )
            for custom in self.custom_periods
            if _overlaps(custom.start_date, custom.end_date, start, end)
        )
        periods.sort(key=lambda period: period.start_date)
        return periods

    def is_preferred(self, day: date) -> bool:
        return not self.preferred_days or day_name(day) in self.preferred_days

    def score_day(self, day: date, today: date) -> int:
        score = self.base_score
        if self.is_preferred(day):
            score += self.preferred_bonus
        if day_name(day) in WEEKEND_DAYS:
            score += self.weekend_bonus
        if day > today + timedelta(days=self.min_notice_days):
            score += self.notice_bonus
        return score

    def suggest_dates(self, today: date, within_days: int) -> List[SuggestedDate]:
        """
        Score every available day from today through today + within_days

        Returns:
            Suggestions in chronological order
        """
        suggestions = []
        for offset in range(within_days + 1):
            day = today + timedelta(days=offset)
            if not self.is_available(day):
                continue
            suggestions.append(
                SuggestedDate(
                    suggested_date=day,
                    day_of_week=day_name(day).capitalize(),
                    is_preferred_day=self.is_preferred(day),
                    availability_score=self.score_day(day, today),
                )
            )
        return suggestions


def rank_suggestions(suggestions: Iterable[SuggestedDate]) -> List[SuggestedDate]:
    """Best score first; sorted() is stable so ties stay chronological"""
    return sorted(suggestions, key=lambda s: s.availability_score, reverse=True)


def build_rules(
    events: Iterable[Any],
    availability: Optional[Any] = None,
) -> AvailabilityRules:
    """
    Build rules from calendar event rows and an optional availability row

    Args:
        events: Objects with event_type, name, start_date, end_date and
            no_nil_activity attributes; non-blocking events are ignored
        availability: Stored preferences, or None when the athlete never saved any

    Returns:
        AvailabilityRules
    """
    school_events = tuple(
        CalendarBlackout(
            event_type=getattr(event.event_type, "value", event.event_type),
            name=event.name,
            start_date=event.start_date,
            end_date=event.end_date,
        )
        for event in events
        if event.no_nil_activity
    )

    if availability is None:
        return AvailabilityRules(school_events=school_events)

    return AvailabilityRules(
        school_events=school_events,
        custom_periods=tuple(
            CustomBlock.from_dict(period) for period in (availability.blocked_periods or [])
        ),
        no_finals_deals=availability.no_finals_deals,
        no_midterms_deals=availability.no_midterms_deals,
        preferred_days=tuple(availability.preferred_deal_days or ()),
        min_notice_days=availability.min_notice_days,
    )
