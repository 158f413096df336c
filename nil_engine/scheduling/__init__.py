"""Availability and deal-timing rules"""

from nil_engine.scheduling.availability import (
    DAYS_OF_WEEK,
    EVENT_TYPES,
    CALENDAR_SOURCE,
    ATHLETE_SOURCE,
    CUSTOM_PERIOD_TYPE,
    DEFAULT_BLOCKED_PERIOD_NAME,
    SEMESTERS,
    DEFAULT_AVAILABILITY,
    AvailabilityRules,
    BlockedPeriod,
    CalendarBlackout,
    CustomBlock,
    SuggestedDate,
    build_rules,
    day_name,
    parse_date,
    rank_suggestions,
)

__all__ = [
    'DAYS_OF_WEEK',
    'EVENT_TYPES',
    'CALENDAR_SOURCE',
    'ATHLETE_SOURCE',
    'CUSTOM_PERIOD_TYPE',
    'DEFAULT_BLOCKED_PERIOD_NAME',
    'SEMESTERS',
    'DEFAULT_AVAILABILITY',
    'AvailabilityRules',
    'BlockedPeriod',
    'CalendarBlackout',
    'CustomBlock',
    'SuggestedDate',
    'build_rules',
    'day_name',
    'parse_date',
    'rank_suggestions',
]
