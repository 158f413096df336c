"""Availability schemas for API requests and responses"""

from typing import List, Optional, Dict, Any
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict


class BlockedPeriodInput(BaseModel):
    """A custom blackout window supplied by the athlete"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    name: Optional[str] = Field(None, max_length=255)
    reason: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="allow")


class AvailabilityUpdateRequest(BaseModel):
    """
    Partial availability update

    Ranges and day names are checked by the service so that callers get
    the same messages however they reach it.
    """
    blocked_periods: Optional[List[BlockedPeriodInput]] = None
    study_hours: Optional[Dict[str, Any]] = None
    max_deals_per_month: Optional[int] = None
    no_finals_deals: Optional[bool] = None
    no_midterms_deals: Optional[bool] = None
    preferred_deal_days: Optional[List[str]] = None
    min_notice_days: Optional[int] = None
    max_hours_per_week: Optional[int] = None
    notes: Optional[str] = None
    version: Optional[int] = Field(None, ge=0, description="Version last read; rejects the write if it changed")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "max_deals_per_month": 10,
                "preferred_deal_days": ["Friday", "SATURDAY"],
                "version": 3
            }
        }
    )

    def settings(self) -> Dict[str, Any]:
        """Only the fields the caller sent, without the version"""
        return self.model_dump(mode="json", exclude_unset=True, exclude={"version"})


class AvailabilityResponse(BaseModel):
    athlete_id: UUID
    blocked_periods: List[Dict[str, Any]]
    study_hours: Dict[str, Any]
    max_deals_per_month: int
    no_finals_deals: bool
    no_midterms_deals: bool
    preferred_deal_days: List[str]
    min_notice_days: int
    max_hours_per_week: int
    notes: Optional[str] = None
    version: Optional[int] = Field(None, description="None until the athlete first saves preferences")
    updated_at: Optional[datetime] = None


class AvailabilityCheckResponse(BaseModel):
    athlete_id: UUID
    date: date
    available: bool
    reason: Optional[str] = Field(None, description="Advisory explanation when unavailable")


class BlockedPeriodResponse(BaseModel):
    period_type: str
    name: str
    start_date: date
    end_date: date
    source: str = Field(..., description="academic_calendar or athlete_preference")

    model_config = ConfigDict(from_attributes=True)


class SuggestedDateResponse(BaseModel):
    suggested_date: date
    day_of_week: str
    is_preferred_day: bool
    availability_score: int

    model_config = ConfigDict(from_attributes=True)


class AvailabilityPreferences(BaseModel):
    max_deals_per_month: int
    no_finals_deals: bool
    no_midterms_deals: bool
    preferred_days: List[str]
    min_notice_days: int
    max_hours_per_week: int


class AvailabilitySummaryResponse(BaseModel):
    athlete_id: UUID
    preferences: AvailabilityPreferences
    blocked_periods_count: int
    upcoming_blocked: List[BlockedPeriodResponse]
    next_available_dates: List[SuggestedDateResponse]
    best_day_score: Optional[int] = None
