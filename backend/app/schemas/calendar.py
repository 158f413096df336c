"""Academic calendar schemas for API requests and responses"""

from typing import Optional
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator

from backend.app.models.calendar import EventType, Semester


class CalendarEventRequest(BaseModel):
    """Create a calendar event, or update one when `id` is set"""
    id: Optional[UUID] = None
    school_id: UUID
    event_type: str = Field(..., description="finals, midterms, break, graduation, registration or other")
    name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date
    no_nil_activity: Optional[bool] = Field(None, description="Defaults to true")
    academic_year: Optional[str] = Field(None, max_length=20)
    semester: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Event name cannot be empty')
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "school_id": "123e4567-e89b-12d3-a456-426614174000",
                "event_type": "finals",
                "name": "Fall Finals Week",
                "start_date": "2026-12-07",
                "end_date": "2026-12-12",
                "academic_year": "2026-2027",
                "semester": "fall"
            }
        }
    )


class CalendarEventResponse(BaseModel):
    id: UUID
    school_id: UUID
    event_type: EventType
    name: str
    start_date: date
    end_date: date
    no_nil_activity: bool
    academic_year: Optional[str] = None
    semester: Optional[Semester] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
