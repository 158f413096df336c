"""Academic calendar and athlete availability models"""

from sqlalchemy import (
    Column, String, Integer, Boolean, Text, Date, Uuid, ForeignKey, CheckConstraint
)
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin, StringArray, JSONDocument, value_enum
import uuid
import enum


class EventType(str, enum.Enum):
    """Academic calendar event type"""
    FINALS = "finals"
    MIDTERMS = "midterms"
    BREAK = "break"
    GRADUATION = "graduation"
    REGISTRATION = "registration"
    OTHER = "other"


class Semester(str, enum.Enum):
    """Academic term"""
    FALL = "fall"
    SPRING = "spring"
    SUMMER = "summer"
    WINTER = "winter"


class AcademicEvent(Base, TimestampMixin):
    """School calendar entry maintained by athletic directors"""

    __tablename__ = "academic_calendars"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(value_enum(EventType, "academic_event_type"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    no_nil_activity = Column(Boolean, nullable=False, default=False)
    academic_year = Column(String(20), nullable=True)
    semester = Column(value_enum(Semester, "semester"), nullable=True)

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_academic_event_dates"),
    )

    def __repr__(self):
        return f"<AcademicEvent(id={self.id}, event_type={self.event_type}, name={self.name})>"


class AthleteAvailability(Base, TimestampMixin):
    """Athlete scheduling preferences; one row per athlete"""

    __tablename__ = "athlete_availability"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    athlete_id = Column(Uuid, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    blocked_periods = Column(JSONDocument, nullable=False, default=list)
    study_hours = Column(JSONDocument, nullable=False, default=dict)
    max_deals_per_month = Column(Integer, nullable=False, default=5)
    no_finals_deals = Column(Boolean, nullable=False, default=True)
    no_midterms_deals = Column(Boolean, nullable=False, default=True)
    preferred_deal_days = Column(StringArray, nullable=False, default=lambda: ["friday", "saturday", "sunday"])
    min_notice_days = Column(Integer, nullable=False, default=3)
    max_hours_per_week = Column(Integer, nullable=False, default=10)
    notes = Column(Text, nullable=True)
    version = Column(Integer, nullable=False)

    # Every UPDATE checks and bumps `version`; a stale writer gets StaleDataError
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<AthleteAvailability(athlete_id={self.athlete_id}, version={self.version})>"
