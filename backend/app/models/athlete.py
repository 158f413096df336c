"""Athlete model"""

from sqlalchemy import Column, String, Integer, Boolean, Numeric, Uuid, ForeignKey
from sqlalchemy.orm import relationship
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin, value_enum
import uuid
import enum


class ScholarTier(str, enum.Enum):
    """Academic recognition tier"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class Athlete(Base, TimestampMixin):
    """Student-athlete profile as seen by the matching and scheduling cores"""

    __tablename__ = "athletes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=True, index=True)
    sport_id = Column(Uuid, ForeignKey("sports.id"), nullable=True, index=True)
    major_category_id = Column(Uuid, ForeignKey("major_categories.id"), nullable=True, index=True)

    major = Column(String(255), nullable=True)
    academic_year = Column(String(50), nullable=True)
    position = Column(String(100), nullable=True)
    gpa = Column(Numeric(3, 2, asdecimal=False), nullable=True)
    cumulative_gpa = Column(Numeric(3, 2, asdecimal=False), nullable=True)
    gradeup_score = Column(Integer, nullable=False, default=0, index=True)
    total_followers = Column(Integer, nullable=False, default=0)
    scholar_tier = Column(value_enum(ScholarTier, "scholar_tier"), nullable=True)

    verified = Column(Boolean, nullable=False, default=False)
    enrollment_verified = Column(Boolean, nullable=False, default=False)
    sport_verified = Column(Boolean, nullable=False, default=False)
    grades_verified = Column(Boolean, nullable=False, default=False)

    is_searchable = Column(Boolean, nullable=False, default=True, index=True)
    accepting_deals = Column(Boolean, nullable=False, default=True, index=True)

    # Relationships
    profile = relationship("Profile", lazy="selectin")
    school = relationship("School", lazy="selectin")
    sport = relationship("Sport", lazy="selectin")
    major_category = relationship("MajorCategory", lazy="selectin")

    @property
    def effective_gpa(self):
        """Cumulative GPA when recorded, otherwise the term GPA"""
        return self.cumulative_gpa if self.cumulative_gpa is not None else self.gpa

    def __repr__(self):
        return f"<Athlete(id={self.id}, school_id={self.school_id})>"
