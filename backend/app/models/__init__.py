"""Database models"""

from backend.app.models.base import TimestampMixin
from backend.app.models.profile import Profile, ProfileRole
from backend.app.models.school import School, Sport, AthleticDirector
from backend.app.models.athlete import Athlete, ScholarTier
from backend.app.models.brand import Brand, BrandIndustry
from backend.app.models.match import AthleteBrandMatch, MajorCategory
from backend.app.models.calendar import AcademicEvent, AthleteAvailability, EventType, Semester

__all__ = [
    "TimestampMixin",
    "Profile",
    "ProfileRole",
    "School",
    "Sport",
    "AthleticDirector",
    "Athlete",
    "ScholarTier",
    "Brand",
    "BrandIndustry",
    "AthleteBrandMatch",
    "MajorCategory",
    "AcademicEvent",
    "AthleteAvailability",
    "EventType",
    "Semester",
]
