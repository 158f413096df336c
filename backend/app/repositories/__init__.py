"""Data access layer"""

from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.match_repository import MatchRepository
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.repositories.calendar_repository import CalendarRepository
from backend.app.repositories.availability_repository import AvailabilityRepository

__all__ = [
    'ProfileRepository',
    'AthleteRepository',
    'BrandRepository',
    'MatchRepository',
    'TaxonomyRepository',
    'CalendarRepository',
    'AvailabilityRepository',
]
