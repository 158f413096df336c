"""Business logic services"""

from backend.app.services.auth_service import AuthService, auth_service
from backend.app.services.taxonomy_service import TaxonomyService, TaxonomyCache, taxonomy_cache
from backend.app.services.matching_service import MatchingService
from backend.app.services.availability_service import AvailabilityService
from backend.app.services.calendar_service import CalendarService

__all__ = [
    'AuthService', 'auth_service',
    'TaxonomyService', 'TaxonomyCache', 'taxonomy_cache',
    'MatchingService', 'AvailabilityService', 'CalendarService',
]
