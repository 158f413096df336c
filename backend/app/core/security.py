"""Security dependencies for resolving the calling profile"""

from typing import Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.exceptions import AuthenticationException, AuthorizationException
from backend.app.models.profile import Profile, ProfileRole
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.services.auth_service import auth_service
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

# auto_error=False so a missing header goes through our own 401 handling
security = HTTPBearer(auto_error=False)


async def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    """
    Dependency to get the authenticated profile from the bearer token

    Args:
        credentials: HTTP Bearer credentials
        db: Database session

    Returns:
        Current profile

    Raises:
        AuthenticationException: If the token is missing or invalid, or the profile is unknown
    """
    if credentials is None:
        raise AuthenticationException()

    payload = auth_service.verify_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        logger.warning("Invalid or expired token")
        raise AuthenticationException()

    try:
        profile_id = UUID(payload["sub"])
    except ValueError:
        logger.warning(f"Token subject is not a profile id: {payload['sub']}")
        raise AuthenticationException()

    profile = await ProfileRepository(db).get_by_id(profile_id)
    if not profile:
        logger.warning(f"Profile not found: {profile_id}")
        raise AuthenticationException()

    return profile


class RoleChecker:
    """Dependency class for role-based access control"""

    def __init__(self, allowed_roles: list[ProfileRole]):
        self.allowed_roles = allowed_roles

    def __call__(self, current_profile: Profile = Depends(get_current_profile)) -> Profile:
        """
        Check if current profile has a required role

        Raises:
            AuthorizationException: If the profile's role is not allowed
        """
        if current_profile.role not in self.allowed_roles:
            logger.warning(
                f"Profile {current_profile.id} with role {current_profile.role} "
                f"attempted to access resource requiring roles: {self.allowed_roles}"
            )
            raise AuthorizationException(
                f"Insufficient permissions. Required roles: {[r.value for r in self.allowed_roles]}"
            )

        return current_profile


# Pre-defined role checkers
require_admin = RoleChecker([ProfileRole.ADMIN])
require_athlete = RoleChecker([ProfileRole.ATHLETE])
require_brand = RoleChecker([ProfileRole.BRAND])
require_calendar_editor = RoleChecker([ProfileRole.ADMIN, ProfileRole.ATHLETIC_DIRECTOR])
