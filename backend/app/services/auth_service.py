"""Authentication service for JWT access tokens"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from uuid import UUID
from jose import JWTError, jwt

from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.models.profile import ProfileRole

logger = get_logger(__name__)


class AuthService:
    """
    Verifies access tokens issued by the platform's identity provider

    Tokens carry the profile id as `sub`. Issuing is kept for service-to-service
    calls and tests; end users never obtain tokens from this service.
    """

    def __init__(self):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.access_token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(
        self,
        profile_id: UUID,
        role: ProfileRole,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Generate JWT access token

        Args:
            profile_id: Profile ID
            role: Profile role
            expires_delta: Optional custom expiration time

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        to_encode = {
            "sub": str(profile_id),
            "role": role.value,
            "exp": expire,
            "iat": now,
            "type": "access"
        }

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode an access token

        Args:
            token: JWT token string

        Returns:
            Token payload if valid, None otherwise
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Token verification failed: {str(e)}")
            return None

        if payload.get("type") != "access":
            logger.warning("Token is not an access token")
            return None

        return payload


# Global auth service instance
auth_service = AuthService()
