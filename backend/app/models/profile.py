"""Profile model"""

from sqlalchemy import Column, String, Uuid
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin, value_enum
import uuid
import enum


class ProfileRole(str, enum.Enum):
    """Profile role enumeration"""
    ATHLETE = "athlete"
    BRAND = "brand"
    ATHLETIC_DIRECTOR = "athletic_director"
    ADMIN = "admin"


class Profile(Base, TimestampMixin):
    """Authenticated account; the bearer token subject is the profile id"""

    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(value_enum(ProfileRole, "profile_role"), nullable=False, default=ProfileRole.ATHLETE)

    def __repr__(self):
        return f"<Profile(id={self.id}, role={self.role})>"
