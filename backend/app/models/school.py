"""School, sport and athletic director models"""

from sqlalchemy import Column, String, Uuid, ForeignKey
from sqlalchemy.orm import relationship
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid


class School(Base, TimestampMixin):
    """School an athlete is enrolled at"""

    __tablename__ = "schools"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    short_name = Column(String(50), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    division = Column(String(50), nullable=True, index=True)

    def __repr__(self):
        return f"<School(id={self.id}, name={self.name})>"


class Sport(Base, TimestampMixin):
    """Sport reference data"""

    __tablename__ = "sports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)

    def __repr__(self):
        return f"<Sport(id={self.id}, name={self.name})>"


class AthleticDirector(Base, TimestampMixin):
    """Links a profile to the school whose calendar it administers"""

    __tablename__ = "athletic_directors"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)

    school = relationship("School", lazy="selectin")

    def __repr__(self):
        return f"<AthleticDirector(profile_id={self.profile_id}, school_id={self.school_id})>"
