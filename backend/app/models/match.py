"""Match score and major category models"""

from sqlalchemy import (
    Column, String, Integer, Boolean, Text, DateTime, Uuid, ForeignKey,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin, StringArray, utcnow
import uuid


class MajorCategory(Base, TimestampMixin):
    """Academic major category mapped to the industries it feeds"""

    __tablename__ = "major_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    industries = Column(StringArray, nullable=False, default=list)

    def __repr__(self):
        return f"<MajorCategory(id={self.id}, name={self.name})>"


class AthleteBrandMatch(Base, TimestampMixin):
    """Precomputed compatibility score for one (athlete, brand) pair"""

    __tablename__ = "athlete_brand_matches"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    athlete_id = Column(Uuid, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False, index=True)
    match_score = Column(Integer, nullable=False, index=True)
    major_match = Column(Boolean, nullable=False, default=False)
    industry_match = Column(Boolean, nullable=False, default=False)
    values_match = Column(Boolean, nullable=False, default=False)
    calculated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    athlete = relationship("Athlete", lazy="selectin")
    brand = relationship("Brand", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("athlete_id", "brand_id", name="uq_athlete_brand_match"),
        CheckConstraint("match_score >= 0 AND match_score <= 100", name="ck_match_score_range"),
    )

    def __repr__(self):
        return f"<AthleteBrandMatch(athlete_id={self.athlete_id}, brand_id={self.brand_id}, match_score={self.match_score})>"
