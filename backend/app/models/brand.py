"""Brand and brand industry models"""

from sqlalchemy import Column, String, Boolean, Uuid, ForeignKey
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid


class Brand(Base, TimestampMixin):
    """Company sponsoring NIL deals"""

    __tablename__ = "brands"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    company_name = Column(String(255), nullable=False, index=True)
    industry = Column(String(255), nullable=True)  # free-text label shown to athletes
    logo_url = Column(String(500), nullable=True)
    website_url = Column(String(500), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False, index=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<Brand(id={self.id}, company_name={self.company_name})>"


class BrandIndustry(Base, TimestampMixin):
    """Industry tag attached to a brand; at most one per brand is primary"""

    __tablename__ = "brand_industries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False, index=True)
    industry = Column(String(100), nullable=False, index=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<BrandIndustry(brand_id={self.brand_id}, industry={self.industry}, is_primary={self.is_primary})>"
