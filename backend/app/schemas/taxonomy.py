"""Taxonomy schemas for API requests and responses"""

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict


class MajorCategoryResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    industries: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class BrandIndustryResponse(BaseModel):
    id: UUID
    brand_id: UUID
    industry: str
    is_primary: bool

    model_config = ConfigDict(from_attributes=True)


class BrandIndustryItem(BaseModel):
    """One industry tag; only the first primary in a list is kept primary"""
    industry: str = Field(..., min_length=1, max_length=100)
    is_primary: bool = False


class SetBrandIndustriesRequest(BaseModel):
    industries: List[BrandIndustryItem]


class RemoveBrandIndustryResponse(BaseModel):
    removed: bool


class MajorIndustryMapResponse(BaseModel):
    """Category name -> industries"""
    categories: Dict[str, List[str]]
    from_seed: bool = Field(False, description="True when storage had no categories and seed data is served")
