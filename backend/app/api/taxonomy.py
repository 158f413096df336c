"""Taxonomy API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import get_current_profile, require_admin
from backend.app.models.profile import Profile
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.services.taxonomy_service import TaxonomyService
from backend.app.schemas.taxonomy import (
    MajorCategoryResponse, BrandIndustryResponse, BrandIndustryItem,
    SetBrandIndustriesRequest, RemoveBrandIndustryResponse, MajorIndustryMapResponse
)
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_taxonomy_service(db: AsyncSession = Depends(get_db)) -> TaxonomyService:
    """Dependency to get taxonomy service"""
    return TaxonomyService(TaxonomyRepository(db), BrandRepository(db), ProfileRepository(db))


def _map_response(service: TaxonomyService, mapping) -> MajorIndustryMapResponse:
    return MajorIndustryMapResponse(
        categories={name: list(industries) for name, industries in mapping.items()},
        from_seed=service.cache.from_seed
    )


@router.get("/industries", response_model=List[str])
async def get_industries(taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)):
    """Known industry tags"""
    return list(taxonomy_service.get_industries())


@router.get("/major-map", response_model=MajorIndustryMapResponse)
async def get_major_industry_map(taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)):
    """Major category -> industries, as currently cached"""
    mapping = await taxonomy_service.get_major_industry_map()
    return _map_response(taxonomy_service, mapping)


@router.get("/major-categories", response_model=List[MajorCategoryResponse])
async def get_major_categories(taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)):
    """Stored major categories ordered by name"""
    categories = await taxonomy_service.get_major_categories()
    return [MajorCategoryResponse.model_validate(c) for c in categories]


@router.post("/refresh", response_model=MajorIndustryMapResponse)
async def refresh_taxonomy(
    current_profile: Profile = Depends(require_admin),
    taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Reload the cached taxonomy from storage (admin only)"""
    logger.info(f"Taxonomy refresh requested by profile {current_profile.id}")
    mapping = await taxonomy_service.refresh()
    return _map_response(taxonomy_service, mapping)


@router.get("/brands/{brand_id}/industries", response_model=List[BrandIndustryResponse])
async def get_brand_industries(
    brand_id: UUID,
    taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Industries of a brand, primary first"""
    rows = await taxonomy_service.get_brand_industries(brand_id)
    return [BrandIndustryResponse.model_validate(r) for r in rows]


@router.put("/brands/me/industries", response_model=List[BrandIndustryResponse])
async def set_my_brand_industries(
    request: SetBrandIndustriesRequest,
    current_profile: Profile = Depends(get_current_profile),
    taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)
):
    """
    Replace the calling brand's industries

    Only the first item flagged primary stays primary.
    """
    rows = await taxonomy_service.set_brand_industries(
        current_profile.id,
        [item.model_dump() for item in request.industries]
    )
    return [BrandIndustryResponse.model_validate(r) for r in rows]


@router.post("/brands/me/industries", response_model=BrandIndustryResponse, status_code=status.HTTP_201_CREATED)
async def add_my_brand_industry(
    request: BrandIndustryItem,
    current_profile: Profile = Depends(get_current_profile),
    taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Add one industry; a new primary demotes the previous one"""
    row = await taxonomy_service.add_brand_industry(
        current_profile.id,
        request.industry,
        is_primary=request.is_primary
    )
    return BrandIndustryResponse.model_validate(row)


@router.delete("/brands/me/industries/{industry_id}", response_model=RemoveBrandIndustryResponse)
async def remove_my_brand_industry(
    industry_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    taxonomy_service: TaxonomyService = Depends(get_taxonomy_service)
):
    """Remove one industry from the calling brand"""
    removed = await taxonomy_service.remove_brand_industry(current_profile.id, industry_id)
    return RemoveBrandIndustryResponse(removed=removed)
