"""Matching API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.database import get_db
from backend.app.core.security import get_current_profile, require_admin
from backend.app.models.profile import Profile
from backend.app.repositories.match_repository import MatchRepository
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.services.matching_service import MatchingService
from backend.app.services.taxonomy_service import TaxonomyService
from backend.app.schemas.match import (
    MatchCalculateRequest, MatchCalculateResponse, RecalculationResponse,
    BrandMatchResponse, AthleteMatchResponse, MatchingAthletesResponse,
    MatchStatsResponse, IndustrySearchRequest, IndustrySearchResponse, AthleteSummary
)
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_matching_service(db: AsyncSession = Depends(get_db)) -> MatchingService:
    """Dependency to get matching service"""
    profile_repo = ProfileRepository(db)
    brand_repo = BrandRepository(db)
    taxonomy_service = TaxonomyService(TaxonomyRepository(db), brand_repo, profile_repo)
    return MatchingService(
        MatchRepository(db),
        AthleteRepository(db),
        brand_repo,
        profile_repo,
        taxonomy_service
    )


@router.post("/calculate", response_model=MatchCalculateResponse)
async def calculate_match(
    request: MatchCalculateRequest,
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Score one athlete against one brand

    The score is stored, overwriting any previous score for the pair, and
    returned. Calling it twice with no data change returns the same score.
    """
    logger.info(f"Match calculation request from profile {current_profile.id}")

    score = await matching_service.calculate_match_score(request.athlete_id, request.brand_id)
    return MatchCalculateResponse(
        athlete_id=request.athlete_id,
        brand_id=request.brand_id,
        match_score=score
    )


@router.post("/athletes/{athlete_id}/recalculate", response_model=RecalculationResponse)
async def recalculate_athlete_matches(
    athlete_id: UUID,
    current_profile: Profile = Depends(require_admin),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Rescore an athlete against every verified brand

    Failed pairs are listed in `failed`; the others are still stored.
    """
    result = await matching_service.recalculate_athlete_matches(athlete_id)
    return RecalculationResponse.from_result(result)


@router.post("/brands/{brand_id}/recalculate", response_model=RecalculationResponse)
async def recalculate_brand_matches(
    brand_id: UUID,
    current_profile: Profile = Depends(require_admin),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Rescore a brand against every athlete that is searchable and accepting deals"""
    result = await matching_service.recalculate_brand_matches(brand_id)
    return RecalculationResponse.from_result(result)


@router.get("/top", response_model=List[BrandMatchResponse])
async def get_top_matches(
    limit: Optional[int] = Query(None, ge=1, le=100),
    min_score: Optional[int] = Query(None, ge=0, le=100),
    industries: Optional[List[str]] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Best brand matches for the calling athlete

    **Note:** `industries` filters the page after `limit` is applied, so
    fewer than `limit` matches may come back.
    """
    matches = await matching_service.get_top_matches(
        current_profile.id,
        limit=limit,
        min_score=min_score,
        industries=industries
    )
    return [BrandMatchResponse.model_validate(m) for m in matches]


@router.get("/athletes/{athlete_id}/top", response_model=List[BrandMatchResponse])
async def get_top_matches_for_athlete(
    athlete_id: UUID,
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Best brand matches for any athlete"""
    matches = await matching_service.get_top_matches_for_athlete(athlete_id, limit=limit)
    return [BrandMatchResponse.model_validate(m) for m in matches]


@router.get("/brands/{brand_id}/athletes", response_model=MatchingAthletesResponse)
async def get_matching_athletes(
    brand_id: UUID,
    min_score: Optional[int] = Query(None, ge=0, le=100),
    min_gpa: Optional[float] = Query(None, ge=0, le=5),
    sports: Optional[List[UUID]] = Query(None),
    schools: Optional[List[UUID]] = Query(None),
    divisions: Optional[List[str]] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Athletes matched to a brand

    **Returns:**
    - One page of athletes ordered by match score
    - `total`: the number of athletes passing every filter, across all pages
    """
    page, total = await matching_service.get_matching_athletes(
        brand_id,
        min_score=min_score,
        min_gpa=min_gpa,
        sports=sports,
        schools=schools,
        divisions=divisions,
        limit=limit,
        offset=offset
    )
    return MatchingAthletesResponse(
        athletes=[AthleteMatchResponse.from_match(m) for m in page],
        total=total,
        limit=limit or settings.MATCHING_ATHLETES_PAGE_SIZE,
        offset=offset
    )


@router.get("/stats", response_model=MatchStatsResponse)
async def get_my_match_stats(
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Score distribution for the calling athlete"""
    stats = await matching_service.get_match_stats(profile_id=current_profile.id)
    return MatchStatsResponse(**stats)


@router.get("/athletes/{athlete_id}/stats", response_model=MatchStatsResponse)
async def get_match_stats(
    athlete_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Score distribution for any athlete"""
    stats = await matching_service.get_match_stats(athlete_id=athlete_id)
    return MatchStatsResponse(**stats)


@router.post("/search/industry", response_model=IndustrySearchResponse, status_code=status.HTTP_200_OK)
async def find_athletes_by_industry(
    request: IndustrySearchRequest,
    current_profile: Profile = Depends(get_current_profile),
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Athletes whose major category feeds any of the given industries

    Ordered by GradeUp score. Empty when no category lists the industries.
    """
    athletes = await matching_service.find_athletes_by_industry(
        request.industries,
        limit=request.limit,
        min_gpa=request.min_gpa
    )
    return IndustrySearchResponse(
        athletes=[AthleteSummary.from_athlete(a) for a in athletes],
        total=len(athletes)
    )
