"""Matching service for scoring and querying brand-athlete matches"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple, Iterable
from uuid import UUID
import math

from sqlalchemy.exc import SQLAlchemyError

from backend.app.repositories.match_repository import MatchRepository
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.services.taxonomy_service import TaxonomyService
from backend.app.models.athlete import Athlete
from backend.app.models.match import AthleteBrandMatch
from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.core.exceptions import NotFoundException, DatabaseException
from nil_engine.scoring import MatchScorer, AthleteSignals

logger = get_logger(__name__)

HIGH_SCORE_THRESHOLD = 80
MEDIUM_SCORE_THRESHOLD = 60


@dataclass
class RecalculationResult:
    """Outcome of a bulk recalculation; failures carry the failing id and error"""
    total: int = 0
    succeeded: int = 0
    failed: List[Dict[str, str]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return self.succeeded


def athlete_signals(athlete: Athlete) -> AthleteSignals:
    """Project an athlete row onto the attributes the scorer reads"""
    category = athlete.major_category
    return AthleteSignals(
        major_industries=frozenset(category.industries or []) if category else frozenset(),
        gpa=athlete.effective_gpa,
        verified=bool(athlete.verified),
        enrollment_verified=bool(athlete.enrollment_verified),
        sport_verified=bool(athlete.sport_verified),
        scholar_tier=athlete.scholar_tier,
        total_followers=athlete.total_followers or 0,
    )


def summarize_match_scores(matches: Iterable[Any]) -> Dict[str, int]:
    """
    Aggregate match rows into bucket counts

    Args:
        matches: Objects with match_score, major_match and industry_match

    Returns:
        Dict with total_matches, average_score, high/medium/low counts and flag counts
    """
    matches = list(matches)
    total = len(matches)
    scores = [m.match_score for m in matches]

    # Half-up rounding; round() would round 62.5 down to 62
    average = math.floor(sum(scores) / total + 0.5) if total else 0

    high = sum(1 for s in scores if s >= HIGH_SCORE_THRESHOLD)
    medium = sum(1 for s in scores if MEDIUM_SCORE_THRESHOLD <= s < HIGH_SCORE_THRESHOLD)

    return {
        "total_matches": total,
        "average_score": average,
        "high_matches": high,
        "medium_matches": medium,
        "low_matches": total - high - medium,
        "major_matches": sum(1 for m in matches if m.major_match),
        "industry_matches": sum(1 for m in matches if m.industry_match),
    }


def filter_matching_athletes(
    matches: List[AthleteBrandMatch],
    min_gpa: Optional[float] = None,
    sports: Optional[List[UUID]] = None,
    schools: Optional[List[UUID]] = None,
    divisions: Optional[List[str]] = None,
    limit: int = 20,
    offset: int = 0
) -> Tuple[List[AthleteBrandMatch], int]:
    """
    Apply in-memory athlete filters, then paginate

    Returns:
        (page, total) where total is the size of the whole filtered set
    """
    filtered = matches

    if min_gpa is not None:
        filtered = [
            m for m in filtered
            if m.athlete.effective_gpa is not None and m.athlete.effective_gpa >= min_gpa
        ]
    if sports:
        wanted_sports = set(sports)
        filtered = [m for m in filtered if m.athlete.sport_id in wanted_sports]
    if schools:
        wanted_schools = set(schools)
        filtered = [m for m in filtered if m.athlete.school_id in wanted_schools]
    if divisions:
        wanted_divisions = set(divisions)
        filtered = [
            m for m in filtered
            if m.athlete.school is not None and m.athlete.school.division in wanted_divisions
        ]

    return filtered[offset:offset + limit], len(filtered)


def brand_matches_industries(brand, industries: List[str]) -> bool:
    """Case-insensitive substring test of any industry against the brand's free-text label"""
    label = (brand.industry or "").lower()
    return any(industry.lower() in label for industry in industries)


class MatchingService:
    """Service for brand-athlete match scoring and lookups"""

    def __init__(
        self,
        match_repository: MatchRepository,
        athlete_repository: AthleteRepository,
        brand_repository: BrandRepository,
        profile_repository: ProfileRepository,
        taxonomy_service: TaxonomyService,
        scorer: Optional[MatchScorer] = None
    ):
        """
        Initialize matching service

        Args:
            match_repository: Match repository
            athlete_repository: Athlete repository
            brand_repository: Brand repository
            profile_repository: Profile repository used to resolve the caller
            taxonomy_service: Taxonomy service for industry to category lookups
            scorer: Optional match scorer (creates default if None)
        """
        self.match_repo = match_repository
        self.athlete_repo = athlete_repository
        self.brand_repo = brand_repository
        self.profile_repo = profile_repository
        self.taxonomy_service = taxonomy_service
        self.scorer = scorer or MatchScorer()

    async def _require_my_athlete_id(self, profile_id: UUID) -> UUID:
        athlete_id = await self.profile_repo.get_athlete_id(profile_id)
        if athlete_id is None:
            raise NotFoundException("Athlete profile not found")
        return athlete_id

    async def calculate_match_score(self, athlete_id: UUID, brand_id: UUID) -> int:
        """
        Score an athlete against a brand and store the result

        Args:
            athlete_id: Athlete UUID
            brand_id: Brand UUID

        Returns:
            Match score in [0, 100]

        Raises:
            NotFoundException: If athlete or brand not found
        """
        athlete = await self.athlete_repo.get_by_id(athlete_id)
        if not athlete:
            raise NotFoundException(f"Athlete not found: {athlete_id}")

        brand = await self.brand_repo.get_by_id(brand_id)
        if not brand:
            raise NotFoundException(f"Brand not found: {brand_id}")

        brand_industries = await self.brand_repo.get_industry_names(brand_id)
        computation = self.scorer.score(athlete_signals(athlete), brand_industries)

        await self.match_repo.upsert(athlete_id, brand_id, computation)

        logger.info(
            f"Calculated match score {computation.score} for athlete {athlete_id} and brand {brand_id}",
            extra={"athlete_id": str(athlete_id), "brand_id": str(brand_id)}
        )
        return computation.score

    async def recalculate_athlete_matches(self, athlete_id: UUID) -> RecalculationResult:
        """
        Rescore an athlete against every verified brand

        Each pair is stored on its own; one failing pair is recorded and the
        rest still run.

        Raises:
            DatabaseException: If the brand list cannot be loaded
        """
        try:
            brands = await self.brand_repo.get_verified()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load brands for recalculation: {str(e)}")
            raise DatabaseException("recalculate_athlete_matches", str(e))

        # A failed pair rolls the session back and expires the loaded rows
        brand_ids = [brand.id for brand in brands]

        result = RecalculationResult(total=len(brand_ids))
        for brand_id in brand_ids:
            await self._score_into(result, athlete_id, brand_id, failed_id=brand_id)

        logger.info(
            f"Recalculated athlete {athlete_id}: {result.succeeded}/{result.total} succeeded",
            extra={"athlete_id": str(athlete_id), "failed": len(result.failed)}
        )
        return result

    async def recalculate_brand_matches(self, brand_id: UUID) -> RecalculationResult:
        """
        Rescore a brand against every athlete open to deals

        Raises:
            DatabaseException: If the athlete list cannot be loaded
        """
        try:
            athletes = await self.athlete_repo.get_available_for_deals()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load athletes for recalculation: {str(e)}")
            raise DatabaseException("recalculate_brand_matches", str(e))

        athlete_ids = [athlete.id for athlete in athletes]

        result = RecalculationResult(total=len(athlete_ids))
        for athlete_id in athlete_ids:
            await self._score_into(result, athlete_id, brand_id, failed_id=athlete_id)

        logger.info(
            f"Recalculated brand {brand_id}: {result.succeeded}/{result.total} succeeded",
            extra={"brand_id": str(brand_id), "failed": len(result.failed)}
        )
        return result

    async def _score_into(
        self,
        result: RecalculationResult,
        athlete_id: UUID,
        brand_id: UUID,
        failed_id: UUID
    ) -> None:
        try:
            await self.calculate_match_score(athlete_id, brand_id)
            result.succeeded += 1
        except Exception as e:
            logger.error(
                f"Match recalculation failed for {failed_id}: {str(e)}",
                extra={"athlete_id": str(athlete_id), "brand_id": str(brand_id)}
            )
            result.failed.append({"id": str(failed_id), "error": str(e)})

    async def get_top_matches(
        self,
        profile_id: UUID,
        limit: Optional[int] = None,
        min_score: Optional[int] = None,
        industries: Optional[List[str]] = None
    ) -> List[AthleteBrandMatch]:
        """
        Best brand matches for the caller's athlete

        The industries filter runs after the limit, so fewer than `limit`
        rows can come back even when more qualifying rows exist.

        Raises:
            NotFoundException: If the caller has no athlete profile
        """
        athlete_id = await self._require_my_athlete_id(profile_id)
        limit = limit or settings.TOP_MATCHES_LIMIT

        matches = await self.match_repo.get_top_for_athlete(athlete_id, limit=limit, min_score=min_score)

        if industries:
            matches = [m for m in matches if brand_matches_industries(m.brand, industries)]

        return matches

    async def get_top_matches_for_athlete(self, athlete_id: UUID, limit: Optional[int] = None) -> List[AthleteBrandMatch]:
        """Best brand matches for any athlete, unfiltered"""
        return await self.match_repo.get_top_for_athlete(
            athlete_id, limit=limit or settings.TOP_MATCHES_LIMIT
        )

    async def get_matching_athletes(
        self,
        brand_id: UUID,
        min_score: Optional[int] = None,
        min_gpa: Optional[float] = None,
        sports: Optional[List[UUID]] = None,
        schools: Optional[List[UUID]] = None,
        divisions: Optional[List[str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> Tuple[List[AthleteBrandMatch], int]:
        """
        Athletes matched to a brand, filtered and paginated

        Returns:
            (page, total) where total counts every athlete passing the filters
        """
        matches = await self.match_repo.get_for_brand(brand_id, min_score=min_score)
        return filter_matching_athletes(
            matches,
            min_gpa=min_gpa,
            sports=sports,
            schools=schools,
            divisions=divisions,
            limit=limit or settings.MATCHING_ATHLETES_PAGE_SIZE,
            offset=offset,
        )

    async def get_match_stats(
        self,
        athlete_id: Optional[UUID] = None,
        profile_id: Optional[UUID] = None
    ) -> Dict[str, int]:
        """
        Score distribution for an athlete, defaulting to the caller's own

        Raises:
            NotFoundException: If no athlete can be resolved
        """
        if athlete_id is None and profile_id is not None:
            athlete_id = await self.profile_repo.get_athlete_id(profile_id)
        if athlete_id is None:
            raise NotFoundException("Athlete not found")

        matches = await self.match_repo.get_all_for_athlete(athlete_id)
        return summarize_match_scores(matches)

    async def find_athletes_by_industry(
        self,
        industries: List[str],
        limit: Optional[int] = None,
        min_gpa: Optional[float] = None
    ) -> List[Athlete]:
        """
        Athletes whose major category feeds any of the given industries

        Returns:
            Athletes ordered by GradeUp score, empty when no category overlaps
        """
        category_names = await self.taxonomy_service.categories_for_industries(industries)
        if not category_names:
            return []

        categories = await self.taxonomy_service.get_major_categories()
        wanted = set(category_names)
        category_ids = [c.id for c in categories if c.name in wanted]

        return await self.athlete_repo.find_by_major_categories(
            category_ids,
            min_gpa=min_gpa,
            limit=limit or settings.INDUSTRY_SEARCH_LIMIT,
        )
