"""Industry/major taxonomy service"""

from types import MappingProxyType
from typing import Dict, List, Optional, Any, Tuple
from uuid import UUID
import asyncio

from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.models.brand import BrandIndustry
from backend.app.models.match import MajorCategory
from backend.app.core.logging import get_logger
from backend.app.core.exceptions import NotFoundException, ValidationException
from nil_engine.taxonomy import MAJOR_INDUSTRY_MAP, INDUSTRIES, categories_for_industries

logger = get_logger(__name__)


class TaxonomyCache:
    """
    In-process copy of the major category -> industries mapping

    The stored `major_categories` table is canonical. The cached mapping is
    replaced wholesale on refresh and never mutated in place, so readers can
    hold on to a snapshot safely. An empty table falls back to the seed map.
    """

    def __init__(self):
        self._major_industry_map = MappingProxyType({})
        self._loaded = False
        self._from_seed = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def from_seed(self) -> bool:
        """True when the table was empty and the seed map is being served"""
        return self._from_seed

    def snapshot(self) -> MappingProxyType:
        """Current mapping; category name -> tuple of industries"""
        return self._major_industry_map

    async def refresh(self, repo: TaxonomyRepository) -> MappingProxyType:
        """
        Reload the mapping from storage

        Args:
            repo: Taxonomy repository bound to a live session

        Returns:
            The new mapping
        """
        async with self._lock:
            stored = await repo.get_major_industry_map()

            if stored:
                mapping = {name: tuple(industries) for name, industries in stored.items()}
                self._from_seed = False
            else:
                logger.warning("major_categories is empty; serving seed taxonomy")
                mapping = dict(MAJOR_INDUSTRY_MAP)
                self._from_seed = True

            self._major_industry_map = MappingProxyType(mapping)
            self._loaded = True

        logger.info(f"Taxonomy cache loaded: {len(mapping)} categories")
        return self._major_industry_map

    async def ensure_loaded(self, repo: TaxonomyRepository) -> MappingProxyType:
        """Load on first use"""
        if not self._loaded:
            return await self.refresh(repo)
        return self._major_industry_map

    def invalidate(self) -> None:
        self._major_industry_map = MappingProxyType({})
        self._loaded = False
        self._from_seed = False


# Global taxonomy cache instance
taxonomy_cache = TaxonomyCache()


def normalize_brand_industries(industries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Keep only the first `is_primary` flag; later ones are forced false

    Args:
        industries: Dicts with `industry` and optional `is_primary`

    Returns:
        New list of dicts with exactly zero or one primary
    """
    seen_primary = False
    normalized = []
    for item in industries:
        is_primary = bool(item.get("is_primary")) and not seen_primary
        seen_primary = seen_primary or is_primary
        normalized.append({"industry": item["industry"], "is_primary": is_primary})
    return normalized


class TaxonomyService:
    """Service for major categories and brand industry tags"""

    def __init__(
        self,
        taxonomy_repository: TaxonomyRepository,
        brand_repository: BrandRepository,
        profile_repository: ProfileRepository,
        cache: Optional[TaxonomyCache] = None
    ):
        """
        Initialize taxonomy service

        Args:
            taxonomy_repository: Taxonomy repository
            brand_repository: Brand repository
            profile_repository: Profile repository used to resolve the caller's brand
            cache: Taxonomy cache (the process-wide one if None)
        """
        self.taxonomy_repo = taxonomy_repository
        self.brand_repo = brand_repository
        self.profile_repo = profile_repository
        self.cache = cache or taxonomy_cache

    @staticmethod
    def get_industries() -> Tuple[str, ...]:
        """Known industry tags"""
        return INDUSTRIES

    async def get_major_industry_map(self) -> MappingProxyType:
        """Category name -> industries, from the cache"""
        return await self.cache.ensure_loaded(self.taxonomy_repo)

    async def refresh(self) -> MappingProxyType:
        """Reload the cache from storage"""
        return await self.cache.refresh(self.taxonomy_repo)

    async def get_major_categories(self) -> List[MajorCategory]:
        """All major categories ordered by name"""
        return await self.taxonomy_repo.get_major_categories()

    async def categories_for_industries(self, industries: List[str]) -> List[str]:
        """Names of categories whose industries overlap the given tags"""
        mapping = await self.get_major_industry_map()
        return categories_for_industries(mapping, industries)

    async def get_brand_industries(self, brand_id: UUID) -> List[BrandIndustry]:
        """Industry rows for a brand, primary first"""
        return await self.brand_repo.get_industries(brand_id)

    async def _require_my_brand_id(self, profile_id: UUID) -> UUID:
        brand_id = await self.profile_repo.get_brand_id(profile_id)
        if brand_id is None:
            raise NotFoundException("Brand profile not found")
        return brand_id

    async def set_brand_industries(
        self,
        profile_id: UUID,
        industries: List[Dict[str, Any]]
    ) -> List[BrandIndustry]:
        """
        Replace the caller's brand industries

        Args:
            profile_id: Caller's profile UUID
            industries: Dicts with `industry` and optional `is_primary`

        Returns:
            The stored rows

        Raises:
            NotFoundException: If the caller has no brand
            ValidationException: If an industry tag is blank
        """
        brand_id = await self._require_my_brand_id(profile_id)
        _validate_industry_tags(item.get("industry") for item in industries)

        rows = normalize_brand_industries(industries)
        logger.info(f"Setting {len(rows)} industries for brand {brand_id}")
        return await self.brand_repo.replace_industries(brand_id, rows)

    async def add_brand_industry(
        self,
        profile_id: UUID,
        industry: str,
        is_primary: bool = False
    ) -> BrandIndustry:
        """
        Add one industry to the caller's brand

        Raises:
            NotFoundException: If the caller has no brand
        """
        brand_id = await self._require_my_brand_id(profile_id)
        _validate_industry_tags([industry])
        return await self.brand_repo.add_industry(brand_id, industry, is_primary=is_primary)

    async def remove_brand_industry(self, profile_id: UUID, industry_id: UUID) -> bool:
        """
        Remove one industry row from the caller's brand

        Returns:
            True if a row was removed
        """
        brand_id = await self._require_my_brand_id(profile_id)
        return await self.brand_repo.remove_industry(brand_id, industry_id)


def _validate_industry_tags(tags) -> None:
    for tag in tags:
        if not tag or not str(tag).strip():
            raise ValidationException("Industry must not be empty")
