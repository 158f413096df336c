"""Unit tests for the taxonomy cache, seed data and brand industry tags"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from backend.app.core.exceptions import NotFoundException, ValidationException
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.services.taxonomy_service import (
    TaxonomyCache,
    TaxonomyService,
    normalize_brand_industries,
)
from nil_engine.taxonomy import MAJOR_INDUSTRY_MAP, INDUSTRIES, categories_for_industries
from tests.conftest import create_test_brand


class TestSeedTaxonomy:

    def test_twelve_categories(self):
        assert len(MAJOR_INDUSTRY_MAP) == 12

    def test_technology_feeds_cs_and_engineering(self):
        assert categories_for_industries(MAJOR_INDUSTRY_MAP, ["technology"]) == [
            "Computer Science & IT",
            "Engineering",
        ]

    def test_unknown_industry_matches_nothing(self):
        assert categories_for_industries(MAJOR_INDUSTRY_MAP, ["space_mining"]) == []

    def test_seed_map_is_read_only(self):
        with pytest.raises(TypeError):
            MAJOR_INDUSTRY_MAP["New"] = ("x",)

    def test_industry_list_has_no_duplicates(self):
        assert len(INDUSTRIES) == len(set(INDUSTRIES))


class TestNormalizeBrandIndustries:

    def test_only_first_primary_survives(self):
        result = normalize_brand_industries([
            {"industry": "sports"},
            {"industry": "apparel", "is_primary": True},
            {"industry": "fitness", "is_primary": True},
        ])

        assert [r["is_primary"] for r in result] == [False, True, False]

    def test_no_primary_stays_without_primary(self):
        result = normalize_brand_industries([{"industry": "sports"}, {"industry": "fitness"}])
        assert not any(r["is_primary"] for r in result)


class TestTaxonomyCache:

    @pytest.mark.asyncio
    async def test_refresh_uses_stored_categories(self):
        repo = AsyncMock(spec=TaxonomyRepository)
        repo.get_major_industry_map.return_value = {"Robotics": ["technology", "manufacturing"]}
        cache = TaxonomyCache()

        mapping = await cache.refresh(repo)

        assert dict(mapping) == {"Robotics": ("technology", "manufacturing")}
        assert cache.loaded
        assert not cache.from_seed

    @pytest.mark.asyncio
    async def test_empty_table_falls_back_to_seed(self):
        repo = AsyncMock(spec=TaxonomyRepository)
        repo.get_major_industry_map.return_value = {}
        cache = TaxonomyCache()

        mapping = await cache.refresh(repo)

        assert dict(mapping) == dict(MAJOR_INDUSTRY_MAP)
        assert cache.from_seed

    @pytest.mark.asyncio
    async def test_snapshot_is_immutable_and_replaced_on_refresh(self):
        repo = AsyncMock(spec=TaxonomyRepository)
        repo.get_major_industry_map.return_value = {"A": ["sports"]}
        cache = TaxonomyCache()

        before = await cache.refresh(repo)
        repo.get_major_industry_map.return_value = {"B": ["media"]}
        after = await cache.refresh(repo)

        assert dict(before) == {"A": ("sports",)}
        assert dict(after) == {"B": ("media",)}
        with pytest.raises(TypeError):
            after["C"] = ("x",)

    @pytest.mark.asyncio
    async def test_ensure_loaded_reads_once(self):
        repo = AsyncMock(spec=TaxonomyRepository)
        repo.get_major_industry_map.return_value = {"A": ["sports"]}
        cache = TaxonomyCache()

        await cache.ensure_loaded(repo)
        await cache.ensure_loaded(repo)

        assert repo.get_major_industry_map.await_count == 1

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self):
        repo = AsyncMock(spec=TaxonomyRepository)
        repo.get_major_industry_map.return_value = {"A": ["sports"]}
        cache = TaxonomyCache()

        await cache.ensure_loaded(repo)
        cache.invalidate()
        await cache.ensure_loaded(repo)

        assert repo.get_major_industry_map.await_count == 2


class TestTaxonomyService:
    """Unit tests for TaxonomyService with mocked repositories"""

    @pytest.fixture
    def repos(self):
        return SimpleNamespace(
            taxonomy=AsyncMock(spec=TaxonomyRepository),
            brand=AsyncMock(spec=BrandRepository),
            profile=AsyncMock(spec=ProfileRepository),
        )

    @pytest.fixture
    def service(self, repos):
        return TaxonomyService(repos.taxonomy, repos.brand, repos.profile, cache=TaxonomyCache())

    @pytest.mark.asyncio
    async def test_categories_for_industries_uses_cache(self, service, repos):
        repos.taxonomy.get_major_industry_map.return_value = {}

        names = await service.categories_for_industries(["technology"])

        assert names == ["Computer Science & IT", "Engineering"]

    @pytest.mark.asyncio
    async def test_set_brand_industries_keeps_single_primary(self, service, repos):
        brand_id = uuid4()
        repos.profile.get_brand_id.return_value = brand_id
        repos.brand.replace_industries.return_value = []

        await service.set_brand_industries(uuid4(), [
            {"industry": "sports", "is_primary": True},
            {"industry": "fitness", "is_primary": True},
        ])

        repos.brand.replace_industries.assert_awaited_once_with(brand_id, [
            {"industry": "sports", "is_primary": True},
            {"industry": "fitness", "is_primary": False},
        ])

    @pytest.mark.asyncio
    async def test_set_brand_industries_requires_brand(self, service, repos):
        repos.profile.get_brand_id.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.set_brand_industries(uuid4(), [{"industry": "sports"}])

        assert exc_info.value.message == "Brand profile not found"
        repos.brand.replace_industries.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_industry_is_rejected(self, service, repos):
        repos.profile.get_brand_id.return_value = uuid4()

        with pytest.raises(ValidationException):
            await service.add_brand_industry(uuid4(), "   ")

        repos.brand.add_industry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_brand_industry_is_scoped_to_caller(self, service, repos):
        brand_id, industry_id = uuid4(), uuid4()
        repos.profile.get_brand_id.return_value = brand_id
        repos.brand.remove_industry.return_value = False

        removed = await service.remove_brand_industry(uuid4(), industry_id)

        assert removed is False
        repos.brand.remove_industry.assert_awaited_once_with(brand_id, industry_id)


class TestBrandIndustryWrites:
    """Brand industry writes against a real session"""

    @pytest.fixture
    def repo(self, db_session):
        return BrandRepository(db_session)

    @pytest.mark.asyncio
    async def test_failed_replace_keeps_previous_rows(self, repo, db_session):
        brand = await create_test_brand(db_session, industries=["finance"])
        brand_id = brand.id

        # The delete runs before the insert fails
        with pytest.raises(IntegrityError):
            await repo.replace_industries(brand_id, [{"industry": None, "is_primary": True}])

        rows = await repo.get_industries(brand_id)
        assert [(r.industry, r.is_primary) for r in rows] == [("finance", True)]

    @pytest.mark.asyncio
    async def test_failed_add_keeps_current_primary(self, repo, db_session):
        brand = await create_test_brand(db_session, industries=["finance", "sports"])
        brand_id = brand.id

        with pytest.raises(IntegrityError):
            await repo.add_industry(brand_id, None, is_primary=True)

        rows = await repo.get_industries(brand_id)
        assert [(r.industry, r.is_primary) for r in rows] == [("finance", True), ("sports", False)]

    @pytest.mark.asyncio
    async def test_replace_swaps_rows(self, repo, db_session):
        brand = await create_test_brand(db_session, industries=["finance"])
        brand_id = brand.id

        await repo.replace_industries(
            brand_id,
            [{"industry": "technology", "is_primary": True}, {"industry": "gaming", "is_primary": False}]
        )

        assert sorted(await repo.get_industry_names(brand_id)) == ["gaming", "technology"]
