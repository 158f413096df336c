"""Unit tests for the matching service and its helpers"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from backend.app.core.exceptions import NotFoundException, DatabaseException
from backend.app.models.match import AthleteBrandMatch
from backend.app.repositories.match_repository import MatchRepository
from backend.app.repositories.athlete_repository import AthleteRepository
from backend.app.repositories.brand_repository import BrandRepository
from backend.app.repositories.profile_repository import ProfileRepository
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.services.taxonomy_service import TaxonomyService
from backend.app.services.matching_service import (
    MatchingService,
    athlete_signals,
    summarize_match_scores,
    filter_matching_athletes,
    brand_matches_industries,
)
from tests.conftest import create_test_athlete, create_test_brand


def make_athlete(gpa=3.2, industries=("technology", "software"), **kwargs):
    values = dict(
        id=uuid4(),
        major_category=SimpleNamespace(industries=list(industries)) if industries is not None else None,
        effective_gpa=gpa,
        verified=False,
        enrollment_verified=False,
        sport_verified=False,
        scholar_tier=None,
        total_followers=0,
        sport_id=None,
        school_id=None,
        school=None,
    )
    values.update(kwargs)
    return SimpleNamespace(**values)


def make_match(score, athlete=None, brand=None, major_match=False, industry_match=False):
    return SimpleNamespace(
        match_score=score,
        major_match=major_match,
        industry_match=industry_match,
        athlete=athlete or make_athlete(),
        brand=brand,
    )


class TestSummarizeMatchScores:

    def test_buckets_sum_to_total(self):
        matches = [make_match(s) for s in (85, 80, 79, 60, 59, 10)]

        stats = summarize_match_scores(matches)

        assert stats["total_matches"] == 6
        assert stats["high_matches"] == 2
        assert stats["medium_matches"] == 2
        assert stats["low_matches"] == 2
        assert stats["high_matches"] + stats["medium_matches"] + stats["low_matches"] == stats["total_matches"]

    def test_average_is_rounded_half_up(self):
        assert summarize_match_scores([make_match(62), make_match(63)])["average_score"] == 63
        assert summarize_match_scores([make_match(85), make_match(80), make_match(79)])["average_score"] == 81

    def test_empty_input(self):
        stats = summarize_match_scores([])

        assert stats == {
            "total_matches": 0,
            "average_score": 0,
            "high_matches": 0,
            "medium_matches": 0,
            "low_matches": 0,
            "major_matches": 0,
            "industry_matches": 0,
        }

    def test_flag_counts(self):
        matches = [
            make_match(90, major_match=True, industry_match=True),
            make_match(55, major_match=False, industry_match=True),
            make_match(40),
        ]

        stats = summarize_match_scores(matches)

        assert stats["major_matches"] == 1
        assert stats["industry_matches"] == 2


class TestFilterMatchingAthletes:

    def test_total_counts_filtered_set_not_page(self):
        matches = [make_match(90 - i) for i in range(37)]

        page, total = filter_matching_athletes(matches, limit=20, offset=20)

        assert total == 37
        assert len(page) == 17
        assert page[0] is matches[20]

    def test_min_gpa_uses_effective_gpa(self):
        strong = make_match(80, athlete=make_athlete(gpa=3.6))
        weak = make_match(85, athlete=make_athlete(gpa=2.9))
        unknown = make_match(70, athlete=make_athlete(gpa=None))

        page, total = filter_matching_athletes([weak, strong, unknown], min_gpa=3.0)

        assert page == [strong]
        assert total == 1

    def test_sport_school_and_division_filters(self):
        sport_id, school_id = uuid4(), uuid4()
        d1 = SimpleNamespace(division="D1")
        keep = make_match(80, athlete=make_athlete(sport_id=sport_id, school_id=school_id, school=d1))
        wrong_sport = make_match(80, athlete=make_athlete(sport_id=uuid4(), school_id=school_id, school=d1))
        no_school = make_match(80, athlete=make_athlete(sport_id=sport_id, school_id=school_id, school=None))

        page, total = filter_matching_athletes(
            [keep, wrong_sport, no_school],
            sports=[sport_id],
            schools=[school_id],
            divisions=["D1"],
        )

        assert page == [keep]
        assert total == 1

    def test_offset_past_end_gives_empty_page(self):
        page, total = filter_matching_athletes([make_match(50)] * 3, limit=20, offset=40)

        assert page == []
        assert total == 3


class TestHelpers:

    def test_brand_industry_match_is_case_insensitive_substring(self):
        brand = SimpleNamespace(industry="Sports Apparel & Footwear")

        assert brand_matches_industries(brand, ["apparel"])
        assert brand_matches_industries(brand, ["finance", "SPORTS"])
        assert not brand_matches_industries(brand, ["finance"])
        assert not brand_matches_industries(SimpleNamespace(industry=None), ["sports"])

    def test_athlete_signals_without_category(self):
        signals = athlete_signals(make_athlete(industries=None, gpa=3.1))

        assert signals.major_industries == frozenset()
        assert signals.gpa == 3.1


class TestMatchingService:
    """Unit tests for MatchingService with mocked repositories"""

    @pytest.fixture
    def repos(self):
        return SimpleNamespace(
            match=AsyncMock(spec=MatchRepository),
            athlete=AsyncMock(spec=AthleteRepository),
            brand=AsyncMock(spec=BrandRepository),
            profile=AsyncMock(spec=ProfileRepository),
            taxonomy=AsyncMock(spec=TaxonomyService),
        )

    @pytest.fixture
    def service(self, repos):
        return MatchingService(repos.match, repos.athlete, repos.brand, repos.profile, repos.taxonomy)

    @pytest.mark.asyncio
    async def test_calculate_scores_and_stores(self, service, repos):
        athlete = make_athlete(gpa=3.6)
        brand_id = uuid4()
        repos.athlete.get_by_id.return_value = athlete
        repos.brand.get_by_id.return_value = SimpleNamespace(id=brand_id)
        repos.brand.get_industry_names.return_value = ["technology"]

        score = await service.calculate_match_score(athlete.id, brand_id)

        # 50 base + 30 industry + 10 gpa
        assert score == 90
        repos.match.upsert.assert_awaited_once()
        args = repos.match.upsert.await_args.args
        assert args[0] == athlete.id
        assert args[1] == brand_id
        assert args[2].score == 90
        assert args[2].industry_match is True

    @pytest.mark.asyncio
    async def test_calculate_missing_athlete(self, service, repos):
        athlete_id = uuid4()
        repos.athlete.get_by_id.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.calculate_match_score(athlete_id, uuid4())

        assert exc_info.value.message == f"Athlete not found: {athlete_id}"
        repos.match.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_calculate_missing_brand(self, service, repos):
        brand_id = uuid4()
        repos.athlete.get_by_id.return_value = make_athlete()
        repos.brand.get_by_id.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.calculate_match_score(uuid4(), brand_id)

        assert exc_info.value.message == f"Brand not found: {brand_id}"

    @pytest.mark.asyncio
    async def test_recalculation_reports_failures_and_continues(self, service, repos):
        athlete = make_athlete()
        good_1, bad, good_2 = (SimpleNamespace(id=uuid4()) for _ in range(3))
        repos.brand.get_verified.return_value = [good_1, bad, good_2]
        repos.athlete.get_by_id.return_value = athlete
        repos.brand.get_by_id.side_effect = lambda brand_id: None if brand_id == bad.id else SimpleNamespace(id=brand_id)
        repos.brand.get_industry_names.return_value = []

        result = await service.recalculate_athlete_matches(athlete.id)

        assert result.total == 3
        assert result.succeeded == 2
        assert result.count == 2
        assert len(result.failed) == 1
        assert result.failed[0]["id"] == str(bad.id)
        assert "Brand not found" in result.failed[0]["error"]
        assert repos.match.upsert.await_count == 2

    @pytest.mark.asyncio
    async def test_recalculation_listing_failure_raises(self, service, repos):
        repos.athlete.get_available_for_deals.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseException) as exc_info:
            await service.recalculate_brand_matches(uuid4())

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == {"operation": "recalculate_brand_matches"}

    @pytest.mark.asyncio
    async def test_top_matches_industry_filter_runs_after_limit(self, service, repos):
        athlete_id = uuid4()
        repos.profile.get_athlete_id.return_value = athlete_id
        sports = make_match(90, brand=SimpleNamespace(industry="Sports Drinks"))
        finance = make_match(85, brand=SimpleNamespace(industry="Finance"))
        repos.match.get_top_for_athlete.return_value = [sports, finance]

        matches = await service.get_top_matches(uuid4(), limit=2, industries=["sports"])

        assert matches == [sports]
        repos.match.get_top_for_athlete.assert_awaited_once_with(athlete_id, limit=2, min_score=None)

    @pytest.mark.asyncio
    async def test_top_matches_requires_athlete_profile(self, service, repos):
        repos.profile.get_athlete_id.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.get_top_matches(uuid4())

        assert exc_info.value.message == "Athlete profile not found"

    @pytest.mark.asyncio
    async def test_stats_for_unknown_caller(self, service, repos):
        repos.profile.get_athlete_id.return_value = None

        with pytest.raises(NotFoundException):
            await service.get_match_stats(profile_id=uuid4())

    @pytest.mark.asyncio
    async def test_industry_search_without_categories_skips_query(self, service, repos):
        repos.taxonomy.categories_for_industries.return_value = []

        athletes = await service.find_athletes_by_industry(["underwater_basket_weaving"])

        assert athletes == []
        repos.athlete.find_by_major_categories.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_industry_search_resolves_category_ids(self, service, repos):
        cs = SimpleNamespace(id=uuid4(), name="Computer Science & IT")
        eng = SimpleNamespace(id=uuid4(), name="Engineering")
        biz = SimpleNamespace(id=uuid4(), name="Business & Finance")
        repos.taxonomy.categories_for_industries.return_value = ["Computer Science & IT", "Engineering"]
        repos.taxonomy.get_major_categories.return_value = [biz, cs, eng]
        repos.athlete.find_by_major_categories.return_value = []

        await service.find_athletes_by_industry(["technology"], limit=5, min_gpa=3.0)

        repos.athlete.find_by_major_categories.assert_awaited_once_with([cs.id, eng.id], min_gpa=3.0, limit=5)


class TestMatchingServiceRecalculation:
    """Recalculation against a real session"""

    @pytest.fixture
    def service(self, db_session):
        return MatchingService(
            MatchRepository(db_session),
            AthleteRepository(db_session),
            BrandRepository(db_session),
            ProfileRepository(db_session),
            TaxonomyService(TaxonomyRepository(db_session), BrandRepository(db_session), ProfileRepository(db_session)),
        )

    @pytest.mark.asyncio
    async def test_failed_commit_does_not_abort_remaining_brands(self, service, db_session, monkeypatch):
        athlete = await create_test_athlete(db_session)
        for _ in range(3):
            await create_test_brand(db_session, industries=["technology"])
        athlete_id = athlete.id

        real_commit = db_session.commit
        calls = {"count": 0}

        async def flaky_commit():
            calls["count"] += 1
            if calls["count"] == 1:
                raise OperationalError("INSERT INTO athlete_brand_matches", {}, Exception("database is locked"))
            await real_commit()

        monkeypatch.setattr(db_session, "commit", flaky_commit)

        result = await service.recalculate_athlete_matches(athlete_id)

        assert result.total == 3
        assert result.succeeded == 2
        assert len(result.failed) == 1
        assert "database is locked" in result.failed[0]["error"]

        stored = await db_session.execute(
            select(func.count()).select_from(AthleteBrandMatch).where(AthleteBrandMatch.athlete_id == athlete_id)
        )
        assert stored.scalar_one() == 2
