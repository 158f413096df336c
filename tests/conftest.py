"""Pytest configuration and shared fixtures"""

import pytest
from datetime import date
from typing import AsyncGenerator, Optional
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.core.database import Base, get_db
from backend.app.models import (
    Profile, ProfileRole, School, Sport, AthleticDirector, Athlete,
    Brand, BrandIndustry, MajorCategory, AthleteBrandMatch,
    AcademicEvent, EventType, Semester, AthleteAvailability
)
from backend.app.services.auth_service import auth_service
from backend.app.services.taxonomy_service import taxonomy_cache


# Test database URL - in-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    """Create test session factory"""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session"""
    async with test_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test session injected"""
    from backend.app.main import app

    async def override_get_db():
        yield db_session

    # The process-wide taxonomy cache must not leak between tests
    taxonomy_cache.invalidate()
    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
    taxonomy_cache.invalidate()


# Factories

async def _store(db_session: AsyncSession, obj):
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


async def create_test_profile(db_session: AsyncSession, role: ProfileRole = ProfileRole.ATHLETE, **kwargs) -> Profile:
    """Create a test profile"""
    profile = Profile(
        id=uuid4(),
        email=f"test_{uuid4().hex[:8]}@example.com",
        first_name=kwargs.pop("first_name", "Test"),
        last_name=kwargs.pop("last_name", "User"),
        role=role,
        **kwargs
    )
    return await _store(db_session, profile)


async def create_test_school(db_session: AsyncSession, name: str = "State University", division: str = "D1") -> School:
    return await _store(db_session, School(id=uuid4(), name=name, short_name=name[:10], division=division))


async def create_test_sport(db_session: AsyncSession, name: Optional[str] = None) -> Sport:
    return await _store(db_session, Sport(id=uuid4(), name=name or f"Sport {uuid4().hex[:6]}"))


async def create_test_major_category(
    db_session: AsyncSession,
    name: str = "Computer Science & IT",
    industries=("technology", "software", "gaming")
) -> MajorCategory:
    return await _store(db_session, MajorCategory(id=uuid4(), name=name, industries=list(industries)))


async def create_test_athlete(
    db_session: AsyncSession,
    profile: Optional[Profile] = None,
    school: Optional[School] = None,
    major_category: Optional[MajorCategory] = None,
    **kwargs
) -> Athlete:
    """Create a test athlete (and its profile when none is given)"""
    if profile is None:
        profile = await create_test_profile(db_session, ProfileRole.ATHLETE)

    athlete = Athlete(
        id=uuid4(),
        profile_id=profile.id,
        school_id=school.id if school else None,
        major_category_id=major_category.id if major_category else None,
        major=kwargs.pop("major", "Computer Science"),
        gpa=kwargs.pop("gpa", 3.2),
        **kwargs
    )
    return await _store(db_session, athlete)


async def create_test_brand(
    db_session: AsyncSession,
    profile: Optional[Profile] = None,
    industries=(),
    **kwargs
) -> Brand:
    """Create a test brand with optional industry tags (the first one primary)"""
    if profile is None:
        profile = await create_test_profile(db_session, ProfileRole.BRAND)

    brand = Brand(
        id=uuid4(),
        profile_id=profile.id,
        company_name=kwargs.pop("company_name", f"Brand {uuid4().hex[:6]}"),
        is_verified=kwargs.pop("is_verified", True),
        **kwargs
    )
    await _store(db_session, brand)

    for index, industry in enumerate(industries):
        db_session.add(BrandIndustry(id=uuid4(), brand_id=brand.id, industry=industry, is_primary=index == 0))
    if industries:
        await db_session.commit()

    return brand


async def create_test_match(db_session: AsyncSession, athlete: Athlete, brand: Brand, score: int, **kwargs) -> AthleteBrandMatch:
    match = AthleteBrandMatch(
        id=uuid4(),
        athlete_id=athlete.id,
        brand_id=brand.id,
        match_score=score,
        major_match=kwargs.pop("major_match", False),
        industry_match=kwargs.pop("industry_match", False),
        **kwargs
    )
    return await _store(db_session, match)


async def create_test_event(
    db_session: AsyncSession,
    school: School,
    event_type: EventType,
    start_date: date,
    end_date: date,
    name: Optional[str] = None,
    no_nil_activity: bool = True,
    semester: Optional[Semester] = None
) -> AcademicEvent:
    event = AcademicEvent(
        id=uuid4(),
        school_id=school.id,
        event_type=event_type,
        name=name or f"{event_type.value.title()} Week",
        start_date=start_date,
        end_date=end_date,
        no_nil_activity=no_nil_activity,
        semester=semester,
    )
    return await _store(db_session, event)


async def create_test_availability(db_session: AsyncSession, athlete: Athlete, **kwargs) -> AthleteAvailability:
    return await _store(db_session, AthleteAvailability(id=uuid4(), athlete_id=athlete.id, **kwargs))


async def create_test_director(db_session: AsyncSession, school: School) -> Profile:
    """Create an athletic director profile for a school"""
    profile = await create_test_profile(db_session, ProfileRole.ATHLETIC_DIRECTOR)
    await _store(db_session, AthleticDirector(id=uuid4(), profile_id=profile.id, school_id=school.id))
    return profile


def get_auth_headers(profile: Profile) -> dict:
    """Get authentication headers for a test profile"""
    token = auth_service.create_access_token(profile.id, profile.role)
    return {"Authorization": f"Bearer {token}"}
