"""Integration tests for availability API endpoints"""

import pytest
from datetime import date, timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.calendar import EventType
from backend.app.models.profile import ProfileRole
from tests.conftest import (
    create_test_profile, create_test_school, create_test_athlete, create_test_event,
    create_test_availability, get_auth_headers
)

pytestmark = pytest.mark.integration


class TestAvailabilityAPIIntegration:
    """Integration tests for /api/v1/availability"""

    @pytest.fixture
    async def school(self, db_session: AsyncSession):
        return await create_test_school(db_session)

    @pytest.fixture
    async def athlete(self, db_session: AsyncSession, school):
        return await create_test_athlete(db_session, school=school)

    @pytest.fixture
    def headers(self, athlete):
        return get_auth_headers(athlete.profile)

    @pytest.mark.asyncio
    async def test_defaults_before_first_save(self, client: AsyncClient, athlete, headers):
        response = await client.get("/api/v1/availability/me", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["athlete_id"] == str(athlete.id)
        assert data["max_deals_per_month"] == 5
        assert data["preferred_deal_days"] == ["friday", "saturday", "sunday"]
        assert data["blocked_periods"] == []
        assert data["version"] is None

    @pytest.mark.asyncio
    async def test_non_athlete_has_no_availability(self, client: AsyncClient, db_session):
        brand_profile = await create_test_profile(db_session, ProfileRole.BRAND)

        response = await client.get("/api/v1/availability/me", headers=get_auth_headers(brand_profile))

        assert response.status_code == 404
        assert response.json()["error"] == "Athlete profile not found"

    @pytest.mark.asyncio
    async def test_update_normalizes_days_and_keeps_other_fields(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/availability/me",
            json={"preferred_deal_days": ["Friday", "SATURDAY"], "max_deals_per_month": 8},
            headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["preferred_deal_days"] == ["friday", "saturday"]
        assert data["max_deals_per_month"] == 8
        assert data["min_notice_days"] == 3
        assert data["version"] == 1

        again = await client.put(
            "/api/v1/availability/me",
            json={"notes": "Home games only", "version": 1},
            headers=headers
        )
        assert again.json()["version"] == 2
        assert again.json()["preferred_deal_days"] == ["friday", "saturday"]
        assert again.json()["notes"] == "Home games only"

    @pytest.mark.asyncio
    async def test_update_rejects_out_of_range_values(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/availability/me",
            json={"max_deals_per_month": 101},
            headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Max deals per month must be between 0 and 100"

        stored = await client.get("/api/v1/availability/me", headers=headers)
        assert stored.json()["version"] is None

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_day(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/availability/me",
            json={"preferred_deal_days": ["friday", "funday"]},
            headers=headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"invalid_days": ["funday"]}

    @pytest.mark.asyncio
    async def test_stale_version_is_a_conflict(self, client: AsyncClient, db_session, athlete, headers):
        await create_test_availability(db_session, athlete, max_deals_per_month=4)

        response = await client.put(
            "/api/v1/availability/me",
            json={"max_deals_per_month": 9, "version": 0},
            headers=headers
        )

        assert response.status_code == 409
        assert response.json()["details"]["current_version"] == 1

        unchanged = await client.get("/api/v1/availability/me", headers=headers)
        assert unchanged.json()["max_deals_per_month"] == 4

    @pytest.mark.asyncio
    async def test_add_and_remove_blocked_period(self, client: AsyncClient, headers):
        added = await client.post(
            "/api/v1/availability/me/blocked-periods",
            json={"start_date": "2026-11-20", "end_date": "2026-11-22", "name": "Family trip"},
            headers=headers
        )

        assert added.status_code == 201
        periods = added.json()["blocked_periods"]
        assert len(periods) == 1
        assert periods[0]["name"] == "Family trip"
        assert periods[0]["start_date"] == "2026-11-20"
        period_id = periods[0]["id"]

        check = await client.get("/api/v1/availability/me/check", params={"date": "2026-11-21"}, headers=headers)
        assert check.json()["available"] is False
        assert check.json()["reason"] == "Blocked: Family trip (custom)"

        removed = await client.delete(f"/api/v1/availability/me/blocked-periods/{period_id}", headers=headers)
        assert removed.status_code == 200
        assert removed.json()["blocked_periods"] == []

    @pytest.mark.asyncio
    async def test_blocked_period_with_inverted_dates(self, client: AsyncClient, headers):
        response = await client.post(
            "/api/v1/availability/me/blocked-periods",
            json={"start_date": "2026-11-22", "end_date": "2026-11-20"},
            headers=headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_check_during_finals(self, client: AsyncClient, db_session, school, athlete, headers):
        await create_test_event(
            db_session, school, EventType.FINALS, date(2026, 12, 7), date(2026, 12, 12), name="Fall Finals"
        )

        blocked = await client.get(
            f"/api/v1/availability/{athlete.id}/check", params={"date": "2026-12-09"}, headers=headers
        )
        free = await client.get(
            f"/api/v1/availability/{athlete.id}/check", params={"date": "2026-12-14"}, headers=headers
        )

        assert blocked.status_code == 200
        assert blocked.json() == {
            "athlete_id": str(athlete.id),
            "date": "2026-12-09",
            "available": False,
            "reason": "Blocked: Fall Finals (finals)",
        }
        assert free.json()["available"] is True
        assert free.json()["reason"] is None

    @pytest.mark.asyncio
    async def test_finals_opt_in_makes_day_available(self, client: AsyncClient, db_session, school, athlete, headers):
        await create_test_event(db_session, school, EventType.FINALS, date(2026, 12, 7), date(2026, 12, 12))
        await create_test_availability(db_session, athlete, no_finals_deals=False)

        response = await client.get("/api/v1/availability/me/check", params={"date": "2026-12-09"}, headers=headers)

        assert response.json()["available"] is True

    @pytest.mark.asyncio
    async def test_blocked_periods_window(self, client: AsyncClient, db_session, school, athlete, headers):
        await create_test_event(db_session, school, EventType.MIDTERMS, date(2026, 10, 26), date(2026, 10, 30))
        await create_test_event(db_session, school, EventType.FINALS, date(2026, 12, 7), date(2026, 12, 12))

        response = await client.get(
            f"/api/v1/availability/{athlete.id}/blocked-periods",
            params={"start_date": "2026-10-01", "end_date": "2026-11-30"},
            headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [p["period_type"] for p in data] == ["midterms"]
        assert data[0]["source"] == "academic_calendar"

    @pytest.mark.asyncio
    async def test_blocked_periods_inverted_window(self, client: AsyncClient, athlete, headers):
        response = await client.get(
            f"/api/v1/availability/{athlete.id}/blocked-periods",
            params={"start_date": "2026-11-30", "end_date": "2026-10-01"},
            headers=headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blocked_periods_start_beyond_default_window(self, client: AsyncClient, athlete, headers):
        start = date.today() + timedelta(days=200)

        response = await client.get(
            f"/api/v1/availability/{athlete.id}/blocked-periods",
            params={"start_date": start.isoformat()},
            headers=headers
        )

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_suggestions_skip_blocked_days(self, client: AsyncClient, db_session, school, athlete, headers):
        today = date.today()
        await create_test_event(db_session, school, EventType.BREAK, today + timedelta(days=2), today + timedelta(days=3))

        response = await client.get(
            "/api/v1/availability/me/suggestions", params={"within_days": 6}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        suggested = {s["suggested_date"] for s in data}
        assert len(data) == 5
        assert (today + timedelta(days=2)).isoformat() not in suggested
        scores = [s["availability_score"] for s in data]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_summary(self, client: AsyncClient, db_session, school, athlete, headers):
        today = date.today()
        await create_test_event(
            db_session, school, EventType.FINALS, today + timedelta(days=10), today + timedelta(days=14)
        )

        response = await client.get(f"/api/v1/availability/{athlete.id}/summary", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["preferences"]["preferred_days"] == ["friday", "saturday", "sunday"]
        assert data["blocked_periods_count"] == 1
        assert data["upcoming_blocked"][0]["period_type"] == "finals"
        assert len(data["next_available_dates"]) == 5
        assert data["best_day_score"] == data["next_available_dates"][0]["availability_score"]

    @pytest.mark.asyncio
    async def test_upcoming_events_respect_preferences(self, client: AsyncClient, db_session, school, athlete, headers):
        today = date.today()
        await create_test_event(
            db_session, school, EventType.FINALS, today + timedelta(days=5), today + timedelta(days=9)
        )
        await create_test_event(
            db_session, school, EventType.BREAK, today + timedelta(days=20), today + timedelta(days=25)
        )
        await create_test_availability(db_session, athlete, no_finals_deals=False)

        response = await client.get(f"/api/v1/availability/{athlete.id}/upcoming-events", headers=headers)

        assert response.status_code == 200
        assert [e["event_type"] for e in response.json()] == ["break"]

    @pytest.mark.asyncio
    async def test_unknown_athlete(self, client: AsyncClient, headers):
        response = await client.get(
            "/api/v1/availability/00000000-0000-0000-0000-000000000000/check",
            params={"date": "2026-12-09"},
            headers=headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Athlete not found"

    @pytest.mark.asyncio
    async def test_malformed_athlete_id(self, client: AsyncClient, headers):
        response = await client.get("/api/v1/availability/not-a-uuid/summary", headers=headers)

        assert response.status_code == 422
