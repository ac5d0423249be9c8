"""
API tests for the dashboard endpoints
"""
from datetime import date, datetime, time, timedelta

import pytest

from core.security import create_access_token
from models import HydrationLog, PainFatigueLog, Profile, ScheduledEventLog
from services.insight_generators import EMPTY_DOMAIN_MESSAGES

AS_OF = "2026-03-10T08:00:00"
AWARE_AS_OF = "2026-03-10T08:00:00Z"


@pytest.fixture
def profiled_user(db_session, test_user):
    db_session.add(Profile(
        user_id=test_user.id, name="Sam", age=25, weight_kg=70, height_cm=175,
        goal="build-muscle", experience="beginner",
    ))
    db_session.add_all([
        HydrationLog(user_id=test_user.id, date=date(2026, 3, day), amount_ml=2200)
        for day in (8, 9, 10)
    ])
    db_session.commit()
    return test_user


@pytest.fixture
def run_tomorrow(db_session, test_user):
    db_session.add(ScheduledEventLog(
        user_id=test_user.id, title="Run", date=date(2026, 3, 11), time=time(7, 0), event_type="cardio",
    ))
    db_session.commit()
    return test_user


class TestReportAuth:
    def test_missing_token(self, client):
        assert client.get("/v1/dashboard/report").status_code == 401

    def test_bad_token(self, client):
        response = client.get("/v1/dashboard/report", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_expired_token(self, client, test_user):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(minutes=-1))
        response = client.get("/v1/dashboard/report", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestEmptyReport:
    def test_placeholders_for_new_user(self, client, auth_headers):
        response = client.get("/v1/dashboard/report", params={"as_of": AS_OF}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["as_of"] == AS_OF
        for lines in body["insights"].values():
            assert len(lines) == 1
            assert lines[0] in EMPTY_DOMAIN_MESSAGES.values()
        assert body["recommendations"][0]["title"] == "Complete Your Profile"
        assert body["targets"]["macros"] is None
        assert body["coach_message"].startswith("Good morning!")


class TestReportWithData:
    def test_hydration_streak_and_targets(self, client, auth_headers, profiled_user):
        body = client.get("/v1/dashboard/report", params={"as_of": AS_OF}, headers=auth_headers).json()

        hydration = body["per_domain_stats"]["hydration"]
        assert hydration["current_streak"] == 3
        assert hydration["today_target_met"] is True
        assert hydration["target_ml"] == 2000
        assert body["targets"]["macros"]["calories"] == 2375
        assert body["coach_message"].startswith("Good morning, Sam!")
        assert len(body["recommendations"]) <= 5

    def test_report_is_repeatable(self, client, auth_headers, profiled_user):
        first = client.get("/v1/dashboard/report", params={"as_of": AS_OF}, headers=auth_headers).json()
        second = client.get("/v1/dashboard/report", params={"as_of": AS_OF}, headers=auth_headers).json()
        assert first == second

    def test_earlier_as_of_ignores_later_logs(self, client, auth_headers, profiled_user):
        body = client.get(
            "/v1/dashboard/report", params={"as_of": "2026-03-08T20:00:00"}, headers=auth_headers
        ).json()

        hydration = body["per_domain_stats"]["hydration"]
        assert hydration["total_entries"] == 1
        assert hydration["current_streak"] == 1
        assert body["coach_message"].startswith("Good evening, Sam!")

    def test_timezone_aware_as_of_with_scheduled_event(self, client, auth_headers, run_tomorrow):
        response = client.get("/v1/dashboard/report", params={"as_of": AWARE_AS_OF}, headers=auth_headers)

        assert response.status_code == 200
        scheduling = response.json()["per_domain_stats"]["scheduling"]
        assert scheduling["upcoming_events"] == 1
        assert scheduling["next_event"]["title"] == "Run"

    def test_report_only_sees_own_logs(self, client, auth_headers, db_session, other_user):
        db_session.add(HydrationLog(user_id=other_user.id, date=date(2026, 3, 10), amount_ml=3000))
        db_session.commit()

        body = client.get("/v1/dashboard/report", params={"as_of": AS_OF}, headers=auth_headers).json()

        assert body["per_domain_stats"]["hydration"]["total_entries"] == 0


class TestDomainStats:
    def test_single_domain(self, client, auth_headers, profiled_user):
        response = client.get("/v1/dashboard/stats/hydration", params={"as_of": AS_OF}, headers=auth_headers)

        body = response.json()
        assert response.status_code == 200
        assert body["domain"] == "hydration"
        assert body["stats"]["average_daily"] == 2200
        assert body["insights"][0].startswith("Excellent hydration!")

    def test_unknown_domain(self, client, auth_headers):
        response = client.get("/v1/dashboard/stats/sleep", headers=auth_headers)
        assert response.status_code == 404


class TestCoachMessage:
    def test_low_energy_today(self, client, auth_headers, db_session, profiled_user):
        db_session.add(PainFatigueLog(
            user_id=profiled_user.id, entry_type="energy", date=date(2026, 3, 10),
            logged_at=datetime(2026, 3, 10, 7, 0), level=2,
        ))
        db_session.commit()

        body = client.get(
            "/v1/dashboard/coach-message", params={"as_of": "2026-03-10T14:00:00"}, headers=auth_headers
        ).json()

        assert body["message"] == (
            "Good afternoon, Sam! You're working on building muscle. "
            "Your energy is low today. Consider a lighter workout or a rest day."
        )


class TestSchedulingRecommendations:
    def test_without_profile(self, client, auth_headers):
        body = client.get(
            "/v1/dashboard/scheduling-recommendations", params={"as_of": AS_OF}, headers=auth_headers
        ).json()
        assert body["recommendations"] == [
            "Complete your profile to get personalized scheduling recommendations."
        ]

    def test_with_profile_and_empty_calendar(self, client, auth_headers, profiled_user):
        body = client.get(
            "/v1/dashboard/scheduling-recommendations", params={"as_of": AS_OF}, headers=auth_headers
        ).json()

        assert len(body["recommendations"]) == 7
        assert body["recommendations"][-1] == "Consider scheduling more events to maintain consistency"

    def test_counts_upcoming_events(self, client, auth_headers, profiled_user, run_tomorrow):
        body = client.get(
            "/v1/dashboard/scheduling-recommendations", params={"as_of": AS_OF}, headers=auth_headers
        ).json()

        assert len(body["recommendations"]) == 7
        assert body["recommendations"][-1] == "Consider scheduling more events to maintain consistency"

    def test_timezone_aware_as_of(self, client, auth_headers, run_tomorrow):
        response = client.get(
            "/v1/dashboard/scheduling-recommendations", params={"as_of": AWARE_AS_OF}, headers=auth_headers
        )

        assert response.status_code == 200
        assert len(response.json()["recommendations"]) == 1

    @pytest.mark.parametrize("path", ["/v1/dashboard/stats/scheduling", "/v1/dashboard/coach-message"])
    def test_other_views_accept_timezone_aware_as_of(self, client, auth_headers, run_tomorrow, path):
        response = client.get(path, params={"as_of": AWARE_AS_OF}, headers=auth_headers)
        assert response.status_code == 200
