"""
Tests for the app shell: health endpoints, error bodies, log formatting and tokens
"""
import json
import logging
from datetime import timedelta
from uuid import uuid4

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.logging import JSONFormatter, KeyValueFormatter
from core.security import InvalidTokenError, create_access_token, user_id_from_token


def make_record(message, **extra_fields):
    record = logging.LogRecord("services.coach_report", logging.DEBUG, __file__, 10, message, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestHealth:
    def test_ping(self, client):
        assert client.get("/ping").json() == {"pong": True}

    def test_health_with_database(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_process_time_header(self, client):
        assert "X-Process-Time" in client.get("/ping").headers


class TestErrorBodies:
    def test_not_found_body(self):
        error = NotFoundError("Habit", "abc")
        assert error.to_dict() == {"detail": "Habit not found: abc", "error_code": "NOT_FOUND"}

    def test_validation_error_carries_field(self):
        error = ValidationError("Please complete your profile first", field="profile")
        assert error.status_code == 422
        assert error.to_dict()["error_code"] == "VALIDATION_ERROR_PROFILE"
        assert error.to_dict()["field"] == "profile"

    def test_unauthorized_response(self, client):
        response = client.get("/v1/dashboard/report")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert response.headers["WWW-Authenticate"] == "Bearer"


class TestLogFormatters:
    def test_json_includes_extra_fields(self):
        user_id = uuid4()
        line = JSONFormatter().format(make_record("coach_report_built", user_id=user_id, recommendations=5))

        data = json.loads(line)
        assert data["message"] == "coach_report_built"
        assert data["user_id"] == str(user_id)
        assert data["recommendations"] == 5
        assert data["level"] == "DEBUG"

    def test_key_value_appends_sorted_fields(self):
        line = KeyValueFormatter().format(make_record("coach_report_built", has_profile=False, as_of="2026-03-10"))
        assert line.endswith("coach_report_built as_of=2026-03-10 has_profile=False")

    def test_key_value_without_fields(self):
        line = KeyValueFormatter().format(make_record("plain"))
        assert line.endswith("services.coach_report: plain")


class TestTokens:
    def test_round_trip_user_id(self):
        user_id = uuid4()
        assert user_id_from_token(create_access_token({"sub": str(user_id)})) == user_id

    @pytest.mark.parametrize("claims,message", [
        ({}, "Invalid token payload"),
        ({"sub": "not-a-uuid"}, "Invalid user ID format"),
    ])
    def test_bad_subject(self, claims, message):
        with pytest.raises(InvalidTokenError, match=message):
            user_id_from_token(create_access_token(claims))

    def test_expired(self):
        token = create_access_token({"sub": str(uuid4())}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(InvalidTokenError, match="Invalid authentication credentials"):
            user_id_from_token(token)

    def test_unknown_user_is_unauthorized(self, client):
        token = create_access_token({"sub": str(uuid4())})
        response = client.get("/v1/dashboard/report", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"
