"""
Tests for Jobs API
==================

The scheduled missed-dose trigger: shared-secret auth and reported counts.
"""

import pytest
import importlib
from unittest.mock import patch
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from services.missed_dose_service import missed_dose_service


@pytest.fixture(autouse=True)
def pinned_clock(fixed_now):
    module = importlib.import_module("services.missed_dose_service")
    with patch.object(module, "local_now", return_value=fixed_now):
        yield


@pytest.fixture
def notifier(mock_notifier):
    with patch.object(missed_dose_service, "notifier", mock_notifier):
        yield mock_notifier


class TestJobAuth:

    @pytest.mark.api
    def test_missing_token(self, client: TestClient, notifier):
        response = client.post("/api/v1/jobs/check-missed")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["category"] == "unauthorized"
        notifier.send_email.assert_not_called()

    @pytest.mark.api
    def test_wrong_token(self, client: TestClient, notifier):
        response = client.post(
            "/api/v1/jobs/check-missed",
            headers={"Authorization": "Bearer wrong"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.api
    def test_unset_secret_rejects_everything(self, client: TestClient, notifier):
        with patch("api.deps.settings.CRON_SECRET", None):
            response = client.post(
                "/api/v1/jobs/check-missed",
                headers={"Authorization": "Bearer None"}
            )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCheckMissed:

    @pytest.mark.api
    def test_nothing_to_check(self, client: TestClient, cron_headers, notifier):
        response = client.post("/api/v1/jobs/check-missed", headers=cron_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "checked": 0,
            "missed": 0,
            "notified": 0,
            "message": "Nothing to check",
        }

    @pytest.mark.api
    def test_counts(self, client: TestClient, cron_headers, notifier, test_medications):
        response = client.post("/api/v1/jobs/check-missed", headers=cron_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"checked": 2, "missed": 1, "notified": 1}
        assert notifier.send_email.call_args[0][0].to == "carer@example.com"

    @pytest.mark.api
    def test_taken_dose_not_reported(self, client: TestClient, cron_headers, notifier, test_medications, make_log):
        make_log(test_medications[0])

        response = client.post("/api/v1/jobs/check-missed", headers=cron_headers)

        assert response.json() == {"checked": 2, "missed": 0, "notified": 0}
        notifier.send_email.assert_not_called()

    @pytest.mark.api
    def test_job_writes_nothing(self, client: TestClient, db_session, cron_headers, notifier, test_medications):
        from models import MedicationLog

        client.post("/api/v1/jobs/check-missed", headers=cron_headers)
        client.post("/api/v1/jobs/check-missed", headers=cron_headers)

        assert db_session.query(MedicationLog).count() == 0
        assert notifier.send_email.await_count == 2

    @pytest.mark.api
    def test_read_failure_returns_500(self, client: TestClient, cron_headers, notifier, test_medications):
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        with patch.object(missed_dose_service, "load_snapshot", side_effect=error):
            response = client.post("/api/v1/jobs/check-missed", headers=cron_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["category"] == "server_error"
        assert "database is locked" in data["message"]
        notifier.send_email.assert_not_called()
