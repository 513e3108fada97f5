"""
Tests for Adherence API
=======================

Marking doses taken and the patient/caretaker dashboards. The clock is pinned
to 10:30 so statuses are deterministic.
"""

import pytest
import importlib
from unittest.mock import patch
from fastapi import status
from fastapi.testclient import TestClient

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


@pytest.fixture(autouse=True)
def pinned_clock(fixed_now):
    module = importlib.import_module("services.adherence_service")
    with patch.object(module, "local_now", return_value=fixed_now):
        yield


class TestMarkTaken:

    @pytest.mark.api
    def test_mark_taken_success(self, client: TestClient, patient_headers, test_medication):
        response = client.post(
            "/api/v1/adherence/mark-taken",
            json={"medication_id": test_medication.id, "notes": "after breakfast"},
            headers=patient_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["medication_id"] == test_medication.id
        assert data["date"] == "2024-03-14"
        assert data["notes"] == "after breakfast"

    @pytest.mark.api
    def test_mark_taken_twice_conflict(self, client: TestClient, patient_headers, test_medication):
        payload = {"medication_id": test_medication.id}
        client.post("/api/v1/adherence/mark-taken", json=payload, headers=patient_headers)

        response = client.post("/api/v1/adherence/mark-taken", json=payload, headers=patient_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        data = response.json()
        assert data["category"] == "conflict"
        assert data["message"] == "Already marked today"

    @pytest.mark.api
    def test_mark_taken_unknown_medication(self, client: TestClient, patient_headers):
        response = client.post(
            "/api/v1/adherence/mark-taken",
            json={"medication_id": 424242},
            headers=patient_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Medication not found"

    @pytest.mark.api
    def test_mark_taken_invalid_id(self, client: TestClient, patient_headers):
        response = client.post(
            "/api/v1/adherence/mark-taken",
            json={"medication_id": 0},
            headers=patient_headers
        )

        assert response.status_code == 422


class TestPatientDashboard:

    @pytest.mark.api
    def test_today_statuses(self, client: TestClient, patient_headers, test_medications):
        response = client.get("/api/v1/adherence/today", headers=patient_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["date"] == "2024-03-14"
        assert data["notification_window_minutes"] == 60
        assert [m["status"] for m in data["medications"]] == ["missed", "pending"]
        assert data["summary"] == {
            "total": 2,
            "taken": 0,
            "remaining": 2,
            "pending": 1,
            "missed": 1,
            "completion_percentage": 0,
            "all_done": False,
        }

    @pytest.mark.api
    def test_today_after_marking(self, client: TestClient, patient_headers, test_medications):
        for med in test_medications:
            client.post("/api/v1/adherence/mark-taken", json={"medication_id": med.id}, headers=patient_headers)

        data = client.get("/api/v1/adherence/today", headers=patient_headers).json()

        assert all(m["taken_today"] for m in data["medications"])
        assert data["summary"]["completion_percentage"] == 100
        assert data["summary"]["all_done"] is True

    @pytest.mark.api
    def test_today_no_medications(self, client: TestClient, patient_headers):
        data = client.get("/api/v1/adherence/today", headers=patient_headers).json()

        assert data["medications"] == []
        assert data["summary"]["completion_percentage"] == 0
        assert data["summary"]["all_done"] is False


class TestCaretakerDashboard:

    @pytest.mark.api
    def test_caretaker_sees_linked_patient(self, client: TestClient, caretaker_headers, test_medications, make_log):
        make_log(test_medications[0])

        response = client.get("/api/v1/adherence/caretaker", headers=caretaker_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["patient_email"] == "john.doe@example.com"
        assert data["summary"]["taken"] == 1
        assert data["summary"]["completion_percentage"] == 50

    @pytest.mark.api
    def test_caretaker_without_patient(self, client: TestClient, db_session, test_caretaker, test_patient):
        test_patient.caretaker_email = None
        db_session.commit()

        response = client.get("/api/v1/adherence/caretaker", headers={"X-User-Id": test_caretaker.id})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "No patient linked to this caretaker"

    @pytest.mark.api
    def test_patient_cannot_use_caretaker_view(self, client: TestClient, patient_headers):
        response = client.get("/api/v1/adherence/caretaker", headers=patient_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["category"] == "forbidden"

    @pytest.mark.api
    def test_today_with_unreadable_time(self, client: TestClient, db_session, patient_headers, test_medications):
        test_medications[1].scheduled_time = "7h"
        db_session.commit()

        response = client.get("/api/v1/adherence/today", headers=patient_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        by_name = {m["medication"]["name"]: m for m in data["medications"]}
        assert by_name["Metformin"]["status"] == "missed"
        assert by_name["Atorvastatin"]["status"] == "pending"
        assert by_name["Atorvastatin"]["medication"]["display_time"] == "7h"
