"""Tests for the HTTP API."""

import base64
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from fitlog.api.app import create_app
from fitlog.containers import AppContainer
from fitlog.domain.errors import AnalysisError
from tests.conftest import TODAY, FakeAnalysisClient

PROFILE_PAYLOAD = {
    "name": "Alex",
    "sex": "M",
    "birth_date": "1996-01-15",
    "height_cm": 175,
    "current_weight_kg": 70,
    "target_weight_kg": 70,
    "activity_factor": 1.2,
}
MEAL_PAYLOAD = {
    "type": "lunch",
    "items": [
        {
            "name": "rice",
            "quantity": 150,
            "unit": "g",
            "macros": {"kcal": 195, "p": 4, "c": 42, "f": 0.5},
        }
    ],
}


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def onboarded_client(client: TestClient) -> TestClient:
    response = client.post("/onboarding", json=PROFILE_PAYLOAD)
    assert response.status_code == 200
    return client


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_onboarding_returns_profile_and_award(client: TestClient) -> None:
    response = client.post("/onboarding", json=PROFILE_PAYLOAD)

    body = response.json()
    assert body["profile"]["daily_kcal_goal"] == 1979
    assert body["profile"]["onboarding_completed"] is True
    assert body["award"]["total_xp"] == 50


def test_onboarding_rejects_implausible_values(client: TestClient) -> None:
    payload = {**PROFILE_PAYLOAD, "height_cm": 400}

    assert client.post("/onboarding", json=payload).status_code == 422


def test_onboarding_rejects_future_birth_date(client: TestClient) -> None:
    payload = {**PROFILE_PAYLOAD, "birth_date": "2999-01-01"}

    assert client.post("/onboarding", json=payload).status_code == 422


def test_meal_lifecycle(onboarded_client: TestClient) -> None:
    day = TODAY.isoformat()
    created = onboarded_client.post(f"/days/{day}/meals", json=MEAL_PAYLOAD)
    assert created.status_code == 201
    meal_id = created.json()["day_log"]["meals"][0]["id"]
    assert created.json()["day_log"]["summary"]["total_kcal"] == 195

    edited = onboarded_client.put(
        f"/days/{day}/meals/{meal_id}", json={**MEAL_PAYLOAD, "type": "dinner"}
    )
    assert edited.json()["day_log"]["meals"][0]["type"] == "dinner"

    deleted = onboarded_client.delete(f"/days/{day}/meals/{meal_id}")
    assert deleted.json()["day_log"]["meals"] == []
    assert onboarded_client.get(f"/days/{day}").json()["summary"]["total_kcal"] == 0


def test_meal_requires_items(onboarded_client: TestClient) -> None:
    response = onboarded_client.post(
        f"/days/{TODAY.isoformat()}/meals", json={"type": "lunch", "items": []}
    )

    assert response.status_code == 422


def test_unknown_meal_returns_404(onboarded_client: TestClient) -> None:
    response = onboarded_client.delete(f"/days/{TODAY.isoformat()}/meals/missing")

    assert response.status_code == 404


def test_water_and_balance(onboarded_client: TestClient) -> None:
    day = TODAY.isoformat()
    onboarded_client.post(f"/days/{day}/water", json={"delta_ml": 1225})

    balance = onboarded_client.get(f"/days/{day}/balance").json()

    assert balance["water_intake_ml"] == 1225
    assert balance["water_progress_percent"] == 50


def test_exercise_before_onboarding_conflicts(client: TestClient) -> None:
    response = client.post(
        f"/days/{TODAY.isoformat()}/exercises",
        json={"name": "Run", "duration_minutes": 30, "met": 8},
    )

    assert response.status_code == 409


def test_exercise_is_logged(onboarded_client: TestClient) -> None:
    response = onboarded_client.post(
        f"/days/{TODAY.isoformat()}/exercises",
        json={"name": "Run", "duration_minutes": 30, "met": 8},
    )

    assert response.status_code == 201
    assert response.json()["day_log"]["exercises"][0]["calories_burned"] == 280


def test_weight_change_confirmation_flow(onboarded_client: TestClient) -> None:
    earlier = (TODAY - timedelta(days=7)).isoformat()
    onboarded_client.post("/biometrics", json={"day": earlier, "weight_kg": 70})
    payload = {"day": TODAY.isoformat(), "weight_kg": 90}

    check = onboarded_client.post("/biometrics/check", json=payload).json()
    assert check["requires_confirmation"] is True
    assert check["weight_change"]["previous_weight_kg"] == 70

    rejected = onboarded_client.post("/biometrics", json=payload)
    assert rejected.status_code == 409
    assert rejected.json()["weight_change"]["delta_kg"] == 20

    accepted = onboarded_client.post(
        "/biometrics", json={**payload, "confirmed": True}
    )
    assert accepted.status_code == 201
    assert accepted.json()["award"]["total_xp"] == 50 + 30 + 30

    entries = onboarded_client.get("/biometrics").json()["entries"]
    assert [entry["day"] for entry in entries] == [TODAY.isoformat(), earlier]


def test_delete_biometric(onboarded_client: TestClient) -> None:
    day = TODAY.isoformat()
    onboarded_client.post("/biometrics", json={"day": day, "weight_kg": 70})

    response = onboarded_client.delete(f"/biometrics/{day}")

    assert response.json() == {"entries": []}


def test_profile_patch_keeps_onboarding_flag(onboarded_client: TestClient) -> None:
    response = onboarded_client.patch(
        "/profile", json={**PROFILE_PAYLOAD, "current_weight_kg": 80}
    )

    assert response.json()["profile"]["onboarding_completed"] is True
    assert onboarded_client.get("/profile").json()["daily_water_goal"] == 2800


def test_stats_include_level_progress(onboarded_client: TestClient) -> None:
    onboarded_client.post("/stats/xp", json={"amount": 700})

    stats = onboarded_client.get("/stats").json()

    assert stats["total_xp"] == 750
    assert stats["current_level"] == 2
    assert stats["xp_into_level"] == 250
    assert stats["xp_to_next_level"] == 250
    assert len(stats["badges"]) == 4


def test_negative_xp_is_rejected(client: TestClient) -> None:
    assert client.post("/stats/xp", json={"amount": -5}).status_code == 422


def test_challenge_endpoints(onboarded_client: TestClient) -> None:
    created = onboarded_client.post(
        "/challenges", json={"title": "No soda", "xp_reward": 80}
    )
    assert created.status_code == 201
    challenge_id = created.json()["id"]

    completed = onboarded_client.post(f"/challenges/{challenge_id}/complete")
    assert completed.json()["completed"] is True
    assert completed.json()["award"]["total_xp"] == 130

    repeated = onboarded_client.post(f"/challenges/{challenge_id}/complete")
    assert repeated.json() == {"completed": False, "award": None}

    assert onboarded_client.delete(f"/challenges/{challenge_id}").status_code == 200
    assert onboarded_client.get("/stats").json()["custom_challenges"] == []


def test_analysis_text(client: TestClient) -> None:
    response = client.post("/analysis/text", json={"text": "rice"})

    assert response.status_code == 200
    assert response.json()["items"][0]["name"] == "rice"


def test_analysis_image_accepts_data_url(
    client: TestClient, analysis_client: FakeAnalysisClient
) -> None:
    encoded = base64.b64encode(b"\xff\xd8\xffimage").decode()

    response = client.post(
        "/analysis/image", json={"image_base64": f"data:image/jpeg;base64,{encoded}"}
    )

    assert response.status_code == 200
    assert str(analysis_client.calls[0]["image_data_url"]).startswith(
        "data:image/jpeg;base64,"
    )


def test_analysis_image_rejects_invalid_base64(client: TestClient) -> None:
    response = client.post("/analysis/image", json={"image_base64": "***"})

    assert response.status_code == 422


def test_analysis_failure_returns_bad_gateway(
    client: TestClient, analysis_client: FakeAnalysisClient
) -> None:
    analysis_client.error = AnalysisError("upstream down")

    response = client.post("/analysis/text", json={"text": "rice"})

    assert response.status_code == 502
