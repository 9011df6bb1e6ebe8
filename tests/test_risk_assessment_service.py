"""Tests for the risk assessment HTTP service."""

from fastapi.testclient import TestClient
import pytest

from risk_assessment.main import app
from risk_assessment.observability import get_metrics
from risk_assessment.routes import _engine


HIGH_RISK_PATH = ["same-all", "never", "never", "no", "never-check", "never"]


@pytest.fixture(autouse=True)
def reset_state() -> None:
    get_metrics().reset()
    _engine.reset_state_for_tests()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _create(client: TestClient) -> str:
    response = client.post("/assessments")
    assert response.status_code == 201
    return response.json()["assessment_id"]


def test_catalog_endpoint_lists_areas_in_order(client: TestClient) -> None:
    response = client.get("/catalog")
    assert response.status_code == 200
    body = response.json()
    assert body["total_questions"] == 6
    assert [area["id"] for area in body["areas"]] == ["passwords", "devices", "privacy"]
    assert body["areas"][0]["questions"][0]["options"][0] == {
        "value": "same-all",
        "text": "I use the same password for everything",
        "risk_weight": 10,
    }


def test_score_endpoint_drops_unknown_answers(client: TestClient) -> None:
    response = client.post(
        "/score",
        json={
            "answers": [
                {"question_id": "pwd-1", "selected_value": "same-all"},
                {"question_id": "pwd-2", "selected_value": "never"},
                {"question_id": "pwd-2", "selected_value": "not-an-option"},
                {"question_id": "net-1", "selected_value": "never"},
            ]
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["overall_score"] == 100
    assert body["data"]["risk_level"] == "high"
    assert [item["area_id"] for item in body["data"]["area_scores"]] == ["passwords"]
    assert [(item["id"], item["priority"]) for item in body["data"]["recommendations"]] == [
        ("rec-pwd-manager", "high"),
        ("rec-2fa", "high"),
    ]
    assert len(body["ignored"]) == 2


def test_score_endpoint_with_no_answers(client: TestClient) -> None:
    response = client.post("/score", json={"answers": []})
    assert response.status_code == 200
    assert response.json()["data"] == {
        "overall_score": 0.0,
        "risk_level": "low",
        "area_scores": [],
        "recommendations": [],
    }


def test_assessment_walkthrough(client: TestClient) -> None:
    assessment_id = _create(client)
    assert assessment_id.startswith("asm_")
    assert assessment_id.endswith("_0001")

    for value in HIGH_RISK_PATH[:-1]:
        response = client.post(f"/assessments/{assessment_id}/answers", json={"option_value": value})
        assert response.status_code == 200
        assert response.json()["accepted"] is True
        assert response.json()["complete"] is False

    state = client.get(f"/assessments/{assessment_id}").json()
    assert state["current_question_id"] == "priv-2"
    assert state["answered_count"] == 5
    assert state["can_retreat"] is True

    final = client.post(f"/assessments/{assessment_id}/answers", json={"option_value": HIGH_RISK_PATH[-1]})
    assert final.status_code == 200
    body = final.json()
    assert body["complete"] is True
    assert body["progress_percent"] == 100
    assert body["profile"]["overall_score"] == 100
    assert len(body["profile"]["recommendations"]) == 6

    result = client.get(f"/assessments/{assessment_id}/result")
    assert result.status_code == 200
    assert result.json() == body["profile"]


def test_retreat_restores_previous_selection(client: TestClient) -> None:
    assessment_id = _create(client)
    client.post(f"/assessments/{assessment_id}/answers", json={"option_value": "few-diff"})

    response = client.post(f"/assessments/{assessment_id}/retreat")
    assert response.status_code == 200
    body = response.json()
    assert body["current_question_id"] == "pwd-1"
    assert body["current_selection"] == "few-diff"
    assert body["can_advance"] is True

    at_start = client.post(f"/assessments/{assessment_id}/retreat").json()
    assert (at_start["area_index"], at_start["question_index"]) == (0, 0)


def test_unknown_option_is_not_accepted(client: TestClient) -> None:
    assessment_id = _create(client)
    response = client.post(f"/assessments/{assessment_id}/answers", json={"option_value": "bogus"})
    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] is False
    assert body["answered_count"] == 0
    assert body["current_question_id"] == "pwd-1"
    assert "risk_assessment_answers_ignored_total 1" in client.get("/metrics").text


def test_result_before_completion_conflicts(client: TestClient) -> None:
    assessment_id = _create(client)
    response = client.get(f"/assessments/{assessment_id}/result", headers={"x-trace-id": "trace-incomplete-01"})
    assert response.status_code == 409
    assert response.json()["error"] == {
        "code": "ASSESSMENT_INCOMPLETE",
        "message": f"Assessment {assessment_id} has unanswered questions.",
        "trace_id": "trace-incomplete-01",
    }


def test_completed_assessment_rejects_answers_until_reset(client: TestClient) -> None:
    assessment_id = _create(client)
    for value in HIGH_RISK_PATH:
        client.post(f"/assessments/{assessment_id}/answers", json={"option_value": value})

    rejected = client.post(f"/assessments/{assessment_id}/answers", json={"option_value": "never"})
    assert rejected.status_code == 409
    assert rejected.json()["error"]["code"] == "ASSESSMENT_COMPLETE"

    reset = client.post(f"/assessments/{assessment_id}/reset")
    assert reset.status_code == 200
    assert reset.json()["complete"] is False
    assert reset.json()["answered_count"] == 0
    assert reset.json()["profile"] is None


def test_missing_assessment_returns_404(client: TestClient) -> None:
    response = client.get("/assessments/asm_20000101_9999")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ASSESSMENT_NOT_FOUND"


def test_delete_assessment(client: TestClient) -> None:
    assessment_id = _create(client)
    assert client.delete(f"/assessments/{assessment_id}").status_code == 204
    assert client.get(f"/assessments/{assessment_id}").status_code == 404


def test_validation_errors_use_error_envelope(client: TestClient) -> None:
    assessment_id = _create(client)
    response = client.post(f"/assessments/{assessment_id}/answers", json={"option_value": ""})
    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "UNPROCESSABLE_ENTITY"
    assert body["error"]["details"][0]["field"] == "body.option_value"


def test_metrics_endpoint_tracks_assessments(client: TestClient) -> None:
    before = client.get("/metrics")
    assert before.status_code == 200
    assert "risk_assessment_requests_total 0" in before.text

    assessment_id = _create(client)
    for value in HIGH_RISK_PATH:
        client.post(
            f"/assessments/{assessment_id}/answers",
            json={"option_value": value},
            headers={"x-trace-id": "trace-metrics-001"},
        )

    after = client.get("/metrics")
    assert "risk_assessment_requests_total 7" in after.text
    assert "risk_assessment_success_total 7" in after.text
    assert "risk_assessment_errors_total 0" in after.text
    assert "risk_assessment_started_total 1" in after.text
    assert "risk_assessment_completed_total 1" in after.text
    assert "risk_assessment_last_overall_score 100.0000" in after.text


def test_completion_builds_event(client: TestClient) -> None:
    assessment_id = _create(client)
    for value in HIGH_RISK_PATH:
        client.post(
            f"/assessments/{assessment_id}/answers",
            json={"option_value": value},
            headers={"x-trace-id": "trace-complete-0001"},
        )

    event = _engine.get(assessment_id).completed_event
    assert event is not None
    assert event["event_type"] == "assessment.completed"
    assert event["trace_id"] == "trace-complete-0001"
    assert event["data"]["answered_count"] == 6
    assert event["data"]["recommendation_ids"][0] == "rec-pwd-manager"


def test_health(client: TestClient) -> None:
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["service"] == "risk-assessment-service"


def test_advance_from_last_question_completes_then_conflicts(client: TestClient) -> None:
    assessment_id = _create(client)
    for value in HIGH_RISK_PATH[:-1]:
        client.post(f"/assessments/{assessment_id}/answers", json={"option_value": value})

    response = client.post(f"/assessments/{assessment_id}/advance")
    assert response.status_code == 200
    body = response.json()
    assert body["complete"] is True
    assert body["answered_count"] == 5
    assert body["profile"]["overall_score"] == pytest.approx(250 / 3, abs=1e-3)
    assert [item["score"] for item in body["profile"]["area_scores"]] == [100, 100, 50]
    assert "rec-phishing" not in [item["id"] for item in body["profile"]["recommendations"]]

    again = client.post(f"/assessments/{assessment_id}/advance", headers={"x-trace-id": "trace-advance-done-01"})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ASSESSMENT_COMPLETE"
    assert again.json()["error"]["trace_id"] == "trace-advance-done-01"

    back = client.post(f"/assessments/{assessment_id}/retreat")
    assert back.status_code == 409
    assert back.json()["error"]["code"] == "ASSESSMENT_COMPLETE"


def test_reset_drops_previous_completion_event(client: TestClient) -> None:
    assessment_id = _create(client)
    for value in HIGH_RISK_PATH:
        client.post(f"/assessments/{assessment_id}/answers", json={"option_value": value})
    assert _engine.get(assessment_id).completed_event is not None

    client.post(f"/assessments/{assessment_id}/reset")
    assert _engine.get(assessment_id).completed_event is None
