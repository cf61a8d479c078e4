"""HTTP surface tests using FastAPI's TestClient with an injected orchestrator."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from mindshift_assist.domain.errors import ConfigurationError
from mindshift_assist.infrastructure.config.settings import Settings
from mindshift_assist.main import create_app


@pytest.fixture
def client(orchestrator):
    app = create_app(
        settings=Settings(MINDSHIFT_TELEMETRY_ENABLED=False),
        orchestrator=orchestrator,
    )
    with TestClient(app) as test_client:
        yield test_client


def _assistance_body(**overrides) -> dict:
    body = {
        "trigger": {"condition": "multiple problems mentioned", "action": "focus"},
        "user_input": "my job and my marriage",
        "session_id": "http-1",
        "current_step_id": "problem_capture",
        "expected_response_type": "single_problem",
        "prior_responses": {},
    }
    body.update(overrides)
    return body


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_assistance_endpoint_returns_model_text(client, invoker) -> None:
    response = client.post("/api/v1/assistance", json=_assistance_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Which of those feels most pressing right now?"
    assert payload["should_return_to_script"] is True
    assert payload["token_count"] == 220
    assert Decimal(str(payload["cost"])) > 0
    assert len(invoker.calls) == 1


def test_assistance_endpoint_degrades_on_model_failure(client, invoker) -> None:
    invoker.error = ConfigurationError("no key")

    response = client.post(
        "/api/v1/assistance",
        json=_assistance_body(trigger={"condition": "rambling", "action": "simplify"}),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"].startswith("I'm just going to stop you there")
    assert payload["token_count"] == 0
    assert Decimal(str(payload["cost"])) == 0


def test_unknown_action_gets_generic_guidance(client, invoker) -> None:
    invoker.error = ConfigurationError("no key")

    response = client.post(
        "/api/v1/assistance",
        json=_assistance_body(trigger={"condition": "?", "action": "celebrate"}),
    )

    assert response.json()["message"] == "Please continue with the current step of the process."


def test_linguistic_endpoint(client, invoker) -> None:
    invoker.error = ConfigurationError("no key")

    response = client.post(
        "/api/v1/assistance/linguistic",
        json={
            "scripted_response": 'What would you feel like if "be happy" had already happened?',
            "user_input": "be happy",
            "step_id": "feel_solution_state",
            "session_id": "http-2",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert payload["fallback_to_scripted"] is True
    assert payload["improved_response"] == 'What would you feel like if "be happy" had already happened?'
    assert payload["tokens"] == 0


def test_usage_endpoints(client) -> None:
    assert client.get("/api/v1/usage/http-1").status_code == 404

    empty = client.get("/api/v1/usage").json()
    assert empty["total_sessions"] == 0
    assert empty["ai_usage_percentage"] == 0

    client.post("/api/v1/assistance", json=_assistance_body())

    session = client.get("/api/v1/usage/http-1").json()
    assert session["call_count"] == 1
    assert session["total_tokens"] == 220

    stats = client.get("/api/v1/usage").json()
    assert stats["total_sessions"] == 1
    assert stats["sessions_with_ai"] == 1


def test_missing_session_id_is_rejected(client) -> None:
    response = client.post("/api/v1/assistance", json=_assistance_body(session_id=""))
    assert response.status_code == 422
