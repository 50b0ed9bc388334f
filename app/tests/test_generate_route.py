import json
import logging

from fastapi.testclient import TestClient

from app.core.exceptions import ModelInvocationError, StorageWriteError
from fakes import FIXED_COVER, FIXED_TIMESTAMP, FakeLLM, FakeRepository

URL = "/api/vapi/generate"


def test_generates_and_stores_interview(client, valid_body, fake_llm, fake_repository):
    response = client.post(URL, json=valid_body)

    assert response.status_code == 200
    assert response.json() == {"success": True, "questionsCount": 5}

    assert len(fake_repository.saved) == 1
    document = fake_repository.saved[0].to_document()
    assert document == {
        "role": "Backend Engineer",
        "type": "technical",
        "level": "Senior",
        "techstack": ["Go", "Postgres"],
        "questions": ["Q1", "Q2", "Q3", "Q4", "Q5"],
        "userId": "u1",
        "finalized": True,
        "coverImage": FIXED_COVER,
        "createdAt": FIXED_TIMESTAMP,
    }


def test_prompt_is_built_from_request(client, valid_body, fake_llm):
    client.post(URL, json=valid_body)

    assert len(fake_llm.prompts) == 1
    prompt = fake_llm.prompts[0]
    for fragment in ("Backend Engineer", "Senior", "Go,Postgres", "technical", "is: 5."):
        assert fragment in prompt


def test_question_count_follows_model_output_not_amount(make_client, valid_body, fake_repository):
    client = make_client(FakeLLM(reply='```json\n["Only one", "And two"]\n```'), fake_repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 200
    assert response.json()["questionsCount"] == 2
    assert fake_repository.saved[0].questions == ["Only one", "And two"]


def test_missing_field_is_rejected_before_model_call(client, valid_body, fake_llm, fake_repository):
    del valid_body["amount"]

    response = client.post(URL, json=valid_body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Invalid request body structure"
    assert payload["received"] == valid_body
    assert "amount" in payload["details"]
    assert fake_llm.prompts == []
    assert fake_repository.attempts == 0


def test_non_object_body_is_echoed(client):
    response = client.post(URL, content=b"null", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body structure"
    assert response.json()["received"] is None


def test_malformed_json_is_rejected(client, fake_llm):
    response = client.post(URL, content=b'{"role": ', headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Invalid JSON in request body"
    assert payload["details"]
    assert "received" not in payload
    assert fake_llm.prompts == []


def test_empty_body_is_malformed_json(client):
    response = client.post(URL)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON in request body"


def test_unparseable_model_output_is_a_server_error(make_client, valid_body, fake_repository):
    raw = 'Here are your questions: ["Q1"]'
    client = make_client(FakeLLM(reply=raw), fake_repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Failed to process AI response"
    assert payload["details"].startswith("Failed to parse LLM response: ")
    assert payload["rawResponse"] == raw
    assert fake_repository.attempts == 0


def test_non_array_model_output_reports_cause(make_client, valid_body, fake_repository):
    client = make_client(FakeLLM(reply=json.dumps({"questions": ["Q1"]})), fake_repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 500
    assert response.json()["details"] == "Failed to parse LLM response: LLM output was not an array"


def test_model_call_failure_is_internal_error(make_client, valid_body, fake_repository):
    client = make_client(FakeLLM(error=ModelInvocationError("429 RESOURCE_EXHAUSTED")), fake_repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "details": "429 RESOURCE_EXHAUSTED",
    }
    assert fake_repository.attempts == 0


def test_unexpected_failure_is_internal_error(make_client, valid_body, fake_repository):
    client = make_client(FakeLLM(error=RuntimeError("boom")), fake_repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error", "details": "boom"}


def test_storage_failure_is_internal_error(make_client, valid_body, fake_llm):
    repository = FakeRepository(error=StorageWriteError("PERMISSION_DENIED: Missing or insufficient permissions."))
    client = make_client(fake_llm, repository)

    response = client.post(URL, json=valid_body)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "details": "PERMISSION_DENIED: Missing or insufficient permissions.",
    }
    assert repository.attempts == 1


def test_diagnostics_can_be_hidden(make_client, valid_body, fake_repository):
    client = make_client(FakeLLM(reply="not json"), fake_repository, expose_diagnostics=False)

    response = client.post(URL, json=valid_body)
    assert response.status_code == 500
    assert "rawResponse" not in response.json()

    del valid_body["role"]
    response = client.post(URL, json=valid_body)
    assert response.status_code == 400
    assert "received" not in response.json()


def test_get_returns_acknowledgement(client):
    response = client.get(URL)

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": "Thank you!"}


def test_get_is_unaffected_by_previous_failures(client, valid_body):
    del valid_body["userid"]
    client.post(URL, json=valid_body)

    assert client.get(URL).json() == {"success": True, "data": "Thank you!"}


def test_correlation_id_is_echoed_or_generated(client):
    response = client.get(URL, headers={"X-Correlation-ID": "req-123"})
    assert response.headers["X-Correlation-ID"] == "req-123"

    response = client.get(URL)
    assert response.headers["X-Correlation-ID"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_out_of_range_number_is_malformed_json(client, fake_llm):
    body = b'{"type": "technical", "role": "Dev", "level": "Senior", "techstack": "Go", "amount": 1e400}'

    response = client.post(URL, content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON in request body"
    assert "out of range" in response.json()["details"]
    assert response.headers["X-Correlation-ID"]
    assert fake_llm.prompts == []


def test_unhandled_error_response_keeps_correlation_id(make_client, fake_llm, fake_repository):
    app = make_client(fake_llm, fake_repository).app

    async def failing_route():
        raise RuntimeError("unexpected")

    app.add_api_route("/failing", failing_route)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/failing", headers={"X-Correlation-ID": "req-500"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error", "details": "unexpected"}
    assert response.headers["X-Correlation-ID"] == "req-500"


def test_record_is_logged_before_save(client, valid_body, caplog):
    caplog.set_level(logging.INFO, logger="app.services.pipeline.interview_pipeline")

    response = client.post(URL, json=valid_body)

    assert response.status_code == 200
    [message] = [r.getMessage() for r in caplog.records if "Saving interview record" in r.getMessage()]
    assert "'userId': 'u1'" in message
    assert "'questions': ['Q1', 'Q2', 'Q3', 'Q4', 'Q5']" in message
    assert f"'createdAt': '{FIXED_TIMESTAMP}'" in message
