import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import brm.main as m
from brm import store as store_module
from brm.routes import responses as response_routes
from brm.store import JsonFileStore


def _client(monkeypatch, tmp_path):
    store = JsonFileStore(tmp_path)
    store.init_collections()
    monkeypatch.setattr(store_module, "_store", store)
    return TestClient(m.app)


def _assessment_with_template(client):
    template = client.post(
        "/api/templates",
        json={
            "name": "Review",
            "sections": [
                {
                    "id": "s1",
                    "title": "Relationship",
                    "questions": [
                        {"id": "q1", "text": "How is it going?", "type": "text", "required": True},
                        {"id": "q2", "text": "Tickets", "type": "number", "required": False},
                    ],
                },
                {
                    "id": "s2",
                    "title": "Services",
                    "questions": [
                        {"id": "q3", "text": "Used", "type": "checkboxes", "required": True, "options": ["A", "B"]},
                    ],
                },
            ],
        },
    ).json()
    account = client.post("/api/accounts", json={"Name": "Acme"}).json()
    assessment = client.post(
        "/api/assessments",
        json={"name": "Q1", "templateId": template["id"], "accountId": account["id"], "status": "Sent"},
    ).json()
    return template, account, assessment


def test_response_answer_scenario(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    res = client.post("/api/responses", json={"assessmentId": "X", "accountId": "Y"})
    assert res.status_code == 201
    doc = res.json()
    assert doc["status"] == "Not Started"
    assert len(doc["timeline"]) == 1
    assert doc["responses"] == []

    res = client.post(f"/api/responses/{doc['id']}/questions", json={"sectionId": "s1", "questionId": "q1", "value": "hi"})
    assert res.status_code == 200
    doc = res.json()
    assert doc["status"] == "In Progress"
    assert len(doc["timeline"]) == 2
    assert len(doc["responses"]) == 1

    res = client.post(f"/api/responses/{doc['id']}/questions", json={"sectionId": "s1", "questionId": "q1", "value": "bye"})
    doc = res.json()
    assert len(doc["responses"]) == 1
    assert doc["responses"][0]["value"] == "bye"
    assert len(doc["timeline"]) == 2
    assert client.get(f"/api/responses/{doc['id']}").json() == doc


def test_answer_value_types_round_trip(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    rid = client.post("/api/responses", json={"assessmentId": "X"}).json()["id"]
    for qid, value in [("a", "text"), ("b", ["x", "y"]), ("c", 42), ("d", 2.5), ("e", None)]:
        client.post(f"/api/responses/{rid}/questions", json={"sectionId": "s", "questionId": qid, "value": value})
    values = {r["questionId"]: r["value"] for r in client.get(f"/api/responses/{rid}").json()["responses"]}
    assert values == {"a": "text", "b": ["x", "y"], "c": 42, "d": 2.5, "e": None}


def test_answer_values_are_stored_exactly_as_sent(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    rid = client.post("/api/responses", json={"assessmentId": "X"}).json()["id"]
    sent = {"flag": True, "nums": [1, 2], "other": {"other": "x"}, "mixed": ["a", 3, False]}
    for qid, value in sent.items():
        res = client.post(f"/api/responses/{rid}/questions", json={"sectionId": "s", "questionId": qid, "value": value})
        assert res.status_code == 200, qid
    values = {r["questionId"]: r["value"] for r in client.get(f"/api/responses/{rid}").json()["responses"]}
    assert values == sent
    assert values["flag"] is True


def test_answer_on_missing_response_is_404(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    res = client.post("/api/responses/nope/questions", json={"sectionId": "s", "questionId": "q", "value": 1})
    assert res.status_code == 404
    assert res.json() == {"error": "Response not found"}


def test_submit_without_answers_is_allowed_by_default(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    _, account, assessment = _assessment_with_template(client)
    doc = client.post("/api/responses", json={"assessmentId": assessment["id"], "accountId": account["id"]}).json()
    res = client.post(f"/api/responses/{doc['id']}/submit")
    assert res.status_code == 200
    submitted = res.json()
    assert submitted["status"] == "Submitted"
    assert submitted["submittedAt"]
    assert len(submitted["timeline"]) == 2
    assert submitted["timeline"][-1]["status"] == "Submitted"


def test_submit_policy_can_require_all_required_answers(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    monkeypatch.setattr(response_routes, "REQUIRE_COMPLETE_SUBMISSION", True)
    _, account, assessment = _assessment_with_template(client)
    rid = client.post("/api/responses", json={"assessmentId": assessment["id"], "accountId": account["id"]}).json()["id"]
    client.post(f"/api/responses/{rid}/questions", json={"sectionId": "s1", "questionId": "q1", "value": "fine"})

    res = client.post(f"/api/responses/{rid}/submit")
    assert res.status_code == 422
    assert res.json()["details"] == [{"sectionId": "s2", "questionId": "q3"}]
    assert client.get(f"/api/responses/{rid}").json()["status"] == "In Progress"

    client.post(f"/api/responses/{rid}/questions", json={"sectionId": "s2", "questionId": "q3", "value": ["A"]})
    res = client.post(f"/api/responses/{rid}/submit")
    assert res.status_code == 200
    assert res.json()["status"] == "Submitted"


def test_second_response_for_same_assessment_conflicts(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    first = client.post("/api/responses", json={"assessmentId": "X", "accountId": "Y"})
    assert first.status_code == 201
    res = client.post("/api/responses", json={"assessmentId": "X", "accountId": "Y"})
    assert res.status_code == 409
    assert "error" in res.json()
    assert len(client.get("/api/responses").json()) == 1
    assert client.get("/api/responses", params={"assessmentId": "X"}).json() == [first.json()]
    assert client.get("/api/responses", params={"assessmentId": "other"}).json() == []


def test_put_response_cannot_revert_status_or_edit_timeline(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    rid = client.post("/api/responses", json={"assessmentId": "X"}).json()["id"]
    client.post(f"/api/responses/{rid}/submit")

    res = client.put(f"/api/responses/{rid}", json={"status": "In Progress", "timeline": [], "note": "hello"})
    assert res.status_code == 200
    doc = res.json()
    assert doc["status"] == "Submitted"
    assert len(doc["timeline"]) == 2
    assert doc["note"] == "hello"

    assert client.put("/api/responses/nope", json={}).status_code == 404


def test_put_response_forward_status_logs_timeline(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    rid = client.post("/api/responses", json={"assessmentId": "X"}).json()["id"]
    doc = client.put(f"/api/responses/{rid}", json={"status": "In Progress"}).json()
    assert doc["status"] == "In Progress"
    assert [e["status"] for e in doc["timeline"]] == ["Not Started", "In Progress"]


def test_progress_reports_section_completion(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    _, account, assessment = _assessment_with_template(client)
    rid = client.post("/api/responses", json={"assessmentId": assessment["id"], "accountId": account["id"]}).json()["id"]
    client.post(f"/api/responses/{rid}/questions", json={"sectionId": "s2", "questionId": "q3", "value": ["B"]})

    progress = client.get(f"/api/responses/{rid}/progress").json()
    assert progress["status"] == "In Progress"
    assert [(s["sectionId"], s["complete"]) for s in progress["sections"]] == [("s1", False), ("s2", True)]
    assert progress["missingRequired"] == [{"sectionId": "s1", "questionId": "q1"}]
    assert progress["complete"] is False


def test_malformed_answer_payload_is_rejected_with_error_body(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    rid = client.post("/api/responses", json={"assessmentId": "X"}).json()["id"]
    res = client.post(f"/api/responses/{rid}/questions", json={"value": "no keys"})
    assert res.status_code == 422
    assert res.json()["error"] == "Invalid request body"


def test_openapi_documents_error_bodies_for_response_routes(monkeypatch, tmp_path):
    client = _client(monkeypatch, tmp_path)
    paths = client.get("/openapi.json").json()["paths"]
    create = paths["/api/responses"]["post"]["responses"]
    assert {"404", "409", "422", "500"} <= set(create)
    assert "ErrorResponse" in create["409"]["content"]["application/json"]["schema"]["$ref"]
    assert "409" not in paths["/api/accounts"]["post"]["responses"]
