from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from workflow_engine import __version__
from workflow_engine.engine.errors import NotFound
from workflow_engine.server.app import _handle_workflow_error, create_app
from workflow_engine.server.config import ServerSettings


def test_health_and_docs(client: TestClient) -> None:
    health = client.get("/health").json()
    assert health == {"status": "ok", "version": __version__}

    assert client.get("/docs").status_code == 200
    schema = client.get("/openapi.json").json()
    assert "/instances/{instance_id}/actions/{action_id}" in schema["paths"]


def test_create_and_get_workflow(client: TestClient, approval_payload: dict[str, Any]) -> None:
    resp = client.post("/workflows", json=approval_payload)
    assert resp.status_code == 201
    assert resp.headers["location"] == "/workflows/approval"

    body = resp.json()
    assert body["id"] == "approval"
    assert body["states"][0]["isInitial"] is True
    assert body["states"][0]["enabled"] is True
    assert body["actions"][0]["fromStates"] == ["draft"]
    assert body["actions"][0]["toState"] == "approved"

    assert client.get("/workflows/approval").json() == body
    assert client.get("/workflows").json() == [body]


def test_duplicate_workflow_id_is_rejected(
    client: TestClient, approval_payload: dict[str, Any]
) -> None:
    assert client.post("/workflows", json=approval_payload).status_code == 201

    approval_payload["name"] = "Second"
    resp = client.post("/workflows", json=approval_payload)
    assert resp.status_code == 400
    assert resp.json() == {
        "detail": "WorkflowDefinition with same Id exists.",
        "code": "DefinitionAlreadyExists",
    }
    assert client.get("/workflows/approval").json()["name"] == "Approval"


def test_invalid_workflow_is_rejected_with_reason(
    client: TestClient, approval_payload: dict[str, Any]
) -> None:
    approval_payload["states"][1]["isInitial"] = True

    resp = client.post("/workflows", json=approval_payload)

    assert resp.status_code == 400
    assert resp.json()["code"] == "MissingOrMultipleInitialState"
    assert resp.json()["detail"] == "Must have exactly one initial state."
    assert client.get("/workflows").json() == []


def test_malformed_payload_never_reaches_the_validator(client: TestClient) -> None:
    resp = client.post("/workflows", json={"name": "no id", "states": "not-a-list"})
    assert resp.status_code == 422
    assert client.get("/workflows").json() == []


def test_unknown_ids_are_404(client: TestClient) -> None:
    for method, path in [
        ("get", "/workflows/missing"),
        ("post", "/workflows/missing/instances"),
        ("get", "/instances/missing"),
        ("get", "/instances/missing/actions"),
        ("post", "/instances/missing/actions/approve"),
    ]:
        resp = client.request(method.upper(), path)
        assert resp.status_code == 404, path
        assert resp.json()["code"] == "NotFound"


def test_instance_lifecycle(client: TestClient, approval_payload: dict[str, Any]) -> None:
    client.post("/workflows", json=approval_payload)

    created = client.post("/workflows/approval/instances")
    assert created.status_code == 201
    instance = created.json()
    assert created.headers["location"] == f"/instances/{instance['id']}"
    assert instance["workflowDefinitionId"] == "approval"
    assert instance["currentState"] == "draft"
    assert instance["history"] == []

    actions = client.get(f"/instances/{instance['id']}/actions").json()
    assert [a["id"] for a in actions] == ["approve"]

    moved = client.post(f"/instances/{instance['id']}/actions/approve")
    assert moved.status_code == 200
    body = moved.json()
    assert body["currentState"] == "approved"
    assert len(body["history"]) == 1
    entry = body["history"][0]
    assert entry["actionId"] == "approve"
    assert entry["fromState"] == "draft"
    assert entry["toState"] == "approved"
    assert entry["timestamp"]

    again = client.post(f"/instances/{instance['id']}/actions/approve")
    assert again.status_code == 400
    assert again.json() == {"detail": "Instance is at a final state.", "code": "InstanceAtFinalState"}

    assert client.get(f"/instances/{instance['id']}").json() == body
    assert client.get("/instances").json() == [body]


def test_start_instance_without_enabled_initial_state(
    client: TestClient, approval_payload: dict[str, Any]
) -> None:
    approval_payload["states"][0]["enabled"] = False
    assert client.post("/workflows", json=approval_payload).status_code == 201

    resp = client.post("/workflows/approval/instances")
    assert resp.status_code == 400
    assert resp.json()["code"] == "NoEnabledInitialState"
    assert client.get("/instances").json() == []


def test_action_not_allowed_from_current_state(
    client: TestClient, review_payload: dict[str, Any]
) -> None:
    client.post("/workflows", json=review_payload)
    instance_id = client.post("/workflows/review/instances").json()["id"]

    resp = client.post(f"/instances/{instance_id}/actions/approve")
    assert resp.status_code == 400
    assert resp.json()["code"] == "ActionNotAllowedFromCurrentState"

    resp = client.post(f"/instances/{instance_id}/actions/unknown")
    assert resp.json()["code"] == "ActionNotFound"

    assert client.get(f"/instances/{instance_id}").json()["history"] == []


def test_snake_case_payloads_are_accepted(client: TestClient) -> None:
    payload = {
        "id": "snake",
        "states": [{"id": "a", "is_initial": True}, {"id": "b", "is_final": True}],
        "actions": [{"id": "go", "from_states": ["a"], "to_state": "b"}],
    }
    resp = client.post("/workflows", json=payload)
    assert resp.status_code == 201
    assert resp.json()["actions"][0]["toState"] == "b"


def test_cors_is_enabled_only_when_configured(monkeypatch) -> None:
    monkeypatch.setenv("WORKFLOW_ENGINE_CORS_ORIGINS", "http://localhost:5173")
    client = TestClient(create_app(settings=ServerSettings()))

    resp = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers.get("access-control-allow-origin") == "http://localhost:5173"


def test_each_app_gets_its_own_store(approval_payload: dict[str, Any]) -> None:
    first = TestClient(create_app(settings=ServerSettings()))
    second = TestClient(create_app(settings=ServerSettings()))

    first.post("/workflows", json=approval_payload)

    assert second.get("/workflows").json() == []


def test_location_header_quotes_the_definition_id(client: TestClient) -> None:
    payload = {
        "id": "a b/c",
        "states": [{"id": "a", "isInitial": True}, {"id": "b", "isFinal": True}],
        "actions": [{"id": "go", "fromStates": ["a"], "toState": "b"}],
    }
    resp = client.post("/workflows", json=payload)
    assert resp.status_code == 201
    assert resp.headers["location"] == "/workflows/a%20b%2Fc"


def _request(path: str) -> Request:
    scope = {"type": "http", "method": "GET", "path": path, "headers": [], "query_string": b""}
    return Request(scope)


def test_error_handler_maps_workflow_errors() -> None:
    resp = asyncio.run(_handle_workflow_error(_request("/x"), NotFound("Instance not found.")))
    assert resp.status_code == 404


def test_error_handler_reraises_anything_else() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(_handle_workflow_error(_request("/x"), RuntimeError("boom")))
