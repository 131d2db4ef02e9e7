"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from workflow_engine.engine.models import WorkflowDefinition
from workflow_engine.engine.service import WorkflowService
from workflow_engine.server.app import create_app
from workflow_engine.server.config import ServerSettings


@pytest.fixture
def approval_payload() -> dict[str, Any]:
    """Provide draft -> approved (final), the smallest useful workflow."""
    return {
        "id": "approval",
        "name": "Approval",
        "states": [
            {"id": "draft", "name": "Draft", "isInitial": True},
            {"id": "approved", "name": "Approved", "isFinal": True},
        ],
        "actions": [
            {"id": "approve", "name": "Approve", "fromStates": ["draft"], "toState": "approved"},
        ],
    }


@pytest.fixture
def review_payload() -> dict[str, Any]:
    """Provide draft <-> pending -> approved|rejected, with a loop back to draft."""
    return {
        "id": "review",
        "name": "Review",
        "states": [
            {"id": "draft", "isInitial": True},
            {"id": "pending"},
            {"id": "approved", "isFinal": True},
            {"id": "rejected", "isFinal": True},
        ],
        "actions": [
            {"id": "submit", "fromStates": ["draft"], "toState": "pending"},
            {"id": "revise", "fromStates": ["pending"], "toState": "draft"},
            {"id": "approve", "fromStates": ["pending"], "toState": "approved"},
            {"id": "reject", "fromStates": ["draft", "pending"], "toState": "rejected"},
        ],
    }


@pytest.fixture
def approval_definition(approval_payload: dict[str, Any]) -> WorkflowDefinition:
    """Provide the minimal draft -> approved definition."""
    return WorkflowDefinition.model_validate(approval_payload)


@pytest.fixture
def review_definition(review_payload: dict[str, Any]) -> WorkflowDefinition:
    """Provide a definition with a cycle and two final states."""
    return WorkflowDefinition.model_validate(review_payload)


@pytest.fixture
def service() -> WorkflowService:
    """Provide a service over a fresh, empty store."""
    return WorkflowService()


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, service: WorkflowService) -> TestClient:
    """Provide a REST client bound to the ``service`` fixture."""
    monkeypatch.delenv("WORKFLOW_ENGINE_CORS_ORIGINS", raising=False)
    return TestClient(create_app(settings=ServerSettings(), service=service))
