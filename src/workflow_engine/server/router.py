"""REST routes for workflow definitions and instances.

Routes are thin wrappers over :class:`~workflow_engine.engine.service.WorkflowService`.
Core errors propagate untouched and are translated by the exception handlers
registered in :mod:`workflow_engine.server.app`.
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, Response

from workflow_engine import __version__
from workflow_engine.engine.models import ActionDef, WorkflowDefinition, WorkflowInstance
from workflow_engine.engine.service import WorkflowService
from workflow_engine.server.models import ApiError, HealthResponse

_ERRORS: dict[int | str, dict[str, object]] = {
    400: {"model": ApiError},
    404: {"model": ApiError},
}

router = APIRouter()


def _service(request: Request) -> WorkflowService:
    service = getattr(request.app.state, "service", None)
    if not isinstance(service, WorkflowService):
        raise HTTPException(status_code=500, detail="Workflow service not configured")
    return service


@router.get("/health", response_model=HealthResponse, tags=["meta"])
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


# Definitions -------------------------------------------------------------


@router.post(
    "/workflows",
    status_code=201,
    response_model=WorkflowDefinition,
    responses=_ERRORS,
    tags=["workflows"],
)
def create_definition(
    definition: WorkflowDefinition, request: Request, response: Response
) -> WorkflowDefinition:
    stored = _service(request).submit_definition(definition)
    response.headers["Location"] = f"/workflows/{quote(stored.id, safe='')}"
    return stored


@router.get(
    "/workflows",
    response_model=list[WorkflowDefinition],
    tags=["workflows"],
)
def list_definitions(request: Request) -> list[WorkflowDefinition]:
    return _service(request).list_definitions()


@router.get(
    "/workflows/{definition_id}",
    response_model=WorkflowDefinition,
    responses=_ERRORS,
    tags=["workflows"],
)
def get_definition(definition_id: str, request: Request) -> WorkflowDefinition:
    return _service(request).get_definition(definition_id)


@router.post(
    "/workflows/{definition_id}/instances",
    status_code=201,
    response_model=WorkflowInstance,
    responses=_ERRORS,
    tags=["instances"],
)
def start_instance(
    definition_id: str, request: Request, response: Response
) -> WorkflowInstance:
    instance = _service(request).start_instance(definition_id)
    response.headers["Location"] = f"/instances/{quote(instance.id, safe='')}"
    return instance


# Instances ---------------------------------------------------------------


@router.get(
    "/instances",
    response_model=list[WorkflowInstance],
    tags=["instances"],
)
def list_instances(request: Request) -> list[WorkflowInstance]:
    return _service(request).list_instances()


@router.get(
    "/instances/{instance_id}",
    response_model=WorkflowInstance,
    responses=_ERRORS,
    tags=["instances"],
)
def get_instance(instance_id: str, request: Request) -> WorkflowInstance:
    return _service(request).get_instance(instance_id)


@router.get(
    "/instances/{instance_id}/actions",
    response_model=list[ActionDef],
    responses=_ERRORS,
    tags=["instances"],
)
def list_available_actions(instance_id: str, request: Request) -> list[ActionDef]:
    return _service(request).available_actions(instance_id)


@router.post(
    "/instances/{instance_id}/actions/{action_id}",
    response_model=WorkflowInstance,
    responses=_ERRORS,
    tags=["instances"],
)
def execute_action(instance_id: str, action_id: str, request: Request) -> WorkflowInstance:
    return _service(request).execute_action(instance_id, action_id)
