"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow service. Core errors
are mapped to HTTP responses here and nowhere else:

- NotFound                    -> 404
- DefinitionAlreadyExists     -> 400
- DefinitionRejected          -> 400
- TransitionRejected          -> 400

Every error body is ``{"detail": <message>, "code": <reason code>}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflow_engine import __version__
from workflow_engine.engine.errors import NotFound, WorkflowError
from workflow_engine.engine.service import WorkflowService
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.models import ApiError
from workflow_engine.server.router import router

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: WorkflowError) -> JSONResponse:
    body = ApiError(detail=error.message, code=error.code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _handle_workflow_error(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, WorkflowError):
        raise exc
    status_code = 404 if isinstance(exc, NotFound) else 400
    logger.debug(
        "Request rejected",
        extra={"path": request.url.path, "status_code": status_code, "code": exc.code},
    )
    return _error_response(status_code, exc)


def create_app(
    settings: ServerSettings | None = None, service: WorkflowService | None = None
) -> FastAPI:
    settings = settings if settings is not None else ServerSettings()

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="Define finite-state workflows and advance independent instances of them.",
    )

    # Expose settings and the service for request handlers.
    app.state.settings = settings
    app.state.service = service if service is not None else WorkflowService()

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(WorkflowError, _handle_workflow_error)
    app.include_router(router)
    return app
