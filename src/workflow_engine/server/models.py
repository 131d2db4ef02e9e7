"""Pydantic models for the REST server.

Domain objects (definitions, instances, actions) are served as-is from
:mod:`workflow_engine.engine.models`; only transport-specific shapes live here.
"""

from __future__ import annotations

from pydantic import BaseModel


class ApiError(BaseModel):
    detail: str
    code: str


class HealthResponse(BaseModel):
    status: str
    version: str
