"""FastAPI server adapter for workflow-engine.

This module exposes a REST API over the workflow service.

Design intent:
- Keep business logic in `workflow_engine.engine.*`
- Keep server-specific concerns (routing, CORS, error translation) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_engine.server.app import create_app
