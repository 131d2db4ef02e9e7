"""Workflow Engine.

A small, in-memory finite-state workflow service:
- workflow definitions (states + actions) validated before they are stored
- instances created at the definition's initial state and advanced by actions
- an append-only history of every transition
- a FastAPI adapter and a CLI on top
"""

__version__ = "0.1.0"

from workflow_engine.engine.service import WorkflowService
from workflow_engine.engine.store import WorkflowStore

__all__ = ["__version__", "WorkflowService", "WorkflowStore"]
