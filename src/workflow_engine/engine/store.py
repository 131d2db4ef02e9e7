"""In-memory store for workflow definitions and running instances.

Nothing is persisted: the store lives as long as the process. Definitions are
frozen once stored and can be read without coordination. Instances are mutable;
callers that advance one must hold its lock via :meth:`WorkflowStore.lock_instance`.

Locking:
- ``_lock`` guards the two dictionaries (insert/lookup/list)
- one lock per instance guards that instance's read-modify-append sequence, so
  unrelated instances never wait on each other
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from workflow_engine.engine.errors import DefinitionAlreadyExists, NotFound
from workflow_engine.engine.models import WorkflowDefinition, WorkflowInstance


class WorkflowStore:
    def __init__(self) -> None:
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._instances: dict[str, WorkflowInstance] = {}
        self._lock = threading.Lock()
        self._instance_locks: dict[str, threading.Lock] = {}

    # Definitions ---------------------------------------------------------

    def add_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """Insert ``definition`` unless its id is already taken."""

        with self._lock:
            if definition.id in self._definitions:
                raise DefinitionAlreadyExists(definition.id)
            self._definitions[definition.id] = definition
            return definition

    def has_definition(self, definition_id: str) -> bool:
        with self._lock:
            return definition_id in self._definitions

    def get_definition(self, definition_id: str) -> WorkflowDefinition:
        with self._lock:
            definition = self._definitions.get(definition_id)
        if definition is None:
            raise NotFound("WorkflowDefinition not found.")
        return definition

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return list(self._definitions.values())

    # Instances -----------------------------------------------------------

    def add_instance(self, instance: WorkflowInstance) -> WorkflowInstance:
        with self._lock:
            if instance.id in self._instances:
                raise ValueError(f"Instance id already in use: {instance.id}")
            self._instances[instance.id] = instance
            self._instance_locks[instance.id] = threading.Lock()
            return instance

    def get_instance(self, instance_id: str) -> WorkflowInstance:
        with self._lock:
            instance = self._instances.get(instance_id)
        if instance is None:
            raise NotFound("Instance not found.")
        return instance

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return list(self._instances.values())

    @contextmanager
    def lock_instance(self, instance_id: str) -> Iterator[WorkflowInstance]:
        """Yield the instance while holding its exclusive lock."""

        with self._lock:
            instance = self._instances.get(instance_id)
            instance_lock = self._instance_locks.get(instance_id)
        if instance is None or instance_lock is None:
            raise NotFound("Instance not found.")
        with instance_lock:
            yield instance
