"""Workflow service: the narrow interface the REST server and CLI call into.

Wires the store, the definition validator and the transition engine together.
Every failure surfaces as a :class:`~workflow_engine.engine.errors.WorkflowError`;
translating it to a transport response is the caller's job.
"""

from __future__ import annotations

import logging

from workflow_engine.engine.errors import (
    DefinitionAlreadyExists,
    DefinitionRejected,
    TransitionRejected,
)
from workflow_engine.engine.models import ActionDef, WorkflowDefinition, WorkflowInstance
from workflow_engine.engine.store import WorkflowStore
from workflow_engine.engine.transitions import apply_action, available_actions, create_instance
from workflow_engine.engine.validation import validate_definition

logger = logging.getLogger(__name__)


class WorkflowService:
    """Instances handed out by the service are copies; only the store holds live ones."""

    def __init__(self, store: WorkflowStore | None = None) -> None:
        self._store = store if store is not None else WorkflowStore()

    @property
    def store(self) -> WorkflowStore:
        return self._store

    def submit_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """Validate and store a new definition.

        The id collision check comes first, so resubmitting a stored id is
        reported as a collision even when the new payload is also invalid.
        """

        if self._store.has_definition(definition.id):
            raise DefinitionAlreadyExists(definition.id)

        try:
            validate_definition(definition)
        except DefinitionRejected as e:
            logger.warning(
                "Workflow definition rejected",
                extra={"definition_id": definition.id, "code": e.code, "reason": e.message},
            )
            raise

        stored = self._store.add_definition(definition)
        logger.info(
            "Workflow definition stored",
            extra={
                "definition_id": stored.id,
                "states": len(stored.states),
                "actions": len(stored.actions),
            },
        )
        return stored

    def get_definition(self, definition_id: str) -> WorkflowDefinition:
        return self._store.get_definition(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self._store.list_definitions()

    def start_instance(self, definition_id: str) -> WorkflowInstance:
        definition = self._store.get_definition(definition_id)
        try:
            instance = create_instance(definition)
        except TransitionRejected as e:
            logger.warning(
                "Instance not started",
                extra={"definition_id": definition_id, "code": e.code},
            )
            raise
        snapshot = instance.model_copy(deep=True)
        self._store.add_instance(instance)
        logger.info(
            "Instance started",
            extra={
                "instance_id": instance.id,
                "definition_id": definition_id,
                "state": snapshot.current_state,
            },
        )
        return snapshot

    def get_instance(self, instance_id: str) -> WorkflowInstance:
        """A consistent copy of the instance, taken under its lock."""

        with self._store.lock_instance(instance_id) as instance:
            return instance.model_copy(deep=True)

    def list_instances(self) -> list[WorkflowInstance]:
        return [self.get_instance(instance.id) for instance in self._store.list_instances()]

    def execute_action(self, instance_id: str, action_id: str) -> WorkflowInstance:
        """Advance an instance by one action, serialized per instance.

        Returns a copy of the instance as it stood right after the transition.
        """

        with self._store.lock_instance(instance_id) as instance:
            definition = self._store.get_definition(instance.workflow_definition_id)
            from_state = instance.current_state
            try:
                apply_action(definition, instance, action_id)
            except TransitionRejected as e:
                logger.warning(
                    "Action rejected",
                    extra={
                        "instance_id": instance_id,
                        "action_id": action_id,
                        "state": from_state,
                        "code": e.code,
                    },
                )
                raise
            logger.info(
                "Action applied",
                extra={
                    "instance_id": instance_id,
                    "action_id": action_id,
                    "from_state": from_state,
                    "to_state": instance.current_state,
                },
            )
            return instance.model_copy(deep=True)

    def available_actions(self, instance_id: str) -> list[ActionDef]:
        with self._store.lock_instance(instance_id) as instance:
            definition = self._store.get_definition(instance.workflow_definition_id)
            return available_actions(definition, instance)
