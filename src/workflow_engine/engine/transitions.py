"""The instance state machine.

Each instance is a small deterministic automaton over its definition: states are
the enabled states, the alphabet is the enabled action ids, and
:func:`apply_action` is the transition function. Final states are absorbing.

Illegal transitions fail loudly with :class:`TransitionRejected` and leave the
instance untouched.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from workflow_engine.engine.errors import RejectionReason, TransitionRejected
from workflow_engine.engine.models import (
    ActionDef,
    ActionHistoryItem,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def initial_state(definition: WorkflowDefinition) -> State | None:
    """The state a new instance starts in, or None if it is missing or disabled."""

    for state in definition.states:
        if state.is_initial and state.enabled:
            return state
    return None


def create_instance(
    definition: WorkflowDefinition, *, instance_id: str | None = None
) -> WorkflowInstance:
    start = initial_state(definition)
    if start is None:
        raise TransitionRejected(
            RejectionReason.NO_ENABLED_INITIAL_STATE, "No enabled initial state."
        )
    return WorkflowInstance(
        id=instance_id or str(uuid.uuid4()),
        workflow_definition_id=definition.id,
        current_state=start.id,
    )


def _resolve_transition(
    definition: WorkflowDefinition, current_state_id: str, action_id: str
) -> tuple[ActionDef, State]:
    current = definition.find_state(current_state_id)
    if current is None:
        raise TransitionRejected(
            RejectionReason.CURRENT_STATE_UNKNOWN,
            f"Current state {current_state_id!r} is not part of the definition.",
        )
    if not current.enabled:
        raise TransitionRejected(
            RejectionReason.CURRENT_STATE_DISABLED,
            f"Current state {current_state_id!r} is disabled.",
        )
    if current.is_final:
        raise TransitionRejected(
            RejectionReason.INSTANCE_AT_FINAL_STATE, "Instance is at a final state."
        )

    action = definition.find_action(action_id)
    if action is None:
        raise TransitionRejected(RejectionReason.ACTION_NOT_FOUND, "Action not found.")
    if not action.enabled:
        raise TransitionRejected(RejectionReason.ACTION_DISABLED, "Action is disabled.")
    if current_state_id not in action.from_states:
        raise TransitionRejected(
            RejectionReason.ACTION_NOT_ALLOWED_FROM_CURRENT_STATE,
            "Action cannot be executed from current state.",
        )

    target = definition.find_state(action.to_state)
    if target is None or not target.enabled:
        raise TransitionRejected(
            RejectionReason.TARGET_STATE_DISABLED, "Target state is invalid or disabled."
        )
    return action, target


def apply_action(
    definition: WorkflowDefinition,
    instance: WorkflowInstance,
    action_id: str,
    *,
    now: datetime | None = None,
) -> WorkflowInstance:
    """Fire ``action_id`` on ``instance`` and return the (same, mutated) instance.

    Not idempotent: a second call is evaluated against the new current state.
    Callers are responsible for serializing calls per instance.
    """

    action, target = _resolve_transition(definition, instance.current_state, action_id)

    # Build the record before touching the instance so state and history
    # change together or not at all.
    item = ActionHistoryItem(
        action_id=action.id,
        timestamp=now or _utc_now(),
        from_state=instance.current_state,
        to_state=target.id,
    )
    instance.current_state = target.id
    instance.history.append(item)
    return instance


def available_actions(
    definition: WorkflowDefinition, instance: WorkflowInstance
) -> list[ActionDef]:
    """Actions :func:`apply_action` would currently accept, in definition order.

    Duplicate action ids are reported once, for the first match only, since that
    is the one ``apply_action`` resolves.
    """

    out: list[ActionDef] = []
    seen: set[str] = set()
    for action in definition.actions:
        if action.id in seen:
            continue
        seen.add(action.id)
        try:
            _resolve_transition(definition, instance.current_state, action.id)
        except TransitionRejected:
            continue
        out.append(action)
    return out
