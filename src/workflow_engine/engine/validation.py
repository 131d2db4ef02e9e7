"""Structural validation of workflow definitions.

Checks run in a fixed order and ``validate_definition`` stops at the first
failure, so a definition with several problems always reports the same one:

1. state ids are unique
2. exactly one state is initial
3. every action's ``toState`` then ``fromStates`` reference existing states

Action id uniqueness, empty ``fromStates``, unreachable states and a disabled
initial state are all accepted here.

This module is pure: it never looks at or touches a store.
"""

from __future__ import annotations

from workflow_engine.engine.errors import DefinitionRejected, RejectionReason
from workflow_engine.engine.models import WorkflowDefinition


def _duplicate_state_ids(definition: WorkflowDefinition) -> DefinitionRejected | None:
    seen: set[str] = set()
    for state in definition.states:
        if state.id in seen:
            return DefinitionRejected(RejectionReason.DUPLICATE_STATE_ID, "Duplicate State IDs.")
        seen.add(state.id)
    return None


def _initial_state_count(definition: WorkflowDefinition) -> DefinitionRejected | None:
    initial = sum(1 for s in definition.states if s.is_initial)
    if initial != 1:
        return DefinitionRejected(
            RejectionReason.MISSING_OR_MULTIPLE_INITIAL_STATE,
            "Must have exactly one initial state.",
        )
    return None


def _action_references(definition: WorkflowDefinition) -> list[DefinitionRejected]:
    valid_ids = {s.id for s in definition.states}
    problems: list[DefinitionRejected] = []
    for action in definition.actions:
        if action.to_state not in valid_ids:
            problems.append(
                DefinitionRejected(
                    RejectionReason.INVALID_TO_STATE, f"Action {action.id} toState invalid."
                )
            )
        if not all(state_id in valid_ids for state_id in action.from_states):
            problems.append(
                DefinitionRejected(
                    RejectionReason.INVALID_FROM_STATE, f"Action {action.id} fromStates invalid."
                )
            )
    return problems


def definition_problems(definition: WorkflowDefinition) -> list[DefinitionRejected]:
    """Return every structural problem, in check order.

    Useful for diagnostics; only :func:`validate_definition` gates storage.
    """

    problems: list[DefinitionRejected] = []
    for check in (_duplicate_state_ids, _initial_state_count):
        problem = check(definition)
        if problem is not None:
            problems.append(problem)
    problems.extend(_action_references(definition))
    return problems


def validate_definition(definition: WorkflowDefinition) -> None:
    """Raise :class:`DefinitionRejected` for the first failing check."""

    problems = definition_problems(definition)
    if problems:
        raise problems[0]
