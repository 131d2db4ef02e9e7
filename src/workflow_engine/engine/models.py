"""Workflow domain models.

Definitions (and their states/actions) are frozen with tuple-valued collections:
once a definition is stored nothing can change it. Instances are the only mutable
entity, and only the transition engine mutates them.

Wire shape is camelCase (``isInitial``, ``fromStates``...); snake_case is accepted
on input as well.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class CamelModel(BaseModel):
    """Base model with camelCase JSON serialization."""

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class State(FrozenCamelModel):
    """A node of the workflow graph an instance can occupy."""

    id: str
    name: str = ""
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True
    description: str | None = None


class ActionDef(FrozenCamelModel):
    """A directed transition from one or more source states to a single target."""

    id: str
    name: str = ""
    enabled: bool = True
    from_states: tuple[str, ...] = Field(default_factory=tuple)
    to_state: str
    description: str | None = None


class WorkflowDefinition(FrozenCamelModel):
    id: str
    name: str = ""
    states: tuple[State, ...] = Field(default_factory=tuple)
    actions: tuple[ActionDef, ...] = Field(default_factory=tuple)

    def find_state(self, state_id: str) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: str) -> ActionDef | None:
        # Action ids are not required to be unique; first match wins.
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


class ActionHistoryItem(FrozenCamelModel):
    """Audit record of one successful transition."""

    action_id: str
    timestamp: datetime
    from_state: str
    to_state: str


class WorkflowInstance(CamelModel):
    id: str
    workflow_definition_id: str
    current_state: str
    history: list[ActionHistoryItem] = Field(default_factory=list)
