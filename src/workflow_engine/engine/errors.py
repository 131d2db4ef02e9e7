"""Error taxonomy for the workflow core.

Every failure is a deterministic rejection: nothing here is transient or
retryable. Each error carries a stable ``code`` so the boundary layer (REST,
CLI) can report it without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    # Definition validator
    DUPLICATE_STATE_ID = "DuplicateStateId"
    MISSING_OR_MULTIPLE_INITIAL_STATE = "MissingOrMultipleInitialState"
    INVALID_TO_STATE = "InvalidToState"
    INVALID_FROM_STATE = "InvalidFromState"

    # Transition engine
    NO_ENABLED_INITIAL_STATE = "NoEnabledInitialState"
    CURRENT_STATE_UNKNOWN = "CurrentStateUnknown"
    CURRENT_STATE_DISABLED = "CurrentStateDisabled"
    INSTANCE_AT_FINAL_STATE = "InstanceAtFinalState"
    ACTION_NOT_FOUND = "ActionNotFound"
    ACTION_DISABLED = "ActionDisabled"
    ACTION_NOT_ALLOWED_FROM_CURRENT_STATE = "ActionNotAllowedFromCurrentState"
    TARGET_STATE_DISABLED = "TargetStateDisabled"


class WorkflowError(Exception):
    """Base class for all workflow core errors."""

    code: str = "WorkflowError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(WorkflowError):
    code = "NotFound"


class DefinitionAlreadyExists(WorkflowError):
    code = "DefinitionAlreadyExists"

    def __init__(self, definition_id: str) -> None:
        super().__init__("WorkflowDefinition with same Id exists.")
        self.definition_id = definition_id


class _Rejected(WorkflowError):
    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.code = reason.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.reason.value}: {self.message!r})"


class DefinitionRejected(_Rejected):
    """Raised when a candidate definition violates a structural invariant."""


class TransitionRejected(_Rejected):
    """Raised when an instance cannot be created or advanced.

    The instance is always left unchanged.
    """
