"""Model builder: raw graph validation and model assembly."""

from fsmgen.builder.builder import (
    ModelBuilder,
    build_model,
    build_model_or_raise,
)
from fsmgen.builder.errors import (
    BuildError,
    DuplicateInternalActionEvent,
    DuplicateState,
    DuplicateTransitionEvent,
    IdentifierCollision,
    InvalidIdentifier,
    MissingActionTarget,
    MissingStartState,
    MissingTargetState,
    ModelBuildError,
    MultipleStartStates,
    SelfTransition,
    UndeclaredIgnoredEvent,
    UndeclaredInternalActionEvent,
    UnresolvedDelegate,
)

__all__ = [
    # Builder
    "ModelBuilder",
    "build_model",
    "build_model_or_raise",
    # Errors
    "BuildError",
    "ModelBuildError",
    "DuplicateState",
    "MissingTargetState",
    "SelfTransition",
    "DuplicateTransitionEvent",
    "UndeclaredInternalActionEvent",
    "DuplicateInternalActionEvent",
    "UndeclaredIgnoredEvent",
    "UnresolvedDelegate",
    "MissingActionTarget",
    "MissingStartState",
    "MultipleStartStates",
    "InvalidIdentifier",
    "IdentifierCollision",
]
