"""Structural defects the model builder reports.

Every defect is fatal to the build. The builder returns the first one it
finds as an Err value; none are recoverable or retried.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BuildError:
    """Base for all build-time errors."""

    def __str__(self) -> str:
        return self.message

    @property
    def kind(self) -> str:
        """Error kind, e.g. "DuplicateState"."""
        return type(self).__name__

    @property
    def message(self) -> str:
        return self.kind


@dataclass(frozen=True)
class DuplicateState(BuildError):
    state: str

    @property
    def message(self) -> str:
        return f"Duplicate state name: {self.state}"


@dataclass(frozen=True)
class MissingTargetState(BuildError):
    event: str
    state: str
    target: str = ""

    @property
    def message(self) -> str:
        return (
            f"Missing to state '{self.target}' in transition: "
            f"{self.event} in state: {self.state}"
        )


@dataclass(frozen=True)
class SelfTransition(BuildError):
    state: str
    event: str

    @property
    def message(self) -> str:
        return f"Detected self transition in state: {self.state} for event: {self.event}"


@dataclass(frozen=True)
class DuplicateTransitionEvent(BuildError):
    state: str
    event: str

    @property
    def message(self) -> str:
        return f"Duplicate transition event: {self.event} in state: {self.state}"


@dataclass(frozen=True)
class UndeclaredInternalActionEvent(BuildError):
    state: str
    event: str

    @property
    def message(self) -> str:
        if not self.event:
            return f"Internal action in '{self.state}' has no event defined"
        return (
            f"Internal action in '{self.state}' has event '{self.event}' "
            "but no event by that name is defined"
        )


@dataclass(frozen=True)
class DuplicateInternalActionEvent(BuildError):
    state: str
    event: str

    @property
    def message(self) -> str:
        return f"Duplicate internal action event: {self.event} in state: {self.state}"


@dataclass(frozen=True)
class UndeclaredIgnoredEvent(BuildError):
    state: str
    event: str

    @property
    def message(self) -> str:
        return (
            f"State '{self.state}' ignores event '{self.event}' "
            "but no event by that name is defined"
        )


@dataclass(frozen=True)
class MissingActionTarget(BuildError):
    state: str
    label: str

    @property
    def message(self) -> str:
        return (
            f"State '{self.state}' has action '{self.label}' "
            "that is missing delegate or method"
        )


@dataclass(frozen=True)
class UnresolvedDelegate(BuildError):
    state: str
    label: str
    interface_name: str
    method_signature: str

    @property
    def message(self) -> str:
        return (
            f"State '{self.state}' has action '{self.label}' that references "
            f"unknown delegate '{self.interface_name}.{self.method_signature}'"
        )


@dataclass(frozen=True)
class MissingStartState(BuildError):
    @property
    def message(self) -> str:
        return "No state is marked as the start state"


@dataclass(frozen=True)
class MultipleStartStates(BuildError):
    states: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"More than one start state: {', '.join(self.states)}"


@dataclass(frozen=True)
class InvalidIdentifier(BuildError):
    kind_of_name: str
    name: str

    @property
    def message(self) -> str:
        return f"{self.kind_of_name.capitalize()} name '{self.name}' is not a valid identifier"


@dataclass(frozen=True)
class IdentifierCollision(BuildError):
    kind_of_name: str
    identifier: str
    names: tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"{self.kind_of_name.capitalize()} names {', '.join(repr(n) for n in self.names)} "
            f"all map to identifier '{self.identifier}'"
        )


class ModelBuildError(Exception):
    """Raised by build_model_or_raise when the graph is structurally unsound."""

    def __init__(self, error: BuildError) -> None:
        self.error = error
        super().__init__(str(error))
