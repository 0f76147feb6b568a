"""Validated, immutable FSM model produced by the model builder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fsmgen.models.catalog import CapabilityInterface, CapabilityMethod


@dataclass(frozen=True)
class FsmEvent:
    """Named symbol that triggers transitions and internal actions."""

    name: str


@dataclass(frozen=True)
class FsmAction:
    """A resolved (interface, method) pair."""

    interface: CapabilityInterface
    method: CapabilityMethod

    @property
    def display_name(self) -> str:
        """Human-readable "<interface>.<signature>" label."""
        return f"{self.interface.qualified_name}.{self.method.signature}"


@dataclass(frozen=True)
class FsmTransition:
    """Edge from one state to another on an event."""

    event: FsmEvent
    source: str
    target: str


@dataclass(frozen=True)
class FsmInternalAction:
    """Event handler that runs an action and keeps the current state."""

    event: FsmEvent
    action: FsmAction


@dataclass(frozen=True)
class FsmState:
    """
    A validated state.

    Attributes:
        name: Declared state name
        is_start: Whether the machine starts here
        on_enter: Enter actions in call order
        on_exit: Exit actions in call order
        transitions: Outgoing transitions, at most one per event
        internal_actions: Internal actions, at most one per event
        ignored: Events accepted and dropped in this state
    """

    name: str
    is_start: bool
    on_enter: tuple[FsmAction, ...] = ()
    on_exit: tuple[FsmAction, ...] = ()
    transitions: tuple[FsmTransition, ...] = ()
    internal_actions: tuple[FsmInternalAction, ...] = ()
    ignored: tuple[FsmEvent, ...] = ()

    def transition_for(self, event: str) -> Optional[FsmTransition]:
        """Outgoing transition on event, if any."""
        for transition in self.transitions:
            if transition.event.name == event:
                return transition
        return None

    def internal_action_for(self, event: str) -> Optional[FsmInternalAction]:
        """Internal action on event, if any."""
        for action in self.internal_actions:
            if action.event.name == event:
                return action
        return None


@dataclass(frozen=True)
class FsmModel:
    """
    The complete validated description.

    Attributes:
        states: States in declaration order (becomes enum order)
        events: All referenced events, sorted by name
        interfaces: Required capability interfaces, sorted by qualified name
        description: Optional provenance description
        origin: Optional identity of the source asset
        origin_id: Optional stable id of the source asset
    """

    states: tuple[FsmState, ...]
    events: tuple[FsmEvent, ...]
    interfaces: tuple[CapabilityInterface, ...]
    description: Optional[str] = None
    origin: Optional[str] = None
    origin_id: Optional[str] = None

    @property
    def start_state(self) -> FsmState:
        """The single state marked as start."""
        for state in self.states:
            if state.is_start:
                return state
        raise LookupError("Model has no start state")

    def get_state(self, name: str) -> FsmState:
        """Look up a state by declared name."""
        for state in self.states:
            if state.name == name:
                return state
        raise KeyError(name)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "description": self.description,
            "origin": self.origin,
            "origin_id": self.origin_id,
            "interfaces": [i.to_dict() for i in self.interfaces],
            "events": [e.name for e in self.events],
            "states": [
                {
                    "name": s.name,
                    "start": s.is_start,
                    "on_enter": [a.display_name for a in s.on_enter],
                    "on_exit": [a.display_name for a in s.on_exit],
                    "transitions": {t.event.name: t.target for t in s.transitions},
                    "internal_actions": {
                        i.event.name: i.action.display_name
                        for i in s.internal_actions
                    },
                    "ignore": [e.name for e in s.ignored],
                }
                for s in self.states
            ],
        }
