"""Table-driven state machine that runs an FsmModel directly.

Instead of generating per-machine source, FsmEngine resolves every
(state, event) pair once into a DispatchTable and consults it at run time.
It honors the same execution contract as generated machines: run to
completion, FIFO queueing of re-entrant events, exit-then-enter ordering,
and transition > internal action > ignore > error resolution.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Optional, Union

from fsmgen.generator.naming import property_name
from fsmgen.models.fsm import FsmAction, FsmModel
from fsmgen.runtime.base import (
    BaseFsm,
    FsmContext,
    IntrospectionSupport,
    InvalidOperationError,
    UnhandledEventError,
)
from fsmgen.utils.logging import get_logger

logger = get_logger("runtime.engine")


@dataclass(frozen=True)
class Transition:
    """Leave the current state for target."""

    target: str


@dataclass(frozen=True)
class InternalAction:
    """Run action and stay in the current state."""

    action: FsmAction


@dataclass(frozen=True)
class Ignored:
    """Accept the event and do nothing."""


Resolution = Union[Transition, InternalAction, Ignored]


class DispatchTable:
    """Mapping of (state, event) to how the event is handled there."""

    def __init__(self, entries: dict[tuple[str, str], Resolution]) -> None:
        self._entries = dict(entries)

    @classmethod
    def from_model(cls, model: FsmModel) -> DispatchTable:
        """
        Resolve every (state, event) pair of the model.

        A transition wins over an internal action, which wins over an ignore.
        Pairs with none of the three are left out.
        """
        entries: dict[tuple[str, str], Resolution] = {}
        for state in model.states:
            ignored = {event.name for event in state.ignored}
            for event in model.events:
                transition = state.transition_for(event.name)
                internal = state.internal_action_for(event.name)
                if transition is not None:
                    entries[(state.name, event.name)] = Transition(target=transition.target)
                elif internal is not None:
                    entries[(state.name, event.name)] = InternalAction(action=internal.action)
                elif event.name in ignored:
                    entries[(state.name, event.name)] = Ignored()
        return cls(entries)

    def resolve(self, state: str, event: str) -> Optional[Resolution]:
        """How event is handled in state, or None if it is not."""
        return self._entries.get((state, event))

    def __len__(self) -> int:
        return len(self._entries)


class EngineContext(FsmContext):
    """Default context for FsmEngine: a state name plus capability attributes."""

    def __init__(self, state: str, **capabilities: Any) -> None:
        self.state = state
        for name, implementation in capabilities.items():
            setattr(self, name, implementation)


class FsmEngine(BaseFsm, IntrospectionSupport):
    """
    Generic run-to-completion machine over an FsmModel.

    States and events are addressed by their declared names. Capability
    interfaces are looked up on the bound context by property name
    (e.g. ``context.AudioControl``).
    """

    def __init__(self, model: FsmModel) -> None:
        self.model = model
        self.table = DispatchTable.from_model(model)
        self._states = {state.name: state for state in model.states}
        self._event_queue: deque[str] = deque()
        self._is_firing = False
        self._context: Optional[FsmContext] = None

    @property
    def context(self) -> Optional[FsmContext]:
        return self._context

    @property
    def base_context(self) -> Optional[FsmContext]:
        return self._context

    @property
    def is_firing(self) -> bool:
        return self._is_firing

    def new_default_context(
        self,
        start_state: Optional[str] = None,
        **implementations: Any,
    ) -> EngineContext:
        """
        Build a context holding one implementation per required interface.

        Args:
            start_state: Declared name to start in (default: the model's start state)
            **implementations: Implementations keyed by interface property name

        Raises:
            TypeError: If an implementation is missing or unexpected
            KeyError: If start_state is not a declared state
        """
        expected = [property_name(iface) for iface in self.model.interfaces]
        missing = [name for name in expected if name not in implementations]
        unexpected = sorted(set(implementations) - set(expected))
        if missing or unexpected:
            raise TypeError(
                f"Context needs implementations for {expected}; "
                f"missing {missing}, unexpected {unexpected}"
            )

        state = start_state if start_state is not None else self.model.start_state.name
        if state not in self._states:
            raise KeyError(state)

        return EngineContext(state, **{name: implementations[name] for name in expected})

    def bind(self, context: FsmContext) -> None:
        """Attach a context. The engine holds no other state between events."""
        if self._is_firing:
            raise InvalidOperationError(
                "Cannot call FsmEngine.bind() while events are in-progress"
            )
        self._context = context

    def send_event(self, event: Any) -> None:
        """
        Dispatch event, draining anything queued by its actions.

        Called from inside an action, the event is queued and runs after the
        current dispatch finishes.
        """
        name = getattr(event, "name", event)

        if self._is_firing:
            self._event_queue.append(name)
            return

        try:
            self._is_firing = True

            self._single_send_event(name)

            while self._event_queue:
                self._single_send_event(self._event_queue.popleft())
        finally:
            self._is_firing = False
            self._event_queue.clear()

    def _single_send_event(self, event: str) -> None:
        from_state = self._context.state
        resolution = self.table.resolve(from_state, event)

        if isinstance(resolution, Transition):
            if self._transition_to(resolution.target, from_state):
                self._switch_state(from_state, resolution.target)
        elif isinstance(resolution, InternalAction):
            self._invoke(resolution.action)
        elif isinstance(resolution, Ignored):
            logger.debug("event_ignored", state=from_state, event_name=event)
        else:
            raise UnhandledEventError(event, from_state)

    def _transition_to(self, target: str, source: str) -> bool:
        # Guard hook; transitions are unconditional for now
        return True

    def _switch_state(self, source: str, target: str) -> None:
        for action in self._states[source].on_exit:
            self._invoke(action)
        self._context.state = target
        for action in self._states[target].on_enter:
            self._invoke(action)

    def _invoke(self, action: FsmAction) -> None:
        implementation = getattr(self._context, property_name(action.interface))
        getattr(implementation, action.method.name)()

    @property
    def state_name(self) -> Optional[str]:
        return self._context.state if self._context is not None else None

    @property
    def all_states(self) -> list[str]:
        return [state.name for state in self.model.states]

    def enum_state_from_string(self, state_name: str) -> str:
        if state_name not in self._states:
            raise KeyError(state_name)
        return state_name

    def state_from_enum_state(self, state: str) -> str:
        if state not in self._states:
            raise KeyError(state)
        return state

    @property
    def generated_from_id(self) -> Optional[str]:
        return self.model.origin_id
