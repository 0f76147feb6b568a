"""Base types shared by generated state machines and the generic engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from fsmgen.utils.logging import get_logger

logger = get_logger("runtime")

# Debug observer signatures: (fsm, state) and (fsm,)
BreakpointAction = Callable[[Any, Any], None]
BreakpointsResetAction = Callable[[Any], None]


class InvalidOperationError(RuntimeError):
    """Operation not allowed while events are being dispatched."""

    pass


class UnhandledEventError(RuntimeError):
    """Event has no transition, internal action or ignore entry in the current state."""

    def __init__(self, event: str, state: str) -> None:
        self.event = event
        self.state = state
        super().__init__(f"Unhandled event '{event}' in state '{state}'")


class FsmContext:
    """
    External state of a machine: the current state cell plus the
    capability interface implementations actions call into.

    Machines keep no state of their own between dispatches, so one machine
    can be rebound to different contexts one after another.
    """

    state: Any


class BaseFsm(ABC):
    """Public surface every state machine exposes to its embedder."""

    @property
    @abstractmethod
    def base_context(self) -> Optional[FsmContext]:
        """The currently bound context, if any."""

    @abstractmethod
    def bind(self, context: FsmContext) -> None:
        """Attach a context. Not allowed while events are firing."""

    @abstractmethod
    def send_event(self, event: Any) -> None:
        """Dispatch an event, or queue it if another event is in progress."""


class IntrospectionSupport(ABC):
    """State reflection by declared (human-readable) name."""

    @property
    @abstractmethod
    def state_name(self) -> Optional[str]:
        """Declared name of the current state, None when unbound."""

    @property
    @abstractmethod
    def all_states(self) -> list[str]:
        """Declared names of every state, in declaration order."""

    @abstractmethod
    def enum_state_from_string(self, state_name: str) -> Any:
        """Internal state identifier for a declared name."""

    @abstractmethod
    def state_from_enum_state(self, state: Any) -> str:
        """Declared name for an internal state identifier."""

    @property
    @abstractmethod
    def generated_from_id(self) -> Optional[str]:
        """Stable id of the asset the machine was generated from."""


class DebugSupport(ABC):
    """
    Enter-breakpoints with synchronous observer hooks.

    Hooks are plain lists of callables; append to subscribe.
    """

    on_breakpoint_set: list[BreakpointAction]
    on_breakpoint_hit: list[BreakpointAction]
    on_breakpoints_reset: list[BreakpointsResetAction]

    @abstractmethod
    def set_on_enter_breakpoint(self, state: Any) -> None:
        """Mark a state so entering it fires on_breakpoint_hit."""

    @abstractmethod
    def reset_breakpoints(self) -> None:
        """Clear every enter-breakpoint."""

    @property
    @abstractmethod
    def on_enter_breakpoint_count(self) -> int:
        """Number of states currently marked."""

    def _notify_breakpoint_set(self, state: Any) -> None:
        for hook in list(self.on_breakpoint_set):
            hook(self, state)

    def _notify_breakpoint_hit(self, state: Any) -> None:
        # Not a debugger pause; observers decide what a hit means
        logger.info(
            "breakpoint_hit",
            fsm=type(self).__name__,
            state=getattr(state, "name", state),
        )
        for hook in list(self.on_breakpoint_hit):
            hook(self, state)

    def _notify_breakpoints_reset(self) -> None:
        for hook in list(self.on_breakpoints_reset):
            hook(self)
