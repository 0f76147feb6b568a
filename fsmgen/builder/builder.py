"""Model builder: validates a raw graph and assembles the immutable model."""

from __future__ import annotations

import keyword
from collections import defaultdict
from typing import Iterable

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
from fsmgen.generator.naming import enum_member, is_valid_member, parameter_name, property_name
from fsmgen.models.catalog import CapabilityCatalog, CapabilityInterface
from fsmgen.models.fsm import (
    FsmAction,
    FsmEvent,
    FsmInternalAction,
    FsmModel,
    FsmState,
    FsmTransition,
)
from fsmgen.models.graph import RawAction, RawGraph, RawState
from fsmgen.utils.logging import get_logger
from fsmgen.utils.result import Err, Ok, Result

logger = get_logger("builder")

# Names the generated default-context factory already uses for itself
RESERVED_PARAMETERS = frozenset({"cls", "start_state"})


class ModelBuilder:
    """
    Turns a RawGraph into an FsmModel in a single pass.

    Validation is fail-fast: the first structural defect found is returned
    and no partial model is ever produced.
    """

    def __init__(self, catalog: CapabilityCatalog, verbose: bool = False) -> None:
        """
        Initialize the builder.

        Args:
            catalog: Capability interfaces that actions may reference
            verbose: Log every resolved delegate at debug level
        """
        self.catalog = catalog
        self.verbose = verbose

    def build(self, graph: RawGraph) -> Result[FsmModel, BuildError]:
        """
        Validate the graph and assemble the model.

        Args:
            graph: Raw graph from the authoring tool

        Returns:
            Ok(FsmModel) or Err with the first BuildError encountered
        """
        # Register every state up front so transitions can point forward
        lookup: dict[str, RawState] = {}
        for raw in graph.states:
            if raw.name in lookup:
                return self._fail(DuplicateState(state=raw.name))
            lookup[raw.name] = raw

        declared = graph.declared_events()

        states: list[FsmState] = []
        for raw in graph.states:
            result = self._build_state(raw, lookup, declared)
            if result.is_err():
                return self._fail(result.unwrap_err())
            states.append(result.unwrap())

        start_check = self._check_start_state(states)
        if start_check.is_err():
            return self._fail(start_check.unwrap_err())

        event_names = sorted(
            {t.event.name for s in states for t in s.transitions}
            | {i.event.name for s in states for i in s.internal_actions}
        )
        events = tuple(FsmEvent(name=name) for name in event_names)

        # Ignoring an event nothing else references can never fire
        referenced = set(event_names)
        states = [self._drop_unreachable_ignores(s, referenced) for s in states]

        required: dict[str, CapabilityInterface] = {}
        for state in states:
            for action in (
                *state.on_enter,
                *(i.action for i in state.internal_actions),
                *state.on_exit,
            ):
                required[action.interface.qualified_name] = action.interface
        interfaces = tuple(required[name] for name in sorted(required))

        naming_check = self._check_identifiers(states, events, interfaces)
        if naming_check.is_err():
            return self._fail(naming_check.unwrap_err())

        model = FsmModel(
            states=tuple(states),
            events=events,
            interfaces=interfaces,
            description=graph.description,
            origin=graph.origin,
            origin_id=graph.origin_id,
        )

        logger.info(
            "model_built",
            states=len(model.states),
            events=len(model.events),
            interfaces=len(model.interfaces),
            start_state=model.start_state.name,
        )
        return Ok(model)

    def _fail(self, error: BuildError) -> Result[FsmModel, BuildError]:
        logger.error("model_build_failed", kind=error.kind, message=error.message)
        return Err(error)

    def _build_state(
        self,
        raw: RawState,
        lookup: dict[str, RawState],
        declared: set[str],
    ) -> Result[FsmState, BuildError]:
        """Validate one state's transitions, actions and ignores."""
        transitions: list[FsmTransition] = []
        seen_events: set[str] = set()
        for raw_transition in raw.transitions:
            event = raw_transition.event
            if raw_transition.target not in lookup:
                return Err(MissingTargetState(
                    event=event,
                    state=raw.name,
                    target=raw_transition.target,
                ))
            if raw_transition.target == raw.name:
                return Err(SelfTransition(state=raw.name, event=event))
            if event in seen_events:
                return Err(DuplicateTransitionEvent(state=raw.name, event=event))
            seen_events.add(event)
            transitions.append(FsmTransition(
                event=FsmEvent(name=event),
                source=raw.name,
                target=raw_transition.target,
            ))

        internal_actions: list[FsmInternalAction] = []
        internal_events: set[str] = set()
        for raw_internal in raw.internal_actions:
            event = raw_internal.event or ""
            if not event or event not in declared:
                return Err(UndeclaredInternalActionEvent(state=raw.name, event=event))
            if event in internal_events:
                return Err(DuplicateInternalActionEvent(state=raw.name, event=event))
            internal_events.add(event)

            resolved = self._resolve(raw.name, raw_internal.action, f"{event} (internal action)")
            if resolved.is_err():
                return Err(resolved.unwrap_err())

            if event in seen_events:
                # Allowed; the transition takes priority at run time
                logger.warning(
                    "internal_action_shadowed",
                    state=raw.name,
                    event_name=event,
                )
            internal_actions.append(FsmInternalAction(
                event=FsmEvent(name=event),
                action=resolved.unwrap(),
            ))

        ignored: list[FsmEvent] = []
        for event in raw.ignore:
            if event not in declared:
                return Err(UndeclaredIgnoredEvent(state=raw.name, event=event))
            if all(e.name != event for e in ignored):
                ignored.append(FsmEvent(name=event))

        on_enter = self._resolve_all(raw.name, raw.on_enter, "OnEnter")
        if on_enter.is_err():
            return Err(on_enter.unwrap_err())

        on_exit = self._resolve_all(raw.name, raw.on_exit, "OnExit")
        if on_exit.is_err():
            return Err(on_exit.unwrap_err())

        return Ok(FsmState(
            name=raw.name,
            is_start=raw.is_start,
            on_enter=tuple(on_enter.unwrap()),
            on_exit=tuple(on_exit.unwrap()),
            transitions=tuple(transitions),
            internal_actions=tuple(internal_actions),
            ignored=tuple(ignored),
        ))

    def _resolve_all(
        self,
        state: str,
        actions: Iterable[RawAction],
        label: str,
    ) -> Result[list[FsmAction], BuildError]:
        resolved: list[FsmAction] = []
        for action in actions:
            result = self._resolve(state, action, label)
            if result.is_err():
                return Err(result.unwrap_err())
            resolved.append(result.unwrap())
        return Ok(resolved)

    def _resolve(
        self,
        state: str,
        action: RawAction,
        label: str,
    ) -> Result[FsmAction, BuildError]:
        """Resolve an action reference against the catalog."""
        if not action.is_assigned:
            return Err(MissingActionTarget(state=state, label=label))

        unresolved = UnresolvedDelegate(
            state=state,
            label=label,
            interface_name=action.interface,
            method_signature=action.method,
        )

        iface = self.catalog.find(action.interface)
        if iface is None:
            return Err(unresolved)

        method = iface.find_method(action.method)
        if method is None:
            return Err(unresolved)

        resolved = FsmAction(interface=iface, method=method)
        if self.verbose:
            logger.debug(
                "delegate_resolved",
                state=state,
                label=label,
                delegate=resolved.display_name,
            )
        return Ok(resolved)

    def _check_start_state(self, states: list[FsmState]) -> Result[None, BuildError]:
        starts = tuple(s.name for s in states if s.is_start)
        if not starts:
            return Err(MissingStartState())
        if len(starts) > 1:
            return Err(MultipleStartStates(states=starts))
        return Ok(None)

    def _drop_unreachable_ignores(self, state: FsmState, referenced: set[str]) -> FsmState:
        kept = tuple(e for e in state.ignored if e.name in referenced)
        if len(kept) == len(state.ignored):
            return state
        logger.debug(
            "unreachable_ignores_dropped",
            state=state.name,
            events=[e.name for e in state.ignored if e.name not in referenced],
        )
        return FsmState(
            name=state.name,
            is_start=state.is_start,
            on_enter=state.on_enter,
            on_exit=state.on_exit,
            transitions=state.transitions,
            internal_actions=state.internal_actions,
            ignored=kept,
        )

    def _check_identifiers(
        self,
        states: list[FsmState],
        events: tuple[FsmEvent, ...],
        interfaces: tuple[CapabilityInterface, ...],
    ) -> Result[None, BuildError]:
        """Every generated identifier must be valid and unambiguous."""
        for kind, names in (
            ("state", [s.name for s in states]),
            ("event", [e.name for e in events]),
        ):
            for name in names:
                if not is_valid_member(enum_member(name)):
                    return Err(InvalidIdentifier(kind_of_name=kind, name=name))
            collision = _find_collision(kind, [(n, enum_member(n)) for n in names])
            if collision is not None:
                return Err(collision)

        for iface in interfaces:
            parameter = parameter_name(iface)
            if (
                parameter in RESERVED_PARAMETERS
                or keyword.iskeyword(parameter)
                or keyword.iskeyword(property_name(iface))
            ):
                return Err(InvalidIdentifier(kind_of_name="interface", name=iface.qualified_name))

        # TODO: qualify colliding interface names instead of rejecting them
        collision = _find_collision(
            "interface",
            [(i.qualified_name, property_name(i)) for i in interfaces],
        )
        if collision is not None:
            return Err(collision)

        return Ok(None)


def _find_collision(
    kind: str,
    named: list[tuple[str, str]],
) -> IdentifierCollision | None:
    """First identifier shared by two or more (name, identifier) pairs."""
    groups: dict[str, list[str]] = defaultdict(list)
    for name, identifier in named:
        groups[identifier].append(name)
    for identifier, group in groups.items():
        if len(group) > 1:
            return IdentifierCollision(
                kind_of_name=kind,
                identifier=identifier,
                names=tuple(group),
            )
    return None


def build_model(
    graph: RawGraph,
    catalog: CapabilityCatalog,
    verbose: bool = False,
) -> Result[FsmModel, BuildError]:
    """
    Build a model from a raw graph.

    Args:
        graph: Raw graph from the authoring tool
        catalog: Capability interfaces available to actions
        verbose: Log every resolved delegate

    Returns:
        Ok(FsmModel) or Err(BuildError)
    """
    return ModelBuilder(catalog, verbose=verbose).build(graph)


def build_model_or_raise(
    graph: RawGraph,
    catalog: CapabilityCatalog,
    verbose: bool = False,
) -> FsmModel:
    """Build a model, raising ModelBuildError on the first defect."""
    result = build_model(graph, catalog, verbose=verbose)
    if result.is_err():
        raise ModelBuildError(result.unwrap_err())
    return result.unwrap()
