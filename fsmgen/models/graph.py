"""Raw graph description as supplied by an authoring tool.

Nothing here is validated beyond its shape; the model builder turns a
RawGraph into an FsmModel or reports the first structural defect.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from fsmgen.models.catalog import CapabilityCatalog, CapabilityInterface
from fsmgen.utils.logging import get_logger
from fsmgen.utils.result import Err, GraphLoadError, Ok, Result

logger = get_logger("models.graph")


def _name(value: Any, what: str) -> str:
    """Declared name as given; YAML 1.1 booleans (On, Off, Yes, No) are rejected."""
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {value!r}")
    return value


def _optional_name(value: Any, what: str) -> Optional[str]:
    return None if value is None else _name(value, what)


@dataclass(frozen=True)
class RawAction:
    """Unresolved reference to a capability interface method."""

    interface: Optional[str] = None
    method: Optional[str] = None

    @property
    def is_assigned(self) -> bool:
        """True when both the interface and the method are filled in."""
        return bool(self.interface) and bool(self.method)

    @classmethod
    def from_dict(cls, data: dict) -> RawAction:
        """Create from dictionary."""
        return cls(
            interface=_optional_name(data.get("interface"), "Action interface"),
            method=_optional_name(data.get("method"), "Action method"),
        )


@dataclass(frozen=True)
class RawInternalAction:
    """Event handler that runs an action without leaving the state."""

    event: Optional[str]
    action: RawAction = field(default_factory=RawAction)

    @classmethod
    def from_dict(cls, data: dict) -> RawInternalAction:
        """Create from dictionary."""
        return cls(
            event=_optional_name(data.get("event"), "Internal action event"),
            action=RawAction.from_dict(data),
        )


@dataclass(frozen=True)
class RawTransition:
    """Outgoing edge; duplicates are kept so the builder can reject them."""

    event: str
    target: str

    @classmethod
    def from_dict(cls, data: dict) -> RawTransition:
        """Create from dictionary."""
        return cls(
            event=_name(data["event"], "Transition event"),
            target=_name(data["target"], "Transition target"),
        )


@dataclass(frozen=True)
class RawState:
    """
    A state as authored.

    Attributes:
        name: Declared state name
        is_start: Whether the machine starts here
        on_enter: Enter actions in call order
        on_exit: Exit actions in call order
        transitions: Outgoing transitions in declared order
        internal_actions: Internal actions in declared order
        ignore: Events that are accepted and dropped in this state
    """

    name: str
    is_start: bool = False
    on_enter: tuple[RawAction, ...] = ()
    on_exit: tuple[RawAction, ...] = ()
    transitions: tuple[RawTransition, ...] = ()
    internal_actions: tuple[RawInternalAction, ...] = ()
    ignore: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> RawState:
        """Create from dictionary."""
        transitions = data.get("transitions") or []
        # {event: target} mappings are accepted as a shorthand
        if isinstance(transitions, dict):
            transitions = [
                {"event": event, "target": target}
                for event, target in transitions.items()
            ]

        return cls(
            name=_name(data["name"], "State name"),
            is_start=bool(data.get("start", data.get("is_start", False))),
            on_enter=tuple(RawAction.from_dict(a) for a in data.get("on_enter") or []),
            on_exit=tuple(RawAction.from_dict(a) for a in data.get("on_exit") or []),
            transitions=tuple(RawTransition.from_dict(t) for t in transitions),
            internal_actions=tuple(
                RawInternalAction.from_dict(a)
                for a in data.get("internal_actions") or []
            ),
            ignore=tuple(_name(e, "Ignored event") for e in data.get("ignore") or []),
        )


@dataclass(frozen=True)
class RawGraph:
    """
    Complete authored graph.

    Attributes:
        states: States in declaration order
        events: Declared event vocabulary beyond the transition events
        description: Free-form description carried into the output
        origin: Identity of the asset the graph came from
        origin_id: Stable id (e.g. GUID) of that asset
    """

    states: tuple[RawState, ...]
    events: tuple[str, ...] = ()
    description: Optional[str] = None
    origin: Optional[str] = None
    origin_id: Optional[str] = None

    def declared_events(self) -> set[str]:
        """Event vocabulary: explicit declarations plus every transition event."""
        declared = set(self.events)
        for state in self.states:
            declared.update(t.event for t in state.transitions)
        return declared

    @classmethod
    def from_dict(cls, data: dict) -> RawGraph:
        """Create from dictionary."""
        return cls(
            states=tuple(RawState.from_dict(s) for s in data.get("states") or []),
            events=tuple(_name(e, "Event") for e in data.get("events") or []),
            description=data.get("description"),
            origin=data.get("origin"),
            origin_id=data.get("origin_id"),
        )


@dataclass(frozen=True)
class GraphDocument:
    """A graph file's contents: the graph plus the interfaces it may use."""

    graph: RawGraph
    catalog: CapabilityCatalog
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Optional[Path] = None) -> GraphDocument:
        """Create from dictionary."""
        catalog = CapabilityCatalog.of(
            CapabilityInterface.from_dict(i) for i in data.get("interfaces") or []
        )
        return cls(graph=RawGraph.from_dict(data), catalog=catalog, path=path)


def load_graph(path: Path) -> Result[GraphDocument, GraphLoadError]:
    """
    Load a graph description from a YAML or JSON file.

    Args:
        path: Path to a .yaml, .yml or .json file

    Returns:
        Result with the parsed document or a load error
    """
    path = Path(path)

    if not path.exists():
        return Err(GraphLoadError(path=str(path), message="File not found"))

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        return Err(GraphLoadError(path=str(path), message="Malformed document", cause=e))
    except UnicodeDecodeError as e:
        return Err(GraphLoadError(path=str(path), message="File is not valid UTF-8", cause=e))
    except OSError as e:
        return Err(GraphLoadError(path=str(path), message="Unreadable file", cause=e))

    if not isinstance(data, dict):
        return Err(GraphLoadError(
            path=str(path),
            message="Top-level document must be a mapping",
        ))

    try:
        document = GraphDocument.from_dict(data, path=path)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        return Err(GraphLoadError(path=str(path), message="Invalid graph structure", cause=e))

    logger.debug(
        "graph_loaded",
        path=str(path),
        states=len(document.graph.states),
        interfaces=len(document.catalog),
    )
    return Ok(document)
