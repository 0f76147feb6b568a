"""Data models for fsmgen."""

from fsmgen.models.catalog import (
    CapabilityCatalog,
    CapabilityInterface,
    CapabilityMethod,
)
from fsmgen.models.fsm import (
    FsmAction,
    FsmEvent,
    FsmInternalAction,
    FsmModel,
    FsmState,
    FsmTransition,
)
from fsmgen.models.graph import (
    GraphDocument,
    RawAction,
    RawGraph,
    RawInternalAction,
    RawState,
    RawTransition,
    load_graph,
)

__all__ = [
    # Capability catalog
    "CapabilityCatalog",
    "CapabilityInterface",
    "CapabilityMethod",
    # Raw graph
    "RawAction",
    "RawInternalAction",
    "RawTransition",
    "RawState",
    "RawGraph",
    "GraphDocument",
    "load_graph",
    # Validated model
    "FsmEvent",
    "FsmAction",
    "FsmTransition",
    "FsmInternalAction",
    "FsmState",
    "FsmModel",
]
