"""Shared fixtures: a small telephone graph, call recording, bound machines."""
from __future__ import annotations

import pytest

from fsmgen.builder import build_model_or_raise
from fsmgen.models import CapabilityCatalog, FsmModel, RawGraph

from helpers import CallLog, Machine, make_machine, telephone_dict, telephone_interfaces


@pytest.fixture
def telephone_data() -> dict:
    return telephone_dict()


@pytest.fixture
def catalog() -> CapabilityCatalog:
    return CapabilityCatalog.of(telephone_interfaces())


@pytest.fixture
def telephone_graph(telephone_data: dict) -> RawGraph:
    return RawGraph.from_dict(telephone_data)


@pytest.fixture
def telephone_model(telephone_graph: RawGraph, catalog: CapabilityCatalog) -> FsmModel:
    return build_model_or_raise(telephone_graph, catalog)


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture(params=["generated", "engine"])
def machine(request: pytest.FixtureRequest, telephone_model: FsmModel, call_log: CallLog) -> Machine:
    """A bound telephone machine, once as emitted code and once on FsmEngine."""
    m = make_machine(telephone_model, request.param)
    m.fsm.bind(m.new_context(call_log))
    return m
