"""Tests for graph documents, the capability catalog and file loading."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from fsmgen.builder import build_model
from fsmgen.models import (
    CapabilityCatalog,
    CapabilityInterface,
    CapabilityMethod,
    RawGraph,
    RawState,
    load_graph,
)

from helpers import telephone_dict, telephone_interfaces


def _document() -> dict:
    data = telephone_dict()
    data["interfaces"] = [i.to_dict() for i in telephone_interfaces()]
    return data


class TestRawGraph:
    def test_transition_shorthand(self) -> None:
        state = RawState.from_dict({"name": "A", "transitions": {"Go": "B", "Stop": "C"}})

        assert [(t.event, t.target) for t in state.transitions] == [("Go", "B"), ("Stop", "C")]

    def test_is_start_alias(self) -> None:
        assert RawState.from_dict({"name": "A", "is_start": True}).is_start

    def test_declared_events_include_transition_events(self) -> None:
        graph = RawGraph.from_dict(telephone_dict())

        assert graph.declared_events() == {"VolumeUp", "CallDialed", "CallConnected", "HungUp"}

    def test_unassigned_action(self) -> None:
        state = RawState.from_dict({"name": "A", "on_enter": [{"interface": "x.IFoo"}]})

        assert not state.on_enter[0].is_assigned

    @pytest.mark.parametrize(
        "data",
        [
            {"name": True},
            {"name": "A", "transitions": {True: "B"}},
            {"name": "A", "ignore": [False]},
            {"name": "A", "internal_actions": [{"event": True, "interface": "x.IFoo"}]},
        ],
    )
    def test_non_string_names_rejected(self, data: dict) -> None:
        with pytest.raises(TypeError, match="must be a string"):
            RawState.from_dict(data)


class TestCatalog:
    def test_duplicate_interface_rejected(self) -> None:
        iface = CapabilityInterface.from_dict({"name": "a.IFoo", "methods": ["Run"]})

        with pytest.raises(ValueError, match="Duplicate capability interface"):
            CapabilityCatalog.of([iface, iface])

    @pytest.mark.parametrize("name", ["", "a..IFoo", "a.class", "1Foo"])
    def test_invalid_interface_name(self, name: str) -> None:
        with pytest.raises(ValueError):
            CapabilityInterface(qualified_name=name)

    def test_invalid_method_name(self) -> None:
        with pytest.raises(ValueError):
            CapabilityMethod(name="do it")

    def test_explicit_signature(self) -> None:
        iface = CapabilityInterface.from_dict({
            "name": "a.IFoo",
            "methods": [{"name": "Run", "signature": "Run(void)"}],
        })

        assert iface.find_method("Run(void)").name == "Run"
        assert iface.find_method("Run").signature == "Run(void)"
        assert iface.find_method("Run()") is None

    def test_find(self) -> None:
        catalog = CapabilityCatalog.of(telephone_interfaces())

        assert catalog.find("telephone.IHaptics").short_name == "IHaptics"
        assert catalog.find("telephone.IRadio") is None
        assert len(catalog) == 3


class TestLoadGraph:
    def test_yaml(self, tmp_path) -> None:
        path = tmp_path / "telephone.yaml"
        path.write_text(yaml.safe_dump(_document()), encoding="utf-8")

        result = load_graph(path)

        assert result.is_ok()
        document = result.unwrap()
        assert [s.name for s in document.graph.states] == ["OffHook", "Ringing", "Connected"]
        assert len(document.catalog) == 3
        assert document.path == path

    def test_json(self, tmp_path) -> None:
        path = tmp_path / "telephone.json"
        path.write_text(json.dumps(_document()), encoding="utf-8")

        document = load_graph(path).unwrap()

        assert document.graph.origin_id == "b7c1d2e3"

    def test_missing_file(self, tmp_path) -> None:
        error = load_graph(tmp_path / "missing.yaml").unwrap_err()

        assert error.message == "File not found"

    def test_malformed_yaml(self, tmp_path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("states: [unclosed", encoding="utf-8")

        error = load_graph(path).unwrap_err()

        assert error.message == "Malformed document"
        assert error.cause is not None

    def test_not_utf8(self, tmp_path) -> None:
        path = tmp_path / "latin1.yaml"
        path.write_bytes(b"states:\n  - name: Caf\xe9\n")

        error = load_graph(path).unwrap_err()

        assert error.message == "File is not valid UTF-8"
        assert isinstance(error.cause, UnicodeDecodeError)

    @pytest.mark.parametrize("value", ["On", "Off", "Yes", "No"])
    def test_yaml_boolean_event_names_rejected(self, tmp_path, value: str) -> None:
        path = tmp_path / "switch.yaml"
        path.write_text(
            f"states:\n  - name: A\n    start: true\n    transitions:\n      {value}: B\n  - name: B\n",
            encoding="utf-8",
        )

        error = load_graph(path).unwrap_err()

        assert error.message == "Invalid graph structure"
        assert "Transition event must be a string" in str(error.cause)

    def test_quoted_yaml_boolean_is_a_name(self, tmp_path) -> None:
        path = tmp_path / "switch.yaml"
        path.write_text(
            "states:\n  - name: A\n    start: true\n    transitions:\n      'On': B\n  - name: B\n",
            encoding="utf-8",
        )

        graph = load_graph(path).unwrap().graph

        assert graph.states[0].transitions[0].event == "On"

    def test_top_level_must_be_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        assert load_graph(path).unwrap_err().message == "Top-level document must be a mapping"

    def test_state_without_name(self, tmp_path) -> None:
        path = tmp_path / "nameless.yaml"
        path.write_text(yaml.safe_dump({"states": [{"start": True}]}), encoding="utf-8")

        error = load_graph(path).unwrap_err()

        assert error.message == "Invalid graph structure"
        assert str(error).startswith(f"Cannot load graph '{path}'")

    def test_bundled_example_builds(self) -> None:
        path = Path(__file__).parent.parent / "examples" / "telephone.yaml"
        document = load_graph(path).unwrap()
        model = build_model(document.graph, document.catalog).unwrap()

        assert model.start_state.name == "Off Hook"
        assert [s.name for s in model.states] == ["Off Hook", "Ringing", "Connected", "On Hold"]
