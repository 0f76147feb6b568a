"""Tests for FsmEngine specifics: dispatch table and context construction."""
from __future__ import annotations

import pytest

from fsmgen.builder import build_model_or_raise
from fsmgen.models import RawGraph
from fsmgen.runtime import FsmEngine
from fsmgen.runtime.engine import DispatchTable, EngineContext, Ignored, InternalAction, Transition

from helpers import CallLog


class TestDispatchTable:
    def test_resolutions(self, telephone_model) -> None:
        table = DispatchTable.from_model(telephone_model)

        assert table.resolve("OffHook", "CallDialed") == Transition(target="Ringing")
        assert table.resolve("OffHook", "HungUp") == Ignored()
        assert table.resolve("OffHook", "VolumeUp") is None

        internal = table.resolve("Connected", "VolumeUp")
        assert isinstance(internal, InternalAction)
        assert internal.action.display_name == "telephone.IAudioControl.VolumeUp()"

    def test_one_entry_per_handled_pair(self, telephone_model) -> None:
        # 4 transitions, 1 internal action, 2 ignores
        assert len(DispatchTable.from_model(telephone_model)) == 7

    def test_transition_wins_over_internal_action(self, catalog) -> None:
        model = build_model_or_raise(RawGraph.from_dict({
            "states": [
                {
                    "name": "A",
                    "start": True,
                    "transitions": {"Go": "B"},
                    "internal_actions": [
                        {"event": "Go", "interface": "telephone.IHaptics", "method": "Pulse()"},
                    ],
                    "ignore": ["Go"],
                },
                {"name": "B"},
            ],
        }), catalog)

        table = DispatchTable.from_model(model)

        assert table.resolve("A", "Go") == Transition(target="B")
        assert len(table) == 1

    def test_unknown_state_resolves_to_none(self, telephone_model) -> None:
        assert DispatchTable.from_model(telephone_model).resolve("Dialing", "HungUp") is None


class TestNewDefaultContext:
    def test_defaults_to_start_state(self, telephone_model) -> None:
        log = CallLog()
        context = FsmEngine(telephone_model).new_default_context(
            AudioControl=log.interface("AudioControl"),
            Haptics=log.interface("Haptics"),
            Telephone=log.interface("Telephone"),
        )

        assert isinstance(context, EngineContext)
        assert context.state == "OffHook"

    def test_missing_implementation(self, telephone_model) -> None:
        log = CallLog()

        with pytest.raises(TypeError, match="missing \\['Telephone'\\]"):
            FsmEngine(telephone_model).new_default_context(
                AudioControl=log.interface("AudioControl"),
                Haptics=log.interface("Haptics"),
            )

    def test_unexpected_implementation(self, telephone_model) -> None:
        log = CallLog()

        with pytest.raises(TypeError, match="unexpected \\['Radio'\\]"):
            FsmEngine(telephone_model).new_default_context(
                AudioControl=log.interface("AudioControl"),
                Haptics=log.interface("Haptics"),
                Telephone=log.interface("Telephone"),
                Radio=log.interface("Radio"),
            )

    def test_unknown_start_state(self, telephone_model) -> None:
        log = CallLog()

        with pytest.raises(KeyError):
            FsmEngine(telephone_model).new_default_context(
                start_state="Dialing",
                AudioControl=log.interface("AudioControl"),
                Haptics=log.interface("Haptics"),
                Telephone=log.interface("Telephone"),
            )


class TestEventNames:
    def test_accepts_objects_with_name(self, telephone_model) -> None:
        class Named:
            name = "CallDialed"

        log = CallLog()
        engine = FsmEngine(telephone_model)
        engine.bind(engine.new_default_context(
            AudioControl=log.interface("AudioControl"),
            Haptics=log.interface("Haptics"),
            Telephone=log.interface("Telephone"),
        ))

        engine.send_event(Named())

        assert engine.context.state == "Ringing"
        assert engine.is_firing is False
