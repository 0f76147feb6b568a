"""Test helpers: a small telephone graph, call recording, machine loading."""
from __future__ import annotations

import sys
import types
from typing import Any, Callable, Optional

from fsmgen.generator import EmitterOptions, emit
from fsmgen.models import CapabilityInterface, FsmModel
from fsmgen.runtime import FsmEngine


def action(interface: str, method: str) -> dict:
    return {"interface": f"telephone.{interface}", "method": f"{method}()"}


def telephone_dict() -> dict:
    """OffHook -> Ringing -> Connected, with enter/exit actions on every state."""
    return {
        "description": "Telephone call handling",
        "origin": "tests/telephone.yaml",
        "origin_id": "b7c1d2e3",
        "events": ["VolumeUp"],
        "states": [
            {
                "name": "OffHook",
                "start": True,
                "on_enter": [action("ITelephone", "DisconnectCall")],
                "on_exit": [action("IHaptics", "Pulse")],
                "transitions": [{"event": "CallDialed", "target": "Ringing"}],
                "ignore": ["HungUp"],
            },
            {
                "name": "Ringing",
                "on_enter": [
                    action("IAudioControl", "StartRinging"),
                    action("IHaptics", "Pulse"),
                ],
                "on_exit": [action("IAudioControl", "StopRinging")],
                "transitions": [
                    {"event": "CallConnected", "target": "Connected"},
                    {"event": "HungUp", "target": "OffHook"},
                ],
            },
            {
                "name": "Connected",
                "on_enter": [action("ITelephone", "ConnectedToCall")],
                "on_exit": [action("ITelephone", "DisconnectCall")],
                "transitions": [{"event": "HungUp", "target": "OffHook"}],
                "internal_actions": [
                    {"event": "VolumeUp", **action("IAudioControl", "VolumeUp")},
                ],
                "ignore": ["CallConnected"],
            },
        ],
    }


def telephone_interfaces() -> list[CapabilityInterface]:
    return [
        CapabilityInterface.from_dict({
            "name": "telephone.ITelephone",
            "methods": ["ConnectedToCall", "SuspendCall", "DisconnectCall"],
        }),
        CapabilityInterface.from_dict({
            "name": "telephone.IAudioControl",
            "methods": ["StartRinging", "StopRinging", "VolumeUp", "VolumeDown"],
        }),
        CapabilityInterface.from_dict({
            "name": "telephone.IHaptics",
            "methods": ["Pulse"],
        }),
    ]


def load_module(source: str, name: str = "generated_fsm") -> types.ModuleType:
    """Execute emitted source as a fresh module."""
    module = types.ModuleType(name)
    sys.modules[name] = module
    exec(compile(source, f"<{name}>", "exec"), module.__dict__)
    return module


class CallLog:
    """Records capability calls as "Interface.Method" strings, in call order."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._effects: dict[str, Callable[[], None]] = {}

    def on(self, call: str, effect: Callable[[], None]) -> None:
        """Run effect right after call is recorded."""
        self._effects[call] = effect

    def interface(self, name: str) -> _Recorder:
        return _Recorder(name, self)

    def record(self, call: str) -> None:
        self.calls.append(call)
        effect = self._effects.get(call)
        if effect is not None:
            effect()


class _Recorder:
    def __init__(self, name: str, log: CallLog) -> None:
        self._name = name
        self._log = log

    def __getattr__(self, method: str) -> Callable[[], None]:
        if method.startswith("_"):
            raise AttributeError(method)
        return lambda: self._log.record(f"{self._name}.{method}")


class Machine:
    """Uniform test handle over a generated class or an FsmEngine."""

    def __init__(self, fsm: Any, kind: str) -> None:
        self.fsm = fsm
        self.kind = kind

    def event(self, name: str) -> Any:
        if self.kind == "generated":
            return self.fsm.Event[name]
        return name

    def state_id(self, name: str) -> Any:
        if self.kind == "generated":
            return self.fsm.State[name]
        return name

    def send(self, name: str) -> None:
        self.fsm.send_event(self.event(name))

    @property
    def state(self) -> str:
        state = self.fsm.context.state
        return state.name if self.kind == "generated" else state

    @property
    def is_firing(self) -> bool:
        return self.fsm._is_firing

    def new_context(self, log: CallLog, start_state: Optional[str] = None) -> Any:
        implementations = {
            "AudioControl": log.interface("AudioControl"),
            "Haptics": log.interface("Haptics"),
            "Telephone": log.interface("Telephone"),
        }
        if self.kind == "generated":
            kwargs = {}
            if start_state is not None:
                kwargs["start_state"] = self.fsm.State[start_state]
            return type(self.fsm).new_default_context(
                implementations["AudioControl"],
                implementations["Haptics"],
                implementations["Telephone"],
                **kwargs,
            )
        return self.fsm.new_default_context(start_state=start_state, **implementations)


def make_machine(model: FsmModel, kind: str, **options: Any) -> Machine:
    if kind == "generated":
        options.setdefault("class_name", "TelephoneFsm")
        module = load_module(emit(model, EmitterOptions(**options)))
        return Machine(getattr(module, options["class_name"])(), kind)
    return Machine(FsmEngine(model), kind)
