"""Plain-text summary of a model, for reviewing a graph before generating."""

from __future__ import annotations

from fsmgen.models.fsm import FsmModel, FsmState

INDENT = "    "


def _section(title: str) -> list[str]:
    rule = "-" * (len(title) + 2)
    return [rule, title, rule, ""]


def _describe_state(state: FsmState) -> list[str]:
    lines = [f"s[ {state.name} ]"]
    lines.extend(f"{INDENT}OnEnter -> {a.display_name}" for a in state.on_enter)
    lines.extend(
        f"{INDENT}e[ {i.event.name} ] -> {i.action.display_name} (internal action)"
        for i in state.internal_actions
    )
    lines.extend(f"{INDENT}e[ {t.event.name} ] -> s[ {t.target} ]" for t in state.transitions)
    lines.extend(f"{INDENT}OnExit -> {a.display_name}" for a in state.on_exit)
    lines.extend(f"{INDENT}e[ {e.name} ] -> Ignore" for e in state.ignored)
    return lines


def describe_model(model: FsmModel) -> str:
    """
    Render required interfaces, events and states as text.

    Each state lists its enter actions, internal actions, transitions, exit
    actions and ignored events, in that order.
    """
    lines = [""]

    lines.extend(_section("Required Interfaces"))
    lines.extend(iface.qualified_name for iface in model.interfaces)
    lines.append("")

    lines.extend(_section("Events"))
    lines.extend(event.name for event in model.events)
    lines.append("")

    lines.extend(_section("States"))
    for state in model.states:
        lines.extend(_describe_state(state))
        lines.append("")

    return "\n".join(lines) + "\n"
