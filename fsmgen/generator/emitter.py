"""Code emitter: renders an FsmModel as a Python module.

Each generated construct has its own Jinja2 template, rendered at
indentation level 0. Templates nest with four spaces per level; the
emitter re-indents every rendered block to the requested unit and depth
with indent_block, so the same template works at any nesting depth.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from fsmgen.generator.naming import (
    DEFAULT_CLASS_NAME,
    class_name as clean_class_name,
    enum_member,
    parameter_name,
    property_name,
)
from fsmgen.models.fsm import FsmAction, FsmModel, FsmState
from fsmgen.utils.logging import get_logger

logger = get_logger("generator.emitter")

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Indentation used inside template files
TEMPLATE_INDENT = 4


@dataclass(frozen=True)
class EmitterOptions:
    """
    Options controlling the emitted source.

    Attributes:
        class_name: Generated class name (spaces are removed)
        namespace: Dotted holder-class path to nest the machine in, "" for none
        indent_unit: Spaces per indentation level
        comment_out: Emit every line as a comment, for previews
        enable_introspection: Add the state-name reflection surface
        enable_debug_support: Add enter-breakpoints and observer hooks
    """

    class_name: str = DEFAULT_CLASS_NAME
    namespace: str = ""
    indent_unit: int = 4
    comment_out: bool = False
    enable_introspection: bool = False
    enable_debug_support: bool = False

    def __post_init__(self) -> None:
        if self.indent_unit < 1:
            raise ValueError(f"indent_unit must be positive, got {self.indent_unit}")
        if not clean_class_name(self.class_name).isidentifier():
            raise ValueError(f"Invalid class name: {self.class_name!r}")
        for part in self.namespace_parts:
            if not part.isidentifier():
                raise ValueError(f"Invalid namespace: {self.namespace!r}")

    @property
    def unit(self) -> str:
        return " " * self.indent_unit

    @property
    def resolved_class_name(self) -> str:
        return clean_class_name(self.class_name)

    @property
    def namespace_parts(self) -> list[str]:
        return [part for part in self.namespace.strip().split(".") if part]


def indent_block(text: str, levels: int = 0, unit: str = " " * TEMPLATE_INDENT) -> str:
    """
    Re-indent rendered template text.

    Each line's leading template indentation (multiples of four spaces) is
    rewritten to unit, and levels further units are prepended. Blank lines
    stay empty. The result has no trailing newline.
    """
    lines = []
    for line in text.splitlines():
        stripped = line.lstrip(" ")
        if not stripped.strip():
            lines.append("")
            continue
        depth, extra = divmod(len(line) - len(stripped), TEMPLATE_INDENT)
        lines.append(unit * (levels + depth) + " " * extra + stripped)
    return "\n".join(lines)


def comment_block(text: str) -> str:
    """Turn every line of text into a comment line."""
    return "\n".join(f"# {line}" if line else "#" for line in text.split("\n"))


def _tuple_literal(items: Iterable[str]) -> str:
    items = list(items)
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def _create_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["indent_block"] = indent_block
    env.filters["pyrepr"] = repr
    return env


class CodeEmitter:
    """
    Renders models to source text.

    Emission is a pure function of (model, options): the same inputs always
    produce byte-identical output.
    """

    def __init__(self, options: EmitterOptions | None = None) -> None:
        self.options = options or EmitterOptions()
        self.env = _create_environment()

    def emit(self, model: FsmModel) -> str:
        """
        Generate the module source for a model.

        Args:
            model: Validated model from the builder

        Returns:
            Python source text ending with a newline
        """
        options = self.options
        depth = len(options.namespace_parts)

        parts = [self._render_module_header(), "", ""]
        for level, name in enumerate(options.namespace_parts):
            parts.append(indent_block(self._render("namespace.j2", name=name), level, options.unit))
        parts.append(indent_block(self._render_class_declaration(model), depth, options.unit))

        body = [indent_block(block, depth + 1, options.unit) for block in self._render_body(model)]
        parts.append("\n\n".join(body))

        source = "\n".join(parts) + "\n"
        if options.comment_out:
            source = comment_block(source.rstrip("\n")) + "\n"

        logger.debug(
            "source_emitted",
            class_name=options.resolved_class_name,
            lines=source.count("\n"),
            comment_out=options.comment_out,
        )
        return source

    def _render(self, template_name: str, **context: Any) -> str:
        return self.env.get_template(template_name).render(**context).rstrip("\n")

    def _render_body(self, model: FsmModel) -> list[str]:
        blocks = [
            self._render_class_attributes(model),
            self._render_enum("State", [enum_member(s.name) for s in model.states]),
            self._render_enum("Event", [enum_member(e.name) for e in model.events]),
            self._render_default_context(model),
            self._render_lifecycle(),
            self._render_event_dispatch(model),
            self._render_internal_actions(model),
            self._render_ignore_checks(model),
            self._render("switch_state.j2"),
            self._render_enter_dispatch(model),
            self._render_exit_dispatch(model),
        ]
        if self.options.enable_introspection:
            blocks.append(self._render_introspection(model))
        if self.options.enable_debug_support:
            blocks.append(self._render("debug_support.j2"))
        return blocks

    def _render_module_header(self) -> str:
        runtime_imports = ["BaseFsm", "FsmContext", "InvalidOperationError", "UnhandledEventError"]
        if self.options.enable_introspection:
            runtime_imports.append("IntrospectionSupport")
        if self.options.enable_debug_support:
            runtime_imports.append("DebugSupport")
        return self._render("module_header.j2", runtime_imports=sorted(runtime_imports))

    def _render_class_declaration(self, model: FsmModel) -> str:
        bases = ["BaseFsm"]
        if self.options.enable_introspection:
            bases.append("IntrospectionSupport")
        if self.options.enable_debug_support:
            bases.append("DebugSupport")

        description = " ".join((model.description or "").split())
        return self._render(
            "class_declaration.j2",
            description=description,
            class_name=self.options.resolved_class_name,
            bases=bases,
        )

    def _render_class_attributes(self, model: FsmModel) -> str:
        return self._render(
            "class_attributes.j2",
            origin=model.origin,
            origin_id=model.origin_id,
        )

    def _render_enum(self, name: str, members: list[str]) -> str:
        return self._render("enum.j2", name=name, members=members)

    def _render_default_context(self, model: FsmModel) -> str:
        interfaces = [
            {"property": property_name(iface), "parameter": parameter_name(iface)}
            for iface in model.interfaces
        ]
        return self._render(
            "default_context.j2",
            start_state=enum_member(model.start_state.name),
            interfaces=interfaces,
        )

    def _render_lifecycle(self) -> str:
        return self._render(
            "lifecycle.j2",
            class_name=self.options.resolved_class_name,
            debug=self.options.enable_debug_support,
        )

    def _render_event_dispatch(self, model: FsmModel) -> str:
        cases = "\n".join(
            self._render_event_case(model, state, first=index == 0)
            for index, state in enumerate(model.states)
        )
        return self._render("event_dispatch.j2", cases=cases)

    def _render_event_case(self, model: FsmModel, state: FsmState, first: bool) -> str:
        transitions = [
            {"event": enum_member(t.event.name), "target": enum_member(t.target)}
            for t in state.transitions
        ]
        # Every event already has a transition; nothing can fall through
        needs_default = len(state.transitions) < len(model.events)
        default_body = self._render("unhandled_event.j2") if needs_default else ""
        return self._render(
            "event_case.j2",
            keyword="if" if first else "elif",
            state=enum_member(state.name),
            transitions=transitions,
            default_body=default_body,
        )

    def _render_internal_actions(self, model: FsmModel) -> str:
        states = [s for s in model.states if s.internal_actions]
        cases = "\n".join(
            self._render(
                "internal_action_case.j2",
                keyword="if" if index == 0 else "elif",
                state=enum_member(state.name),
                actions=[
                    {"event": enum_member(i.event.name), "call": _action_call(i.action)}
                    for i in state.internal_actions
                ],
            )
            for index, state in enumerate(states)
        )
        return self._render("internal_actions.j2", cases=cases)

    def _render_ignore_checks(self, model: FsmModel) -> str:
        cases = [
            {
                "state": enum_member(state.name),
                "events": _tuple_literal(f"self.Event.{enum_member(e.name)}" for e in state.ignored),
            }
            for state in model.states
            if state.ignored
        ]
        return self._render("ignore_checks.j2", cases=cases)

    def _render_state_action_cases(self, model: FsmModel, on_enter: bool) -> str:
        return "\n".join(
            self._render(
                "state_actions_case.j2",
                keyword="if" if index == 0 else "elif",
                state=enum_member(state.name),
                calls=[
                    _action_call(action)
                    for action in (state.on_enter if on_enter else state.on_exit)
                ],
            )
            for index, state in enumerate(model.states)
        )

    def _render_enter_dispatch(self, model: FsmModel) -> str:
        return self._render(
            "enter_dispatch.j2",
            cases=self._render_state_action_cases(model, on_enter=True),
            debug=self.options.enable_debug_support,
        )

    def _render_exit_dispatch(self, model: FsmModel) -> str:
        return self._render(
            "exit_dispatch.j2",
            cases=self._render_state_action_cases(model, on_enter=False),
        )

    def _render_introspection(self, model: FsmModel) -> str:
        states = [{"member": enum_member(s.name), "name": s.name} for s in model.states]
        return self._render("introspection.j2", states=states)


def _action_call(action: FsmAction) -> str:
    """Call expression relative to the context, e.g. "AudioControl.StartRinging()"."""
    return f"{property_name(action.interface)}.{action.method.invoke}"


def emit(model: FsmModel, options: EmitterOptions | None = None) -> str:
    """Generate source for a model with the given options."""
    return CodeEmitter(options).emit(model)
