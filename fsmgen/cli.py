"""CLI entry point for fsmgen."""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Optional

import click

from fsmgen import __version__
from fsmgen.builder import build_model
from fsmgen.config import GeneratorConfig, load_config
from fsmgen.generator import CodeEmitter, describe_model, validate_source
from fsmgen.models import FsmModel, GraphDocument, load_graph
from fsmgen.utils.files import AtomicWriteError, get_content_hash, write_if_changed
from fsmgen.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    log_emit_result,
    log_stage_timing,
    set_graph_context,
    set_stage,
)
from fsmgen.utils.result import ExitCode

# Default paths
DEFAULT_CONFIG = "."


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, config_dir: Path, config: GeneratorConfig) -> None:
        self.config_dir = config_dir
        self.config = config
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def fail(message: str, exit_code: int, **details) -> None:
    """Report an error as JSON and exit with the given code."""
    output_json({"status": "error", "message": message, **details})
    sys.exit(exit_code)


def load_model(ctx: Context, graph_path: Path) -> FsmModel:
    """Load and build a graph, exiting with the matching code on failure."""
    set_graph_context(graph_path.stem, stage="load")
    started = time.perf_counter()

    loaded = load_graph(graph_path)
    if loaded.is_err():
        error = loaded.unwrap_err()
        ctx.logger.error("graph_load_failed", path=error.path, error=error.message)
        fail(str(error), ExitCode.GRAPH_UNREADABLE, path=error.path)
    document: GraphDocument = loaded.unwrap()

    set_stage("build")
    built = build_model(document.graph, document.catalog, verbose=ctx.config.builder.verbose)
    if built.is_err():
        error = built.unwrap_err()
        fail(error.message, ExitCode.BUILD_FAILED, kind=error.kind)

    log_stage_timing("build", time.perf_counter() - started)
    return built.unwrap()


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False, file_okay=False, path_type=Path),
    default=DEFAULT_CONFIG,
    help="Directory containing fsmgen.yaml",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (overrides config)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"], case_sensitive=False),
    default=None,
    help="Log format (overrides config)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path,
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    fsmgen - finite state machine code generator.

    Validates state machine graphs and generates Python classes that run
    them with run-to-completion semantics.
    """
    loaded = load_config(config)
    if loaded.is_err():
        fail(str(loaded.unwrap_err()), ExitCode.CONFIG_INVALID)

    settings = loaded.unwrap().with_logging(level=log_level, format=log_format)
    configure_logging(level=settings.logging.level, format_type=settings.logging.format)
    # One correlation id per invocation, stamped on every log event
    get_correlation_id()

    ctx.obj = Context(config_dir=config, config=settings)


@cli.command()
@click.argument("graph", type=click.Path(exists=False, dir_okay=False, path_type=Path))
@pass_context
def validate(ctx: Context, graph: Path) -> None:
    """Check a graph for structural defects without generating code."""
    model = load_model(ctx, graph)

    output_json({
        "status": "success",
        "message": f"Graph {graph.name} is valid",
        "start_state": model.start_state.name,
        "states": [s.name for s in model.states],
        "events": [e.name for e in model.events],
        "interfaces": [i.qualified_name for i in model.interfaces],
    })


@cli.command()
@click.argument("graph", type=click.Path(exists=False, dir_okay=False, path_type=Path))
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the validated model as JSON instead of text",
)
@pass_context
def describe(ctx: Context, graph: Path, as_json: bool) -> None:
    """Print a readable summary of a graph's states, events and interfaces."""
    model = load_model(ctx, graph)

    if as_json:
        output_json(model.to_dict())
    else:
        click.echo(describe_model(model), nl=False)


@cli.command()
@click.argument("graph", type=click.Path(exists=False, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File to write (prints the source when omitted)",
)
@click.option("--class-name", default=None, help="Generated class name")
@click.option("--namespace", default=None, help="Dotted holder class to nest the machine in")
@click.option("--indent", "indent_unit", type=int, default=None, help="Spaces per indent level")
@click.option(
    "--comment-out/--no-comment-out",
    default=None,
    help="Emit every line as a comment",
)
@click.option(
    "--introspection/--no-introspection",
    "enable_introspection",
    default=None,
    help="Add state name reflection",
)
@click.option(
    "--debug-support/--no-debug-support",
    "enable_debug_support",
    default=None,
    help="Add enter-breakpoints and observer hooks",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Rewrite the output file even if unchanged",
)
@pass_context
def generate(
    ctx: Context,
    graph: Path,
    output: Optional[Path],
    class_name: Optional[str],
    namespace: Optional[str],
    indent_unit: Optional[int],
    comment_out: Optional[bool],
    enable_introspection: Optional[bool],
    enable_debug_support: Optional[bool],
    force: bool,
) -> None:
    """Generate a Python state machine class from a graph."""
    model = load_model(ctx, graph)

    set_stage("emit")
    started = time.perf_counter()
    try:
        options = ctx.config.emitter.to_options(
            class_name=class_name,
            namespace=namespace,
            indent_unit=indent_unit,
            comment_out=comment_out,
            enable_introspection=enable_introspection,
            enable_debug_support=enable_debug_support,
        )
    except ValueError as e:
        fail(str(e), ExitCode.CONFIG_INVALID)

    source = CodeEmitter(options).emit(model)

    validation = validate_source(source, filename=str(output or graph.with_suffix(".py")))
    if validation.has_errors:
        fail("Generated source failed validation", ExitCode.EMIT_FAILED, **validation.to_dict())
    log_stage_timing("emit", time.perf_counter() - started)

    content_hash = get_content_hash(source)
    if output is None:
        log_emit_result(options.resolved_class_name, source.count("\n"), content_hash, written=False)
        click.echo(source, nl=False)
        return

    set_stage("write")
    try:
        written = write_if_changed(output, source, force=force)
    except AtomicWriteError as e:
        fail(str(e), ExitCode.WRITE_FAILED, output=str(output))

    log_emit_result(options.resolved_class_name, source.count("\n"), content_hash, written=written)
    output_json({
        "status": "success",
        "message": f"{'Wrote' if written else 'Unchanged'} {output}",
        "class_name": options.resolved_class_name,
        "output": str(output),
        "written": written,
        "content_hash": content_hash,
        "lines": source.count("\n"),
    })


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
