"""Utility modules for fsmgen."""

from fsmgen.utils.files import (
    AtomicWriteError,
    atomic_write,
    get_content_hash,
    read_content_hash,
    write_if_changed,
)
from fsmgen.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    log_emit_result,
    log_stage_timing,
    set_graph_context,
    set_stage,
)
from fsmgen.utils.result import (
    ConfigError,
    Err,
    ExitCode,
    GraphLoadError,
    Ok,
    Result,
    ResultError,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_graph_context",
    "set_stage",
    "log_stage_timing",
    "log_emit_result",
    # Files
    "AtomicWriteError",
    "atomic_write",
    "get_content_hash",
    "read_content_hash",
    "write_if_changed",
    # Result
    "Ok",
    "Err",
    "Result",
    "ResultError",
    "ConfigError",
    "GraphLoadError",
    "ExitCode",
]
