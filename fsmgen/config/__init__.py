"""Configuration module for fsmgen."""

from fsmgen.config.settings import (
    CONFIG_FILENAME,
    BuilderConfig,
    EmitterConfig,
    GeneratorConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "GeneratorConfig",
    "EmitterConfig",
    "BuilderConfig",
    "LoggingConfig",
    "load_config",
]
