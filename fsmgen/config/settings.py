"""Generator configuration.

Defaults for the emitter, builder and logging live here. A project can
override them with an fsmgen.yaml file in its config directory; command
line options override the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from fsmgen.generator.emitter import EmitterOptions
from fsmgen.generator.naming import DEFAULT_CLASS_NAME, class_name
from fsmgen.utils.result import ConfigError, Err, Ok, Result

CONFIG_FILENAME = "fsmgen.yaml"

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "console")


@dataclass
class EmitterConfig:
    """Defaults for generated source."""

    class_name: str = DEFAULT_CLASS_NAME
    namespace: str = ""
    indent_unit: int = 4
    comment_out: bool = False
    enable_introspection: bool = False
    enable_debug_support: bool = False

    def to_options(self, **overrides: Any) -> EmitterOptions:
        """
        Build emitter options, letting non-None overrides win.

        Args:
            **overrides: EmitterOptions fields, e.g. from command line flags

        Returns:
            EmitterOptions for the code emitter
        """
        values = {
            "class_name": self.class_name,
            "namespace": self.namespace,
            "indent_unit": self.indent_unit,
            "comment_out": self.comment_out,
            "enable_introspection": self.enable_introspection,
            "enable_debug_support": self.enable_debug_support,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return EmitterOptions(**values)


@dataclass
class BuilderConfig:
    """Model builder settings."""

    verbose: bool = False


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass
class GeneratorConfig:
    """Complete generator configuration."""

    emitter: EmitterConfig = field(default_factory=EmitterConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Where the file was loaded from, if anywhere
    config_dir: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: Path) -> Result[GeneratorConfig, ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except UnicodeDecodeError as e:
            return Err(ConfigError(
                field="file",
                message=f"Config file is not valid UTF-8: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        result = cls.from_dict(data)
        if result.is_ok():
            result.unwrap().config_dir = path.parent
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result[GeneratorConfig, ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Result with loaded config or error
        """
        try:
            emitter_data = data.get("emitter") or {}
            emitter = EmitterConfig(
                class_name=str(emitter_data.get("class_name", DEFAULT_CLASS_NAME)),
                namespace=str(emitter_data.get("namespace") or ""),
                indent_unit=int(emitter_data.get("indent_unit", 4)),
                comment_out=bool(emitter_data.get("comment_out", False)),
                enable_introspection=bool(emitter_data.get("enable_introspection", False)),
                enable_debug_support=bool(emitter_data.get("enable_debug_support", False)),
            )

            builder_data = data.get("builder") or {}
            builder = BuilderConfig(verbose=bool(builder_data.get("verbose", False)))

            logging_data = data.get("logging") or {}
            logging_config = LoggingConfig(
                level=str(logging_data.get("level", "info")),
                format=str(logging_data.get("format", "json")),
            )
        except (AttributeError, TypeError, ValueError) as e:
            return Err(ConfigError(
                field="unknown",
                message=f"Failed to parse configuration: {e}",
            ))

        return Ok(cls(emitter=emitter, builder=builder, logging=logging_config))

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if not 1 <= self.emitter.indent_unit <= 8:
            return Err(ConfigError(
                field="emitter.indent_unit",
                message=f"Must be between 1 and 8, got {self.emitter.indent_unit}",
            ))

        if not class_name(self.emitter.class_name).isidentifier():
            return Err(ConfigError(
                field="emitter.class_name",
                message=f"Not a valid class name: {self.emitter.class_name!r}",
            ))

        for part in filter(None, self.emitter.namespace.split(".")):
            if not part.isidentifier():
                return Err(ConfigError(
                    field="emitter.namespace",
                    message=f"Not a valid namespace: {self.emitter.namespace!r}",
                ))

        if self.logging.level.lower() not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level}",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format}",
            ))

        return Ok(None)

    def with_logging(self, level: Optional[str] = None, format: Optional[str] = None) -> GeneratorConfig:
        """Return a copy with logging overridden where given."""
        return replace(
            self,
            logging=LoggingConfig(
                level=level or self.logging.level,
                format=format or self.logging.format,
            ),
        )


def load_config(config_dir: Optional[Path] = None) -> Result[GeneratorConfig, ConfigError]:
    """
    Load configuration from the standard location.

    Reads fsmgen.yaml from config_dir when present; otherwise defaults apply.

    Args:
        config_dir: Configuration directory (defaults to the current directory)

    Returns:
        Result with loaded, validated config or error
    """
    config_dir = Path(config_dir) if config_dir is not None else Path(".")

    path = config_dir / CONFIG_FILENAME
    if path.exists():
        result = GeneratorConfig.from_yaml(path)
        if result.is_err():
            return result
        config = result.unwrap()
    else:
        config = GeneratorConfig()

    validation_result = config.validate()
    if validation_result.is_err():
        return Err(validation_result.unwrap_err())

    return Ok(config)
