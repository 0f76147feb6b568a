"""Source generation for validated state machine models."""

from fsmgen.generator.describe import describe_model
from fsmgen.generator.emitter import (
    CodeEmitter,
    EmitterOptions,
    comment_block,
    emit,
    indent_block,
)
from fsmgen.generator.naming import (
    DEFAULT_CLASS_NAME,
    class_name,
    enum_member,
    is_valid_member,
    parameter_name,
    property_name,
)
from fsmgen.generator.validator import CodeValidator, ValidationResult, validate_source

__all__ = [
    # Emitter
    "CodeEmitter",
    "EmitterOptions",
    "emit",
    "indent_block",
    "comment_block",
    # Naming
    "DEFAULT_CLASS_NAME",
    "class_name",
    "enum_member",
    "is_valid_member",
    "parameter_name",
    "property_name",
    # Validator
    "CodeValidator",
    "ValidationResult",
    "validate_source",
    # Description
    "describe_model",
]
