"""Syntax and import checks for emitted state machine modules."""

from __future__ import annotations

import ast
import py_compile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from fsmgen.utils.logging import get_logger

logger = get_logger("generator.validator")

# Top-level modules an emitted machine may import
ALLOWED_IMPORTS = frozenset({
    "__future__",
    "collections",
    "dataclasses",
    "enum",
    "typing",
    "fsmgen",
})


@dataclass
class ValidationResult:
    """Result of validating emitted code."""

    valid: bool = True
    syntax_errors: list[str] = field(default_factory=list)
    import_errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.syntax_errors) > 0 or len(self.import_errors) > 0

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "syntax_errors": self.syntax_errors,
            "import_errors": self.import_errors,
            "warnings": self.warnings,
        }


class CodeValidator:
    """
    Validates emitted Python code.

    Performs:
    - Syntax validation (py_compile)
    - AST parsing validation
    - Import checking against the runtime's allowed modules
    """

    def validate(self, code: str, filename: str = "<generated>") -> ValidationResult:
        """
        Validate one emitted module.

        Args:
            code: Python source text
            filename: Name used in error messages

        Returns:
            ValidationResult with any errors found
        """
        result = ValidationResult()

        syntax_error = self._validate_syntax(filename, code)
        if syntax_error is None:
            syntax_error = self._validate_ast(filename, code)

        if syntax_error:
            result.syntax_errors.append(syntax_error)
            result.valid = False
        else:
            result.import_errors.extend(self._check_imports(filename, code))
            result.valid = not result.import_errors

        if result.valid:
            logger.debug("validation_passed", filename=filename)
        else:
            logger.warning(
                "validation_failed",
                filename=filename,
                syntax_errors=len(result.syntax_errors),
                import_errors=len(result.import_errors),
            )

        return result

    def _validate_syntax(self, filename: str, code: str) -> Optional[str]:
        """Compile the code from a temporary file; return an error message or None."""
        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".py",
            delete=False,
            encoding="utf-8",
        ) as f:
            f.write(code)
            temp_path = f.name

        try:
            py_compile.compile(temp_path, doraise=True)
            return None
        except py_compile.PyCompileError as e:
            # Report against filename, not the temporary path in e.msg
            error = e.exc_value
            return f"{filename}:{getattr(error, 'lineno', '?')}: {getattr(error, 'msg', error)}"
        finally:
            Path(temp_path).unlink(missing_ok=True)

    def _validate_ast(self, filename: str, code: str) -> Optional[str]:
        try:
            ast.parse(code)
            return None
        except SyntaxError as e:
            return f"{filename}:{e.lineno}: {e.msg}"

    def _check_imports(self, filename: str, code: str) -> list[str]:
        """Imports outside the runtime's allowed modules."""
        errors = []
        for node in ast.walk(ast.parse(code)):
            if isinstance(node, ast.Import):
                modules = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.module:
                modules = [node.module]
            else:
                continue
            for module in modules:
                if module.split(".")[0] not in ALLOWED_IMPORTS:
                    errors.append(f"{filename}:{node.lineno}: unexpected import '{module}'")
        return errors


def validate_source(code: str, filename: str = "<generated>") -> ValidationResult:
    """Validate emitted source text."""
    return CodeValidator().validate(code, filename)
