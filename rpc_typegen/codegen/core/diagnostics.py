"""
Errors and non-fatal diagnostics raised during extraction and generation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class FrontendError(GeneratorError):
    """A syntax-tree unit could not be read or parsed."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class EmptyManifestError(GeneratorError):
    """No units were given, or none of them declared anything exportable."""

    pass


class SyntaxTreeError(Exception):
    """A declaration node does not have the expected structure."""

    pass


class DiagnosticKind(Enum):
    """Categories of recoverable problems found during extraction."""

    UNRECOGNIZED_DIRECTIVE = "unrecognized-directive"
    MALFORMED_DIRECTIVE = "malformed-directive"
    MALFORMED_DECLARATION = "malformed-declaration"
    UNSUPPORTED_SHAPE = "unsupported-shape"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem attributed to a declaration."""

    kind: DiagnosticKind
    message: str
    path: str = ""
    declaration: Optional[str] = None

    def __str__(self) -> str:
        location = self.path or "<unknown>"
        if self.declaration:
            location = f"{location} ({self.declaration})"
        return f"{location}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "declaration": self.declaration,
        }
