"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig
from .diagnostics import GeneratorError
from .model import Manifest
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        self._template_engine = create_template_engine(template_dir)

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.ts')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Returns:
            Path to template directory or None for in-memory templates
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, manifest: Manifest) -> str:
        """
        Generate the complete output file for a manifest.

        Args:
            manifest: Sorted manifest of the whole compilation pass

        Returns:
            Generated code as a string
        """
        pass

    def validate_manifest(self, manifest: Manifest) -> List[str]:
        """
        Check a manifest for problems that do not stop generation.

        Args:
            manifest: Manifest to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        counts = Counter(manifest.type_names())
        for name, count in sorted(counts.items()):
            if count > 1:
                warnings.append(f"Type '{name}' is declared {count} times")

        proc_counts = Counter(p.name for p in manifest.procedures)
        for name, count in sorted(proc_counts.items()):
            if count > 1:
                warnings.append(f"Procedure '{name}' is declared {count} times")

        for sum_spec in manifest.sums:
            if not sum_spec.variants:
                warnings.append(f"Enum '{sum_spec.name}' has no variants")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending in a single newline
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content without trailing newlines
        """
        if not self.template_exists(template_name):
            raise GeneratorError(f"Template not found: {template_name}")
        rendered = self.template_engine.render_template(template_name, context)
        return rendered.rstrip("\n")

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, manifest: Manifest) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        manifest: Manifest to generate code for

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate_manifest(manifest)
        for warning in warnings:
            logger.warning(warning)

        code = generator.generate(manifest)
        formatted_code = generator.format_code(code)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "procedure_count": len(manifest.procedures),
            "query_count": len(manifest.queries()),
            "mutation_count": len(manifest.mutations()),
            "record_count": len(manifest.records),
            "sum_count": len(manifest.sums),
        }

        return GenerationResult(formatted_code, warnings, metadata)

    except Exception as e:
        logger.debug("Code generation failed", exc_info=True)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
