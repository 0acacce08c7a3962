"""
Core code generation components.

Provides the semantic model, naming rules and base classes used by all
language generators.
"""

from .config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    discover_config,
    load_config,
)
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    EmptyManifestError,
    FrontendError,
    GeneratorError,
    SyntaxTreeError,
)
from .generator import CodeGenerator, GenerationResult, generate_code
from .model import (
    FieldSpec,
    Manifest,
    ProcedureKind,
    ProcedureSpec,
    RecordSpec,
    ShapeKind,
    SumSpec,
    Tagging,
    TaggingKind,
    TypeRef,
    VariantShape,
    VariantSpec,
)
from .naming import FieldNaming, RenameRule, apply_rule, split_words
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Semantic model
    "TypeRef",
    "FieldSpec",
    "RecordSpec",
    "ShapeKind",
    "VariantShape",
    "VariantSpec",
    "TaggingKind",
    "Tagging",
    "SumSpec",
    "ProcedureKind",
    "ProcedureSpec",
    "Manifest",
    # Errors and diagnostics
    "GeneratorError",
    "FrontendError",
    "EmptyManifestError",
    "SyntaxTreeError",
    "Diagnostic",
    "DiagnosticKind",
    # Naming
    "RenameRule",
    "FieldNaming",
    "split_words",
    "apply_rule",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "discover_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
