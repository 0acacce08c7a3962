"""
rpc-typegen code generation module.

Compiles extracted declarations into TypeScript type declarations. The
compilation pass itself lives in :mod:`rpc_typegen.codegen.pipeline`.
"""

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.model import Manifest

__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    "Manifest",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
]
