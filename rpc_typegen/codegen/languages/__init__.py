"""
Language-specific code generators.
"""

from .typescript import TypeScriptGenerator, create_typescript_generator

__all__ = ["TypeScriptGenerator", "create_typescript_generator"]
