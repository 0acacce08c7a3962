"""
TypeScript code generator module.

Generates TypeScript interfaces, discriminated unions and a procedures map
from the semantic model.
"""

from .generator import TypeScriptGenerator, create_typescript_generator
from .naming import field_name, property_key, variant_name
from .types import (
    OverrideTable,
    TypeScriptTypeMapper,
    is_optional_type,
    map_type,
)

__all__ = [
    "TypeScriptGenerator",
    "create_typescript_generator",
    "OverrideTable",
    "TypeScriptTypeMapper",
    "map_type",
    "is_optional_type",
    "field_name",
    "variant_name",
    "property_key",
]
