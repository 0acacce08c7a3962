"""
TypeScript naming rules for fields, variants and property keys.
"""

import re
from typing import Optional

from ...core.model import FieldSpec, VariantSpec
from ...core.naming import FieldNaming, RenameRule
from ...core.templates import ts_string

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def property_key(name: str) -> str:
    """Render a property key, quoting it when it is not a valid identifier."""
    return name if is_identifier(name) else ts_string(name)


def field_name(
    spec: FieldSpec,
    rename_all: Optional[RenameRule],
    policy: FieldNaming = FieldNaming.PRESERVE,
) -> str:
    """
    Resolve the serialized name of a field.

    Priority: explicit rename, then the container convention, then the
    global field-naming policy.

    Args:
        spec: Field to name
        rename_all: Container-level convention, if any
        policy: Global policy applied when nothing else matches

    Returns:
        Field name as it appears on the wire
    """
    if spec.rename is not None:
        return spec.rename
    if rename_all is not None:
        return rename_all.apply(spec.name)
    return policy.apply(spec.name)


def variant_name(spec: VariantSpec, rename_all: Optional[RenameRule]) -> str:
    """Resolve the serialized name of a variant (rename, then convention)."""
    if spec.rename is not None:
        return spec.rename
    if rename_all is not None:
        return rename_all.apply(spec.name)
    return spec.name
