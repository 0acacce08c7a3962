"""
Declaration-level syntax-tree nodes.

An external front-end parser hands over each source unit as a JSON
document. This module decodes the pieces the extractor needs (attributes,
generic parameters, type trees and declaration nodes) and rejects nodes
whose structure does not match with :class:`SyntaxTreeError`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.diagnostics import FrontendError, SyntaxTreeError
from ..core.model import TypeRef

ITEM_FN = "fn"
ITEM_STRUCT = "struct"
ITEM_ENUM = "enum"


@dataclass
class AttributeArg:
    """One ``key`` or ``key = value`` entry inside an attribute."""

    key: str
    value: Any = None
    has_value: bool = False


@dataclass
class Attribute:
    """An attribute or marker attached to a declaration, field or variant."""

    path: str
    args: List[AttributeArg] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Last path segment (``rpc::rpc_query`` -> ``rpc_query``)."""
        return self.path.rsplit("::", 1)[-1]


@dataclass
class GenericParam:
    name: str
    kind: str = "type"

    @property
    def is_lifetime(self) -> bool:
        return self.kind == "lifetime"


@dataclass
class ParamNode:
    pattern: str
    type: Optional[TypeRef] = None
    receiver: bool = False


@dataclass
class FieldNode:
    name: str
    type: TypeRef
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)


@dataclass
class VariantNode:
    name: str
    shape: str = "unit"
    fields: List[FieldNode] = field(default_factory=list)
    elements: List[TypeRef] = field(default_factory=list)
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)


@dataclass
class ItemNode:
    """A top-level declaration: callable, record or sum type."""

    kind: str
    name: str
    attrs: List[Attribute] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)
    generics: List[GenericParam] = field(default_factory=list)
    params: List[ParamNode] = field(default_factory=list)
    returns: Optional[TypeRef] = None
    fields: List[FieldNode] = field(default_factory=list)
    tuple_fields: List[TypeRef] = field(default_factory=list)
    variants: List[VariantNode] = field(default_factory=list)


@dataclass
class SyntaxUnit:
    """One decoded source unit.

    ``items`` holds the raw node dictionaries; each is decoded on its own
    so that a malformed node only affects itself.
    """

    path: str
    items: List[Any] = field(default_factory=list)


def _require_str(data: Dict[str, Any], key: str, context: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise SyntaxTreeError(f"{context} is missing a string '{key}'")
    return value


def _list(data: Dict[str, Any], key: str, context: str) -> List[Any]:
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise SyntaxTreeError(f"{context}: '{key}' must be a list")
    return value


def _is_lifetime_arg(data: Any) -> bool:
    if isinstance(data, dict):
        data = data.get("name")
    return isinstance(data, str) and data.startswith("'")


def parse_type(data: Any) -> TypeRef:
    """
    Decode a type tree.

    Lifetime arguments carry no type information and are dropped, so
    ``Cow<'a, str>`` decodes to ``Cow<str>``.

    Args:
        data: ``{"name": ..., "generics": [...]}`` or a bare type name

    Returns:
        The corresponding TypeRef
    """
    if isinstance(data, str):
        if not data:
            raise SyntaxTreeError("Type name must not be empty")
        return TypeRef(data)
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Invalid type node: {data!r}")

    name = _require_str(data, "name", "Type node")
    generics = [
        parse_type(g)
        for g in _list(data, "generics", f"Type {name}")
        if not _is_lifetime_arg(g)
    ]
    return TypeRef(name, tuple(generics))


def parse_attribute(data: Any) -> Attribute:
    if isinstance(data, str):
        return Attribute(path=data)
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Invalid attribute node: {data!r}")

    path = _require_str(data, "path", "Attribute")
    args = []
    for raw in _list(data, "args", f"Attribute {path}"):
        if isinstance(raw, str):
            args.append(AttributeArg(key=raw))
        elif isinstance(raw, dict) and isinstance(raw.get("key"), str):
            args.append(
                AttributeArg(
                    key=raw["key"], value=raw.get("value"), has_value="value" in raw
                )
            )
        else:
            raise SyntaxTreeError(f"Invalid argument in attribute {path}: {raw!r}")
    return Attribute(path=path, args=args)


def parse_generic(data: Any) -> GenericParam:
    if isinstance(data, str):
        if data.startswith("'"):
            return GenericParam(name=data, kind="lifetime")
        return GenericParam(name=data)
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Invalid generic parameter: {data!r}")
    name = _require_str(data, "name", "Generic parameter")
    kind = data.get("kind", "lifetime" if name.startswith("'") else "type")
    return GenericParam(name=name, kind=kind)


def _parse_docs(data: Dict[str, Any], context: str) -> List[str]:
    docs = data.get("docs", [])
    if isinstance(docs, str):
        return docs.split("\n")
    if docs is None:
        return []
    if not isinstance(docs, list) or not all(isinstance(d, str) for d in docs):
        raise SyntaxTreeError(f"{context}: 'docs' must be a list of strings")
    return docs


def _parse_attrs(data: Dict[str, Any], context: str) -> List[Attribute]:
    return [parse_attribute(a) for a in _list(data, "attrs", context)]


def parse_field(data: Any) -> FieldNode:
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Invalid field node: {data!r}")
    name = _require_str(data, "name", "Field")
    if "type" not in data:
        raise SyntaxTreeError(f"Field {name} has no type")
    return FieldNode(
        name=name,
        type=parse_type(data["type"]),
        attrs=_parse_attrs(data, f"Field {name}"),
        docs=_parse_docs(data, f"Field {name}"),
    )


def parse_variant(data: Any) -> VariantNode:
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Invalid variant node: {data!r}")
    name = _require_str(data, "name", "Variant")
    context = f"Variant {name}"

    shape = data.get("shape")
    if shape is None:
        if "fields" in data:
            shape = "struct"
        elif "elements" in data:
            shape = "tuple"
        else:
            shape = "unit"
    if shape not in ("unit", "tuple", "struct"):
        raise SyntaxTreeError(f"{context} has unknown shape {shape!r}")

    return VariantNode(
        name=name,
        shape=shape,
        fields=[parse_field(f) for f in _list(data, "fields", context)],
        elements=[parse_type(e) for e in _list(data, "elements", context)],
        attrs=_parse_attrs(data, context),
        docs=_parse_docs(data, context),
    )


def _parse_param(data: Any, context: str) -> ParamNode:
    if isinstance(data, str) and data in ("self", "&self", "&mut self"):
        return ParamNode(pattern="self", receiver=True)
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"{context}: invalid parameter {data!r}")
    if data.get("receiver"):
        return ParamNode(pattern=data.get("pattern", "self"), receiver=True)
    if "type" not in data:
        raise SyntaxTreeError(f"{context}: parameter without a type")
    return ParamNode(
        pattern=str(data.get("pattern", "_")),
        type=parse_type(data["type"]),
    )


def parse_item(data: Any) -> ItemNode:
    """
    Decode a top-level declaration node.

    Args:
        data: Node dictionary from a syntax-tree document

    Returns:
        Decoded ItemNode

    Raises:
        SyntaxTreeError: If the node is structurally malformed
    """
    if not isinstance(data, dict):
        raise SyntaxTreeError(f"Declaration node must be an object, got {data!r}")

    kind = data.get("kind")
    if not isinstance(kind, str):
        raise SyntaxTreeError("Declaration node has no 'kind'")
    name = _require_str(data, "name", f"{kind} declaration")
    context = f"{kind} {name}"

    item = ItemNode(
        kind=kind,
        name=name,
        attrs=_parse_attrs(data, context),
        docs=_parse_docs(data, context),
        generics=[parse_generic(g) for g in _list(data, "generics", context)],
    )

    if kind == ITEM_FN:
        item.params = [_parse_param(p, context) for p in _list(data, "params", context)]
        returns = data.get("returns")
        item.returns = parse_type(returns) if returns is not None else None
    elif kind == ITEM_STRUCT:
        item.fields = [parse_field(f) for f in _list(data, "fields", context)]
        item.tuple_fields = [
            parse_type(t) for t in _list(data, "tuple_fields", context)
        ]
        if item.fields and item.tuple_fields:
            raise SyntaxTreeError(f"{context} has both named and tuple fields")
    elif kind == ITEM_ENUM:
        item.variants = [parse_variant(v) for v in _list(data, "variants", context)]

    return item


def parse_unit(data: Any, path: str) -> SyntaxUnit:
    """
    Decode the top level of a syntax-tree document.

    Args:
        data: Parsed JSON document
        path: Path the document was read from

    Returns:
        SyntaxUnit with undecoded item nodes

    Raises:
        FrontendError: If the document does not have the expected shape
    """
    if isinstance(data, list):
        return SyntaxUnit(path=path, items=data)
    if not isinstance(data, dict):
        raise FrontendError(path, "syntax-tree document must be a JSON object")

    items = data.get("items", [])
    if not isinstance(items, list):
        raise FrontendError(path, "'items' must be a list of declaration nodes")

    unit_path = data.get("path") or path
    if not isinstance(unit_path, str):
        raise FrontendError(path, "'path' must be a string")
    return SyntaxUnit(path=unit_path, items=items)
