"""
Semantic model for code generation.

Language-neutral representation of everything the extractor discovers:
type references, fields, record types, sum types with their tagging
strategy, and procedure signatures. Values are immutable; named types
refer to each other by name only, so self-referencing declarations need
no special handling.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .naming import RenameRule

PATH_SEPARATOR = "::"


def _freeze(values: Optional[Iterable[Any]]) -> Tuple[Any, ...]:
    return tuple(values) if values is not None else ()


@dataclass(frozen=True)
class TypeRef:
    """A possibly-qualified type name with ordered generic parameters."""

    name: str
    generics: Tuple["TypeRef", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "generics", _freeze(self.generics))

    @property
    def base_name(self) -> str:
        """Trailing path segment (``chrono::DateTime`` -> ``DateTime``)."""
        return self.name.rsplit(PATH_SEPARATOR, 1)[-1]

    def display(self) -> str:
        """Render in source syntax, e.g. ``Vec<Option<String>>``."""
        if not self.generics:
            return self.name
        inner = ", ".join(g.display() for g in self.generics)
        return f"{self.name}<{inner}>"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "generics": [g.to_dict() for g in self.generics]}

    def __str__(self) -> str:
        return self.display()


@dataclass(frozen=True)
class FieldSpec:
    """A named field of a record or struct variant."""

    name: str
    type: TypeRef
    rename: Optional[str] = None
    skip: bool = False
    has_default: bool = False
    flatten: bool = False
    docs: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.to_dict(),
            "rename": self.rename,
            "skip": self.skip,
            "has_default": self.has_default,
            "flatten": self.flatten,
            "docs": self.docs,
        }


@dataclass(frozen=True)
class RecordSpec:
    """A serializable record type (named-field or tuple form)."""

    name: str
    generics: Tuple[str, ...] = field(default_factory=tuple)
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)
    tuple_fields: Tuple[TypeRef, ...] = field(default_factory=tuple)
    source_file: str = ""
    docs: Optional[str] = None
    rename_all: Optional[RenameRule] = None

    def __post_init__(self):
        object.__setattr__(self, "generics", _freeze(self.generics))
        object.__setattr__(self, "fields", _freeze(self.fields))
        object.__setattr__(self, "tuple_fields", _freeze(self.tuple_fields))
        if self.fields and self.tuple_fields:
            raise ValueError(
                f"Record {self.name} cannot have both named and tuple fields"
            )

    @property
    def is_tuple(self) -> bool:
        return bool(self.tuple_fields)

    @property
    def is_newtype(self) -> bool:
        return len(self.tuple_fields) == 1

    def visible_fields(self) -> List[FieldSpec]:
        return [f for f in self.fields if not f.skip]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "generics": list(self.generics),
            "fields": [f.to_dict() for f in self.fields],
            "tuple_fields": [t.to_dict() for t in self.tuple_fields],
            "source_file": self.source_file,
            "docs": self.docs,
            "rename_all": self.rename_all.value if self.rename_all else None,
        }


class ShapeKind(Enum):
    """The three shapes a sum-type variant can take."""

    UNIT = "unit"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclass(frozen=True)
class VariantShape:
    """Shape of a variant's payload."""

    kind: ShapeKind
    elements: Tuple[TypeRef, ...] = field(default_factory=tuple)
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "elements", _freeze(self.elements))
        object.__setattr__(self, "fields", _freeze(self.fields))

    @classmethod
    def unit(cls) -> "VariantShape":
        return cls(ShapeKind.UNIT)

    @classmethod
    def tuple(cls, elements: Iterable[TypeRef]) -> "VariantShape":
        return cls(ShapeKind.TUPLE, elements=tuple(elements))

    @classmethod
    def struct(cls, fields: Iterable[FieldSpec]) -> "VariantShape":
        return cls(ShapeKind.STRUCT, fields=tuple(fields))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind == ShapeKind.TUPLE:
            data["elements"] = [e.to_dict() for e in self.elements]
        elif self.kind == ShapeKind.STRUCT:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data


@dataclass(frozen=True)
class VariantSpec:
    """A single variant of a sum type."""

    name: str
    shape: VariantShape = field(default_factory=VariantShape.unit)
    rename: Optional[str] = None
    docs: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "shape": self.shape.to_dict(),
            "rename": self.rename,
            "docs": self.docs,
        }


class TaggingKind(Enum):
    """On-the-wire conventions for sum types."""

    EXTERNAL = "external"
    INTERNAL = "internal"
    ADJACENT = "adjacent"
    UNTAGGED = "untagged"


@dataclass(frozen=True)
class Tagging:
    """Tagging strategy of a sum type.

    ``tag`` is set for INTERNAL and ADJACENT, ``content`` only for ADJACENT.
    """

    kind: TaggingKind = TaggingKind.EXTERNAL
    tag: Optional[str] = None
    content: Optional[str] = None

    def __post_init__(self):
        if self.kind in (TaggingKind.INTERNAL, TaggingKind.ADJACENT) and not self.tag:
            raise ValueError(f"{self.kind.value} tagging requires a tag key")
        if self.kind == TaggingKind.ADJACENT and not self.content:
            raise ValueError("adjacent tagging requires a content key")

    @classmethod
    def external(cls) -> "Tagging":
        return cls(TaggingKind.EXTERNAL)

    @classmethod
    def internal(cls, tag: str) -> "Tagging":
        return cls(TaggingKind.INTERNAL, tag=tag)

    @classmethod
    def adjacent(cls, tag: str, content: str) -> "Tagging":
        return cls(TaggingKind.ADJACENT, tag=tag, content=content)

    @classmethod
    def untagged(cls) -> "Tagging":
        return cls(TaggingKind.UNTAGGED)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.tag is not None:
            data["tag"] = self.tag
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class SumSpec:
    """A serializable sum type (enum)."""

    name: str
    generics: Tuple[str, ...] = field(default_factory=tuple)
    variants: Tuple[VariantSpec, ...] = field(default_factory=tuple)
    source_file: str = ""
    docs: Optional[str] = None
    rename_all: Optional[RenameRule] = None
    tagging: Tagging = field(default_factory=Tagging.external)

    def __post_init__(self):
        object.__setattr__(self, "generics", _freeze(self.generics))
        object.__setattr__(self, "variants", _freeze(self.variants))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "generics": list(self.generics),
            "variants": [v.to_dict() for v in self.variants],
            "source_file": self.source_file,
            "docs": self.docs,
            "rename_all": self.rename_all.value if self.rename_all else None,
            "tagging": self.tagging.to_dict(),
        }


class ProcedureKind(Enum):
    """Entry-point kind."""

    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class ProcedureSpec:
    """An entry point exposed through the procedures map.

    ``input``/``output`` of None mean the unit type.
    """

    name: str
    kind: ProcedureKind
    input: Optional[TypeRef] = None
    output: Optional[TypeRef] = None
    source_file: str = ""
    docs: Optional[str] = None
    timeout_ms: Optional[int] = None
    idempotent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "input": self.input.to_dict() if self.input else None,
            "output": self.output.to_dict() if self.output else None,
            "source_file": self.source_file,
            "docs": self.docs,
            "timeout_ms": self.timeout_ms,
            "idempotent": self.idempotent,
        }


def _sort_key(spec: Any) -> Tuple[str, str]:
    return (spec.name, spec.source_file)


@dataclass(frozen=True)
class Manifest:
    """Everything discovered in one compilation pass."""

    procedures: Tuple[ProcedureSpec, ...] = field(default_factory=tuple)
    records: Tuple[RecordSpec, ...] = field(default_factory=tuple)
    sums: Tuple[SumSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "procedures", _freeze(self.procedures))
        object.__setattr__(self, "records", _freeze(self.records))
        object.__setattr__(self, "sums", _freeze(self.sums))

    @classmethod
    def merge(cls, parts: Iterable["Manifest"]) -> "Manifest":
        """Concatenate partial manifests and sort every collection by name."""
        procedures: List[ProcedureSpec] = []
        records: List[RecordSpec] = []
        sums: List[SumSpec] = []
        for part in parts:
            procedures.extend(part.procedures)
            records.extend(part.records)
            sums.extend(part.sums)
        return cls(procedures, records, sums).sorted()

    def sorted(self) -> "Manifest":
        """Return a copy with all collections ordered by name.

        Same-named declarations are ordered by source file.
        """
        return Manifest(
            procedures=sorted(self.procedures, key=_sort_key),
            records=sorted(self.records, key=_sort_key),
            sums=sorted(self.sums, key=_sort_key),
        )

    def is_empty(self) -> bool:
        return not (self.procedures or self.records or self.sums)

    def queries(self) -> List[ProcedureSpec]:
        return [p for p in self.procedures if p.kind == ProcedureKind.QUERY]

    def mutations(self) -> List[ProcedureSpec]:
        return [p for p in self.procedures if p.kind == ProcedureKind.MUTATION]

    def type_names(self) -> List[str]:
        """Names of all declared records and sums."""
        return [r.name for r in self.records] + [s.name for s in self.sums]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "procedures": [p.to_dict() for p in self.procedures],
            "records": [r.to_dict() for r in self.records],
            "sums": [s.to_dict() for s in self.sums],
        }
