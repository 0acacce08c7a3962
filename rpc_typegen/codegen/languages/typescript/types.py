"""
TypeScript type system for code generation.

Maps semantic type references to TypeScript type syntax, resolving the
override table first and then the built-in wrapper and primitive types.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from ...core.model import PATH_SEPARATOR, TypeRef

OPTION_TYPE = "Option"
SEQUENCE_TYPES = frozenset(
    {"Vec", "VecDeque", "LinkedList", "HashSet", "BTreeSet", "IndexSet", "Array"}
)
MAP_TYPES = frozenset({"HashMap", "BTreeMap", "IndexMap"})
TRANSPARENT_TYPES = frozenset({"Box", "Arc", "Rc", "Cow"})
TUPLE_TYPE = "tuple"
UNIT_TYPE = "()"

STRING_TYPES = frozenset({"String", "str", "char"})
NUMBER_TYPES = frozenset(
    {
        "i8", "i16", "i32", "i64", "i128", "isize",
        "u8", "u16", "u32", "u64", "u128", "usize",
        "f32", "f64",
    }
)  # fmt: skip
BOOLEAN_TYPES = frozenset({"bool"})

BIGINT = "bigint"


def _base(name: str) -> str:
    return name.rsplit(PATH_SEPARATOR, 1)[-1]


def wrap_compound(ts_type: str) -> str:
    """Parenthesize a union or intersection so it can take a suffix."""
    if " | " in ts_type or " & " in ts_type:
        return f"({ts_type})"
    return ts_type


@dataclass(frozen=True)
class OverrideTable:
    """
    Type-name to literal TypeScript type substitutions.

    ``entries`` holds the configured keys as written (qualified or short);
    ``fallback`` indexes the same targets by trailing path segment. When
    several keys share a trailing segment, a key that is exactly that
    segment wins, otherwise the first key in sorted order.
    """

    entries: Mapping[str, str] = field(default_factory=dict)
    fallback: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        overrides: Optional[Mapping[str, str]] = None,
        bigint_types: Iterable[str] = (),
    ) -> "OverrideTable":
        """
        Build a table from user overrides and bigint type names.

        Args:
            overrides: Explicit type-name to TypeScript mappings
            bigint_types: Integer types to map to ``bigint``; explicit
                overrides for the same name take precedence

        Returns:
            Immutable override table
        """
        entries: Dict[str, str] = dict(overrides or {})
        for name in bigint_types:
            entries.setdefault(name, BIGINT)

        fallback: Dict[str, str] = {}
        for key in sorted(entries):
            short = _base(key)
            if short == key or short not in fallback:
                fallback[short] = entries[key]
        # Exact short keys always win over qualified keys sharing the segment.
        for key in entries:
            if PATH_SEPARATOR not in key:
                fallback[key] = entries[key]

        return cls(MappingProxyType(entries), MappingProxyType(fallback))

    def resolve(self, name: str) -> Optional[str]:
        """Exact match on the full name, then trailing-segment fallback."""
        if name in self.entries:
            return self.entries[name]
        return self.fallback.get(_base(name))

    def __bool__(self) -> bool:
        return bool(self.entries)


EMPTY_OVERRIDES = OverrideTable.build()


def map_type(ref: TypeRef, overrides: OverrideTable = EMPTY_OVERRIDES) -> str:
    """
    Map a type reference to TypeScript syntax.

    Args:
        ref: Type reference to map
        overrides: Override table consulted at every nesting level

    Returns:
        TypeScript type expression
    """
    override = overrides.resolve(ref.name)
    if override is not None:
        return override

    base = ref.base_name
    generics = ref.generics
    arity = len(generics)

    if base == OPTION_TYPE and arity == 1:
        return f"{map_type(generics[0], overrides)} | null"

    if base in SEQUENCE_TYPES and arity == 1:
        return f"{wrap_compound(map_type(generics[0], overrides))}[]"

    if base in MAP_TYPES and arity == 2:
        key = map_type(generics[0], overrides)
        value = map_type(generics[1], overrides)
        return f"Record<{key}, {value}>"

    if base == TUPLE_TYPE:
        return "[" + ", ".join(map_type(g, overrides) for g in generics) + "]"

    if base in TRANSPARENT_TYPES and arity == 1:
        return map_type(generics[0], overrides)

    if arity == 0:
        if base in STRING_TYPES:
            return "string"
        if base in NUMBER_TYPES:
            return "number"
        if base in BOOLEAN_TYPES:
            return "boolean"
        if base == UNIT_TYPE:
            return "void"
        return base

    params = ", ".join(map_type(g, overrides) for g in generics)
    return f"{base}<{params}>"


def is_optional_type(ref: TypeRef, overrides: OverrideTable = EMPTY_OVERRIDES) -> bool:
    """True if the type maps to the nullable shape produced for ``Option<T>``."""
    if overrides.resolve(ref.name) is not None:
        return False
    return ref.base_name == OPTION_TYPE and len(ref.generics) == 1


class TypeScriptTypeMapper:
    """Binds an override table to the mapping functions."""

    def __init__(self, overrides: Optional[OverrideTable] = None):
        self.overrides = overrides or EMPTY_OVERRIDES

    @classmethod
    def from_config(
        cls,
        type_overrides: Optional[Mapping[str, str]] = None,
        bigint_types: Iterable[str] = (),
    ) -> "TypeScriptTypeMapper":
        return cls(OverrideTable.build(type_overrides, bigint_types))

    def map_type(self, ref: TypeRef) -> str:
        return map_type(ref, self.overrides)

    def map_optional(self, ref: Optional[TypeRef]) -> str:
        """Map a type that may be absent; absence is ``void``."""
        if ref is None:
            return "void"
        return map_type(ref, self.overrides)

    def is_optional(self, ref: TypeRef) -> bool:
        return is_optional_type(ref, self.overrides)
