"""
Readers for serialization directives and entry-point markers.

Unknown or malformed directive values never stop extraction: they are
reported as diagnostics and the directive falls back to its default.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ...logging_config import get_logger
from ..core.diagnostics import Diagnostic, DiagnosticKind
from ..core.model import ProcedureKind, Tagging
from ..core.naming import RenameRule
from .syntax import Attribute, AttributeArg

logger = get_logger(__name__)

SERDE_ATTR = "serde"
DERIVE_ATTR = "derive"
SERIALIZE_MARKER = "Serialize"

PROCEDURE_MARKERS = {
    "rpc_query": ProcedureKind.QUERY,
    "rpc_mutation": ProcedureKind.MUTATION,
}

# Runtime-only marker options with no effect on the type surface.
PASSTHROUGH_MARKER_KEYS = {"cache", "stale", "init"}

_DURATION = re.compile(r"^\s*(\d+)\s*([smhd])\s*$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(text: str) -> int:
    """
    Parse a duration shorthand such as ``30s`` or ``5m``.

    Args:
        text: Number followed by one of ``s``, ``m``, ``h``, ``d``

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the text is malformed or the duration is zero
    """
    match = _DURATION.match(text)
    if not match:
        raise ValueError(f"invalid duration {text!r}, expected e.g. 30s, 5m, 1h, 1d")
    seconds = int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
    if seconds == 0:
        raise ValueError("duration must be greater than zero")
    return seconds


def has_serialize_marker(attrs: List[Attribute]) -> bool:
    """True if a ``derive`` attribute lists ``Serialize``."""
    for attr in attrs:
        if attr.name != DERIVE_ATTR:
            continue
        for arg in attr.args:
            if arg.key.rsplit("::", 1)[-1] == SERIALIZE_MARKER:
                return True
    return False


@dataclass
class ContainerDirectives:
    rename_all: Optional[RenameRule] = None
    tagging: Tagging = field(default_factory=Tagging.external)


@dataclass
class FieldDirectives:
    rename: Optional[str] = None
    skip: bool = False
    has_default: bool = False
    flatten: bool = False


@dataclass
class ProcedureMarker:
    kind: ProcedureKind
    timeout_ms: Optional[int] = None
    idempotent: bool = False


class DirectiveReader:
    """Reads directives for one declaration and collects diagnostics."""

    def __init__(self, path: str, declaration: str, diagnostics: List[Diagnostic]):
        self.path = path
        self.declaration = declaration
        self.diagnostics = diagnostics

    def report(self, kind: DiagnosticKind, message: str):
        diagnostic = Diagnostic(
            kind=kind, message=message, path=self.path, declaration=self.declaration
        )
        logger.warning(str(diagnostic))
        self.diagnostics.append(diagnostic)

    def _serde_args(self, attrs: List[Attribute]) -> List[AttributeArg]:
        args: List[AttributeArg] = []
        for attr in attrs:
            if attr.name == SERDE_ATTR:
                args.extend(attr.args)
        return args

    def _string_value(self, arg: AttributeArg, owner: str) -> Optional[str]:
        if not arg.has_value or not isinstance(arg.value, str):
            # Member-level owners name the field or variant
            prefix = f"{owner}: " if owner != self.declaration else ""
            self.report(
                DiagnosticKind.MALFORMED_DIRECTIVE,
                f"{prefix}'{arg.key}' expects a string value, got {arg.value!r}",
            )
            return None
        return arg.value

    def read_container(self, attrs: List[Attribute]) -> ContainerDirectives:
        """
        Read container-level directives of a record or sum type.

        Tagging priority: ``untagged`` wins, then ``tag`` with ``content``
        (adjacent), then ``tag`` alone (internal), else external.
        """
        directives = ContainerDirectives()
        tag: Optional[str] = None
        content: Optional[str] = None
        untagged = False
        owner = self.declaration

        for arg in self._serde_args(attrs):
            if arg.key == "rename_all":
                value = self._string_value(arg, owner)
                if value is None:
                    continue
                rule = RenameRule.parse(value)
                if rule is None:
                    self.report(
                        DiagnosticKind.UNRECOGNIZED_DIRECTIVE,
                        f"unknown rename_all convention {value!r}",
                    )
                else:
                    directives.rename_all = rule
            elif arg.key == "tag":
                tag = self._string_value(arg, owner) or tag
            elif arg.key == "content":
                content = self._string_value(arg, owner) or content
            elif arg.key == "untagged":
                untagged = True

        if untagged:
            directives.tagging = Tagging.untagged()
        elif tag and content:
            directives.tagging = Tagging.adjacent(tag, content)
        elif tag:
            directives.tagging = Tagging.internal(tag)
        else:
            if content:
                self.report(
                    DiagnosticKind.MALFORMED_DIRECTIVE,
                    f"'content' requires 'tag'; using external tagging",
                )
            directives.tagging = Tagging.external()

        return directives

    def read_field(self, attrs: List[Attribute], owner: str) -> FieldDirectives:
        """Read field-level directives."""
        directives = FieldDirectives()
        for arg in self._serde_args(attrs):
            if arg.key == "rename":
                directives.rename = self._string_value(arg, owner) or directives.rename
            elif arg.key in ("skip", "skip_serializing"):
                directives.skip = True
            elif arg.key == "default":
                directives.has_default = True
            elif arg.key == "flatten":
                directives.flatten = True
        return directives

    def read_variant_rename(self, attrs: List[Attribute], owner: str) -> Optional[str]:
        rename = None
        for arg in self._serde_args(attrs):
            if arg.key == "rename":
                rename = self._string_value(arg, owner) or rename
        return rename

    def read_procedure_marker(
        self, attrs: List[Attribute]
    ) -> Optional[ProcedureMarker]:
        """
        Find an entry-point marker and read its options.

        Returns:
            ProcedureMarker, or None when the callable is not an entry point
        """
        for attr in attrs:
            kind = PROCEDURE_MARKERS.get(attr.name)
            if kind is None:
                continue

            marker = ProcedureMarker(kind=kind)
            for arg in attr.args:
                self._read_marker_arg(marker, arg)
            return marker
        return None

    def _read_marker_arg(self, marker: ProcedureMarker, arg: AttributeArg):
        owner = self.declaration
        if arg.key == "timeout":
            value: Any = self._string_value(arg, owner)
            if value is None:
                return
            try:
                marker.timeout_ms = parse_duration(value) * 1000
            except ValueError as e:
                self.report(DiagnosticKind.MALFORMED_DIRECTIVE, f"timeout {e}")
        elif arg.key == "idempotent":
            if arg.has_value and arg.value is not True:
                self.report(
                    DiagnosticKind.MALFORMED_DIRECTIVE,
                    f"'idempotent' is a flag and takes no value",
                )
                return
            marker.idempotent = True
        elif arg.key in PASSTHROUGH_MARKER_KEYS:
            return
        else:
            self.report(
                DiagnosticKind.UNRECOGNIZED_DIRECTIVE,
                f"unknown entry-point option {arg.key!r}",
            )
