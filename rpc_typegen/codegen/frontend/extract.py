"""
Extractor: turns decoded declaration nodes into semantic model values.

Entry points marked as queries or mutations become procedures; records
and sum types carrying the serializable marker become record and sum
specs. Everything else is ignored.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from ...logging_config import get_logger
from ..core.diagnostics import Diagnostic, DiagnosticKind, SyntaxTreeError
from ..core.model import (
    FieldSpec,
    Manifest,
    ProcedureSpec,
    RecordSpec,
    ShapeKind,
    SumSpec,
    TaggingKind,
    TypeRef,
    VariantShape,
    VariantSpec,
)
from .directives import DirectiveReader, has_serialize_marker
from .syntax import (
    ITEM_ENUM,
    ITEM_FN,
    ITEM_STRUCT,
    FieldNode,
    GenericParam,
    ItemNode,
    SyntaxUnit,
    VariantNode,
    parse_item,
)

logger = get_logger(__name__)

RESULT_TYPE = "Result"


@dataclass
class ExtractionResult:
    """Partial manifest for one unit plus the diagnostics it produced."""

    manifest: Manifest
    diagnostics: List[Diagnostic] = field(default_factory=list)


def join_docs(lines: Iterable[str]) -> Optional[str]:
    """
    Join leading doc-comment lines.

    A single leading space on each line (left by ``///``) is dropped.

    Args:
        lines: Doc lines in source order

    Returns:
        Newline-joined docs, or None when there are none
    """
    cleaned = [line[1:] if line.startswith(" ") else line for line in lines]
    if not cleaned:
        return None
    return "\n".join(cleaned)


def unwrap_result(ref: TypeRef) -> TypeRef:
    """Reduce ``Result<T, E>`` to ``T``; other types pass through."""
    if ref.base_name == RESULT_TYPE and ref.generics:
        return ref.generics[0]
    return ref


def _type_params(generics: List[GenericParam]) -> List[str]:
    return [g.name for g in generics if not g.is_lifetime]


class Extractor:
    """Extracts the declarations of one syntax unit."""

    def __init__(self, unit: SyntaxUnit):
        self.unit = unit
        self.diagnostics: List[Diagnostic] = []

    def extract(self) -> ExtractionResult:
        """
        Extract every recognized declaration in the unit.

        A malformed node is reported and skipped; the rest of the unit is
        still processed.

        Returns:
            ExtractionResult for this unit
        """
        procedures: List[ProcedureSpec] = []
        records: List[RecordSpec] = []
        sums: List[SumSpec] = []

        for index, raw in enumerate(self.unit.items):
            try:
                item = parse_item(raw)
            except SyntaxTreeError as e:
                self._report_malformed(raw, index, e)
                continue

            if item.kind == ITEM_FN:
                procedure = self.extract_procedure(item)
                if procedure is not None:
                    procedures.append(procedure)
            elif item.kind == ITEM_STRUCT:
                if has_serialize_marker(item.attrs):
                    records.append(self.extract_record(item))
            elif item.kind == ITEM_ENUM:
                if has_serialize_marker(item.attrs):
                    sums.append(self.extract_sum(item))

        logger.debug(
            "%s: %d procedures, %d records, %d sums",
            self.unit.path,
            len(procedures),
            len(records),
            len(sums),
        )
        manifest = Manifest(procedures=procedures, records=records, sums=sums)
        return ExtractionResult(manifest=manifest, diagnostics=self.diagnostics)

    def _report_malformed(self, raw: Any, index: int, error: SyntaxTreeError):
        name = raw.get("name") if isinstance(raw, dict) else None
        declaration = name if isinstance(name, str) else f"item #{index}"
        diagnostic = Diagnostic(
            kind=DiagnosticKind.MALFORMED_DECLARATION,
            message=f"skipped malformed declaration: {error}",
            path=self.unit.path,
            declaration=declaration,
        )
        logger.warning(str(diagnostic))
        self.diagnostics.append(diagnostic)

    def _reader(self, item: ItemNode) -> DirectiveReader:
        return DirectiveReader(self.unit.path, item.name, self.diagnostics)

    def extract_procedure(self, item: ItemNode) -> Optional[ProcedureSpec]:
        """Build a procedure from a callable, or None if it is not an entry point."""
        marker = self._reader(item).read_procedure_marker(item.attrs)
        if marker is None:
            return None

        input_ref = next(
            (p.type for p in item.params if not p.receiver and p.type is not None),
            None,
        )
        output_ref = unwrap_result(item.returns) if item.returns is not None else None

        return ProcedureSpec(
            name=item.name,
            kind=marker.kind,
            input=input_ref,
            output=output_ref,
            source_file=self.unit.path,
            docs=join_docs(item.docs),
            timeout_ms=marker.timeout_ms,
            idempotent=marker.idempotent,
        )

    def _extract_fields(
        self, reader: DirectiveReader, owner: str, nodes: List[FieldNode]
    ) -> List[FieldSpec]:
        fields = []
        for node in nodes:
            directives = reader.read_field(node.attrs, f"{owner}.{node.name}")
            fields.append(
                FieldSpec(
                    name=node.name,
                    type=node.type,
                    rename=directives.rename,
                    skip=directives.skip,
                    has_default=directives.has_default,
                    flatten=directives.flatten,
                    docs=join_docs(node.docs),
                )
            )
        return fields

    def extract_record(self, item: ItemNode) -> RecordSpec:
        reader = self._reader(item)
        container = reader.read_container(item.attrs)
        return RecordSpec(
            name=item.name,
            generics=_type_params(item.generics),
            fields=self._extract_fields(reader, item.name, item.fields),
            tuple_fields=list(item.tuple_fields),
            source_file=self.unit.path,
            docs=join_docs(item.docs),
            rename_all=container.rename_all,
        )

    def _extract_variant(
        self, reader: DirectiveReader, owner: str, node: VariantNode
    ) -> VariantSpec:
        qualified = f"{owner}::{node.name}"
        if node.shape == "struct":
            shape = VariantShape.struct(
                self._extract_fields(reader, qualified, node.fields)
            )
        elif node.shape == "tuple":
            shape = VariantShape.tuple(node.elements)
        else:
            shape = VariantShape.unit()

        return VariantSpec(
            name=node.name,
            shape=shape,
            rename=reader.read_variant_rename(node.attrs, qualified),
            docs=join_docs(node.docs),
        )

    def extract_sum(self, item: ItemNode) -> SumSpec:
        reader = self._reader(item)
        container = reader.read_container(item.attrs)
        variants = [self._extract_variant(reader, item.name, v) for v in item.variants]

        if container.tagging.kind == TaggingKind.INTERNAL:
            for variant in variants:
                elements = variant.shape.elements
                if variant.shape.kind == ShapeKind.TUPLE and len(elements) != 1:
                    reader.report(
                        DiagnosticKind.UNSUPPORTED_SHAPE,
                        f"internally tagged variant {variant.name} has "
                        f"{len(elements)} tuple elements; only single-element "
                        "tuples can carry a tag",
                    )

        return SumSpec(
            name=item.name,
            generics=_type_params(item.generics),
            variants=variants,
            source_file=self.unit.path,
            docs=join_docs(item.docs),
            rename_all=container.rename_all,
            tagging=container.tagging,
        )


def extract_unit(unit: SyntaxUnit) -> ExtractionResult:
    """Extract one syntax unit into a partial manifest."""
    return Extractor(unit).extract()
