"""
TypeScript code generator implementation.

Renders a manifest into a single TypeScript declarations file: interfaces
or aliases for records, discriminated unions for sum types, and the
``Procedures`` map.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.model import (
    FieldSpec,
    Manifest,
    ProcedureSpec,
    RecordSpec,
    ShapeKind,
    SumSpec,
    TaggingKind,
    VariantSpec,
)
from ...core.naming import FieldNaming, RenameRule
from ...core.templates import format_jsdoc, ts_string
from .naming import field_name, property_key, variant_name
from .types import TypeScriptTypeMapper, wrap_compound

TOOL_NAME = "rpc-typegen"
BRAND_KEY = "__brand"


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript type declarations."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize TypeScript generator with configuration."""
        super().__init__(config)

        self.indent = " " * self.config.indent_size
        self.preserve_docs = self.config.preserve_docs
        self.branded_newtypes = self.config.branded_newtypes
        self.field_naming = (
            FieldNaming.parse(self.config.field_naming) or FieldNaming.PRESERVE
        )

        self.type_mapper = TypeScriptTypeMapper.from_config(
            self.config.type_overrides, self.config.bigint_types
        )

    def get_template_directory(self) -> Optional[Path]:
        """Return the TypeScript templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    @property
    def language_name(self) -> str:
        return "typescript"

    @property
    def file_extension(self) -> str:
        return ".ts"

    def generate(self, manifest: Manifest) -> str:
        """
        Generate the complete types file.

        Records come first, then sum types, then the procedures map, each
        group in name order.

        Args:
            manifest: Manifest to render

        Returns:
            TypeScript source ending in a newline
        """
        manifest = manifest.sorted()
        blocks: List[str] = []

        if self.config.header:
            blocks.append(self.render_template("header.ts.j2", {"tool_name": TOOL_NAME}))

        for record in manifest.records:
            blocks.append(self.generate_record(record))

        for sum_spec in manifest.sums:
            blocks.append(self.generate_sum(sum_spec))

        blocks.append(self.generate_procedures(manifest))

        return "\n\n".join(block.rstrip() for block in blocks) + "\n"

    # Shared helpers

    def _docs(self, text: Optional[str], indent: str = "") -> str:
        if not self.preserve_docs:
            return ""
        return format_jsdoc(text, indent)

    def _type_params(self, generics) -> str:
        return f"<{', '.join(generics)}>" if generics else ""

    def _field_type(self, spec: FieldSpec) -> str:
        return self.type_mapper.map_type(spec.type)

    def _is_optional(self, spec: FieldSpec) -> bool:
        return spec.has_default and self.type_mapper.is_optional(spec.type)

    def _inline_property(self, spec: FieldSpec, rename_all: Optional[RenameRule]) -> str:
        key = property_key(field_name(spec, rename_all, self.field_naming))
        marker = "?" if self._is_optional(spec) else ""
        return f"{key}{marker}: {self._field_type(spec)}"

    def _object_shape(
        self,
        fields: List[FieldSpec],
        rename_all: Optional[RenameRule] = None,
        leading: Optional[List[str]] = None,
    ) -> str:
        """
        Render fields as an inline object type.

        Plain fields form ``{ a: T; b: U }``; flattened fields are joined
        on with ``&``. With only flattened fields (and no leading members)
        the result is a bare intersection.
        """
        visible = [f for f in fields if not f.skip]
        members = list(leading or [])
        members.extend(
            self._inline_property(f, rename_all) for f in visible if not f.flatten
        )
        flattened = [
            wrap_compound(self._field_type(f)) for f in visible if f.flatten
        ]

        if not members:
            return " & ".join(flattened) if flattened else "{}"

        obj = "{ " + "; ".join(members) + " }"
        return " & ".join([obj] + flattened)

    # Records

    def generate_record(self, record: RecordSpec) -> str:
        """Render a record as an interface or type alias."""
        docs = self._docs(record.docs)
        type_params = self._type_params(record.generics)

        if record.is_tuple:
            return self._render_alias(
                record.name, type_params, self._tuple_record_body(record), docs
            )

        visible = record.visible_fields()
        if any(f.flatten for f in visible):
            body = self._object_shape(visible, record.rename_all)
            return self._render_alias(record.name, type_params, body, docs)

        properties = []
        for spec in visible:
            properties.append(
                {
                    "docs": self._docs(spec.docs, self.indent),
                    "key": property_key(
                        field_name(spec, record.rename_all, self.field_naming)
                    ),
                    "optional": self._is_optional(spec),
                    "type": self._field_type(spec),
                }
            )

        context = {
            "docs": docs,
            "name": record.name,
            "type_params": type_params,
            "properties": properties,
            "indent": self.indent,
        }
        return self.render_template("interface.ts.j2", context)

    def _tuple_record_body(self, record: RecordSpec) -> str:
        elements = [self.type_mapper.map_type(t) for t in record.tuple_fields]
        if len(elements) != 1:
            return "[" + ", ".join(elements) + "]"

        inner = elements[0]
        if not self.branded_newtypes:
            return inner
        brand = ts_string(record.name)
        return f"{wrap_compound(inner)} & {{ readonly {BRAND_KEY}: {brand} }}"

    def _render_alias(self, name: str, type_params: str, body: str, docs: str) -> str:
        context = {
            "docs": docs,
            "name": name,
            "type_params": type_params,
            "body": body,
        }
        return self.render_template("alias.ts.j2", context)

    # Sum types

    def generate_sum(self, sum_spec: SumSpec) -> str:
        """Render a sum type as a union alias."""
        members = [self.render_variant(sum_spec, v) for v in sum_spec.variants]
        body = " | ".join(members) if members else "never"
        return self._render_alias(
            sum_spec.name,
            self._type_params(sum_spec.generics),
            body,
            self._sum_docs(sum_spec),
        )

    def _sum_docs(self, sum_spec: SumSpec) -> str:
        if not self.preserve_docs:
            return ""

        lines = sum_spec.docs.split("\n") if sum_spec.docs else []
        variant_lines = []
        for variant in sum_spec.variants:
            if not variant.docs:
                continue
            literal = ts_string(variant_name(variant, sum_spec.rename_all))
            summary = " ".join(line.strip() for line in variant.docs.split("\n"))
            variant_lines.append(f"- `{literal}`: {summary.strip()}")

        if lines and variant_lines:
            lines.append("")
        return format_jsdoc("\n".join(lines + variant_lines))

    def render_variant(self, sum_spec: SumSpec, variant: VariantSpec) -> str:
        """
        Render one union member according to the sum type's tagging.

        Fields inside struct variants follow field renames and the global
        naming policy; the container convention applies to variant names.
        """
        tagging = sum_spec.tagging
        name = variant_name(variant, sum_spec.rename_all)
        literal = ts_string(name)
        shape = variant.shape

        if tagging.kind == TaggingKind.EXTERNAL:
            if shape.kind == ShapeKind.UNIT:
                return literal
            return f"{{ {property_key(name)}: {self._payload(variant)} }}"

        if tagging.kind == TaggingKind.INTERNAL:
            tag_member = f"{property_key(tagging.tag)}: {literal}"
            if shape.kind == ShapeKind.UNIT:
                return f"{{ {tag_member} }}"
            if shape.kind == ShapeKind.STRUCT:
                return self._object_shape(list(shape.fields), leading=[tag_member])
            tag_object = f"{{ {tag_member} }}"
            if not shape.elements:
                return tag_object
            return f"{tag_object} & {wrap_compound(self._payload(variant))}"

        if tagging.kind == TaggingKind.ADJACENT:
            tag_member = f"{property_key(tagging.tag)}: {literal}"
            if shape.kind == ShapeKind.UNIT:
                return f"{{ {tag_member} }}"
            content_key = property_key(tagging.content)
            return f"{{ {tag_member}; {content_key}: {self._payload(variant)} }}"

        # Untagged
        if shape.kind == ShapeKind.UNIT:
            return "null"
        return self._payload(variant)

    def _payload(self, variant: VariantSpec) -> str:
        """Data carried by a tuple or struct variant, without any tag."""
        shape = variant.shape
        if shape.kind == ShapeKind.STRUCT:
            return self._object_shape(list(shape.fields))
        elements = [self.type_mapper.map_type(t) for t in shape.elements]
        if len(elements) == 1:
            return elements[0]
        return "[" + ", ".join(elements) + "]"

    # Procedures

    def _procedure_entry(self, proc: ProcedureSpec) -> Dict[str, Any]:
        return {
            "docs": self._docs(proc.docs, self.indent * 2),
            "key": property_key(proc.name),
            "input": self.type_mapper.map_optional(proc.input),
            "output": self.type_mapper.map_optional(proc.output),
        }

    def generate_procedures(self, manifest: Manifest) -> str:
        """Render the ``Procedures`` map grouped into queries and mutations."""
        context = {
            "queries": [self._procedure_entry(p) for p in manifest.queries()],
            "mutations": [self._procedure_entry(p) for p in manifest.mutations()],
            "indent": self.indent,
        }
        return self.render_template("procedures.ts.j2", context)


def create_typescript_generator(
    config: Optional[GeneratorConfig] = None, **overrides: Any
) -> TypeScriptGenerator:
    """
    Create a TypeScript generator.

    Args:
        config: Base configuration (defaults when omitted)
        **overrides: Individual GeneratorConfig fields to replace

    Returns:
        Configured TypeScriptGenerator
    """
    config = config or GeneratorConfig()
    if overrides:
        values = {**config.__dict__, **overrides}
        config = GeneratorConfig(**values)
    return TypeScriptGenerator(config)
