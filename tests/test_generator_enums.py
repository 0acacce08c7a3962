"""Tests for sum-type rendering under every tagging strategy."""

from __future__ import annotations

import pytest

from rpc_typegen.codegen.core.model import (
    FieldSpec,
    SumSpec,
    Tagging,
    TypeRef,
    VariantShape,
    VariantSpec,
)
from rpc_typegen.codegen.core.naming import RenameRule

UNIT = VariantSpec("Active")
NEWTYPE = VariantSpec("Named", VariantShape.tuple([TypeRef("String")]))
STRUCT = VariantSpec("Circle", VariantShape.struct([FieldSpec("radius", TypeRef("f64"))]))


@pytest.mark.parametrize(
    ("tagging", "variant", "expected"),
    [
        (Tagging.external(), UNIT, '"Active"'),
        (Tagging.external(), NEWTYPE, "{ Named: string }"),
        (Tagging.external(), STRUCT, "{ Circle: { radius: number } }"),
        (Tagging.internal("type"), UNIT, '{ type: "Active" }'),
        (Tagging.internal("type"), NEWTYPE, '{ type: "Named" } & string'),
        (Tagging.internal("type"), STRUCT, '{ type: "Circle"; radius: number }'),
        (Tagging.adjacent("t", "c"), UNIT, '{ t: "Active" }'),
        (Tagging.adjacent("t", "c"), NEWTYPE, '{ t: "Named"; c: string }'),
        (Tagging.adjacent("t", "c"), STRUCT, '{ t: "Circle"; c: { radius: number } }'),
        (Tagging.untagged(), UNIT, "null"),
        (Tagging.untagged(), NEWTYPE, "string"),
        (Tagging.untagged(), STRUCT, "{ radius: number }"),
    ],
)
def test_tagging_table(make_generator, tagging: Tagging, variant: VariantSpec, expected: str) -> None:
    sum_spec = SumSpec(name="Value", variants=[variant], tagging=tagging)
    assert make_generator().render_variant(sum_spec, variant) == expected


def test_internally_tagged_shape_union(make_generator) -> None:
    shape = SumSpec(
        name="Shape",
        tagging=Tagging.internal("type"),
        variants=[
            VariantSpec("Circle", VariantShape.struct([FieldSpec("radius", TypeRef("f64"))])),
            VariantSpec(
                "Rect",
                VariantShape.struct([FieldSpec("w", TypeRef("f64")), FieldSpec("h", TypeRef("f64"))]),
            ),
        ],
    )

    assert make_generator().generate_sum(shape) == (
        'export type Shape = { type: "Circle"; radius: number } | { type: "Rect"; w: number; h: number };'
    )


def test_external_multi_element_tuple(make_generator) -> None:
    variant = VariantSpec("Move", VariantShape.tuple([TypeRef("i32"), TypeRef("i32")]))
    sum_spec = SumSpec(name="Command", variants=[variant])
    assert make_generator().render_variant(sum_spec, variant) == "{ Move: [number, number] }"


def test_internal_tuple_edge_cases(make_generator) -> None:
    empty = VariantSpec("Nothing", VariantShape.tuple([]))
    pair = VariantSpec("Pair", VariantShape.tuple([TypeRef("u8"), TypeRef("u8")]))
    optional = VariantSpec("Maybe", VariantShape.tuple([TypeRef("Option", (TypeRef("u8"),))]))
    sum_spec = SumSpec(name="Odd", variants=[empty, pair, optional], tagging=Tagging.internal("kind"))
    generator = make_generator()

    assert generator.render_variant(sum_spec, empty) == '{ kind: "Nothing" }'
    assert generator.render_variant(sum_spec, pair) == '{ kind: "Pair" } & [number, number]'
    assert generator.render_variant(sum_spec, optional) == '{ kind: "Maybe" } & (number | null)'


def test_flattened_fields_inside_struct_variants(make_generator) -> None:
    variant = VariantSpec(
        "Created",
        VariantShape.struct(
            [FieldSpec("id", TypeRef("u64")), FieldSpec("meta", TypeRef("Meta"), flatten=True)]
        ),
    )
    external = SumSpec(name="Event", variants=[variant])
    internal = SumSpec(name="Event", variants=[variant], tagging=Tagging.internal("type"))
    generator = make_generator()

    assert generator.render_variant(external, variant) == "{ Created: { id: number } & Meta }"
    assert generator.render_variant(internal, variant) == '{ type: "Created"; id: number } & Meta'


def test_empty_struct_variant(make_generator) -> None:
    variant = VariantSpec("Blank", VariantShape.struct([]))
    sum_spec = SumSpec(name="Form", variants=[variant])
    assert make_generator().render_variant(sum_spec, variant) == "{ Blank: {} }"


def test_variant_renames(make_generator) -> None:
    sum_spec = SumSpec(
        name="Status",
        rename_all=RenameRule.SNAKE_CASE,
        variants=[
            VariantSpec("InProgress"),
            VariantSpec("Done", rename="finished"),
            VariantSpec(
                "Failed",
                VariantShape.struct([FieldSpec("error_code", TypeRef("u16"))]),
            ),
        ],
    )

    assert make_generator().generate_sum(sum_spec) == (
        'export type Status = "in_progress" | "finished" | { failed: { error_code: number } };'
    )
    camel = make_generator(field_naming="camelCase").generate_sum(sum_spec)
    assert "{ failed: { errorCode: number } }" in camel


def test_empty_sum_is_never(make_generator) -> None:
    assert make_generator().generate_sum(SumSpec(name="Void")) == "export type Void = never;"


def test_generic_sum(make_generator) -> None:
    sum_spec = SumSpec(
        name="Either",
        generics=["L", "R"],
        variants=[
            VariantSpec("Left", VariantShape.tuple([TypeRef("L")])),
            VariantSpec("Right", VariantShape.tuple([TypeRef("R")])),
        ],
    )
    assert make_generator().generate_sum(sum_spec) == (
        "export type Either<L, R> = { Left: L } | { Right: R };"
    )


def test_sum_docs_list_documented_variants(make_generator) -> None:
    sum_spec = SumSpec(
        name="Status",
        docs="Lifecycle state.",
        rename_all=RenameRule.LOWERCASE,
        variants=[
            VariantSpec("Active", docs="Currently running."),
            VariantSpec("Paused"),
            VariantSpec("Stopped", docs="Finished for good."),
        ],
    )

    assert make_generator(preserve_docs=True).generate_sum(sum_spec) == (
        "/**\n"
        " * Lifecycle state.\n"
        " *\n"
        ' * - `"active"`: Currently running.\n'
        ' * - `"stopped"`: Finished for good.\n'
        " */\n"
        'export type Status = "active" | "paused" | "stopped";'
    )


def test_tag_key_that_is_not_an_identifier_is_quoted(make_generator) -> None:
    sum_spec = SumSpec(name="Msg", variants=[UNIT], tagging=Tagging.internal("@type"))
    assert make_generator().render_variant(sum_spec, UNIT) == '{ "@type": "Active" }'
