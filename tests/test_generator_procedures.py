"""Tests for the procedures map and whole-file output."""

from __future__ import annotations

from rpc_typegen.codegen.core.generator import generate_code
from rpc_typegen.codegen.core.model import (
    FieldSpec,
    Manifest,
    ProcedureKind,
    ProcedureSpec,
    RecordSpec,
    SumSpec,
    Tagging,
    TypeRef,
    VariantShape,
    VariantSpec,
)

HEADER = (
    "// This file is auto-generated by rpc-typegen. Do not edit manually.\n"
    "// Changes will be overwritten on the next generation."
)


def query(name: str, input: TypeRef | None = None, output: TypeRef | None = None, **kwargs) -> ProcedureSpec:
    return ProcedureSpec(name=name, kind=ProcedureKind.QUERY, input=input, output=output, **kwargs)


def mutation(name: str, input: TypeRef | None = None, output: TypeRef | None = None) -> ProcedureSpec:
    return ProcedureSpec(name=name, kind=ProcedureKind.MUTATION, input=input, output=output)


def test_procedure_entries_are_grouped_and_sorted(make_generator) -> None:
    manifest = Manifest(
        procedures=[
            query("search", TypeRef("String"), TypeRef("Vec", (TypeRef("Option", (TypeRef("Item"),)),))),
            mutation("delete_item", TypeRef("u64")),
            query("health"),
        ]
    )

    assert make_generator().generate_procedures(manifest.sorted()) == (
        "export type Procedures = {\n"
        "  queries: {\n"
        "    health: { input: void; output: void };\n"
        "    search: { input: string; output: (Item | null)[] };\n"
        "  };\n"
        "  mutations: {\n"
        "    delete_item: { input: number; output: void };\n"
        "  };\n"
        "};"
    )


def test_empty_groups_render_as_empty_objects(make_generator) -> None:
    manifest = Manifest(procedures=[mutation("reset")])
    output = make_generator().generate_procedures(manifest)
    assert "  queries: {};\n" in output
    assert "    reset: { input: void; output: void };" in output


def test_procedure_docs_precede_entries(make_generator) -> None:
    manifest = Manifest(procedures=[query("ping", docs="Liveness probe.")])
    output = make_generator(preserve_docs=True).generate_procedures(manifest)
    assert "    /** Liveness probe. */\n    ping: { input: void; output: void };" in output


def test_indent_size_is_configurable(make_generator) -> None:
    manifest = Manifest(procedures=[query("ping")])
    output = make_generator(indent_size=4).generate_procedures(manifest)
    assert "    queries: {\n        ping: { input: void; output: void };\n    };" in output


def test_full_file_layout(make_generator) -> None:
    manifest = Manifest(
        procedures=[query("get_user", TypeRef("UserId"), TypeRef("User"))],
        records=[
            RecordSpec(name="User", fields=[FieldSpec("id", TypeRef("UserId"))]),
            RecordSpec(name="UserId", tuple_fields=[TypeRef("u64")]),
        ],
        sums=[SumSpec(name="Role", variants=[VariantSpec("Admin"), VariantSpec("Member")])],
    )

    assert make_generator().generate(manifest) == (
        f"{HEADER}\n"
        "\n"
        "export interface User {\n"
        "  id: UserId;\n"
        "}\n"
        "\n"
        "export type UserId = number;\n"
        "\n"
        'export type Role = "Admin" | "Member";\n'
        "\n"
        "export type Procedures = {\n"
        "  queries: {\n"
        "    get_user: { input: UserId; output: User };\n"
        "  };\n"
        "  mutations: {};\n"
        "};\n"
    )


def test_header_can_be_disabled(make_generator) -> None:
    output = make_generator(header=False).generate(Manifest(procedures=[query("ping")]))
    assert output.startswith("export type Procedures = {")


def test_output_is_independent_of_declaration_order(make_generator) -> None:
    records = [
        RecordSpec(name="B", fields=[FieldSpec("b", TypeRef("u8"))]),
        RecordSpec(name="A", fields=[FieldSpec("a", TypeRef("u8"))]),
    ]
    procedures = [query("zeta"), query("alpha")]
    forward = Manifest(procedures=procedures, records=records)
    backward = Manifest(procedures=procedures[::-1], records=records[::-1])

    generator = make_generator()
    assert generator.generate(forward) == generator.generate(backward)


def test_generate_code_reports_metadata_and_warnings(make_generator) -> None:
    manifest = Manifest(
        procedures=[query("ping"), mutation("reset")],
        records=[
            RecordSpec(name="Dup", fields=[FieldSpec("a", TypeRef("u8"))]),
            RecordSpec(name="Dup", fields=[FieldSpec("b", TypeRef("u8"))]),
        ],
        sums=[
            SumSpec(name="Nothing"),
            SumSpec(
                name="Odd",
                tagging=Tagging.internal("type"),
                variants=[VariantSpec("Pair", VariantShape.tuple([TypeRef("u8"), TypeRef("u8")]))],
            ),
        ],
    )

    result = generate_code(make_generator(), manifest)

    assert result.success
    assert result.code.endswith("};\n")
    assert result.metadata["language"] == "typescript"
    assert result.metadata["query_count"] == 1
    assert result.metadata["mutation_count"] == 1
    assert result.metadata["record_count"] == 2
    assert result.metadata["sum_count"] == 2
    assert "Type 'Dup' is declared 2 times" in result.warnings
    assert "Enum 'Nothing' has no variants" in result.warnings
    assert any("Odd::Pair" in w for w in result.warnings)
    assert "export type Nothing = never;" in result.code
