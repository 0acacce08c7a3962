"""Tests for syntax-tree decoding and declaration extraction."""

from __future__ import annotations

from typing import Any

import pytest

from rpc_typegen.codegen.core.diagnostics import (
    DiagnosticKind,
    FrontendError,
    SyntaxTreeError,
)
from rpc_typegen.codegen.core.model import (
    ProcedureKind,
    ShapeKind,
    TaggingKind,
    TypeRef,
)
from rpc_typegen.codegen.core.naming import RenameRule
from rpc_typegen.codegen.frontend import (
    extract_unit,
    parse_duration,
    parse_item,
    parse_type,
    parse_unit,
    unwrap_result,
)
from rpc_typegen.codegen.frontend.extract import join_docs
from rpc_typegen.codegen.frontend.syntax import SyntaxUnit

SERIALIZE = {"path": "derive", "args": ["Debug", "Serialize"]}


def serde(*args: Any) -> dict[str, Any]:
    return {"path": "serde", "args": list(args)}


def extract(*items: dict[str, Any]):
    return extract_unit(SyntaxUnit(path="src/api.rs", items=list(items)))


def test_parse_type_accepts_bare_names_and_trees() -> None:
    assert parse_type("String") == TypeRef("String")
    parsed = parse_type({"name": "Vec", "generics": [{"name": "Option", "generics": ["u8"]}]})
    assert parsed == TypeRef("Vec", (TypeRef("Option", (TypeRef("u8"),)),))
    assert parsed.display() == "Vec<Option<u8>>"

    with pytest.raises(SyntaxTreeError):
        parse_type({"generics": []})


def test_parse_type_drops_lifetime_arguments() -> None:
    parsed = parse_type({"name": "Cow", "generics": ["'a", "str"]})
    assert parsed == TypeRef("Cow", (TypeRef("str"),))

    nested = parse_type({"name": "Vec", "generics": [{"name": "Cow", "generics": [{"name": "'static"}, "str"]}]})
    assert nested.display() == "Vec<Cow<str>>"


def test_parse_item_rejects_mixed_record_fields() -> None:
    with pytest.raises(SyntaxTreeError):
        parse_item(
            {
                "kind": "struct",
                "name": "Broken",
                "fields": [{"name": "a", "type": "u8"}],
                "tuple_fields": ["u8"],
            }
        )


def test_parse_unit_validates_document_shape() -> None:
    assert parse_unit([], "a.json").items == []
    assert parse_unit({"path": "src/lib.rs", "items": []}, "a.json").path == "src/lib.rs"

    with pytest.raises(FrontendError) as excinfo:
        parse_unit({"items": {}}, "a.json")
    assert excinfo.value.path == "a.json"


@pytest.mark.parametrize(
    ("text", "seconds"),
    [("30s", 30), ("5m", 300), ("2h", 7200), ("1d", 86400)],
)
def test_parse_duration(text: str, seconds: int) -> None:
    assert parse_duration(text) == seconds


@pytest.mark.parametrize("text", ["0s", "10", "5w", "m5", ""])
def test_parse_duration_rejects_bad_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(text)


def test_join_docs_strips_single_leading_space() -> None:
    assert join_docs([" Fetch a user.", "  indented", "tight"]) == "Fetch a user.\n indented\ntight"
    assert join_docs([]) is None


def test_unwrap_result_keeps_success_type() -> None:
    assert unwrap_result(TypeRef("Result", (TypeRef("User"), TypeRef("Error")))) == TypeRef("User")
    assert unwrap_result(TypeRef("User")) == TypeRef("User")


def test_procedure_extraction() -> None:
    result = extract(
        {
            "kind": "fn",
            "name": "get_user",
            "attrs": [{"path": "rpc_query", "args": [{"key": "timeout", "value": "30s"}, "idempotent"]}],
            "docs": [" Fetch a user."],
            "params": ["&self", {"pattern": "id", "type": "u64"}, {"pattern": "ctx", "type": "Ctx"}],
            "returns": {"name": "Result", "generics": ["User", "ApiError"]},
        },
        {
            "kind": "fn",
            "name": "reset",
            "attrs": ["rpc::rpc_mutation"],
        },
        {"kind": "fn", "name": "helper", "returns": "u8"},
    )

    procedures = {p.name: p for p in result.manifest.procedures}
    assert set(procedures) == {"get_user", "reset"}

    get_user = procedures["get_user"]
    assert get_user.kind is ProcedureKind.QUERY
    assert get_user.input == TypeRef("u64")
    assert get_user.output == TypeRef("User")
    assert get_user.timeout_ms == 30000
    assert get_user.idempotent is True
    assert get_user.docs == "Fetch a user."
    assert get_user.source_file == "src/api.rs"

    reset = procedures["reset"]
    assert reset.kind is ProcedureKind.MUTATION
    assert reset.input is None
    assert reset.output is None
    assert result.diagnostics == []


def test_marker_problems_become_diagnostics() -> None:
    result = extract(
        {
            "kind": "fn",
            "name": "slow",
            "attrs": [
                {
                    "path": "rpc_query",
                    "args": [
                        {"key": "timeout", "value": "soon"},
                        {"key": "cache", "value": "1m"},
                        "retries",
                    ],
                }
            ],
        }
    )

    assert len(result.manifest.procedures) == 1
    assert result.manifest.procedures[0].timeout_ms is None
    kinds = [d.kind for d in result.diagnostics]
    assert kinds == [DiagnosticKind.MALFORMED_DIRECTIVE, DiagnosticKind.UNRECOGNIZED_DIRECTIVE]
    assert all(d.declaration == "slow" for d in result.diagnostics)


def test_record_extraction_reads_field_directives() -> None:
    result = extract(
        {
            "kind": "struct",
            "name": "User",
            "attrs": [SERIALIZE, serde({"key": "rename_all", "value": "camelCase"})],
            "generics": ["'a", "T"],
            "fields": [
                {"name": "first_name", "type": "String"},
                {"name": "id", "type": "u64", "attrs": [serde({"key": "rename", "value": "userId"})]},
                {"name": "secret", "type": "String", "attrs": [serde("skip")]},
                {"name": "nickname", "type": {"name": "Option", "generics": ["String"]}, "attrs": [serde("default")]},
                {"name": "meta", "type": "Meta", "attrs": [serde("flatten")]},
            ],
        },
        {"kind": "struct", "name": "Internal", "fields": [{"name": "x", "type": "u8"}]},
    )

    assert [r.name for r in result.manifest.records] == ["User"]
    record = result.manifest.records[0]
    assert record.generics == ("T",)
    assert record.rename_all is RenameRule.CAMEL_CASE

    fields = {f.name: f for f in record.fields}
    assert fields["id"].rename == "userId"
    assert fields["secret"].skip
    assert fields["nickname"].has_default
    assert fields["meta"].flatten
    assert [f.name for f in record.visible_fields()] == ["first_name", "id", "nickname", "meta"]


def test_tuple_record_extraction() -> None:
    result = extract(
        {"kind": "struct", "name": "UserId", "attrs": [SERIALIZE], "tuple_fields": ["u64"]}
    )
    record = result.manifest.records[0]
    assert record.is_tuple
    assert record.is_newtype
    assert record.tuple_fields == (TypeRef("u64"),)


def test_unknown_rename_convention_falls_back_with_diagnostic() -> None:
    result = extract(
        {
            "kind": "struct",
            "name": "Point",
            "attrs": [SERIALIZE, serde({"key": "rename_all", "value": "Title Case"})],
            "fields": [{"name": "x_pos", "type": "f64"}],
        }
    )

    assert result.manifest.records[0].rename_all is None
    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.kind is DiagnosticKind.UNRECOGNIZED_DIRECTIVE
    assert str(diagnostic) == "src/api.rs (Point): unknown rename_all convention 'Title Case'"


def test_malformed_rename_value_is_reported() -> None:
    result = extract(
        {
            "kind": "struct",
            "name": "Point",
            "attrs": [SERIALIZE],
            "fields": [{"name": "x", "type": "f64", "attrs": [serde({"key": "rename", "value": 5})]}],
        }
    )

    assert result.manifest.records[0].fields[0].rename is None
    assert result.diagnostics[0].kind is DiagnosticKind.MALFORMED_DIRECTIVE


@pytest.mark.parametrize(
    ("args", "kind", "tag", "content"),
    [
        ([], TaggingKind.EXTERNAL, None, None),
        ([{"key": "tag", "value": "type"}], TaggingKind.INTERNAL, "type", None),
        (
            [{"key": "tag", "value": "t"}, {"key": "content", "value": "c"}],
            TaggingKind.ADJACENT,
            "t",
            "c",
        ),
        (["untagged", {"key": "tag", "value": "type"}], TaggingKind.UNTAGGED, None, None),
    ],
)
def test_sum_tagging(args: list[Any], kind: TaggingKind, tag: str | None, content: str | None) -> None:
    result = extract(
        {
            "kind": "enum",
            "name": "Event",
            "attrs": [SERIALIZE, serde(*args)],
            "variants": [{"name": "Ping"}],
        }
    )
    tagging = result.manifest.sums[0].tagging
    assert tagging.kind is kind
    assert tagging.tag == tag
    assert tagging.content == content


def test_content_without_tag_is_reported() -> None:
    result = extract(
        {
            "kind": "enum",
            "name": "Event",
            "attrs": [SERIALIZE, serde({"key": "content", "value": "c"})],
            "variants": [{"name": "Ping"}],
        }
    )
    assert result.manifest.sums[0].tagging.kind is TaggingKind.EXTERNAL
    assert result.diagnostics[0].kind is DiagnosticKind.MALFORMED_DIRECTIVE


def test_variant_shapes_and_renames() -> None:
    result = extract(
        {
            "kind": "enum",
            "name": "Shape",
            "attrs": [SERIALIZE],
            "variants": [
                {"name": "Empty", "attrs": [serde({"key": "rename", "value": "none"})], "docs": [" Nothing."]},
                {"name": "Circle", "fields": [{"name": "radius", "type": "f64"}]},
                {"name": "Pair", "elements": ["u8", "u8"]},
            ],
        }
    )

    variants = {v.name: v for v in result.manifest.sums[0].variants}
    assert variants["Empty"].shape.kind is ShapeKind.UNIT
    assert variants["Empty"].rename == "none"
    assert variants["Empty"].docs == "Nothing."
    assert variants["Circle"].shape.kind is ShapeKind.STRUCT
    assert variants["Circle"].shape.fields[0].name == "radius"
    assert variants["Pair"].shape.elements == (TypeRef("u8"), TypeRef("u8"))


def test_malformed_declaration_is_skipped() -> None:
    result = extract(
        {"kind": "struct", "name": "Broken", "attrs": [SERIALIZE], "fields": [{"name": "a"}]},
        {"kind": "struct", "name": "Fine", "attrs": [SERIALIZE], "fields": [{"name": "a", "type": "u8"}]},
        "not a node",
    )

    assert [r.name for r in result.manifest.records] == ["Fine"]
    assert [d.declaration for d in result.diagnostics] == ["Broken", "item #2"]
    assert all(d.kind is DiagnosticKind.MALFORMED_DECLARATION for d in result.diagnostics)


def test_internally_tagged_multi_element_tuple_is_reported() -> None:
    result = extract(
        {
            "kind": "enum",
            "name": "Message",
            "attrs": [SERIALIZE, serde({"key": "tag", "value": "type"})],
            "variants": [
                {"name": "Wrapped", "elements": ["Payload"]},
                {"name": "Pair", "elements": ["u8", "u8"]},
            ],
        }
    )

    assert len(result.manifest.sums[0].variants) == 2
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNSUPPORTED_SHAPE]
    assert str(result.diagnostics[0]) == (
        "src/api.rs (Message): internally tagged variant Pair has 2 tuple elements; "
        "only single-element tuples can carry a tag"
    )


def test_externally_tagged_tuples_are_not_reported() -> None:
    result = extract(
        {
            "kind": "enum",
            "name": "Message",
            "attrs": [SERIALIZE],
            "variants": [{"name": "Pair", "elements": ["u8", "u8"]}],
        }
    )
    assert result.diagnostics == []
