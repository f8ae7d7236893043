"""Tests for apicheck.metadata.typenames."""

from __future__ import annotations

import pytest

from apicheck.errors import ModuleFormatError
from apicheck.formatting import format_type_name
from apicheck.metadata.descriptors import TypeRef, TypeRefKind
from apicheck.metadata.typenames import parse_type_name


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("int", "System.Int32"),
        ("System.String", "System.String"),
        ("Scenarios.Outer+Inner+Leaf", "Scenarios.Outer+Inner+Leaf"),
        ("System.Collections.Generic.IDictionary<string, int[]>",
         "System.Collections.Generic.IDictionary<System.String, System.Int32[]>"),
        ("System.Int32[,]", "System.Int32[,]"),
        ("System.Action< System.Func<bool> >", "System.Action<System.Func<System.Boolean>>"),
    ],
)
def test_parse_and_render(text: str, expected: str) -> None:
    assert format_type_name(parse_type_name(text)) == expected


def test_generic_parameters_in_scope() -> None:
    ref = parse_type_name("System.Collections.Generic.List<T>", generic_scope=["T"])

    assert ref.arguments == (TypeRef.generic_parameter("T"),)
    assert ref.arguments[0].kind is TypeRefKind.GENERIC_PARAMETER


def test_names_out_of_scope_are_types() -> None:
    ref = parse_type_name("T")

    assert ref.kind is TypeRefKind.NAMED
    assert ref.namespace == ""


def test_nested_reference_structure() -> None:
    ref = parse_type_name("Scenarios.Outer+Inner")

    assert ref.name == "Inner"
    assert ref.namespace == "Scenarios"
    assert ref.declaring == TypeRef.named("Scenarios", "Outer")


def test_resolver_sees_every_named_reference() -> None:
    seen: list[str] = []

    def resolve(ref: TypeRef) -> TypeRef:
        seen.append(ref.name)
        return ref

    parse_type_name("Sample.Map<Sample.Key, int>", resolve=resolve)

    assert seen == ["Key", "Int32", "Map"]


@pytest.mark.parametrize("text", ["", "List<int", "int]", "Outer+", "System.String extra", "int$"])
def test_malformed_expressions_raise(text: str) -> None:
    with pytest.raises(ModuleFormatError):
        parse_type_name(text)
