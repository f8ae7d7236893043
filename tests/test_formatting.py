"""Tests for apicheck.formatting."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from apicheck.errors import UnsupportedConstructError
from apicheck.formatting import format_default_value, format_member_id, format_type_id, format_type_name
from apicheck.metadata.descriptors import ParameterDescriptor, TypeRef
from apicheck.models import (
    BaselineKind,
    BaselineVisibility,
    GenericConstraintBaseline,
    MemberBaseline,
    MemberBaselineKind,
    ParameterBaseline,
    TypeBaseline,
)


def _default(namespace: str, name: str, value: Any, *, value_type: bool = False) -> str:
    parameter = ParameterDescriptor(
        name="p",
        type=TypeRef.named(namespace, name, is_value_type=value_type),
        is_optional=True,
        has_default=True,
        default_value=value,
    )
    return format_default_value(parameter)


@pytest.mark.parametrize(
    ("name", "value", "expected"),
    [
        ("String", "hello", '"hello"'),
        ("Char", "c", "'c'"),
        ("Boolean", True, "True"),
        ("Boolean", False, "False"),
        ("Int32", -4, "-4"),
        ("UInt64", 17, "17"),
        ("Double", 19, "19"),
        ("Double", 2.5, "2.5"),
        ("Single", 21.0, "21"),
        ("Decimal", Decimal("23.0"), "23.0"),
        ("Double", 1e20, "1E+20"),
        ("Double", 1.5e-07, "1.5E-07"),
        ("Decimal", 1.25, "1.25"),
    ],
)
def test_default_literals(name: str, value: Any, expected: str) -> None:
    assert _default("System", name, value) == expected


def test_missing_default_depends_on_value_type() -> None:
    assert _default("System", "String", None) == "null"
    assert _default("System", "Guid", None, value_type=True) == "default(System.Guid)"


@pytest.mark.parametrize(
    ("name", "value"),
    [("Guid", "00000000-0000-0000-0000-000000000000"), ("Int32", "3"), ("Boolean", 1)],
)
def test_unrecognised_defaults_raise(name: str, value: Any) -> None:
    with pytest.raises(UnsupportedConstructError, match="Unsupported default value type"):
        _default("System", name, value)


def test_type_name_with_nested_generic_arguments() -> None:
    inner = TypeRef.named("Sample", "Inner", declaring=TypeRef.named("Sample", "Outer"))
    ref = TypeRef.named(
        "System.Collections.Generic",
        "Dictionary",
        arguments=(inner, TypeRef.array_of(TypeRef.generic_parameter("T"), 2)),
    )

    assert format_type_name(ref) == "System.Collections.Generic.Dictionary<Sample.Outer+Inner, T[,]>"


def test_type_id_modifiers_apply_to_classes_only() -> None:
    record = TypeBaseline(
        name="Sample.Pair<TKey, TValue>",
        kind=BaselineKind.STRUCT,
        visibility=BaselineVisibility.PUBLIC,
        sealed=True,
        implemented_interfaces=["Sample.IPair<TKey, TValue>"],
        generic_constraints=[GenericConstraintBaseline(parameter_name="TValue", new=True)],
    )

    assert format_type_id(record) == (
        "public struct Sample.Pair<TKey, TValue> : Sample.IPair<TKey, TValue> where TValue : new()"
    )


def test_member_id_modifier_order() -> None:
    member = MemberBaseline(
        kind=MemberBaselineKind.METHOD,
        name="Run",
        visibility=BaselineVisibility.PROTECTED_INTERNAL,
        static=False,
        abstract=True,
        override=True,
        virtual=True,
        return_type="System.Int32",
        parameters=[ParameterBaseline(name="count", type="System.Int32", default_value="1")],
    )

    assert format_member_id(member) == "protected internal abstract override System.Int32 Run(System.Int32 count = 1)"


def test_virtual_final_methods_render_without_modifier() -> None:
    member = MemberBaseline(
        kind=MemberBaselineKind.METHOD,
        name="Dispose",
        visibility=BaselineVisibility.PUBLIC,
        virtual=True,
        sealed=True,
        return_type="System.Void",
    )

    assert format_member_id(member) == "public System.Void Dispose()"
