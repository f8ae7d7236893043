"""Tests for apicheck.baseline.members."""

from __future__ import annotations

import pytest

from apicheck.baseline.members import MemberClassifier
from apicheck.errors import UnsupportedConstructError
from apicheck.metadata.descriptors import MemberKind
from apicheck.models import BaselineParameterDirection, MemberBaselineKind
from tests._fixtures.module_builder import ModuleBuilder

BASE_AND_DERIVED = """
    module: Sample
    types:
      - name: Sample.Base
        access: public
        members:
          - {kind: method, name: F, access: public, virtual: true}
          - {kind: method, name: G, access: public}
      - name: Sample.Derived
        access: public
        base: Sample.Base
        members:
          - {kind: method, name: F, access: public, override: true}
          - {kind: method, name: G, access: public}
          - kind: method
            name: G
            access: public
            parameters:
              - {name: value, type: int}
"""


def test_override_of_module_virtual(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(BASE_AND_DERIVED)
    derived = document.types[1]

    method = next(member for member in derived.members if member.name == "F")

    assert method.id == "public override System.Void F()"
    assert method.override is True
    assert method.abstract is False


def test_hiding_requires_identical_structural_signature(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(BASE_AND_DERIVED)
    derived = document.types[1]

    hiding = [member for member in derived.members if member.name == "G"]

    assert [member.new for member in hiding] == [True, False]
    assert hiding[0].id == "public new System.Void G()"
    assert hiding[1].id == "public System.Void G(System.Int32 value)"


def test_hide_by_name_methods_are_never_marked_new(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.Base
            access: public
            members:
              - {kind: method, name: G, access: public}
          - name: Sample.Derived
            access: public
            base: Sample.Base
            members:
              - {kind: method, name: G, access: public, hide_by_name: true}
        """
    )

    assert document.types[1].members[0].new is False


def test_explicit_and_implemented_interface_are_exclusive(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.IRunner
            kind: interface
            access: public
            members:
              - {kind: method, name: Run}
              - {kind: method, name: Stop}
          - name: Sample.Runner
            access: public
            interfaces: [Sample.IRunner]
            members:
              - {kind: method, name: Run, explicit: Sample.IRunner}
              - {kind: method, name: Stop, access: public}
              - {kind: method, name: Other, access: public}
        """
    )
    members = {member.name: member for member in document.types[1].members}

    explicit = members["Sample.IRunner.Run"]
    assert explicit.explicit_interface == "Sample.IRunner"
    assert explicit.implemented_interface == "Sample.IRunner"
    assert explicit.id == "System.Void Sample.IRunner.Run()"

    implicit = members["Stop"]
    assert implicit.explicit_interface is None
    assert implicit.implemented_interface == "Sample.IRunner"
    assert implicit.id == "public System.Void Stop()"

    unrelated = members["Other"]
    assert unrelated.explicit_interface is None
    assert unrelated.implemented_interface is None


def test_explicit_names_use_canonical_interface_names(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.IGen
            kind: interface
            access: public
            generic_parameters: [T]
            members:
              - {kind: method, name: Get, returns: T}
          - name: Sample.Holder
            access: public
            interfaces: ["Sample.IGen<System.Int32>"]
            members:
              - {kind: method, name: Get, returns: int, explicit: "Sample.IGen< int >"}
        """
    )
    get = document.types[1].members[0]

    assert get.name == "Sample.IGen<System.Int32>.Get"
    assert get.explicit_interface == "Sample.IGen<System.Int32>"
    assert get.implemented_interface == "Sample.IGen<System.Int32>"
    assert get.id == "System.Int32 Sample.IGen<System.Int32>.Get()"


def test_interface_members_render_abstract(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.IRunner
            kind: interface
            access: public
            members:
              - {kind: method, name: Run, returns: bool}
        """
    )

    assert document.types[0].members[0].id == "public abstract System.Boolean Run()"


def test_parameter_records(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.Parser
            access: public
            members:
              - kind: method
                name: TryParse
                access: public
                static: true
                returns: bool
                parameters:
                  - {name: text, type: string}
                  - {name: position, type: int, direction: ref}
                  - {name: value, type: int, direction: out}
                  - {name: values, type: "int[]", params: true}
        """
    )
    parameters = document.types[0].members[0].parameters

    assert [parameter.direction for parameter in parameters] == [
        BaselineParameterDirection.IN,
        BaselineParameterDirection.REF,
        BaselineParameterDirection.OUT,
        BaselineParameterDirection.IN,
    ]
    assert [parameter.is_params for parameter in parameters] == [False, False, False, True]
    assert all(parameter.default_value is None for parameter in parameters)


def test_static_constructor_is_recorded(module_builder: ModuleBuilder) -> None:
    document = module_builder.baseline(
        """
        module: Sample
        types:
          - name: Sample.Registry
            access: public
            members:
              - {kind: constructor, static: true}
              - kind: constructor
                access: protected
                parameters:
                  - {name: capacity, type: int}
        """
    )
    constructors = document.types[0].members

    assert [member.kind for member in constructors] == [MemberBaselineKind.CONSTRUCTOR] * 2
    assert constructors[0].id == "private static Registry()"
    assert constructors[1].id == "protected Registry(System.Int32 capacity)"


def test_properties_and_events_are_only_recorded_through_accessors(module_builder: ModuleBuilder) -> None:
    source = module_builder.load(
        """
        module: Sample
        types:
          - name: Sample.Widget
            access: public
            members:
              - {kind: property, name: Size, type: int, access: public, get: true, set: private}
              - {kind: event, name: Changed, type: System.EventHandler, access: public}
        """
    )
    widget = source.defined_types()[0]
    classifier = MemberClassifier(source, widget)

    records = [classifier.classify(member) for member in widget.members]
    ids = [record.id for record in records if record is not None]

    assert [member.member_kind for member, record in zip(widget.members, records) if record is None] == [
        MemberKind.PROPERTY,
        MemberKind.EVENT,
    ]
    assert ids == [
        "public System.Int32 get_Size()",
        "private System.Void set_Size(System.Int32 value)",
        "public System.Void add_Changed(System.EventHandler value)",
        "public System.Void remove_Changed(System.EventHandler value)",
    ]


@pytest.mark.parametrize("kind", ["custom", "type_info"])
def test_unsupported_member_kind_raises(module_builder: ModuleBuilder, kind: str) -> None:
    source = module_builder.load(
        f"""
        module: Sample
        types:
          - name: Sample.Odd
            access: public
            members:
              - {{kind: {kind}, name: Weird}}
        """
    )
    odd = source.defined_types()[0]

    with pytest.raises(UnsupportedConstructError, match=r"\[Weird\] on Odd is not supported"):
        MemberClassifier(source, odd).classify(odd.members[0])


def test_unsupported_default_value_raises(module_builder: ModuleBuilder) -> None:
    with pytest.raises(UnsupportedConstructError, match="Unsupported default value type"):
        module_builder.baseline(
            """
            module: Sample
            types:
              - name: Sample.Clock
                access: public
                members:
                  - kind: method
                    name: Wait
                    access: public
                    parameters:
                      - {name: timeout, type: System.TimeSpan, default: "00:00:01"}
            """
        )
