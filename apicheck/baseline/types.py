"""Classification of type definitions into type records."""

from __future__ import annotations

from ..formatting import format_definition_name, format_type_name
from ..metadata.base import MetadataSource
from ..metadata.descriptors import IMPLICIT_ROOTS, TypeDescriptor
from ..models import BaselineKind, TypeBaseline
from .accessibility import resolve_type_visibility
from .constraints import extract_generic_constraints
from .interfaces import minimal_interfaces
from .members import MemberClassifier


class TypeClassifier:
    """Derives a type record, members included, from a type definition."""

    def __init__(self, source: MetadataSource) -> None:
        self._source = source

    def classify(self, type_: TypeDescriptor) -> TypeBaseline:
        if type_.is_interface:
            kind = BaselineKind.INTERFACE
        elif type_.is_value_type:
            kind = BaselineKind.STRUCT
        else:
            kind = BaselineKind.CLASS

        type_baseline = TypeBaseline(
            name=format_definition_name(type_),
            kind=kind,
            visibility=resolve_type_visibility(type_.access),
            static=kind is BaselineKind.CLASS and type_.is_sealed and type_.is_abstract,
            abstract=type_.is_abstract,
            sealed=type_.is_sealed,
        )

        base_type = type_.base_type
        if base_type is not None and base_type not in IMPLICIT_ROOTS:
            type_baseline.base_type = format_type_name(base_type)

        interfaces = self._source.interfaces(type_)
        if interfaces:
            declared = minimal_interfaces(
                self._source, interfaces, base_type, redeclared=type_.declared_interfaces
            )
            type_baseline.implemented_interfaces.extend(format_type_name(interface) for interface in declared)

        if type_.is_generic:
            type_baseline.generic_constraints.extend(
                extract_generic_constraints(self._source, type_.generic_parameters)
            )

        members = MemberClassifier(self._source, type_)
        for member in type_.members:
            member_baseline = members.classify(member)
            if member_baseline is not None:
                type_baseline.members.append(member_baseline)

        return type_baseline


__all__ = ["TypeClassifier"]
