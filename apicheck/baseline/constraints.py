"""Generic constraint extraction for type and method generic parameters."""

from __future__ import annotations

from typing import Iterable, List

from ..formatting import format_type_name
from ..metadata.base import MetadataSource
from ..metadata.descriptors import IMPLICIT_ROOTS, GenericParameterDescriptor, TypeRef
from ..models import GenericConstraintBaseline
from .interfaces import minimal_interfaces


def extract_generic_constraints(
    source: MetadataSource, parameters: Iterable[GenericParameterDescriptor]
) -> List[GenericConstraintBaseline]:
    """Return constraint records for the parameters that carry at least one constraint."""
    constraints: List[GenericConstraintBaseline] = []
    for parameter in parameters:
        constraint = GenericConstraintBaseline(parameter_name=parameter.name)

        base_type = parameter.base_type
        if base_type is not None and base_type not in IMPLICIT_ROOTS:
            constraint.base_type_or_interfaces.append(format_type_name(base_type))

        for interface in _constraint_interfaces(source, parameter):
            constraint.base_type_or_interfaces.append(format_type_name(interface))

        constraint.new = parameter.default_constructor
        constraint.class_constraint = parameter.reference_type
        constraint.struct_constraint = parameter.not_nullable_value_type

        if (
            constraint.new
            or constraint.class_constraint
            or constraint.struct_constraint
            or constraint.base_type_or_interfaces
        ):
            constraints.append(constraint)
    return constraints


def _constraint_interfaces(source: MetadataSource, parameter: GenericParameterDescriptor) -> List[TypeRef]:
    expanded: List[TypeRef] = []
    for interface in parameter.interfaces:
        for candidate in [interface, *source.interfaces_of(interface)]:
            if candidate not in expanded:
                expanded.append(candidate)
    base_type = parameter.base_type
    if base_type in IMPLICIT_ROOTS:
        base_type = None
    return minimal_interfaces(source, expanded, base_type)


__all__ = ["extract_generic_constraints"]
