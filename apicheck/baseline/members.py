"""Classification of constructors, methods and fields into member records."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ..errors import UnsupportedConstructError
from ..formatting import format_default_value, format_generic_parameters, format_type_name
from ..logging import get_logger
from ..metadata.base import MetadataSource, MethodSite
from ..metadata.descriptors import (
    EXTENSION_ATTRIBUTE,
    PARAM_ARRAY_ATTRIBUTE,
    ConstructorDescriptor,
    FieldDescriptor,
    MemberDescriptor,
    MemberKind,
    MethodDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
)
from ..models import (
    BaselineParameterDirection,
    MemberBaseline,
    MemberBaselineKind,
    ParameterBaseline,
)
from .accessibility import resolve_member_visibility
from .constraints import extract_generic_constraints
from .interfaces import InterfaceImplementationTable

# Return type plus, per parameter: type, by-ref, default, in, out, optional.
StructuralSignature = Tuple[str, Tuple[Tuple[str, bool, bool, bool, bool, bool], ...]]

# Members covered elsewhere: accessors are methods, nested types are enumerated on their own.
_DESUGARED_KINDS = {MemberKind.PROPERTY, MemberKind.EVENT, MemberKind.NESTED_TYPE}


class SignatureIndex:
    """Structural signatures of the public methods visible on a type, by name."""

    def __init__(self, source: MetadataSource, type_: TypeDescriptor) -> None:
        self._signatures: Dict[str, List[StructuralSignature]] = defaultdict(list)
        for name in dict.fromkeys(method.name for method in type_.methods()):
            for site in source.methods_named(type_, name):
                self._signatures[name].append(structural_signature(site))

    def count(self, name: str, signature: StructuralSignature) -> int:
        return self._signatures.get(name, []).count(signature)


def structural_signature(site: MethodSite) -> StructuralSignature:
    parameters = tuple(
        (
            format_type_name(parameter_type),
            parameter.is_by_ref,
            parameter.has_default,
            parameter.is_in,
            parameter.is_out,
            parameter.is_optional,
        )
        for parameter, parameter_type in zip(site.method.parameters, site.parameter_types())
    )
    return (format_type_name(site.return_type), parameters)


class MemberClassifier:
    """Builds member records for the members declared by one type."""

    def __init__(self, source: MetadataSource, type_: TypeDescriptor) -> None:
        self._source = source
        self._type = type_
        self._interfaces = InterfaceImplementationTable(source, type_)
        self._signatures = SignatureIndex(source, type_)
        self._logger = get_logger("baseline.members")

    def classify(self, member: MemberDescriptor) -> Optional[MemberBaseline]:
        """Return the member record, or None for members represented elsewhere."""
        if member.member_kind is MemberKind.CONSTRUCTOR and isinstance(member, ConstructorDescriptor):
            return self._constructor(member)
        if member.member_kind is MemberKind.METHOD and isinstance(member, MethodDescriptor):
            return self._method(member)
        if member.member_kind is MemberKind.FIELD and isinstance(member, FieldDescriptor):
            return self._field(member)
        if member.member_kind in _DESUGARED_KINDS:
            return None
        raise UnsupportedConstructError(
            f"'{member.member_kind.value}' [{member.name}] on {self._type.name} is not supported."
        )

    def _constructor(self, constructor: ConstructorDescriptor) -> MemberBaseline:
        return MemberBaseline(
            kind=MemberBaselineKind.CONSTRUCTOR,
            name=self._type.name,
            visibility=resolve_member_visibility(constructor.access),
            static=constructor.is_static,
            parameters=[_parameter(parameter) for parameter in constructor.parameters],
        )

    def _method(self, method: MethodDescriptor) -> MemberBaseline:
        explicit_interface = self._interfaces.resolve(method, explicit=True)
        implemented_interface = explicit_interface or self._interfaces.resolve(method, explicit=False)

        name = method.name
        generic_constraints = []
        if method.is_generic:
            name += format_generic_parameters([parameter.name for parameter in method.generic_parameters])
            generic_constraints = extract_generic_constraints(self._source, method.generic_parameters)

        record = MemberBaseline(
            kind=MemberBaselineKind.METHOD,
            name=name,
            visibility=resolve_member_visibility(method.access),
            static=method.is_static,
            sealed=method.is_final,
            virtual=method.is_virtual,
            override=method.is_virtual and self._source.base_definition(method) is not method,
            abstract=method.is_abstract,
            new=self._hides(method),
            extension=method.has_attribute(EXTENSION_ATTRIBUTE),
            return_type=format_type_name(method.return_type),
            parameters=[_parameter(parameter) for parameter in method.parameters],
            generic_constraints=generic_constraints,
            explicit_interface=explicit_interface,
            implemented_interface=implemented_interface,
        )
        self._logger.debug("Classified %s", record.id)
        return record

    def _hides(self, method: MethodDescriptor) -> bool:
        if method.is_abstract or method.is_virtual or not method.is_hide_by_sig:
            return False
        return self._signatures.count(method.name, structural_signature(MethodSite(method))) > 1

    def _field(self, field: FieldDescriptor) -> MemberBaseline:
        return MemberBaseline(
            kind=MemberBaselineKind.FIELD,
            name=field.name,
            visibility=resolve_member_visibility(field.access),
            constant=field.is_literal,
            static=field.is_static,
            read_only=field.is_init_only,
            return_type=format_type_name(field.field_type),
        )


def _parameter(parameter: ParameterDescriptor) -> ParameterBaseline:
    if parameter.is_by_ref and parameter.is_out:
        direction = BaselineParameterDirection.OUT
    elif parameter.is_by_ref:
        direction = BaselineParameterDirection.REF
    else:
        direction = BaselineParameterDirection.IN
    return ParameterBaseline(
        name=parameter.name,
        type=format_type_name(parameter.type),
        direction=direction,
        default_value=format_default_value(parameter) if parameter.has_default else None,
        is_params=parameter.has_attribute(PARAM_ARRAY_ATTRIBUTE),
    )


__all__ = ["MemberClassifier", "SignatureIndex", "structural_signature"]
