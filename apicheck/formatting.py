"""Canonical rendering of type references, defaults and record identifiers.

Every string produced here is a comparison key between baselines generated
from independently compiled binaries, so the output depends only on the
metadata and never on enumeration accidents (hash order, object identity).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, List, Sequence

from .errors import UnsupportedConstructError
from .metadata.descriptors import ParameterDescriptor, TypeDescriptor, TypeRef, TypeRefKind

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .models import GenericConstraintBaseline, MemberBaseline, ParameterBaseline, TypeBaseline

NESTING_SEPARATOR = "+"

_VISIBILITY_KEYWORDS = {
    "Public": "public",
    "ProtectedInternal": "protected internal",
    "Protected": "protected",
    "Private": "private",
    "Internal": "internal",
}

_KIND_KEYWORDS = {
    "Class": "class",
    "Struct": "struct",
    "Interface": "interface",
}

_DIRECTION_KEYWORDS = {
    "In": "",
    "Ref": "ref ",
    "Out": "out ",
}

_INTEGRAL_TYPES = {
    "System.Byte",
    "System.SByte",
    "System.Int16",
    "System.UInt16",
    "System.Int32",
    "System.UInt32",
    "System.Int64",
    "System.UInt64",
}

_FLOATING_POINT_TYPES = {"System.Single", "System.Double"}


def format_type_name(ref: TypeRef) -> str:
    """Render a type reference: ``Ns.Outer+Inner<System.Int32>``, ``T``, ``System.String[]``."""
    if ref.kind is TypeRefKind.GENERIC_PARAMETER:
        return ref.name
    if ref.kind is TypeRefKind.ARRAY:
        if ref.element is None:
            raise UnsupportedConstructError(f"Array type '{ref.name}' has no element type")
        return f"{format_type_name(ref.element)}[{',' * (ref.rank - 1)}]"
    name = _qualified_name(ref)
    if ref.arguments:
        name += "<" + ", ".join(format_type_name(argument) for argument in ref.arguments) + ">"
    return name


def format_definition_name(type_: TypeDescriptor) -> str:
    """Render the canonical name of a type definition, open generic parameters included."""
    return format_type_name(type_.reference())


def format_generic_parameters(names: Sequence[str]) -> str:
    if not names:
        return ""
    return "<" + ", ".join(names) + ">"


def format_default_value(parameter: ParameterDescriptor) -> str:
    """Render a parameter's default value as a C# literal.

    Raises ``UnsupportedConstructError`` for values whose declared type has no
    known literal form.
    """
    value = parameter.default_value
    type_name = format_type_name(parameter.type)
    if value is None:
        if parameter.type.is_value_type:
            return f"default({type_name})"
        return "null"

    if type_name == "System.String":
        return f'"{value}"'
    if type_name == "System.Char":
        return f"'{value}'"
    if type_name == "System.Boolean" and isinstance(value, bool):
        return "True" if value else "False"
    if type_name in _INTEGRAL_TYPES and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if type_name in _FLOATING_POINT_TYPES and isinstance(value, (int, float)) and not isinstance(value, bool):
        return _format_floating_point(float(value))
    if type_name == "System.Decimal" and isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value if isinstance(value, Decimal) else Decimal(str(value)))

    raise UnsupportedConstructError("Unsupported default value type")


def format_parameter(parameter: "ParameterBaseline", *, receiver: bool = False) -> str:
    prefix = ""
    if parameter.is_params:
        prefix += "params "
    if receiver:
        prefix += "this "
    prefix += _DIRECTION_KEYWORDS[parameter.direction.value]
    text = f"{prefix}{parameter.type} {parameter.name}"
    if parameter.default_value is not None:
        text += f" = {parameter.default_value}"
    return text


def format_parameter_list(parameters: Sequence["ParameterBaseline"], *, extension: bool = False) -> str:
    rendered = [
        format_parameter(parameter, receiver=extension and index == 0)
        for index, parameter in enumerate(parameters)
    ]
    return "(" + ", ".join(rendered) + ")"


def format_constraint_clauses(constraints: Iterable["GenericConstraintBaseline"]) -> str:
    """Render ``where`` clauses, each preceded by a space."""
    clauses: List[str] = []
    for constraint in constraints:
        items: List[str] = []
        if constraint.class_constraint:
            items.append("class")
        if constraint.struct_constraint:
            items.append("struct")
        items.extend(constraint.base_type_or_interfaces)
        # A struct constraint already implies a parameterless constructor.
        if constraint.new and not constraint.struct_constraint:
            items.append("new()")
        clauses.append(f" where {constraint.parameter_name} : {', '.join(items)}")
    return "".join(clauses)


def format_type_id(type_baseline: "TypeBaseline") -> str:
    """Render a type declaration, e.g. ``public sealed class Ns.C : Ns.B, Ns.I``."""
    parts = [_VISIBILITY_KEYWORDS[type_baseline.visibility.value]]
    if type_baseline.kind.value == "Class":
        if type_baseline.static:
            parts.append("static")
        elif type_baseline.abstract:
            parts.append("abstract")
        elif type_baseline.sealed:
            parts.append("sealed")
    parts.append(_KIND_KEYWORDS[type_baseline.kind.value])
    parts.append(type_baseline.name)
    text = " ".join(parts)

    bases: List[str] = []
    if type_baseline.base_type is not None:
        bases.append(type_baseline.base_type)
    bases.extend(type_baseline.implemented_interfaces)
    if bases:
        text += " : " + ", ".join(bases)
    return text + format_constraint_clauses(type_baseline.generic_constraints)


def format_member_id(member: "MemberBaseline") -> str:
    """Render a member signature, e.g. ``public override System.Void F()``."""
    kind = member.kind.value
    if kind == "Field":
        parts = [_VISIBILITY_KEYWORDS[member.visibility.value]]
        if member.constant:
            parts.append("const")
        else:
            if member.static:
                parts.append("static")
            if member.read_only:
                parts.append("readonly")
        parts.append(member.return_type or "")
        parts.append(member.name)
        return " ".join(parts)

    signature = member.name + format_parameter_list(member.parameters, extension=member.extension)
    if kind == "Constructor":
        parts = [_VISIBILITY_KEYWORDS[member.visibility.value]]
        if member.static:
            parts.append("static")
        return " ".join(parts + [signature])

    signature += format_constraint_clauses(member.generic_constraints)
    if member.explicit_interface is not None:
        # Explicit implementations are only reachable through the interface.
        return f"{member.return_type} {signature}"

    parts = [_VISIBILITY_KEYWORDS[member.visibility.value]]
    parts.extend(_method_modifiers(member))
    parts.append(member.return_type or "")
    parts.append(signature)
    return " ".join(parts)


def _method_modifiers(member: "MemberBaseline") -> List[str]:
    modifiers: List[str] = []
    if member.static:
        modifiers.append("static")
    if member.abstract:
        modifiers.append("abstract")
        if member.override:
            modifiers.append("override")
    elif member.override:
        if member.sealed:
            modifiers.append("sealed")
        modifiers.append("override")
    elif member.virtual and not member.sealed:
        modifiers.append("virtual")
    if member.new:
        modifiers.append("new")
    return modifiers


def _qualified_name(ref: TypeRef) -> str:
    if ref.declaring is not None:
        return f"{_qualified_name(ref.declaring)}{NESTING_SEPARATOR}{ref.name}"
    if ref.namespace:
        return f"{ref.namespace}.{ref.name}"
    return ref.name


def _format_floating_point(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value).replace("e", "E")


__all__ = [
    "NESTING_SEPARATOR",
    "format_constraint_clauses",
    "format_default_value",
    "format_definition_name",
    "format_generic_parameters",
    "format_member_id",
    "format_parameter",
    "format_parameter_list",
    "format_type_id",
    "format_type_name",
]
