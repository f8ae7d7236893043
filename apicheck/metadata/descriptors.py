"""Read-only metadata records produced by metadata sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


class TypeAccess(Enum):
    """Raw visibility of a type definition."""

    NOT_PUBLIC = "not_public"
    PUBLIC = "public"
    NESTED_PUBLIC = "nested_public"
    NESTED_PRIVATE = "nested_private"
    NESTED_FAMILY = "nested_family"
    NESTED_ASSEMBLY = "nested_assembly"
    NESTED_FAM_AND_ASSEM = "nested_fam_and_assem"
    NESTED_FAM_OR_ASSEM = "nested_fam_or_assem"


class MemberAccess(Enum):
    """Raw visibility of a constructor, method or field."""

    PRIVATE_SCOPE = "private_scope"
    PRIVATE = "private"
    FAM_AND_ASSEM = "fam_and_assem"
    ASSEMBLY = "assembly"
    FAMILY = "family"
    FAM_OR_ASSEM = "fam_or_assem"
    PUBLIC = "public"


class MemberKind(Enum):
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    FIELD = "field"
    PROPERTY = "property"
    EVENT = "event"
    NESTED_TYPE = "nested_type"
    TYPE_INFO = "type_info"
    CUSTOM = "custom"


class TypeRefKind(Enum):
    NAMED = "named"
    GENERIC_PARAMETER = "generic_parameter"
    ARRAY = "array"


EXTENSION_ATTRIBUTE = "System.Runtime.CompilerServices.ExtensionAttribute"
PARAM_ARRAY_ATTRIBUTE = "System.ParamArrayAttribute"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a type as it appears in a signature.

    Equality ignores the value-type and interface hints so that references
    built from different places in a module compare equal.
    """

    kind: TypeRefKind
    name: str
    namespace: str = ""
    declaring: Optional["TypeRef"] = None
    arguments: Tuple["TypeRef", ...] = ()
    element: Optional["TypeRef"] = None
    rank: int = 1
    is_value_type: bool = field(default=False, compare=False)
    is_interface: bool = field(default=False, compare=False)

    @classmethod
    def named(
        cls,
        namespace: str,
        name: str,
        *,
        declaring: Optional["TypeRef"] = None,
        arguments: Tuple["TypeRef", ...] = (),
        is_value_type: bool = False,
        is_interface: bool = False,
    ) -> "TypeRef":
        return cls(
            kind=TypeRefKind.NAMED,
            name=name,
            namespace=namespace,
            declaring=declaring,
            arguments=tuple(arguments),
            is_value_type=is_value_type,
            is_interface=is_interface,
        )

    @classmethod
    def generic_parameter(cls, name: str) -> "TypeRef":
        return cls(kind=TypeRefKind.GENERIC_PARAMETER, name=name)

    @classmethod
    def array_of(cls, element: "TypeRef", rank: int = 1) -> "TypeRef":
        return cls(kind=TypeRefKind.ARRAY, name=element.name, element=element, rank=rank)

    @property
    def is_generic_parameter(self) -> bool:
        return self.kind is TypeRefKind.GENERIC_PARAMETER

    @property
    def definition(self) -> "TypeRef":
        """Return the reference stripped of generic arguments."""
        if self.kind is not TypeRefKind.NAMED or not self.arguments:
            return self
        return TypeRef(
            kind=self.kind,
            name=self.name,
            namespace=self.namespace,
            declaring=self.declaring,
            is_value_type=self.is_value_type,
            is_interface=self.is_interface,
        )

    def substitute(self, mapping: Mapping[str, "TypeRef"]) -> "TypeRef":
        """Replace generic parameter references using ``mapping``."""
        if not mapping:
            return self
        if self.kind is TypeRefKind.GENERIC_PARAMETER:
            return mapping.get(self.name, self)
        if self.kind is TypeRefKind.ARRAY and self.element is not None:
            return TypeRef.array_of(self.element.substitute(mapping), self.rank)
        if not self.arguments:
            return self
        return TypeRef.named(
            self.namespace,
            self.name,
            declaring=self.declaring,
            arguments=tuple(argument.substitute(mapping) for argument in self.arguments),
            is_value_type=self.is_value_type,
            is_interface=self.is_interface,
        )


OBJECT = TypeRef.named("System", "Object")
VALUE_TYPE = TypeRef.named("System", "ValueType")
VOID = TypeRef.named("System", "Void", is_value_type=True)

# Roots a base type or constraint resolves to when none is declared.
IMPLICIT_ROOTS = (OBJECT, VALUE_TYPE)


@dataclass(frozen=True)
class GenericParameterDescriptor:
    """A generic parameter of a type or method with its constraints."""

    name: str
    base_type: Optional[TypeRef] = None
    interfaces: Tuple[TypeRef, ...] = ()
    default_constructor: bool = False
    reference_type: bool = False
    not_nullable_value_type: bool = False

    def reference(self) -> TypeRef:
        return TypeRef.generic_parameter(self.name)


@dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    type: TypeRef
    is_by_ref: bool = False
    is_in: bool = False
    is_out: bool = False
    is_optional: bool = False
    has_default: bool = False
    default_value: Any = None
    custom_attributes: Tuple[str, ...] = ()

    def has_attribute(self, attribute: str) -> bool:
        return attribute in self.custom_attributes


@dataclass(eq=False)
class MemberDescriptor:
    """A member declared by a type. Members compare by identity."""

    name: str
    member_kind: MemberKind = MemberKind.CUSTOM
    access: MemberAccess = MemberAccess.PRIVATE
    is_static: bool = False
    custom_attributes: Tuple[str, ...] = ()
    declaring_type: Optional["TypeDescriptor"] = field(default=None, repr=False)

    def has_attribute(self, attribute: str) -> bool:
        return attribute in self.custom_attributes


@dataclass(eq=False)
class ConstructorDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.CONSTRUCTOR
    parameters: List[ParameterDescriptor] = field(default_factory=list)


@dataclass(eq=False)
class MethodDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.METHOD
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    return_type: TypeRef = VOID
    is_virtual: bool = False
    is_abstract: bool = False
    is_final: bool = False
    is_new_slot: bool = False
    is_hide_by_sig: bool = True
    is_special_name: bool = False
    generic_parameters: List[GenericParameterDescriptor] = field(default_factory=list)
    # Interfaces the member is declared to implement; consulted by adapters
    # that cannot see an interface's own slots.
    implements: Tuple[TypeRef, ...] = ()

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters)


@dataclass(eq=False)
class FieldDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.FIELD
    field_type: TypeRef = OBJECT
    is_literal: bool = False
    is_init_only: bool = False


@dataclass(eq=False)
class PropertyDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.PROPERTY
    property_type: TypeRef = OBJECT


@dataclass(eq=False)
class EventDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.EVENT
    handler_type: TypeRef = OBJECT


@dataclass(eq=False)
class NestedTypeDescriptor(MemberDescriptor):
    member_kind: MemberKind = MemberKind.NESTED_TYPE
    nested: Optional["TypeDescriptor"] = field(default=None, repr=False)


@dataclass(eq=False)
class TypeDescriptor:
    """A type defined by the inspected module."""

    namespace: str
    name: str
    access: TypeAccess = TypeAccess.NOT_PUBLIC
    is_interface: bool = False
    is_value_type: bool = False
    is_abstract: bool = False
    is_sealed: bool = False
    declaring: Optional["TypeDescriptor"] = field(default=None, repr=False)
    base_type: Optional[TypeRef] = None
    declared_interfaces: List[TypeRef] = field(default_factory=list)
    generic_parameters: List[GenericParameterDescriptor] = field(default_factory=list)
    members: List[MemberDescriptor] = field(default_factory=list)

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters)

    @property
    def is_nested(self) -> bool:
        return self.declaring is not None

    def reference(self) -> TypeRef:
        """Return the open reference to this type, generic parameters as arguments."""
        declaring = self.declaring.reference().definition if self.declaring is not None else None
        return TypeRef.named(
            self.namespace,
            self.name,
            declaring=declaring,
            arguments=tuple(parameter.reference() for parameter in self.generic_parameters),
            is_value_type=self.is_value_type,
            is_interface=self.is_interface,
        )

    def methods(self) -> List[MethodDescriptor]:
        return [member for member in self.members if isinstance(member, MethodDescriptor)]


__all__ = [
    "EXTENSION_ATTRIBUTE",
    "IMPLICIT_ROOTS",
    "OBJECT",
    "PARAM_ARRAY_ATTRIBUTE",
    "VALUE_TYPE",
    "VOID",
    "ConstructorDescriptor",
    "EventDescriptor",
    "FieldDescriptor",
    "GenericParameterDescriptor",
    "MemberAccess",
    "MemberDescriptor",
    "MemberKind",
    "MethodDescriptor",
    "NestedTypeDescriptor",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "TypeAccess",
    "TypeDescriptor",
    "TypeRef",
    "TypeRefKind",
]
