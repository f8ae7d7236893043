"""Baseline document records shared across apicheck components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import BaselineFormatError
from .formatting import format_member_id, format_type_id


class BaselineVisibility(str, Enum):
    PUBLIC = "Public"
    PROTECTED_INTERNAL = "ProtectedInternal"
    PROTECTED = "Protected"
    PRIVATE = "Private"
    INTERNAL = "Internal"


class BaselineKind(str, Enum):
    CLASS = "Class"
    STRUCT = "Struct"
    INTERFACE = "Interface"


class MemberBaselineKind(str, Enum):
    CONSTRUCTOR = "Constructor"
    METHOD = "Method"
    FIELD = "Field"


class BaselineParameterDirection(str, Enum):
    IN = "In"
    REF = "Ref"
    OUT = "Out"


@dataclass
class GenericConstraintBaseline:
    """Constraints attached to one generic parameter."""

    parameter_name: str
    base_type_or_interfaces: List[str] = field(default_factory=list)
    new: bool = False
    class_constraint: bool = False
    struct_constraint: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter_name": self.parameter_name,
            "base_type_or_interfaces": list(self.base_type_or_interfaces),
            "new": self.new,
            "class": self.class_constraint,
            "struct": self.struct_constraint,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GenericConstraintBaseline":
        return cls(
            parameter_name=_require_str(payload, "parameter_name"),
            base_type_or_interfaces=_str_list(payload.get("base_type_or_interfaces")),
            new=bool(payload.get("new", False)),
            class_constraint=bool(payload.get("class", False)),
            struct_constraint=bool(payload.get("struct", False)),
        )


@dataclass
class ParameterBaseline:
    """A constructor or method parameter."""

    name: str
    type: str
    direction: BaselineParameterDirection = BaselineParameterDirection.IN
    default_value: Optional[str] = None
    is_params: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "direction": self.direction.value,
            "default_value": self.default_value,
            "is_params": self.is_params,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParameterBaseline":
        default_value = payload.get("default_value")
        return cls(
            name=_require_str(payload, "name"),
            type=_require_str(payload, "type"),
            direction=_enum(BaselineParameterDirection, payload.get("direction", "In")),
            default_value=default_value if isinstance(default_value, str) else None,
            is_params=bool(payload.get("is_params", False)),
        )


@dataclass
class MemberBaseline:
    """A constructor, method or field declared by a type."""

    kind: MemberBaselineKind
    name: str
    visibility: BaselineVisibility = BaselineVisibility.INTERNAL
    static: bool = False
    sealed: bool = False
    virtual: bool = False
    override: bool = False
    abstract: bool = False
    new: bool = False
    extension: bool = False
    constant: bool = False
    read_only: bool = False
    return_type: Optional[str] = None
    parameters: List[ParameterBaseline] = field(default_factory=list)
    generic_constraints: List[GenericConstraintBaseline] = field(default_factory=list)
    explicit_interface: Optional[str] = None
    implemented_interface: Optional[str] = None

    @property
    def id(self) -> str:
        return format_member_id(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "visibility": self.visibility.value,
            "static": self.static,
            "sealed": self.sealed,
            "virtual": self.virtual,
            "override": self.override,
            "abstract": self.abstract,
            "new": self.new,
            "extension": self.extension,
            "constant": self.constant,
            "read_only": self.read_only,
            "return_type": self.return_type,
            "parameters": [parameter.to_dict() for parameter in self.parameters],
            "generic_constraints": [constraint.to_dict() for constraint in self.generic_constraints],
            "explicit_interface": self.explicit_interface,
            "implemented_interface": self.implemented_interface,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MemberBaseline":
        return cls(
            kind=_enum(MemberBaselineKind, payload.get("kind")),
            name=_require_str(payload, "name"),
            visibility=_enum(BaselineVisibility, payload.get("visibility", "Internal")),
            static=bool(payload.get("static", False)),
            sealed=bool(payload.get("sealed", False)),
            virtual=bool(payload.get("virtual", False)),
            override=bool(payload.get("override", False)),
            abstract=bool(payload.get("abstract", False)),
            new=bool(payload.get("new", False)),
            extension=bool(payload.get("extension", False)),
            constant=bool(payload.get("constant", False)),
            read_only=bool(payload.get("read_only", False)),
            return_type=_optional_str(payload.get("return_type")),
            parameters=[ParameterBaseline.from_dict(item) for item in _dict_list(payload.get("parameters"))],
            generic_constraints=[
                GenericConstraintBaseline.from_dict(item)
                for item in _dict_list(payload.get("generic_constraints"))
            ],
            explicit_interface=_optional_str(payload.get("explicit_interface")),
            implemented_interface=_optional_str(payload.get("implemented_interface")),
        )


@dataclass
class TypeBaseline:
    """A declared type; nested types are separate records named through `+`."""

    name: str
    kind: BaselineKind = BaselineKind.CLASS
    visibility: BaselineVisibility = BaselineVisibility.INTERNAL
    static: bool = False
    abstract: bool = False
    sealed: bool = False
    base_type: Optional[str] = None
    implemented_interfaces: List[str] = field(default_factory=list)
    generic_constraints: List[GenericConstraintBaseline] = field(default_factory=list)
    members: List[MemberBaseline] = field(default_factory=list)

    @property
    def id(self) -> str:
        return format_type_id(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "visibility": self.visibility.value,
            "static": self.static,
            "abstract": self.abstract,
            "sealed": self.sealed,
            "base_type": self.base_type,
            "implemented_interfaces": list(self.implemented_interfaces),
            "generic_constraints": [constraint.to_dict() for constraint in self.generic_constraints],
            "members": [member.to_dict() for member in self.members],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TypeBaseline":
        return cls(
            name=_require_str(payload, "name"),
            kind=_enum(BaselineKind, payload.get("kind", "Class")),
            visibility=_enum(BaselineVisibility, payload.get("visibility", "Internal")),
            static=bool(payload.get("static", False)),
            abstract=bool(payload.get("abstract", False)),
            sealed=bool(payload.get("sealed", False)),
            base_type=_optional_str(payload.get("base_type")),
            implemented_interfaces=_str_list(payload.get("implemented_interfaces")),
            generic_constraints=[
                GenericConstraintBaseline.from_dict(item)
                for item in _dict_list(payload.get("generic_constraints"))
            ],
            members=[MemberBaseline.from_dict(item) for item in _dict_list(payload.get("members"))],
        )


@dataclass
class BaselineDocument:
    """Snapshot of one module's API surface."""

    assembly_identity: str = ""
    types: List[TypeBaseline] = field(default_factory=list)

    def find_type(self, type_id: str) -> Optional[TypeBaseline]:
        for type_baseline in self.types:
            if type_baseline.id == type_id:
                return type_baseline
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assembly_identity": self.assembly_identity,
            "types": [type_baseline.to_dict() for type_baseline in self.types],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BaselineDocument":
        if not isinstance(payload, Mapping):
            raise BaselineFormatError("Baseline document must be a mapping")
        identity = payload.get("assembly_identity", "")
        if not isinstance(identity, str):
            raise BaselineFormatError("'assembly_identity' must be a string")
        types_payload = payload.get("types", [])
        if not isinstance(types_payload, list):
            raise BaselineFormatError("'types' must be a list")
        return cls(
            assembly_identity=identity,
            types=[TypeBaseline.from_dict(item) for item in _dict_list(types_payload)],
        )


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise BaselineFormatError(f"'{key}' must be a string")
    return value


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _dict_list(value: Any) -> List[Mapping[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise BaselineFormatError("Expected a list of mappings")
    return value


def _enum(enum_type: type, value: Any) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise BaselineFormatError(f"Unknown {enum_type.__name__} value: {value!r}") from exc


__all__ = [
    "BaselineDocument",
    "BaselineKind",
    "BaselineParameterDirection",
    "BaselineVisibility",
    "GenericConstraintBaseline",
    "MemberBaseline",
    "MemberBaselineKind",
    "ParameterBaseline",
    "TypeBaseline",
]
