"""Metadata source backed by a YAML or JSON module description.

A module description lists the types a compiled module defines the way its
metadata tables record them. The reader translates C#-flavoured declarations
(``override``, ``explicit``, properties, events) into the raw flags a compiler
would emit so the classifiers see the same shapes as in a real binary.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

import yaml

from ..errors import ModuleFormatError
from ..logging import get_logger
from .base import InterfaceMap, MetadataSource, MethodSite, SlotKey
from .descriptors import (
    EXTENSION_ATTRIBUTE,
    OBJECT,
    PARAM_ARRAY_ATTRIBUTE,
    VALUE_TYPE,
    VOID,
    ConstructorDescriptor,
    EventDescriptor,
    FieldDescriptor,
    GenericParameterDescriptor,
    MemberAccess,
    MemberDescriptor,
    MemberKind,
    MethodDescriptor,
    NestedTypeDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeAccess,
    TypeDescriptor,
    TypeRef,
)
from .typenames import parse_type_name

_TOP_LEVEL_ACCESS = {
    "public": TypeAccess.PUBLIC,
    "internal": TypeAccess.NOT_PUBLIC,
}

_NESTED_ACCESS = {
    "public": TypeAccess.NESTED_PUBLIC,
    "private": TypeAccess.NESTED_PRIVATE,
    "protected": TypeAccess.NESTED_FAMILY,
    "internal": TypeAccess.NESTED_ASSEMBLY,
    "protected internal": TypeAccess.NESTED_FAM_OR_ASSEM,
    "private protected": TypeAccess.NESTED_FAM_AND_ASSEM,
}

_MEMBER_ACCESS = {
    "public": MemberAccess.PUBLIC,
    "private": MemberAccess.PRIVATE,
    "protected": MemberAccess.FAMILY,
    "internal": MemberAccess.ASSEMBLY,
    "protected internal": MemberAccess.FAM_OR_ASSEM,
    "private protected": MemberAccess.FAM_AND_ASSEM,
}

_TYPE_KINDS = {"class", "struct", "interface", "enum"}

_BUILTIN_VALUE_TYPES = {
    "System.Boolean",
    "System.Byte",
    "System.SByte",
    "System.Char",
    "System.Int16",
    "System.UInt16",
    "System.Int32",
    "System.UInt32",
    "System.Int64",
    "System.UInt64",
    "System.IntPtr",
    "System.UIntPtr",
    "System.Single",
    "System.Double",
    "System.Decimal",
    "System.Void",
    "System.DateTime",
    "System.DateTimeOffset",
    "System.TimeSpan",
    "System.Guid",
    "System.Nullable",
    "System.Threading.CancellationToken",
    "System.Collections.Generic.KeyValuePair",
}


class DescribedModuleSource(MetadataSource):
    """Metadata source reading types from a module description document."""

    def __init__(self, identity: str, types: Sequence[TypeDescriptor]) -> None:
        self._identity = identity
        self._types = list(types)
        self._maps: Dict[Tuple[int, TypeRef], Dict[SlotKey, MethodDescriptor]] = {}

    @classmethod
    def from_path(cls, path: Path) -> "DescribedModuleSource":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ModuleFormatError(f"Cannot read module description {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ModuleFormatError(f"Failed to parse {Path(path).name}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ModuleFormatError("Module description must contain a mapping at the root")
        data.setdefault("module", Path(path).stem)
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DescribedModuleSource":
        reader = _ModuleDescriptionReader(data)
        source = cls(reader.identity, reader.read_types())
        source._mark_interface_targets()
        return source

    def identity(self) -> str:
        return self._identity

    def defined_types(self) -> Sequence[TypeDescriptor]:
        return list(self._types)

    def interface_map(self, type_: TypeDescriptor, interface: TypeRef) -> InterfaceMap:
        key = (id(type_), interface)
        cached = self._maps.get(key)
        if cached is None:
            cached = self._build_interface_map(type_, interface)
            self._maps[key] = cached
        return cached

    # ------------------------------------------------------------------
    # Dispatch map derivation

    def _build_interface_map(self, type_: TypeDescriptor, interface: TypeRef) -> Dict[SlotKey, MethodDescriptor]:
        if type_.is_interface:
            # Interface members hide base interface slots, they never fill them.
            return {}
        levels: List[Tuple[TypeDescriptor, Dict[str, TypeRef]]] = [(type_, {})]
        levels.extend(self.base_chain(type_))
        result: Dict[SlotKey, MethodDescriptor] = {}

        definition = self.find_type(interface)
        if definition is not None and definition.is_interface:
            mapping = self.argument_map(definition, interface)
            for slot in definition.methods():
                if slot.is_static:
                    continue
                slot_site = MethodSite(slot, mapping)
                slot_key = (slot.name, slot_site.parameter_types())
                target = self._find_target(levels, interface, slot_key)
                if target is not None:
                    result[slot_key] = target

        if definition is None:
            # Slots of foreign interfaces are only known through `implements` hints.
            for descriptor, mapping in reversed(levels):
                for method in descriptor.methods():
                    if interface not in (ref.substitute(mapping) for ref in method.implements):
                        continue
                    slot_name = method.name.rsplit(".", 1)[-1]
                    result[(slot_name, MethodSite(method, mapping).parameter_types())] = method
        return result

    def _find_target(
        self,
        levels: Sequence[Tuple[TypeDescriptor, Dict[str, TypeRef]]],
        interface: TypeRef,
        slot_key: SlotKey,
    ) -> Optional[MethodDescriptor]:
        slot_name, slot_parameters = slot_key
        for descriptor, mapping in levels:
            declares = interface in self._declared_closure(descriptor, mapping)
            candidates = [
                method
                for method in descriptor.methods()
                if not method.is_static and MethodSite(method, mapping).parameter_types() == slot_parameters
            ]
            for method in candidates:
                explicit = interface in (ref.substitute(mapping) for ref in method.implements)
                if explicit and method.access is MemberAccess.PRIVATE and method.name.endswith("." + slot_name):
                    return method
            for method in candidates:
                if method.name != slot_name or method.access is not MemberAccess.PUBLIC:
                    continue
                overrides = method.is_virtual and not method.is_new_slot
                if declares or overrides:
                    return method
        return None

    def _declared_closure(self, descriptor: TypeDescriptor, mapping: Mapping[str, TypeRef]) -> Set[TypeRef]:
        closure: Set[TypeRef] = set()
        for interface in descriptor.declared_interfaces:
            resolved = interface.substitute(mapping)
            closure.add(resolved)
            closure.update(self.interfaces_of(resolved))
        return closure

    def _mark_interface_targets(self) -> None:
        """Flag implicit implementations the way a compiler emits them (virtual, final)."""
        for type_ in self._types:
            if type_.is_interface:
                continue
            for interface in self.interfaces(type_):
                for target in self.interface_map(type_, interface).values():
                    if target.declaring_type is type_ and not target.is_virtual:
                        target.is_virtual = True
                        target.is_final = True
                        target.is_new_slot = True


class _ModuleDescriptionReader:
    """Two-pass reader: declare every type first, then resolve signatures."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        identity = data.get("module", "")
        if not isinstance(identity, str):
            raise ModuleFormatError("'module' must be a string")
        self.identity = identity
        self._logger = get_logger("metadata.described")
        self._value_types = set(_BUILTIN_VALUE_TYPES)
        self._value_types.update(_as_str_list(data.get("value_types"), "value_types"))
        self._raw_types = _as_mapping_list(data.get("types"), "types")
        self._declared: List[Tuple[TypeDescriptor, Mapping[str, Any]]] = []
        self._index: Dict[Tuple[str, Optional[TypeRef], str, int], TypeDescriptor] = {}

    def read_types(self) -> List[TypeDescriptor]:
        for raw in self._raw_types:
            self._declare(raw, declaring=None)
        for descriptor, raw in self._declared:
            self._populate(descriptor, raw)
        self._logger.debug("Read %d types from module %s", len(self._declared), self.identity)
        return [descriptor for descriptor, _ in self._declared]

    # ------------------------------------------------------------------
    # Pass one: type shells

    def _declare(self, raw: Mapping[str, Any], declaring: Optional[TypeDescriptor]) -> TypeDescriptor:
        full_name = _require_str(raw, "name", "type")
        kind = str(raw.get("kind", "class")).lower()
        if kind not in _TYPE_KINDS:
            raise ModuleFormatError(f"Unknown type kind '{kind}' for {full_name}")

        if declaring is None:
            namespace, _, name = full_name.rpartition(".")
        else:
            if "." in full_name or "+" in full_name:
                raise ModuleFormatError(f"Nested type name must be simple: {full_name}")
            namespace, name = declaring.namespace, full_name

        access_table = _TOP_LEVEL_ACCESS if declaring is None else _NESTED_ACCESS
        access_name = str(raw.get("access", "internal" if declaring is None else "private")).lower()
        if access_name not in access_table:
            raise ModuleFormatError(f"Invalid access '{access_name}' for type {full_name}")

        is_static = _as_bool(raw.get("static"))
        descriptor = TypeDescriptor(
            namespace=namespace,
            name=name,
            access=access_table[access_name],
            is_interface=kind == "interface",
            is_value_type=kind in {"struct", "enum"},
            is_abstract=kind == "interface" or is_static or _as_bool(raw.get("abstract")),
            is_sealed=kind in {"struct", "enum"} or is_static or _as_bool(raw.get("sealed")),
            declaring=declaring,
            generic_parameters=[
                GenericParameterDescriptor(name=_generic_parameter_name(item))
                for item in _as_list(raw.get("generic_parameters"), "generic_parameters")
            ],
        )
        self._index[_key(descriptor.reference())] = descriptor
        self._declared.append((descriptor, raw))

        for nested_raw in _as_mapping_list(raw.get("nested_types"), "nested_types"):
            nested = self._declare(nested_raw, declaring=descriptor)
            descriptor.members.append(
                NestedTypeDescriptor(name=nested.name, declaring_type=descriptor, nested=nested)
            )
        return descriptor

    # ------------------------------------------------------------------
    # Pass two: signatures

    def _populate(self, descriptor: TypeDescriptor, raw: Mapping[str, Any]) -> None:
        scope = [parameter.name for parameter in descriptor.generic_parameters]
        kind = str(raw.get("kind", "class")).lower()

        base_text = raw.get("base")
        if base_text is not None:
            if kind != "class":
                raise ModuleFormatError(f"Only classes declare a base type: {descriptor.name}")
            descriptor.base_type = self._parse(base_text, scope)
        elif kind == "class":
            descriptor.base_type = OBJECT
        elif kind == "struct":
            descriptor.base_type = VALUE_TYPE
        elif kind == "enum":
            descriptor.base_type = TypeRef.named("System", "Enum")

        descriptor.declared_interfaces = [
            replace(self._parse(text, scope), is_interface=True)
            for text in _as_str_list(raw.get("interfaces"), "interfaces")
        ]
        descriptor.generic_parameters = [
            self._generic_parameter(item, scope)
            for item in _as_list(raw.get("generic_parameters"), "generic_parameters")
        ]

        nested_members = list(descriptor.members)
        descriptor.members = []
        for member_raw in _as_mapping_list(raw.get("members"), "members"):
            descriptor.members.extend(self._members(descriptor, member_raw, scope))
        descriptor.members.extend(nested_members)

    def _members(self, owner: TypeDescriptor, raw: Mapping[str, Any], scope: List[str]) -> List[MemberDescriptor]:
        kind = str(raw.get("kind", "")).lower()
        if kind == "constructor":
            return [self._constructor(owner, raw, scope)]
        if kind == "method":
            return [self._method(owner, raw, scope)]
        if kind == "field":
            return [self._field(owner, raw, scope)]
        if kind == "property":
            return self._property(owner, raw, scope)
        if kind == "event":
            return self._event(owner, raw, scope)
        if kind in {MemberKind.CUSTOM.value, MemberKind.TYPE_INFO.value}:
            return [
                MemberDescriptor(
                    name=str(raw.get("name", kind)),
                    member_kind=MemberKind(kind),
                    declaring_type=owner,
                )
            ]
        raise ModuleFormatError(f"Unknown member kind '{kind}' in type {owner.name}")

    def _constructor(self, owner: TypeDescriptor, raw: Mapping[str, Any], scope: List[str]) -> ConstructorDescriptor:
        is_static = _as_bool(raw.get("static"))
        return ConstructorDescriptor(
            name=".cctor" if is_static else ".ctor",
            access=MemberAccess.PRIVATE if is_static else self._member_access(owner, raw),
            is_static=is_static,
            parameters=self._parameters(raw.get("parameters"), scope),
            declaring_type=owner,
        )

    def _method(
        self,
        owner: TypeDescriptor,
        raw: Mapping[str, Any],
        scope: List[str],
        *,
        name: Optional[str] = None,
        return_type: Optional[TypeRef] = None,
        parameters: Optional[List[ParameterDescriptor]] = None,
        special: bool = False,
    ) -> MethodDescriptor:
        method_name = name or _require_str(raw, "name", "method")
        generic_raw = _as_list(raw.get("generic_parameters"), "generic_parameters")
        method_scope = scope + [_generic_parameter_name(item) for item in generic_raw]

        is_static = _as_bool(raw.get("static"))
        is_abstract = _as_bool(raw.get("abstract")) or (owner.is_interface and not is_static)
        is_override = _as_bool(raw.get("override"))
        is_virtual = is_abstract or is_override or _as_bool(raw.get("virtual"))
        is_final = _as_bool(raw.get("sealed"))
        access = self._member_access(owner, raw)
        custom_attributes: Tuple[str, ...] = ()
        if _as_bool(raw.get("extension")):
            custom_attributes = (EXTENSION_ATTRIBUTE,)

        implements = [
            replace(self._parse(text, scope), is_interface=True)
            for text in _as_str_list(raw.get("implements"), "implements")
        ]
        explicit_text = raw.get("explicit")
        if explicit_text is not None:
            if not isinstance(explicit_text, str):
                raise ModuleFormatError(f"'explicit' must be a type name on {method_name}")
            explicit = replace(self._parse(explicit_text, scope), is_interface=True)
            if explicit not in implements:
                implements.insert(0, explicit)
            method_name = f"{_interface_name(explicit)}.{method_name}"
            access = MemberAccess.PRIVATE
            is_virtual = is_final = True

        if return_type is None:
            return_type = self._parse(raw.get("returns", "void"), method_scope)
        if parameters is None:
            parameters = self._parameters(raw.get("parameters"), method_scope)

        return MethodDescriptor(
            name=method_name,
            access=access,
            is_static=is_static,
            custom_attributes=custom_attributes,
            declaring_type=owner,
            parameters=parameters,
            return_type=return_type,
            is_virtual=is_virtual,
            is_abstract=is_abstract,
            is_final=is_final,
            is_new_slot=is_virtual and not is_override,
            is_hide_by_sig=not _as_bool(raw.get("hide_by_name")),
            is_special_name=special,
            generic_parameters=[self._generic_parameter(item, method_scope) for item in generic_raw],
            implements=tuple(implements),
        )

    def _field(self, owner: TypeDescriptor, raw: Mapping[str, Any], scope: List[str]) -> FieldDescriptor:
        is_const = _as_bool(raw.get("const"))
        return FieldDescriptor(
            name=_require_str(raw, "name", "field"),
            access=self._member_access(owner, raw),
            is_static=is_const or _as_bool(raw.get("static")),
            declaring_type=owner,
            field_type=self._parse(_require_str(raw, "type", "field"), scope),
            is_literal=is_const,
            is_init_only=_as_bool(raw.get("readonly")),
        )

    def _property(self, owner: TypeDescriptor, raw: Mapping[str, Any], scope: List[str]) -> List[MemberDescriptor]:
        name = _require_str(raw, "name", "property")
        property_type = self._parse(_require_str(raw, "type", "property"), scope)
        members: List[MemberDescriptor] = [
            PropertyDescriptor(
                name=name,
                access=self._member_access(owner, raw),
                is_static=_as_bool(raw.get("static")),
                declaring_type=owner,
                property_type=property_type,
            )
        ]
        for accessor in ("get", "set"):
            if accessor not in raw or raw.get(accessor) is False:
                continue
            accessor_raw = _accessor_settings(raw, raw.get(accessor))
            if accessor == "get":
                members.append(
                    self._method(owner, accessor_raw, scope, name=f"get_{name}", return_type=property_type,
                                 parameters=[], special=True)
                )
            else:
                members.append(
                    self._method(owner, accessor_raw, scope, name=f"set_{name}", return_type=VOID,
                                 parameters=[ParameterDescriptor(name="value", type=property_type)], special=True)
                )
        return members

    def _event(self, owner: TypeDescriptor, raw: Mapping[str, Any], scope: List[str]) -> List[MemberDescriptor]:
        name = _require_str(raw, "name", "event")
        handler_type = self._parse(_require_str(raw, "type", "event"), scope)
        members: List[MemberDescriptor] = [
            EventDescriptor(
                name=name,
                access=self._member_access(owner, raw),
                is_static=_as_bool(raw.get("static")),
                declaring_type=owner,
                handler_type=handler_type,
            )
        ]
        for accessor in ("add", "remove"):
            members.append(
                self._method(owner, raw, scope, name=f"{accessor}_{name}", return_type=VOID,
                             parameters=[ParameterDescriptor(name="value", type=handler_type)], special=True)
            )
        return members

    def _parameters(self, raw: Any, scope: List[str]) -> List[ParameterDescriptor]:
        parameters: List[ParameterDescriptor] = []
        for item in _as_mapping_list(raw, "parameters"):
            name = _require_str(item, "name", "parameter")
            direction = str(item.get("direction") or "").lower()
            if direction not in {"", "ref", "out", "in"}:
                raise ModuleFormatError(f"Invalid direction '{direction}' on parameter {name}")
            parameter_type = self._parse(_require_str(item, "type", "parameter"), scope)
            has_default = "default" in item
            default_value = item.get("default")
            if has_default and default_value is not None and parameter_type == _DECIMAL:
                default_value = Decimal(str(default_value))
            parameters.append(
                ParameterDescriptor(
                    name=name,
                    type=parameter_type,
                    is_by_ref=bool(direction),
                    is_in=direction == "in",
                    is_out=direction == "out",
                    is_optional=has_default,
                    has_default=has_default,
                    default_value=default_value,
                    custom_attributes=(PARAM_ARRAY_ATTRIBUTE,) if _as_bool(item.get("params")) else (),
                )
            )
        return parameters

    def _generic_parameter(self, raw: Any, scope: List[str]) -> GenericParameterDescriptor:
        name = _generic_parameter_name(raw)
        if isinstance(raw, str):
            return GenericParameterDescriptor(name=name)
        base_text = raw.get("base")
        is_struct = _as_bool(raw.get("struct"))
        return GenericParameterDescriptor(
            name=name,
            base_type=self._parse(base_text, scope) if base_text is not None else (VALUE_TYPE if is_struct else None),
            interfaces=tuple(
                replace(self._parse(text, scope), is_interface=True)
                for text in _as_str_list(raw.get("interfaces"), "interfaces")
            ),
            default_constructor=is_struct or _as_bool(raw.get("new")),
            reference_type=_as_bool(raw.get("class")),
            not_nullable_value_type=is_struct,
        )

    def _member_access(self, owner: TypeDescriptor, raw: Mapping[str, Any]) -> MemberAccess:
        default = "public" if owner.is_interface else "private"
        access_name = str(raw.get("access", default)).lower()
        if access_name not in _MEMBER_ACCESS:
            raise ModuleFormatError(f"Invalid access '{access_name}' in type {owner.name}")
        return _MEMBER_ACCESS[access_name]

    def _parse(self, text: Any, scope: Iterable[str]) -> TypeRef:
        if not isinstance(text, str):
            raise ModuleFormatError(f"Type name must be a string, got {text!r}")
        return parse_type_name(text, generic_scope=scope, resolve=self._resolve)

    def _resolve(self, ref: TypeRef) -> TypeRef:
        descriptor = self._index.get(_key(ref))
        if descriptor is not None:
            return replace(ref, is_value_type=descriptor.is_value_type, is_interface=descriptor.is_interface)
        qualified = f"{ref.namespace}.{ref.name}" if ref.namespace else ref.name
        if ref.declaring is None and qualified in self._value_types:
            return replace(ref, is_value_type=True)
        return ref


_DECIMAL = TypeRef.named("System", "Decimal")


def _interface_name(ref: TypeRef) -> str:
    # Deferred: the formatter imports this package.
    from ..formatting import format_type_name

    return format_type_name(ref)


def _key(ref: TypeRef) -> Tuple[str, Optional[TypeRef], str, int]:
    return (ref.namespace, ref.declaring, ref.name, len(ref.arguments))


def _accessor_settings(raw: Mapping[str, Any], accessor: Any) -> Dict[str, Any]:
    settings = {key: value for key, value in raw.items() if key not in {"get", "set", "name", "type", "kind"}}
    if isinstance(accessor, str):
        settings["access"] = accessor
    return settings


def _generic_parameter_name(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("name"), str):
        return raw["name"]
    raise ModuleFormatError(f"Invalid generic parameter: {raw!r}")


def _require_str(raw: Mapping[str, Any], key: str, owner: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ModuleFormatError(f"Missing '{key}' on {owner}")
    return value.strip()


def _as_bool(value: Any) -> bool:
    return value is True


def _as_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ModuleFormatError(f"'{key}' must be a list")
    return value


def _as_mapping_list(value: Any, key: str) -> List[Mapping[str, Any]]:
    items = _as_list(value, key)
    if not all(isinstance(item, Mapping) for item in items):
        raise ModuleFormatError(f"'{key}' must be a list of mappings")
    return items


def _as_str_list(value: Any, key: str) -> List[str]:
    items = _as_list(value, key)
    if not all(isinstance(item, str) for item in items):
        raise ModuleFormatError(f"'{key}' must be a list of strings")
    return items


__all__ = ["DescribedModuleSource"]
