"""Base classes for metadata source adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .descriptors import MemberAccess, MethodDescriptor, TypeDescriptor, TypeRef, TypeRefKind

# Interface slot identity: slot name plus its parameter types.
SlotKey = Tuple[str, Tuple[TypeRef, ...]]
InterfaceMap = Mapping[SlotKey, MethodDescriptor]


@dataclass(frozen=True)
class MethodSite:
    """A method seen from a (possibly derived) type.

    ``mapping`` translates the declaring type's generic parameters into the
    terms of the type the method was looked up from.
    """

    method: MethodDescriptor
    mapping: Mapping[str, TypeRef] = field(default_factory=dict)

    @property
    def return_type(self) -> TypeRef:
        return self.method.return_type.substitute(self.mapping)

    def parameter_types(self) -> Tuple[TypeRef, ...]:
        return tuple(parameter.type.substitute(self.mapping) for parameter in self.method.parameters)


class MetadataSource(ABC):
    """Contract for adapters exposing a compiled module's type metadata.

    Adapters supply the raw tables (identity, type definitions, dispatch
    maps). Queries derivable from those tables have default implementations.
    """

    _type_index: Optional[Dict[Tuple[str, Optional[TypeRef], str, int], TypeDescriptor]] = None

    @abstractmethod
    def identity(self) -> str:
        """Return the module identity string (name, version, key token)."""

    @abstractmethod
    def defined_types(self) -> Sequence[TypeDescriptor]:
        """Return every declared type, nested ones included, in enumeration order."""

    @abstractmethod
    def interface_map(self, type_: TypeDescriptor, interface: TypeRef) -> InterfaceMap:
        """Return the dispatch map pairing interface slots with target methods."""

    def find_type(self, ref: TypeRef) -> Optional[TypeDescriptor]:
        """Return the definition behind ``ref`` when this module defines it."""
        if ref.kind is not TypeRefKind.NAMED:
            return None
        if self._type_index is None:
            index = {}
            for descriptor in self.defined_types():
                index[_definition_key(descriptor.reference())] = descriptor
            self._type_index = index
        return self._type_index.get(_definition_key(ref))

    def argument_map(self, descriptor: TypeDescriptor, ref: TypeRef) -> Dict[str, TypeRef]:
        """Map ``descriptor``'s generic parameter names to the arguments in ``ref``."""
        return {
            parameter.name: argument
            for parameter, argument in zip(descriptor.generic_parameters, ref.arguments)
            if argument != parameter.reference()
        }

    def base_chain(self, type_: TypeDescriptor) -> List[Tuple[TypeDescriptor, Dict[str, TypeRef]]]:
        """Return the module-defined ancestors of ``type_``, nearest first."""
        chain: List[Tuple[TypeDescriptor, Dict[str, TypeRef]]] = []
        seen = {id(type_)}
        mapping: Dict[str, TypeRef] = {}
        current = type_
        while current.base_type is not None:
            base_ref = current.base_type.substitute(mapping)
            base = self.find_type(base_ref)
            if base is None or id(base) in seen:
                break
            seen.add(id(base))
            mapping = self.argument_map(base, base_ref)
            chain.append((base, mapping))
            current = base
        return chain

    def interfaces_of(self, ref: TypeRef) -> List[TypeRef]:
        """Return every interface ``ref`` implements, transitively, first seen first."""
        result: List[TypeRef] = []
        visited: set[TypeRef] = set()

        def _visit(current: TypeRef) -> None:
            if current in visited:
                return
            visited.add(current)
            descriptor = self.find_type(current)
            if descriptor is None:
                return
            mapping = self.argument_map(descriptor, current)
            for interface in descriptor.declared_interfaces:
                resolved = interface.substitute(mapping)
                if resolved not in result:
                    result.append(resolved)
                _visit(resolved)
            if descriptor.base_type is not None:
                _visit(descriptor.base_type.substitute(mapping))

        _visit(ref)
        return result

    def interfaces(self, type_: TypeDescriptor) -> List[TypeRef]:
        """Return every interface the type implements, transitively."""
        return self.interfaces_of(type_.reference())

    def base_definition(self, method: MethodDescriptor) -> Optional[MethodDescriptor]:
        """Return the root virtual slot ``method`` overrides.

        A method opening its own slot is its own base definition. ``None``
        means the overridden slot is declared outside this module.
        """
        if not method.is_virtual or method.is_new_slot or method.declaring_type is None:
            return method
        own = MethodSite(method)
        for ancestor, mapping in self.base_chain(method.declaring_type):
            for candidate in ancestor.methods():
                if not candidate.is_virtual or candidate.name != method.name:
                    continue
                site = MethodSite(candidate, mapping)
                if _same_parameters(site, own):
                    return self.base_definition(candidate)
        return None

    def methods_named(self, type_: TypeDescriptor, name: str) -> List[MethodSite]:
        """Return public methods named ``name`` visible on ``type_``, inherited included."""
        sites = [
            MethodSite(method)
            for method in type_.methods()
            if method.name == name and method.access is MemberAccess.PUBLIC
        ]
        for ancestor, mapping in self.base_chain(type_):
            for method in ancestor.methods():
                if method.name == name and method.access is MemberAccess.PUBLIC and not method.is_static:
                    sites.append(MethodSite(method, mapping))
        return sites


def _definition_key(ref: TypeRef) -> Tuple[str, Optional[TypeRef], str, int]:
    return (ref.namespace, ref.declaring, ref.name, len(ref.arguments))


def _same_parameters(left: MethodSite, right: MethodSite) -> bool:
    if len(left.method.generic_parameters) != len(right.method.generic_parameters):
        return False
    if left.parameter_types() != right.parameter_types():
        return False
    return all(
        a.is_by_ref == b.is_by_ref
        for a, b in zip(left.method.parameters, right.method.parameters)
    )


__all__ = ["InterfaceMap", "MetadataSource", "MethodSite", "SlotKey"]
