"""Interface implementation resolution and interface-set reduction."""

from __future__ import annotations

from typing import Collection, Dict, List, Optional, Sequence

from ..formatting import format_type_name
from ..metadata.base import MetadataSource
from ..metadata.descriptors import MemberAccess, MethodDescriptor, TypeDescriptor, TypeRef


class InterfaceImplementationTable:
    """Maps every method of one type to the interface whose slot it fills.

    Built once per type from the source's dispatch maps; explicit and implicit
    queries for all members of that type are answered from the same table.
    """

    def __init__(self, source: MetadataSource, type_: TypeDescriptor) -> None:
        self._entries: Dict[MethodDescriptor, TypeRef] = {}
        if type_.is_interface:
            return
        for interface in source.interfaces(type_):
            for target in source.interface_map(type_, interface).values():
                # The first interface a method satisfies wins.
                self._entries.setdefault(target, interface)

    def resolve(self, method: MethodDescriptor, *, explicit: bool) -> Optional[str]:
        """Return the interface ``method`` implements, or None.

        With ``explicit`` set the interface is only returned for the private,
        final shape compilers give explicit implementations.
        """
        interface = self._entries.get(method)
        if interface is None:
            return None
        if explicit and not (method.access is MemberAccess.PRIVATE and method.is_final):
            return None
        return format_type_name(interface)


def minimal_interfaces(
    source: MetadataSource,
    interfaces: Sequence[TypeRef],
    base_type: Optional[TypeRef],
    *,
    redeclared: Collection[TypeRef] = (),
) -> List[TypeRef]:
    """Drop interfaces already implied by the base type or by another listed interface.

    Interfaces in ``redeclared`` survive the base-type check: a type that
    re-implements an interface its base already implements lists it again.
    """
    inherited = set(source.interfaces_of(base_type)) if base_type is not None else set()
    implied = set()
    for interface in interfaces:
        implied.update(source.interfaces_of(interface))

    result: List[TypeRef] = []
    for interface in interfaces:
        if interface in inherited and interface not in redeclared:
            continue
        if interface in implied or interface in result:
            continue
        result.append(interface)
    return result


__all__ = ["InterfaceImplementationTable", "minimal_interfaces"]
