"""Reusable inclusion predicates for baseline generation."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, List, Sequence

from ..formatting import format_definition_name
from ..metadata.descriptors import TypeDescriptor
from ..models import BaselineVisibility
from .accessibility import resolve_type_visibility
from .generator import TypeFilter

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..config import FilterConfig

_EXTERNALLY_VISIBLE = {
    BaselineVisibility.PUBLIC,
    BaselineVisibility.PROTECTED,
    BaselineVisibility.PROTECTED_INTERNAL,
}


def public_api_only(type_: TypeDescriptor) -> bool:
    """Admit types reachable from outside the module, enclosing types included."""
    current = type_
    while current is not None:
        if resolve_type_visibility(current.access) not in _EXTERNALLY_VISIBLE:
            return False
        current = current.declaring
    return True


def exclude_namespaces(prefixes: Sequence[str]) -> TypeFilter:
    """Reject types whose namespace is, or lives under, one of ``prefixes``."""
    cleaned = [prefix.strip().rstrip(".") for prefix in prefixes if prefix.strip()]

    def _filter(type_: TypeDescriptor) -> bool:
        namespace = type_.namespace
        for prefix in cleaned:
            if namespace == prefix or namespace.startswith(prefix + "."):
                return False
        return True

    return _filter


def exclude_names(patterns: Sequence[str]) -> TypeFilter:
    """Reject types whose canonical name matches one of the glob ``patterns``."""
    cleaned = [pattern.strip() for pattern in patterns if pattern.strip()]

    def _filter(type_: TypeDescriptor) -> bool:
        name = format_definition_name(type_)
        return not any(fnmatchcase(name, pattern) for pattern in cleaned)

    return _filter


def filters_from_config(config: "FilterConfig") -> List[TypeFilter]:
    filters: List[TypeFilter] = []
    if not config.include_internal:
        filters.append(public_api_only)
    if config.exclude_namespaces:
        filters.append(exclude_namespaces(config.exclude_namespaces))
    if config.exclude_types:
        filters.append(exclude_names(config.exclude_types))
    return filters


__all__ = ["exclude_names", "exclude_namespaces", "filters_from_config", "public_api_only"]
