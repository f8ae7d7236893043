"""Introspection of module metadata into baseline documents."""

from .accessibility import resolve_member_visibility, resolve_type_visibility
from .constraints import extract_generic_constraints
from .filters import exclude_names, exclude_namespaces, filters_from_config, public_api_only
from .generator import BaselineGenerator, TypeFilter
from .interfaces import InterfaceImplementationTable, minimal_interfaces
from .members import MemberClassifier, SignatureIndex
from .types import TypeClassifier

__all__ = [
    "BaselineGenerator",
    "InterfaceImplementationTable",
    "MemberClassifier",
    "SignatureIndex",
    "TypeClassifier",
    "TypeFilter",
    "exclude_names",
    "exclude_namespaces",
    "extract_generic_constraints",
    "filters_from_config",
    "minimal_interfaces",
    "public_api_only",
    "resolve_member_visibility",
    "resolve_type_visibility",
]
