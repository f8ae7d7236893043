"""Resolution of raw visibility flags to one of five accessibility levels."""

from __future__ import annotations

from ..metadata.descriptors import MemberAccess, TypeAccess
from ..models import BaselineVisibility

# Checked in order; the first match wins and Internal is the fallback.
_TYPE_RULES = (
    ({TypeAccess.PUBLIC, TypeAccess.NESTED_PUBLIC}, BaselineVisibility.PUBLIC),
    ({TypeAccess.NESTED_FAM_OR_ASSEM}, BaselineVisibility.PROTECTED_INTERNAL),
    ({TypeAccess.NESTED_FAMILY}, BaselineVisibility.PROTECTED),
    ({TypeAccess.NESTED_PRIVATE}, BaselineVisibility.PRIVATE),
)

_MEMBER_RULES = (
    ({MemberAccess.PUBLIC}, BaselineVisibility.PUBLIC),
    ({MemberAccess.FAM_OR_ASSEM}, BaselineVisibility.PROTECTED_INTERNAL),
    ({MemberAccess.FAMILY}, BaselineVisibility.PROTECTED),
    ({MemberAccess.PRIVATE}, BaselineVisibility.PRIVATE),
)


def resolve_type_visibility(access: TypeAccess) -> BaselineVisibility:
    """Map a type's raw access flag to its accessibility level."""
    for flags, visibility in _TYPE_RULES:
        if access in flags:
            return visibility
    return BaselineVisibility.INTERNAL


def resolve_member_visibility(access: MemberAccess) -> BaselineVisibility:
    """Map a constructor, method or field's raw access flag to its accessibility level."""
    for flags, visibility in _MEMBER_RULES:
        if access in flags:
            return visibility
    return BaselineVisibility.INTERNAL


__all__ = ["resolve_member_visibility", "resolve_type_visibility"]
