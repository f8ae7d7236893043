"""Tests for apicheck.baseline.accessibility."""

from __future__ import annotations

import pytest

from apicheck.baseline.accessibility import resolve_member_visibility, resolve_type_visibility
from apicheck.metadata.descriptors import MemberAccess, TypeAccess
from apicheck.models import BaselineVisibility


@pytest.mark.parametrize(
    ("access", "expected"),
    [
        (TypeAccess.PUBLIC, BaselineVisibility.PUBLIC),
        (TypeAccess.NESTED_PUBLIC, BaselineVisibility.PUBLIC),
        (TypeAccess.NESTED_FAM_OR_ASSEM, BaselineVisibility.PROTECTED_INTERNAL),
        (TypeAccess.NESTED_FAMILY, BaselineVisibility.PROTECTED),
        (TypeAccess.NESTED_PRIVATE, BaselineVisibility.PRIVATE),
        (TypeAccess.NOT_PUBLIC, BaselineVisibility.INTERNAL),
        (TypeAccess.NESTED_ASSEMBLY, BaselineVisibility.INTERNAL),
        (TypeAccess.NESTED_FAM_AND_ASSEM, BaselineVisibility.INTERNAL),
    ],
)
def test_type_visibility(access: TypeAccess, expected: BaselineVisibility) -> None:
    assert resolve_type_visibility(access) is expected


@pytest.mark.parametrize(
    ("access", "expected"),
    [
        (MemberAccess.PUBLIC, BaselineVisibility.PUBLIC),
        (MemberAccess.FAM_OR_ASSEM, BaselineVisibility.PROTECTED_INTERNAL),
        (MemberAccess.FAMILY, BaselineVisibility.PROTECTED),
        (MemberAccess.PRIVATE, BaselineVisibility.PRIVATE),
        (MemberAccess.ASSEMBLY, BaselineVisibility.INTERNAL),
        (MemberAccess.FAM_AND_ASSEM, BaselineVisibility.INTERNAL),
        (MemberAccess.PRIVATE_SCOPE, BaselineVisibility.INTERNAL),
    ],
)
def test_member_visibility(access: MemberAccess, expected: BaselineVisibility) -> None:
    assert resolve_member_visibility(access) is expected


def test_every_raw_flag_resolves_to_exactly_one_level() -> None:
    for access in TypeAccess:
        assert isinstance(resolve_type_visibility(access), BaselineVisibility)
    for member_access in MemberAccess:
        assert isinstance(resolve_member_visibility(member_access), BaselineVisibility)
