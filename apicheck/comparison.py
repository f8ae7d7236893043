"""Breaking-change detection between two baseline documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Dict, List, Optional, Sequence

from .logging import get_logger
from .models import BaselineDocument, BaselineKind, BaselineVisibility, MemberBaseline, TypeBaseline

_EXTERNALLY_VISIBLE = {
    BaselineVisibility.PUBLIC,
    BaselineVisibility.PROTECTED,
    BaselineVisibility.PROTECTED_INTERNAL,
}

TYPE_REMOVED = "type_removed"
TYPE_CHANGED = "type_changed"
MEMBER_REMOVED = "member_removed"
INTERFACE_MEMBER_ADDED = "interface_member_added"


@dataclass(frozen=True)
class BreakingChange:
    """One incompatibility between an old and a new baseline."""

    kind: str
    type_id: str
    member_id: Optional[str] = None
    new_type_id: Optional[str] = None

    def describe(self) -> str:
        if self.kind == TYPE_REMOVED:
            return f"Type removed: {self.type_id}"
        if self.kind == TYPE_CHANGED:
            return f"Type changed: {self.type_id} -> {self.new_type_id}"
        if self.kind == MEMBER_REMOVED:
            return f"Member removed from {self.type_id}: {self.member_id}"
        return f"Member added to interface {self.type_id}: {self.member_id}"


@dataclass
class ComparisonResult:
    old_identity: str
    new_identity: str
    breaking_changes: List[BreakingChange] = field(default_factory=list)

    @property
    def has_breaking_changes(self) -> bool:
        return bool(self.breaking_changes)


def compare_baselines(
    old: BaselineDocument,
    new: BaselineDocument,
    *,
    ignore_types: Sequence[str] = (),
) -> ComparisonResult:
    """Compare types by canonical name, then members by identifier.

    Only externally visible types and members take part. Additions are
    compatible except new members on an interface.
    """
    logger = get_logger("comparison")
    result = ComparisonResult(old_identity=old.assembly_identity, new_identity=new.assembly_identity)
    new_types: Dict[str, TypeBaseline] = {type_baseline.name: type_baseline for type_baseline in new.types}

    for old_type in old.types:
        if old_type.visibility not in _EXTERNALLY_VISIBLE or _ignored(old_type.name, ignore_types):
            continue
        new_type = new_types.get(old_type.name)
        if new_type is None:
            result.breaking_changes.append(BreakingChange(kind=TYPE_REMOVED, type_id=old_type.id))
            continue
        if new_type.id != old_type.id:
            result.breaking_changes.append(
                BreakingChange(kind=TYPE_CHANGED, type_id=old_type.id, new_type_id=new_type.id)
            )
        result.breaking_changes.extend(_compare_members(old_type, new_type))

    logger.info(
        "Compared %s with %s: %d breaking changes",
        old.assembly_identity,
        new.assembly_identity,
        len(result.breaking_changes),
    )
    return result


def _compare_members(old_type: TypeBaseline, new_type: TypeBaseline) -> List[BreakingChange]:
    changes: List[BreakingChange] = []
    new_members = {member.id for member in new_type.members}
    old_members = {member.id for member in old_type.members}

    for member in old_type.members:
        if not _visible(member):
            continue
        if member.id not in new_members:
            changes.append(BreakingChange(kind=MEMBER_REMOVED, type_id=old_type.id, member_id=member.id))

    if new_type.kind is BaselineKind.INTERFACE:
        for member in new_type.members:
            if member.id not in old_members and not member.static:
                changes.append(
                    BreakingChange(kind=INTERFACE_MEMBER_ADDED, type_id=new_type.id, member_id=member.id)
                )
    return changes


def _visible(member: MemberBaseline) -> bool:
    return member.visibility in _EXTERNALLY_VISIBLE


def _ignored(name: str, patterns: Sequence[str]) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in patterns)


__all__ = [
    "INTERFACE_MEMBER_ADDED",
    "MEMBER_REMOVED",
    "TYPE_CHANGED",
    "TYPE_REMOVED",
    "BreakingChange",
    "ComparisonResult",
    "compare_baselines",
]
