"""
Requirement-to-operator matching for the crew screen.

For every requirement of a production, list the operators who could fill it
(specialization matches the role, not already assigned to this production in
this role) beside the operators already assigned. No ranking or automatic
selection happens here; the booking officer picks.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from apps.accounts.models import User
from apps.productions.conflicts import Conflict, check_conflict_for
from apps.productions.models import Assignment, Production
from apps.productions.reconciler import DesiredEntry, PendingDelete

logger = logging.getLogger(__name__)


@dataclass
class RoleRoster:
    """Candidates and current crew for one required role."""

    role: str
    required: int
    available: list[User] = field(default_factory=list)
    assigned: list[Assignment] = field(default_factory=list)
    conflicts: dict[int, Conflict] = field(default_factory=dict)

    @property
    def assigned_count(self) -> int:
        return len(self.assigned)

    @property
    def is_filled(self) -> bool:
        return self.assigned_count >= self.required


def build_roster(production: Production, with_conflicts: bool = True) -> dict[str, RoleRoster]:
    """
    Build the candidate lists for each of the production's requirements.

    Args:
        production: The production being staffed.
        with_conflicts: Also run the conflict checker for every available operator.

    Returns:
        Dict of role → RoleRoster, in requirement order.
    """
    roster = {}
    for role, required in production.requirement_map().items():
        assigned = list(
            Assignment.objects.filter(production=production, role=role)
            .select_related("user")
            .order_by("pk")
        )
        assigned_ids = {a.user_id for a in assigned}
        available = [
            op for op in User.objects.with_specialization(role)
            if op.pk not in assigned_ids
        ]

        entry = RoleRoster(role=role, required=required, available=available, assigned=assigned)
        if with_conflicts:
            for op in available:
                conflict = check_conflict_for(op, production)
                if conflict is not None:
                    entry.conflicts[op.pk] = conflict
        roster[role] = entry
    return roster


def remaining_capacity(desired: Iterable[DesiredEntry], role: str, required: int) -> int:
    """
    How many more operators may be added to a role.

    Entries pending deletion do not count towards the requirement.
    """
    taken = sum(1 for e in desired if e.role == role and not isinstance(e, PendingDelete))
    return max(required - taken, 0)


def over_capacity_roles(desired: Iterable[DesiredEntry], requirements: dict[str, int]) -> dict[str, int]:
    """
    Roles whose desired headcount exceeds the requirement.

    Args:
        desired: Tagged desired entries.
        requirements: role → required count.

    Returns:
        Dict of role → number of surplus entries. Roles with no requirement
        at all count every live entry as surplus.
    """
    desired = list(desired)
    counts: dict[str, int] = {}
    for entry in desired:
        if isinstance(entry, PendingDelete):
            continue
        counts[entry.role] = counts.get(entry.role, 0) + 1

    surplus = {}
    for role, count in counts.items():
        over = count - requirements.get(role, 0)
        if over > 0:
            surplus[role] = over
    return surplus

