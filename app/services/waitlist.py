"""Capacity and waitlist decisions for a single topic.

Everything here is pure: callers pass the topic's signups in waitlist order
(ascending insertion order) and apply the returned decision themselves, under
whatever per-topic lock their storage provides. Re-running a decision on the
same input gives the same answer, so an optimistic retry is always safe.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from app.core.errors import CapacityDecreaseRejected
from app.models.signup import SignupStatus


@dataclass
class SignupState:
    id: Any
    status: SignupStatus


@dataclass
class CapacityChange:
    capacity: int
    promoted: List[Any] = field(default_factory=list)
    rejected: bool = False
    message: Optional[str] = None


def _is_confirmed(signup) -> bool:
    return SignupStatus(signup.status) == SignupStatus.confirmed


def confirmed_count(signups: Sequence) -> int:
    return sum(1 for signup in signups if _is_confirmed(signup))


def admission_status(capacity: int, confirmed: int) -> SignupStatus:
    if confirmed < capacity:
        return SignupStatus.confirmed
    return SignupStatus.waitlisted


def fill_open_slots(capacity: int, signups: Sequence) -> List[Any]:
    """Ids of the waitlisted signups that fit into the free slots, earliest first."""
    free = capacity - confirmed_count(signups)
    if free <= 0:
        return []
    waitlisted = [signup.id for signup in signups if not _is_confirmed(signup)]
    return waitlisted[:free]


def reconcile_capacity(current_capacity: int, requested_capacity: Any, signups: Sequence) -> CapacityChange:
    try:
        requested = int(requested_capacity)
    except (TypeError, ValueError):
        return CapacityChange(
            capacity=current_capacity,
            rejected=True,
            message="Value of maximum choosers must be a non-negative number.",
        )
    if requested < 0:
        return CapacityChange(
            capacity=current_capacity,
            rejected=True,
            message="Value of maximum choosers must be a non-negative number.",
        )

    if not signups or requested == current_capacity:
        return CapacityChange(capacity=requested)

    if requested > current_capacity:
        return CapacityChange(capacity=requested, promoted=fill_open_slots(requested, signups))

    # shrinking would demote already committed teams
    error = CapacityDecreaseRejected(current_capacity, requested)
    return CapacityChange(capacity=current_capacity, rejected=True, message=error.message)


def apply_capacity_change(signups: Sequence, change: CapacityChange) -> List[SignupState]:
    promoted = set(change.promoted)
    return [
        SignupState(
            id=signup.id,
            status=SignupStatus.confirmed if signup.id in promoted else SignupStatus(signup.status),
        )
        for signup in signups
    ]
