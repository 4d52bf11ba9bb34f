"""
Allowed transitions for each independent booking axis.

The overall BookingStatus flag is not listed here: confirmed -> cancelled is
the only move and it is terminal.
"""

from enum import StrEnum
from typing import Mapping, TypeVar

from src.platform.exception.exceptions import InvalidStateError
from src.service.booking.domain.enum.booking_enum import (
    ApprovalStatus,
    ArtworkStatus,
    PaymentStatus,
)


_S = TypeVar('_S', bound=StrEnum)

PAYMENT_TRANSITIONS: Mapping[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset(),
}

APPROVAL_TRANSITIONS: Mapping[ApprovalStatus, frozenset[ApprovalStatus]] = {
    ApprovalStatus.PENDING: frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}),
    ApprovalStatus.APPROVED: frozenset({ApprovalStatus.REJECTED}),
    ApprovalStatus.REJECTED: frozenset({ApprovalStatus.APPROVED}),
}

ARTWORK_TRANSITIONS: Mapping[ArtworkStatus, frozenset[ArtworkStatus]] = {
    ArtworkStatus.PENDING_UPLOAD: frozenset({ArtworkStatus.UNDER_REVIEW}),
    ArtworkStatus.UNDER_REVIEW: frozenset({ArtworkStatus.APPROVED, ArtworkStatus.REJECTED}),
    ArtworkStatus.REJECTED: frozenset({ArtworkStatus.UNDER_REVIEW}),
    ArtworkStatus.APPROVED: frozenset(),
}


def can_transition(table: Mapping[_S, frozenset[_S]], current: _S, target: _S) -> bool:
    return target in table.get(current, frozenset())


def ensure_transition(
    table: Mapping[_S, frozenset[_S]], current: _S, target: _S, *, axis: str
) -> None:
    """
    Raises:
        InvalidStateError: target is not reachable from current on this axis
    """
    if not can_transition(table, current, target):
        raise InvalidStateError(f'Cannot move {axis} from {current} to {target}')
