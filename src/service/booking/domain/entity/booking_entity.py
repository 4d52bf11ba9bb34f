from datetime import datetime
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidArgumentError, InvalidStateError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_transitions import (
    APPROVAL_TRANSITIONS,
    ARTWORK_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    ensure_transition,
)
from src.service.booking.domain.enum.booking_enum import (
    ApprovalStatus,
    ArtworkStatus,
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)


def _ensure_upload_path(field: str, path: str) -> None:
    """Uploaded files are referenced relative to the upload directory"""
    posix = PurePosixPath(path.replace('\\', '/'))
    if posix.is_absolute() or PureWindowsPath(path).drive or '..' in posix.parts:
        raise InvalidArgumentError(f'{field} must be a relative path inside the upload directory')


@attrs.define
class Booking:
    id: str
    user_id: str
    campaign_id: str
    route_id: str
    industry_id: str
    business_name: str
    contact_email: str
    quantity: int
    amount: int
    exclusive_slot: bool = True
    industry_label: Optional[str] = None

    status: BookingStatus = BookingStatus.CONFIRMED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    artwork_status: ArtworkStatus = ArtworkStatus.PENDING_UPLOAD

    # Payment
    pending_since: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    amount_paid: Optional[int] = None
    payment_ref: Optional[str] = None

    # Approval
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_note: Optional[str] = None

    # Artwork and design assets
    artwork_file_path: Optional[str] = None
    artwork_uploaded_at: Optional[datetime] = None
    artwork_reviewed_at: Optional[datetime] = None
    artwork_rejection_reason: Optional[str] = None
    logo_file_path: Optional[str] = None
    optional_image_path: Optional[str] = None

    # Cancellation
    cancellation_date: Optional[datetime] = None
    refund_amount: Optional[int] = None
    refund_status: Optional[RefundStatus] = None

    # Pricing provenance
    price_override: Optional[int] = None
    price_override_note: Optional[str] = None
    base_price_before_discounts: Optional[int] = None
    loyalty_discount_applied: bool = False
    counts_toward_loyalty: bool = False

    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user_id: str,
        campaign_id: str,
        route_id: str,
        industry_id: str,
        business_name: str,
        contact_email: str,
        quantity: int,
        amount: int,
        now: datetime,
        max_quantity: int = 4,
        exclusive_slot: bool = True,
        industry_label: Optional[str] = None,
        base_price_before_discounts: Optional[int] = None,
        loyalty_discount_applied: bool = False,
        counts_toward_loyalty: bool = False,
    ) -> 'Booking':
        if not 1 <= quantity <= max_quantity:
            raise InvalidArgumentError(f'quantity must be between 1 and {max_quantity}')
        if amount < 0:
            raise InvalidArgumentError('amount must not be negative')
        if not business_name.strip():
            raise InvalidArgumentError('business_name is required')
        if '@' not in contact_email:
            raise InvalidArgumentError('contact_email must be an email address')

        return cls(
            id=str(uuid_utils.uuid7()),
            user_id=user_id,
            campaign_id=campaign_id,
            route_id=route_id,
            industry_id=industry_id,
            business_name=business_name.strip(),
            contact_email=contact_email.strip(),
            quantity=quantity,
            amount=amount,
            exclusive_slot=exclusive_slot,
            industry_label=industry_label,
            pending_since=now,
            base_price_before_discounts=base_price_before_discounts,
            loyalty_discount_applied=loyalty_discount_applied,
            counts_toward_loyalty=counts_toward_loyalty,
            created_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def amount_due(self) -> int:
        """Admin override wins over the computed price at checkout"""
        return self.price_override if self.price_override is not None else self.amount

    @property
    def settled_amount(self) -> int:
        return self.amount_paid if self.amount_paid is not None else self.amount

    @property
    def file_paths(self) -> tuple[str, ...]:
        return tuple(
            path
            for path in (self.artwork_file_path, self.logo_file_path, self.optional_image_path)
            if path
        )

    def ensure_active(self) -> None:
        if not self.is_active:
            raise InvalidStateError(f'Booking {self.id} is cancelled')

    def restart_payment(self, *, now: datetime) -> 'Booking':
        """Failed payments go back to pending with a fresh expiry window"""
        self.ensure_active()
        if self.payment_status == PaymentStatus.PENDING:
            return self
        ensure_transition(
            PAYMENT_TRANSITIONS, self.payment_status, PaymentStatus.PENDING, axis='payment'
        )
        return attrs.evolve(self, payment_status=PaymentStatus.PENDING, pending_since=now)

    @Logger.io
    def mark_paid(self, *, amount_paid: int, payment_ref: str, now: datetime) -> 'Booking':
        self.ensure_active()
        if amount_paid < 0:
            raise InvalidArgumentError('amount_paid must not be negative')
        ensure_transition(
            PAYMENT_TRANSITIONS, self.payment_status, PaymentStatus.PAID, axis='payment'
        )
        return attrs.evolve(
            self,
            payment_status=PaymentStatus.PAID,
            amount_paid=amount_paid,
            payment_ref=payment_ref,
            paid_at=now,
            pending_since=None,
        )

    def mark_payment_failed(self) -> 'Booking':
        self.ensure_active()
        ensure_transition(
            PAYMENT_TRANSITIONS, self.payment_status, PaymentStatus.FAILED, axis='payment'
        )
        return attrs.evolve(self, payment_status=PaymentStatus.FAILED)

    def approve(self, *, now: datetime) -> 'Booking':
        self.ensure_active()
        ensure_transition(
            APPROVAL_TRANSITIONS, self.approval_status, ApprovalStatus.APPROVED, axis='approval'
        )
        return attrs.evolve(
            self,
            approval_status=ApprovalStatus.APPROVED,
            approved_at=now,
            rejected_at=None,
            rejection_note=None,
        )

    def reject(self, *, note: str, now: datetime) -> 'Booking':
        if not note or not note.strip():
            raise InvalidArgumentError('A rejection note is required')
        self.ensure_active()
        ensure_transition(
            APPROVAL_TRANSITIONS, self.approval_status, ApprovalStatus.REJECTED, axis='approval'
        )
        return attrs.evolve(
            self,
            approval_status=ApprovalStatus.REJECTED,
            rejected_at=now,
            rejection_note=note.strip(),
            approved_at=None,
        )

    def submit_artwork(self, *, file_path: str, now: datetime) -> 'Booking':
        if not file_path:
            raise InvalidArgumentError('file_path is required')
        _ensure_upload_path('file_path', file_path)
        self.ensure_active()
        ensure_transition(
            ARTWORK_TRANSITIONS, self.artwork_status, ArtworkStatus.UNDER_REVIEW, axis='artwork'
        )
        return attrs.evolve(
            self,
            artwork_status=ArtworkStatus.UNDER_REVIEW,
            artwork_file_path=file_path,
            artwork_uploaded_at=now,
            artwork_reviewed_at=None,
        )

    def approve_artwork(self, *, now: datetime) -> 'Booking':
        self.ensure_active()
        ensure_transition(
            ARTWORK_TRANSITIONS, self.artwork_status, ArtworkStatus.APPROVED, axis='artwork'
        )
        return attrs.evolve(
            self,
            artwork_status=ArtworkStatus.APPROVED,
            artwork_reviewed_at=now,
            artwork_rejection_reason=None,
        )

    def reject_artwork(self, *, reason: str, now: datetime) -> 'Booking':
        if not reason or not reason.strip():
            raise InvalidArgumentError('A rejection reason is required')
        self.ensure_active()
        ensure_transition(
            ARTWORK_TRANSITIONS, self.artwork_status, ArtworkStatus.REJECTED, axis='artwork'
        )
        return attrs.evolve(
            self,
            artwork_status=ArtworkStatus.REJECTED,
            artwork_reviewed_at=now,
            artwork_rejection_reason=reason.strip(),
        )

    def attach_assets(
        self, *, logo_file_path: Optional[str] = None, optional_image_path: Optional[str] = None
    ) -> 'Booking':
        if logo_file_path:
            _ensure_upload_path('logo_file_path', logo_file_path)
        if optional_image_path:
            _ensure_upload_path('optional_image_path', optional_image_path)
        self.ensure_active()
        return attrs.evolve(
            self,
            logo_file_path=logo_file_path or self.logo_file_path,
            optional_image_path=optional_image_path or self.optional_image_path,
        )

    def set_price_override(
        self, *, price_override: Optional[int], note: Optional[str] = None
    ) -> 'Booking':
        """
        Set or clear the admin price. Clearing (None) also drops the note.

        Raises:
            InvalidArgumentError: negative price
            InvalidStateError: booking already paid or cancelled
        """
        if price_override is not None and price_override < 0:
            raise InvalidArgumentError('price_override must not be negative')
        self.ensure_active()
        if self.is_paid:
            raise InvalidStateError('Cannot override the price of a paid booking')
        if price_override is None:
            return attrs.evolve(self, price_override=None, price_override_note=None)
        return attrs.evolve(
            self,
            price_override=price_override,
            price_override_note=note.strip() if note else None,
            counts_toward_loyalty=False,
        )

    def record_refund_outcome(self, *, refund_status: RefundStatus) -> 'Booking':
        if self.is_active:
            raise InvalidStateError('Only cancelled bookings can be refunded')
        if self.refund_status != RefundStatus.PENDING:
            raise InvalidStateError(f'Refund is not pending (current: {self.refund_status})')
        if refund_status not in (RefundStatus.PROCESSED, RefundStatus.FAILED):
            raise InvalidArgumentError('refund outcome must be processed or failed')
        return attrs.evolve(self, refund_status=refund_status)


@attrs.define(frozen=True)
class CancellationResult:
    booking: Booking
    cancelled_now: bool
