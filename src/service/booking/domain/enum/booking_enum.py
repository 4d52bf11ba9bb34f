from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'


class ApprovalStatus(StrEnum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class ArtworkStatus(StrEnum):
    PENDING_UPLOAD = 'pending_upload'
    UNDER_REVIEW = 'under_review'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class RefundStatus(StrEnum):
    PENDING = 'pending'
    PROCESSED = 'processed'
    NO_REFUND = 'no_refund'
    FAILED = 'failed'
