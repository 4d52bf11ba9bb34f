from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


# One active paid booking per cell, unlimited industries excluded via exclusive_slot
_ACTIVE_PAID_SLOT = text("status = 'confirmed' AND payment_status = 'paid' AND exclusive_slot")


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        Index(
            'uq_booking_active_paid_slot',
            'campaign_id',
            'route_id',
            'industry_id',
            unique=True,
            postgresql_where=_ACTIVE_PAID_SLOT,
            sqlite_where=_ACTIVE_PAID_SLOT,
        ),
        Index('ix_booking_payment_pending_since', 'payment_status', 'pending_since'),
        Index('ix_booking_cell', 'campaign_id', 'route_id', 'industry_id'),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    user_id: Mapped[str] = mapped_column(ForeignKey('app_user.id'), nullable=False, index=True)
    campaign_id: Mapped[str] = mapped_column(ForeignKey('campaign.id'), nullable=False)
    route_id: Mapped[str] = mapped_column(ForeignKey('route.id'), nullable=False)
    industry_id: Mapped[str] = mapped_column(ForeignKey('industry.id'), nullable=False)
    industry_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    exclusive_slot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default='confirmed')
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending')
    approval_status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending')
    artwork_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default='pending_upload'
    )

    pending_since: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    amount_paid: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    payment_ref: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    approved_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    rejection_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    artwork_file_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    artwork_uploaded_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    artwork_reviewed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    artwork_rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_file_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    optional_image_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    cancellation_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    refund_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    refund_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    price_override: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price_override_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    base_price_before_discounts: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    loyalty_discount_applied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    counts_toward_loyalty: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
