from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class PricingRuleModel(Base):
    __tablename__ = 'pricing_rule'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    rule_type: Mapped[str] = mapped_column(String(20), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    campaign_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey('campaign.id'), nullable=True, index=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey('app_user.id'), nullable=True, index=True
    )
    usage_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)


class PricingRuleApplicationModel(Base):
    """Audit trail of rule usage. Survives booking deletion so usage limits stay honest."""

    __tablename__ = 'pricing_rule_application'
    __table_args__ = (
        UniqueConstraint('pricing_rule_id', 'booking_id', name='uq_rule_application_booking'),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    pricing_rule_id: Mapped[str] = mapped_column(ForeignKey('pricing_rule.id'), nullable=False)
    booking_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    applied_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
