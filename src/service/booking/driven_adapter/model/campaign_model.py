from datetime import datetime
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


campaign_route_table = Table(
    'campaign_route',
    Base.metadata,
    Column('campaign_id', ForeignKey('campaign.id', ondelete='CASCADE'), primary_key=True),
    Column('route_id', ForeignKey('route.id'), primary_key=True),
)

campaign_industry_table = Table(
    'campaign_industry',
    Base.metadata,
    Column('campaign_id', ForeignKey('campaign.id', ondelete='CASCADE'), primary_key=True),
    Column('industry_id', ForeignKey('industry.id'), primary_key=True),
)


class CampaignModel(Base):
    __tablename__ = 'campaign'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mail_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    print_deadline: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='planning')
    total_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    booked_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    revenue: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    base_slot_price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    additional_slot_price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
