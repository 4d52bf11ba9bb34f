from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class NotificationDismissalModel(Base):
    __tablename__ = 'dismissed_notification'
    __table_args__ = (
        UniqueConstraint(
            'booking_id', 'notification_type', 'user_id', name='uq_dismissed_notification'
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    booking_id: Mapped[str] = mapped_column(
        ForeignKey('booking.id', ondelete='CASCADE'), nullable=False
    )
    notification_type: Mapped[str] = mapped_column(String(30), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    dismissed_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
