from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class UserModel(Base):
    __tablename__ = 'app_user'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default='customer')
    loyalty_slots_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    loyalty_discounts_available: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    loyalty_year_reset: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
