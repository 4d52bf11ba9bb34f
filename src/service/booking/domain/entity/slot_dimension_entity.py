from datetime import datetime
from typing import Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidArgumentError


@attrs.define
class Route:
    """A zip-coded delivery area"""

    id: str
    zip_code: str
    name: str
    household_count: int = 0
    active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, zip_code: str, name: str, household_count: int = 0) -> 'Route':
        if not zip_code.strip() or not name.strip():
            raise InvalidArgumentError('zip_code and name are required')
        if household_count < 0:
            raise InvalidArgumentError('household_count must not be negative')
        return cls(
            id=str(uuid_utils.uuid7()),
            zip_code=zip_code.strip(),
            name=name.strip(),
            household_count=household_count,
        )


@attrs.define
class Industry:
    """A business category. Unlimited industries may be booked by many businesses per route."""

    id: str
    name: str
    is_unlimited: bool = False
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls, *, name: str, unlimited_industry_name: str, description: Optional[str] = None
    ) -> 'Industry':
        if not name.strip():
            raise InvalidArgumentError('name is required')
        return cls(
            id=str(uuid_utils.uuid7()),
            name=name.strip(),
            is_unlimited=name.strip().lower() == unlimited_industry_name.lower(),
            description=description,
        )
