from datetime import datetime
from typing import Optional

import attrs
import uuid_utils

from src.platform.clock import as_utc
from src.platform.exception.exceptions import InvalidArgumentError, InvalidStateError
from src.service.booking.domain.enum.campaign_status import (
    CANCELLATION_LOCKED_STATUSES,
    LAST_EDITABLE_CAMPAIGN_STATUS,
    CampaignStatus,
)


def _validate_schedule(*, mail_date: datetime, print_deadline: datetime) -> None:
    if print_deadline >= mail_date:
        raise InvalidArgumentError('print_deadline must be before mail_date')


def _validate_slot_price(name: str, value: Optional[int]) -> None:
    if value is not None and value < 0:
        raise InvalidArgumentError(f'{name} must not be negative')


@attrs.define
class Campaign:
    id: str
    name: str
    mail_date: datetime
    print_deadline: datetime
    status: CampaignStatus = CampaignStatus.PLANNING
    total_slots: int = 0
    booked_slots: int = 0
    revenue: int = 0
    base_slot_price: Optional[int] = None
    additional_slot_price: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        mail_date: datetime,
        print_deadline: datetime,
        route_count: int,
        industry_count: int,
        now: datetime,
        base_slot_price: Optional[int] = None,
        additional_slot_price: Optional[int] = None,
    ) -> 'Campaign':
        if not name.strip():
            raise InvalidArgumentError('Campaign name is required')
        mail_date, print_deadline = as_utc(mail_date), as_utc(print_deadline)
        _validate_schedule(mail_date=mail_date, print_deadline=print_deadline)
        _validate_slot_price('base_slot_price', base_slot_price)
        _validate_slot_price('additional_slot_price', additional_slot_price)
        return cls(
            id=str(uuid_utils.uuid7()),
            name=name.strip(),
            mail_date=mail_date,
            print_deadline=print_deadline,
            total_slots=route_count * industry_count,
            base_slot_price=base_slot_price,
            additional_slot_price=additional_slot_price,
            created_at=now,
        )

    @property
    def is_editable(self) -> bool:
        return self.status.rank <= LAST_EDITABLE_CAMPAIGN_STATUS.rank

    @property
    def is_cancellation_locked(self) -> bool:
        return self.status in CANCELLATION_LOCKED_STATUSES

    def tiered_price(
        self, *, quantity: int, default_first_slot_price: int, default_additional_slot_price: int
    ) -> int:
        """First slot at the base price, every further slot at the additional price"""
        first = (
            self.base_slot_price if self.base_slot_price is not None else default_first_slot_price
        )
        additional = (
            self.additional_slot_price
            if self.additional_slot_price is not None
            else default_additional_slot_price
        )
        return first + (quantity - 1) * additional

    def ensure_open_for_booking(self) -> None:
        if self.status != CampaignStatus.BOOKING_OPEN:
            raise InvalidStateError(
                f'Campaign {self.name} is not accepting bookings (status: {self.status})'
            )

    def ensure_editable(self) -> None:
        if not self.is_editable:
            raise InvalidStateError(f'Campaign {self.name} can no longer be changed')

    def advance_to(self, status: CampaignStatus) -> 'Campaign':
        """Campaigns move forward one step at a time"""
        if self.status.next_status != status:
            raise InvalidStateError(f'Cannot move campaign from {self.status} to {status}')
        return attrs.evolve(self, status=status)

    def reschedule(
        self,
        *,
        name: Optional[str] = None,
        mail_date: Optional[datetime] = None,
        print_deadline: Optional[datetime] = None,
        base_slot_price: Optional[int] = None,
        additional_slot_price: Optional[int] = None,
    ) -> 'Campaign':
        self.ensure_editable()
        new_mail_date = as_utc(mail_date or self.mail_date)
        new_print_deadline = as_utc(print_deadline or self.print_deadline)
        _validate_schedule(mail_date=new_mail_date, print_deadline=new_print_deadline)
        _validate_slot_price('base_slot_price', base_slot_price)
        _validate_slot_price('additional_slot_price', additional_slot_price)
        return attrs.evolve(
            self,
            name=name.strip() if name and name.strip() else self.name,
            mail_date=new_mail_date,
            print_deadline=new_print_deadline,
            base_slot_price=(
                base_slot_price if base_slot_price is not None else self.base_slot_price
            ),
            additional_slot_price=(
                additional_slot_price
                if additional_slot_price is not None
                else self.additional_slot_price
            ),
        )
