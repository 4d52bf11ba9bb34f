"""
Slot grid projection: the (route x industry) inventory of one campaign
classified from the current booking set. Derived on demand, never stored.
"""

from collections import defaultdict
from datetime import datetime, timezone
from enum import StrEnum
from typing import Iterable, Sequence

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route


class SlotStatus(StrEnum):
    AVAILABLE = 'available'
    BOOKED = 'booked'
    PENDING = 'pending'


@attrs.define(frozen=True)
class Slot:
    route_id: str
    route_name: str
    zip_code: str
    industry_id: str
    industry_name: str
    status: SlotStatus
    booking: Booking | None = None
    # Unlimited industries can hold several active bookings in one cell
    bookings: tuple[Booking, ...] = ()


@attrs.define(frozen=True)
class SlotGridSummary:
    total_slots: int
    available_slots: int
    booked_slots: int
    pending_slots: int
    revenue: int


@attrs.define(frozen=True)
class SlotGrid:
    campaign_id: str
    slots: tuple[Slot, ...]
    summary: SlotGridSummary


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _primary_booking(bookings: Sequence[Booking]) -> Booking:
    paid = [booking for booking in bookings if booking.is_paid]
    candidates = paid or list(bookings)
    return max(candidates, key=lambda booking: (booking.created_at or _EPOCH, booking.id))


def compute_slot_grid(
    *,
    campaign: Campaign,
    routes: Sequence[Route],
    industries: Sequence[Industry],
    active_bookings: Iterable[Booking],
) -> SlotGrid:
    by_cell: dict[tuple[str, str], list[Booking]] = defaultdict(list)
    for booking in active_bookings:
        if booking.is_active and booking.campaign_id == campaign.id:
            by_cell[(booking.route_id, booking.industry_id)].append(booking)

    slots: list[Slot] = []
    revenue = 0
    for route in routes:
        for industry in industries:
            cell_bookings = by_cell.get((route.id, industry.id), [])
            if not cell_bookings:
                status, primary = SlotStatus.AVAILABLE, None
            else:
                primary = _primary_booking(cell_bookings)
                status = SlotStatus.BOOKED if primary.is_paid else SlotStatus.PENDING
            if status == SlotStatus.BOOKED:
                revenue += sum(booking.amount for booking in cell_bookings if booking.is_paid)
            slots.append(
                Slot(
                    route_id=route.id,
                    route_name=route.name,
                    zip_code=route.zip_code,
                    industry_id=industry.id,
                    industry_name=industry.name,
                    status=status,
                    booking=primary,
                    bookings=tuple(cell_bookings),
                )
            )

    summary = SlotGridSummary(
        total_slots=len(slots),
        available_slots=sum(1 for slot in slots if slot.status == SlotStatus.AVAILABLE),
        booked_slots=sum(1 for slot in slots if slot.status == SlotStatus.BOOKED),
        pending_slots=sum(1 for slot in slots if slot.status == SlotStatus.PENDING),
        revenue=revenue,
    )
    return SlotGrid(campaign_id=campaign.id, slots=tuple(slots), summary=summary)
