"""
Unit tests for the Campaign aggregate

Schedule dates are kept in UTC; naive input is read as UTC.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import InvalidArgumentError, InvalidStateError
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.enum.campaign_status import CampaignStatus
from test.service.booking.unit.helpers import NOW, make_campaign


@pytest.mark.unit
class TestCreate:
    def test_naive_and_aware_dates_can_be_mixed(self) -> None:
        campaign = Campaign.create(
            name=' Spring 2026 ',
            mail_date=datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc),
            print_deadline=datetime(2026, 3, 20, 17, 0),
            route_count=2,
            industry_count=3,
            now=NOW,
        )

        assert campaign.name == 'Spring 2026'
        assert campaign.print_deadline == datetime(2026, 3, 20, 17, 0, tzinfo=timezone.utc)
        assert campaign.total_slots == 6

    def test_print_deadline_must_precede_mail_date(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Campaign.create(
                name='Spring 2026',
                mail_date=datetime(2026, 4, 1),
                print_deadline=datetime(2026, 4, 1, 2, 0, tzinfo=timezone(timedelta(hours=-5))),
                route_count=1,
                industry_count=1,
                now=NOW,
            )


@pytest.mark.unit
class TestReschedule:
    def test_naive_print_deadline_is_read_as_utc(self) -> None:
        # Given: a stored campaign, whose dates come back UTC-aware
        campaign = make_campaign()

        # When
        moved = campaign.reschedule(print_deadline=datetime(2026, 3, 25))

        # Then
        assert moved.print_deadline == datetime(2026, 3, 25, tzinfo=timezone.utc)
        assert moved.print_deadline.tzinfo is not None
        assert moved.mail_date == campaign.mail_date

    def test_naive_deadline_after_mail_date_is_rejected(self) -> None:
        campaign = make_campaign()
        after_mail_date = (campaign.mail_date + timedelta(days=1)).replace(tzinfo=None)

        with pytest.raises(InvalidArgumentError):
            campaign.reschedule(print_deadline=after_mail_date)

    def test_offset_dates_are_converted_to_utc(self) -> None:
        moved = make_campaign().reschedule(
            mail_date=datetime(2026, 4, 10, 8, 0, tzinfo=timezone(timedelta(hours=2)))
        )

        assert moved.mail_date == datetime(2026, 4, 10, 6, 0, tzinfo=timezone.utc)
        assert moved.mail_date.utcoffset() == timedelta(0)

    def test_closed_campaign_cannot_be_rescheduled(self) -> None:
        campaign = make_campaign(status=CampaignStatus.BOOKING_CLOSED)

        with pytest.raises(InvalidStateError):
            campaign.reschedule(print_deadline=datetime(2026, 3, 25))
