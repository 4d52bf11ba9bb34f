"""
Unit tests for the Booking aggregate

Payment, approval and artwork are independent axes; cancellation is terminal.
"""

import pytest

from src.platform.exception.exceptions import InvalidArgumentError, InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import (
    ApprovalStatus,
    ArtworkStatus,
    PaymentStatus,
    RefundStatus,
)
from test.service.booking.unit.helpers import (
    CAMPAIGN_ID,
    INDUSTRY_ID,
    NOW,
    ROUTE_ID,
    USER_ID,
    cancelled,
    make_booking,
)


@pytest.mark.unit
class TestCreate:
    def test_create_starts_confirmed_and_pending(self) -> None:
        booking = Booking.create(
            user_id=USER_ID,
            campaign_id=CAMPAIGN_ID,
            route_id=ROUTE_ID,
            industry_id=INDUSTRY_ID,
            business_name='  Sunrise Bakery ',
            contact_email='owner@sunrise.example',
            quantity=2,
            amount=110000,
            now=NOW,
        )

        assert booking.is_active
        assert booking.payment_status == PaymentStatus.PENDING
        assert booking.approval_status == ApprovalStatus.PENDING
        assert booking.artwork_status == ArtworkStatus.PENDING_UPLOAD
        assert booking.pending_since == NOW
        assert booking.business_name == 'Sunrise Bakery'
        assert len(booking.id) == 36

    @pytest.mark.parametrize('quantity', [0, 5])
    def test_create_rejects_quantity_out_of_range(self, quantity: int) -> None:
        with pytest.raises(InvalidArgumentError):
            Booking.create(
                user_id=USER_ID,
                campaign_id=CAMPAIGN_ID,
                route_id=ROUTE_ID,
                industry_id=INDUSTRY_ID,
                business_name='Sunrise Bakery',
                contact_email='owner@sunrise.example',
                quantity=quantity,
                amount=60000,
                now=NOW,
            )


@pytest.mark.unit
class TestPaymentAxis:
    def test_mark_paid_clears_pending_since(self) -> None:
        paid = make_booking().mark_paid(amount_paid=60000, payment_ref='pi_1', now=NOW)

        assert paid.is_paid
        assert paid.pending_since is None
        assert paid.paid_at == NOW
        assert paid.settled_amount == 60000

    def test_failed_payment_can_be_retried(self) -> None:
        failed = make_booking().mark_payment_failed()

        restarted = failed.restart_payment(now=NOW)

        assert restarted.payment_status == PaymentStatus.PENDING
        assert restarted.pending_since == NOW

    def test_paid_is_terminal(self) -> None:
        paid = make_booking().mark_paid(amount_paid=60000, payment_ref='pi_1', now=NOW)

        with pytest.raises(InvalidStateError):
            paid.mark_payment_failed()

    def test_cancelled_booking_cannot_be_paid(self) -> None:
        with pytest.raises(InvalidStateError):
            cancelled(make_booking()).mark_paid(amount_paid=60000, payment_ref='pi_1', now=NOW)


@pytest.mark.unit
class TestApprovalAxis:
    def test_reject_requires_a_note(self) -> None:
        with pytest.raises(InvalidArgumentError):
            make_booking().reject(note='  ', now=NOW)

    def test_rejected_booking_can_be_approved_later(self) -> None:
        rejected = make_booking().reject(note='Wrong industry', now=NOW)

        approved = rejected.approve(now=NOW)

        assert approved.approval_status == ApprovalStatus.APPROVED
        assert approved.rejection_note is None

    def test_approval_is_independent_of_payment(self) -> None:
        approved = make_booking().approve(now=NOW)

        assert approved.payment_status == PaymentStatus.PENDING


@pytest.mark.unit
class TestArtworkAxis:
    def test_rejected_artwork_can_be_resubmitted(self) -> None:
        submitted = make_booking().submit_artwork(file_path='art/v1.pdf', now=NOW)
        rejected = submitted.reject_artwork(reason='Low resolution', now=NOW)

        resubmitted = rejected.submit_artwork(file_path='art/v2.pdf', now=NOW)

        assert resubmitted.artwork_status == ArtworkStatus.UNDER_REVIEW
        assert resubmitted.artwork_file_path == 'art/v2.pdf'

    def test_artwork_cannot_be_approved_before_upload(self) -> None:
        with pytest.raises(InvalidStateError):
            make_booking().approve_artwork(now=NOW)

    @pytest.mark.parametrize(
        'file_path', ['/srv/app/.env', '../../x.pdf', 'art/../../x.pdf', 'C:\\art.pdf', '..\\x']
    )
    def test_artwork_path_must_stay_inside_upload_dir(self, file_path: str) -> None:
        with pytest.raises(InvalidArgumentError):
            make_booking().submit_artwork(file_path=file_path, now=NOW)

    def test_assets_reject_paths_outside_upload_dir(self) -> None:
        booking = make_booking()

        with pytest.raises(InvalidArgumentError):
            booking.attach_assets(logo_file_path='/etc/passwd')
        with pytest.raises(InvalidArgumentError):
            booking.attach_assets(optional_image_path='img/../../secret.png')

        attached = booking.attach_assets(logo_file_path='logos/acme.png')
        assert attached.logo_file_path == 'logos/acme.png'


@pytest.mark.unit
class TestPriceOverride:
    def test_override_wins_at_checkout_and_stops_loyalty_progress(self) -> None:
        booking = make_booking(counts_toward_loyalty=True)

        overridden = booking.set_price_override(price_override=45000, note='Charity rate')

        assert overridden.amount_due == 45000
        assert overridden.amount == 60000
        assert not overridden.counts_toward_loyalty

    def test_clearing_override_drops_the_note(self) -> None:
        booking = make_booking(price_override=45000, price_override_note='Charity rate')

        cleared = booking.set_price_override(price_override=None)

        assert cleared.amount_due == 60000
        assert cleared.price_override_note is None

    def test_paid_booking_price_cannot_change(self) -> None:
        paid = make_booking().mark_paid(amount_paid=60000, payment_ref='pi_1', now=NOW)

        with pytest.raises(InvalidStateError):
            paid.set_price_override(price_override=1000)


@pytest.mark.unit
class TestRefundOutcome:
    def test_pending_refund_can_be_processed(self) -> None:
        booking = cancelled(make_booking(), refund_status=RefundStatus.PENDING)

        assert (
            booking.record_refund_outcome(refund_status=RefundStatus.PROCESSED).refund_status
            == RefundStatus.PROCESSED
        )

    def test_no_refund_cannot_be_processed(self) -> None:
        booking = cancelled(make_booking(), refund_status=RefundStatus.NO_REFUND)

        with pytest.raises(InvalidStateError):
            booking.record_refund_outcome(refund_status=RefundStatus.PROCESSED)
