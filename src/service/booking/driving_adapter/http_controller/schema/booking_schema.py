from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BookingCreateRequest(BaseModel):
    campaign_id: str
    route_id: str
    industry_id: str
    business_name: str
    contact_email: str
    quantity: int = Field(default=1, ge=1)

    model_config = {
        'json_schema_extra': {
            'example': {
                'campaign_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'route_id': '01936d8f-5e73-7c4e-a9c5-223456789abc',
                'industry_id': '01936d8f-5e73-7c4e-a9c5-323456789abc',
                'business_name': 'Sunrise Bakery',
                'contact_email': 'owner@sunrise.example',
                'quantity': 2,
            }
        }
    }


class BookingResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    user_id: str
    campaign_id: str
    route_id: str
    industry_id: str
    industry_label: Optional[str] = None
    business_name: str
    contact_email: str
    quantity: int
    amount: int
    amount_due: int
    status: str
    payment_status: str
    approval_status: str
    artwork_status: str
    pending_since: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    amount_paid: Optional[int] = None
    rejection_note: Optional[str] = None
    artwork_rejection_reason: Optional[str] = None
    artwork_file_path: Optional[str] = None
    logo_file_path: Optional[str] = None
    optional_image_path: Optional[str] = None
    cancellation_date: Optional[datetime] = None
    refund_amount: Optional[int] = None
    refund_status: Optional[str] = None
    price_override: Optional[int] = None
    price_override_note: Optional[str] = None
    base_price_before_discounts: Optional[int] = None
    loyalty_discount_applied: bool = False
    created_at: Optional[datetime] = None


class CancelBookingRequest(BaseModel):
    waive_fee: bool = False


class CancelBookingResponse(BaseModel):
    booking: BookingResponse
    cancelled_now: bool


class RejectRequest(BaseModel):
    note: str


class ArtworkSubmitRequest(BaseModel):
    file_path: str


class ArtworkRejectRequest(BaseModel):
    reason: str


class AttachAssetsRequest(BaseModel):
    logo_file_path: Optional[str] = None
    optional_image_path: Optional[str] = None


class PriceOverrideRequest(BaseModel):
    price_override: Optional[int] = None
    note: Optional[str] = None

    model_config = {
        'json_schema_extra': {'example': {'price_override': 45000, 'note': 'Charity rate'}}
    }


class CheckoutResponse(BaseModel):
    booking: BookingResponse
    amount_due: int


class PaymentSucceededRequest(BaseModel):
    amount_paid: int = Field(ge=0)
    payment_ref: str

    model_config = {
        'json_schema_extra': {'example': {'amount_paid': 110000, 'payment_ref': 'pi_3Nx...'}}
    }


class RefundOutcomeRequest(BaseModel):
    refund_status: Literal['processed', 'failed']
