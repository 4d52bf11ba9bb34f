from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingResponse,
)


class CampaignCreateRequest(BaseModel):
    name: str
    mail_date: datetime
    print_deadline: datetime
    route_ids: List[str]
    industry_ids: List[str]
    base_slot_price: Optional[int] = Field(default=None, ge=0)
    additional_slot_price: Optional[int] = Field(default=None, ge=0)


class CampaignScheduleRequest(BaseModel):
    name: Optional[str] = None
    mail_date: Optional[datetime] = None
    print_deadline: Optional[datetime] = None
    base_slot_price: Optional[int] = Field(default=None, ge=0)
    additional_slot_price: Optional[int] = Field(default=None, ge=0)


class CampaignOfferingRequest(BaseModel):
    route_ids: List[str]
    industry_ids: List[str]


class CampaignStatusRequest(BaseModel):
    status: str


class CampaignResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    name: str
    mail_date: datetime
    print_deadline: datetime
    status: str
    total_slots: int
    booked_slots: int
    revenue: int
    base_slot_price: Optional[int] = None
    additional_slot_price: Optional[int] = None


class RouteCreateRequest(BaseModel):
    zip_code: str
    name: str
    household_count: int = Field(default=0, ge=0)


class RouteResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    zip_code: str
    name: str
    household_count: int


class IndustryCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None


class IndustryResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    name: str
    is_unlimited: bool
    description: Optional[str] = None


class SlotResponse(BaseModel):
    model_config = {'from_attributes': True}

    route_id: str
    route_name: str
    zip_code: str
    industry_id: str
    industry_name: str
    status: str
    booking: Optional[BookingResponse] = None


class SlotGridSummaryResponse(BaseModel):
    model_config = {'from_attributes': True}

    total_slots: int
    available_slots: int
    booked_slots: int
    pending_slots: int
    revenue: int


class SlotGridResponse(BaseModel):
    model_config = {'from_attributes': True}

    campaign_id: str
    slots: List[SlotResponse]
    summary: SlotGridSummaryResponse
