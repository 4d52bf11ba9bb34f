from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.booking.domain.admin_notification import NotificationType


class NotificationResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    type: str
    booking_id: str
    campaign_id: str
    business_name: str
    message: str
    occurred_at: Optional[datetime] = None


class NotificationCountResponse(BaseModel):
    count: int


class DismissNotificationRequest(BaseModel):
    booking_id: str
    notification_type: NotificationType
