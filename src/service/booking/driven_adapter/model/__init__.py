"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.campaign_model import (
    CampaignModel,
    campaign_industry_table,
    campaign_route_table,
)
from src.service.booking.driven_adapter.model.notification_dismissal_model import (
    NotificationDismissalModel,
)
from src.service.booking.driven_adapter.model.pricing_rule_model import (
    PricingRuleApplicationModel,
    PricingRuleModel,
)
from src.service.booking.driven_adapter.model.slot_dimension_model import (
    IndustryModel,
    RouteModel,
)
from src.service.booking.driven_adapter.model.user_model import UserModel

__all__ = [
    'BookingModel',
    'CampaignModel',
    'IndustryModel',
    'NotificationDismissalModel',
    'PricingRuleApplicationModel',
    'PricingRuleModel',
    'RouteModel',
    'UserModel',
    'campaign_industry_table',
    'campaign_route_table',
]
