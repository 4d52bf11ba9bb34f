from typing import Optional

from pydantic import BaseModel

from src.service.booking.domain.entity.user_entity import UserRole


class CreateUserRequest(BaseModel):
    email: str
    name: str
    role: UserRole = UserRole.CUSTOMER

    model_config = {
        'json_schema_extra': {
            'example': {'email': 'owner@sunrise.example', 'name': 'Ada', 'role': 'customer'}
        }
    }


class UserResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    email: str
    name: str
    role: str
    loyalty_slots_earned: int
    loyalty_discounts_available: int
    loyalty_year_reset: Optional[int] = None
