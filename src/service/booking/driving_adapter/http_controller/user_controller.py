from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.user_use_case import UserUseCase
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.driving_adapter.http_controller.auth.role_auth import get_current_user
from src.service.booking.driving_adapter.http_controller.schema.user_schema import (
    CreateUserRequest,
    UserResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_user(
    request: CreateUserRequest,
    use_case: UserUseCase = Depends(UserUseCase.depends),
) -> UserResponse:
    user = await use_case.create_user(email=request.email, name=request.name, role=request.role)
    return UserResponse.model_validate(user, from_attributes=True)


@router.get('/me')
@Logger.io
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user, from_attributes=True)
