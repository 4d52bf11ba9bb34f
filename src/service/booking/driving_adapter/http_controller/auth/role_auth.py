"""
Acting user resolution.

Authentication itself is handled in front of this service; requests carry
the authenticated user's id in the X-User-Id header.
"""

from fastapi import Depends, Header
from opentelemetry import trace

from src.platform.exception.exceptions import ForbiddenError
from src.service.booking.app.command.user_use_case import UserUseCase
from src.service.booking.domain.entity.user_entity import User


async def get_current_user(
    x_user_id: str = Header(..., alias='X-User-Id'),
    use_case: UserUseCase = Depends(UserUseCase.depends),
) -> User:
    return await use_case.get_user(user_id=x_user_id)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_admin',
        attributes={'user.id': current_user.id, 'user.role': str(current_user.role)},
    ):
        if not current_user.is_admin:
            raise ForbiddenError('Only admins can perform this action')
        return current_user
