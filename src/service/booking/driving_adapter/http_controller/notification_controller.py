from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.dismiss_notification_use_case import (
    DismissNotificationUseCase,
)
from src.service.booking.app.query.list_admin_notifications_use_case import (
    ListAdminNotificationsUseCase,
)
from src.service.booking.domain.admin_notification import NotificationType
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.booking.driving_adapter.http_controller.schema.notification_schema import (
    DismissNotificationRequest,
    NotificationCountResponse,
    NotificationResponse,
)


router = APIRouter()


@router.get('', response_model=List[NotificationResponse])
@Logger.io
async def list_notifications(
    notification_type: Optional[NotificationType] = None,
    admin: User = Depends(require_admin),
    use_case: ListAdminNotificationsUseCase = Depends(ListAdminNotificationsUseCase.depends),
) -> List[NotificationResponse]:
    notifications = await use_case.list_notifications(
        user_id=admin.id, notification_type=notification_type
    )
    return [NotificationResponse.model_validate(n, from_attributes=True) for n in notifications]


@router.get('/count')
@Logger.io
async def count_notifications(
    admin: User = Depends(require_admin),
    use_case: ListAdminNotificationsUseCase = Depends(ListAdminNotificationsUseCase.depends),
) -> NotificationCountResponse:
    return NotificationCountResponse(count=await use_case.count(user_id=admin.id))


@router.post('/dismiss', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def dismiss_notification(
    request: DismissNotificationRequest,
    admin: User = Depends(require_admin),
    use_case: DismissNotificationUseCase = Depends(DismissNotificationUseCase.depends),
) -> None:
    await use_case.execute(
        booking_id=request.booking_id,
        notification_type=request.notification_type,
        user_id=admin.id,
    )
