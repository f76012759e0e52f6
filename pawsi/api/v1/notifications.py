from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from pawsi.db.session import get_session
from pawsi.models.enums import NotificationType
from pawsi.models.notification import Notification
from pawsi.models.user import User
from pawsi.schemas.notification import MessageNotificationCreate, NotificationOut, NotificationUpdate
from pawsi.services.auth_service import get_current_user
from pawsi.services.notification_service import (
    list_notifications,
    mark_all_read,
    mark_read,
    notify_new_message,
)
from pawsi.services.user_service import get_user

router = APIRouter(prefix='/notifications', tags=['notifications'])


def _to_notification_out(record: Notification) -> NotificationOut:
    return NotificationOut(
        id=record.id,
        type=record.type,
        message=record.message,
        meta=record.meta or {},
        read=record.read,
        created_at=record.created_at,
    )


@router.get('', response_model=list[NotificationOut])
def list_notifications_endpoint(
    unread_only: bool = False,
    type: Optional[NotificationType] = None,
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[NotificationOut]:
    notifications = list_notifications(
        session,
        user.id,
        unread_only=unread_only,
        type=type,
        limit=limit,
        offset=offset,
    )
    return [_to_notification_out(record) for record in notifications]


@router.patch('/{notification_id}', response_model=NotificationOut)
def update_notification_endpoint(
    notification_id: str,
    payload: NotificationUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> NotificationOut:
    record = mark_read(session, notification_id, user.id, read=payload.read)
    return _to_notification_out(record)


@router.post('/read-all')
def mark_all_notifications_read(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    count = mark_all_read(session, user.id)
    return {'status': 'ok', 'updated': count}


@router.post('/messages', response_model=NotificationOut, status_code=status.HTTP_201_CREATED)
def notify_message_endpoint(
    payload: MessageNotificationCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> NotificationOut:
    recipient = get_user(session, payload.recipient_id)
    if not recipient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Recipient not found')
    if recipient.id == user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Cannot message yourself')
    record = notify_new_message(session, recipient.id, user.id, payload.subject)
    return _to_notification_out(record)
