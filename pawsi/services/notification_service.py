from typing import Any, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from pawsi.core.errors import DependencyError, NotFoundError
from pawsi.models.enums import NotificationType
from pawsi.models.notification import Notification
from pawsi.services import messages
from pawsi.services.dispatch import get_dispatcher
from pawsi.services.mailer import get_mailer
from pawsi.services.messages import EmailMessage
from pawsi.services.user_service import display_name_for, resolve_email


def send_email(address: str, email: EmailMessage, label: str = 'email') -> None:
    """Hand an email to the best-effort channel; never raises."""
    get_dispatcher().submit(label, get_mailer().send, address, email.subject, email.html)


def notify(
    session: Session,
    user_id: str,
    type: NotificationType,
    message: str,
    meta: Optional[dict[str, Any]] = None,
    email: Optional[EmailMessage] = None,
) -> Notification:
    """Persist an in-app notification, then attempt email delivery.

    The row is the durable, user-visible record; email is best-effort and its
    failure only shows up in the logs.
    """
    record = Notification(user_id=user_id, type=type, message=message, meta=meta or {})
    try:
        session.add(record)
        session.commit()
        session.refresh(record)
    except SQLAlchemyError as exc:
        session.rollback()
        raise DependencyError(f"Could not store notification: {exc}") from exc

    if email is not None:
        address = resolve_email(session, user_id)
        if address:
            send_email(address, email, label=f"email.{type.value}")
        else:
            logger.info('notification.email_skipped', notification_id=record.id, reason='no_address')
    return record


def notify_best_effort(
    session: Session,
    user_id: str,
    type: NotificationType,
    message: str,
    meta: Optional[dict[str, Any]] = None,
    email: Optional[EmailMessage] = None,
) -> Optional[Notification]:
    try:
        return notify(session, user_id, type, message, meta=meta, email=email)
    except DependencyError as exc:
        logger.warning('notification.failed', user_id=user_id, type=type.value, error=exc.detail)
        return None


def notify_new_message(session: Session, recipient_id: str, sender_id: str, subject: str) -> Notification:
    sender_name = display_name_for(session, sender_id)
    return notify(
        session,
        recipient_id,
        NotificationType.NEW_MESSAGE,
        messages.new_message_text(sender_name, subject),
        meta={'sender_id': sender_id, 'message_subject': subject},
    )


def list_notifications(
    session: Session,
    user_id: str,
    unread_only: bool = False,
    type: Optional[NotificationType] = None,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[Notification]:
    statement = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        statement = statement.where(Notification.read.is_(False))
    if type is not None:
        statement = statement.where(Notification.type == type)
    statement = statement.order_by(Notification.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def get_notification(session: Session, notification_id: str) -> Optional[Notification]:
    return session.exec(select(Notification).where(Notification.id == notification_id)).first()


def mark_read(session: Session, notification_id: str, user_id: str, read: bool = True) -> Notification:
    record = get_notification(session, notification_id)
    # Someone else's notification looks exactly like a missing one.
    if not record or record.user_id != user_id:
        raise NotFoundError('Notification not found')
    record.read = read
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def mark_all_read(session: Session, user_id: str) -> int:
    notifications = session.exec(
        select(Notification).where((Notification.user_id == user_id) & (Notification.read.is_(False)))
    ).all()
    for record in notifications:
        record.read = True
        session.add(record)
    session.commit()
    return len(notifications)
