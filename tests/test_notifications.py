import pytest

from pawsi.core.errors import NotFoundError
from pawsi.models.enums import NotificationType
from pawsi.services import messages
from pawsi.services.notification_service import (
    list_notifications,
    mark_all_read,
    mark_read,
    notify,
    notify_new_message,
)


def test_notify_persists_and_emails(session, make_user, mailer):
    user = make_user()
    email = messages.post_renewed_email('Luna', 'abc', None)

    record = notify(session, user.id, NotificationType.POST_RENEWED, 'renovada', meta={'post_id': 'abc'}, email=email)

    assert record.read is False
    assert record.meta == {'post_id': 'abc'}
    assert mailer.sent == [(user.email, email.subject, email.html)]


def test_email_failure_keeps_the_notification(session, make_user, mailer):
    user = make_user()
    mailer.fail = True

    notify(
        session,
        user.id,
        NotificationType.POST_DELETED,
        'eliminada',
        email=messages.post_deleted_email('Luna', 'abc', expired=True),
    )

    assert len(list_notifications(session, user.id)) == 1
    assert mailer.sent == []


def test_missing_address_skips_email(session, mailer):
    notify(
        session,
        'ghost-user',
        NotificationType.RENEWAL_REMINDER,
        'expira pronto',
        email=messages.post_renewed_email(None, 'abc', None),
    )
    assert mailer.sent == []


def test_only_recipient_can_mark_read(session, make_user):
    owner = make_user()
    other = make_user()
    record = notify(session, owner.id, NotificationType.POST_RENEWED, 'renovada')

    with pytest.raises(NotFoundError):
        mark_read(session, record.id, other.id)

    assert mark_read(session, record.id, owner.id).read is True
    assert list_notifications(session, owner.id, unread_only=True) == []


def test_mark_all_read_counts_unread(session, make_user):
    user = make_user()
    for _ in range(3):
        notify(session, user.id, NotificationType.POST_RENEWED, 'renovada')
    assert mark_all_read(session, user.id) == 3
    assert mark_all_read(session, user.id) == 0


def test_new_message_names_the_sender(session, make_user):
    sender = make_user(display_name='Ana')
    anonymous = make_user()
    recipient = make_user()

    named = notify_new_message(session, recipient.id, sender.id, 'Sobre tu perro')
    fallback = notify_new_message(session, recipient.id, anonymous.id, 'Hola')

    assert named.message == 'Nuevo mensaje de Ana: Sobre tu perro'
    assert named.meta == {'sender_id': sender.id, 'message_subject': 'Sobre tu perro'}
    assert fallback.message.startswith('Nuevo mensaje de Usuario')
