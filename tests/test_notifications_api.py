from pawsi.models.enums import NotificationType
from pawsi.services.notification_service import notify


def test_notification_inbox(client, session, make_user, auth_headers):
    user = make_user()
    other = make_user()
    first = notify(session, user.id, NotificationType.POST_RENEWED, 'renovada', meta={'post_id': 'a'})
    notify(session, user.id, NotificationType.RENEWAL_REMINDER, 'expira pronto')
    foreign = notify(session, other.id, NotificationType.POST_RENEWED, 'otra')
    headers = auth_headers(user)

    listed = client.get('/api/v1/notifications', headers=headers).json()
    assert len(listed) == 2
    only_reminders = client.get('/api/v1/notifications', params={'type': 'renewal_reminder'}, headers=headers)
    assert [row['message'] for row in only_reminders.json()] == ['expira pronto']

    marked = client.patch(f"/api/v1/notifications/{first.id}", json={'read': True}, headers=headers)
    assert marked.status_code == 200
    assert marked.json()['read'] is True
    assert marked.json()['meta'] == {'post_id': 'a'}

    stolen = client.patch(f"/api/v1/notifications/{foreign.id}", json={'read': True}, headers=headers)
    assert stolen.status_code == 404

    read_all = client.post('/api/v1/notifications/read-all', headers=headers)
    assert read_all.json() == {'status': 'ok', 'updated': 1}
    assert client.get('/api/v1/notifications', params={'unread_only': True}, headers=headers).json() == []


def test_message_notification(client, make_user, auth_headers):
    sender = make_user(display_name='Ana')
    recipient = make_user()

    created = client.post(
        '/api/v1/notifications/messages',
        json={'recipient_id': recipient.id, 'subject': 'Vi a tu perro'},
        headers=auth_headers(sender),
    )
    assert created.status_code == 201
    assert created.json()['type'] == 'new_message'

    inbox = client.get('/api/v1/notifications', headers=auth_headers(recipient)).json()
    assert inbox[0]['message'] == 'Nuevo mensaje de Ana: Vi a tu perro'

    missing = client.post(
        '/api/v1/notifications/messages',
        json={'recipient_id': 'nobody', 'subject': 'Hola'},
        headers=auth_headers(sender),
    )
    assert missing.status_code == 404
