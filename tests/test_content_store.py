from datetime import timedelta

import pytest
from sqlmodel import select

from pawsi.core.errors import InvalidInputError, UnauthorizedError
from pawsi.models.base import ensure_utc, utc_now
from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.enums import ContentKind, ContentStatus
from pawsi.services import content_store


def test_create_sets_expiry_only_for_expiring_kinds(make_listing, make_user):
    owner = make_user()
    now = utc_now()
    lost, lost_secret = make_listing(ContentKind.LOST, now=now)
    classified, classified_secret = make_listing(ContentKind.CLASSIFIED, owner=owner, now=now)

    assert lost.status == ContentStatus.ACTIVE
    assert ensure_utc(lost.expires_at) == now + timedelta(days=60)
    assert lost_secret is not None
    assert classified_secret is None
    assert getattr(classified, "expires_at", None) is None


def test_kinds_without_secret_require_an_owner(make_listing):
    with pytest.raises(UnauthorizedError):
        make_listing(ContentKind.VETERINARIAN)


def test_create_rejects_unknown_fields(session):
    with pytest.raises(InvalidInputError):
        content_store.create_content(session, ContentKind.LOST, {'title': 'x', 'color': 'red'}, owner_id=None)


def test_unknown_kind_is_invalid_input(session):
    with pytest.raises(InvalidInputError):
        content_store.get_content(session, 'boats', 'abc')


def test_expiring_and_expired_queries_skip_inactive_items(session, make_listing):
    now = utc_now()
    soon, _ = make_listing(ContentKind.LOST, now=now - timedelta(days=59))
    gone, _ = make_listing(ContentKind.LOST, now=now - timedelta(days=61))
    resolved_soon, _ = make_listing(ContentKind.LOST, now=now - timedelta(days=59))
    resolved_gone, _ = make_listing(ContentKind.LOST, now=now - timedelta(days=61))
    content_store.update_status(session, ContentKind.LOST, resolved_soon.id, ContentStatus.RESOLVED)
    content_store.update_status(session, ContentKind.LOST, resolved_gone.id, ContentStatus.INACTIVE)

    expiring = content_store.list_expiring(session, ContentKind.LOST, now + timedelta(days=2), now=now)
    expired = content_store.list_expired(session, ContentKind.LOST, now)

    assert [item.id for item in expiring] == [soon.id]
    assert [item.id for item in expired] == [gone.id]


def test_non_expiring_kinds_never_list(session, make_listing, make_user):
    make_listing(ContentKind.ADOPTION, now=utc_now() - timedelta(days=400))
    far_future = utc_now() + timedelta(days=3650)
    assert content_store.list_expiring(session, ContentKind.ADOPTION, far_future) == []
    assert content_store.list_expired(session, ContentKind.ADOPTION, far_future) == []


def test_delete_is_idempotent_and_logs_once(session, make_listing):
    item, _ = make_listing(ContentKind.LOST)
    snap = content_store.snapshot(ContentKind.LOST, item)
    entry = DeletionLogEntry(content_type=ContentKind.LOST, content_id=item.id, deleted_by='system:test')

    assert content_store.delete_content(session, ContentKind.LOST, item.id, log_entry=entry)
    assert not content_store.delete_content(session, ContentKind.LOST, item.id)
    assert content_store.get_content(session, ContentKind.LOST, snap.id) is None
    assert len(session.exec(select(DeletionLogEntry)).all()) == 1


def test_snapshot_uses_name_for_veterinarians(session, make_listing, make_user):
    owner = make_user()
    item, _ = make_listing(ContentKind.VETERINARIAN, owner=owner)
    snap = content_store.snapshot(ContentKind.VETERINARIAN, item)
    assert snap.title == 'Clínica Patitas'
    assert snap.owner_id == owner.id
    assert snap.expires_at is None
