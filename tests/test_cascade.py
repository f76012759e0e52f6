from sqlmodel import Session, select

from pawsi.db.session import engine
from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.enums import ContentKind, NotificationType, ReportResolution, ReportStatus
from pawsi.services import content_store, deletion_log_service
from pawsi.services.cascade import REASON_EXPIRED, REASON_POLICY, cascade_delete
from pawsi.services.deletion_log_service import system_actor
from pawsi.services.notification_service import list_notifications
from pawsi.services.report_service import get_report, submit_report

IMAGES = ['https://cdn.pawsi.test/lost/a.jpg', 'https://cdn.pawsi.test/lost/b.jpg']


def _log_entries(session):
    return session.exec(select(DeletionLogEntry)).all()


def test_cascade_purges_notifies_and_logs(session, make_listing, make_user, image_store, mailer):
    owner = make_user()
    item, _ = make_listing(ContentKind.LOST, owner=owner, images=IMAGES)

    result = cascade_delete(session, ContentKind.LOST, item.id, system_actor(REASON_EXPIRED), REASON_EXPIRED)

    assert result.deleted and result.owner_notified
    assert result.images_purged == 2
    assert image_store.purged == IMAGES
    assert content_store.get_content(session, ContentKind.LOST, item.id) is None

    [entry] = _log_entries(session)
    assert entry.processed is True
    assert entry.deleted_by == 'system:expired'
    assert entry.owner_id == owner.id
    assert entry.images == IMAGES

    [note] = list_notifications(session, owner.id)
    assert note.type == NotificationType.POST_DELETED
    assert 'expirado' in note.message
    assert note.meta['post_id'] == item.id
    assert mailer.recipients() == [owner.email]


def test_second_delete_is_not_found_without_new_log(session, make_listing, make_user):
    item, _ = make_listing(ContentKind.REPORTED, owner=make_user())

    first = cascade_delete(session, ContentKind.REPORTED, item.id, 'operator-1', REASON_POLICY)
    second = cascade_delete(session, ContentKind.REPORTED, item.id, 'operator-1', REASON_POLICY)

    assert first.deleted
    assert second.not_found
    assert len(_log_entries(session)) == 1


def test_racing_deleters_leave_one_log_entry(session, make_listing, make_user):
    owner = make_user()
    item, _ = make_listing(ContentKind.LOST, owner=owner)
    seen = content_store.get_content(session, ContentKind.LOST, item.id)
    late_entry = deletion_log_service.build_entry(
        content_store.snapshot(ContentKind.LOST, seen), 'operator-2', REASON_POLICY
    )

    with Session(engine) as other:
        assert cascade_delete(other, ContentKind.LOST, item.id, 'operator-1', REASON_POLICY).deleted

    assert not content_store.delete_content(session, ContentKind.LOST, item.id, log_entry=late_entry)
    [entry] = _log_entries(session)
    assert entry.deleted_by == 'operator-1'
    assert len(list_notifications(session, owner.id)) == 1


def test_image_failure_still_processes_the_log(session, make_listing, make_user, image_store):
    owner = make_user()
    item, _ = make_listing(ContentKind.LOST, owner=owner, images=IMAGES)
    image_store.failing.add(IMAGES[0])

    result = cascade_delete(session, ContentKind.LOST, item.id, system_actor(REASON_EXPIRED), REASON_EXPIRED)

    assert result.deleted
    assert result.image_failures == 1
    assert image_store.purged == [IMAGES[1]]
    [entry] = _log_entries(session)
    assert entry.processed is True
    assert len(list_notifications(session, owner.id)) == 1


def test_anonymous_listing_deletes_without_notification(session, make_listing):
    item, _ = make_listing(ContentKind.LOST)

    result = cascade_delete(session, ContentKind.LOST, item.id, system_actor(REASON_EXPIRED), REASON_EXPIRED)

    assert result.deleted
    assert result.owner_notified is False
    assert _log_entries(session)[0].processed is True


def test_operator_path_resolves_every_open_report(session, make_listing, make_user, operator):
    item, _ = make_listing(ContentKind.CLASSIFIED, owner=make_user())
    trigger = submit_report(session, ContentKind.CLASSIFIED, item.id, 'spam')
    duplicate = submit_report(session, ContentKind.CLASSIFIED, item.id, 'commercial')
    unrelated = submit_report(session, ContentKind.CLASSIFIED, 'other-id', 'spam')

    result = cascade_delete(
        session, ContentKind.CLASSIFIED, item.id, operator.id, REASON_POLICY, report_id=trigger.id
    )

    assert result.reports_resolved == 2
    for report_id in (trigger.id, duplicate.id):
        record = get_report(session, report_id)
        session.refresh(record)
        assert record.status == ReportStatus.RESOLVED
        assert record.resolution == ReportResolution.CONTENT_DELETED
        assert record.resolved_by == operator.id
    other = get_report(session, unrelated.id)
    session.refresh(other)
    assert other.status == ReportStatus.PENDING
