"""Cascading deletion of a listing, shared by moderation and the expiry sweep.

Order matters: the row (and its unprocessed audit entry) goes first, then the
best-effort side effects, then the audit entry is marked processed. A crash
part way leaves at worst orphaned images or a missing notification, and the
unprocessed entry lets the sweep finish the job later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger
from sqlmodel import Session

from pawsi.core.errors import LifecycleError
from pawsi.models.enums import ContentKind, NotificationType, ReportResolution, ReportStatus
from pawsi.services import content_store, deletion_log_service, messages
from pawsi.services.dispatch import get_dispatcher
from pawsi.services.image_store import get_image_store
from pawsi.services.notification_service import notify_best_effort
from pawsi.services.report_service import resolve_open_reports_for, transition_report

REASON_EXPIRED = 'expired'
REASON_POLICY = 'policy_violation'


@dataclass
class CascadeResult:
    kind: ContentKind
    content_id: str
    deleted: bool
    log_entry_id: Optional[str] = None
    owner_notified: bool = False
    images_purged: int = 0
    image_failures: int = 0
    reports_resolved: int = 0

    @property
    def not_found(self) -> bool:
        return not self.deleted


def purge_images(image_refs: list[str], kind: ContentKind, content_id: str) -> tuple[int, int]:
    """Purge each image independently; returns (purged, failed)."""
    store = get_image_store()
    dispatcher = get_dispatcher()
    purged = failed = 0
    for ref in image_refs:
        if dispatcher.run(f"image_purge.{kind.value}", store.purge, ref):
            purged += 1
        else:
            failed += 1
            logger.warning('cascade.image_purge_failed', kind=kind.value, content_id=content_id, image_ref=ref)
    return purged, failed


def notify_owner_of_deletion(
    session: Session,
    owner_id: Optional[str],
    kind: ContentKind,
    content_id: str,
    title: Optional[str],
    reason: str,
) -> bool:
    if not owner_id:
        return False
    expired = reason == REASON_EXPIRED
    record = notify_best_effort(
        session,
        owner_id,
        NotificationType.POST_DELETED,
        messages.post_deleted_text(title, content_id, expired),
        meta={
            'post_type': kind.value,
            'post_id': content_id,
            'content_title': title,
            'reason': reason,
        },
        email=messages.post_deleted_email(title, content_id, expired),
    )
    return record is not None


def cascade_delete(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    deleted_by: str,
    reason: str,
    report_id: Optional[str] = None,
) -> CascadeResult:
    """Delete a listing and everything hanging off it.

    A listing that is already gone yields ``deleted=False`` and touches
    nothing, so retries and manual/sweep races are harmless. Only the row
    delete itself can raise (``DependencyError``).
    """
    info = content_store.kind_spec(kind)
    result = CascadeResult(kind=info.kind, content_id=content_id, deleted=False)

    item = content_store.get_content(session, info.kind, content_id)
    if item is None:
        logger.info('cascade.not_found', kind=info.kind.value, content_id=content_id)
        return result
    snap = content_store.snapshot(info.kind, item)

    entry = deletion_log_service.build_entry(snap, deleted_by, reason)
    if not content_store.delete_content(session, info.kind, content_id, log_entry=entry):
        # Lost a race with another deleter between the read and the delete.
        return result
    result.deleted = True
    result.log_entry_id = entry.id
    logger.info('cascade.deleted', kind=info.kind.value, content_id=content_id, deleted_by=deleted_by)

    result.images_purged, result.image_failures = purge_images(snap.images, info.kind, content_id)

    if not deletion_log_service.is_system_actor(deleted_by):
        result.reports_resolved = resolve_reports(session, info.kind, content_id, deleted_by, report_id)

    result.owner_notified = notify_owner_of_deletion(
        session, snap.owner_id, info.kind, content_id, snap.title, reason
    )

    deletion_log_service.mark_processed(session, entry.id)
    return result


def resolve_reports(
    session: Session,
    kind: ContentKind,
    content_id: str,
    operator_id: str,
    report_id: Optional[str],
) -> int:
    resolved = 0
    try:
        if report_id:
            record = transition_report(
                session,
                report_id,
                ReportStatus.RESOLVED,
                operator_id,
                resolution=ReportResolution.CONTENT_DELETED,
            )
            resolved += 1 if record.status == ReportStatus.RESOLVED else 0
        resolved += resolve_open_reports_for(session, kind, content_id, operator_id)
    except LifecycleError as exc:
        # The listing is already gone; the owner still gets told.
        session.rollback()
        logger.opt(exception=exc).error(
            'cascade.report_resolution_failed', kind=kind.value, content_id=content_id, report_id=report_id
        )
    return resolved
