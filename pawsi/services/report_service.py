from datetime import datetime
from typing import Optional, Union

from loguru import logger
from sqlalchemy import func
from sqlmodel import Session, select

from pawsi.core.errors import ConflictError, InvalidInputError, NotFoundError
from pawsi.core.operators import operator_emails
from pawsi.models.base import utc_now
from pawsi.models.enums import ContentKind, NotificationType, ReportReason, ReportResolution, ReportStatus
from pawsi.models.report import Report
from pawsi.services import messages
from pawsi.services.content_store import kind_spec, store_call
from pawsi.services.notification_service import notify_best_effort, send_email

REPORT_TRANSITIONS: dict[ReportStatus, set[ReportStatus]] = {
    ReportStatus.PENDING: {ReportStatus.REVIEWED, ReportStatus.RESOLVED},
    ReportStatus.REVIEWED: {ReportStatus.RESOLVED},
    ReportStatus.RESOLVED: set(),
}
OPEN_STATUSES = (ReportStatus.PENDING, ReportStatus.REVIEWED)


def ensure_transition(current: ReportStatus, target: ReportStatus) -> None:
    if target not in REPORT_TRANSITIONS[current]:
        raise ConflictError(f"Invalid report transition: {current.value} -> {target.value}")


def submit_report(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    reason: Union[ReportReason, str],
    description: Optional[str] = None,
    reporter_id: Optional[str] = None,
    reported_user_id: Optional[str] = None,
) -> Report:
    info = kind_spec(kind)
    try:
        reason = ReportReason(reason)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown report reason: {reason}") from exc
    description = (description or '').strip() or None
    if reason == ReportReason.OTHER and not description:
        raise InvalidInputError('A description is required when the reason is "other"')
    content_id = (content_id or '').strip()
    if not content_id:
        raise InvalidInputError('content_id is required')

    record = Report(
        post_type=info.kind,
        post_id=content_id,
        reason=reason,
        description=description,
        reporter_user_id=reporter_id,
    )
    with store_call(session, 'submit_report'):
        session.add(record)
        session.commit()
        session.refresh(record)
    logger.info(
        'report.submitted',
        report_id=record.id,
        kind=info.kind.value,
        content_id=content_id,
        reason=reason.value,
        anonymous=reporter_id is None,
    )

    operator_email = messages.report_operator_email(
        record.id,
        info.kind.value,
        content_id,
        reason.value,
        description,
        reporter_id,
        record.created_at,
        reported_user_id=reported_user_id,
    )
    for address in operator_emails():
        send_email(address, operator_email, label='email.report_operator')

    if reporter_id:
        notify_best_effort(
            session,
            reporter_id,
            NotificationType.REPORT_RECEIVED,
            messages.report_received_text(record.id),
            meta={'report_id': record.id, 'post_type': info.kind.value, 'post_id': content_id},
            email=messages.report_received_email(record.id),
        )
    return record


def get_report(session: Session, report_id: str, for_update: bool = False) -> Optional[Report]:
    statement = select(Report).where(Report.id == report_id)
    if for_update:
        statement = statement.with_for_update()
    return session.exec(statement).first()


def list_reports(
    session: Session,
    status: Optional[ReportStatus] = None,
    reporter_id: Optional[str] = None,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[Report]:
    statement = select(Report)
    if status is not None:
        statement = statement.where(Report.status == status)
    if reporter_id is not None:
        statement = statement.where(Report.reporter_user_id == reporter_id)
    statement = statement.order_by(Report.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def count_reports(session: Session, status: Optional[ReportStatus] = None) -> int:
    statement = select(func.count()).select_from(Report)
    if status is not None:
        statement = statement.where(Report.status == status)
    return int(session.exec(statement).one() or 0)


def count_open_reports_for(session: Session, kind: ContentKind, content_id: str) -> int:
    statement = select(func.count()).select_from(Report).where(
        (Report.post_type == kind) & (Report.post_id == content_id) & (Report.status.in_(OPEN_STATUSES))
    )
    return int(session.exec(statement).one() or 0)


def transition_report(
    session: Session,
    report_id: str,
    target: ReportStatus,
    actor_id: str,
    resolution: Optional[ReportResolution] = None,
    now: Optional[datetime] = None,
) -> Report:
    """Move a report along pending -> reviewed -> resolved, checked on a locked row."""
    now = now or utc_now()
    with store_call(session, 'transition_report'):
        record = get_report(session, report_id, for_update=True)
        if record is None:
            raise NotFoundError('Report not found')
        ensure_transition(record.status, target)
        record.status = target
        if target == ReportStatus.REVIEWED:
            record.reviewed_at = now
            record.reviewed_by = actor_id
        else:
            record.resolved_at = now
            record.resolved_by = actor_id
            record.resolution = resolution or ReportResolution.CONTENT_DELETED
        session.add(record)
        session.commit()
        session.refresh(record)
    logger.info('report.transitioned', report_id=report_id, status=target.value, actor=actor_id)
    return record


def resolve_open_reports_for(
    session: Session,
    kind: ContentKind,
    content_id: str,
    actor_id: str,
    resolution: ReportResolution = ReportResolution.CONTENT_DELETED,
    now: Optional[datetime] = None,
) -> int:
    """Collapse every still-open report against one listing into ``resolved``."""
    now = now or utc_now()
    with store_call(session, 'resolve_open_reports'):
        records = session.exec(
            select(Report)
            .where(Report.post_type == kind)
            .where(Report.post_id == content_id)
            .where(Report.status.in_(OPEN_STATUSES))
            .with_for_update()
        ).all()
        for record in records:
            record.status = ReportStatus.RESOLVED
            record.resolved_at = now
            record.resolved_by = actor_id
            record.resolution = resolution
            session.add(record)
        session.commit()
    return len(records)
