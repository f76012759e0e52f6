"""Operator-only moderation actions.

Every entry point checks the caller against the operator policy before it
reads or writes anything.
"""

from typing import Optional, Union

from loguru import logger
from sqlmodel import Session

from pawsi.core.errors import DependencyError, InvalidInputError, NotFoundError
from pawsi.core.operators import get_operator_policy
from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.enums import ContentKind, ReportResolution, ReportStatus
from pawsi.models.report import Report
from pawsi.models.user import User
from pawsi.schemas.report import AdminReportOut, ReportOut, ReportPage
from pawsi.services import content_store, deletion_log_service, report_service
from pawsi.services.cascade import REASON_POLICY, CascadeResult, cascade_delete


def _ensure_operator(operator: User) -> None:
    get_operator_policy().ensure_operator(operator.email if operator else None)


def to_report_out(record: Report) -> ReportOut:
    return ReportOut(
        id=record.id,
        post_type=record.post_type,
        post_id=record.post_id,
        reason=record.reason,
        description=record.description,
        reporter_user_id=record.reporter_user_id,
        status=record.status,
        resolution=record.resolution,
        created_at=record.created_at,
        reviewed_at=record.reviewed_at,
        reviewed_by=record.reviewed_by,
        resolved_at=record.resolved_at,
        resolved_by=record.resolved_by,
    )


def _with_content(session: Session, record: Report) -> AdminReportOut:
    content = None
    try:
        item = content_store.get_content(session, record.post_type, record.post_id)
        if item is not None:
            content = content_store.snapshot(record.post_type, item)
    except DependencyError as exc:
        logger.warning('moderation.content_lookup_failed', report_id=record.id, error=exc.detail)
    open_count = report_service.count_open_reports_for(session, record.post_type, record.post_id)
    if record.status in report_service.OPEN_STATUSES:
        open_count -= 1
    return AdminReportOut(
        **to_report_out(record).model_dump(),
        content=content,
        duplicate_count=max(open_count, 0),
    )


def list_reports_with_content(
    session: Session,
    operator: User,
    status: Optional[ReportStatus] = None,
    limit: int = 50,
    offset: int = 0,
) -> ReportPage:
    _ensure_operator(operator)
    limit = max(1, min(limit, 200))
    offset = max(offset, 0)
    records = report_service.list_reports(session, status=status, limit=limit, offset=offset)
    total = report_service.count_reports(session, status=status)
    return ReportPage(
        items=[_with_content(session, record) for record in records],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(records) < total,
    )


def mark_reviewed(session: Session, report_id: str, operator: User) -> Report:
    _ensure_operator(operator)
    return report_service.transition_report(session, report_id, ReportStatus.REVIEWED, operator.id)


def close_report(session: Session, report_id: str, operator: User) -> Report:
    _ensure_operator(operator)
    record = report_service.transition_report(
        session,
        report_id,
        ReportStatus.RESOLVED,
        operator.id,
        resolution=ReportResolution.CLOSED_WITHOUT_ACTION,
    )
    logger.info('moderation.report_closed', report_id=report_id, operator=operator.id)
    return record


def delete_content(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    operator: User,
    report_id: Optional[str] = None,
) -> CascadeResult:
    """Take a listing down for a policy violation."""
    _ensure_operator(operator)
    kind = content_store.kind_spec(kind).kind
    if report_id:
        # Fail before deleting anything if the report cannot be resolved.
        record = report_service.get_report(session, report_id)
        if record is None:
            raise NotFoundError('Report not found')
        if record.post_type != kind or record.post_id != content_id:
            raise InvalidInputError('Report does not refer to this content')
        report_service.ensure_transition(record.status, ReportStatus.RESOLVED)
    result = cascade_delete(
        session,
        kind,
        content_id,
        deleted_by=operator.id,
        reason=REASON_POLICY,
        report_id=report_id,
    )
    logger.info(
        'moderation.content_deleted',
        kind=result.kind.value,
        content_id=content_id,
        operator=operator.id,
        deleted=result.deleted,
        report_id=report_id,
    )
    return result


def list_deletion_log(
    session: Session,
    operator: User,
    kind: Optional[ContentKind] = None,
    content_id: Optional[str] = None,
    processed: Optional[bool] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[DeletionLogEntry]:
    """Audit trail of deleted listings, newest first."""
    _ensure_operator(operator)
    return deletion_log_service.list_entries(
        session,
        content_type=kind,
        content_id=content_id,
        processed=processed,
        limit=max(1, min(limit, 200)),
        offset=max(offset, 0),
    )
