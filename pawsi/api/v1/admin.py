from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from pawsi.core.errors import NotFoundError
from pawsi.db.session import get_session
from pawsi.models.enums import ContentKind, ReportStatus
from pawsi.models.user import User
from pawsi.schemas.deletion_log import DeletionLogOut
from pawsi.schemas.report import DeleteContentRequest, DeleteContentResponse, ReportOut, ReportPage
from pawsi.services import moderation_service
from pawsi.services.auth_service import get_current_user

# The operator check lives in the moderation service so that every caller,
# not only HTTP, goes through it.
router = APIRouter(prefix='/admin', tags=['admin'])


@router.get('/reports', response_model=ReportPage)
def list_reports_endpoint(
    status: ReportStatus = ReportStatus.PENDING,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ReportPage:
    return moderation_service.list_reports_with_content(session, user, status=status, limit=limit, offset=offset)


@router.post('/reports/{report_id}/review', response_model=ReportOut)
def review_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ReportOut:
    record = moderation_service.mark_reviewed(session, report_id, user)
    return moderation_service.to_report_out(record)


@router.post('/reports/{report_id}/close', response_model=ReportOut)
def close_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ReportOut:
    record = moderation_service.close_report(session, report_id, user)
    return moderation_service.to_report_out(record)


@router.post('/content/delete', response_model=DeleteContentResponse)
def delete_content_endpoint(
    payload: DeleteContentRequest,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> DeleteContentResponse:
    result = moderation_service.delete_content(
        session,
        payload.content_type,
        payload.content_id,
        user,
        report_id=payload.report_id,
    )
    if not result.deleted:
        raise NotFoundError('Content not found')
    return DeleteContentResponse(
        deleted=True,
        content_type=result.kind,
        content_id=result.content_id,
        reports_resolved=result.reports_resolved,
        owner_notified=result.owner_notified,
        image_failures=result.image_failures,
    )


@router.get('/deletion-log', response_model=list[DeletionLogOut])
def deletion_log_endpoint(
    content_type: Optional[ContentKind] = None,
    content_id: Optional[str] = None,
    processed: Optional[bool] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[DeletionLogOut]:
    entries = moderation_service.list_deletion_log(
        session,
        user,
        kind=content_type,
        content_id=content_id,
        processed=processed,
        limit=limit,
        offset=offset,
    )
    return [DeletionLogOut.model_validate(entry, from_attributes=True) for entry in entries]
