from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from pawsi.db.session import get_session
from pawsi.models.user import User
from pawsi.schemas.report import ReportCreate, ReportOut
from pawsi.services.auth_service import get_optional_user
from pawsi.services.moderation_service import to_report_out
from pawsi.services.report_service import submit_report

router = APIRouter(prefix='/reports', tags=['reports'])


@router.post('', response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def create_report_endpoint(
    payload: ReportCreate,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportOut:
    record = submit_report(
        session,
        payload.post_type,
        payload.post_id,
        payload.reason,
        description=payload.description,
        reporter_id=user.id if user else None,
        reported_user_id=payload.reported_user_id,
    )
    return to_report_out(record)
