from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from pawsi.core.operators import get_operator_policy
from pawsi.db.session import get_session
from pawsi.models.user import User
from pawsi.schemas.report import ReportOut
from pawsi.schemas.user import UserOut, UserUpdate
from pawsi.services.auth_service import get_current_user
from pawsi.services.moderation_service import to_report_out
from pawsi.services.report_service import list_reports
from pawsi.services.user_service import to_user_out, update_user

router = APIRouter(prefix='/me', tags=['me'])


@router.get('', response_model=UserOut)
def get_me(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.patch('', response_model=UserOut)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    try:
        record = update_user(session, user, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_out(record)


@router.get('/operator')
def get_operator_flag(user: User = Depends(get_current_user)) -> dict:
    return {'is_operator': get_operator_policy().is_operator(user.email)}


@router.get('/reports', response_model=list[ReportOut])
def list_my_reports(
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[ReportOut]:
    records = list_reports(session, reporter_id=user.id, limit=limit, offset=offset)
    return [to_report_out(record) for record in records]
