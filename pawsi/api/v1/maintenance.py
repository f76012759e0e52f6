import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.concurrency import run_in_threadpool

from pawsi.core.config import settings
from pawsi.core.errors import UnauthorizedError
from pawsi.core.operators import get_operator_policy
from pawsi.models.user import User
from pawsi.schemas.maintenance import SweepResultOut
from pawsi.services.auth_service import get_optional_user
from pawsi.services.maintenance_service import run_sweep

router = APIRouter(prefix='/maintenance', tags=['maintenance'])


def _authorize_sweep(
    maintenance_token: Optional[str] = Header(default=None, alias='X-Maintenance-Token'),
    user: Optional[User] = Depends(get_optional_user),
) -> str:
    if maintenance_token and settings.MAINTENANCE_TOKEN:
        if hmac.compare_digest(maintenance_token, settings.MAINTENANCE_TOKEN):
            return 'token'
    if user is not None and get_operator_policy().is_operator(user.email):
        return user.id
    raise UnauthorizedError('Unauthorized - Maintenance access required')


@router.post('/sweep', response_model=SweepResultOut)
async def trigger_sweep(_: str = Depends(_authorize_sweep)) -> SweepResultOut:
    result = await run_in_threadpool(run_sweep)
    return SweepResultOut(
        started_at=result.started_at,
        finished_at=result.finished_at,
        reminders_sent=result.reminders_sent,
        reminder_failures=result.reminder_failures,
        expired_deleted=result.expired_deleted,
        expired_missing=result.expired_missing,
        expired_failed=result.expired_failed,
        expired_skipped=result.expired_skipped,
        replayed=result.replayed,
        replay_failures=result.replay_failures,
        image_failures=result.image_failures,
        deadline_hit=result.deadline_hit,
        failures=result.failures,
    )
