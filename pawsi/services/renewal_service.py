import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from loguru import logger
from sqlmodel import Session

from pawsi.core.config import settings
from pawsi.core.errors import NotFoundError
from pawsi.models.base import utc_now
from pawsi.models.enums import ContentKind, NotificationType
from pawsi.services import content_store, messages
from pawsi.services.notification_service import notify_best_effort

NOT_FOUND_OR_NOT_OWNED = 'Post not found or not owned by user'


@dataclass(frozen=True)
class RenewalResult:
    kind: ContentKind
    content_id: str
    renewed_until: Optional[datetime]
    refreshed_at: datetime


def add_months(value: datetime, months: int) -> datetime:
    """Calendar-month arithmetic; Dec 31 + 2 months is Feb 28/29."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def renew(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    owner_id: str,
    now: Optional[datetime] = None,
) -> RenewalResult:
    """Push an owner's listing forward.

    Expiring kinds get a fresh ``expires_at``; the others are only bumped in
    recency. Missing and foreign listings fail the same way.
    """
    info = content_store.kind_spec(kind)
    now = now or utc_now()
    item = content_store.get_content(session, info.kind, content_id)
    if item is None or not owner_id or item.user_id != owner_id:
        raise NotFoundError(NOT_FOUND_OR_NOT_OWNED)

    renewed_until: Optional[datetime] = None
    if info.expires:
        renewed_until = add_months(now, settings.RENEWAL_MONTHS)
        content_store.set_expiry(session, item, renewed_until)
    else:
        content_store.touch(session, item, now=now)
    logger.info(
        'renewal.renewed',
        kind=info.kind.value,
        content_id=content_id,
        renewed_until=renewed_until.isoformat() if renewed_until else None,
    )

    title = getattr(item, info.title_attr, None)
    notify_best_effort(
        session,
        owner_id,
        NotificationType.POST_RENEWED,
        messages.post_renewed_text(title, content_id),
        meta={
            'post_type': info.kind.value,
            'post_id': content_id,
            'renewed_until': renewed_until.isoformat() if renewed_until else None,
        },
        email=messages.post_renewed_email(title, content_id, renewed_until),
    )
    return RenewalResult(kind=info.kind, content_id=content_id, renewed_until=renewed_until, refreshed_at=now)
