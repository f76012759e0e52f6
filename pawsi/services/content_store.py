"""Kind-polymorphic access to listings.

Every lifecycle operation goes through the kind registry below, so the
cascade, the sweep and renewal never branch on the concrete table.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Optional, Union

from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from pawsi.core.config import settings
from pawsi.core.errors import DependencyError, InvalidInputError, UnauthorizedError
from pawsi.models.base import ensure_utc, utc_now
from pawsi.models.content import (
    AdoptionPost,
    ClassifiedAd,
    FoundPost,
    ListingBase,
    LostPost,
    VeterinarianListing,
)
from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.enums import ContentKind, ContentStatus
from pawsi.schemas.content import (
    AdoptionPostCreate,
    ClassifiedAdCreate,
    ContentSnapshot,
    FoundPostCreate,
    ListingOut,
    LostPostCreate,
    VeterinarianCreate,
)
from pawsi.services.secret_service import generate_secret, hash_secret

_LIFECYCLE_FIELDS = {
    'id', 'user_id', 'status', 'images', 'description', 'created_at', 'updated_at',
    'expires_at', 'owner_secret_hash',
}


@dataclass(frozen=True)
class KindSpec:
    kind: ContentKind
    model: type[ListingBase]
    create_schema: type[BaseModel]
    expires: bool
    requires_secret: bool
    title_attr: str = 'title'


KIND_SPECS: dict[ContentKind, KindSpec] = {
    ContentKind.LOST: KindSpec(ContentKind.LOST, LostPost, LostPostCreate, expires=True, requires_secret=True),
    ContentKind.REPORTED: KindSpec(
        ContentKind.REPORTED, FoundPost, FoundPostCreate, expires=True, requires_secret=True
    ),
    ContentKind.ADOPTION: KindSpec(
        ContentKind.ADOPTION, AdoptionPost, AdoptionPostCreate, expires=False, requires_secret=True
    ),
    ContentKind.CLASSIFIED: KindSpec(
        ContentKind.CLASSIFIED, ClassifiedAd, ClassifiedAdCreate, expires=False, requires_secret=False
    ),
    ContentKind.VETERINARIAN: KindSpec(
        ContentKind.VETERINARIAN,
        VeterinarianListing,
        VeterinarianCreate,
        expires=False,
        requires_secret=False,
        title_attr='name',
    ),
}


def kind_spec(kind: Union[ContentKind, str]) -> KindSpec:
    try:
        return KIND_SPECS[ContentKind(kind)]
    except ValueError as exc:
        raise InvalidInputError(f"Unknown content type: {kind}") from exc


def expiring_kinds() -> list[ContentKind]:
    return [info.kind for info in KIND_SPECS.values() if info.expires]


@contextmanager
def store_call(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error('content_store.fault', action=action, error=str(exc))
        raise DependencyError(f"Content store failed during {action}") from exc


def snapshot(kind: Union[ContentKind, str], item: ListingBase) -> ContentSnapshot:
    info = kind_spec(kind)
    return ContentSnapshot(
        kind=info.kind,
        id=item.id,
        owner_id=item.user_id,
        title=getattr(item, info.title_attr, None),
        description=item.description,
        status=item.status,
        images=list(item.images or []),
        created_at=ensure_utc(item.created_at),
        updated_at=ensure_utc(item.updated_at),
        expires_at=ensure_utc(getattr(item, 'expires_at', None)),
    )


def to_listing_out(kind: Union[ContentKind, str], item: ListingBase) -> ListingOut:
    base = snapshot(kind, item)
    data = {key: value for key, value in item.model_dump().items() if key not in _LIFECYCLE_FIELDS}
    return ListingOut(**base.model_dump(), data=data)


def get_content(session: Session, kind: Union[ContentKind, str], content_id: str) -> Optional[ListingBase]:
    info = kind_spec(kind)
    with store_call(session, 'get'):
        return session.exec(select(info.model).where(info.model.id == content_id)).first()


def create_content(
    session: Session,
    kind: Union[ContentKind, str],
    payload: Union[BaseModel, dict],
    owner_id: Optional[str],
    now: Optional[datetime] = None,
) -> tuple[ListingBase, Optional[str]]:
    """Insert an active listing; returns it with the one-time owner secret, if any."""
    info = kind_spec(kind)
    if not info.requires_secret and not owner_id:
        raise UnauthorizedError('Sign in to publish this listing')
    if isinstance(payload, dict):
        try:
            payload = info.create_schema.model_validate(payload)
        except ValidationError as exc:
            raise InvalidInputError(str(exc)) from exc
    elif not isinstance(payload, info.create_schema):
        raise InvalidInputError(f"Payload does not describe a {info.kind.value} listing")

    now = now or utc_now()
    item = info.model(**payload.model_dump(), user_id=owner_id, status=ContentStatus.ACTIVE)
    item.created_at = now
    item.updated_at = now
    if info.expires:
        item.expires_at = now + timedelta(days=settings.LISTING_LIFETIME_DAYS)
    secret: Optional[str] = None
    if info.requires_secret:
        secret = generate_secret()
        item.owner_secret_hash = hash_secret(secret)

    with store_call(session, 'create'):
        session.add(item)
        session.commit()
        session.refresh(item)
    logger.info('content.created', kind=info.kind.value, content_id=item.id, anonymous=owner_id is None)
    return item, secret


def update_status(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    status: ContentStatus,
) -> Optional[ListingBase]:
    item = get_content(session, kind, content_id)
    if item is None:
        return None
    item.status = status
    with store_call(session, 'update_status'):
        session.add(item)
        session.commit()
        session.refresh(item)
    return item


def delete_content(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    log_entry: Optional[DeletionLogEntry] = None,
) -> bool:
    """Delete a listing. A missing row is a normal outcome and returns False.

    ``log_entry`` is written in the same transaction as the delete and only
    when this call removed the row, so concurrent deleters leave one audit
    record between them.
    """
    info = kind_spec(kind)
    with store_call(session, 'delete'):
        outcome = session.execute(delete(info.model).where(info.model.id == content_id))
        if outcome.rowcount != 1:
            session.rollback()
            return False
        if log_entry is not None:
            session.add(log_entry)
        session.commit()
    return True


def list_expiring(
    session: Session,
    kind: Union[ContentKind, str],
    before: datetime,
    now: Optional[datetime] = None,
) -> list[ListingBase]:
    info = kind_spec(kind)
    if not info.expires:
        return []
    now = now or utc_now()
    model = info.model
    statement = (
        select(model)
        .where(model.status == ContentStatus.ACTIVE)
        .where(model.expires_at.is_not(None))
        .where(model.expires_at > now)
        .where(model.expires_at <= before)
        .order_by(model.expires_at)
    )
    with store_call(session, 'list_expiring'):
        return list(session.exec(statement).all())


def list_expired(session: Session, kind: Union[ContentKind, str], as_of: datetime) -> list[ListingBase]:
    info = kind_spec(kind)
    if not info.expires:
        return []
    model = info.model
    statement = (
        select(model)
        .where(model.status == ContentStatus.ACTIVE)
        .where(model.expires_at.is_not(None))
        .where(model.expires_at < as_of)
        .order_by(model.expires_at)
    )
    with store_call(session, 'list_expired'):
        return list(session.exec(statement).all())


def set_expiry(session: Session, item: ListingBase, expires_at: datetime) -> ListingBase:
    item.expires_at = expires_at
    item.updated_at = utc_now()
    with store_call(session, 'set_expiry'):
        session.add(item)
        session.commit()
        session.refresh(item)
    return item


def touch(session: Session, item: ListingBase, now: Optional[datetime] = None) -> ListingBase:
    item.updated_at = now or utc_now()
    with store_call(session, 'touch'):
        session.add(item)
        session.commit()
        session.refresh(item)
    return item
