from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlmodel import Session

from pawsi.core.errors import NotFoundError
from pawsi.db.session import get_session
from pawsi.models.enums import ContentKind
from pawsi.models.user import User
from pawsi.schemas.content import (
    ListingCreated,
    ListingOut,
    OwnerStatusUpdate,
    RenewalOut,
    ResolveBySecretRequest,
    ResolveBySecretResponse,
)
from pawsi.services import content_store
from pawsi.services.auth_service import get_current_user, get_optional_user
from pawsi.services.ownership_service import resolve_with_secret, update_status_as_owner
from pawsi.services.renewal_service import renew

router = APIRouter(prefix='/listings', tags=['listings'])


@router.post('/{kind}', response_model=ListingCreated, status_code=status.HTTP_201_CREATED)
def create_listing(
    kind: ContentKind,
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ListingCreated:
    item, secret = content_store.create_content(session, kind, payload, owner_id=user.id if user else None)
    # The secret is shown exactly once; only its hash is stored.
    return ListingCreated(listing=content_store.to_listing_out(kind, item), owner_secret=secret)


@router.get('/{kind}/{content_id}', response_model=ListingOut)
def get_listing(kind: ContentKind, content_id: str, session: Session = Depends(get_session)) -> ListingOut:
    item = content_store.get_content(session, kind, content_id)
    if item is None:
        raise NotFoundError('Post not found')
    return content_store.to_listing_out(kind, item)


@router.post('/{kind}/{content_id}/resolve', response_model=ResolveBySecretResponse)
def resolve_listing(
    kind: ContentKind,
    content_id: str,
    payload: ResolveBySecretRequest,
    session: Session = Depends(get_session),
) -> ResolveBySecretResponse:
    ok = resolve_with_secret(session, kind, content_id, payload.secret, status=payload.status)
    return ResolveBySecretResponse(ok=ok)


@router.patch('/{kind}/{content_id}/status', response_model=ListingOut)
def update_listing_status(
    kind: ContentKind,
    content_id: str,
    payload: OwnerStatusUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ListingOut:
    item = update_status_as_owner(session, kind, content_id, user.id, payload.status)
    return content_store.to_listing_out(kind, item)


@router.post('/{kind}/{content_id}/renew', response_model=RenewalOut)
def renew_listing(
    kind: ContentKind,
    content_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> RenewalOut:
    result = renew(session, kind, content_id, user.id)
    return RenewalOut(
        kind=result.kind,
        id=result.content_id,
        renewed_until=result.renewed_until,
        refreshed_at=result.refreshed_at,
    )
