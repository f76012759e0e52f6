from typing import Union

from loguru import logger
from sqlmodel import Session

from pawsi.core.errors import InvalidInputError, NotFoundError
from pawsi.models.content import ListingBase
from pawsi.models.enums import ContentKind, ContentStatus
from pawsi.services import content_store
from pawsi.services.secret_service import burn_verification, verify_secret

OWNER_CLOSE_STATUSES = {ContentStatus.RESOLVED, ContentStatus.INACTIVE}


def _effective_status(kind: ContentKind, status: ContentStatus) -> ContentStatus:
    # A found-animal listing that is "resolved" is simply taken down.
    if kind == ContentKind.REPORTED and status == ContentStatus.RESOLVED:
        return ContentStatus.INACTIVE
    return status


def resolve_with_secret(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    secret: str,
    status: ContentStatus = ContentStatus.RESOLVED,
) -> bool:
    """Close a listing by presenting its owner secret.

    Unknown listings, listings without a secret and wrong secrets all return
    False after the same amount of hashing work.
    """
    info = content_store.kind_spec(kind)
    if status not in OWNER_CLOSE_STATUSES:
        raise InvalidInputError('Owners can only mark a listing resolved or inactive')
    item = content_store.get_content(session, info.kind, content_id)
    if item is None:
        burn_verification(secret)
        return False
    if not verify_secret(secret, getattr(item, 'owner_secret_hash', None)):
        logger.info('ownership.secret_rejected', kind=info.kind.value, content_id=content_id)
        return False
    content_store.update_status(session, info.kind, content_id, _effective_status(info.kind, status))
    logger.info('ownership.resolved_by_secret', kind=info.kind.value, content_id=content_id)
    return True


def update_status_as_owner(
    session: Session,
    kind: Union[ContentKind, str],
    content_id: str,
    owner_id: str,
    status: ContentStatus,
) -> ListingBase:
    info = content_store.kind_spec(kind)
    item = content_store.get_content(session, info.kind, content_id)
    if item is None or item.user_id is None or item.user_id != owner_id:
        raise NotFoundError('Post not found or not owned by user')
    updated = content_store.update_status(session, info.kind, content_id, _effective_status(info.kind, status))
    if updated is None:
        raise NotFoundError('Post not found or not owned by user')
    return updated
