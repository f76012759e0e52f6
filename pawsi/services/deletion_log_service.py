from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.enums import ContentKind
from pawsi.schemas.content import ContentSnapshot
from pawsi.services.content_store import store_call

SYSTEM_PREFIX = 'system:'


def system_actor(reason: str) -> str:
    return f"{SYSTEM_PREFIX}{reason}"


def is_system_actor(deleted_by: str) -> bool:
    return deleted_by.startswith(SYSTEM_PREFIX)


def build_entry(snapshot: ContentSnapshot, deleted_by: str, reason: str) -> DeletionLogEntry:
    """Unprocessed entry carrying what a replay needs once the row is gone."""
    return DeletionLogEntry(
        content_type=snapshot.kind,
        content_id=snapshot.id,
        deleted_by=deleted_by,
        processed=False,
        reason=reason,
        owner_id=snapshot.owner_id,
        title=snapshot.title,
        images=list(snapshot.images),
    )


def mark_processed(session: Session, entry_id: str) -> Optional[DeletionLogEntry]:
    entry = session.get(DeletionLogEntry, entry_id)
    if entry is None or entry.processed:
        return entry
    entry.processed = True
    with store_call(session, 'mark_processed'):
        session.add(entry)
        session.commit()
        session.refresh(entry)
    return entry


def list_entries(
    session: Session,
    content_type: Optional[ContentKind] = None,
    content_id: Optional[str] = None,
    processed: Optional[bool] = None,
    limit: Optional[int] = 100,
    offset: int = 0,
) -> list[DeletionLogEntry]:
    statement = select(DeletionLogEntry)
    if content_type is not None:
        statement = statement.where(DeletionLogEntry.content_type == content_type)
    if content_id is not None:
        statement = statement.where(DeletionLogEntry.content_id == content_id)
    if processed is not None:
        statement = statement.where(DeletionLogEntry.processed.is_(processed))
    statement = statement.order_by(DeletionLogEntry.deleted_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def list_unprocessed(session: Session, deleted_before: datetime, limit: int = 200) -> list[DeletionLogEntry]:
    statement = (
        select(DeletionLogEntry)
        .where(DeletionLogEntry.processed.is_(False))
        .where(DeletionLogEntry.deleted_at < deleted_before)
        .order_by(DeletionLogEntry.deleted_at)
        .limit(limit)
    )
    return list(session.exec(statement).all())
