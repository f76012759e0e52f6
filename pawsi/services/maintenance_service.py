"""Daily maintenance sweep: renewal reminders, expiry cascades, deletion-log replay.

One sweep runs at a time, guarded by a leased row in ``maintenance_locks``.
Each expired listing is cascaded in its own worker with its own session, so
one bad item only bumps a failure counter. Items that have not started when
the wall-clock budget runs out are left for the next run.
"""

from __future__ import annotations

import socket
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from pawsi.core.config import settings
from pawsi.core.errors import DependencyError, SweepLockedError
from pawsi.db.session import new_session
from pawsi.models.base import ensure_utc, utc_now
from pawsi.models.enums import ContentKind, NotificationType
from pawsi.models.maintenance_lock import MaintenanceLock
from pawsi.services import content_store, deletion_log_service, messages
from pawsi.services.cascade import (
    REASON_EXPIRED,
    cascade_delete,
    notify_owner_of_deletion,
    purge_images,
    resolve_reports,
)
from pawsi.services.notification_service import notify_best_effort

SWEEP_LOCK_NAME = 'daily-maintenance'


@dataclass
class SweepResult:
    started_at: datetime
    finished_at: Optional[datetime] = None
    reminders_sent: int = 0
    reminder_failures: int = 0
    expired_deleted: int = 0
    expired_missing: int = 0
    expired_failed: int = 0
    expired_skipped: int = 0
    replayed: int = 0
    replay_failures: int = 0
    image_failures: int = 0
    deadline_hit: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def failures(self) -> int:
        return self.reminder_failures + self.expired_failed + self.replay_failures + self.image_failures


def _holder_id() -> str:
    return f"{socket.gethostname()}:{uuid4().hex[:8]}"


def acquire_lock(
    session: Session,
    holder: str,
    now: Optional[datetime] = None,
    ttl_seconds: Optional[int] = None,
    name: str = SWEEP_LOCK_NAME,
) -> MaintenanceLock:
    """Take the named lease, or an expired one; raise ``SweepLockedError`` if it is held."""
    now = now or utc_now()
    expires_at = now + timedelta(seconds=ttl_seconds or settings.SWEEP_LOCK_TTL_SECONDS)
    existing = session.get(MaintenanceLock, name)
    if existing is None:
        lock = MaintenanceLock(name=name, holder=holder, acquired_at=now, expires_at=expires_at)
        try:
            session.add(lock)
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise SweepLockedError() from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise DependencyError('Could not acquire the maintenance lock') from exc
        logger.info('sweep.lock_acquired', holder=holder, expires_at=expires_at.isoformat())
        return lock

    if ensure_utc(existing.expires_at) > now:
        raise SweepLockedError()

    # Take over a stale lease; only one contender's conditional update can match.
    previous_holder = existing.holder
    try:
        outcome = session.execute(
            update(MaintenanceLock)
            .where(MaintenanceLock.name == name)
            .where(MaintenanceLock.expires_at < now)
            .values(holder=holder, acquired_at=now, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise DependencyError('Could not acquire the maintenance lock') from exc
    if outcome.rowcount != 1:
        raise SweepLockedError()
    session.expire_all()
    logger.warning('sweep.lock_taken_over', holder=holder, previous_holder=previous_holder)
    return session.get(MaintenanceLock, name)


def release_lock(session: Session, holder: str, name: str = SWEEP_LOCK_NAME) -> bool:
    try:
        outcome = session.execute(
            delete(MaintenanceLock).where(MaintenanceLock.name == name).where(MaintenanceLock.holder == holder)
        )
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        # The lease runs out on its own.
        logger.error('sweep.lock_release_failed', holder=holder, error=str(exc))
        return False
    return outcome.rowcount == 1


def send_renewal_reminders(session: Session, result: SweepResult, now: datetime) -> None:
    window_end = now + timedelta(days=settings.REMINDER_WINDOW_DAYS)
    for kind in content_store.expiring_kinds():
        try:
            items = content_store.list_expiring(session, kind, window_end, now=now)
        except DependencyError as exc:
            result.reminder_failures += 1
            result.errors.append(f"reminders:{kind.value}:{exc.detail}")
            logger.error('sweep.reminder_query_failed', kind=kind.value, error=exc.detail)
            continue
        for item in items:
            if not item.user_id:
                continue
            snap = content_store.snapshot(kind, item)
            record = notify_best_effort(
                session,
                item.user_id,
                NotificationType.RENEWAL_REMINDER,
                messages.renewal_reminder_text(snap.title, snap.id),
                meta={
                    'post_type': kind.value,
                    'post_id': snap.id,
                    'expires_at': snap.expires_at.isoformat() if snap.expires_at else None,
                },
                email=messages.renewal_reminder_email(snap.title, snap.id, snap.expires_at),
            )
            if record is None:
                result.reminder_failures += 1
            else:
                result.reminders_sent += 1


def _expire_one(
    kind: ContentKind,
    content_id: str,
    deadline: float,
    session_factory: Callable[[], Session],
) -> tuple[str, int]:
    if time.monotonic() >= deadline:
        return 'skipped', 0
    with session_factory() as session:
        outcome = cascade_delete(
            session,
            kind,
            content_id,
            deleted_by=deletion_log_service.system_actor(REASON_EXPIRED),
            reason=REASON_EXPIRED,
        )
    return ('deleted' if outcome.deleted else 'missing'), outcome.image_failures


def delete_expired(
    session: Session,
    result: SweepResult,
    now: datetime,
    deadline: float,
    max_workers: int,
    session_factory: Callable[[], Session],
) -> None:
    targets: list[tuple[ContentKind, str]] = []
    for kind in content_store.expiring_kinds():
        try:
            targets.extend((kind, item.id) for item in content_store.list_expired(session, kind, now))
        except DependencyError as exc:
            result.expired_failed += 1
            result.errors.append(f"expiry:{kind.value}:{exc.detail}")
            logger.error('sweep.expiry_query_failed', kind=kind.value, error=exc.detail)
    if not targets:
        return

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='pawsi-sweep') as pool:
        futures = {
            pool.submit(_expire_one, kind, content_id, deadline, session_factory): (kind, content_id)
            for kind, content_id in targets
        }
        for future, (kind, content_id) in futures.items():
            try:
                status, image_failures = future.result()
            except Exception as exc:  # noqa: BLE001 - one listing must not stop the pass
                result.expired_failed += 1
                result.errors.append(f"expiry:{kind.value}:{content_id}:{exc}")
                logger.opt(exception=exc).error('sweep.expiry_failed', kind=kind.value, content_id=content_id)
                continue
            result.image_failures += image_failures
            if status == 'deleted':
                result.expired_deleted += 1
            elif status == 'missing':
                result.expired_missing += 1
            else:
                result.expired_skipped += 1
    if result.expired_skipped:
        result.deadline_hit = True


def replay_deletion_log(session: Session, result: SweepResult, now: datetime, deadline: float) -> None:
    """Finish cascades whose side effects never completed."""
    cutoff = now - timedelta(minutes=settings.DELETION_REPLAY_GRACE_MINUTES)
    try:
        entries = deletion_log_service.list_unprocessed(session, deleted_before=cutoff)
    except SQLAlchemyError as exc:
        session.rollback()
        result.replay_failures += 1
        logger.error('sweep.replay_query_failed', error=str(exc))
        return
    for entry in entries:
        if time.monotonic() >= deadline:
            result.deadline_hit = True
            break
        try:
            kind = ContentKind(entry.content_type)
            _, failed = purge_images(list(entry.images or []), kind, entry.content_id)
            result.image_failures += failed
            if not deletion_log_service.is_system_actor(entry.deleted_by):
                resolve_reports(session, kind, entry.content_id, entry.deleted_by, None)
            notify_owner_of_deletion(
                session,
                entry.owner_id,
                kind,
                entry.content_id,
                entry.title,
                entry.reason or REASON_EXPIRED,
            )
            deletion_log_service.mark_processed(session, entry.id)
        except Exception as exc:  # noqa: BLE001 - leave the entry for the next run
            session.rollback()
            result.replay_failures += 1
            logger.opt(exception=exc).error('sweep.replay_failed', entry_id=entry.id)
            continue
        result.replayed += 1
        logger.info('sweep.replayed', entry_id=entry.id, kind=entry.content_type, content_id=entry.content_id)


def run_sweep(
    now: Optional[datetime] = None,
    budget_seconds: Optional[float] = None,
    max_workers: Optional[int] = None,
    session_factory: Callable[[], Session] = new_session,
) -> SweepResult:
    now = now or utc_now()
    budget = settings.SWEEP_BUDGET_SECONDS if budget_seconds is None else budget_seconds
    deadline = time.monotonic() + budget
    workers = max(1, max_workers or settings.SWEEP_MAX_WORKERS)
    holder = _holder_id()
    result = SweepResult(started_at=utc_now())

    with session_factory() as session:
        acquire_lock(session, holder, now=now)
        logger.info('sweep.started', holder=holder, now=now.isoformat(), budget_seconds=budget, workers=workers)
        try:
            send_renewal_reminders(session, result, now)
            delete_expired(session, result, now, deadline, workers, session_factory)
            replay_deletion_log(session, result, now, deadline)
        finally:
            release_lock(session, holder)

    result.finished_at = utc_now()
    logger.info(
        'sweep.completed',
        reminders=result.reminders_sent,
        deleted=result.expired_deleted,
        missing=result.expired_missing,
        skipped=result.expired_skipped,
        replayed=result.replayed,
        failures=result.failures,
        deadline_hit=result.deadline_hit,
    )
    return result
