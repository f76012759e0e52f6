"""Best-effort side effects (email, image purge).

Calls submitted here have their own error channel: failures are logged and
counted, never raised into the caller's control flow.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Any, Callable, Optional

from loguru import logger

from pawsi.core.config import settings


class BestEffortDispatcher:
    def __init__(self, max_workers: int, inline: bool = False) -> None:
        self._max_workers = max_workers
        self._inline = inline
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = Lock()
        self.failures = 0

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix='pawsi-best-effort',
                )
            return self._executor

    def _record_failure(self, label: str, exc: BaseException) -> None:
        with self._lock:
            self.failures += 1
        logger.opt(exception=exc).warning('best_effort.failed', task=label, error=str(exc))

    def run(self, label: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
        """Run ``fn`` now; returns False instead of raising on failure."""
        try:
            fn(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001 - best-effort channel
            self._record_failure(label, exc)
            return False
        return True

    def submit(self, label: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Future]:
        if self._inline:
            self.run(label, fn, *args, **kwargs)
            return None
        future = self._get_executor().submit(fn, *args, **kwargs)

        def _log_task_error(done: Future) -> None:
            if done.cancelled():
                return
            error = done.exception()
            if error:
                self._record_failure(label, error)

        future.add_done_callback(_log_task_error)
        return future

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)


_dispatcher: Optional[BestEffortDispatcher] = None
_dispatcher_lock = Lock()


def get_dispatcher() -> BestEffortDispatcher:
    global _dispatcher
    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = BestEffortDispatcher(
                max_workers=settings.BEST_EFFORT_MAX_WORKERS,
                inline=settings.BEST_EFFORT_INLINE,
            )
        return _dispatcher


def reset_dispatcher(wait: bool = True) -> None:
    global _dispatcher
    with _dispatcher_lock:
        current, _dispatcher = _dispatcher, None
    if current is not None:
        current.shutdown(wait=wait)
