"""Cron entry point for the daily maintenance sweep.

Exits 0 when the sweep ran (even with per-item failures), 2 when another sweep
holds the lock, 1 when the store could not be reached.
"""

from __future__ import annotations

import argparse
import json
import sys

from loguru import logger

from pawsi.core.config import settings
from pawsi.core.errors import DependencyError, SweepLockedError
from pawsi.core.logging import configure_logging
from pawsi.db.init_db import init_db
from pawsi.services.dispatch import reset_dispatcher
from pawsi.services.maintenance_service import run_sweep


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Run the listing maintenance sweep once.')
    parser.add_argument(
        '--budget-seconds',
        type=float,
        default=None,
        help=f"Wall-clock budget (default {settings.SWEEP_BUDGET_SECONDS}s)",
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help=f"Parallel expiry cascades (default {settings.SWEEP_MAX_WORKERS})",
    )
    parser.add_argument('--json', action='store_true', help='Log as JSON lines')
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL, serialize=args.json)
    init_db()
    try:
        result = run_sweep(budget_seconds=args.budget_seconds, max_workers=args.workers)
    except SweepLockedError:
        logger.warning('sweep.skipped_locked')
        return 2
    except DependencyError as exc:
        logger.error('sweep.aborted', error=exc.detail)
        return 1
    finally:
        reset_dispatcher(wait=True)

    summary = {
        'reminders': result.reminders_sent,
        'deleted': result.expired_deleted,
        'skipped': result.expired_skipped,
        'replayed': result.replayed,
        'failures': result.failures,
    }
    print(json.dumps(summary))
    return 0


if __name__ == '__main__':
    sys.exit(main())
