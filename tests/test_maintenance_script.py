import json
from datetime import timedelta

from pawsi.models.base import utc_now
from pawsi.models.enums import ContentKind
from pawsi.services.maintenance_service import acquire_lock, release_lock
from scripts.run_daily_maintenance import main


def test_script_runs_one_sweep(capsys, make_listing):
    make_listing(ContentKind.LOST, now=utc_now() - timedelta(days=61))

    assert main(['--budget-seconds', '60', '--workers', '1']) == 0

    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith('{')]
    summary = json.loads(lines[-1])
    assert summary['deleted'] == 1
    assert summary['failures'] == 0


def test_script_reports_a_held_lock(session):
    acquire_lock(session, 'cron-elsewhere')
    try:
        assert main([]) == 2
    finally:
        release_lock(session, 'cron-elsewhere')
