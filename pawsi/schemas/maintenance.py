from datetime import datetime
from pydantic import BaseModel


class SweepResultOut(BaseModel):
    started_at: datetime
    finished_at: datetime
    reminders_sent: int
    reminder_failures: int
    expired_deleted: int
    expired_missing: int
    expired_failed: int
    expired_skipped: int
    replayed: int
    replay_failures: int
    image_failures: int
    deadline_hit: bool
    failures: int
