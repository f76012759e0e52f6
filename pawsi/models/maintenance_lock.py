from datetime import datetime

from sqlmodel import Field, SQLModel
from pawsi.models.base import UTCDateTime


class MaintenanceLock(SQLModel, table=True):
    __tablename__ = 'maintenance_locks'

    name: str = Field(primary_key=True)
    holder: str
    acquired_at: datetime = Field(sa_type=UTCDateTime)
    expires_at: datetime = Field(sa_type=UTCDateTime)
