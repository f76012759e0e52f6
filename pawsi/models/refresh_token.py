from datetime import datetime
from sqlmodel import Field, SQLModel
from pawsi.models.base import IDModel, TimestampModel, UTCDateTime


class RefreshToken(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'refresh_tokens'

    token: str = Field(index=True, unique=True)
    user_id: str = Field(index=True)
    expires_at: datetime = Field(sa_type=UTCDateTime)
    revoked: bool = False
