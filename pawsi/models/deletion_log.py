from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from pawsi.models.base import IDModel, UTCDateTime, utc_now
from pawsi.models.enums import ContentKind, enum_column


class DeletionLogEntry(IDModel, SQLModel, table=True):
    __tablename__ = 'deletion_logs'

    content_type: ContentKind = Field(sa_column=enum_column(ContentKind, 'deletion_content_type'))
    content_id: str = Field(index=True)
    deleted_by: str
    deleted_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    processed: bool = Field(default=False, index=True)

    # Captured before the row disappears so an interrupted cascade can be replayed.
    reason: Optional[str] = None
    owner_id: Optional[str] = None
    title: Optional[str] = None
    images: list[str] = Field(default_factory=list, sa_type=sa.JSON)
