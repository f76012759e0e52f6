from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from pawsi.models.base import IDModel, TimestampModel
from pawsi.models.enums import NotificationType, enum_column


class Notification(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'notifications'

    user_id: str = Field(index=True)
    type: NotificationType = Field(sa_column=enum_column(NotificationType, 'notification_type'))
    message: str = Field(sa_type=sa.Text)
    meta: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    read: bool = False
