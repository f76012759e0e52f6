from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field
from pawsi.models.enums import NotificationType


class NotificationUpdate(BaseModel):
    read: bool


class NotificationOut(BaseModel):
    id: str
    type: NotificationType
    message: str
    meta: dict[str, Any] = Field(default_factory=dict)
    read: bool
    created_at: datetime


class MessageNotificationCreate(BaseModel):
    recipient_id: str = Field(min_length=1)
    subject: str = Field(min_length=1, max_length=200)
