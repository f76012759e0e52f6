from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from pawsi.models.enums import ContentKind


class DeletionLogOut(BaseModel):
    id: str
    content_type: ContentKind
    content_id: str
    deleted_by: str
    deleted_at: datetime
    processed: bool
    reason: Optional[str] = None
    owner_id: Optional[str] = None
    title: Optional[str] = None
