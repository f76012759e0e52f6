from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from pawsi.models.enums import ContentKind, ReportReason, ReportResolution, ReportStatus
from pawsi.schemas.content import ContentSnapshot


class ReportCreate(BaseModel):
    post_type: ContentKind
    post_id: str = Field(min_length=1)
    reason: ReportReason
    description: Optional[str] = Field(default=None, max_length=2000)
    # Mentioned in the operator email only.
    reported_user_id: Optional[str] = None


class ReportOut(BaseModel):
    id: str
    post_type: ContentKind
    post_id: str
    reason: ReportReason
    description: Optional[str] = None
    reporter_user_id: Optional[str] = None
    status: ReportStatus
    resolution: Optional[ReportResolution] = None
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None


class AdminReportOut(ReportOut):
    # None once the listing is gone.
    content: Optional[ContentSnapshot] = None
    duplicate_count: int = 0


class ReportPage(BaseModel):
    items: list[AdminReportOut]
    total: int
    limit: int
    offset: int
    has_more: bool


class DeleteContentRequest(BaseModel):
    content_type: ContentKind
    content_id: str = Field(min_length=1)
    report_id: Optional[str] = None


class DeleteContentResponse(BaseModel):
    deleted: bool
    content_type: ContentKind
    content_id: str
    reports_resolved: int = 0
    owner_notified: bool = False
    image_failures: int = 0
