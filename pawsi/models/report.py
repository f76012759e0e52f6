from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from pawsi.models.base import IDModel, TimestampModel, UTCDateTime
from pawsi.models.enums import ContentKind, ReportReason, ReportResolution, ReportStatus, enum_column


class Report(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'post_reports'

    post_type: ContentKind = Field(sa_column=enum_column(ContentKind, 'report_post_type'))
    post_id: str = Field(index=True)
    reason: ReportReason = Field(sa_column=enum_column(ReportReason, 'report_reason'))
    description: Optional[str] = Field(default=None, sa_type=sa.Text)
    reporter_user_id: Optional[str] = Field(default=None, index=True)
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=enum_column(ReportStatus, 'report_status'),
    )
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    reviewed_by: Optional[str] = None
    resolved_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    resolved_by: Optional[str] = None
    resolution: Optional[ReportResolution] = Field(
        default=None,
        sa_column=enum_column(ReportResolution, 'report_resolution', nullable=True),
    )
