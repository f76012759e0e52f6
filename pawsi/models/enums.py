from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class ContentKind(str, Enum):
    LOST = 'lost'
    REPORTED = 'reported'
    ADOPTION = 'adoption'
    CLASSIFIED = 'classified'
    VETERINARIAN = 'veterinarian'


class ContentStatus(str, Enum):
    ACTIVE = 'active'
    RESOLVED = 'resolved'
    INACTIVE = 'inactive'


class ReportStatus(str, Enum):
    PENDING = 'pending'
    REVIEWED = 'reviewed'
    RESOLVED = 'resolved'


class ReportReason(str, Enum):
    SPAM = 'spam'
    INAPPROPRIATE = 'inappropriate'
    FAKE = 'fake'
    ANIMAL_ABUSE = 'animal_abuse'
    COMMERCIAL = 'commercial'
    OFFENSIVE = 'offensive'
    PERSONAL_DATA = 'personal_data'
    OTHER = 'other'


class ReportResolution(str, Enum):
    CONTENT_DELETED = 'content_deleted'
    CLOSED_WITHOUT_ACTION = 'closed_without_action'


class NotificationType(str, Enum):
    RENEWAL_REMINDER = 'renewal_reminder'
    POST_DELETED = 'post_deleted'
    POST_RENEWED = 'post_renewed'
    POST_RESOLVED = 'post_resolved'
    NEW_MESSAGE = 'new_message'
    REPORT_RECEIVED = 'report_received'


def enum_type(enum_cls: type[Enum], name: str) -> sa.Enum:
    return sa.Enum(
        enum_cls,
        values_callable=lambda enum: [item.value for item in enum],
        name=name,
    )


def enum_column(enum_cls: type[Enum], name: str, nullable: bool = False) -> Column:
    return Column(enum_type(enum_cls, name), nullable=nullable)
