from pawsi.models.base import IDModel, TimestampModel
from pawsi.models.user import User
from pawsi.models.refresh_token import RefreshToken
from pawsi.models.content import (
    AdoptionPost,
    ClassifiedAd,
    FoundPost,
    LostPost,
    VeterinarianListing,
)
from pawsi.models.report import Report
from pawsi.models.notification import Notification
from pawsi.models.deletion_log import DeletionLogEntry
from pawsi.models.maintenance_lock import MaintenanceLock

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'LostPost',
    'FoundPost',
    'AdoptionPost',
    'ClassifiedAd',
    'VeterinarianListing',
    'Report',
    'Notification',
    'DeletionLogEntry',
    'MaintenanceLock',
]
