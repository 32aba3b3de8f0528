"""String enums shared by models, services and the API. Stored as plain strings in the DB."""
import enum


class ItemStatus(str, enum.Enum):
    FRESH = "FRESH"
    USE_SOON = "USE_SOON"
    EXPIRED = "EXPIRED"


class AlertType(str, enum.Enum):
    USE_SOON = "USE_SOON"
    EXPIRED = "EXPIRED"


class NotificationChannel(str, enum.Enum):
    EMAIL = "EMAIL"
    IN_APP = "IN_APP"


class NotificationStatus(str, enum.Enum):
    SENT = "SENT"
    SKIPPED = "SKIPPED"


class AnalyticsEventType(str, enum.Enum):
    ITEM_ADDED = "ITEM_ADDED"
    ITEM_OPENED = "ITEM_OPENED"
    ITEM_CONSUMED = "ITEM_CONSUMED"
    ITEM_EXPIRED = "ITEM_EXPIRED"


class MemberRole(str, enum.Enum):
    OWNER = "OWNER"
    MEMBER = "MEMBER"
