from app.models.alert import Alert
from app.models.analytics_event import AnalyticsEvent
from app.models.freshness_rule import FreshnessRule
from app.models.household import Household, HouseholdMember
from app.models.item import Item
from app.models.notification_log import NotificationLog
from app.models.user import User

__all__ = [
    "Alert",
    "AnalyticsEvent",
    "FreshnessRule",
    "Household",
    "HouseholdMember",
    "Item",
    "NotificationLog",
    "User",
]
