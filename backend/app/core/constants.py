"""
Centralized constants for freshness, alerts and analytics (Encapsulate What Changes).

Change thresholds, job IDs or reference values here instead of scattering literals
across services and routes. Intervals and toggles come from app.config (env-driven).
"""

# Scheduler job IDs (must match ids used in main.py add_job)
ALERT_SWEEP_JOB_ID = "alert_sweep"

# Freshness engine
DEFAULT_FRESH_DAYS = 4  # no rule for the category ("other"/unknown)
USE_SOON_THRESHOLD_DAYS = 2  # inclusive: 0..2 days remaining is USE_SOON
OTHER_CATEGORY = "other"
CONFIDENCE_NO_RULE = 0.55
CONFIDENCE_OPENED_KNOWN = 0.9
CONFIDENCE_OPENED_UNKNOWN = 0.75

# Seeded on startup when SEED_DEFAULT_RULES is on; existing rows are never overwritten
DEFAULT_FRESHNESS_RULES = (
    {"category": "dairy", "unopened_days": 7, "opened_days": 4},
    {"category": "produce", "unopened_days": 5, "opened_days": 3},
    {"category": "meat", "unopened_days": 3, "opened_days": 2},
    {"category": "leftovers", "unopened_days": 4, "opened_days": 2},
)

# Analytics: estimated value per item by category (unknown categories count as "other")
CATEGORY_COST = {
    "dairy": 4.5,
    "produce": 3.2,
    "meat": 7.5,
    "leftovers": 5.0,
    OTHER_CATEGORY: 3.0,
}
ANALYTICS_RANGE_DAYS = {"week": 7, "month": 30}
TOP_WASTED_CATEGORIES_LIMIT = 5

# Item field bounds (API validation)
ITEM_NAME_MAX_LENGTH = 120
ITEM_CATEGORY_MIN_LENGTH = 2
ITEM_CATEGORY_MAX_LENGTH = 40
ITEM_QUANTITY_MAX_LENGTH = 60
CUSTOM_FRESH_DAYS_MAX = 90

# Households and users (API validation)
HOUSEHOLD_NAME_MIN_LENGTH = 2
HOUSEHOLD_NAME_MAX_LENGTH = 80
INVITE_CODE_LENGTH = 6
INVITE_CODE_MIN_LENGTH = 4
INVITE_CODE_MAX_LENGTH = 24
USER_NAME_MIN_LENGTH = 2
USER_NAME_MAX_LENGTH = 80
