"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. DELETE in reset scripts). Order is
child-first so deletes respect foreign keys.
"""
# All tables that exist in the DB. Must match models and migration 001.
ALL_TABLE_NAMES = (
    "notification_logs",
    "alerts",
    "analytics_events",
    "items",
    "household_members",
    "households",
    "users",
    "freshness_rules",
)

# Tables cleared when resetting household data; freshness_rules is reference data and survives.
HOUSEHOLD_DATA_TABLE_NAMES = ALL_TABLE_NAMES[:-1]
