from app.services.alert_service import run_alert_sweep
from app.services.freshness_rule_service import ensure_default_rules, get_rule
from app.services.item_service import refresh_and_persist_item

__all__ = ["run_alert_sweep", "ensure_default_rules", "get_rule", "refresh_and_persist_item"]
