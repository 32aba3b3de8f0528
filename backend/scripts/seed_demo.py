#!/usr/bin/env python3
"""
Seed default freshness rules and a demo household with a few items.
Idempotent for rules; the demo user/household are created only if missing.
Run: cd backend && poetry run python scripts/seed_demo.py
"""
import sys
from datetime import timedelta
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.dates import utc_now
from app.core.enums import MemberRole
from app.db.session import SessionLocal
from app.models.household import Household, HouseholdMember
from app.models.user import User
from app.services.freshness_rule_service import ensure_default_rules
from app.services.item_service import create_item

DEMO_EMAIL = "demo@stillgood.local"
DEMO_INVITE_CODE = "STILLGOOD"

DEMO_ITEMS = (
    # (name, category, quantity, days ago, opened)
    ("Milk", "dairy", "1 L", 6, False),
    ("Spinach", "produce", "1 bag", 2, True),
    ("Chicken thighs", "meat", "500 g", 4, False),
    ("Chili", "leftovers", "2 portions", 1, None),
    ("Hummus", "other", "1 tub", 1, False),
)


def main():
    db = SessionLocal()
    try:
        created_rules = ensure_default_rules(db)
        print(f"Freshness rules: {created_rules} created")

        user = db.query(User).filter(User.email == DEMO_EMAIL).first()
        if user:
            print(f"Demo user already exists (id={user.id}); nothing else to do.")
            return
        user = User(email=DEMO_EMAIL, name="Demo User", prefs_email=True, prefs_in_app=True)
        household = Household(name="StillGood Home", invite_code=DEMO_INVITE_CODE)
        db.add_all([user, household])
        db.flush()
        db.add(HouseholdMember(household_id=household.id, user_id=user.id, role=MemberRole.OWNER.value))
        db.commit()

        now = utc_now()
        for name, category, quantity, days_ago, opened in DEMO_ITEMS:
            item = create_item(
                db,
                household_id=household.id,
                user_id=user.id,
                name=name,
                category=category,
                quantity=quantity,
                date_added=now - timedelta(days=days_ago),
                opened=opened,
                now=now,
            )
            print(f"  {item.name}: {item.status} ({item.days_remaining} days left)")
        print(f"Done. Use header X-User-Id: {user.id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
