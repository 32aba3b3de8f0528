#!/usr/bin/env python3
"""
Delete all household data (users, households, items, alerts, logs, events). Freshness rules are kept.
Run with backend stopped to avoid locks: cd backend && poetry run python scripts/clear_household_data.py
"""
import sys
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import text

from app.db.session import engine
from app.db.tables import HOUSEHOLD_DATA_TABLE_NAMES


def main():
    print(f"Connecting to DB and clearing {', '.join(HOUSEHOLD_DATA_TABLE_NAMES)} ...")
    with engine.connect() as conn:
        # child-first order, so plain DELETE works on SQLite and Postgres alike
        for table in HOUSEHOLD_DATA_TABLE_NAMES:
            conn.execute(text(f"DELETE FROM {table}"))
        conn.commit()
    print("Done. Household tables are empty; run scripts/seed_demo.py to add demo data.")


if __name__ == "__main__":
    main()
