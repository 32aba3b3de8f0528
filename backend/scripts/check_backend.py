#!/usr/bin/env python3
"""
Quick checks before starting the StillGood backend:
  cd backend && poetry run python scripts/check_backend.py
Checks the database is reachable and migrated, rules are seeded, and the app imports.
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    env_file = backend_dir / ".env"
    if env_file.exists():
        print("OK  .env exists")
    else:
        print("--  no backend/.env; using defaults (SQLite at ./stillgood.db)")

    try:
        from sqlalchemy import inspect

        from app.db.session import engine
        from app.db.tables import ALL_TABLE_NAMES

        missing = sorted(set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names()))
        if missing:
            errors.append(f"Missing tables {missing}. Run: alembic upgrade head")
            print("FAIL Schema: missing", ", ".join(missing))
        else:
            print("OK  Database schema (DATABASE_URL)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    if not errors:
        from app.db.session import SessionLocal
        from app.services.freshness_rule_service import list_rules

        db = SessionLocal()
        try:
            rules = list_rules(db)
        finally:
            db.close()
        if rules:
            print(f"OK  {len(rules)} freshness rules")
        else:
            print("--  no freshness rules yet; they are seeded on startup (SEED_DEFAULT_RULES)")

    try:
        from app.main import app  # noqa: F401

        print("OK  App import (app.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: poetry run uvicorn app.main:app --reload --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
