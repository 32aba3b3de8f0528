#!/usr/bin/env python3
"""
Run one alert sweep now (same code path as the scheduler) and print the counters.
Run: cd backend && poetry run python scripts/run_alert_sweep.py
"""
import sys
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.scheduler.alert_sweep_job import run_alert_sweep_job


def main():
    stats = run_alert_sweep_job()
    if stats is None:
        print("Sweep skipped or failed; see log output.")
        sys.exit(1)
    print(
        f"Done. scanned_items={stats.scanned_items}, alerts_created={stats.alerts_created}, "
        f"failed_items={stats.failed_items}"
    )
    if stats.failed_items:
        sys.exit(1)


if __name__ == "__main__":
    main()
