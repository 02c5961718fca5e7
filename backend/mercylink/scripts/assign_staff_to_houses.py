"""Assign every active employee to every house.

Run after adding a house or onboarding staff so everyone can pick up
shifts anywhere. Safe to re-run; existing assignments are skipped.

    python -m mercylink.scripts.assign_staff_to_houses
"""

from __future__ import annotations

from mercylink import models  # noqa: F401
from mercylink.database import SessionLocal
from mercylink.apps.staffing import services as staffing_services


def print_report(report: staffing_services.AssignmentReport) -> None:
    print(f"Found {report.house_count} houses")
    print(f"Found {report.employee_count} active employees")

    for failure in report.failures:
        print(f"Error assigning {failure.employee_name} to {failure.house_name}: {failure.reason}")

    print("\n=== DONE ===")
    print(f"Created {report.created} new assignments")
    print(f"Skipped {report.skipped} (already existed)")
    if report.failed:
        print(f"Failed {report.failed}")


def main() -> None:
    db = SessionLocal()
    try:
        report = staffing_services.assign_all_active_employees(db)
        print_report(report)
    finally:
        db.close()


if __name__ == "__main__":
    main()
