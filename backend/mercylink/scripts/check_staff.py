"""Print every employee with the houses they are assigned to.

    python -m mercylink.scripts.check_staff
"""

from __future__ import annotations

from mercylink import models  # noqa: F401
from mercylink.database import SessionLocal
from mercylink.apps.staffing import services as staffing_services

NO_HOUSES = "NO HOUSES ASSIGNED"


def format_summary(summary: staffing_services.StaffingSummary) -> str:
    lines = ["", "=== HOUSES ==="]
    lines.extend(f"  {name} ({house_id})" for house_id, name in summary.houses)

    lines.extend(["", "=== EMPLOYEES ==="])
    for employee in summary.employees:
        houses = ", ".join(employee.house_names) or NO_HOUSES
        lines.append(f"  {employee.name} ({employee.status.value}) - Houses: {houses}")

    lines.extend(
        [
            "",
            "=== SUMMARY ===",
            f"  Total employees: {summary.total_employees}",
            f"  With house assignments: {summary.with_houses}",
            f"  Without house assignments: {summary.without_houses}",
        ]
    )
    return "\n".join(lines)


def main() -> None:
    db = SessionLocal()
    try:
        print(format_summary(staffing_services.summarize_assignments(db)))
    finally:
        db.close()


if __name__ == "__main__":
    main()
