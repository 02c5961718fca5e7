from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from . import models

logger = logging.getLogger(__name__)


class AssignmentOutcome(str, enum.Enum):
    CREATED = "CREATED"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    FAILED = "FAILED"


@dataclass(frozen=True)
class AssignmentResult:
    employee_id: str
    employee_name: str
    house_id: str
    house_name: str
    outcome: AssignmentOutcome
    reason: Optional[str] = None


@dataclass
class AssignmentReport:
    """Per-pair outcome of a bulk assignment run."""

    house_count: int = 0
    employee_count: int = 0
    results: List[AssignmentResult] = field(default_factory=list)

    def _count(self, outcome: AssignmentOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def created(self) -> int:
        return self._count(AssignmentOutcome.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(AssignmentOutcome.ALREADY_EXISTS)

    @property
    def failed(self) -> int:
        return self._count(AssignmentOutcome.FAILED)

    @property
    def failures(self) -> List[AssignmentResult]:
        return [result for result in self.results if result.outcome == AssignmentOutcome.FAILED]


@dataclass(frozen=True)
class EmployeeAssignments:
    employee_id: str
    name: str
    status: models.EmployeeStatus
    house_names: Tuple[str, ...]

    @property
    def has_houses(self) -> bool:
        return bool(self.house_names)


@dataclass
class StaffingSummary:
    houses: List[Tuple[str, str]] = field(default_factory=list)
    employees: List[EmployeeAssignments] = field(default_factory=list)

    @property
    def total_employees(self) -> int:
        return len(self.employees)

    @property
    def with_houses(self) -> int:
        return sum(1 for employee in self.employees if employee.has_houses)

    @property
    def without_houses(self) -> int:
        return self.total_employees - self.with_houses


# ---------------------------------------------------------------------------
# Single assignment
# ---------------------------------------------------------------------------


def assignment_exists(db: Session, *, employee_id: str, house_id: str) -> bool:
    return (
        db.query(models.EmployeeHouse.id)
        .filter(
            models.EmployeeHouse.employee_id == employee_id,
            models.EmployeeHouse.house_id == house_id,
        )
        .first()
        is not None
    )


def create_employee_house(db: Session, *, employee_id: str, house_id: str) -> AssignmentOutcome:
    """
    Insert one employee/house assignment and commit it.

    Returns CREATED, or ALREADY_EXISTS when the unique pair constraint
    rejects the insert because the row is already there. Any other failure
    (including integrity errors for unknown ids) is rolled back and raised.
    """
    db.add(models.EmployeeHouse(employee_id=employee_id, house_id=house_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if assignment_exists(db, employee_id=employee_id, house_id=house_id):
            return AssignmentOutcome.ALREADY_EXISTS
        raise
    return AssignmentOutcome.CREATED


# ---------------------------------------------------------------------------
# Bulk operations (maintenance scripts)
# ---------------------------------------------------------------------------


def assign_all_active_employees(db: Session) -> AssignmentReport:
    """
    Give every ACTIVE employee an assignment at every house.

    Safe to re-run: existing pairs are reported as skipped. A failure on
    one pair is recorded in the report and the run carries on.
    """
    houses = [
        (house_id, name)
        for house_id, name in db.query(models.House.id, models.House.name).order_by(models.House.name)
    ]
    employees = [
        (employee_id, f"{first_name} {last_name}".strip())
        for employee_id, first_name, last_name in (
            db.query(models.Employee.id, models.Employee.first_name, models.Employee.last_name)
            .filter(models.Employee.status == models.EmployeeStatus.ACTIVE)
            .order_by(models.Employee.last_name, models.Employee.first_name)
        )
    ]

    report = AssignmentReport(house_count=len(houses), employee_count=len(employees))

    for employee_id, employee_name in employees:
        for house_id, house_name in houses:
            try:
                outcome = create_employee_house(db, employee_id=employee_id, house_id=house_id)
                reason = None
            except Exception as exc:
                db.rollback()
                logger.error(
                    "Error assigning %s to %s: %s",
                    employee_name,
                    house_name,
                    exc,
                )
                outcome = AssignmentOutcome.FAILED
                reason = str(exc)
            report.results.append(
                AssignmentResult(
                    employee_id=employee_id,
                    employee_name=employee_name,
                    house_id=house_id,
                    house_name=house_name,
                    outcome=outcome,
                    reason=reason,
                )
            )

    logger.info(
        "Bulk house assignment finished: created=%d skipped=%d failed=%d",
        report.created,
        report.skipped,
        report.failed,
    )
    return report


def summarize_assignments(db: Session) -> StaffingSummary:
    """Read-only view of every employee (any status) and their houses."""
    houses = [
        (house_id, name)
        for house_id, name in db.query(models.House.id, models.House.name).order_by(models.House.name)
    ]
    employees = (
        db.query(models.Employee)
        .options(selectinload(models.Employee.assigned_houses).selectinload(models.EmployeeHouse.house))
        .order_by(models.Employee.last_name, models.Employee.first_name)
        .all()
    )

    return StaffingSummary(
        houses=houses,
        employees=[
            EmployeeAssignments(
                employee_id=employee.id,
                name=employee.full_name,
                status=employee.status,
                house_names=tuple(link.house.name for link in employee.assigned_houses),
            )
            for employee in employees
        ],
    )
