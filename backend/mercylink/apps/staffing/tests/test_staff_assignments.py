from __future__ import annotations

from sqlalchemy.exc import OperationalError

from mercylink.apps.staffing import models as staffing_models
from mercylink.apps.staffing import services as staffing_services
from mercylink.scripts import assign_staff_to_houses, check_staff


def _create_house(db, name) -> staffing_models.House:
    house = staffing_models.House(name=name, city="Saint Paul", state="MN")
    db.add(house)
    db.commit()
    return house


def _create_employee(db, first, last, status=staffing_models.EmployeeStatus.ACTIVE) -> staffing_models.Employee:
    employee = staffing_models.Employee(first_name=first, last_name=last, status=status)
    db.add(employee)
    db.commit()
    return employee


def _pairs(db):
    return {
        (row.employee_id, row.house_id)
        for row in db.query(staffing_models.EmployeeHouse).all()
    }


def test_create_employee_house_reports_existing_pair(db_session):
    house = _create_house(db_session, "Maple House")
    employee = _create_employee(db_session, "Ada", "Baker")

    first = staffing_services.create_employee_house(db_session, employee_id=employee.id, house_id=house.id)
    second = staffing_services.create_employee_house(db_session, employee_id=employee.id, house_id=house.id)

    assert first == staffing_services.AssignmentOutcome.CREATED
    assert second == staffing_services.AssignmentOutcome.ALREADY_EXISTS
    assert len(_pairs(db_session)) == 1


def test_assign_all_active_employees_is_idempotent(db_session):
    maple = _create_house(db_session, "Maple House")
    oak = _create_house(db_session, "Oak House")
    ada = _create_employee(db_session, "Ada", "Baker")
    ben = _create_employee(db_session, "Ben", "Carter")
    _create_employee(db_session, "Cal", "Dunn", status=staffing_models.EmployeeStatus.INACTIVE)
    _create_employee(db_session, "Dee", "Ellis", status=staffing_models.EmployeeStatus.ON_LEAVE)

    first = staffing_services.assign_all_active_employees(db_session)

    assert (first.house_count, first.employee_count) == (2, 2)
    assert (first.created, first.skipped, first.failed) == (4, 0, 0)
    assert _pairs(db_session) == {
        (ada.id, maple.id),
        (ada.id, oak.id),
        (ben.id, maple.id),
        (ben.id, oak.id),
    }

    second = staffing_services.assign_all_active_employees(db_session)

    assert (second.created, second.skipped, second.failed) == (0, 4, 0)
    assert len(_pairs(db_session)) == 4


def test_assign_all_active_employees_fills_gaps_only(db_session):
    maple = _create_house(db_session, "Maple House")
    ada = _create_employee(db_session, "Ada", "Baker")
    staffing_services.create_employee_house(db_session, employee_id=ada.id, house_id=maple.id)
    _create_house(db_session, "Oak House")

    report = staffing_services.assign_all_active_employees(db_session)

    assert (report.created, report.skipped) == (1, 1)


def test_assign_all_active_employees_records_failures_and_continues(db_session, monkeypatch):
    maple = _create_house(db_session, "Maple House")
    oak = _create_house(db_session, "Oak House")
    ada = _create_employee(db_session, "Ada", "Baker")
    original = staffing_services.create_employee_house

    def _flaky(db, *, employee_id, house_id):
        if house_id == maple.id:
            raise OperationalError("INSERT INTO employee_houses", {}, Exception("database is locked"))
        return original(db, employee_id=employee_id, house_id=house_id)

    monkeypatch.setattr(staffing_services, "create_employee_house", _flaky)

    report = staffing_services.assign_all_active_employees(db_session)

    assert (report.created, report.skipped, report.failed) == (1, 0, 1)
    (failure,) = report.failures
    assert failure.employee_name == "Ada Baker"
    assert failure.house_name == "Maple House"
    assert "database is locked" in failure.reason
    assert _pairs(db_session) == {(ada.id, oak.id)}


def test_print_report_lists_failures(db_session, monkeypatch, capsys):
    _create_house(db_session, "Maple House")
    _create_employee(db_session, "Ada", "Baker")

    def _broken(db, *, employee_id, house_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(staffing_services, "create_employee_house", _broken)

    assign_staff_to_houses.print_report(staffing_services.assign_all_active_employees(db_session))

    out = capsys.readouterr().out
    assert "Found 1 houses" in out
    assert "Found 1 active employees" in out
    assert "Error assigning Ada Baker to Maple House: boom" in out
    assert "Created 0 new assignments" in out
    assert "Failed 1" in out


def test_summarize_assignments_includes_every_employee(db_session):
    maple = _create_house(db_session, "Maple House")
    oak = _create_house(db_session, "Oak House")
    ada = _create_employee(db_session, "Ada", "Baker")
    _create_employee(db_session, "Cal", "Dunn", status=staffing_models.EmployeeStatus.TERMINATED)
    staffing_services.create_employee_house(db_session, employee_id=ada.id, house_id=maple.id)
    staffing_services.create_employee_house(db_session, employee_id=ada.id, house_id=oak.id)
    db_session.expire_all()

    summary = staffing_services.summarize_assignments(db_session)

    assert summary.houses == [(maple.id, "Maple House"), (oak.id, "Oak House")]
    assert (summary.total_employees, summary.with_houses, summary.without_houses) == (2, 1, 1)

    text = check_staff.format_summary(summary)
    assert "=== HOUSES ===" in text
    assert f"  Maple House ({maple.id})" in text
    assert "Ada Baker (ACTIVE) - Houses: " in text
    assert "Maple House" in text.split("Ada Baker (ACTIVE) - Houses: ")[1].splitlines()[0]
    assert "  Cal Dunn (TERMINATED) - Houses: NO HOUSES ASSIGNED" in text
    assert "  Total employees: 2" in text
    assert "  Without house assignments: 1" in text
