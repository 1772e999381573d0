from __future__ import annotations

import pytest

from src.face_attendance.face_attendance.core.exceptions import (
    EmployeeCodeConflictError,
    EmployeeNotFoundError,
    ValidationError,
)
from src.face_attendance.face_attendance.employees.service import EmployeeService


def test_register_creates_active_employee(employees_repo, fixed_now):
    svc = EmployeeService(employees_repo)

    emp = svc.register(employee_code="NEW-1", name=" Dana ", department="Ops", embedding=[0.1, 0.2, 0.3])

    assert employees_repo.get_by_id(emp.employee_id) == emp
    assert emp.name == "Dana"
    assert emp.embedding == (0.1, 0.2, 0.3)
    assert emp.registration_date == fixed_now
    assert emp.is_active is True


def test_register_rejects_code_of_active_employee(employees_repo):
    with pytest.raises(EmployeeCodeConflictError):
        EmployeeService(employees_repo).register(employee_code="C-E1", name="X", department="IT")


def test_register_allows_code_of_deactivated_employee(employees_repo):
    svc = EmployeeService(employees_repo)
    svc.deactivate("E1")

    emp = svc.register(employee_code="C-E1", name="X", department="IT")

    assert emp.employee_code == "C-E1"


@pytest.mark.parametrize("field", ["employee_code", "name", "department"])
def test_register_requires_fields(employees_repo, field):
    kwargs = {"employee_code": "N", "name": "N", "department": "N", field: "  "}

    with pytest.raises(ValidationError):
        EmployeeService(employees_repo).register(**kwargs)


def test_register_enforces_embedding_dimension(employees_repo):
    with pytest.raises(ValidationError):
        EmployeeService(employees_repo, embedding_dim=3).register(
            employee_code="N", name="N", department="N", embedding=[1, 2]
        )


def test_update_is_partial_and_replaces_embedding(employees_repo):
    svc = EmployeeService(employees_repo)

    emp = svc.update("E1", department="Finance", embedding=[0, 1, 0])

    assert emp.name == "Alice"
    assert emp.department == "Finance"
    assert emp.embedding == (0.0, 1.0, 0.0)


def test_update_without_changes_is_invalid(employees_repo):
    with pytest.raises(ValidationError):
        EmployeeService(employees_repo).update("E1", name="  ")


def test_deactivated_employee_is_hidden_but_kept(employees_repo):
    svc = EmployeeService(employees_repo)
    svc.deactivate("E2")

    with pytest.raises(EmployeeNotFoundError):
        svc.get("E2")
    with pytest.raises(EmployeeNotFoundError):
        svc.update("E2", name="Bobby")
    assert employees_repo.get_by_id("E2") is not None
    assert [e.employee_id for e in svc.list_employees(is_active=False)] == ["E2"]


def test_list_filters_by_department(employees_repo):
    svc = EmployeeService(employees_repo)

    assert [e.name for e in svc.list_employees()] == ["Alice", "Bob", "Carol"]
    assert [e.name for e in svc.list_employees(department="HR")] == ["Bob"]


def test_register_rejects_embedding_of_different_size_than_stored(employees_repo):
    svc = EmployeeService(employees_repo)

    with pytest.raises(ValidationError):
        svc.register(employee_code="N-2", name="Short", department="IT", embedding=[1, 0])

    assert all(len(vec) == 3 for _, vec in employees_repo.list_active_embeddings())


def test_first_embedding_sets_dimension_for_later_registrations(employee_store):
    svc = EmployeeService(employee_store())
    svc.register(employee_code="A", name="A", department="IT", embedding=[1, 0, 0])

    with pytest.raises(ValidationError):
        svc.register(employee_code="B", name="B", department="IT", embedding=[1, 0])


def test_update_rejects_mismatched_embedding_size(employees_repo):
    with pytest.raises(ValidationError):
        EmployeeService(employees_repo).update("E1", embedding=[1, 0, 0, 0])


def test_only_embedding_owner_may_change_dimension(employee_store, new_employee):
    repo = employee_store([new_employee("E1", embedding=[1, 0, 0]), new_employee("E2")])

    emp = EmployeeService(repo).update("E1", embedding=[0.5, 0.5])

    assert emp.embedding == (0.5, 0.5)
