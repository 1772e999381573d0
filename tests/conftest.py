from __future__ import annotations

import dataclasses
from typing import Optional

import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceEvent
from src.face_attendance.face_attendance.core.enums import CheckType, SyncStatus
from src.face_attendance.face_attendance.employees.model import Employee, EmployeeUpdate


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id: dict[str, Employee] = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_active_by_code(self, employee_code: str) -> Optional[Employee]:
        for e in self.by_id.values():
            if e.is_active and e.employee_code == employee_code:
                return e
        return None

    def create(self, employee: Employee) -> None:
        self.by_id[employee.employee_id] = employee

    def update(self, employee_id: str, changes: EmployeeUpdate, *, updated_at: int) -> Optional[Employee]:
        current = self.by_id.get(employee_id)
        if not current or not current.is_active:
            return None
        fields = {k: v for k, v in dataclasses.asdict(changes).items() if v is not None}
        updated = dataclasses.replace(current, **fields)
        self.by_id[employee_id] = updated
        return updated

    def set_active(self, employee_id: str, *, is_active: bool, updated_at: int) -> bool:
        current = self.by_id.get(employee_id)
        if not current:
            return False
        self.by_id[employee_id] = dataclasses.replace(current, is_active=is_active)
        return True

    def list_employees(self, *, is_active: bool = True, department: Optional[str] = None):
        items = [e for e in self.by_id.values() if e.is_active == is_active]
        if department:
            items = [e for e in items if e.department == department]
        return sorted(items, key=lambda e: e.name)

    def list_active_embeddings(self):
        return [
            (e.employee_id, e.embedding)
            for e in sorted(self.by_id.values(), key=lambda e: e.employee_id)
            if e.is_active and e.embedding is not None
        ]


class InMemoryAttendance:
    def __init__(self):
        self.events: dict[str, AttendanceEvent] = {}

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        return self.events.get(event_id)

    def find_latest_since(self, *, employee_id: str, check_type: CheckType, after: int):
        items = [
            e for e in self.events.values()
            if e.employee_id == employee_id and e.check_type == check_type and e.timestamp > after
        ]
        return max(items, key=lambda e: e.timestamp) if items else None

    def insert(self, event: AttendanceEvent) -> None:
        assert event.id not in self.events
        self.events[event.id] = event

    def mark_synced(self, event_id: str, *, location: Optional[str], synced_at: int) -> bool:
        current = self.events.get(event_id)
        if not current:
            return False
        self.events[event_id] = dataclasses.replace(
            current,
            sync_status=SyncStatus.SYNCED,
            location=location if location is not None else current.location,
            synced_at=current.synced_at or synced_at,
        )
        return True

    def list_for_employee(self, *, employee_id: str, start: int, end: int):
        items = [e for e in self.events.values() if e.employee_id == employee_id and start <= e.timestamp <= end]
        return sorted(items, key=lambda e: e.timestamp, reverse=True)

    def list_between(self, *, start: int, end: int):
        return sorted((e for e in self.events.values() if start <= e.timestamp <= end), key=lambda e: e.timestamp)


def make_employee(employee_id: str, *, embedding=None, code=None, name=None, department="IT", is_active=True) -> Employee:
    return Employee(
        employee_id=employee_id,
        employee_code=code or f"C-{employee_id}",
        name=name or f"Employee {employee_id}",
        department=department,
        registration_date=1_700_000_000_000,
        embedding=tuple(float(x) for x in embedding) if embedding is not None else None,
        is_active=is_active,
    )


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(
        [
            make_employee("E1", embedding=[1, 0, 0], name="Alice"),
            make_employee("E2", embedding=[0, 0, 1], name="Bob", department="HR"),
            make_employee("E3", name="Carol"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def fixed_now(monkeypatch):
    """Pin server time (epoch ms) used by services for stamping."""
    now = 1_700_000_000_000
    for module in (
        "src.face_attendance.face_attendance.attendance.service",
        "src.face_attendance.face_attendance.attendance.reconciler",
        "src.face_attendance.face_attendance.employees.service",
    ):
        monkeypatch.setattr(f"{module}.now_millis", lambda: now)
    return now


@pytest.fixture
def new_employee():
    return make_employee


@pytest.fixture
def employee_store():
    """Factory: build an in-memory employee repository from Employee objects."""
    return InMemoryEmployees
