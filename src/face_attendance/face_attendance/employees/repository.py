from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeUpdate


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory and its embedding store.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        """Return the employee regardless of `is_active`."""

        raise NotImplementedError

    def get_active_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, employee: Employee) -> None:
        raise NotImplementedError

    def update(self, employee_id: str, changes: EmployeeUpdate, *, updated_at: int) -> Optional[Employee]:
        """Apply a partial update to an active employee; None if absent or inactive."""

        raise NotImplementedError

    def set_active(self, employee_id: str, *, is_active: bool, updated_at: int) -> bool:
        raise NotImplementedError

    def list_employees(self, *, is_active: bool = True, department: Optional[str] = None) -> Sequence[Employee]:
        """Employees ordered by name."""

        raise NotImplementedError

    def list_active_embeddings(self) -> Sequence[tuple[str, tuple[float, ...]]]:
        """(employee_id, embedding) for every active employee that has one."""

        raise NotImplementedError
