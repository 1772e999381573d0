from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..common.timestamps import now_millis
from ..common.validators import require_embedding, require_non_empty
from ..core.exceptions import EmployeeCodeConflictError, EmployeeNotFoundError, ValidationError
from ..matching.index import gallery_dimension
from .model import Employee, EmployeeUpdate
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: register and maintain employees (never hard-deleted)."""

    def __init__(self, employees: EmployeeRepository, *, embedding_dim: Optional[int] = None):
        self._employees = employees
        self._embedding_dim = embedding_dim

    def _check_embedding(self, embedding, *, replacing: Optional[str] = None) -> tuple[float, ...]:
        """Validate an embedding against the configured dimension, else the stored gallery's."""

        dimension = self._embedding_dim
        if dimension is None:
            dimension = gallery_dimension(self._employees.list_active_embeddings(), exclude=replacing)
        return require_embedding(embedding, dimension=dimension)

    def register(
        self,
        *,
        employee_code: str,
        name: str,
        department: str,
        embedding=None,
        face_id: Optional[str] = None,
    ) -> Employee:
        employee_code = require_non_empty(employee_code, "employeeCode")
        name = require_non_empty(name, "name")
        department = require_non_empty(department, "department")
        vector = self._check_embedding(embedding) if embedding is not None else None

        if self._employees.get_active_by_code(employee_code):
            raise EmployeeCodeConflictError("Employee code already exists")

        employee = Employee(
            employee_id=str(uuid.uuid4()),
            employee_code=employee_code,
            name=name,
            department=department,
            registration_date=now_millis(),
            embedding=vector,
            face_id=face_id,
            is_active=True,
        )
        self._employees.create(employee)
        logger.info("Registered employee %s (%s)", employee.employee_id, employee_code)
        return employee

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise EmployeeNotFoundError("Employee not found")
        return employee

    def update(
        self,
        employee_id: str,
        *,
        name: Optional[str] = None,
        department: Optional[str] = None,
        face_id: Optional[str] = None,
        embedding=None,
    ) -> Employee:
        changes = EmployeeUpdate(
            # Empty strings mean "not provided".
            name=name.strip() if name and name.strip() else None,
            department=department.strip() if department and department.strip() else None,
            face_id=face_id or None,
            embedding=self._check_embedding(embedding, replacing=employee_id) if embedding is not None else None,
        )
        if changes.is_empty():
            raise ValidationError("Nothing to update")

        updated = self._employees.update(employee_id, changes, updated_at=now_millis())
        if not updated:
            raise EmployeeNotFoundError("Employee not found")
        return updated

    def deactivate(self, employee_id: str) -> None:
        self.get(employee_id)
        if not self._employees.set_active(employee_id, is_active=False, updated_at=now_millis()):
            raise EmployeeNotFoundError("Employee not found")
        logger.info("Deactivated employee %s", employee_id)

    def list_employees(self, *, is_active: bool = True, department: Optional[str] = None) -> Sequence[Employee]:
        return self._employees.list_employees(is_active=is_active, department=department or None)
