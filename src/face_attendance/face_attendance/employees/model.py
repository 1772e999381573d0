from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: a registered employee.

    Note: plain data object, no DB access. `embedding` is the stored face
    vector used for matching; `registration_date` is epoch ms.
    """

    employee_id: str
    employee_code: str
    name: str
    department: str
    registration_date: int
    embedding: Optional[tuple[float, ...]] = None
    face_id: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class EmployeeUpdate:
    """Partial update: None means "keep the current value"."""

    name: Optional[str] = None
    department: Optional[str] = None
    face_id: Optional[str] = None
    embedding: Optional[tuple[float, ...]] = None

    def is_empty(self) -> bool:
        return self.name is None and self.department is None and self.face_id is None and self.embedding is None
