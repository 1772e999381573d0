from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_embedding, fetchall, fetchone, load_embedding
from .model import Employee, EmployeeUpdate
from .repository import EmployeeRepository

_COLUMNS = "employee_id, employee_code, name, department, face_id, embedding, registration_date, is_active"


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=str(row["employee_id"]),
        employee_code=row["employee_code"],
        name=row["name"],
        department=row["department"],
        registration_date=int(row["registration_date"]),
        embedding=load_embedding(row.get("embedding")),
        face_id=row.get("face_id"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_active_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s AND is_active=1",
                (employee_code,),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def create(self, employee: Employee) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_id, employee_code, name, department, face_id, embedding, registration_date, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee.employee_id,
                    employee.employee_code,
                    employee.name,
                    employee.department,
                    employee.face_id,
                    dump_embedding(employee.embedding),
                    employee.registration_date,
                    int(employee.is_active),
                ),
            )

    def update(self, employee_id: str, changes: EmployeeUpdate, *, updated_at: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=COALESCE(%s, name),
                    department=COALESCE(%s, department),
                    face_id=COALESCE(%s, face_id),
                    embedding=COALESCE(%s, embedding),
                    updated_at=%s
                WHERE employee_id=%s AND is_active=1
                """,
                (
                    changes.name,
                    changes.department,
                    changes.face_id,
                    dump_embedding(changes.embedding),
                    updated_at,
                    employee_id,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s AND is_active=1", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def set_active(self, employee_id: str, *, is_active: bool, updated_at: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s, updated_at=%s WHERE employee_id=%s",
                (int(is_active), updated_at, employee_id),
            )
            return cur.rowcount > 0

    def list_employees(self, *, is_active: bool = True, department: Optional[str] = None) -> Sequence[Employee]:
        clauses = ["is_active=%s"]
        params: list[object] = [int(is_active)]
        if department:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {' AND '.join(clauses)} ORDER BY name",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_active_embeddings(self) -> Sequence[tuple[str, tuple[float, ...]]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, embedding
                FROM employees
                WHERE is_active=1 AND embedding IS NOT NULL
                ORDER BY employee_id
                """
            )
            return [(str(r["employee_id"]), load_embedding(r["embedding"])) for r in fetchall(cur)]
