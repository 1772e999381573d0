from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import SyncReconciler
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_DUPLICATE_WINDOW_MINUTES, DEFAULT_HISTORY_DAYS, DEFAULT_MATCH_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .matching.service import SimilarityMatcher


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    matcher: SimilarityMatcher
    employee_service: EmployeeService
    attendance_service: AttendanceService

    history_days: int = DEFAULT_HISTORY_DAYS
    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    duplicate_window_minutes: int = DEFAULT_DUPLICATE_WINDOW_MINUTES,
    embedding_dim: Optional[int] = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
    tz: Optional[tzinfo] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Compose services over any repository implementations (MySQL or in-memory)."""

    matcher = SimilarityMatcher(employees_repo, dimension=embedding_dim, default_threshold=match_threshold)
    employee_service = EmployeeService(employees_repo, embedding_dim=embedding_dim)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        matcher,
        reconciler=SyncReconciler(attendance_repo, employees_repo),
        verification_threshold=match_threshold,
        duplicate_window_minutes=duplicate_window_minutes,
        tz=tz,
    )
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        matcher=matcher,
        employee_service=employee_service,
        attendance_service=attendance_service,
        history_days=history_days,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    duplicate_window_minutes: int = DEFAULT_DUPLICATE_WINDOW_MINUTES,
    embedding_dim: Optional[int] = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        match_threshold=match_threshold,
        duplicate_window_minutes=duplicate_window_minutes,
        embedding_dim=embedding_dim,
        history_days=history_days,
        conn=conn,
    )
