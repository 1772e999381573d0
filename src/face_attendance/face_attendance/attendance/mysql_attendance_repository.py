from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceMode, CheckType, SyncStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent
from .repository import AttendanceRepository

_COLUMNS = (
    "id, employee_id, employee_name, check_type, timestamp_ms, device_id, "
    "location, sync_status, mode, confidence, synced_at"
)


def _to_event(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        check_type=CheckType(r["check_type"]),
        timestamp=int(r["timestamp_ms"]),
        device_id=r.get("device_id"),
        location=r.get("location"),
        sync_status=SyncStatus(r["sync_status"]),
        mode=AttendanceMode(r["mode"]),
        confidence=float(r["confidence"]),
        employee_name=r.get("employee_name"),
        synced_at=int(r["synced_at"]) if r.get("synced_at") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (event_id,))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def find_latest_since(self, *, employee_id: str, check_type: CheckType, after: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND check_type=%s AND timestamp_ms > %s
                ORDER BY timestamp_ms DESC
                LIMIT 1
                """,
                (employee_id, check_type.value, int(after)),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def insert(self, event: AttendanceEvent) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    id, employee_id, employee_name, check_type, timestamp_ms, device_id,
                    location, sync_status, mode, confidence, synced_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.id,
                    event.employee_id,
                    event.employee_name,
                    event.check_type.value,
                    int(event.timestamp),
                    event.device_id,
                    event.location,
                    event.sync_status.value,
                    event.mode.value,
                    float(event.confidence),
                    event.synced_at,
                ),
            )

    def mark_synced(self, event_id: str, *, location: Optional[str], synced_at: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET sync_status=%s,
                    location=COALESCE(%s, location),
                    synced_at=COALESCE(synced_at, %s)
                WHERE id=%s
                """,
                (SyncStatus.SYNCED.value, location, synced_at, event_id),
            )
            # rowcount is 0 when nothing changed, so existence is checked separately.
            cur.execute("SELECT 1 AS found FROM attendance WHERE id=%s", (event_id,))
            return fetchone(cur) is not None

    def list_for_employee(self, *, employee_id: str, start: int, end: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND timestamp_ms BETWEEN %s AND %s
                ORDER BY timestamp_ms DESC
                """,
                (employee_id, int(start), int(end)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def list_between(self, *, start: int, end: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE timestamp_ms BETWEEN %s AND %s
                ORDER BY timestamp_ms ASC
                """,
                (int(start), int(end)),
            )
            return [_to_event(r) for r in fetchall(cur)]
