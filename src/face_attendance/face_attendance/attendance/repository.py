from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import CheckType
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    """The attendance ledger. Only this repository writes attendance events."""

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def find_latest_since(self, *, employee_id: str, check_type: CheckType, after: int) -> Optional[AttendanceEvent]:
        """Most recent event for (employee, check type) with timestamp strictly greater than `after`."""

        raise NotImplementedError

    def insert(self, event: AttendanceEvent) -> None:
        raise NotImplementedError

    def mark_synced(self, event_id: str, *, location: Optional[str], synced_at: int) -> bool:
        """Set sync_status=SYNCED and backfill location (kept when None)."""

        raise NotImplementedError

    def list_for_employee(self, *, employee_id: str, start: int, end: int) -> Sequence[AttendanceEvent]:
        """Events with start <= timestamp <= end, newest first."""

        raise NotImplementedError

    def list_between(self, *, start: int, end: int) -> Sequence[AttendanceEvent]:
        """All events with start <= timestamp <= end, oldest first."""

        raise NotImplementedError
