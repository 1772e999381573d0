from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AttendanceMode, CheckType, SyncStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in or check-out.

    `timestamp` and `synced_at` are epoch milliseconds. Once synced only
    `sync_status` and `location` may change.
    """

    id: str
    employee_id: str
    check_type: CheckType
    timestamp: int
    device_id: Optional[str]
    location: Optional[str] = None
    sync_status: SyncStatus = SyncStatus.SYNCED
    mode: AttendanceMode = AttendanceMode.ONLINE
    confidence: float = 1.0
    employee_name: Optional[str] = None
    synced_at: Optional[int] = None


@dataclass(frozen=True)
class RejectedRecord:
    id: Optional[str]
    reason: str


@dataclass
class SyncResult:
    """Per-record outcome of a sync batch, in input order."""

    accepted: list[str] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.rejected)


@dataclass(frozen=True)
class DailySummaryRow:
    """Read-model for the daily summary report."""

    employee_id: str
    employee_code: str
    name: str
    department: str
    first_check_in: Optional[int]
    last_check_out: Optional[int]

    @property
    def is_present(self) -> bool:
        return self.first_check_in is not None

    @property
    def working_hours(self) -> Optional[float]:
        if self.first_check_in is None or self.last_check_out is None:
            return None
        return round((self.last_check_out - self.first_check_in) / 3_600_000, 2)


@dataclass(frozen=True)
class DailySummary:
    date: str
    rows: list[DailySummaryRow]

    @property
    def present(self) -> int:
        return sum(1 for r in self.rows if r.is_present)

    @property
    def absent(self) -> int:
        return len(self.rows) - self.present


@dataclass(frozen=True)
class MonthlyStats:
    employee_id: str
    year: int
    month: int
    days_present: int
    total_days: int

    @property
    def attendance_percentage(self) -> float:
        if not self.total_days:
            return 0.0
        return round(self.days_present / self.total_days * 100, 2)
