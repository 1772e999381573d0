from __future__ import annotations

import logging
import uuid
from datetime import date, tzinfo
from typing import Optional, Sequence

from ..common.timestamps import (
    day_bounds_millis,
    days_in_month,
    millis_to_date,
    month_bounds_millis,
    now_millis,
    range_bounds_millis,
    to_epoch_millis,
)
from ..common.validators import require_enum
from ..core.constants import (
    DEFAULT_DUPLICATE_WINDOW_MINUTES,
    DEFAULT_HISTORY_DAYS,
    MILLIS_PER_DAY,
    MILLIS_PER_MINUTE,
    SERVER_CONFIDENCE,
)
from ..core.enums import AttendanceMode, CheckType, SyncStatus
from ..core.exceptions import (
    DuplicateSubmissionError,
    EmployeeNotFoundError,
    FaceMismatchError,
    FaceVerificationFailedError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..matching.service import SimilarityMatcher
from .model import AttendanceEvent, DailySummary, DailySummaryRow, MonthlyStats, SyncResult
from .reconciler import SyncReconciler
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases around the attendance ledger.

    `record` is the live path (optional face verification, duplicate window);
    `sync` is the offline batch path and delegates to SyncReconciler.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        matcher: SimilarityMatcher,
        *,
        reconciler: SyncReconciler | None = None,
        verification_threshold: float | None = None,
        duplicate_window_minutes: int = DEFAULT_DUPLICATE_WINDOW_MINUTES,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._matcher = matcher
        self._reconciler = reconciler or SyncReconciler(attendance, employees)
        self._threshold = matcher.default_threshold if verification_threshold is None else float(verification_threshold)
        self._window_ms = int(duplicate_window_minutes) * MILLIS_PER_MINUTE
        self._tz = tz

    def record(
        self,
        *,
        employee_id: str,
        check_type: CheckType | str,
        device_id: str,
        timestamp: int | str | None = None,
        location: Optional[str] = None,
        embedding=None,
        mode: AttendanceMode | str = AttendanceMode.ONLINE,
    ) -> AttendanceEvent:
        check_type = require_enum(check_type, CheckType, "check type")
        mode = require_enum(mode, AttendanceMode, "mode")

        if embedding is not None:
            self._verify_face(employee_id, embedding)

        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise EmployeeNotFoundError("Employee not found")

        effective_ts = to_epoch_millis(timestamp) if timestamp is not None else now_millis()

        # Check-then-insert: concurrent requests for the same key can both pass.
        duplicate = self._attendance.find_latest_since(
            employee_id=employee_id,
            check_type=check_type,
            after=effective_ts - self._window_ms,
        )
        if duplicate:
            logger.info(
                "Duplicate %s for employee %s at %d (previous %s at %d)",
                check_type.value, employee_id, effective_ts, duplicate.id, duplicate.timestamp,
            )
            raise DuplicateSubmissionError(
                "Duplicate check-in/out detected. Please wait "
                f"{self._window_ms // MILLIS_PER_MINUTE} minutes before trying again."
            )

        event = AttendanceEvent(
            id=str(uuid.uuid4()),
            employee_id=employee_id,
            check_type=check_type,
            timestamp=effective_ts,
            device_id=device_id,
            location=location,
            sync_status=SyncStatus.SYNCED,
            mode=mode,
            confidence=SERVER_CONFIDENCE,
            employee_name=employee.name,
            synced_at=now_millis(),
        )
        self._attendance.insert(event)
        return event

    def _verify_face(self, employee_id: str, embedding) -> None:
        match = self._matcher.match(embedding, self._threshold)
        if match is None:
            raise FaceVerificationFailedError("Face verification failed. No matching employee found.")

        if match.employee_id != employee_id:
            detected = self._employees.get_by_id(match.employee_id)
            logger.warning("Face of %s presented for employee %s", match.employee_id, employee_id)
            raise FaceMismatchError(
                "Face verification failed. Face does not match the employee ID.",
                detected_employee_id=match.employee_id,
                detected_employee_name=detected.name if detected else None,
                similarity=match.similarity,
            )
        logger.info("Face verified for employee %s with similarity %.4f", employee_id, match.similarity)

    def sync(self, records: Sequence) -> SyncResult:
        return self._reconciler.sync(records)

    def history(
        self,
        employee_id: str,
        *,
        days: int = DEFAULT_HISTORY_DAYS,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: int | None = None,
    ) -> Sequence[AttendanceEvent]:
        """Events newest first: inside [start_date, end_date] when both are given, else the last `days`."""

        if start_date and end_date:
            start, end = range_bounds_millis(start_date, end_date, self._tz)
        else:
            if int(days) <= 0:
                raise ValidationError("days must be positive")
            end = now if now is not None else now_millis()
            start = end - int(days) * MILLIS_PER_DAY
        return self._attendance.list_for_employee(employee_id=employee_id, start=start, end=end)

    def daily_summary(self, day: date) -> DailySummary:
        start, end = day_bounds_millis(day, self._tz)

        first_in: dict[str, int] = {}
        last_out: dict[str, int] = {}
        for ev in self._attendance.list_between(start=start, end=end):
            if ev.check_type == CheckType.IN:
                first_in[ev.employee_id] = min(first_in.get(ev.employee_id, ev.timestamp), ev.timestamp)
            else:
                last_out[ev.employee_id] = max(last_out.get(ev.employee_id, ev.timestamp), ev.timestamp)

        rows = [
            DailySummaryRow(
                employee_id=e.employee_id,
                employee_code=e.employee_code,
                name=e.name,
                department=e.department,
                first_check_in=first_in.get(e.employee_id),
                last_check_out=last_out.get(e.employee_id),
            )
            for e in self._employees.list_employees(is_active=True)
        ]
        return DailySummary(date=day.isoformat(), rows=rows)

    def monthly_stats(self, employee_id: str, *, year: int, month: int) -> MonthlyStats:
        start, end = month_bounds_millis(year, month, self._tz)
        events = self._attendance.list_for_employee(employee_id=employee_id, start=start, end=end)
        present = {millis_to_date(ev.timestamp, self._tz) for ev in events}
        return MonthlyStats(
            employee_id=employee_id,
            year=year,
            month=month,
            days_present=len(present),
            total_days=days_in_month(year, month),
        )
