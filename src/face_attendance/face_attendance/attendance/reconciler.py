from __future__ import annotations

import logging
from typing import Any, Sequence, Union

from ..common.timestamps import now_millis
from ..core.constants import SERVER_CONFIDENCE
from ..core.enums import AttendanceMode, SyncStatus
from ..core.exceptions import DomainError, EmployeeNotFoundError
from ..employees.repository import EmployeeRepository
from .model import AttendanceEvent, RejectedRecord, SyncResult
from .repository import AttendanceRepository
from .schemas import ClientAttendanceRecord, raw_record_id

logger = logging.getLogger(__name__)


class SyncReconciler:
    """Merge offline-generated attendance records into the ledger.

    Records are handled one by one and never as a single transaction: each
    yields exactly one accepted id or one rejection, in input order.
    Re-submitting a known id only backfills location and sync status, so the
    client may safely retry a whole batch.

    No duplicate-window check happens here. Offline records are taken as the
    device recorded them, even where the live path would have refused one.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def sync(self, records: Sequence[Union[ClientAttendanceRecord, Any]]) -> SyncResult:
        result = SyncResult()
        for item in records:
            record_id = item.id if isinstance(item, ClientAttendanceRecord) else raw_record_id(item)
            try:
                record = item if isinstance(item, ClientAttendanceRecord) else ClientAttendanceRecord.from_payload(item)
                self._apply(record)
            except DomainError as e:
                logger.warning("Sync rejected record %s: %s (%s)", record_id, e.code, e)
                result.rejected.append(RejectedRecord(id=record_id, reason=e.code))
            else:
                result.accepted.append(record.id)

        logger.info("Synced %d of %d records", len(result.accepted), result.total)
        return result

    def _apply(self, record: ClientAttendanceRecord) -> None:
        now = now_millis()

        if self._attendance.get_by_id(record.id) is not None:
            # Known id: immutable fields stay as first recorded.
            self._attendance.mark_synced(record.id, location=record.location, synced_at=now)
            return

        # Deactivated employees still resolve; the record may predate deactivation.
        employee = self._employees.get_by_id(record.employee_id)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")

        self._attendance.insert(
            AttendanceEvent(
                id=record.id,
                employee_id=record.employee_id,
                check_type=record.check_type,
                timestamp=record.timestamp,
                device_id=record.device_id,
                location=record.location,
                sync_status=SyncStatus.SYNCED,
                mode=AttendanceMode.OFFLINE,
                confidence=record.confidence if record.confidence is not None else SERVER_CONFIDENCE,
                employee_name=employee.name,
                synced_at=now,
            )
        )
