from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceEvent
from src.face_attendance.face_attendance.attendance.service import AttendanceService
from src.face_attendance.face_attendance.core.enums import CheckType
from src.face_attendance.face_attendance.core.exceptions import ValidationError
from src.face_attendance.face_attendance.matching.service import SimilarityMatcher


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def _event(event_id: str, employee_id: str, check_type: CheckType, ts: int) -> AttendanceEvent:
    return AttendanceEvent(id=event_id, employee_id=employee_id, check_type=check_type, timestamp=ts, device_id="D1")


@pytest.fixture
def service(employees_repo, attendance_repo):
    for ev in [
        _event("a", "E1", CheckType.IN, _ms(2026, 3, 2, 8, 0)),
        _event("b", "E1", CheckType.IN, _ms(2026, 3, 2, 9, 0)),
        _event("c", "E1", CheckType.OUT, _ms(2026, 3, 2, 16, 0)),
        _event("d", "E1", CheckType.OUT, _ms(2026, 3, 2, 17, 30)),
        _event("e", "E2", CheckType.OUT, _ms(2026, 3, 2, 12, 0)),
        _event("f", "E1", CheckType.IN, _ms(2026, 3, 3, 8, 0)),
        _event("g", "E1", CheckType.IN, _ms(2026, 2, 28, 8, 0)),
    ]:
        attendance_repo.insert(ev)
    return AttendanceService(attendance_repo, employees_repo, SimilarityMatcher(employees_repo), tz=timezone.utc)


def test_timestamp_round_trips_exactly(attendance_repo):
    attendance_repo.insert(_event("x", "E1", CheckType.IN, 1_700_000_000_000))

    assert attendance_repo.get_by_id("x").timestamp == 1_700_000_000_000


def test_history_by_date_range_is_newest_first(service):
    events = service.history("E1", start_date=date(2026, 3, 2), end_date=date(2026, 3, 3))

    assert [e.id for e in events] == ["f", "d", "c", "b", "a"]
    assert all(isinstance(e.timestamp, int) for e in events)


def test_history_by_days(service):
    events = service.history("E1", days=1, now=_ms(2026, 3, 3, 12, 0))

    assert [e.id for e in events] == ["f", "d", "c"]


def test_history_rejects_inverted_range(service):
    with pytest.raises(ValidationError):
        service.history("E1", start_date=date(2026, 3, 3), end_date=date(2026, 3, 2))


def test_daily_summary(service):
    summary = service.daily_summary(date(2026, 3, 2))
    rows = {r.employee_id: r for r in summary.rows}

    assert summary.date == "2026-03-02"
    assert [r.name for r in summary.rows] == ["Alice", "Bob", "Carol"]
    assert rows["E1"].first_check_in == _ms(2026, 3, 2, 8, 0)
    assert rows["E1"].last_check_out == _ms(2026, 3, 2, 17, 30)
    assert rows["E1"].working_hours == 9.5
    # Only an OUT event: not counted as present.
    assert rows["E2"].is_present is False
    assert rows["E2"].working_hours is None
    assert (summary.present, summary.absent) == (1, 2)


def test_monthly_stats(service):
    stats = service.monthly_stats("E1", year=2026, month=3)

    assert stats.days_present == 2
    assert stats.total_days == 31
    assert stats.attendance_percentage == 6.45


def test_monthly_stats_rejects_bad_month(service):
    with pytest.raises(ValidationError):
        service.monthly_stats("E1", year=2026, month=13)
