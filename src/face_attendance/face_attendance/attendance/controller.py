from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.responses import api_errors
from ..common.timestamps import parse_iso_date
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceEvent
from .schemas import RecordRequest


def event_json(ev: AttendanceEvent) -> dict:
    return {
        "id": ev.id,
        "employeeId": ev.employee_id,
        "employeeName": ev.employee_name,
        "checkType": ev.check_type.value,
        "timestamp": ev.timestamp,
        "deviceId": ev.device_id,
        "location": ev.location,
        "syncStatus": ev.sync_status.value,
        "mode": ev.mode.value,
        "confidence": ev.confidence,
        "syncedAt": ev.synced_at,
    }


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/record", methods=["POST"], endpoint="attendance_record")
    @api_errors
    def record():
        req = RecordRequest.from_payload(request.get_json(silent=True))
        event = container.attendance_service.record(
            employee_id=req.employee_id,
            check_type=req.check_type,
            device_id=req.device_id,
            timestamp=req.timestamp,
            location=req.location,
            embedding=req.embedding,
            mode=req.mode,
        )
        body = event_json(event)
        body["faceVerified"] = req.embedding is not None
        body["message"] = f"Successfully recorded {event.check_type.value} for {event.employee_name}"
        return jsonify(body), 201

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="attendance_sync")
    @api_errors
    def sync():
        records = request.get_json(silent=True)
        if not isinstance(records, list) or not records:
            raise ValidationError("Invalid or empty records array")

        result = container.attendance_service.sync(records)
        return jsonify(
            {
                "success": len(result.accepted),
                "failed": len(result.rejected),
                "successfulRecords": result.accepted,
                "failedRecords": [{"id": r.id, "error": r.reason} for r in result.rejected],
                "message": f"Synced {len(result.accepted)} of {len(records)} records",
            }
        ), 200

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @api_errors
    def history():
        employee_id = request.args.get("employeeId")
        if not employee_id:
            raise ValidationError("Employee ID is required")

        start_raw = request.args.get("startDate")
        end_raw = request.args.get("endDate")
        events = container.attendance_service.history(
            employee_id,
            days=_int_arg("days", container.history_days or DEFAULT_HISTORY_DAYS),
            start_date=parse_iso_date(start_raw) if start_raw and end_raw else None,
            end_date=parse_iso_date(end_raw) if start_raw and end_raw else None,
        )
        return jsonify([event_json(ev) for ev in events]), 200

    @app.route("/api/attendance/daily-summary", methods=["GET"], endpoint="attendance_daily_summary")
    @api_errors
    def daily_summary():
        raw = request.args.get("date")
        summary = container.attendance_service.daily_summary(parse_iso_date(raw) if raw else date.today())
        employees = [
            {
                "employeeId": r.employee_id,
                "employeeCode": r.employee_code,
                "name": r.name,
                "department": r.department,
                "firstCheckIn": r.first_check_in,
                "lastCheckOut": r.last_check_out,
                "status": "Present" if r.is_present else "Absent",
                "workingHours": r.working_hours,
            }
            for r in summary.rows
        ]
        return jsonify(
            {
                "date": summary.date,
                "totalEmployees": len(employees),
                "present": summary.present,
                "absent": summary.absent,
                "employees": employees,
            }
        ), 200

    @app.route("/api/attendance/stats/<employee_id>", methods=["GET"], endpoint="attendance_stats")
    @api_errors
    def stats(employee_id: str):
        today = date.today()
        result = container.attendance_service.monthly_stats(
            employee_id,
            year=_int_arg("year", today.year),
            month=_int_arg("month", today.month),
        )
        return jsonify(
            {
                "employeeId": result.employee_id,
                "month": result.month,
                "year": result.year,
                "daysPresent": result.days_present,
                "totalWorkingDays": result.total_days,
                "attendancePercentage": result.attendance_percentage,
            }
        ), 200
