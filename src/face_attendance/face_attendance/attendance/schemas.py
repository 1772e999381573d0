"""Validated request bodies for the attendance endpoints.

Payloads arrive as loosely-typed JSON; they are checked here and turned into
explicit dataclasses so malformed input fails early with ValidationError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.timestamps import to_epoch_millis
from ..common.validators import (
    optional_str,
    require_embedding,
    require_enum,
    require_max_length,
    require_non_empty,
    require_unit_interval,
)
from ..core.constants import MAX_DEVICE_ID_LENGTH, MAX_EVENT_ID_LENGTH
from ..core.enums import AttendanceMode, CheckType
from ..core.exceptions import ValidationError


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _location(value: Any) -> Optional[str]:
    # Location is opaque; structured values are stored as their JSON text.
    if value is None or isinstance(value, str):
        return value or None
    if isinstance(value, (Mapping, list)):
        return json.dumps(value, separators=(",", ":"))
    raise ValidationError("location must be a string or a JSON object")


@dataclass(frozen=True)
class RecordRequest:
    employee_id: str
    check_type: CheckType
    device_id: str
    timestamp: Optional[int] = None
    location: Optional[str] = None
    mode: AttendanceMode = AttendanceMode.ONLINE
    embedding: Optional[tuple[float, ...]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RecordRequest":
        data = _require_mapping(payload)
        if not data.get("employeeId") or not data.get("checkType") or not data.get("deviceId"):
            raise ValidationError("Missing required fields")

        timestamp = data.get("timestamp")
        embedding = data.get("embedding")
        return cls(
            employee_id=require_non_empty(data["employeeId"], "employeeId"),
            check_type=require_enum(data["checkType"], CheckType, "check type"),
            device_id=require_max_length(require_non_empty(data["deviceId"], "deviceId"), "deviceId", MAX_DEVICE_ID_LENGTH),
            timestamp=to_epoch_millis(timestamp) if timestamp not in (None, "") else None,
            location=_location(data.get("location")),
            mode=require_enum(data.get("mode") or AttendanceMode.ONLINE.value, AttendanceMode, "mode"),
            embedding=require_embedding(embedding) if embedding is not None else None,
        )


@dataclass(frozen=True)
class ClientAttendanceRecord:
    """One offline-generated record submitted through sync."""

    id: str
    employee_id: str
    check_type: CheckType
    timestamp: int
    device_id: Optional[str] = None
    location: Optional[str] = None
    confidence: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ClientAttendanceRecord":
        data = _require_mapping(payload)
        if data.get("timestamp") in (None, ""):
            raise ValidationError("timestamp is required")

        confidence = data.get("confidence")
        return cls(
            id=require_max_length(require_non_empty(data.get("id"), "id"), "id", MAX_EVENT_ID_LENGTH),
            employee_id=require_non_empty(data.get("employeeId"), "employeeId"),
            check_type=require_enum(data.get("checkType"), CheckType, "check type"),
            timestamp=to_epoch_millis(data["timestamp"]),
            device_id=require_max_length(optional_str(data.get("deviceId"), "deviceId"), "deviceId", MAX_DEVICE_ID_LENGTH),
            location=_location(data.get("location")),
            confidence=require_unit_interval(confidence, "confidence") if confidence is not None else None,
        )


def raw_record_id(payload: Any) -> Optional[str]:
    """Best-effort id of a record that failed validation, for reporting."""

    if isinstance(payload, Mapping):
        value = payload.get("id")
        if value is not None:
            return str(value)
    return None
