from __future__ import annotations

from enum import Enum


class CheckType(str, Enum):
    """Direction of an attendance event."""

    IN = "IN"
    OUT = "OUT"


class SyncStatus(str, Enum):
    """Whether the server has acknowledged an event."""

    LOCAL = "LOCAL"
    SYNCED = "SYNCED"


class AttendanceMode(str, Enum):
    """How the event reached the server: live request or offline batch."""

    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
