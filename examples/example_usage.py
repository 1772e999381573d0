"""Example: drive the service layer without Flask.

Controllers stay thin; matching, recording and sync live in services.
"""

import importlib

from config import get_settings_module

from src.face_attendance.face_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, match_threshold=settings.MATCH_THRESHOLD)

    match = container.matcher.match([0.12, 0.98, 0.05])
    print("match:", match)

    result = container.attendance_service.sync(
        [{"id": "offline-0001", "employeeId": match.employee_id if match else "unknown", "checkType": "IN", "timestamp": 1700000000000}]
    )
    print("accepted:", result.accepted, "rejected:", result.rejected)


if __name__ == "__main__":
    main()
