"""Face Attendance backend package.

Organized by feature modules (employees, matching, attendance) with a thin
Flask controller layer over service/repository layers.
"""
