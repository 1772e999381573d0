from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is malformed or violates domain rules."""

    code = "InvalidInput"


class EmployeeNotFoundError(DomainError):
    """Raised when an employee id does not resolve (or is inactive where required)."""

    code = "EmployeeNotFound"


class EmployeeCodeConflictError(DomainError):
    """Raised when an employee code is already taken by an active employee."""

    code = "EmployeeCodeConflict"


class FaceVerificationFailedError(DomainError):
    """Raised when no stored embedding matches above the threshold."""

    code = "FaceVerificationFailed"


class FaceMismatchError(DomainError):
    """Raised when the face matches a different employee than the one claimed."""

    code = "FaceMismatch"

    def __init__(
        self,
        message: str,
        *,
        detected_employee_id: str,
        detected_employee_name: Optional[str] = None,
        similarity: Optional[float] = None,
    ):
        super().__init__(message)
        self.detected_employee_id = detected_employee_id
        self.detected_employee_name = detected_employee_name
        self.similarity = similarity


class DuplicateSubmissionError(DomainError):
    """Raised when the same check type is recorded again inside the duplicate window."""

    code = "DuplicateSubmission"


class StoreUnavailableError(DomainError):
    """Raised when the underlying store fails. Callers must not expose the cause."""

    code = "StoreUnavailable"
