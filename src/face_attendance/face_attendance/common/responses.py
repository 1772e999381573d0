from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import (
    DomainError,
    DuplicateSubmissionError,
    EmployeeCodeConflictError,
    EmployeeNotFoundError,
    FaceMismatchError,
    FaceVerificationFailedError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS = {
    ValidationError: 400,
    EmployeeNotFoundError: 404,
    FaceVerificationFailedError: 403,
    FaceMismatchError: 403,
    DuplicateSubmissionError: 409,
    EmployeeCodeConflictError: 409,
}


def internal_error():
    return jsonify({"error": "Internal server error"}), 500


def error_response(e: DomainError):
    """Map a domain error to a JSON body and HTTP status."""

    if isinstance(e, StoreUnavailableError):
        return internal_error()

    body = {"error": str(e), "code": e.code}
    if isinstance(e, (FaceVerificationFailedError, FaceMismatchError)):
        body["verificationFailed"] = True
    if isinstance(e, FaceMismatchError):
        body["detectedEmployeeId"] = e.detected_employee_id
        body["detectedEmployeeName"] = e.detected_employee_name

    status = next((code for cls, code in _STATUS.items() if isinstance(e, cls)), 400)
    return jsonify(body), status


def api_errors(view):
    """Turn domain errors into tagged JSON responses; anything else is a logged 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except StoreUnavailableError as e:
            logger.error("Store unavailable in %s: %s", view.__name__, e.__cause__ or e)
            return internal_error()
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return internal_error()

    return wrapper
