# costtrack/errors.py
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    '''
    Structured classification of failures surfaced to API callers.

    VALIDATION_ERROR: request body is malformed or a field violates its constraints.
    NOT_FOUND: the id in the request path does not resolve.
    AUTHENTICATION_REQUIRED: no valid session, or bad credentials.
    PERMISSION_DENIED: the account exists but may not sign in (deactivated).
    INTEGRITY_ERROR: a foreign key / uniqueness rule would be broken.
    STATE_CONFLICT: the record is not in a state that allows the operation.
    TIMEOUT_ERROR: the database did not answer in time; safe to retry.
    SYSTEM_ERROR: anything else. Details are logged, never returned.
    '''
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTEGRITY_ERROR = "INTEGRITY_ERROR"
    STATE_CONFLICT = "STATE_CONFLICT"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class CostTrackError(Exception):
    """Base class for errors raised by the service layer."""

    error_type = ErrorType.SYSTEM_ERROR
    status_code = 500
    retryable = False

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "message": self.message,
            "errorType": self.error_type.value,
        }
        if self.field:
            body["errors"] = [{"field": self.field, "message": self.message}]
        if self.retryable:
            body["retryable"] = True
        return body


class InputError(CostTrackError, ValueError):
    error_type = ErrorType.VALIDATION_ERROR
    status_code = 422


class MalformedRequestError(InputError):
    status_code = 400


class NotFoundError(CostTrackError, LookupError):
    error_type = ErrorType.NOT_FOUND
    status_code = 404


class AuthenticationError(CostTrackError):
    error_type = ErrorType.AUTHENTICATION_REQUIRED
    status_code = 401


class AccountDisabledError(CostTrackError, PermissionError):
    error_type = ErrorType.PERMISSION_DENIED
    status_code = 403


class IntegrityViolation(CostTrackError):
    error_type = ErrorType.INTEGRITY_ERROR
    status_code = 409


class StateConflictError(CostTrackError):
    error_type = ErrorType.STATE_CONFLICT
    status_code = 409


class StoreTimeoutError(CostTrackError):
    error_type = ErrorType.TIMEOUT_ERROR
    status_code = 503
    retryable = True
