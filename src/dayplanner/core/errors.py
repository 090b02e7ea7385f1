# src/dayplanner/core/errors.py

"""
Error taxonomy shared by the server and the client.

Every error carries the HTTP status and the machine-readable code used on the
wire, so the server can translate it into a response and the client can turn
the response back into the same exception type.
"""

from __future__ import annotations

from typing import Any


class DayplannerError(Exception):
    status_code: int = 500
    code: str = "server_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class AuthenticationError(DayplannerError):
    status_code = 401
    code = "not_authenticated"
    default_message = "Not authenticated"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"
    default_message = "Invalid or expired token"


class NotFoundOrUnauthorized(DayplannerError):
    # Absent and foreign resources look the same so existence is never leaked.
    status_code = 404
    code = "not_found"
    default_message = "Task not found or unauthorized"


class ValidationFailure(DayplannerError):
    status_code = 400
    code = "validation"
    default_message = "Invalid request"


class UsernameTakenError(ValidationFailure):
    code = "username_exists"
    default_message = "Username already exists"


class NetworkOrServerFailure(DayplannerError):
    status_code = 500
    code = "server_error"
    default_message = "Network or server failure"


_BY_CODE: dict[str, type[DayplannerError]] = {
    cls.code: cls
    for cls in (
        AuthenticationError,
        InvalidCredentialsError,
        InvalidTokenError,
        NotFoundOrUnauthorized,
        ValidationFailure,
        UsernameTakenError,
        NetworkOrServerFailure,
    )
}

_BY_STATUS: dict[int, type[DayplannerError]] = {
    401: AuthenticationError,
    404: NotFoundOrUnauthorized,
    400: ValidationFailure,
    422: ValidationFailure,
}


def error_from_response(status_code: int, payload: Any) -> DayplannerError:
    """
    Rebuild a taxonomy error from an HTTP error response.

    The `code` field wins; the status code is the fallback for bodies that
    carry no code (or are not JSON at all).
    """
    message: str | None = None
    code: str | None = None
    if isinstance(payload, dict):
        raw_msg = payload.get("error")
        message = str(raw_msg) if raw_msg else None
        raw_code = payload.get("code")
        code = str(raw_code) if raw_code else None

    cls = _BY_CODE.get(code or "") or _BY_STATUS.get(int(status_code), NetworkOrServerFailure)
    return cls(message)
