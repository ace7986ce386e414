"""
Error taxonomy shared by services and the API layer.

Every error carries the HTTP status it maps to; the API boundary turns it
into a JSON error body without further translation.
"""

# Matched verbatim by the admin front end.
UNAUTHED_ERR_MSG = "Please login (10001)"
NOT_ADMIN_ERR_MSG = "You do not have required permission (10002)"


class HttpError(Exception):
    """Base error with an HTTP status code."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        # Set by the RPC dispatcher for log lines and error bodies
        self.procedure: str | None = None
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, str]:
        payload = {"code": self.code, "message": self.message}
        if self.procedure:
            payload["procedure"] = self.procedure
        return payload


class BadRequestError(HttpError):
    status_code = 400
    code = "BAD_REQUEST"


class UnauthorizedError(HttpError):
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(HttpError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(HttpError):
    status_code = 404
    code = "NOT_FOUND"


class MethodNotAllowedError(HttpError):
    status_code = 405
    code = "METHOD_NOT_SUPPORTED"


class InternalError(HttpError):
    status_code = 500
    code = "INTERNAL_SERVER_ERROR"


class StorageUnavailableError(InternalError):
    """The relational store is not configured or cannot be reached."""

    def __init__(self, message: str = "Database not available"):
        super().__init__(message)


class StorageNotConfiguredError(InternalError):
    """Object storage credentials or bucket are missing."""

    def __init__(self, message: str = "Storage service is not configured"):
        super().__init__(message)
