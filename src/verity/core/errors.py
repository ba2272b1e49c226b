"""Error hierarchy for the verification service.

Every error carries a machine-readable code and the HTTP status the global
handler answers with. Modules raise these; routes let them propagate.
"""

from fastapi import status


class VerityError(Exception):
    """Base exception for all Verity errors."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class InvalidInputError(VerityError):
    """Caller-supplied data is malformed."""

    code = "INVALID_INPUT"
    http_status = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(VerityError):
    """No valid session accompanies the request."""

    code = "UNAUTHENTICATED"
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class PermissionDeniedError(VerityError):
    """Valid session, insufficient privilege."""

    code = "PERMISSION_DENIED"
    http_status = status.HTTP_403_FORBIDDEN


class NotFoundError(VerityError):
    """Referenced record does not exist."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(VerityError):
    """Uniqueness or state-machine violation."""

    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT
