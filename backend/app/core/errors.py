"""
Centralized error handling for service/API failures.
Domain exceptions raised by services, plus a reusable helper so routes stay thin
and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


# ---------------------------------------------------------------------------
# Domain exceptions: (status_code, code) live on the class.
# Add new error types here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

class AppError(Exception):
    status_code: int = STATUS_INTERNAL_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ItemNotFoundError(AppError):
    status_code = STATUS_NOT_FOUND
    code = "ITEM_NOT_FOUND"
    default_message = "Item not found"


class ItemArchivedError(AppError):
    status_code = STATUS_BAD_REQUEST
    code = "ITEM_ARCHIVED"
    default_message = "Item already archived"


class EmptyUpdateError(AppError):
    status_code = STATUS_BAD_REQUEST
    code = "EMPTY_UPDATE"
    default_message = "At least one field must be updated"


class AlertNotFoundError(AppError):
    status_code = STATUS_NOT_FOUND
    code = "ALERT_NOT_FOUND"
    default_message = "Alert not found"


class UnauthorizedError(AppError):
    status_code = STATUS_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Unknown or missing user"


class NoHouseholdError(AppError):
    status_code = STATUS_FORBIDDEN
    code = "NO_HOUSEHOLD"
    default_message = "User is not a member of any household"


class OwnerRequiredError(AppError):
    status_code = STATUS_FORBIDDEN
    code = "OWNER_REQUIRED"
    default_message = "Owner access required"


class AlreadyInHouseholdError(AppError):
    status_code = STATUS_BAD_REQUEST
    code = "ALREADY_IN_HOUSEHOLD"
    default_message = "User already belongs to a household"


class InvalidInviteCodeError(AppError):
    status_code = STATUS_NOT_FOUND
    code = "INVALID_INVITE_CODE"
    default_message = "Invite code not found"


class InvalidMemberRemovalError(AppError):
    status_code = STATUS_BAD_REQUEST
    code = "INVALID_MEMBER_REMOVAL"
    default_message = "Owner cannot remove themselves"


class EmailInUseError(AppError):
    status_code = STATUS_CONFLICT
    code = "EMAIL_IN_USE"
    default_message = "Email is already registered"


def app_error_to_http(exc: Exception) -> HTTPException:
    """
    Map a service exception into an HTTPException.
    AppError subclasses carry their own status and code; anything else is a 500 with the message.
    """
    if isinstance(exc, AppError):
        return HTTPException(
            status_code=exc.status_code,
            detail={"code": exc.code, "message": exc.message},
        )
    return HTTPException(
        status_code=STATUS_INTERNAL_ERROR,
        detail={"code": AppError.code, "message": str(exc)},
    )
