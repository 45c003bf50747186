"""
Errors
Exception hierarchy shared by the API client, the workflow and the routes.
Every error knows the HTTP status it maps to and the notice the dashboard
should show for it.
"""
from typing import Any, Optional

from fastapi import status

from schooldesk.models.notice import Notice, NoticeVariant

# Structured code the school API sends for a second primary guardian
PRIMARY_GUARDIAN_EXISTS = "PRIMARY_GUARDIAN_EXISTS"


class SchoolDeskError(Exception):
    """Base class for every error rendered by the service"""

    http_status = status.HTTP_400_BAD_REQUEST
    notice_title = "Error"
    notice_variant = NoticeVariant.ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def notice(self) -> Notice:
        return Notice(
            title=self.notice_title,
            description=self.message,
            variant=self.notice_variant,
        )


class FormValidationError(SchoolDeskError):
    """Form input rejected before any request reached the school API"""

    http_status = 422
    notice_title = "Validation Error"


class PermissionDenied(SchoolDeskError):
    """The current user's role does not allow the action"""

    http_status = status.HTTP_403_FORBIDDEN
    notice_title = "Access Denied"


class TransitionNotAllowed(SchoolDeskError):
    """The record's status does not allow the requested transition"""

    http_status = status.HTTP_409_CONFLICT
    notice_title = "Action Not Available"


class ApiError(SchoolDeskError):
    """The school API answered with an error or could not be reached"""

    http_status = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint
        self.code = code
        self.details = details
        # Upstream client errors pass through; everything else is a bad gateway
        if status_code is not None and 400 <= status_code < 500:
            self.http_status = status_code


class GuardianConflict(ApiError):
    """The student already has a primary guardian; shown as a soft warning"""

    http_status = status.HTTP_409_CONFLICT
    notice_title = "Cannot Link Parent"
    notice_variant = NoticeVariant.DEFAULT

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message, status_code=status_code, endpoint=endpoint, code=PRIMARY_GUARDIAN_EXISTS)
        self.http_status = status.HTTP_409_CONFLICT
