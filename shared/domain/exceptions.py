"""
Domain Exceptions

Business-focused errors raised by domain and application code and
translated into HTTP responses by ``shared.api.exception_handler``.
Every error carries an HTTP status, a stable machine-readable code
and a human readable message.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for all domain-specific errors."""

    status_code = 500
    default_code = 'internal_error'

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'code': self.code, 'message': self.message}
        if self.details:
            data['details'] = self.details
        return data


class BadRequestError(DomainError):
    """Malformed or missing input, invalid interval."""

    status_code = 400
    default_code = 'bad_request'


class ForbiddenError(DomainError):
    """Authenticated, but role or ownership does not permit the action."""

    status_code = 403
    default_code = 'forbidden'


class NotFoundError(DomainError):
    """A room, booking or user id does not resolve."""

    status_code = 404
    default_code = 'not_found'


class ConflictError(DomainError):
    """
    The mutation collides with existing state.

    ``extra`` is merged into the top level of the error body, e.g. the
    colliding booking so clients can suggest another slot.
    """

    status_code = 409
    default_code = 'conflict'

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(self.extra)
        return data


class InternalError(DomainError):
    """Unexpected persistence or coordination failure."""

    status_code = 500
    default_code = 'internal_error'

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.cause = cause
