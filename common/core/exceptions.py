from typing import Optional


class AppException(Exception):
    """Base application exception."""

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class AuthenticationError(AppException):
    """Missing or invalid session."""

    status_code = 401


class NotFoundError(AppException):
    """Resource not found exception."""

    status_code = 404


class ConfigurationError(AppException):
    """Billing catalog or server configuration is malformed."""

    status_code = 500


class UpstreamError(AppException):
    """A billing or auth collaborator call failed."""

    status_code = 500

    def __init__(self, message: str = "", upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
