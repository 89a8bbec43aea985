from fastapi import status


class PortalError(Exception):
    """Base error of the portal. Rendered as {"message": ...} with its status code."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class UnauthenticatedError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ForbiddenError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid request data"):
        super().__init__(message)


class UpstreamUnavailableError(PortalError):
    """Credentials for an external system are not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class UpstreamError(PortalError):
    """An external system answered with a non-2xx status or could not be reached."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, upstream_status: int | None = None, body: str | None = None):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(message)
