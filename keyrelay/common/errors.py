"""
Error Definitions

Defines the exceptions raised while relaying a request and how they are rendered to the caller.
"""

from fastapi.responses import PlainTextResponse


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, carrying a caller-visible message and HTTP status code.
    """

    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message returned to the caller
            code: Short machine-readable error code (used in logs)
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def to_response(self) -> PlainTextResponse:
        """
        Render as a plain-text response

        Returns:
            PlainTextResponse: Response carrying the message and status code
        """
        return PlainTextResponse(self.message, status_code=self.status_code)


class AuthenticationError(AppError):
    """
    Authentication Error

    Raised when no usable upstream credential can be resolved from the request.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "authentication_error",
    ):
        super().__init__(message=message, code=code, status_code=401)


class NoCredentialError(AuthenticationError):
    """
    Raised when an upstream that requires a key received none in either the
    dedicated key header or the Authorization header.
    """

    def __init__(self, upstream_name: str, key_header: str):
        super().__init__(
            message=f"No {upstream_name} API Key provided in {key_header} header",
            code="no_credential",
        )


def internal_error_response(exc: BaseException) -> PlainTextResponse:
    """Render an unexpected exception as a 500 plain-text response."""
    detail = str(exc) or type(exc).__name__
    return PlainTextResponse(f"Internal Server Error: {detail}", status_code=500)
