"""Domain-specific exceptions.

Every error that reaches a controller is one of these. Each carries a
``message`` that is safe to show to an underwriter as-is.
"""

from typing import Optional


class ConsoleError(Exception):
    """Base exception for the console"""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        # detail is what the caller (usually the server) actually said
        self.detail = message
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ConsoleError):
    """Input rejected locally, before any network call"""

    default_message = "Invalid input"


class AuthError(ConsoleError):
    """Login was refused or could not be completed"""

    default_message = "Login failed. Please check your credentials."


class HttpError(ConsoleError):
    """A backend call failed"""

    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Unauthorized(HttpError):
    """Backend answered 401 or 403; the session has been torn down"""

    default_message = "Your session has expired. Please sign in again."


class NotFound(HttpError):
    """Backend answered 404"""

    default_message = "Not found"


class ServerError(HttpError):
    """Any other non-2xx answer, or a body that cannot be understood"""

    pass


class NetworkError(HttpError):
    """No response was received"""

    default_message = "Unable to reach the server. Check your connection and try again."


class RequestTimeout(NetworkError):
    """No response within the configured timeout"""

    default_message = "The server took too long to respond. Please try again."
