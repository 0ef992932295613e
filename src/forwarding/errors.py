"""Error taxonomy for the forwarding confirmation workflow.

Every failure the orchestrator can report is a ForwardingError subclass.
The orchestrator catches them and turns them into a failed
ForwardingResult; they never reach the caller.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    INVALID_URL_FORMAT = "INVALID_URL_FORMAT"
    INVALID_REQUEST_FORMAT = "INVALID_REQUEST_FORMAT"
    URL_NOT_FOUND = "URL_NOT_FOUND"
    BROWSER_LAUNCH_FAILED = "BROWSER_LAUNCH_FAILED"
    NAVIGATION_FAILED = "NAVIGATION_FAILED"
    BUTTON_NOT_FOUND = "BUTTON_NOT_FOUND"
    CONFIRMATION_FAILED = "CONFIRMATION_FAILED"
    UNKNOWN = "UNKNOWN"


UNKNOWN_ERROR_MESSAGE = "Internal error during email forwarding process"


class ForwardingError(Exception):
    """Base error for forwarding operations"""

    code = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str = UNKNOWN_ERROR_MESSAGE,
        email: Optional[str] = None,
        url: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.email = email
        self.url = url


class InvalidUrlFormat(ForwardingError):
    code = ErrorCode.INVALID_URL_FORMAT

    def __init__(self, email: Optional[str] = None, url: Optional[str] = None):
        super().__init__("Invalid Gmail forwarding URL format", email=email, url=url)


class InvalidRequestFormat(ForwardingError):
    code = ErrorCode.INVALID_REQUEST_FORMAT

    def __init__(self, email: Optional[str] = None):
        super().__init__("Invalid forwarding request format", email=email)


class UrlNotFound(ForwardingError):
    code = ErrorCode.URL_NOT_FOUND

    def __init__(self, email: Optional[str] = None):
        super().__init__("No confirmation URL found in email body", email=email)


class BrowserLaunchFailed(ForwardingError):
    code = ErrorCode.BROWSER_LAUNCH_FAILED

    def __init__(self, attempts: int):
        super().__init__(f"Failed to launch browser after {attempts} attempts")
        self.attempts = attempts


class NavigationFailed(ForwardingError):
    code = ErrorCode.NAVIGATION_FAILED

    def __init__(self, url: str, attempts: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Failed to navigate to confirmation URL after {attempts} attempts",
            url=url
        )
        self.attempts = attempts
        self.cause = cause


class ButtonNotFound(ForwardingError):
    code = ErrorCode.BUTTON_NOT_FOUND

    def __init__(self, url: Optional[str] = None):
        super().__init__("No confirmation button found", url=url)


class ConfirmationFailed(ForwardingError):
    code = ErrorCode.CONFIRMATION_FAILED

    def __init__(self, url: Optional[str] = None):
        super().__init__("Confirmation failed - page did not update as expected", url=url)
