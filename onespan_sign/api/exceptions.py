"""
OneSpan Sign Exceptions

Error types for the OneSpan Sign API client and the resource layer.

API errors are returned as values from client operations rather than
raised, so callers can inspect the summary to tell which stage failed
and the raw response to branch on its status code.
"""

from typing import Optional

import requests


class OneSpanError(Exception):
    """Base exception for all OneSpan Sign errors."""
    pass


class ConfigurationError(OneSpanError):
    """
    Raised when a resource configuration file is invalid.

    This includes YAML syntax errors, unknown resource types and
    resource blocks that are not mappings.
    """
    pass


class TokenError(OneSpanError):
    """
    Raised internally when an access token cannot be obtained.

    The client converts it into an ApiError before returning.
    """
    pass


class ApiError(OneSpanError):
    """
    A failed OneSpan Sign API call.

    Attributes:
        summary: Short description of the failing stage
        detail: Longer description, usually the pretty-printed error body
        response: Raw HTTP response when one was received
    """
    def __init__(self, summary: str, detail: str = '', response: Optional[requests.Response] = None):
        self.summary = summary
        self.detail = detail
        self.response = response
        super().__init__(summary)

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code of the raw response, if any."""
        if self.response is None:
            return None
        return self.response.status_code

    def get_error(self) -> str:
        """Render the error the way it is reported to users."""
        return f"an API error occurred: '{self.summary}'\n{self.detail}"

    def __str__(self) -> str:
        return self.get_error()

    def __repr__(self) -> str:
        return f"ApiError(summary={self.summary!r}, status_code={self.status_code!r})"


class StateChangeTimeoutError(OneSpanError):
    """The remote state did not converge before the timeout."""
    def __init__(self, message: str, last_state: str = None, timeout: float = None):
        self.last_state = last_state
        self.timeout = timeout
        super().__init__(message)


class StateChangeCancelledError(OneSpanError):
    """A convergence wait was cancelled by the caller."""
    def __init__(self, message: str, last_state: str = None):
        self.last_state = last_state
        super().__init__(message)


class UnexpectedStateError(OneSpanError):
    """The refresh function reported a state that is neither pending nor target."""
    def __init__(self, message: str, state: str = None):
        self.state = state
        super().__init__(message)
