"""
Typed failures for the suggestion pipeline and the backend store.

Every suggestion failure carries the HTTP status and the fixed message that is
allowed to leave the process. Internal details stay on the exception instance
for logging only.
"""
from __future__ import annotations

from typing import Optional, Union


class SuggestionError(Exception):
    status_code: int = 500
    public_message: str = "Failed to get suggestions"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class InvalidInput(SuggestionError):
    status_code = 400
    public_message = "Please provide at least one ingredient"


class Misconfigured(SuggestionError):
    status_code = 500
    public_message = "Suggestion service is not configured"


class RateLimited(SuggestionError):
    status_code = 429
    public_message = "Rate limit exceeded. Please try again later."


class QuotaExceeded(SuggestionError):
    status_code = 402
    public_message = "Usage limit reached. Please add credits."


class UpstreamError(SuggestionError):
    status_code = 500
    public_message = "Recipe suggestion provider returned an error"

    def __init__(self, upstream_status: Optional[int] = None, detail: Optional[str] = None) -> None:
        super().__init__(detail or f"AI gateway error: {upstream_status}")
        self.upstream_status = upstream_status


class UpstreamUnreachable(SuggestionError):
    status_code = 500
    public_message = "Recipe suggestion provider is unreachable"


class UpstreamTimeout(SuggestionError):
    status_code = 500
    public_message = "Recipe suggestion provider timed out"


class MalformedSuggestion(SuggestionError):
    status_code = 500
    public_message = "Failed to parse recipe suggestions"

    def __init__(self, raw_text: str = "", detail: Optional[str] = None) -> None:
        super().__init__(detail)
        self.raw_text = raw_text


class StoreError(Exception):
    """Raised when the backend store rejects a request."""

    def __init__(self, code: Union[int, str], message: str) -> None:
        super().__init__(f"store error {code}: {message}")
        self.code = code
        self.message = message


class NotAuthenticated(Exception):
    def __init__(self, message: str = "Must be logged in") -> None:
        super().__init__(message)


class NotAuthorized(Exception):
    def __init__(self, message: str = "Admin role required") -> None:
        super().__init__(message)
