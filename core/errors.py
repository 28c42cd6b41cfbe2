"""
Error taxonomy for forum operations.

Single-source tools turn these into "Error: ..." replies at the tool
boundary; the fan-out aggregator swallows them per branch.
"""

__all__ = [
    "ForumError",
    "QueryValidationError",
    "ForumTransportError",
    "ForumTimeoutError",
    "ForumPayloadError",
]


class ForumError(Exception):
    """Base class for every failure surfaced by the forum tools."""

    user_message = "An unexpected error occurred"

    def describe(self) -> str:
        detail = str(self)
        if detail:
            return f"{self.user_message}. {detail}"
        return f"{self.user_message}."


class QueryValidationError(ForumError):
    """Rejected input, raised before any network call."""

    user_message = "Invalid input"

    def describe(self) -> str:
        return str(self) or f"{self.user_message}."


class ForumTransportError(ForumError):
    """DNS, connection or non-2xx HTTP status failure."""

    user_message = "Failed to connect to the forum"

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ForumTimeoutError(ForumError):
    """The request did not complete within the per-call timeout."""

    user_message = "Request timed out"

    def describe(self) -> str:
        return f"{self.user_message}."


class ForumPayloadError(ForumError):
    """The response body was not valid JSON or lacked expected fields."""

    user_message = "Failed to parse forum response"
