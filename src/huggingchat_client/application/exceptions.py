from __future__ import annotations


class ChatError(Exception):
    """Base client error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NetworkError(ChatError):
    pass


class NotAuthenticatedError(ChatError):
    def __init__(self, detail: str = "Not authenticated. Please log in again.") -> None:
        super().__init__(detail)


class ForbiddenError(ChatError):
    pass


class NotFoundError(ChatError):
    pass


class RateLimitedError(ChatError):
    def __init__(self, detail: str = "Rate limited. Please try again later.") -> None:
        super().__init__(detail)


class ServerError(ChatError):
    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(detail or f"Server error ({status_code})")


class InvalidResponseError(ChatError):
    pass


class DecodingError(ChatError):
    pass


class ValidationError(ChatError):
    pass


class ConflictError(ChatError):
    pass


class StreamError(ChatError):
    """The server reported an error inside the message stream."""


class IncompleteStreamError(StreamError):
    pass


class StreamCancelledError(StreamError):
    pass
