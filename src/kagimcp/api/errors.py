"""Error types raised by the Kagi API client."""

from __future__ import annotations


class KagiError(Exception):
    """Base error for all upstream API failures."""


class KagiAPIError(KagiError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, status: int, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        super().__init__(f"Kagi API error: HTTP {status}" + (f": {detail}" if detail else ""))


class AuthenticationError(KagiAPIError):
    """The API key was missing, invalid or not allowed to use the endpoint."""


class QuotaExceededError(KagiAPIError):
    """Rate limit hit or the account has insufficient API credit."""


class InvalidTargetError(KagiAPIError):
    """The requested resource does not exist or the target was rejected."""


class UpstreamTimeoutError(KagiError):
    """The request did not complete within the client timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Kagi API request timed out after {timeout}s")


class UpstreamConnectionError(KagiError):
    """The request could not be sent or the response could not be read."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Kagi API request failed" + (f": {detail}" if detail else ""))


class MalformedResponseError(KagiError):
    """The API answered successfully but the payload did not match the schema."""

    def __init__(self, endpoint: str, detail: str = "") -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(
            f"Unexpected response from {endpoint}" + (f": {detail}" if detail else "")
        )


def error_for_status(status: int, detail: str = "") -> KagiAPIError:
    """Pick the :class:`KagiAPIError` subclass matching an HTTP status."""
    if status in (401, 403):
        return AuthenticationError(status, detail)
    if status in (402, 429):
        return QuotaExceededError(status, detail)
    if status in (400, 404, 422):
        return InvalidTargetError(status, detail)
    return KagiAPIError(status, detail)
