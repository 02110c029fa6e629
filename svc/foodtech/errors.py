from __future__ import annotations


class GatewayError(Exception):
    """Base class for failures talking to the local gateway."""


class NetworkError(GatewayError):
    """Request could not be sent or no response arrived (timeouts included)."""


class HttpStatusError(GatewayError):
    """Gateway answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str, body: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"HTTP error! status: {status_code} ({url})")


class MalformedResponseError(GatewayError):
    """2xx response whose body does not have the expected shape."""


class NotAuthenticatedError(GatewayError):
    """A device command was attempted before a successful login."""


class InvalidSuffixError(GatewayError):
    """Sensor suffix would change the endpoint path instead of naming a device."""
