from __future__ import annotations

from typing import Any

# Status reported when no response was received at all
NETWORK_ERROR_STATUS = 500
NETWORK_ERROR_MESSAGE = "Network error or invalid response"


class ApiError(Exception):
    """
    Common error for every failed CRM API call.

    Callers catch this one type to show a single notification; ``status`` and
    ``is_transport`` are there for the cases that need to branch.
    """

    is_transport: bool = False

    def __init__(self, status: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r})"


class ServerError(ApiError):
    """The backend answered with a non-success status."""


class TransportError(ApiError):
    """The request never completed (DNS, refused connection, timeout, TLS, garbled body)."""

    is_transport = True

    def __init__(self, data: Any = None, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(NETWORK_ERROR_STATUS, message, data)
