from typing import Any


class CarrierError(Exception):
    """Raised when a carrier API call fails.

    Carries the HTTP status code and decoded response body when the carrier
    answered at all.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CarrierAuthError(CarrierError):
    """Raised when no usable access token can be obtained."""


class CarrierNetworkError(CarrierError):
    """Raised when the carrier cannot be reached or times out."""
