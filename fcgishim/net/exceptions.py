"""
Custom exceptions for the fcgishim.net package.

Kept in their own module so the dialer, translator and request loop can
share them without circular imports.
"""

from ..exceptions import ShimError


class NetError(ShimError):
    """Base exception for back-end connection errors."""

    pass


class DialError(NetError):
    """Raised when the back-end socket cannot be connected."""

    pass


class DialTimeoutError(DialError):
    """Raised when the back end never showed up within the retry ceiling."""

    def __init__(self, socket_path: str, attempts: int) -> None:
        super().__init__(
            "backend socket did not appear",
            socket_path=socket_path,
            attempts=attempts,
        )
        self.socket_path = socket_path
        self.attempts = attempts


class ProtocolError(NetError):
    """Base exception for malformed traffic on either side of the shim."""

    pass


class StatusLineError(ProtocolError):
    """Raised when the back end's reply does not start with a status line."""

    pass


class GatewayRequestError(ProtocolError):
    """Raised when the gateway request lacks fields needed for translation."""

    pass
