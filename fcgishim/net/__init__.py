"""Back-end connection and wire translation."""

from .dialer import ConnectionDialer
from .exceptions import (
    DialError,
    DialTimeoutError,
    GatewayRequestError,
    NetError,
    ProtocolError,
    StatusLineError,
)
from .headers import header_name, request_line, translate_headers
from .translator import ProtocolTranslator, rewrite_status_line

__all__ = [
    # Dialing
    "ConnectionDialer",
    # Translation
    "ProtocolTranslator",
    "header_name",
    "request_line",
    "rewrite_status_line",
    "translate_headers",
    # Exceptions
    "DialError",
    "DialTimeoutError",
    "GatewayRequestError",
    "NetError",
    "ProtocolError",
    "StatusLineError",
]
