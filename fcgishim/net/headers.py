"""
CGI environment to HTTP request head translation.
"""

from collections.abc import Mapping

from .exceptions import GatewayRequestError

HEADER_PREFIX = "HTTP_"
CONTENT_KEYS = ("CONTENT_LENGTH", "CONTENT_TYPE")

# The back end always gets HTTP/1.0; the gateway's SERVER_PROTOCOL is not
# trusted.
WIRE_PROTOCOL = "HTTP/1.0"


def header_name(key: str) -> str:
    """
    Turn a CGI variable name into an HTTP header name.

    >>> header_name("X_FORWARDED_FOR")
    'X-Forwarded-For'
    """
    return "-".join(part.capitalize() for part in key.split("_"))


def translate_headers(environ: Mapping[str, str]) -> list[tuple[str, str]]:
    """
    Derive the request headers from the CGI environment.

    ``HTTP_*`` variables lose their prefix; ``CONTENT_LENGTH`` and
    ``CONTENT_TYPE`` keep their name. Order follows the environment.
    Empty content variables are dropped.
    """
    headers = []
    for key, value in environ.items():
        if key.startswith(HEADER_PREFIX):
            headers.append((header_name(key[len(HEADER_PREFIX) :]), value))
        elif key in CONTENT_KEYS and value:
            headers.append((header_name(key), value))
    return headers


def request_line(environ: Mapping[str, str]) -> str:
    """
    Build ``METHOD URI HTTP/1.0`` from the environment.

    Raises:
        GatewayRequestError: If the method or URI is missing
    """
    method = environ.get("REQUEST_METHOD")
    uri = environ.get("REQUEST_URI")
    if not method or not uri:
        raise GatewayRequestError(
            "request lacks REQUEST_METHOD or REQUEST_URI", method=method, uri=uri
        )
    return f"{method} {uri} {WIRE_PROTOCOL}"

