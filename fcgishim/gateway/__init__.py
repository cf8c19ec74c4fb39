"""FastCGI gateway side of the shim."""

from .request import FlupRequest, GatewayRequest
from .server import GatewayServer

__all__ = ["FlupRequest", "GatewayRequest", "GatewayServer"]
