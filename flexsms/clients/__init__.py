"""HTTP clients for the Twilio Flex and Proxy REST APIs."""

from flexsms.clients.flex import FlexClient
from flexsms.clients.proxy import ProxyClient

__all__ = ["FlexClient", "ProxyClient"]
