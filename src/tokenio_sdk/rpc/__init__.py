"""
RPC module for the Token SDK.

This module provides the gateway transport and the clients the member and
account wrappers delegate to.
"""

from .transport import GatewayTransport, format_error_message
from .auth import AuthenticationContext, RequestAuthenticator
from .client import UnauthenticatedClient, Client

__all__ = [
    "GatewayTransport",
    "format_error_message",
    "AuthenticationContext",
    "RequestAuthenticator",
    "UnauthenticatedClient",
    "Client",
]
