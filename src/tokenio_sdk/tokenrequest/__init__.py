"""
Token request module for the Token SDK.

Builds token requests, generates the URL that sends a user to Token's web
app, and verifies the callback Token redirects back with.
"""

from .request import TokenRequest, TokenRequestBuilder
from .state import TokenRequestState
from .callback import (
    TokenRequestCallback,
    TokenRequestCallbackParameters,
    parse_token_request_callback,
)
from .urls import generate_token_request_url

__all__ = [
    "TokenRequest",
    "TokenRequestBuilder",
    "TokenRequestState",
    "TokenRequestCallback",
    "TokenRequestCallbackParameters",
    "parse_token_request_callback",
    "generate_token_request_url",
]
