"""
Builders module for the Token SDK.

Fluent builders that assemble and validate token payloads.
"""

from .transfer import TransferTokenBuilder
from .access import AccessTokenBuilder
from .standing_order import StandingOrderTokenBuilder

__all__ = [
    "TransferTokenBuilder",
    "AccessTokenBuilder",
    "StandingOrderTokenBuilder",
]
