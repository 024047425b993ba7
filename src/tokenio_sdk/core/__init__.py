"""
Core module for the Token SDK.

This module contains the configuration, gateway message types, exceptions
and shared helpers that the rest of the SDK builds on.
"""

from .config import TokenConfig, TokenCluster
from .types import (
    ProtoModel,
    Alias,
    AliasType,
    TokenMember,
    Key,
    KeyLevel,
    Signature,
    MemberRecord,
    Money,
    Balance,
    AccountRecord,
    BankAccount,
    TransferEndpoint,
    TransferDestination,
    Attachment,
    TokenPayload,
    Token,
    TokenOperationResult,
    Transfer,
    Transaction,
    TokenRequestPayload,
    TokenRequestOptions,
    StoredTokenRequest,
)
from .exceptions import (
    StatusCode,
    TokenSDKError,
    ConfigurationError,
    ValidationError,
    TokenArgumentsError,
    RPCError,
    MemberNotFoundError,
    NoAliasesFoundError,
    VersionMismatchError,
    RateLimitError,
    NetworkError,
    TimeoutError,
    TransferTokenError,
    ExternalAuthorizationRequiredError,
    InvalidStateError,
    InvalidTokenRequestQueryError,
    KeyNotFoundError,
    InvalidSignatureError,
)
from .paging import PagedList, iterate_pages
from .sync import LoopRunner

__all__ = [
    # Configuration
    "TokenConfig",
    "TokenCluster",

    # Core types
    "ProtoModel",
    "Alias",
    "AliasType",
    "TokenMember",
    "Key",
    "KeyLevel",
    "Signature",
    "MemberRecord",
    "Money",
    "Balance",
    "AccountRecord",
    "BankAccount",
    "TransferEndpoint",
    "TransferDestination",
    "Attachment",
    "TokenPayload",
    "Token",
    "TokenOperationResult",
    "Transfer",
    "Transaction",
    "TokenRequestPayload",
    "TokenRequestOptions",
    "StoredTokenRequest",

    # Exceptions
    "StatusCode",
    "TokenSDKError",
    "ConfigurationError",
    "ValidationError",
    "TokenArgumentsError",
    "RPCError",
    "MemberNotFoundError",
    "NoAliasesFoundError",
    "VersionMismatchError",
    "RateLimitError",
    "NetworkError",
    "TimeoutError",
    "TransferTokenError",
    "ExternalAuthorizationRequiredError",
    "InvalidStateError",
    "InvalidTokenRequestQueryError",
    "KeyNotFoundError",
    "InvalidSignatureError",

    # Paging and blocking support
    "PagedList",
    "iterate_pages",
    "LoopRunner",
]
