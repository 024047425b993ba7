"""
Token SDK for Python

A Python client for the Token platform: member management, transfer, access
and standing order tokens, token requests and their callbacks.
"""

from ._version import __version__

# Configuration
from .core.config import TokenConfig, TokenCluster

# Core types
from .core.types import (
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
    TransferPayload,
    Transfer,
    Transaction,
    TokenRequestPayload,
    TokenRequestOptions,
    StoredTokenRequest,
)

# Paging
from .core.paging import PagedList, iterate_pages

# Signing
from .security import (
    Signer,
    Verifier,
    CryptoEngine,
    CryptoEngineFactory,
    KeyStore,
    InMemoryKeyStore,
    SecretKey,
    KeyStoreCryptoEngine,
    KeyStoreCryptoEngineFactory,
)

# Builders
from .builders import TransferTokenBuilder, AccessTokenBuilder, StandingOrderTokenBuilder

# Token requests
from .tokenrequest import (
    TokenRequest,
    TokenRequestBuilder,
    TokenRequestState,
    TokenRequestCallback,
    TokenRequestCallbackParameters,
    generate_token_request_url,
)

# Entry points and wrappers
from .tokenio import TokenIO, TokenIOAsync, TokenIOBuilder
from .member import Member, MemberAsync
from .account import Account, AccountAsync

# Exceptions
from .core.exceptions import (
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

# Main exports for public API
__all__ = [
    # Version info
    "__version__",

    # Configuration
    "TokenConfig",
    "TokenCluster",

    # Core types
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
    "TransferPayload",
    "Transfer",
    "Transaction",
    "TokenRequestPayload",
    "TokenRequestOptions",
    "StoredTokenRequest",

    # Paging
    "PagedList",
    "iterate_pages",

    # Signing
    "Signer",
    "Verifier",
    "CryptoEngine",
    "CryptoEngineFactory",
    "KeyStore",
    "InMemoryKeyStore",
    "SecretKey",
    "KeyStoreCryptoEngine",
    "KeyStoreCryptoEngineFactory",

    # Builders
    "TransferTokenBuilder",
    "AccessTokenBuilder",
    "StandingOrderTokenBuilder",

    # Token requests
    "TokenRequest",
    "TokenRequestBuilder",
    "TokenRequestState",
    "TokenRequestCallback",
    "TokenRequestCallbackParameters",
    "generate_token_request_url",

    # Entry points and wrappers
    "TokenIO",
    "TokenIOAsync",
    "TokenIOBuilder",
    "Member",
    "MemberAsync",
    "Account",
    "AccountAsync",

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
]
