"""Custom exceptions for the Token SDK."""

from enum import IntEnum
from typing import Optional, Any, Dict


class StatusCode(IntEnum):
    """Status codes reported by the gateway, numbered as in gRPC."""
    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @classmethod
    def from_http_status(cls, http_status: int) -> 'StatusCode':
        """Map an HTTP status to the closest status code."""
        return _HTTP_TO_STATUS.get(http_status, cls.UNKNOWN)


_HTTP_TO_STATUS = {
    400: StatusCode.INVALID_ARGUMENT,
    401: StatusCode.UNAUTHENTICATED,
    403: StatusCode.PERMISSION_DENIED,
    404: StatusCode.NOT_FOUND,
    409: StatusCode.ALREADY_EXISTS,
    412: StatusCode.FAILED_PRECONDITION,
    429: StatusCode.RESOURCE_EXHAUSTED,
    499: StatusCode.CANCELLED,
    500: StatusCode.INTERNAL,
    501: StatusCode.UNIMPLEMENTED,
    503: StatusCode.UNAVAILABLE,
    504: StatusCode.DEADLINE_EXCEEDED,
}


class TokenSDKError(Exception):
    """Base exception for all Token SDK errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(TokenSDKError):
    """Configuration is invalid or missing."""
    pass


class ValidationError(TokenSDKError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class TokenArgumentsError(ValidationError):
    """A mandatory builder field is missing."""
    pass


class RPCError(TokenSDKError):
    """Gateway call failed with a status code."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        status: StatusCode = StatusCode.UNKNOWN,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.method = method
        self.status = status
        self.status_code = status_code
        self.response_data = response_data


class MemberNotFoundError(RPCError):
    """No member could be resolved for an alias."""

    def __init__(self, alias: Any):
        super().__init__(
            f"Member could not be resolved for alias {alias}",
            status=StatusCode.NOT_FOUND
        )
        self.alias = alias


class NoAliasesFoundError(RPCError):
    """The member has no aliases."""

    def __init__(self, member_id: str):
        super().__init__(
            f"No aliases found for member : {member_id}",
            status=StatusCode.NOT_FOUND
        )
        self.member_id = member_id


class VersionMismatchError(RPCError):
    """The gateway no longer supports this SDK version."""
    pass


class RateLimitError(RPCError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status=StatusCode.RESOURCE_EXHAUSTED, details=details)
        self.retry_after = retry_after


class NetworkError(TokenSDKError):
    """Network connectivity issues."""
    pass


class TimeoutError(TokenSDKError):
    """Operation timed out."""

    def __init__(
        self,
        message: str,
        timeout_duration: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.timeout_duration = timeout_duration


class TransferTokenError(TokenSDKError):
    """The gateway refused to create a transfer token."""

    def __init__(self, status: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Failed to create token: {status}", details)
        self.status = status


class ExternalAuthorizationRequiredError(TransferTokenError):
    """The bank requires the user to authorize the transfer externally."""

    def __init__(self, authorization_url: str):
        super().__init__("FAILURE_EXTERNAL_AUTHORIZATION_REQUIRED")
        self.authorization_url = authorization_url


class InvalidStateError(TokenSDKError):
    """The CSRF token does not match the token request state."""

    def __init__(self, csrf_token_hash: str):
        super().__init__(f"CSRF token hash does not match: {csrf_token_hash}")
        self.csrf_token_hash = csrf_token_hash


class InvalidTokenRequestQueryError(TokenSDKError):
    """Callback query string is missing token-id, state or signature."""

    def __init__(self, message: str = "Invalid token request callback query"):
        super().__init__(message)


class KeyNotFoundError(TokenSDKError):
    """No key matches the requested id or level."""
    pass


class InvalidSignatureError(TokenSDKError):
    """A signature failed verification."""
    pass
