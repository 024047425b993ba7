"""Configuration management for the Token SDK."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_SSL_PORT = 443


class TokenCluster(str, Enum):
    """Token environments, each with a gateway host and a web-app host."""
    PRODUCTION = "production"
    INTEGRATION = "integration"
    SANDBOX = "sandbox"
    STAGING = "staging"
    PERFORMANCE = "performance"
    DEVELOPMENT = "development"

    @property
    def gateway_host(self) -> str:
        return _GATEWAY_HOSTS[self]

    @property
    def web_app_host(self) -> str:
        return _WEB_APP_HOSTS[self]


_GATEWAY_HOSTS = {
    TokenCluster.PRODUCTION: "api-grpc.token.io",
    TokenCluster.INTEGRATION: "api-grpc.int.token.io",
    TokenCluster.SANDBOX: "api-grpc.sandbox.token.io",
    TokenCluster.STAGING: "api-grpc.stg.token.io",
    TokenCluster.PERFORMANCE: "api-grpc.perf.token.io",
    TokenCluster.DEVELOPMENT: "api-grpc.dev.token.io",
}

_WEB_APP_HOSTS = {
    TokenCluster.PRODUCTION: "web-app.token.io",
    TokenCluster.INTEGRATION: "web-app.int.token.io",
    TokenCluster.SANDBOX: "web-app.sandbox.token.io",
    TokenCluster.STAGING: "web-app.stg.token.io",
    TokenCluster.PERFORMANCE: "web-app.perf.token.io",
    TokenCluster.DEVELOPMENT: "web-app.dev.token.io",
}


@dataclass(frozen=True)
class TokenConfig:
    """Configuration for the Token SDK."""
    host: str
    dev_key: str
    port: int = DEFAULT_SSL_PORT
    use_ssl: bool = True
    cluster: Optional[TokenCluster] = None
    request_timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self):
        if not self.dev_key:
            raise ConfigurationError(
                "Please provide a developer key. Contact Token for more details."
            )
        if not self.host:
            raise ConfigurationError("Gateway host must be set")

    @property
    def gateway_url(self) -> str:
        """Base URL of the gateway service."""
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.host}:{self.port}"

    @property
    def web_app_host(self) -> str:
        """Host serving the token request web app."""
        if self.cluster is None:
            raise ConfigurationError("Web app host is only known for a Token cluster")
        return self.cluster.web_app_host

    @classmethod
    def for_cluster(cls, cluster: TokenCluster, dev_key: str, **kwargs) -> 'TokenConfig':
        """Configuration pointing at one of the Token clusters."""
        return cls(host=cluster.gateway_host, dev_key=dev_key, cluster=cluster, **kwargs)

    @classmethod
    def from_env(cls) -> 'TokenConfig':
        """Load configuration from environment variables."""
        try:
            cluster = TokenCluster(os.environ.get('TOKEN_ENV', 'sandbox').lower())
        except ValueError as e:
            raise ConfigurationError(f"Unknown Token environment: {e}")

        port = int(os.environ.get('TOKEN_GATEWAY_PORT', str(DEFAULT_SSL_PORT)))
        return cls(
            host=os.environ.get('TOKEN_GATEWAY_HOST', cluster.gateway_host),
            dev_key=os.environ.get('TOKEN_DEV_KEY', ''),
            port=port,
            use_ssl=port == DEFAULT_SSL_PORT,
            cluster=cluster,
            request_timeout=float(os.environ.get('TOKEN_REQUEST_TIMEOUT', '10.0')),
            max_retries=int(os.environ.get('TOKEN_MAX_RETRIES', '3')),
            retry_delay=float(os.environ.get('TOKEN_RETRY_DELAY', '1.0'))
        )

    @classmethod
    def sandbox(cls, dev_key: str) -> 'TokenConfig':
        """Sandbox configuration."""
        return cls.for_cluster(TokenCluster.SANDBOX, dev_key)

    @classmethod
    def production(cls, dev_key: str) -> 'TokenConfig':
        """Production configuration."""
        return cls.for_cluster(TokenCluster.PRODUCTION, dev_key)
