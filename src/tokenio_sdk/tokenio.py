"""Entry point of the SDK: member creation, lookup and token request flows."""

import logging
from typing import List, Mapping, Optional

from .core.config import DEFAULT_SSL_PORT, TokenCluster, TokenConfig
from .core.exceptions import ConfigurationError
from .core.sync import LoopRunner
from .core.types import (
    Alias,
    Bank,
    DeviceInfo,
    Key,
    KeyLevel,
    MemberRecord,
    MemberRecoveryOperation,
    StoredTokenRequest,
    TokenPayload,
)
from .core.util import (
    generate_nonce,
    normalize_alias,
    to_add_alias_operation,
    to_add_alias_operation_metadata,
    to_add_key_operation,
)
from .member import Member, MemberAsync
from .rpc.client import Client, UnauthenticatedClient
from .rpc.transport import GatewayTransport
from .security import (
    CryptoEngine,
    CryptoEngineFactory,
    KeyStore,
    KeyStoreCryptoEngine,
    KeyStoreCryptoEngineFactory,
)
from .tokenrequest import (
    TokenRequestCallback,
    TokenRequestCallbackParameters,
    generate_token_request_url,
    parse_token_request_callback,
)

logger = logging.getLogger(__name__)


class TokenIOAsync:
    """Async entry point to the Token gateway.

    Example:
        async with TokenIO.builder().sandbox().dev_key(key) \\
                .crypto_engine(factory).build_async() as token_io:
            member = await token_io.create_member(alias)
    """

    def __init__(
        self,
        config: TokenConfig,
        crypto_engine_factory: CryptoEngineFactory,
        runner: Optional[LoopRunner] = None
    ):
        """Initialize the SDK.

        Args:
            config: Gateway configuration
            crypto_engine_factory: Creates the signing engine of each member
            runner: Event loop runner for the blocking API
        """
        self.config = config
        self.crypto_engine_factory = crypto_engine_factory
        self.runner = runner or LoopRunner()
        self.transport = GatewayTransport(config)
        self.client = UnauthenticatedClient(self.transport)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the gateway session."""
        await self.transport.close()

    def sync(self) -> 'TokenIO':
        """Blocking version of this SDK instance."""
        return TokenIO(self)

    def _member(self, record: MemberRecord, crypto_engine: CryptoEngine) -> MemberAsync:
        client = Client(record.id, crypto_engine, self.transport)
        return MemberAsync(record, client, self.runner)

    async def alias_exists(self, alias: Alias) -> bool:
        return await self.client.alias_exists(normalize_alias(alias))

    async def get_member_id(self, alias: Alias) -> str:
        """Resolve an alias to a member id.

        Raises:
            MemberNotFoundError: No member has the alias
        """
        return await self.client.get_member_id(normalize_alias(alias))

    async def create_member(
        self,
        alias: Optional[Alias] = None,
        member_type: str = "PERSONAL"
    ) -> MemberAsync:
        """Create a member with fresh keys and, optionally, an alias.

        Args:
            alias: Alias to add; it stays unverified until the member verifies it
            member_type: Member type, e.g. "PERSONAL" or "BUSINESS"

        Returns:
            The new member
        """
        member_id = await self.client.create_member_id(member_type)
        crypto_engine = self.crypto_engine_factory.create(member_id)

        operations = [
            to_add_key_operation(crypto_engine.generate_key(level))
            for level in (KeyLevel.PRIVILEGED, KeyLevel.STANDARD, KeyLevel.LOW)
        ]
        metadata = []
        if alias is not None:
            alias = normalize_alias(alias)
            operations.append(to_add_alias_operation(alias))
            metadata.append(to_add_alias_operation_metadata(alias))

        record = await self.client.create_member(
            member_id,
            operations,
            metadata,
            crypto_engine.create_signer(KeyLevel.PRIVILEGED)
        )
        logger.info(f"Created member {member_id}")
        return self._member(record, crypto_engine)

    async def get_member(self, member_id: str) -> MemberAsync:
        """Load a member whose keys the crypto engine factory holds."""
        crypto_engine = self.crypto_engine_factory.create(member_id)
        client = Client(member_id, crypto_engine, self.transport)
        record = await client.get_member(member_id)
        return MemberAsync(record, client, self.runner)

    async def provision_device(self, alias: Alias) -> DeviceInfo:
        """Generate keys for an existing member on this device.

        The keys must be approved from a device that already holds a
        privileged key before they can be used.

        Args:
            alias: Alias of the member

        Returns:
            Member id and the new public keys
        """
        member_id = await self.get_member_id(alias)
        crypto_engine = self.crypto_engine_factory.create(member_id)
        keys = [
            crypto_engine.generate_key(level)
            for level in (KeyLevel.PRIVILEGED, KeyLevel.STANDARD, KeyLevel.LOW)
        ]
        logger.info(f"Provisioned {len(keys)} keys for member {member_id}")
        return DeviceInfo(member_id=member_id, keys=keys)

    async def retrieve_token_request(self, request_id: str) -> StoredTokenRequest:
        return await self.client.retrieve_token_request(request_id)

    async def get_banks(
        self,
        bank_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        country: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None
    ) -> List[Bank]:
        return await self.client.get_banks(bank_ids, search, country, page, per_page)

    async def notify_payment_request(self, payload: TokenPayload) -> str:
        """Ask a payer to create a transfer token; returns the notify status."""
        if not payload.ref_id:
            logger.warning("refId is not set. A random ID will be used.")
            payload = payload.model_copy(update={'ref_id': generate_nonce()})
        return await self.client.notify_payment_request(payload)

    async def begin_recovery(self, alias: Alias) -> str:
        """Start recovery of a member; returns the verification id."""
        return await self.client.begin_recovery(alias)

    async def get_recovery_authorization(
        self,
        verification_id: str,
        code: str,
        privileged_key: Key
    ) -> MemberRecoveryOperation:
        return await self.client.get_recovery_authorization(verification_id, code, privileged_key)

    async def complete_recovery(
        self,
        member_id: str,
        recovery_operations: List[MemberRecoveryOperation]
    ) -> MemberAsync:
        crypto_engine = self.crypto_engine_factory.create(member_id)
        record = await self.client.complete_recovery(member_id, recovery_operations, crypto_engine)
        return self._member(record, crypto_engine)

    async def complete_recovery_with_default_rule(
        self,
        member_id: str,
        verification_id: str,
        code: str
    ) -> MemberAsync:
        """Recover a member that uses Token as its recovery agent.

        Args:
            member_id: Member to recover
            verification_id: Id returned by ``begin_recovery``
            code: Verification code the member received

        Returns:
            The recovered member, holding new keys
        """
        crypto_engine = self.crypto_engine_factory.create(member_id)
        record = await self.client.complete_recovery_with_default_rule(
            member_id,
            verification_id,
            code,
            crypto_engine
        )
        return self._member(record, crypto_engine)

    def generate_token_request_url(
        self,
        request_id: str,
        state: str = "",
        csrf_token: str = ""
    ) -> str:
        """URL of the Token web app page completing a stored token request."""
        return generate_token_request_url(self.config.web_app_host, request_id, state, csrf_token)

    async def parse_token_request_callback_url(
        self,
        url: str,
        csrf_token: str = ""
    ) -> TokenRequestCallback:
        """Verify the redirect Token sent after a token request.

        Args:
            url: Full callback URL
            csrf_token: CSRF token used when generating the request URL

        Returns:
            Token id and the original state

        Raises:
            InvalidTokenRequestQueryError: Callback parameters are missing
            InvalidStateError: CSRF token does not match
            InvalidSignatureError: Token's signature does not verify
        """
        return await self._parse_callback(TokenRequestCallbackParameters.from_url(url), csrf_token)

    async def parse_token_request_callback_params(
        self,
        params: Mapping[str, str],
        csrf_token: str = ""
    ) -> TokenRequestCallback:
        return await self._parse_callback(
            TokenRequestCallbackParameters.from_params(params),
            csrf_token
        )

    async def _parse_callback(
        self,
        params: TokenRequestCallbackParameters,
        csrf_token: str
    ) -> TokenRequestCallback:
        token_member = await self.client.get_token_member()
        return parse_token_request_callback(
            params,
            csrf_token,
            token_member,
            self.crypto_engine_factory.create_verifier
        )


class TokenIO:
    """Blocking facade over ``TokenIOAsync``."""

    def __init__(self, token_io: TokenIOAsync):
        self._async = token_io

    @staticmethod
    def builder() -> 'TokenIOBuilder':
        return TokenIOBuilder()

    def _run(self, coro):
        return self._async.runner.run(coro)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def async_(self) -> TokenIOAsync:
        return self._async

    def close(self) -> None:
        """Close the gateway session and stop the blocking event loop."""
        if not self._async.runner.closed:
            self._run(self._async.close())
            self._async.runner.close()

    def alias_exists(self, alias: Alias) -> bool:
        return self._run(self._async.alias_exists(alias))

    def get_member_id(self, alias: Alias) -> str:
        return self._run(self._async.get_member_id(alias))

    def create_member(self, alias: Optional[Alias] = None, member_type: str = "PERSONAL") -> Member:
        return self._run(self._async.create_member(alias, member_type)).sync()

    def get_member(self, member_id: str) -> Member:
        return self._run(self._async.get_member(member_id)).sync()

    def provision_device(self, alias: Alias) -> DeviceInfo:
        return self._run(self._async.provision_device(alias))

    def retrieve_token_request(self, request_id: str) -> StoredTokenRequest:
        return self._run(self._async.retrieve_token_request(request_id))

    def get_banks(
        self,
        bank_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        country: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None
    ) -> List[Bank]:
        return self._run(self._async.get_banks(bank_ids, search, country, page, per_page))

    def notify_payment_request(self, payload: TokenPayload) -> str:
        return self._run(self._async.notify_payment_request(payload))

    def begin_recovery(self, alias: Alias) -> str:
        return self._run(self._async.begin_recovery(alias))

    def get_recovery_authorization(
        self,
        verification_id: str,
        code: str,
        privileged_key: Key
    ) -> MemberRecoveryOperation:
        return self._run(self._async.get_recovery_authorization(verification_id, code, privileged_key))

    def complete_recovery(
        self,
        member_id: str,
        recovery_operations: List[MemberRecoveryOperation]
    ) -> Member:
        return self._run(self._async.complete_recovery(member_id, recovery_operations)).sync()

    def complete_recovery_with_default_rule(
        self,
        member_id: str,
        verification_id: str,
        code: str
    ) -> Member:
        return self._run(self._async.complete_recovery_with_default_rule(
            member_id, verification_id, code
        )).sync()

    def generate_token_request_url(self, request_id: str, state: str = "", csrf_token: str = "") -> str:
        return self._async.generate_token_request_url(request_id, state, csrf_token)

    def parse_token_request_callback_url(self, url: str, csrf_token: str = "") -> TokenRequestCallback:
        return self._run(self._async.parse_token_request_callback_url(url, csrf_token))

    def parse_token_request_callback_params(
        self,
        params: Mapping[str, str],
        csrf_token: str = ""
    ) -> TokenRequestCallback:
        return self._run(self._async.parse_token_request_callback_params(params, csrf_token))


class TokenIOBuilder:
    """Configures and creates ``TokenIO`` / ``TokenIOAsync`` instances."""

    def __init__(self):
        self._cluster: Optional[TokenCluster] = TokenCluster.SANDBOX
        self._host: Optional[str] = None
        self._port = DEFAULT_SSL_PORT
        self._use_ssl: Optional[bool] = None
        self._timeout = 10.0
        self._max_retries = 3
        self._dev_key: Optional[str] = None
        self._crypto_engine_factory: Optional[CryptoEngineFactory] = None

    def connect_to(self, cluster: TokenCluster) -> 'TokenIOBuilder':
        self._cluster = cluster
        self._host = None
        return self

    def sandbox(self) -> 'TokenIOBuilder':
        return self.connect_to(TokenCluster.SANDBOX)

    def production(self) -> 'TokenIOBuilder':
        return self.connect_to(TokenCluster.PRODUCTION)

    def hostname(self, host: str) -> 'TokenIOBuilder':
        """Connect to a gateway host outside the Token clusters."""
        self._host = host
        self._cluster = None
        return self

    def port(self, port: int) -> 'TokenIOBuilder':
        self._port = port
        return self

    def use_ssl(self, use_ssl: bool) -> 'TokenIOBuilder':
        self._use_ssl = use_ssl
        return self

    def timeout(self, seconds: float) -> 'TokenIOBuilder':
        self._timeout = seconds
        return self

    def max_retries(self, max_retries: int) -> 'TokenIOBuilder':
        self._max_retries = max_retries
        return self

    def dev_key(self, dev_key: str) -> 'TokenIOBuilder':
        self._dev_key = dev_key
        return self

    def crypto_engine(self, factory: CryptoEngineFactory) -> 'TokenIOBuilder':
        self._crypto_engine_factory = factory
        return self

    def with_key_store(
        self,
        key_store: KeyStore,
        engine_class: type
    ) -> 'TokenIOBuilder':
        """Sign with ``engine_class`` keeping member keys in ``key_store``."""
        if not issubclass(engine_class, KeyStoreCryptoEngine):
            raise ConfigurationError(
                f"{engine_class.__name__} is not a KeyStoreCryptoEngine"
            )
        return self.crypto_engine(KeyStoreCryptoEngineFactory(engine_class, key_store))

    def _config(self) -> TokenConfig:
        if not self._dev_key:
            raise ConfigurationError(
                "Please provide a developer key. Contact Token for more details."
            )
        use_ssl = self._use_ssl if self._use_ssl is not None else self._port == DEFAULT_SSL_PORT
        if self._cluster is not None:
            return TokenConfig.for_cluster(
                self._cluster,
                self._dev_key,
                port=self._port,
                use_ssl=use_ssl,
                request_timeout=self._timeout,
                max_retries=self._max_retries
            )
        return TokenConfig(
            host=self._host or "",
            dev_key=self._dev_key,
            port=self._port,
            use_ssl=use_ssl,
            request_timeout=self._timeout,
            max_retries=self._max_retries
        )

    def build_async(self) -> TokenIOAsync:
        """Create the async SDK.

        Raises:
            ConfigurationError: No developer key or crypto engine is set
        """
        config = self._config()
        if self._crypto_engine_factory is None:
            raise ConfigurationError("A crypto engine factory is required")
        logger.info(f"Connecting to Token gateway at {config.gateway_url}")
        return TokenIOAsync(config, self._crypto_engine_factory)

    def build(self) -> TokenIO:
        return self.build_async().sync()
