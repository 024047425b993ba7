"""Signing engine interfaces.

The SDK does not implement a signature algorithm. Applications plug in an
engine (hardware keystore, KMS, a crypto library) by implementing
``CryptoEngine`` directly, or ``KeyStoreCryptoEngine`` when keys live in a
``KeyStore``.
"""

import base64
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple, Type, Union

from ..core.exceptions import InvalidSignatureError, KeyNotFoundError
from ..core.types import Key, KeyLevel, MemberRecord, Signature
from .keystore import KeyStore, SecretKey

logger = logging.getLogger(__name__)

Payload = Union[str, bytes]


def _as_bytes(payload: Payload) -> bytes:
    return payload.encode('utf-8') if isinstance(payload, str) else payload


def key_id_for(public_key: str) -> str:
    """Key id derived from the encoded public key."""
    digest = hashlib.sha256(public_key.encode('ascii')).digest()
    return base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')[:16]


class Signer(ABC):
    """Signs payloads with one private key."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        pass

    @abstractmethod
    def sign(self, payload: Payload) -> str:
        """Sign a payload and return the encoded signature."""
        pass


class Verifier(ABC):
    """Verifies signatures made with one key."""

    @abstractmethod
    def verify(self, payload: Payload, signature: str) -> None:
        """Check a signature.

        Raises:
            InvalidSignatureError: The signature does not match the payload
        """
        pass


class CryptoEngine(ABC):
    """Key management and signing for a single member."""

    @abstractmethod
    def generate_key(self, level: KeyLevel, expires_at_ms: Optional[int] = None) -> Key:
        """Create and store a new key pair, returning its public half."""
        pass

    @abstractmethod
    def create_signer(self, level: KeyLevel) -> Signer:
        """Signer for a key of the given level.

        Raises:
            KeyNotFoundError: No key of that level
        """
        pass

    @abstractmethod
    def create_verifier(self, key_id: str) -> Verifier:
        pass

    @abstractmethod
    def get_public_keys(self) -> List[Key]:
        pass

    def delete_keys(self) -> None:
        """Forget the member's keys."""
        pass


class CryptoEngineFactory(ABC):
    """Creates per-member engines and public key verifiers."""

    @abstractmethod
    def create(self, member_id: str) -> CryptoEngine:
        pass

    @abstractmethod
    def create_verifier(self, key: Key) -> Verifier:
        """Verifier for someone else's public key."""
        pass


class KeyStoreCryptoEngine(CryptoEngine):
    """Engine keeping its keys in a ``KeyStore``.

    Subclasses supply the algorithm: key pair generation, signing and
    verification over encoded key strings.
    """

    algorithm = "ED25519"

    def __init__(self, member_id: str, key_store: KeyStore):
        self.member_id = member_id
        self.key_store = key_store

    @abstractmethod
    def _generate_key_pair(self) -> Tuple[str, str]:
        """Return (public_key, private_key) in their encoded form."""
        pass

    @abstractmethod
    def _sign(self, private_key: str, data: bytes) -> str:
        pass

    @abstractmethod
    def _verify(self, public_key: str, data: bytes, signature: str) -> bool:
        pass

    def generate_key(self, level: KeyLevel, expires_at_ms: Optional[int] = None) -> Key:
        public_key, private_key = self._generate_key_pair()
        secret = SecretKey(
            id=key_id_for(public_key),
            level=level,
            public_key=public_key,
            private_key=private_key,
            algorithm=self.algorithm,
            expires_at_ms=expires_at_ms
        )
        self.key_store.put(self.member_id, secret)
        logger.debug(f"Generated {level.value} key {secret.id} for member {self.member_id}")
        return secret.to_public_key()

    def create_signer(self, level: KeyLevel) -> Signer:
        return _KeyStoreSigner(self, self.key_store.get_by_level(self.member_id, level))

    def create_verifier(self, key_id: str) -> Verifier:
        secret = self.key_store.get_by_id(self.member_id, key_id)
        return self.verifier_for(secret.public_key)

    def verifier_for(self, public_key: str) -> Verifier:
        return _KeyStoreVerifier(self, public_key)

    def get_public_keys(self) -> List[Key]:
        return [
            key.to_public_key()
            for key in self.key_store.list_keys(self.member_id)
            if not key.is_expired()
        ]

    def delete_keys(self) -> None:
        self.key_store.delete_keys(self.member_id)


class _KeyStoreSigner(Signer):

    def __init__(self, engine: KeyStoreCryptoEngine, secret: SecretKey):
        self._engine = engine
        self._secret = secret

    @property
    def key_id(self) -> str:
        return self._secret.id

    def sign(self, payload: Payload) -> str:
        return self._engine._sign(self._secret.private_key, _as_bytes(payload))


class _KeyStoreVerifier(Verifier):

    def __init__(self, engine: KeyStoreCryptoEngine, public_key: str):
        self._engine = engine
        self._public_key = public_key

    def verify(self, payload: Payload, signature: str) -> None:
        if not self._engine._verify(self._public_key, _as_bytes(payload), signature):
            raise InvalidSignatureError("Invalid signature")


def find_key(member: MemberRecord, key_id: str) -> Key:
    """Public key of a member by id.

    Raises:
        KeyNotFoundError: The member has no key with that id
    """
    for key in member.keys:
        if key.id == key_id:
            return key
    raise KeyNotFoundError(f"Member {member.id} has no key with id: {key_id}")


def verify_signature(
    member: MemberRecord,
    payload: Payload,
    signature: Signature,
    verifier_factory: Callable[[Key], Verifier]
) -> None:
    """Verify a signature against the member key it names.

    Args:
        member: Member that made the signature
        payload: Signed payload
        signature: Signature carrying the key id
        verifier_factory: Creates a verifier for a public key

    Raises:
        KeyNotFoundError: The key id is not one of the member's keys
        InvalidSignatureError: Verification failed
    """
    key = find_key(member, signature.key_id)
    verifier_factory(key).verify(payload, signature.signature)


class KeyStoreCryptoEngineFactory(CryptoEngineFactory):
    """Factory for a ``KeyStoreCryptoEngine`` subclass sharing one key store."""

    def __init__(self, engine_class: Type[KeyStoreCryptoEngine], key_store: KeyStore):
        self.engine_class = engine_class
        self.key_store = key_store

    def create(self, member_id: str) -> CryptoEngine:
        return self.engine_class(member_id, self.key_store)

    def create_verifier(self, key: Key) -> Verifier:
        return self.engine_class("", self.key_store).verifier_for(key.public_key)
