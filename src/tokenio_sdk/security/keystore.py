"""Storage for members' private keys."""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.exceptions import KeyNotFoundError
from ..core.types import Key, KeyLevel


@dataclass(frozen=True)
class SecretKey:
    """Key pair held by the SDK; keys are the engine's encoded strings."""
    id: str
    level: KeyLevel
    public_key: str
    private_key: str
    algorithm: str = "ED25519"
    expires_at_ms: Optional[int] = None

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        if self.expires_at_ms is None:
            return False
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return self.expires_at_ms < now_ms

    def to_public_key(self) -> Key:
        """Public half as registered with the gateway."""
        return Key(
            id=self.id,
            public_key=self.public_key,
            level=self.level,
            algorithm=self.algorithm,
            expires_at_ms=self.expires_at_ms
        )


class KeyStore(ABC):
    """Per-member key storage used by crypto engines."""

    @abstractmethod
    def put(self, member_id: str, key: SecretKey) -> None:
        pass

    @abstractmethod
    def get_by_level(self, member_id: str, level: KeyLevel) -> SecretKey:
        """Newest unexpired key of the given level.

        Raises:
            KeyNotFoundError: No such key
        """
        pass

    @abstractmethod
    def get_by_id(self, member_id: str, key_id: str) -> SecretKey:
        """Key with the given id.

        Raises:
            KeyNotFoundError: No such key, or the key has expired
        """
        pass

    @abstractmethod
    def list_keys(self, member_id: str) -> List[SecretKey]:
        pass

    def delete_keys(self, member_id: str) -> None:
        """Forget all keys of a member."""
        raise NotImplementedError


class InMemoryKeyStore(KeyStore):
    """Key store that lives as long as the process."""

    def __init__(self):
        self._keys: Dict[str, Dict[str, SecretKey]] = {}
        self._lock = threading.Lock()

    def put(self, member_id: str, key: SecretKey) -> None:
        with self._lock:
            self._keys.setdefault(member_id, {})[key.id] = key

    def get_by_level(self, member_id: str, level: KeyLevel) -> SecretKey:
        with self._lock:
            candidates = [
                key for key in self._keys.get(member_id, {}).values()
                if key.level == level and not key.is_expired()
            ]
        if not candidates:
            raise KeyNotFoundError(f"Key not found for level: {level.value}")
        return candidates[-1]

    def get_by_id(self, member_id: str, key_id: str) -> SecretKey:
        with self._lock:
            key = self._keys.get(member_id, {}).get(key_id)
        if key is None:
            raise KeyNotFoundError(f"Key not found for id: {key_id}")
        if key.is_expired():
            raise KeyNotFoundError(f"Key with id: {key_id} has expired")
        return key

    def list_keys(self, member_id: str) -> List[SecretKey]:
        with self._lock:
            return list(self._keys.get(member_id, {}).values())

    def delete_keys(self, member_id: str) -> None:
        with self._lock:
            self._keys.pop(member_id, None)
