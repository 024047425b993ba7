"""
Security module for the Token SDK.

Defines the signing engine interfaces the SDK signs requests and tokens with,
and key storage for engines that keep keys locally.
"""

from .keystore import SecretKey, KeyStore, InMemoryKeyStore
from .engine import (
    Signer,
    Verifier,
    CryptoEngine,
    CryptoEngineFactory,
    KeyStoreCryptoEngine,
    KeyStoreCryptoEngineFactory,
    key_id_for,
    find_key,
    verify_signature,
)

__all__ = [
    "SecretKey",
    "KeyStore",
    "InMemoryKeyStore",
    "Signer",
    "Verifier",
    "CryptoEngine",
    "CryptoEngineFactory",
    "KeyStoreCryptoEngine",
    "KeyStoreCryptoEngineFactory",
    "key_id_for",
    "find_key",
    "verify_signature",
]
