"""
Ed25519 signing backends.

Backends hold no state. Keypairs take one by injection, or the one named
by the active configuration.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from stellar_baselib.config import BaselibConfig, SigningBackendType, get_config

logger = structlog.get_logger(__name__)


class SigningBackend(ABC):
    """Ed25519 key derivation, signing and verification."""

    name: str = ""

    @abstractmethod
    def derive_public_key(self, seed: bytes) -> bytes:
        """
        Derive the 32-byte public key for a 32-byte seed.

        Args:
            seed: Raw Ed25519 seed

        Returns:
            Raw public key
        """
        pass

    @abstractmethod
    def sign(self, seed: bytes, data: bytes) -> bytes:
        """Sign ``data`` and return the 64-byte signature."""
        pass

    @abstractmethod
    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        """Return True only for a valid signature; never raises."""
        pass


class NaclSigningBackend(SigningBackend):
    """libsodium through PyNaCl."""

    name = SigningBackendType.NACL.value

    def derive_public_key(self, seed: bytes) -> bytes:
        return bytes(SigningKey(seed).verify_key)

    def sign(self, seed: bytes, data: bytes) -> bytes:
        return SigningKey(seed).sign(data).signature

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        try:
            VerifyKey(public_key).verify(data, signature)
        except (BadSignatureError, ValueError, TypeError):
            return False
        return True


class CryptographySigningBackend(SigningBackend):
    """OpenSSL through the cryptography package."""

    name = SigningBackendType.CRYPTOGRAPHY.value

    def derive_public_key(self, seed: bytes) -> bytes:
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def sign(self, seed: bytes, data: bytes) -> bytes:
        return Ed25519PrivateKey.from_private_bytes(seed).sign(data)

    def verify(self, public_key: bytes, data: bytes, signature: bytes) -> bool:
        try:
            Ed25519PublicKey.from_public_bytes(public_key).verify(signature, data)
        except (InvalidSignature, ValueError, TypeError):
            return False
        return True


_BACKENDS = {
    SigningBackendType.NACL: NaclSigningBackend,
    SigningBackendType.CRYPTOGRAPHY: CryptographySigningBackend,
}


def create_signing_backend(backend_type: SigningBackendType) -> SigningBackend:
    """Instantiate the backend for ``backend_type``."""
    backend = _BACKENDS[SigningBackendType(backend_type)]()
    logger.debug("signing_backend_selected", backend=backend.name)
    return backend


def get_signing_backend(config: Optional[BaselibConfig] = None) -> SigningBackend:
    """
    Get the signing backend named by configuration.

    Args:
        config: Configuration to select from (defaults to the global config)

    Returns:
        The backend for ``config.signing_backend``
    """
    config = config or get_config()
    return config.signing_backend_instance
