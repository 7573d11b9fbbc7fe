"""
Keypair - Ed25519 keys, signatures and signature hints.

A keypair always has a public key. It can sign only when it also holds the
32-byte seed.
"""

import secrets
from typing import Optional

import structlog

from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.strkey import StrKey

from stellar_baselib.core.address import encode_muxed_account, raw_public_key_to_xdr
from stellar_baselib.crypto.backend import SigningBackend, get_signing_backend
from stellar_baselib.exceptions import (
    InvalidAddressError,
    InvalidFieldError,
    KeyMismatchError,
    NoSecretKeyError,
)
from stellar_baselib.hashing import sha256

logger = structlog.get_logger(__name__)

SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
HINT_LENGTH = 4


class Keypair:
    """
    An Ed25519 keypair.

    Prefer the ``from_*`` constructors over calling ``__init__`` directly.

    Attributes:
        backend: Signing backend used for derivation, signing and verification
    """

    def __init__(
        self,
        public_key: Optional[bytes] = None,
        seed: Optional[bytes] = None,
        backend: Optional[SigningBackend] = None,
    ):
        """
        Create a keypair from raw key material.

        Args:
            public_key: Raw 32-byte public key
            seed: Raw 32-byte seed; the public key is derived from it
            backend: Signing backend (defaults to the shared one)

        Raises:
            KeyMismatchError: If ``public_key`` differs from the seed-derived key
        """
        self.backend = backend or get_signing_backend()

        if seed is not None:
            seed = bytes(seed)
            if len(seed) != SEED_LENGTH:
                raise InvalidFieldError(
                    f"Invalid seed length: expected {SEED_LENGTH} bytes, got {len(seed)}"
                )
            derived = self.backend.derive_public_key(seed)
            if public_key is not None and bytes(public_key) != derived:
                raise KeyMismatchError("secretKey does not match publicKey")
            public_key = derived
        elif public_key is None:
            raise InvalidFieldError("A public key or a seed is required")

        public_key = bytes(public_key)
        if len(public_key) != PUBLIC_KEY_LENGTH:
            raise InvalidFieldError(
                f"Invalid public key length: expected {PUBLIC_KEY_LENGTH} bytes, "
                f"got {len(public_key)}"
            )
        self._public_key = public_key
        self._seed = seed

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_secret(cls, secret: str, backend: Optional[SigningBackend] = None) -> "Keypair":
        """Create a keypair from an S... secret seed."""
        try:
            seed = StrKey.decode_ed25519_secret_seed(secret)
        except ValueError:
            raise InvalidAddressError("Invalid secret seed")
        return cls(seed=seed, backend=backend)

    @classmethod
    def from_public_key(
        cls, public_key: str, backend: Optional[SigningBackend] = None
    ) -> "Keypair":
        """Create a verify-only keypair from a G... address."""
        try:
            raw = StrKey.decode_ed25519_public_key(public_key)
        except ValueError:
            raise InvalidAddressError(f"Invalid public key: {public_key}")
        return cls(public_key=raw, backend=backend)

    @classmethod
    def from_raw_ed25519_seed(
        cls, seed: bytes, backend: Optional[SigningBackend] = None
    ) -> "Keypair":
        return cls(seed=seed, backend=backend)

    @classmethod
    def from_raw_public_key(
        cls, public_key: bytes, backend: Optional[SigningBackend] = None
    ) -> "Keypair":
        return cls(public_key=public_key, backend=backend)

    @classmethod
    def random(cls, backend: Optional[SigningBackend] = None) -> "Keypair":
        return cls(seed=secrets.token_bytes(SEED_LENGTH), backend=backend)

    @classmethod
    def master(
        cls, network_passphrase: str, backend: Optional[SigningBackend] = None
    ) -> "Keypair":
        """
        Network master keypair, seeded with the SHA-256 of the passphrase.

        This key is publicly derivable and only meaningful for network
        genesis scenarios.
        """
        return cls(seed=sha256(network_passphrase), backend=backend)

    # -------------------------------------------------------------------------
    # Key views
    # -------------------------------------------------------------------------

    @property
    def public_key(self) -> str:
        """G... address."""
        return StrKey.encode_ed25519_public_key(self._public_key)

    @property
    def secret(self) -> str:
        """S... secret seed."""
        if self._seed is None:
            raise NoSecretKeyError("no secret key available")
        return StrKey.encode_ed25519_secret_seed(self._seed)

    @property
    def raw_public_key(self) -> bytes:
        return self._public_key

    @property
    def raw_secret_key(self) -> bytes:
        if self._seed is None:
            raise NoSecretKeyError("no secret key available")
        return self._seed

    def can_sign(self) -> bool:
        return self._seed is not None

    def xdr_account_id(self) -> stellar_xdr.AccountID:
        return raw_public_key_to_xdr(self._public_key)

    def xdr_public_key(self) -> stellar_xdr.PublicKey:
        return self.xdr_account_id().account_id

    def xdr_muxed_account(self, muxed_id: Optional[int] = None) -> stellar_xdr.MuxedAccount:
        """XDR muxed account for this key, plain when ``muxed_id`` is None."""
        if muxed_id is None:
            return stellar_xdr.MuxedAccount(
                stellar_xdr.CryptoKeyType.KEY_TYPE_ED25519,
                ed25519=stellar_xdr.Uint256(self._public_key),
            )
        return encode_muxed_account(self.public_key, muxed_id)

    # -------------------------------------------------------------------------
    # Signing
    # -------------------------------------------------------------------------

    def signature_hint(self) -> bytes:
        """Last 4 bytes of the XDR-encoded account id."""
        return self.xdr_account_id().to_xdr_bytes()[-HINT_LENGTH:]

    def sign(self, data: bytes) -> bytes:
        """
        Sign ``data``.

        Args:
            data: Bytes to sign

        Returns:
            64-byte Ed25519 signature

        Raises:
            NoSecretKeyError: If the keypair has no seed
        """
        if self._seed is None:
            raise NoSecretKeyError(
                "cannot sign: no secret key available"
            )
        return self.backend.sign(self._seed, bytes(data))

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Check a signature; malformed input simply fails verification."""
        if not isinstance(signature, (bytes, bytearray)) or len(signature) != 64:
            return False
        return self.backend.verify(self._public_key, bytes(data), bytes(signature))

    def sign_decorated(self, data: bytes) -> stellar_xdr.DecoratedSignature:
        signature = self.sign(data)
        return stellar_xdr.DecoratedSignature(
            hint=stellar_xdr.SignatureHint(self.signature_hint()),
            signature=stellar_xdr.Signature(signature),
        )

    def sign_payload_decorated(self, data: bytes) -> stellar_xdr.DecoratedSignature:
        """
        Sign ``data`` for an ed25519 signed-payload signer.

        The hint is the key hint XORed with the last 4 bytes of the payload,
        zero-padded on the right when the payload is shorter.
        """
        signature = self.sign(data)
        payload_tail = bytes(data[-HINT_LENGTH:]).ljust(HINT_LENGTH, b"\x00")
        hint = bytes(a ^ b for a, b in zip(self.signature_hint(), payload_tail))
        return stellar_xdr.DecoratedSignature(
            hint=stellar_xdr.SignatureHint(hint),
            signature=stellar_xdr.Signature(signature),
        )

    def __eq__(self, other) -> bool:
        if isinstance(other, Keypair):
            return self._public_key == other._public_key and self._seed == other._seed
        return NotImplemented

    def __hash__(self):
        return hash(self._public_key)

    def __repr__(self) -> str:
        return f"Keypair(public_key={self.public_key!r}, can_sign={self.can_sign()})"
