"""
Cryptography module.

Keypairs and the Ed25519 backends they sign with.
"""

from stellar_baselib.crypto.backend import (
    CryptographySigningBackend,
    NaclSigningBackend,
    SigningBackend,
    get_signing_backend,
)
from stellar_baselib.crypto.keypair import Keypair

__all__ = [
    "CryptographySigningBackend",
    "NaclSigningBackend",
    "SigningBackend",
    "get_signing_backend",
    "Keypair",
]
