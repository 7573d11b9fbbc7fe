"""
Configuration management for stellar-baselib.

Supports configuration via environment variables and .env files.
"""

from enum import Enum
from functools import cached_property
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from stellar_baselib.network import Network


class NetworkType(str, Enum):
    """Well-known Stellar networks."""
    PUBLIC = "public"
    TESTNET = "testnet"
    FUTURENET = "futurenet"
    SANDBOX = "sandbox"
    STANDALONE = "standalone"


class SigningBackendType(str, Enum):
    """Ed25519 implementations available for signing."""
    NACL = "nacl"                     # libsodium through PyNaCl
    CRYPTOGRAPHY = "cryptography"     # OpenSSL through cryptography


NETWORK_PASSPHRASES = {
    NetworkType.PUBLIC: Network.PUBLIC,
    NetworkType.TESTNET: Network.TESTNET,
    NetworkType.FUTURENET: Network.FUTURENET,
    NetworkType.SANDBOX: Network.SANDBOX,
    NetworkType.STANDALONE: Network.STANDALONE,
}


class BaselibConfig(BaseSettings):
    """
    Configuration settings for transaction building and signing.

    All settings can be configured via environment variables with the
    STELLAR_BASELIB_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="STELLAR_BASELIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Network settings
    network: NetworkType = Field(
        default=NetworkType.TESTNET,
        description="Stellar network whose passphrase is used for signing"
    )
    network_passphrase: Optional[str] = Field(
        default=None,
        description="Custom network passphrase (overrides network)"
    )

    # Transaction defaults
    base_fee: int = Field(
        default=100,
        ge=100,
        le=2**32 - 1,
        description="Default base fee per operation in stroops"
    )
    default_timeout: int = Field(
        default=0,
        ge=0,
        description="Default transaction timeout in seconds (0 = no timeout)"
    )

    # Signing settings
    signing_backend: SigningBackendType = Field(
        default=SigningBackendType.NACL,
        description="Ed25519 implementation used by keypairs"
    )
    signing_secret: Optional[SecretStr] = Field(
        default=None,
        description="S... secret seed used by TransactionSigner.load_from_config"
    )
    signing_key_path: Optional[str] = Field(
        default=None,
        description="Path to a file holding an S... secret seed"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )

    @property
    def passphrase(self) -> str:
        """Get the effective network passphrase."""
        if self.network_passphrase:
            return self.network_passphrase
        return NETWORK_PASSPHRASES[self.network]

    @cached_property
    def signing_backend_instance(self):
        """Signing backend named by ``signing_backend``, created on first use."""
        from stellar_baselib.crypto.backend import create_signing_backend

        return create_signing_backend(self.signing_backend)


# Global config instance
_config: Optional[BaselibConfig] = None


def get_config() -> BaselibConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = BaselibConfig()
    return _config


def set_config(config: BaselibConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
