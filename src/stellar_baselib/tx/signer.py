"""
Transaction Signer - applies one or more keypairs to transactions.

Keys can be loaded from a secret seed, a key file or configuration. Only
signature hints and truncated public keys are ever logged.
"""

from pathlib import Path
from typing import List, Optional

import structlog

from stellar_baselib.config import BaselibConfig, get_config
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.exceptions import NoSecretKeyError
from stellar_baselib.tx.transaction import Transaction

logger = structlog.get_logger(__name__)


class TransactionSigner:
    """
    Holds signing keypairs and signs transactions with all of them.

    Keypairs are applied in the order they were added.
    """

    def __init__(
        self,
        keypairs: Optional[List[Keypair]] = None,
        config: Optional[BaselibConfig] = None,
    ):
        """
        Initialize the transaction signer.

        Args:
            keypairs: Keypairs to sign with; each must hold a secret seed
            config: Configuration used by ``load_from_config``
        """
        self.config = config or get_config()
        self._keypairs: List[Keypair] = []
        for keypair in keypairs or []:
            self.add_keypair(keypair)

    def add_keypair(self, keypair: Keypair) -> None:
        """
        Add a signing keypair.

        Raises:
            NoSecretKeyError: If the keypair cannot sign
        """
        if not keypair.can_sign():
            raise NoSecretKeyError(
                f"keypair {keypair.public_key[:8]}... has no secret key"
            )
        self._keypairs.append(keypair)
        logger.info("signing_key_loaded", public_key=keypair.public_key[:8] + "...")

    def load_key_from_secret(self, secret: str) -> None:
        self.add_keypair(Keypair.from_secret(secret.strip()))

    def load_key_from_file(self, key_path: str) -> None:
        """
        Load a keypair from a file holding an S... secret seed.

        Args:
            key_path: Path to the key file
        """
        path = Path(key_path)
        if not path.exists():
            raise FileNotFoundError(f"Signing key file not found: {key_path}")
        self.load_key_from_secret(path.read_text(encoding="utf-8"))

    def load_from_config(self) -> None:
        """Load the signing key named by configuration."""
        if self.config.signing_key_path:
            self.load_key_from_file(self.config.signing_key_path)
        elif self.config.signing_secret:
            self.load_key_from_secret(self.config.signing_secret.get_secret_value())
        else:
            raise NoSecretKeyError("No signing key configured")

    @property
    def public_keys(self) -> List[str]:
        return [keypair.public_key for keypair in self._keypairs]

    @property
    def is_loaded(self) -> bool:
        """Check if at least one signing key is loaded."""
        return bool(self._keypairs)

    def sign(self, tx: Transaction) -> Transaction:
        """
        Append one decorated signature per keypair to ``tx``.

        Args:
            tx: Transaction to sign

        Returns:
            The same transaction, for chaining
        """
        if not self._keypairs:
            raise NoSecretKeyError("No signing key loaded")

        tx.sign(*self._keypairs)
        logger.debug(
            "transaction_signed",
            tx_hash=tx.hash_hex()[:16] + "...",
            signers=len(self._keypairs),
            signatures=len(tx.signatures),
        )
        return tx
