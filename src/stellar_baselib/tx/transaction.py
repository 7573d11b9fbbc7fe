"""
Transaction - an assembled, immutable transaction and its signatures.

The signature base is ``network_id || xdr(TaggedTransaction::Tx(tx))``;
keypairs sign its SHA-256, which is also the transaction hash.
"""

import base64
from typing import Optional, Sequence, Tuple, Union

import structlog

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import muxed_account_to_address
from stellar_baselib.core.memo import Memo
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.exceptions import (
    ImmutableStateMutationError,
    InvalidFieldError,
    NoSecretKeyError,
)
from stellar_baselib.hashing import sha256
from stellar_baselib.network import network_id
from stellar_baselib.tx.preconditions import LedgerBounds, PreconditionSet, TimeBounds
from stellar_baselib.tx.soroban import copy_soroban_data

logger = structlog.get_logger(__name__)

MAX_HASHX_PREIMAGE = 64


class Transaction:
    """
    An unsigned (or partially signed) transaction bound to a network.

    Every field is read-only. Only the signature list grows, through the
    ``sign*`` and ``add_*signature`` methods.

    Attributes:
        network_passphrase: Passphrase mixed into the signature base
        signatures: Decorated signatures collected so far
    """

    def __init__(
        self,
        tx: stellar_xdr.Transaction,
        network_passphrase: str,
        signatures: Optional[Sequence[stellar_xdr.DecoratedSignature]] = None,
    ):
        """
        Args:
            tx: XDR transaction body; copied so later changes to it do not leak in
            network_passphrase: Network passphrase
            signatures: Existing decorated signatures
        """
        if not isinstance(network_passphrase, str) or not network_passphrase:
            raise InvalidFieldError("network passphrase is required")
        body = stellar_xdr.Transaction.from_xdr_bytes(tx.to_xdr_bytes())
        preconditions = PreconditionSet.from_xdr_object(body.cond)

        object.__setattr__(self, "_tx", body)
        object.__setattr__(self, "_preconditions", preconditions)
        object.__setattr__(self, "_memo", Memo.from_xdr_object(body.memo))
        object.__setattr__(self, "network_passphrase", network_passphrase)
        object.__setattr__(self, "signatures", list(signatures or []))

    def __setattr__(self, name, value):
        raise ImmutableStateMutationError(
            f"cannot set {name!r}: transaction is immutable once built"
        )

    def __delattr__(self, name):
        raise ImmutableStateMutationError(
            f"cannot delete {name!r}: transaction is immutable once built"
        )

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    @property
    def source(self) -> str:
        """G... or M... source address."""
        return muxed_account_to_address(self._tx.source_account)

    @property
    def fee(self) -> int:
        return self._tx.fee.uint32

    @property
    def sequence(self) -> str:
        return str(self._tx.seq_num.sequence_number.int64)

    @property
    def operations(self) -> Tuple[stellar_xdr.Operation, ...]:
        """Copies of the operations, in order."""
        return tuple(
            stellar_xdr.Operation.from_xdr_bytes(op.to_xdr_bytes())
            for op in self._tx.operations
        )

    @property
    def memo(self) -> Memo:
        return self._memo

    @property
    def time_bounds(self) -> Optional[TimeBounds]:
        return self._preconditions.time_bounds

    @property
    def ledger_bounds(self) -> Optional[LedgerBounds]:
        return self._preconditions.ledger_bounds

    @property
    def min_account_sequence(self) -> Optional[str]:
        value = self._preconditions.min_sequence_number
        return None if value is None else str(value)

    @property
    def min_account_sequence_age(self) -> int:
        return self._preconditions.min_sequence_age

    @property
    def min_account_sequence_ledger_gap(self) -> int:
        return self._preconditions.min_sequence_ledger_gap

    @property
    def extra_signers(self) -> Tuple[str, ...]:
        return tuple(self._preconditions.extra_signers)

    @property
    def soroban_data(self) -> Optional[stellar_xdr.SorobanTransactionData]:
        if self._tx.ext.v == 1:
            return copy_soroban_data(self._tx.ext.soroban_data)
        return None

    # -------------------------------------------------------------------------
    # Hashing
    # -------------------------------------------------------------------------

    def signature_base(self) -> bytes:
        """
        Bytes whose SHA-256 is signed.

        Returns:
            network_id followed by the XDR TaggedTransaction
        """
        tagged = stellar_xdr.TransactionSignaturePayloadTaggedTransaction(
            stellar_xdr.EnvelopeType.ENVELOPE_TYPE_TX,
            tx=self._tx,
        )
        return network_id(self.network_passphrase) + tagged.to_xdr_bytes()

    def hash(self) -> bytes:
        return sha256(self.signature_base())

    def hash_hex(self) -> str:
        return self.hash().hex()

    # -------------------------------------------------------------------------
    # Signing
    # -------------------------------------------------------------------------

    def sign(self, *keypairs: Keypair) -> None:
        """
        Append one decorated signature per keypair.

        Either every keypair signs or none does.

        Raises:
            NoSecretKeyError: If any keypair cannot sign
        """
        for keypair in keypairs:
            if not keypair.can_sign():
                raise NoSecretKeyError(
                    f"keypair {keypair.public_key[:8]}... has no secret key"
                )
        tx_hash = self.hash()
        for keypair in keypairs:
            self.signatures.append(keypair.sign_decorated(tx_hash))
            logger.debug(
                "transaction_signed",
                tx_hash=tx_hash.hex()[:16] + "...",
                hint=keypair.signature_hint().hex(),
            )

    def sign_hashx(self, preimage: Union[bytes, str]) -> None:
        """
        Add a signature for a sha256-hash (X...) signer.

        Args:
            preimage: Preimage as bytes or hex, at most 64 bytes
        """
        if isinstance(preimage, str):
            try:
                preimage = bytes.fromhex(preimage)
            except ValueError:
                raise InvalidFieldError("preimage is not a hex string")
        if len(preimage) > MAX_HASHX_PREIMAGE:
            raise InvalidFieldError("preimage cannot be longer than 64 bytes")
        self.signatures.append(
            stellar_xdr.DecoratedSignature(
                hint=stellar_xdr.SignatureHint(sha256(preimage)[-4:]),
                signature=stellar_xdr.Signature(bytes(preimage)),
            )
        )

    def add_signature(self, public_key: str, signature: str) -> None:
        """
        Add a base64 signature produced elsewhere, after verifying it.

        Args:
            public_key: G... address of the signer
            signature: Base64-encoded 64-byte signature

        Raises:
            InvalidFieldError: If the signature does not verify
        """
        if not signature:
            raise InvalidFieldError("signature must be a non-empty base64 string")
        try:
            raw = base64.b64decode(signature, validate=True)
        except ValueError:
            raise InvalidFieldError("signature is not valid base64")
        keypair = Keypair.from_public_key(public_key)
        if not keypair.verify(self.hash(), raw):
            raise InvalidFieldError("Invalid signature")
        self.signatures.append(
            stellar_xdr.DecoratedSignature(
                hint=stellar_xdr.SignatureHint(keypair.signature_hint()),
                signature=stellar_xdr.Signature(raw),
            )
        )

    def add_decorated_signature(self, signature: stellar_xdr.DecoratedSignature) -> None:
        self.signatures.append(signature)

    # -------------------------------------------------------------------------
    # Envelope
    # -------------------------------------------------------------------------

    def to_xdr_object(self) -> stellar_xdr.Transaction:
        """Copy of the XDR transaction body."""
        return stellar_xdr.Transaction.from_xdr_bytes(self._tx.to_xdr_bytes())

    def to_envelope(self) -> stellar_xdr.TransactionEnvelope:
        return stellar_xdr.TransactionEnvelope(
            stellar_xdr.EnvelopeType.ENVELOPE_TYPE_TX,
            v1=stellar_xdr.TransactionV1Envelope(
                tx=self.to_xdr_object(),
                signatures=list(self.signatures),
            ),
        )

    def to_envelope_xdr(self) -> str:
        """Base64 XDR of the envelope."""
        return self.to_envelope().to_xdr()

    @classmethod
    def from_envelope_xdr(cls, envelope: str, network_passphrase: str) -> "Transaction":
        """
        Decode a base64 V1 transaction envelope.

        Raises:
            InvalidFieldError: If the input is not a V1 transaction envelope
        """
        try:
            decoded = stellar_xdr.TransactionEnvelope.from_xdr(envelope)
        except Exception as e:
            raise InvalidFieldError(f"Invalid transaction envelope XDR: {e}")
        if decoded.type != stellar_xdr.EnvelopeType.ENVELOPE_TYPE_TX:
            raise InvalidFieldError(
                f"Unsupported envelope type: {decoded.type}"
            )
        return cls(decoded.v1.tx, network_passphrase, decoded.v1.signatures)

    def __eq__(self, other) -> bool:
        if isinstance(other, Transaction):
            return (
                self.network_passphrase == other.network_passphrase
                and self.to_envelope_xdr() == other.to_envelope_xdr()
            )
        return NotImplemented

    def __hash__(self):
        return hash(self.hash())

    def __repr__(self) -> str:
        return (
            f"Transaction(source={self.source!r}, sequence={self.sequence}, "
            f"fee={self.fee}, operations={len(self._tx.operations)}, "
            f"signatures={len(self.signatures)})"
        )
