"""
Transaction Builder - assembles transactions from a source account.

``build()`` is the commit path: it advances the source account's sequence
number. ``build_for_simulation()`` only reads an AccountSnapshot and never
touches the account.
"""

import time
from typing import Iterable, List, Optional, Union

import structlog

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.config import BaselibConfig, get_config
from stellar_baselib.core.account import Account, AccountSnapshot, MuxedAccount
from stellar_baselib.core.memo import Memo
from stellar_baselib.core.signer_key import decode_address
from stellar_baselib.exceptions import (
    FeeOverflowError,
    InvalidFieldError,
    SequenceOverflowError,
    TimeoutConflictError,
)
from stellar_baselib.tx.preconditions import (
    MAX_EXTRA_SIGNERS,
    MAX_INT64,
    MAX_UINT32,
    MAX_UINT64,
    LedgerBounds,
    PreconditionSet,
    TimeBounds,
)
from stellar_baselib.tx.soroban import SorobanDataBuilder, copy_soroban_data
from stellar_baselib.tx.transaction import Transaction

logger = structlog.get_logger(__name__)

TIMEOUT_INFINITE = 0

SourceAccount = Union[Account, MuxedAccount]


class TransactionBuilder:
    """
    Fluent builder for transactions.

    Example:
        tx = (
            TransactionBuilder(account, Network.TESTNET)
            .fee(100)
            .add_operation(create_account(destination, 10_000_000_000))
            .set_timeout(30)
            .build()
        )
    """

    def __init__(
        self,
        source: SourceAccount,
        network_passphrase: Optional[str] = None,
        time_bounds: Optional[TimeBounds] = None,
        config: Optional[BaselibConfig] = None,
    ):
        """
        Initialize the builder.

        Args:
            source: Account or MuxedAccount whose sequence number is used
            network_passphrase: Network passphrase (defaults to the configured one)
            time_bounds: Initial time bounds
            config: Configuration supplying defaults
        """
        if not isinstance(source, (Account, MuxedAccount)):
            raise InvalidFieldError("source must be an Account or MuxedAccount")
        self.config = config or get_config()
        self.source = source
        self.network_passphrase = network_passphrase or self.config.passphrase

        self._base_fee: int = self.config.base_fee
        self._operations: List[stellar_xdr.Operation] = []
        self._memo: Memo = Memo.none()
        self._time_bounds: Optional[TimeBounds] = time_bounds
        self._ledger_bounds: Optional[LedgerBounds] = None
        self._min_sequence_number: Optional[int] = None
        self._min_sequence_age: int = 0
        self._min_sequence_ledger_gap: int = 0
        self._extra_signers: List[str] = []
        self._soroban_data: Optional[stellar_xdr.SorobanTransactionData] = None

    # -------------------------------------------------------------------------
    # Fee and operations
    # -------------------------------------------------------------------------

    def fee(self, base_fee: int) -> "TransactionBuilder":
        """Set the fee per operation in stroops."""
        if isinstance(base_fee, bool) or not isinstance(base_fee, int):
            raise InvalidFieldError("base fee must be an integer")
        if not 0 <= base_fee <= MAX_UINT32:
            raise InvalidFieldError("base fee must fit in a uint32")
        self._base_fee = base_fee
        return self

    def add_operation(self, operation: stellar_xdr.Operation) -> "TransactionBuilder":
        if not isinstance(operation, stellar_xdr.Operation):
            raise InvalidFieldError("operation must be an xdr.Operation")
        self._operations.append(operation)
        return self

    def add_operations(self, operations: Iterable[stellar_xdr.Operation]) -> "TransactionBuilder":
        for operation in operations:
            self.add_operation(operation)
        return self

    def clear_operations(self) -> "TransactionBuilder":
        self._operations = []
        return self

    # -------------------------------------------------------------------------
    # Memo
    # -------------------------------------------------------------------------

    def add_memo(self, memo: Memo) -> "TransactionBuilder":
        if not isinstance(memo, Memo):
            raise InvalidFieldError("memo must be a Memo")
        self._memo = memo
        return self

    def add_text_memo(self, text: Union[str, bytes]) -> "TransactionBuilder":
        return self.add_memo(Memo.text(text))

    def add_id_memo(self, memo_id: int) -> "TransactionBuilder":
        return self.add_memo(Memo.id(memo_id))

    def add_hash_memo(self, memo_hash: Union[bytes, str]) -> "TransactionBuilder":
        return self.add_memo(Memo.hash(memo_hash))

    def add_return_memo(self, memo_hash: Union[bytes, str]) -> "TransactionBuilder":
        return self.add_memo(Memo.return_hash(memo_hash))

    # -------------------------------------------------------------------------
    # Preconditions
    # -------------------------------------------------------------------------

    def set_timeout(self, timeout: int) -> "TransactionBuilder":
        """
        Bound the transaction's validity to ``timeout`` seconds from now.

        A timeout of 0 means no timeout.

        Raises:
            TimeoutConflictError: If a non-zero max time is already set
            InvalidFieldError: If ``timeout`` is negative
        """
        if self._time_bounds is not None and self._time_bounds.max_time > 0:
            raise TimeoutConflictError(
                "TimeBounds.max_time has been already set - setting timeout would overwrite it."
            )
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
            raise InvalidFieldError("timeout cannot be negative")

        min_time = self._time_bounds.min_time if self._time_bounds else 0
        max_time = int(time.time()) + timeout if timeout > TIMEOUT_INFINITE else 0
        self._time_bounds = TimeBounds(min_time=min_time, max_time=max_time)
        return self

    def set_time_bounds(self, min_time: int, max_time: int) -> "TransactionBuilder":
        self._time_bounds = TimeBounds(min_time=min_time, max_time=max_time)
        return self

    def set_ledger_bounds(self, min_ledger: int, max_ledger: int) -> "TransactionBuilder":
        self._ledger_bounds = LedgerBounds(min_ledger=min_ledger, max_ledger=max_ledger)
        return self

    def set_min_sequence_number(self, min_sequence_number: int) -> "TransactionBuilder":
        if (
            isinstance(min_sequence_number, bool)
            or not isinstance(min_sequence_number, int)
            or not 0 <= min_sequence_number <= MAX_INT64
        ):
            raise InvalidFieldError("min sequence number must fit in an int64")
        self._min_sequence_number = min_sequence_number
        return self

    def set_min_sequence_age(self, seconds: int) -> "TransactionBuilder":
        if isinstance(seconds, bool) or not isinstance(seconds, int) or not 0 <= seconds <= MAX_UINT64:
            raise InvalidFieldError("min sequence age must be a uint64")
        self._min_sequence_age = seconds
        return self

    def set_min_sequence_ledger_gap(self, gap: int) -> "TransactionBuilder":
        if isinstance(gap, bool) or not isinstance(gap, int) or not 0 <= gap <= MAX_UINT32:
            raise InvalidFieldError("min sequence ledger gap must be a uint32")
        self._min_sequence_ledger_gap = gap
        return self

    def add_extra_signer(self, signer_key: str) -> "TransactionBuilder":
        """Require an extra signer (G, T, X or P address)."""
        if len(self._extra_signers) >= MAX_EXTRA_SIGNERS:
            raise InvalidFieldError(f"at most {MAX_EXTRA_SIGNERS} extra signers are allowed")
        decode_address(signer_key)
        self._extra_signers.append(signer_key)
        return self

    # -------------------------------------------------------------------------
    # Soroban data
    # -------------------------------------------------------------------------

    def set_soroban_data(
        self, soroban_data: Union[str, stellar_xdr.SorobanTransactionData]
    ) -> "TransactionBuilder":
        """Attach Soroban resources (object or base64 XDR); stored as a copy."""
        self._soroban_data = SorobanDataBuilder(soroban_data).build()
        return self

    def set_soroban_data_from_base64(self, soroban_data: str) -> "TransactionBuilder":
        self._soroban_data = SorobanDataBuilder.from_xdr(soroban_data)
        return self

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def _preconditions(self) -> PreconditionSet:
        return PreconditionSet(
            time_bounds=self._time_bounds,
            ledger_bounds=self._ledger_bounds,
            min_sequence_number=self._min_sequence_number,
            min_sequence_age=self._min_sequence_age,
            min_sequence_ledger_gap=self._min_sequence_ledger_gap,
            extra_signers=list(self._extra_signers),
        )

    def _assemble(self, snapshot: AccountSnapshot) -> Transaction:
        """
        Assemble a transaction from a read-only view of the source account.

        The transaction's sequence number is ``snapshot.sequence + 1``.
        """
        if not self._operations:
            raise InvalidFieldError("At least one operation required")

        sequence = snapshot.sequence + 1
        if sequence > MAX_INT64:
            raise SequenceOverflowError(
                f"sequence number {sequence} does not fit in an int64"
            )

        total_fee = self._base_fee * len(self._operations)
        if total_fee > MAX_UINT32:
            raise FeeOverflowError(
                f"total fee {total_fee} does not fit in a uint32 "
                f"({self._base_fee} x {len(self._operations)} operations)"
            )

        if self._soroban_data is not None:
            ext = stellar_xdr.TransactionExt(1, soroban_data=copy_soroban_data(self._soroban_data))
        else:
            ext = stellar_xdr.TransactionExt(0)

        tx = stellar_xdr.Transaction(
            source_account=snapshot.to_xdr_object(),
            fee=stellar_xdr.Uint32(total_fee),
            seq_num=stellar_xdr.SequenceNumber(stellar_xdr.Int64(sequence)),
            cond=self._preconditions().to_xdr_object(),
            memo=self._memo.to_xdr_object(),
            operations=list(self._operations),
            ext=ext,
        )
        return Transaction(tx, self.network_passphrase)

    def build(self) -> Transaction:
        """
        Build the transaction and advance the source account's sequence.

        Everything is validated before the account is touched, so a failed
        build leaves the sequence number unchanged.

        Returns:
            Unsigned transaction using the post-increment sequence number

        Raises:
            InvalidFieldError: If no operation was added
            FeeOverflowError: If the total fee does not fit in a uint32
            SequenceOverflowError: If the next sequence does not fit in an int64
        """
        transaction = self._assemble(self.source.snapshot())
        self.source.increment_sequence_number()

        logger.info(
            "transaction_built",
            source=transaction.source[:8] + "...",
            sequence=transaction.sequence,
            fee=transaction.fee,
            operations=len(transaction.operations),
        )
        return transaction

    def build_for_simulation(self) -> Transaction:
        """
        Build the transaction without touching the source account.

        Returns:
            Unsigned transaction with sequence ``current + 1``
        """
        transaction = self._assemble(self.source.snapshot())
        logger.debug(
            "simulation_transaction_built",
            source=transaction.source[:8] + "...",
            sequence=transaction.sequence,
        )
        return transaction
