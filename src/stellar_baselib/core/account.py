"""
Account State - source accounts and their sequence numbers.

An Account is the only mutable state in the library. The builder's commit
path increments it; the simulation path only ever sees an AccountSnapshot.
"""

from dataclasses import dataclass
from typing import Optional, Union

import structlog

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import (
    decode_account_id,
    decode_muxed_address,
    encode_muxed_account,
    encode_muxed_address,
    is_muxed_address,
    muxed_account_from_address,
    parse_sub_id,
)
from stellar_baselib.exceptions import InvalidAddressError, InvalidFieldError

logger = structlog.get_logger(__name__)


def _parse_sequence(sequence: Union[int, str]) -> int:
    if isinstance(sequence, str):
        if not (sequence.isascii() and sequence.isdigit()):
            raise InvalidFieldError("sequence must be of type string")
        return int(sequence)
    if isinstance(sequence, bool) or not isinstance(sequence, int):
        raise InvalidFieldError("sequence must be of type string")
    if sequence < 0:
        raise InvalidFieldError("sequence must not be negative")
    return sequence


@dataclass(frozen=True)
class AccountSnapshot:
    """
    Read-only view of an account's state at one point in time.

    Attributes:
        account_id: G... address of the base account
        sequence: Current sequence number
        muxed_id: Sub-identifier when taken from a MuxedAccount
    """

    account_id: str
    sequence: int
    muxed_id: Optional[int] = None

    @property
    def address(self) -> str:
        """G... address, or the M... address when muxed."""
        if self.muxed_id is None:
            return self.account_id
        return encode_muxed_address(self.account_id, self.muxed_id)

    def to_xdr_object(self) -> stellar_xdr.MuxedAccount:
        if self.muxed_id is None:
            return muxed_account_from_address(self.account_id)
        return encode_muxed_account(self.account_id, self.muxed_id)


class Account:
    """
    A source account with its current sequence number.

    Attributes:
        account_id: G... address
        sequence: Current sequence number (the last one used on chain)
    """

    def __init__(self, account_id: str, sequence: Union[int, str]):
        if is_muxed_address(account_id):
            raise InvalidAddressError(
                f"{account_id} is an M-address; use MuxedAccount instead"
            )
        decode_account_id(account_id)
        self.account_id = account_id
        self.sequence = _parse_sequence(sequence)

    @property
    def sequence_number(self) -> str:
        """Current sequence number as a decimal string."""
        return str(self.sequence)

    def increment_sequence_number(self) -> None:
        """Advance the sequence number by exactly one."""
        self.sequence += 1
        logger.debug(
            "sequence_incremented",
            account_id=self.account_id[:8] + "...",
            sequence=self.sequence,
        )

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(account_id=self.account_id, sequence=self.sequence)

    def to_xdr_object(self) -> stellar_xdr.MuxedAccount:
        return muxed_account_from_address(self.account_id)

    def __eq__(self, other) -> bool:
        if isinstance(other, Account):
            return self.account_id == other.account_id and self.sequence == other.sequence
        return NotImplemented

    def __repr__(self) -> str:
        return f"Account(account_id={self.account_id!r}, sequence={self.sequence})"


class MuxedAccount:
    """
    A base Account paired with a uint64 sub-identifier.

    The sequence number lives on the base account, so every MuxedAccount
    built on the same base sees the same sequence.
    """

    def __init__(self, base_account: Account, muxed_id: Union[int, str]):
        if not isinstance(base_account, Account):
            raise InvalidAddressError("accountId is invalid")
        self._base = base_account
        self._id = parse_sub_id(muxed_id)
        self._address = encode_muxed_address(base_account.account_id, self._id)

    @classmethod
    def from_address(cls, address: str, sequence: Union[int, str]) -> "MuxedAccount":
        """
        Create a MuxedAccount (and its base Account) from an M... address.

        Args:
            address: M... address
            sequence: Sequence number of the base account
        """
        base_address, muxed_id = decode_muxed_address(address)
        return cls(Account(base_address, sequence), muxed_id)

    def base_account(self) -> Account:
        return self._base

    @property
    def account_id(self) -> str:
        """M... address."""
        return self._address

    @property
    def id(self) -> int:
        return self._id

    def set_id(self, muxed_id: Union[int, str]) -> "MuxedAccount":
        self._id = parse_sub_id(muxed_id)
        self._address = encode_muxed_address(self._base.account_id, self._id)
        return self

    @property
    def sequence(self) -> int:
        return self._base.sequence

    @property
    def sequence_number(self) -> str:
        return self._base.sequence_number

    def increment_sequence_number(self) -> None:
        self._base.increment_sequence_number()

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            account_id=self._base.account_id,
            sequence=self._base.sequence,
            muxed_id=self._id,
        )

    def to_xdr_object(self) -> stellar_xdr.MuxedAccount:
        return encode_muxed_account(self._base.account_id, self._id)

    def equals(self, other: "MuxedAccount") -> bool:
        """Whether both accounts share the same base account id."""
        return self._base.account_id == other.base_account().account_id

    def __repr__(self) -> str:
        return f"MuxedAccount(account_id={self._address!r}, id={self._id})"
