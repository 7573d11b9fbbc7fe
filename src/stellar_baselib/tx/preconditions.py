"""
Transaction preconditions.

Resolves the validity constraints set on a builder into the smallest XDR
precondition variant that carries them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.signer_key import decode_address, encode_signer_key
from stellar_baselib.exceptions import InvalidFieldError

MAX_UINT32 = 2**32 - 1
MAX_UINT64 = 2**64 - 1
MAX_INT64 = 2**63 - 1
MAX_EXTRA_SIGNERS = 2


def _check_range(value: int, upper: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= upper:
        raise InvalidFieldError(f"{name} must be an integer between 0 and {upper}")
    return value


@dataclass(frozen=True)
class TimeBounds:
    """
    Close-time window in UNIX seconds. A max_time of 0 means unbounded.
    """

    min_time: int = 0
    max_time: int = 0

    def __post_init__(self):
        _check_range(self.min_time, MAX_UINT64, "min_time")
        _check_range(self.max_time, MAX_UINT64, "max_time")
        if self.max_time and self.min_time > self.max_time:
            raise InvalidFieldError("min_time cannot be greater than max_time")

    def to_xdr_object(self) -> stellar_xdr.TimeBounds:
        return stellar_xdr.TimeBounds(
            min_time=stellar_xdr.TimePoint(stellar_xdr.Uint64(self.min_time)),
            max_time=stellar_xdr.TimePoint(stellar_xdr.Uint64(self.max_time)),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.TimeBounds) -> "TimeBounds":
        return cls(
            min_time=xdr_object.min_time.time_point.uint64,
            max_time=xdr_object.max_time.time_point.uint64,
        )


@dataclass(frozen=True)
class LedgerBounds:
    """Ledger-number window. A max_ledger of 0 means unbounded."""

    min_ledger: int = 0
    max_ledger: int = 0

    def __post_init__(self):
        _check_range(self.min_ledger, MAX_UINT32, "min_ledger")
        _check_range(self.max_ledger, MAX_UINT32, "max_ledger")
        if self.max_ledger and self.min_ledger > self.max_ledger:
            raise InvalidFieldError("min_ledger cannot be greater than max_ledger")

    def to_xdr_object(self) -> stellar_xdr.LedgerBounds:
        return stellar_xdr.LedgerBounds(
            min_ledger=stellar_xdr.Uint32(self.min_ledger),
            max_ledger=stellar_xdr.Uint32(self.max_ledger),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.LedgerBounds) -> "LedgerBounds":
        return cls(
            min_ledger=xdr_object.min_ledger.uint32,
            max_ledger=xdr_object.max_ledger.uint32,
        )


@dataclass(frozen=True)
class PreconditionSet:
    """
    Every constraint a transaction can carry.

    Attributes:
        time_bounds: Close-time window
        ledger_bounds: Ledger-number window
        min_sequence_number: Minimum source sequence, None when unset
        min_sequence_age: Minimum seconds since the source sequence changed
        min_sequence_ledger_gap: Minimum ledgers since the source sequence changed
        extra_signers: Signer key addresses (G, T, X or P) that must also sign
    """

    time_bounds: Optional[TimeBounds] = None
    ledger_bounds: Optional[LedgerBounds] = None
    min_sequence_number: Optional[int] = None
    min_sequence_age: int = 0
    min_sequence_ledger_gap: int = 0
    extra_signers: List[str] = field(default_factory=list)

    def has_v2_constraints(self) -> bool:
        return (
            self.ledger_bounds is not None
            or self.min_sequence_number is not None
            or self.min_sequence_age > 0
            or self.min_sequence_ledger_gap > 0
            or len(self.extra_signers) > 0
        )

    def to_xdr_object(self) -> stellar_xdr.Preconditions:
        """
        Pick the precondition variant.

        Nothing set gives PRECOND_NONE, only time bounds gives PRECOND_TIME,
        anything else gives PRECOND_V2 with zero and empty defaults.
        """
        if not self.has_v2_constraints():
            if self.time_bounds is None:
                return stellar_xdr.Preconditions(stellar_xdr.PreconditionType.PRECOND_NONE)
            return stellar_xdr.Preconditions(
                stellar_xdr.PreconditionType.PRECOND_TIME,
                time_bounds=self.time_bounds.to_xdr_object(),
            )

        min_seq_num = None
        if self.min_sequence_number is not None:
            min_seq_num = stellar_xdr.SequenceNumber(
                stellar_xdr.Int64(self.min_sequence_number)
            )
        return stellar_xdr.Preconditions(
            stellar_xdr.PreconditionType.PRECOND_V2,
            v2=stellar_xdr.PreconditionsV2(
                time_bounds=self.time_bounds.to_xdr_object() if self.time_bounds else None,
                ledger_bounds=self.ledger_bounds.to_xdr_object() if self.ledger_bounds else None,
                min_seq_num=min_seq_num,
                min_seq_age=stellar_xdr.Duration(stellar_xdr.Uint64(self.min_sequence_age)),
                min_seq_ledger_gap=stellar_xdr.Uint32(self.min_sequence_ledger_gap),
                extra_signers=[decode_address(s) for s in self.extra_signers],
            ),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.Preconditions) -> "PreconditionSet":
        kind = xdr_object.type
        if kind == stellar_xdr.PreconditionType.PRECOND_NONE:
            return cls()
        if kind == stellar_xdr.PreconditionType.PRECOND_TIME:
            return cls(time_bounds=TimeBounds.from_xdr_object(xdr_object.time_bounds))
        v2 = xdr_object.v2
        return cls(
            time_bounds=TimeBounds.from_xdr_object(v2.time_bounds) if v2.time_bounds else None,
            ledger_bounds=(
                LedgerBounds.from_xdr_object(v2.ledger_bounds) if v2.ledger_bounds else None
            ),
            min_sequence_number=(
                v2.min_seq_num.sequence_number.int64 if v2.min_seq_num else None
            ),
            min_sequence_age=v2.min_seq_age.duration.uint64,
            min_sequence_ledger_gap=v2.min_seq_ledger_gap.uint32,
            extra_signers=[encode_signer_key(s) for s in v2.extra_signers],
        )
