"""
Claimable balance claimants and their predicate trees.

Predicates are frozen dataclasses, so a sub-tree can be reused in several
places by value.
"""

from dataclasses import dataclass
from typing import Optional, Union

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import account_id_from_xdr, account_id_to_xdr
from stellar_baselib.exceptions import InvalidFieldError

MAX_INT64 = 2**63 - 1


@dataclass(frozen=True)
class Unconditional:
    pass


@dataclass(frozen=True)
class And:
    left: "ClaimPredicate"
    right: "ClaimPredicate"


@dataclass(frozen=True)
class Or:
    left: "ClaimPredicate"
    right: "ClaimPredicate"


@dataclass(frozen=True)
class Not:
    predicate: "ClaimPredicate"


@dataclass(frozen=True)
class BeforeAbsoluteTime:
    """Claimable while close time is before ``epoch_seconds``."""
    epoch_seconds: int


@dataclass(frozen=True)
class BeforeRelativeTime:
    """Claimable for ``seconds`` after the balance was created."""
    seconds: int


ClaimPredicate = Union[
    Unconditional, And, Or, Not, BeforeAbsoluteTime, BeforeRelativeTime
]


def _check_int64(value: Union[int, str], name: str) -> int:
    if isinstance(value, str):
        digits = value[1:] if value.startswith("-") else value
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidFieldError(f"{name} must be an integer")
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldError(f"{name} must be an integer")
    if not -MAX_INT64 - 1 <= value <= MAX_INT64:
        raise InvalidFieldError(f"{name} does not fit in an int64")
    return value


# =============================================================================
# Predicate constructors
# =============================================================================

def predicate_unconditional() -> ClaimPredicate:
    return Unconditional()


def predicate_and(left: ClaimPredicate, right: ClaimPredicate) -> ClaimPredicate:
    return And(left, right)


def predicate_or(left: ClaimPredicate, right: ClaimPredicate) -> ClaimPredicate:
    return Or(left, right)


def predicate_not(predicate: ClaimPredicate) -> ClaimPredicate:
    return Not(predicate)


def predicate_before_absolute_time(epoch_seconds: Union[int, str]) -> ClaimPredicate:
    return BeforeAbsoluteTime(_check_int64(epoch_seconds, "absBefore"))


def predicate_before_relative_time(seconds: Union[int, str]) -> ClaimPredicate:
    return BeforeRelativeTime(_check_int64(seconds, "relBefore"))


# =============================================================================
# XDR conversion
# =============================================================================

def predicate_to_xdr(predicate: ClaimPredicate) -> stellar_xdr.ClaimPredicate:
    """Convert a predicate tree into its XDR form."""
    types = stellar_xdr.ClaimPredicateType
    if isinstance(predicate, Unconditional):
        return stellar_xdr.ClaimPredicate(types.CLAIM_PREDICATE_UNCONDITIONAL)
    if isinstance(predicate, And):
        return stellar_xdr.ClaimPredicate(
            types.CLAIM_PREDICATE_AND,
            and_predicates=[
                predicate_to_xdr(predicate.left),
                predicate_to_xdr(predicate.right),
            ],
        )
    if isinstance(predicate, Or):
        return stellar_xdr.ClaimPredicate(
            types.CLAIM_PREDICATE_OR,
            or_predicates=[
                predicate_to_xdr(predicate.left),
                predicate_to_xdr(predicate.right),
            ],
        )
    if isinstance(predicate, Not):
        return stellar_xdr.ClaimPredicate(
            types.CLAIM_PREDICATE_NOT,
            not_predicate=predicate_to_xdr(predicate.predicate),
        )
    if isinstance(predicate, BeforeAbsoluteTime):
        return stellar_xdr.ClaimPredicate(
            types.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME,
            abs_before=stellar_xdr.Int64(predicate.epoch_seconds),
        )
    if isinstance(predicate, BeforeRelativeTime):
        return stellar_xdr.ClaimPredicate(
            types.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME,
            rel_before=stellar_xdr.Int64(predicate.seconds),
        )
    raise InvalidFieldError(f"Unknown claim predicate: {predicate!r}")


def predicate_from_xdr(xdr_object: stellar_xdr.ClaimPredicate) -> ClaimPredicate:
    """Convert an XDR predicate back into a predicate tree."""
    types = stellar_xdr.ClaimPredicateType
    kind = xdr_object.type
    if kind == types.CLAIM_PREDICATE_UNCONDITIONAL:
        return Unconditional()
    if kind == types.CLAIM_PREDICATE_AND:
        left, right = xdr_object.and_predicates
        return And(predicate_from_xdr(left), predicate_from_xdr(right))
    if kind == types.CLAIM_PREDICATE_OR:
        left, right = xdr_object.or_predicates
        return Or(predicate_from_xdr(left), predicate_from_xdr(right))
    if kind == types.CLAIM_PREDICATE_NOT:
        return Not(predicate_from_xdr(xdr_object.not_predicate))
    if kind == types.CLAIM_PREDICATE_BEFORE_ABSOLUTE_TIME:
        return BeforeAbsoluteTime(xdr_object.abs_before.int64)
    if kind == types.CLAIM_PREDICATE_BEFORE_RELATIVE_TIME:
        return BeforeRelativeTime(xdr_object.rel_before.int64)
    raise InvalidFieldError(f"Unknown claim predicate type: {kind}")


@dataclass(frozen=True)
class Claimant:
    """
    A claimable balance recipient.

    Attributes:
        destination: G... address allowed to claim
        predicate: Condition under which the claim is valid
    """

    destination: str
    predicate: ClaimPredicate = Unconditional()

    def __post_init__(self):
        # Validates the destination address
        account_id_to_xdr(self.destination)

    def to_xdr_object(self) -> stellar_xdr.Claimant:
        return stellar_xdr.Claimant(
            stellar_xdr.ClaimantType.CLAIMANT_TYPE_V0,
            v0=stellar_xdr.ClaimantV0(
                destination=account_id_to_xdr(self.destination),
                predicate=predicate_to_xdr(self.predicate),
            ),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.Claimant) -> "Claimant":
        if xdr_object.type != stellar_xdr.ClaimantType.CLAIMANT_TYPE_V0:
            raise InvalidFieldError(f"Invalid claimant type: {xdr_object.type}")
        return cls(
            destination=account_id_from_xdr(xdr_object.v0.destination),
            predicate=predicate_from_xdr(xdr_object.v0.predicate),
        )
