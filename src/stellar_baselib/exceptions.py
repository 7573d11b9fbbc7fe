"""
Exception hierarchy for stellar-baselib.

Every failure raised by the library derives from StellarBaseError. Each kind
also derives from the closest builtin so callers that only know about
ValueError / AttributeError still catch it.
"""


class StellarBaseError(Exception):
    """Base class for all library errors."""
    pass


class InvalidAddressError(StellarBaseError, ValueError):
    """Raised for a malformed address or an address of the wrong kind."""
    pass


class InvalidAssetCodeError(StellarBaseError, ValueError):
    """Raised when an asset code is empty, too long or not alphanumeric."""
    pass


class MissingIssuerError(StellarBaseError, ValueError):
    """Raised when a non-native asset has no issuer."""
    pass


class InvalidOrderError(StellarBaseError, ValueError):
    """Raised when liquidity pool assets are not in canonical order."""
    pass


class InvalidFeeError(StellarBaseError, ValueError):
    """Raised when a liquidity pool fee is not the protocol constant."""
    pass


class InvalidAmountError(StellarBaseError, ValueError):
    """Raised when an operation amount is out of range or malformed."""
    pass


class InvalidFieldError(StellarBaseError, ValueError):
    """Raised when a field fails validation."""
    pass


class InvalidMemoError(InvalidFieldError):
    """Raised when a memo payload violates its size bounds."""
    pass


class FeeOverflowError(InvalidFieldError):
    """Raised when the total fee does not fit in a uint32."""
    pass


class NoSecretKeyError(StellarBaseError):
    """Raised when signing is attempted with a public-key-only keypair."""
    pass


class KeyMismatchError(StellarBaseError, ValueError):
    """Raised when a supplied public key contradicts the seed-derived one."""
    pass


class SequenceOverflowError(StellarBaseError, OverflowError):
    """Raised when a sequence number does not fit in an int64."""
    pass


class TimeoutConflictError(StellarBaseError):
    """Raised when a timeout would overwrite an explicit max time."""
    pass


class ImmutableStateMutationError(StellarBaseError, AttributeError):
    """Raised on an attempt to modify a built transaction in place."""
    pass
