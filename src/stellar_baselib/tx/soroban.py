"""
Soroban transaction data.

Resource limits, resource fee and ledger footprint attached to
contract-invoking transactions.
"""

from typing import List, Optional, Union

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.exceptions import InvalidAmountError, InvalidFieldError

MAX_UINT32 = 2**32 - 1
MAX_INT64 = 2**63 - 1


def empty_soroban_data() -> stellar_xdr.SorobanTransactionData:
    """SorobanTransactionData with zero resources and an empty footprint."""
    return stellar_xdr.SorobanTransactionData(
        ext=stellar_xdr.ExtensionPoint(0),
        resources=stellar_xdr.SorobanResources(
            footprint=stellar_xdr.LedgerFootprint(read_only=[], read_write=[]),
            instructions=stellar_xdr.Uint32(0),
            read_bytes=stellar_xdr.Uint32(0),
            write_bytes=stellar_xdr.Uint32(0),
        ),
        resource_fee=stellar_xdr.Int64(0),
    )


def copy_soroban_data(
    data: stellar_xdr.SorobanTransactionData,
) -> stellar_xdr.SorobanTransactionData:
    return stellar_xdr.SorobanTransactionData.from_xdr_bytes(data.to_xdr_bytes())


def _check_uint32(value: int, name: str) -> stellar_xdr.Uint32:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_UINT32:
        raise InvalidFieldError(f"{name} must be a uint32")
    return stellar_xdr.Uint32(value)


class SorobanDataBuilder:
    """
    Fluent builder for SorobanTransactionData.

    The builder works on its own copy; ``build()`` hands out another copy,
    so neither the input nor earlier results change afterwards.
    """

    def __init__(
        self,
        soroban_data: Union[None, str, stellar_xdr.SorobanTransactionData] = None,
    ):
        """
        Args:
            soroban_data: Base64 XDR, an existing object, or None to start empty
        """
        if soroban_data is None:
            self._data = empty_soroban_data()
        elif isinstance(soroban_data, str):
            self._data = self.from_xdr(soroban_data)
        elif isinstance(soroban_data, stellar_xdr.SorobanTransactionData):
            self._data = copy_soroban_data(soroban_data)
        else:
            raise InvalidFieldError("expected SorobanTransactionData or base64 XDR")

    @staticmethod
    def from_xdr(data: Union[str, bytes]) -> stellar_xdr.SorobanTransactionData:
        """Decode base64 or raw XDR bytes."""
        try:
            if isinstance(data, str):
                return stellar_xdr.SorobanTransactionData.from_xdr(data)
            return stellar_xdr.SorobanTransactionData.from_xdr_bytes(data)
        except Exception as e:
            raise InvalidFieldError(f"Invalid SorobanTransactionData XDR: {e}")

    def set_resource_fee(self, fee: int) -> "SorobanDataBuilder":
        if isinstance(fee, bool) or not isinstance(fee, int) or not 0 <= fee <= MAX_INT64:
            raise InvalidFieldError("resource fee must be a non-negative int64")
        self._data.resource_fee = stellar_xdr.Int64(fee)
        return self

    def set_resources(
        self, instructions: int, read_bytes: int, write_bytes: int
    ) -> "SorobanDataBuilder":
        resources = self._data.resources
        resources.instructions = _check_uint32(instructions, "instructions")
        resources.read_bytes = _check_uint32(read_bytes, "readBytes")
        resources.write_bytes = _check_uint32(write_bytes, "writeBytes")
        return self

    def set_read_only(self, read_only: List[stellar_xdr.LedgerKey]) -> "SorobanDataBuilder":
        self._data.resources.footprint.read_only = list(read_only)
        return self

    def set_read_write(self, read_write: List[stellar_xdr.LedgerKey]) -> "SorobanDataBuilder":
        self._data.resources.footprint.read_write = list(read_write)
        return self

    def set_footprint(
        self,
        read_only: Optional[List[stellar_xdr.LedgerKey]] = None,
        read_write: Optional[List[stellar_xdr.LedgerKey]] = None,
    ) -> "SorobanDataBuilder":
        """Replace either side of the footprint; None leaves a side alone."""
        if read_only is not None:
            self.set_read_only(read_only)
        if read_write is not None:
            self.set_read_write(read_write)
        return self

    def append_footprint(
        self,
        read_only: Optional[List[stellar_xdr.LedgerKey]] = None,
        read_write: Optional[List[stellar_xdr.LedgerKey]] = None,
    ) -> "SorobanDataBuilder":
        footprint = self._data.resources.footprint
        footprint.read_only = list(footprint.read_only) + list(read_only or [])
        footprint.read_write = list(footprint.read_write) + list(read_write or [])
        return self

    def build(self) -> stellar_xdr.SorobanTransactionData:
        return copy_soroban_data(self._data)


# =============================================================================
# Token amounts
# =============================================================================

def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmountError("decimals must be a non-negative integer")
    return decimals


def _is_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()


def format_token_amount(amount: Union[int, str], decimals: int) -> str:
    """
    Render an integer token amount with ``decimals`` decimal places.

    Trailing fractional zeros are dropped, so ``("1000000000", 7)`` gives
    ``"100"`` and ``("1000000001", 7)`` gives ``"100.0000001"``.

    Args:
        amount: Non-negative amount in the token's smallest unit
        decimals: Number of decimal places of the token

    Raises:
        InvalidAmountError: If the amount is not a non-negative integer
    """
    decimals = _check_decimals(decimals)
    if isinstance(amount, str):
        if "." in amount:
            raise InvalidAmountError("No decimal is allowed")
        if not _is_digits(amount):
            raise InvalidAmountError(f"Invalid token amount: {amount!r}")
        amount = int(amount)
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmountError(f"Invalid token amount: {amount!r}")

    whole, fraction = divmod(amount, 10**decimals)
    fraction_digits = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    if fraction_digits:
        return f"{whole}.{fraction_digits}"
    return str(whole)


def parse_token_amount(value: str, decimals: int) -> str:
    """
    Convert a decimal token amount into its integer form.

    Args:
        value: Decimal string such as ``"100.5"``
        decimals: Number of decimal places of the token

    Returns:
        The amount in the token's smallest unit, as a decimal string

    Raises:
        InvalidAmountError: For malformed input or more fractional digits
            than ``decimals``
    """
    if not isinstance(value, str):
        raise InvalidAmountError(f"Invalid decimal value: {value!r}")
    decimals = _check_decimals(decimals)
    parts = value.split(".")
    if len(parts) > 2:
        raise InvalidAmountError(f"Invalid decimal value: {value}")

    whole = parts[0]
    fraction = parts[1] if len(parts) == 2 else ""
    if not whole and not fraction:
        raise InvalidAmountError(f"Invalid decimal value: {value}")
    if (whole and not _is_digits(whole)) or (fraction and not _is_digits(fraction)):
        raise InvalidAmountError(f"Invalid decimal value: {value}")
    if len(fraction) > decimals:
        raise InvalidAmountError(
            f"Too many decimal places in {value}: at most {decimals} allowed"
        )
    return str(int((whole or "0") + fraction.ljust(decimals, "0")))
