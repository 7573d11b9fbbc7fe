"""
Operation builders.

Each builder validates its fields and returns a plain XDR Operation with an
optional source account. Amounts are integer stroops.
"""

from typing import List, Optional, Sequence, Union

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import (
    Address,
    account_id_to_xdr,
    muxed_account_from_address,
    muxed_account_to_address,
)
from stellar_baselib.core.asset import Asset
from stellar_baselib.core.claimant import Claimant
from stellar_baselib.core.liquidity_pool import LiquidityPoolAsset
from stellar_baselib.exceptions import InvalidAmountError, InvalidFieldError

MAX_INT64 = 2**63 - 1
MAX_DATA_LENGTH = 64
MAX_CLAIMANTS = 10

AmountLike = Union[int, str]


def _check_amount(amount: AmountLike, name: str = "amount", allow_zero: bool = True) -> int:
    """Validate an amount in stroops and return it as an int."""
    if isinstance(amount, str):
        if not (amount.isascii() and amount.isdigit()):
            raise InvalidAmountError(f"{name} argument must be a non-negative integer string")
        amount = int(amount)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"{name} argument must be an int or str")
    if amount < 0 or amount > MAX_INT64:
        raise InvalidAmountError(f"{name} argument must fit in an int64 and be non-negative")
    if not allow_zero and amount == 0:
        raise InvalidAmountError(f"{name} argument must be greater than zero")
    return amount


def _operation(
    op_type: stellar_xdr.OperationType,
    source: Optional[str],
    **body,
) -> stellar_xdr.Operation:
    return stellar_xdr.Operation(
        source_account=muxed_account_from_address(source) if source else None,
        body=stellar_xdr.OperationBody(op_type, **body),
    )


def operation_source(op: stellar_xdr.Operation) -> Optional[str]:
    """G... or M... source of an operation, if it has one."""
    if op.source_account is None:
        return None
    return muxed_account_to_address(op.source_account)


def set_operation_source(
    op: stellar_xdr.Operation,
    source: Optional[str],
) -> stellar_xdr.Operation:
    """
    Copy of ``op`` with its source replaced.

    Args:
        op: Operation to copy
        source: G... or M... address, or None to clear the source

    Returns:
        New operation; ``op`` itself is unchanged
    """
    updated = stellar_xdr.Operation.from_xdr_bytes(op.to_xdr_bytes())
    updated.source_account = muxed_account_from_address(source) if source else None
    return updated


# =============================================================================
# Builders
# =============================================================================

def create_account(
    destination: str,
    starting_balance: AmountLike,
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """
    Create and fund a new account.

    Args:
        destination: G... address of the new account
        starting_balance: Initial balance in stroops
        source: Optional operation source (G... or M...)
    """
    return _operation(
        stellar_xdr.OperationType.CREATE_ACCOUNT,
        source,
        create_account_op=stellar_xdr.CreateAccountOp(
            destination=account_id_to_xdr(destination),
            starting_balance=stellar_xdr.Int64(
                _check_amount(starting_balance, "startingBalance")
            ),
        ),
    )


def payment(
    destination: str,
    asset: Asset,
    amount: AmountLike,
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """Send ``amount`` stroops of ``asset`` to a G... or M... destination."""
    return _operation(
        stellar_xdr.OperationType.PAYMENT,
        source,
        payment_op=stellar_xdr.PaymentOp(
            destination=muxed_account_from_address(destination),
            asset=asset.to_xdr_object(),
            amount=stellar_xdr.Int64(_check_amount(amount, allow_zero=False)),
        ),
    )


def bump_sequence(bump_to: AmountLike, source: Optional[str] = None) -> stellar_xdr.Operation:
    bump_to = _check_amount(bump_to, "bumpTo")
    return _operation(
        stellar_xdr.OperationType.BUMP_SEQUENCE,
        source,
        bump_sequence_op=stellar_xdr.BumpSequenceOp(
            bump_to=stellar_xdr.SequenceNumber(stellar_xdr.Int64(bump_to))
        ),
    )


def manage_data(
    name: str,
    value: Union[str, bytes, None],
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """
    Set, modify or delete (``value=None``) a data entry.

    Both the name and the value are limited to 64 bytes.
    """
    raw_name = name.encode("utf-8") if isinstance(name, str) else None
    if not raw_name or len(raw_name) > MAX_DATA_LENGTH:
        raise InvalidFieldError("name must be a string, up to 64 characters")
    data_value = None
    if value is not None:
        raw_value = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        if len(raw_value) > MAX_DATA_LENGTH:
            raise InvalidFieldError("value cannot be longer that 64 bytes")
        data_value = stellar_xdr.DataValue(raw_value)
    return _operation(
        stellar_xdr.OperationType.MANAGE_DATA,
        source,
        manage_data_op=stellar_xdr.ManageDataOp(
            data_name=stellar_xdr.String64(raw_name),
            data_value=data_value,
        ),
    )


def change_trust(
    asset: Union[Asset, LiquidityPoolAsset],
    limit: Optional[AmountLike] = None,
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """Create, update or remove (``limit=0``) a trust line."""
    if isinstance(asset, LiquidityPoolAsset):
        line = asset.to_xdr_object()
    elif isinstance(asset, Asset):
        if asset.is_native():
            raise InvalidFieldError("cannot change trust to the native asset")
        line = asset.to_change_trust_xdr_object()
    else:
        raise InvalidFieldError("asset must be an Asset or LiquidityPoolAsset")
    limit = MAX_INT64 if limit is None else _check_amount(limit, "limit")
    return _operation(
        stellar_xdr.OperationType.CHANGE_TRUST,
        source,
        change_trust_op=stellar_xdr.ChangeTrustOp(
            line=line,
            limit=stellar_xdr.Int64(limit),
        ),
    )


def create_claimable_balance(
    asset: Asset,
    amount: AmountLike,
    claimants: Sequence[Claimant],
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """Lock ``amount`` of ``asset`` in a balance claimable by ``claimants``."""
    if not claimants:
        raise InvalidFieldError("must provide at least one claimant")
    if len(claimants) > MAX_CLAIMANTS:
        raise InvalidFieldError(f"at most {MAX_CLAIMANTS} claimants are allowed")
    return _operation(
        stellar_xdr.OperationType.CREATE_CLAIMABLE_BALANCE,
        source,
        create_claimable_balance_op=stellar_xdr.CreateClaimableBalanceOp(
            asset=asset.to_xdr_object(),
            amount=stellar_xdr.Int64(_check_amount(amount, allow_zero=False)),
            claimants=[claimant.to_xdr_object() for claimant in claimants],
        ),
    )


def invoke_contract_function(
    contract: str,
    function_name: str,
    args: Optional[List[stellar_xdr.SCVal]] = None,
    auth: Optional[List[stellar_xdr.SorobanAuthorizationEntry]] = None,
    source: Optional[str] = None,
) -> stellar_xdr.Operation:
    """
    Invoke a function of a deployed contract.

    Arguments and authorization entries are opaque XDR values.

    Args:
        contract: C... contract address
        function_name: Name of the contract function
        args: Function arguments
        auth: Authorization entries, usually filled in from simulation
        source: Optional operation source
    """
    address = Address(contract)
    return _operation(
        stellar_xdr.OperationType.INVOKE_HOST_FUNCTION,
        source,
        invoke_host_function_op=stellar_xdr.InvokeHostFunctionOp(
            host_function=stellar_xdr.HostFunction(
                stellar_xdr.HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT,
                invoke_contract=stellar_xdr.InvokeContractArgs(
                    contract_address=address.to_xdr_sc_address(),
                    function_name=stellar_xdr.SCSymbol(function_name.encode("utf-8")),
                    args=list(args or []),
                ),
            ),
            auth=list(auth or []),
        ),
    )
