"""
Core domain values.

Addresses, assets, liquidity pools, accounts, contracts, memos, claimants
and signer keys in their canonical forms.
"""

from stellar_baselib.core.account import Account, AccountSnapshot, MuxedAccount
from stellar_baselib.core.address import (
    Address,
    decode_muxed_address,
    encode_muxed_address,
    extract_base_address,
)
from stellar_baselib.core.asset import Asset, asset_order, encode_asset_code
from stellar_baselib.core.claimant import Claimant
from stellar_baselib.core.contract import Contract
from stellar_baselib.core.liquidity_pool import (
    LiquidityPoolAsset,
    LiquidityPoolId,
    LiquidityPoolParameters,
    canonical_pool_id,
)
from stellar_baselib.core.memo import Memo, MemoType

__all__ = [
    "Account",
    "AccountSnapshot",
    "MuxedAccount",
    "Address",
    "decode_muxed_address",
    "encode_muxed_address",
    "extract_base_address",
    "Asset",
    "asset_order",
    "encode_asset_code",
    "Claimant",
    "Contract",
    "LiquidityPoolAsset",
    "LiquidityPoolId",
    "LiquidityPoolParameters",
    "canonical_pool_id",
    "Memo",
    "MemoType",
]
