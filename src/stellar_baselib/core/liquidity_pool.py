"""
Liquidity pool parameters and pool-share assets.

A constant-product pool is identified by the SHA-256 of its XDR
parameters; the parameters themselves must already be canonical.
"""

import re

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.asset import Asset
from stellar_baselib.exceptions import (
    InvalidFeeError,
    InvalidFieldError,
    InvalidOrderError,
)
from stellar_baselib.hashing import sha256

LIQUIDITY_POOL_FEE_V18 = 30
LIQUIDITY_POOL_TYPE_CONSTANT_PRODUCT = "constant_product"
ASSET_TYPE_POOL_SHARE = "liquidity_pool_shares"

_POOL_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


class LiquidityPoolParameters:
    """
    Ordered asset pair plus fee of a constant-product pool.

    Construction never reorders: unordered assets fail with
    InvalidOrderError and any fee other than 30 fails with InvalidFeeError.
    """

    __slots__ = ("_asset_a", "_asset_b", "_fee")

    def __init__(self, asset_a: Asset, asset_b: Asset, fee: int = LIQUIDITY_POOL_FEE_V18):
        if Asset.compare(asset_a, asset_b) != -1:
            raise InvalidOrderError("Assets are not in lexicographic order")
        if fee != LIQUIDITY_POOL_FEE_V18:
            raise InvalidFeeError("fee is invalid")
        object.__setattr__(self, "_asset_a", asset_a)
        object.__setattr__(self, "_asset_b", asset_b)
        object.__setattr__(self, "_fee", fee)

    def __setattr__(self, name, value):
        raise AttributeError("LiquidityPoolParameters is immutable")

    @property
    def asset_a(self) -> Asset:
        return self._asset_a

    @property
    def asset_b(self) -> Asset:
        return self._asset_b

    @property
    def fee(self) -> int:
        return self._fee

    def to_xdr_object(self) -> stellar_xdr.LiquidityPoolParameters:
        return stellar_xdr.LiquidityPoolParameters(
            stellar_xdr.LiquidityPoolType.LIQUIDITY_POOL_CONSTANT_PRODUCT,
            constant_product=stellar_xdr.LiquidityPoolConstantProductParameters(
                asset_a=self._asset_a.to_xdr_object(),
                asset_b=self._asset_b.to_xdr_object(),
                fee=stellar_xdr.Int32(self._fee),
            ),
        )

    @classmethod
    def from_xdr_object(
        cls, xdr_object: stellar_xdr.LiquidityPoolParameters
    ) -> "LiquidityPoolParameters":
        params = xdr_object.constant_product
        return cls(
            Asset.from_xdr_object(params.asset_a),
            Asset.from_xdr_object(params.asset_b),
            params.fee.int32,
        )

    def __eq__(self, other) -> bool:
        if isinstance(other, LiquidityPoolParameters):
            return (
                self._asset_a == other._asset_a
                and self._asset_b == other._asset_b
                and self._fee == other._fee
            )
        return NotImplemented

    def __hash__(self):
        return hash((self._asset_a, self._asset_b, self._fee))

    def __repr__(self) -> str:
        return (
            f"LiquidityPoolParameters(asset_a={self._asset_a!r}, "
            f"asset_b={self._asset_b!r}, fee={self._fee})"
        )


def canonical_pool_id(
    params: LiquidityPoolParameters,
    pool_type: str = LIQUIDITY_POOL_TYPE_CONSTANT_PRODUCT,
) -> bytes:
    """
    Compute the raw pool id for a set of pool parameters.

    The XDR union encodes the pool-type discriminant followed by the
    constant-product parameters, so its bytes are exactly
    ``discriminant || serialize(params)``.

    Args:
        params: Canonical pool parameters
        pool_type: Pool type name; only "constant_product" exists

    Returns:
        32-byte pool id
    """
    if pool_type != LIQUIDITY_POOL_TYPE_CONSTANT_PRODUCT:
        raise InvalidFieldError("liquidityPoolType is invalid")
    if Asset.compare(params.asset_a, params.asset_b) != -1:
        raise InvalidOrderError("Assets are not in lexicographic order")
    if params.fee != LIQUIDITY_POOL_FEE_V18:
        raise InvalidFeeError("fee is invalid")
    return sha256(params.to_xdr_object().to_xdr_bytes())


class LiquidityPoolAsset:
    """
    Pool-share asset as used in change-trust operations.

    Attributes:
        parameters: The pool's canonical parameters
    """

    def __init__(self, asset_a: Asset, asset_b: Asset, fee: int = LIQUIDITY_POOL_FEE_V18):
        self.parameters = LiquidityPoolParameters(asset_a, asset_b, fee)

    @property
    def asset_type(self) -> str:
        return ASSET_TYPE_POOL_SHARE

    @property
    def liquidity_pool_id(self) -> str:
        """Hex pool id."""
        return canonical_pool_id(self.parameters).hex()

    def to_xdr_object(self) -> stellar_xdr.ChangeTrustAsset:
        return stellar_xdr.ChangeTrustAsset(
            stellar_xdr.AssetType.ASSET_TYPE_POOL_SHARE,
            liquidity_pool=self.parameters.to_xdr_object(),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.ChangeTrustAsset) -> "LiquidityPoolAsset":
        if xdr_object.type != stellar_xdr.AssetType.ASSET_TYPE_POOL_SHARE:
            raise InvalidFieldError("Invalid asset type")
        params = LiquidityPoolParameters.from_xdr_object(xdr_object.liquidity_pool)
        return cls(params.asset_a, params.asset_b, params.fee)

    def __eq__(self, other) -> bool:
        if isinstance(other, LiquidityPoolAsset):
            return self.parameters == other.parameters
        return NotImplemented

    def __hash__(self):
        return hash(self.parameters)

    def __str__(self) -> str:
        return f"liquidity_pool:{self.liquidity_pool_id}"


class LiquidityPoolId:
    """
    Pool-share asset as used in trust-line entries, identified by pool id.

    Attributes:
        liquidity_pool_id: 64-character hex pool id
    """

    def __init__(self, liquidity_pool_id: str):
        if not liquidity_pool_id:
            raise InvalidFieldError("liquidityPoolId cannot be empty")
        if not _POOL_ID_PATTERN.match(liquidity_pool_id):
            raise InvalidFieldError("Liquidity pool ID is not a valid hash")
        self.liquidity_pool_id = liquidity_pool_id.lower()

    @property
    def asset_type(self) -> str:
        return ASSET_TYPE_POOL_SHARE

    def to_xdr_object(self) -> stellar_xdr.TrustLineAsset:
        return stellar_xdr.TrustLineAsset(
            stellar_xdr.AssetType.ASSET_TYPE_POOL_SHARE,
            liquidity_pool_id=stellar_xdr.PoolID(
                stellar_xdr.Hash(bytes.fromhex(self.liquidity_pool_id))
            ),
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.TrustLineAsset) -> "LiquidityPoolId":
        if xdr_object.type != stellar_xdr.AssetType.ASSET_TYPE_POOL_SHARE:
            raise InvalidFieldError("Invalid asset type")
        return cls(xdr_object.liquidity_pool_id.pool_id.hash.hex())

    def __eq__(self, other) -> bool:
        if isinstance(other, LiquidityPoolId):
            return self.liquidity_pool_id == other.liquidity_pool_id
        return NotImplemented

    def __hash__(self):
        return hash(self.liquidity_pool_id)

    def __str__(self) -> str:
        return f"liquidity_pool:{self.liquidity_pool_id}"
