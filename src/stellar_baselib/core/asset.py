"""
Asset model.

Represents the native asset or an issued (code, issuer) asset and defines
the canonical ordering used by liquidity pools.
"""

import re
from functools import total_ordering
from typing import Optional, Union

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import (
    account_id_from_xdr,
    account_id_to_xdr,
    is_valid_account_id,
)
from stellar_baselib.exceptions import (
    InvalidAddressError,
    InvalidAssetCodeError,
    MissingIssuerError,
)

NATIVE_ASSET_CODE = "XLM"

ASSET_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9]{1,12}$")

# Ordering rank of each asset type: native < alphanum4 < alphanum12
ASSET_TYPE_NATIVE = "native"
ASSET_TYPE_CREDIT_ALPHANUM4 = "credit_alphanum4"
ASSET_TYPE_CREDIT_ALPHANUM12 = "credit_alphanum12"
_TYPE_RANK = {
    ASSET_TYPE_NATIVE: 0,
    ASSET_TYPE_CREDIT_ALPHANUM4: 1,
    ASSET_TYPE_CREDIT_ALPHANUM12: 2,
}


def encode_asset_code(code: str, bucket_width: int) -> bytes:
    """
    Right-pad an asset code with NUL bytes to its XDR bucket width.

    Args:
        code: Alphanumeric asset code, 1-12 characters
        bucket_width: 4 or 12

    Returns:
        ASCII bytes of exactly ``bucket_width`` length

    Raises:
        InvalidAssetCodeError: If the code is empty, too long for the
            bucket or contains non-alphanumeric characters
    """
    if bucket_width not in (4, 12):
        raise InvalidAssetCodeError(f"Invalid asset code bucket width: {bucket_width}")
    if not isinstance(code, str) or not ASSET_CODE_PATTERN.match(code):
        raise InvalidAssetCodeError(
            "Asset code is invalid (maximum alphanumeric, 12 characters at max)"
        )
    raw = code.encode("ascii")
    if len(raw) > bucket_width:
        raise InvalidAssetCodeError(
            f"Asset code {code!r} does not fit in a {bucket_width}-byte bucket"
        )
    return raw.ljust(bucket_width, b"\x00")


def decode_asset_code(raw: bytes) -> str:
    """Strip NUL padding from an XDR asset code."""
    return raw.rstrip(b"\x00").decode("ascii")


@total_ordering
class Asset:
    """
    A Stellar asset: native, or a (code, issuer) pair.

    Assets are immutable. Equality and hashing use only (code, issuer);
    ordering follows the protocol's canonical asset order.

    Attributes:
        code: Asset code ("XLM" for native)
        issuer: Issuer G... address, None for native
    """

    __slots__ = ("_code", "_issuer")

    def __init__(self, code: str, issuer: Optional[str] = None):
        if not isinstance(code, str) or not ASSET_CODE_PATTERN.match(code):
            raise InvalidAssetCodeError(
                "Asset code is invalid (maximum alphanumeric, 12 characters at max)"
            )
        is_native = code.lower() == "xlm" and issuer is None
        if not is_native and issuer is None:
            raise MissingIssuerError("Issuer cannot be null")
        if issuer is not None and not is_valid_account_id(issuer):
            raise InvalidAddressError("Issuer is invalid")

        object.__setattr__(self, "_code", NATIVE_ASSET_CODE if is_native else code)
        object.__setattr__(self, "_issuer", issuer)

    def __setattr__(self, name, value):
        raise AttributeError("Asset is immutable")

    @classmethod
    def native(cls) -> "Asset":
        """Create the native asset (XLM)."""
        return cls(NATIVE_ASSET_CODE)

    @property
    def code(self) -> str:
        return self._code

    @property
    def issuer(self) -> Optional[str]:
        return self._issuer

    def is_native(self) -> bool:
        return self._issuer is None

    @property
    def asset_type(self) -> str:
        """One of native, credit_alphanum4, credit_alphanum12."""
        if self.is_native():
            return ASSET_TYPE_NATIVE
        if len(self._code) <= 4:
            return ASSET_TYPE_CREDIT_ALPHANUM4
        return ASSET_TYPE_CREDIT_ALPHANUM12

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    @staticmethod
    def compare(a: "Asset", b: "Asset") -> int:
        """
        Compare two assets in canonical protocol order.

        Native sorts first, then 4-character codes, then 12-character codes.
        Within a class codes are compared byte-wise, then issuers.

        Returns:
            -1 if a < b, 0 if equal, 1 if a > b
        """
        if a == b:
            return 0

        rank_a = _TYPE_RANK[a.asset_type]
        rank_b = _TYPE_RANK[b.asset_type]
        if rank_a != rank_b:
            return -1 if rank_a < rank_b else 1

        code_a = a.code.encode("ascii")
        code_b = b.code.encode("ascii")
        if code_a != code_b:
            return -1 if code_a < code_b else 1

        issuer_a = a.issuer.encode("ascii")
        issuer_b = b.issuer.encode("ascii")
        return -1 if issuer_a < issuer_b else 1

    def __eq__(self, other) -> bool:
        if isinstance(other, Asset):
            return self._code == other._code and self._issuer == other._issuer
        return NotImplemented

    def __lt__(self, other: "Asset") -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return Asset.compare(self, other) == -1

    def __hash__(self):
        return hash((self._code, self._issuer))

    # -------------------------------------------------------------------------
    # XDR conversion
    # -------------------------------------------------------------------------

    def _alpha_num(self) -> Union[stellar_xdr.AlphaNum4, stellar_xdr.AlphaNum12]:
        issuer = account_id_to_xdr(self._issuer)
        if self.asset_type == ASSET_TYPE_CREDIT_ALPHANUM4:
            return stellar_xdr.AlphaNum4(
                stellar_xdr.AssetCode4(encode_asset_code(self._code, 4)), issuer
            )
        return stellar_xdr.AlphaNum12(
            stellar_xdr.AssetCode12(encode_asset_code(self._code, 12)), issuer
        )

    def to_xdr_object(self) -> stellar_xdr.Asset:
        """Convert to an XDR Asset."""
        if self.is_native():
            return stellar_xdr.Asset(stellar_xdr.AssetType.ASSET_TYPE_NATIVE)
        if self.asset_type == ASSET_TYPE_CREDIT_ALPHANUM4:
            return stellar_xdr.Asset(
                stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM4,
                alpha_num4=self._alpha_num(),
            )
        return stellar_xdr.Asset(
            stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM12,
            alpha_num12=self._alpha_num(),
        )

    def to_change_trust_xdr_object(self) -> stellar_xdr.ChangeTrustAsset:
        """Convert to an XDR ChangeTrustAsset."""
        if self.is_native():
            return stellar_xdr.ChangeTrustAsset(stellar_xdr.AssetType.ASSET_TYPE_NATIVE)
        if self.asset_type == ASSET_TYPE_CREDIT_ALPHANUM4:
            return stellar_xdr.ChangeTrustAsset(
                stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM4,
                alpha_num4=self._alpha_num(),
            )
        return stellar_xdr.ChangeTrustAsset(
            stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM12,
            alpha_num12=self._alpha_num(),
        )

    def to_trust_line_xdr_object(self) -> stellar_xdr.TrustLineAsset:
        """Convert to an XDR TrustLineAsset."""
        if self.is_native():
            return stellar_xdr.TrustLineAsset(stellar_xdr.AssetType.ASSET_TYPE_NATIVE)
        if self.asset_type == ASSET_TYPE_CREDIT_ALPHANUM4:
            return stellar_xdr.TrustLineAsset(
                stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM4,
                alpha_num4=self._alpha_num(),
            )
        return stellar_xdr.TrustLineAsset(
            stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM12,
            alpha_num12=self._alpha_num(),
        )

    @classmethod
    def from_xdr_object(
        cls,
        xdr_object: Union[
            stellar_xdr.Asset, stellar_xdr.ChangeTrustAsset, stellar_xdr.TrustLineAsset
        ],
    ) -> "Asset":
        """
        Create an Asset from any of the XDR asset unions.

        Raises:
            InvalidAssetCodeError: If the union holds a pool share
        """
        asset_type = xdr_object.type
        if asset_type == stellar_xdr.AssetType.ASSET_TYPE_NATIVE:
            return cls.native()
        if asset_type == stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM4:
            alpha_num = xdr_object.alpha_num4
            code = decode_asset_code(alpha_num.asset_code.asset_code4)
        elif asset_type == stellar_xdr.AssetType.ASSET_TYPE_CREDIT_ALPHANUM12:
            alpha_num = xdr_object.alpha_num12
            code = decode_asset_code(alpha_num.asset_code.asset_code12)
        else:
            raise InvalidAssetCodeError(f"Invalid asset type: {asset_type}")
        return cls(code, account_id_from_xdr(alpha_num.issuer))

    def __str__(self) -> str:
        if self.is_native():
            return ASSET_TYPE_NATIVE
        return f"{self._code}:{self._issuer}"

    def __repr__(self) -> str:
        return f"Asset(code={self._code!r}, issuer={self._issuer!r})"


def asset_order(a: Asset, b: Asset) -> int:
    """Canonical order of two assets as -1, 0 or 1."""
    return Asset.compare(a, b)
