"""
Test suite for asset, address and liquidity pool canonicalization.
"""

import itertools

import pytest

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.address import (
    Address,
    AddressType,
    decode_account_id,
    decode_muxed_address,
    encode_muxed_address,
    extract_base_address,
    muxed_account_from_address,
    muxed_account_to_address,
)
from stellar_baselib.core.asset import Asset, asset_order, decode_asset_code, encode_asset_code
from stellar_baselib.core.liquidity_pool import (
    LiquidityPoolAsset,
    LiquidityPoolId,
    LiquidityPoolParameters,
    canonical_pool_id,
)
from stellar_baselib.exceptions import (
    InvalidAddressError,
    InvalidAssetCodeError,
    InvalidFeeError,
    InvalidFieldError,
    InvalidOrderError,
    MissingIssuerError,
)

from conftest import (
    CONTRACT_ADDRESS,
    ISSUER_ADDRESS,
    MUXED_BASE,
    MUXED_ID_0,
    MUXED_ID_420,
    OTHER_ADDRESS,
    SOURCE_ADDRESS,
)

POOL_ID = "dd7b1ab831c273310ddbec6f97870aa83c2fbd78ce22aded37ecbf4f3380fac7"


# ============================================================================
# Asset Codes
# ============================================================================

class TestAssetCodeEncoding:
    """Tests for asset code padding."""

    def test_short_code_is_nul_padded(self):
        """Test that USD fills a 4-byte bucket as USD\\0."""
        assert encode_asset_code("USD", 4) == b"USD\x00"

    def test_twelve_char_code_is_unpadded(self):
        """Test that a 12-character code fills its bucket exactly."""
        assert encode_asset_code("123456789012", 12) == b"123456789012"

    def test_five_char_code_in_wide_bucket(self):
        """Test padding of a 5-character code to 12 bytes."""
        assert encode_asset_code("ABCDE", 12) == b"ABCDE" + b"\x00" * 7

    @pytest.mark.parametrize("code", ["", "1234567890123", "US$", "US D"])
    def test_invalid_codes_rejected(self, code):
        """Test empty, overlong and non-alphanumeric codes."""
        with pytest.raises(InvalidAssetCodeError):
            encode_asset_code(code, 12)

    def test_code_too_long_for_bucket(self):
        """Test that a 5-character code does not fit a 4-byte bucket."""
        with pytest.raises(InvalidAssetCodeError):
            encode_asset_code("ABCDE", 4)

    def test_invalid_bucket_width(self):
        """Test that only 4 and 12 are valid bucket widths."""
        with pytest.raises(InvalidAssetCodeError):
            encode_asset_code("USD", 8)

    def test_decode_strips_padding(self):
        """Test that decoding removes NUL padding."""
        assert decode_asset_code(b"USD\x00") == "USD"


# ============================================================================
# Assets
# ============================================================================

class TestAsset:
    """Tests for the Asset value type."""

    def test_native_asset(self):
        """Test the native asset sentinel."""
        native = Asset.native()

        assert native.is_native()
        assert native.code == "XLM"
        assert native.issuer is None
        assert native.asset_type == "native"
        assert str(native) == "native"

    def test_lowercase_native_code(self):
        """Test that xlm without issuer maps to the native asset."""
        assert Asset("xlm") == Asset.native()

    def test_issued_asset_types(self, usd):
        """Test alphanum4 and alphanum12 classification."""
        assert usd.asset_type == "credit_alphanum4"
        assert Asset("ABCDE", SOURCE_ADDRESS).asset_type == "credit_alphanum12"
        assert str(usd) == f"USD:{SOURCE_ADDRESS}"

    def test_missing_issuer(self):
        """Test that non-native assets require an issuer."""
        with pytest.raises(MissingIssuerError):
            Asset("USD")

    def test_invalid_issuer(self):
        """Test that the issuer must be a G... address."""
        with pytest.raises(InvalidAddressError):
            Asset("USD", "GCEZ")

    def test_invalid_code(self):
        """Test that bad codes are rejected at construction."""
        with pytest.raises(InvalidAssetCodeError):
            Asset("", SOURCE_ADDRESS)
        with pytest.raises(InvalidAssetCodeError):
            Asset("1234567890123", SOURCE_ADDRESS)

    def test_immutable(self, usd):
        """Test that assets cannot be modified."""
        with pytest.raises(AttributeError):
            usd.code = "EUR"

    def test_equality_by_code_and_issuer(self, usd):
        """Test equality and hashing."""
        assert usd == Asset("USD", SOURCE_ADDRESS)
        assert usd != Asset("USD", OTHER_ADDRESS)
        assert len({usd, Asset("USD", SOURCE_ADDRESS)}) == 1

    @pytest.mark.parametrize("code", ["XLM", "USD", "ABCDE", "123456789012"])
    def test_xdr_round_trip(self, code):
        """Test conversion to and from every XDR asset union."""
        asset = Asset.native() if code == "XLM" else Asset(code, SOURCE_ADDRESS)

        assert Asset.from_xdr_object(asset.to_xdr_object()) == asset
        assert Asset.from_xdr_object(asset.to_change_trust_xdr_object()) == asset
        assert Asset.from_xdr_object(asset.to_trust_line_xdr_object()) == asset

    def test_xdr_code_padding(self, usd):
        """Test that the XDR carries the padded code bytes."""
        xdr_asset = usd.to_xdr_object()
        assert xdr_asset.alpha_num4.asset_code.asset_code4 == b"USD\x00"


class TestAssetOrdering:
    """Tests for the canonical asset order."""

    def test_native_sorts_first(self, usd):
        """Test that native precedes every issued asset."""
        assert asset_order(Asset.native(), usd) == -1
        assert asset_order(usd, Asset.native()) == 1

    def test_type_class_precedes_code(self):
        """Test that any alphanum4 sorts before any alphanum12."""
        short = Asset("ZZZZ", SOURCE_ADDRESS)
        long = Asset("AAAAA", SOURCE_ADDRESS)
        assert asset_order(short, long) == -1

    def test_code_then_issuer(self):
        """Test byte-wise code comparison, then issuer comparison."""
        assert asset_order(Asset("ARST", ISSUER_ADDRESS), Asset("USD", SOURCE_ADDRESS)) == -1
        assert asset_order(Asset("USD", OTHER_ADDRESS), Asset("USD", SOURCE_ADDRESS)) == -1

    def test_uppercase_before_lowercase(self):
        """Test that comparison is byte-wise, not case-insensitive."""
        assert asset_order(Asset("ABC", SOURCE_ADDRESS), Asset("abc", SOURCE_ADDRESS)) == -1

    def test_strict_total_order(self):
        """Test trichotomy and transitivity over a mixed asset set."""
        assets = [
            Asset.native(),
            Asset("USD", SOURCE_ADDRESS),
            Asset("USD", OTHER_ADDRESS),
            Asset("ARST", ISSUER_ADDRESS),
            Asset("abc", SOURCE_ADDRESS),
            Asset("ABCDE", SOURCE_ADDRESS),
            Asset("123456789012", OTHER_ADDRESS),
        ]
        for a, b in itertools.product(assets, repeat=2):
            result = asset_order(a, b)
            assert result == -asset_order(b, a)
            assert (result == 0) == (a == b)
        for a, b, c in itertools.product(assets, repeat=3):
            if asset_order(a, b) == -1 and asset_order(b, c) == -1:
                assert asset_order(a, c) == -1

    def test_sorted_uses_canonical_order(self, usd):
        """Test that rich comparisons follow the same order."""
        wide = Asset("ABCDE", SOURCE_ADDRESS)
        assert sorted([wide, usd, Asset.native()]) == [Asset.native(), usd, wide]


# ============================================================================
# Liquidity Pools
# ============================================================================

class TestLiquidityPool:
    """Tests for pool parameters and pool ids."""

    def test_known_pool_id(self, arst, usd):
        """Test the pool id of the ARST/USD pool."""
        params = LiquidityPoolParameters(arst, usd, 30)
        assert canonical_pool_id(params).hex() == POOL_ID

    def test_pool_asset_id(self, arst, usd):
        """Test the hex id and string form of a pool-share asset."""
        pool_asset = LiquidityPoolAsset(arst, usd)

        assert pool_asset.liquidity_pool_id == POOL_ID
        assert pool_asset.asset_type == "liquidity_pool_shares"
        assert str(pool_asset) == f"liquidity_pool:{POOL_ID}"

    def test_unordered_assets_rejected(self, arst, usd):
        """Test that assets are never reordered silently."""
        with pytest.raises(InvalidOrderError, match="lexicographic order"):
            LiquidityPoolParameters(usd, arst)

    def test_equal_assets_rejected(self, usd):
        """Test that a pool of an asset with itself is invalid."""
        with pytest.raises(InvalidOrderError):
            LiquidityPoolParameters(usd, Asset("USD", SOURCE_ADDRESS))

    @pytest.mark.parametrize("fee", [0, 29, 31, 100])
    def test_non_standard_fee_rejected(self, arst, usd, fee):
        """Test that only fee 30 is accepted."""
        with pytest.raises(InvalidFeeError, match="fee is invalid"):
            LiquidityPoolParameters(arst, usd, fee)

    def test_unknown_pool_type(self, arst, usd):
        """Test that only constant-product pools exist."""
        with pytest.raises(InvalidFieldError):
            canonical_pool_id(LiquidityPoolParameters(arst, usd), "weighted")

    def test_pool_asset_xdr_round_trip(self, arst, usd):
        """Test change-trust XDR conversion of a pool-share asset."""
        pool_asset = LiquidityPoolAsset(arst, usd)
        assert LiquidityPoolAsset.from_xdr_object(pool_asset.to_xdr_object()) == pool_asset

    def test_pool_id_asset(self):
        """Test the trust-line form of a pool-share asset."""
        pool_id = LiquidityPoolId(POOL_ID)

        assert str(pool_id) == f"liquidity_pool:{POOL_ID}"
        assert LiquidityPoolId.from_xdr_object(pool_id.to_xdr_object()) == pool_id

    @pytest.mark.parametrize("value", ["", "abc", "zz" * 32])
    def test_invalid_pool_id(self, value):
        """Test that empty and non-hex ids are rejected."""
        with pytest.raises(InvalidFieldError):
            LiquidityPoolId(value)


# ============================================================================
# Addresses
# ============================================================================

class TestMuxedAddresses:
    """Tests for multiplexed address encoding."""

    def test_known_encodings(self):
        """Test the encodings of ids 0 and 420."""
        assert encode_muxed_address(MUXED_BASE, 0) == MUXED_ID_0
        assert encode_muxed_address(MUXED_BASE, 420) == MUXED_ID_420
        assert encode_muxed_address(MUXED_BASE, "420") == MUXED_ID_420

    def test_id_zero_is_not_plain_address(self):
        """Test that sub-id 0 still yields an M... address."""
        address = encode_muxed_address(MUXED_BASE, 0)
        assert address.startswith("M")
        assert address != MUXED_BASE

    @pytest.mark.parametrize("sub_id", [0, 1, 420, 2**32, 2**64 - 1])
    def test_round_trip(self, sub_id):
        """Test that decoding inverts encoding."""
        for base in (MUXED_BASE, SOURCE_ADDRESS):
            assert decode_muxed_address(encode_muxed_address(base, sub_id)) == (base, sub_id)

    @pytest.mark.parametrize("sub_id", [-1, 2**64, "abc", 1.5])
    def test_invalid_sub_id(self, sub_id):
        """Test that ids outside uint64 are rejected."""
        with pytest.raises(InvalidAddressError):
            encode_muxed_address(MUXED_BASE, sub_id)

    def test_decode_rejects_plain_address(self):
        """Test that a G... address is not a muxed address."""
        with pytest.raises(InvalidAddressError):
            decode_muxed_address(MUXED_BASE)

    def test_extract_base_address(self):
        """Test base extraction from G... and M... addresses."""
        assert extract_base_address(MUXED_ID_420) == MUXED_BASE
        assert extract_base_address(MUXED_BASE) == MUXED_BASE

    def test_xdr_muxed_account_types(self):
        """Test that G and M addresses map to different XDR key types."""
        plain = muxed_account_from_address(MUXED_BASE)
        muxed = muxed_account_from_address(MUXED_ID_420)

        assert plain.type == stellar_xdr.CryptoKeyType.KEY_TYPE_ED25519
        assert muxed.type == stellar_xdr.CryptoKeyType.KEY_TYPE_MUXED_ED25519
        assert muxed.med25519.id.uint64 == 420
        assert muxed_account_to_address(plain) == MUXED_BASE
        assert muxed_account_to_address(muxed) == MUXED_ID_420

    def test_plain_account_decoding_rejects_other_kinds(self):
        """Test that contracts and muxed addresses are not account ids."""
        with pytest.raises(InvalidAddressError, match="MuxedAccount"):
            decode_account_id(MUXED_ID_420)
        with pytest.raises(InvalidAddressError):
            decode_account_id(CONTRACT_ADDRESS)
        with pytest.raises(InvalidAddressError):
            decode_account_id("GBBB")


class TestContractAddress:
    """Tests for contract-call addresses."""

    def test_account_address(self):
        """Test an account address round trip through ScAddress."""
        address = Address(SOURCE_ADDRESS)

        assert address.type == AddressType.ACCOUNT
        assert Address.from_xdr_sc_address(address.to_xdr_sc_address()) == address
        assert str(address) == SOURCE_ADDRESS

    def test_contract_address(self):
        """Test a contract address round trip through ScVal."""
        address = Address(CONTRACT_ADDRESS)

        assert address.type == AddressType.CONTRACT
        assert Address.from_xdr_sc_val(address.to_xdr_sc_val()) == address
        assert address.address == CONTRACT_ADDRESS

    def test_muxed_address_rejected(self):
        """Test that muxed addresses cannot be contract-call addresses."""
        with pytest.raises(InvalidAddressError, match="MuxedAccount"):
            Address(MUXED_ID_420)

    def test_garbage_rejected(self):
        """Test that malformed addresses are rejected."""
        with pytest.raises(InvalidAddressError):
            Address("not-an-address")
