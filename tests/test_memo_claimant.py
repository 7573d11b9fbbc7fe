"""
Test suite for memos, claimants, signer keys and operations.
"""

import pytest

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.core.asset import Asset
from stellar_baselib.core.claimant import (
    And,
    BeforeAbsoluteTime,
    BeforeRelativeTime,
    Claimant,
    Not,
    Or,
    Unconditional,
    predicate_and,
    predicate_before_absolute_time,
    predicate_before_relative_time,
    predicate_from_xdr,
    predicate_not,
    predicate_or,
    predicate_to_xdr,
    predicate_unconditional,
)
from stellar_baselib.core.liquidity_pool import LiquidityPoolAsset
from stellar_baselib.core.memo import Memo, MemoType
from stellar_baselib.core.signer_key import decode_address, encode_signer_key
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.exceptions import (
    InvalidAddressError,
    InvalidAmountError,
    InvalidFieldError,
    InvalidMemoError,
)
from stellar_baselib.hashing import sha256
from stellar_baselib.tx import operation

from conftest import (
    CONTRACT_ADDRESS,
    DESTINATION_ADDRESS,
    MUXED_ID_420,
    SOURCE_ADDRESS,
)


# ============================================================================
# Memo
# ============================================================================

class TestMemo:
    """Tests for memo construction and bounds."""

    def test_none_memo(self):
        """Test the empty memo."""
        memo = Memo.none()
        assert memo.is_none()
        assert memo.to_xdr_object().type == stellar_xdr.MemoType.MEMO_NONE

    def test_text_memo_limit(self):
        """Test that text is limited to 28 bytes."""
        assert Memo.text("a" * 28).text_value == "a" * 28
        with pytest.raises(InvalidMemoError):
            Memo.text("a" * 29)

    def test_text_limit_counts_bytes(self):
        """Test that multi-byte characters count by UTF-8 length."""
        with pytest.raises(InvalidMemoError):
            Memo.text("é" * 15)

    def test_text_stored_as_bytes(self):
        """Test that arbitrary bytes are accepted and checked lazily."""
        memo = Memo.text(b"\xff\xfe")

        assert memo.text_bytes == b"\xff\xfe"
        with pytest.raises(InvalidMemoError, match="UTF-8"):
            _ = memo.text_value

    def test_id_memo(self):
        """Test uint64 bounds of id memos."""
        assert Memo.id(2**64 - 1).value == 2**64 - 1
        with pytest.raises(InvalidMemoError):
            Memo.id(-1)
        with pytest.raises(InvalidMemoError):
            Memo.id(2**64)

    def test_hash_memo_padding(self):
        """Test that short hashes are zero-padded to 32 bytes."""
        memo = Memo.hash(b"\x01\x02")
        assert memo.value == b"\x01\x02" + b"\x00" * 30

    def test_hash_memo_from_hex(self):
        """Test hex input for hash memos."""
        assert Memo.return_hash("ff" * 32).value == b"\xff" * 32

    def test_hash_memo_too_long(self):
        """Test that hashes longer than 32 bytes fail."""
        with pytest.raises(InvalidMemoError):
            Memo.hash(b"\x00" * 33)
        with pytest.raises(InvalidMemoError):
            Memo.return_hash("zz")

    @pytest.mark.parametrize(
        "memo_type, value",
        [
            (MemoType.TEXT, b"x" * 100),
            (MemoType.TEXT, 5),
            (MemoType.ID, -1),
            (MemoType.ID, "7"),
            (MemoType.HASH, b"\x00" * 33),
            (MemoType.RETURN, "not hex"),
            (MemoType.NONE, b"payload"),
            ("unknown", None),
        ],
    )
    def test_constructor_checks_bounds(self, memo_type, value):
        """Test that the plain constructor enforces the same bounds as the helpers."""
        with pytest.raises(InvalidMemoError):
            Memo(memo_type, value)

    def test_constructor_matches_helpers(self):
        """Test that the plain constructor normalizes payloads like the helpers."""
        assert Memo(MemoType.TEXT, "Stellar") == Memo.text("Stellar")
        assert Memo(MemoType.HASH, b"\x01" * 5) == Memo.hash(b"\x01" * 5)
        assert Memo(MemoType.HASH, b"\x01" * 5).value == b"\x01" * 5 + b"\x00" * 27

    def test_memo_error_is_invalid_field(self):
        """Test the error hierarchy."""
        assert issubclass(InvalidMemoError, InvalidFieldError)

    @pytest.mark.parametrize(
        "memo",
        [Memo.none(), Memo.id(9), Memo.text("Stellar"), Memo.hash(b"\x07" * 32), Memo.return_hash(b"\x08")],
    )
    def test_xdr_round_trip(self, memo):
        """Test conversion to and from XDR."""
        assert Memo.from_xdr_object(memo.to_xdr_object()) == memo

    def test_immutable(self):
        """Test that memos cannot be modified."""
        memo = Memo.id(1)
        with pytest.raises(AttributeError):
            memo._value = 2
        assert memo.type == MemoType.ID


# ============================================================================
# Claimants
# ============================================================================

class TestClaimant:
    """Tests for claimants and predicate trees."""

    def test_default_predicate(self):
        """Test that claimants are unconditional by default."""
        assert Claimant(DESTINATION_ADDRESS).predicate == Unconditional()

    def test_nested_predicate_round_trip(self):
        """Test a nested tree through XDR."""
        predicate = predicate_and(
            predicate_or(
                predicate_before_relative_time(3600),
                predicate_before_absolute_time("1700000000"),
            ),
            predicate_not(predicate_unconditional()),
        )
        claimant = Claimant(DESTINATION_ADDRESS, predicate)

        restored = Claimant.from_xdr_object(claimant.to_xdr_object())

        assert restored == claimant
        assert restored.predicate == And(
            Or(BeforeRelativeTime(3600), BeforeAbsoluteTime(1700000000)),
            Not(Unconditional()),
        )

    def test_shared_subtree_by_value(self):
        """Test that one sub-tree can appear twice."""
        leaf = predicate_before_relative_time(60)
        predicate = predicate_or(leaf, predicate_not(leaf))

        assert predicate_from_xdr(predicate_to_xdr(predicate)) == predicate

    def test_predicates_are_frozen(self):
        """Test that predicate nodes are immutable."""
        with pytest.raises(AttributeError):
            predicate_before_relative_time(1).seconds = 2

    def test_invalid_time(self):
        """Test that times must be integers."""
        with pytest.raises(InvalidFieldError):
            predicate_before_absolute_time("soon")

    @pytest.mark.parametrize("value", ["²", "-١٢", "--5", "-"])
    def test_invalid_time_digits(self, value):
        """Test that times must be ASCII decimal integers."""
        with pytest.raises(InvalidFieldError):
            predicate_before_absolute_time(value)

    def test_invalid_destination(self):
        """Test that the destination must be an account id."""
        with pytest.raises(InvalidAddressError):
            Claimant(MUXED_ID_420)


# ============================================================================
# Signer Keys
# ============================================================================

class TestSignerKey:
    """Tests for extra-signer key encoding."""

    def test_ed25519_key(self):
        """Test a G... signer."""
        signer_key = decode_address(SOURCE_ADDRESS)

        assert signer_key.type == stellar_xdr.SignerKeyType.SIGNER_KEY_TYPE_ED25519
        assert encode_signer_key(signer_key) == SOURCE_ADDRESS

    def test_pre_auth_and_hash_keys(self):
        """Test T... and X... signers."""
        from stellar_sdk.strkey import StrKey

        digest = sha256(b"preimage")
        for address in (StrKey.encode_pre_auth_tx(digest), StrKey.encode_sha256_hash(digest)):
            assert encode_signer_key(decode_address(address)) == address

    def test_invalid_signer_key(self):
        """Test that other address kinds are rejected."""
        with pytest.raises(InvalidAddressError):
            decode_address(CONTRACT_ADDRESS)
        with pytest.raises(InvalidAddressError):
            decode_address("GBAD")


# ============================================================================
# Operations
# ============================================================================

class TestOperations:
    """Tests for operation builders."""

    def test_operation_source(self):
        """Test the optional operation source."""
        op = operation.bump_sequence(10, source=MUXED_ID_420)

        assert operation.operation_source(op) == MUXED_ID_420
        assert operation.operation_source(operation.bump_sequence(10)) is None

    def test_set_operation_source(self):
        """Test replacing and clearing the operation source."""
        op = operation.bump_sequence(10)

        with_source = operation.set_operation_source(op, SOURCE_ADDRESS)
        assert operation.operation_source(with_source) == SOURCE_ADDRESS
        assert operation.operation_source(op) is None

        muxed = operation.set_operation_source(with_source, MUXED_ID_420)
        assert operation.operation_source(muxed) == MUXED_ID_420
        assert operation.operation_source(operation.set_operation_source(muxed, None)) is None

    def test_set_operation_source_invalid(self):
        """Test that the new source must be an account address."""
        with pytest.raises(InvalidAddressError):
            operation.set_operation_source(operation.bump_sequence(10), CONTRACT_ADDRESS)

    def test_amount_as_string(self):
        """Test decimal string amounts."""
        op = operation.create_account(DESTINATION_ADDRESS, "10000000000")
        assert op.body.create_account_op.starting_balance.int64 == 10_000_000_000

    @pytest.mark.parametrize("amount", [-1, 2**63, "1.5", "abc", None, "²", "١٢"])
    def test_invalid_amounts(self, amount):
        """Test the amount range."""
        with pytest.raises(InvalidAmountError):
            operation.create_account(DESTINATION_ADDRESS, amount)

    def test_payment_zero_amount(self):
        """Test that payments must move something."""
        with pytest.raises(InvalidAmountError):
            operation.payment(DESTINATION_ADDRESS, Asset.native(), 0)

    def test_payment_to_muxed(self):
        """Test that payments accept M... destinations."""
        op = operation.payment(MUXED_ID_420, Asset.native(), 1)
        assert op.body.payment_op.destination.type == stellar_xdr.CryptoKeyType.KEY_TYPE_MUXED_ED25519

    def test_create_account_rejects_muxed(self):
        """Test that new accounts must be plain account ids."""
        with pytest.raises(InvalidAddressError):
            operation.create_account(MUXED_ID_420, 1)

    def test_manage_data(self):
        """Test data entry limits and deletion."""
        op = operation.manage_data("key", "value")
        assert op.body.manage_data_op.data_value.data_value == b"value"
        assert operation.manage_data("key", None).body.manage_data_op.data_value is None
        with pytest.raises(InvalidFieldError):
            operation.manage_data("k" * 65, "v")
        with pytest.raises(InvalidFieldError):
            operation.manage_data("key", b"v" * 65)

    def test_change_trust(self, usd, arst):
        """Test trust lines for assets and pool shares."""
        op = operation.change_trust(usd)
        assert op.body.change_trust_op.limit.int64 == 2**63 - 1

        pool_op = operation.change_trust(LiquidityPoolAsset(arst, usd), limit=0)
        assert pool_op.body.change_trust_op.line.type == stellar_xdr.AssetType.ASSET_TYPE_POOL_SHARE

        with pytest.raises(InvalidFieldError):
            operation.change_trust(Asset.native())

    def test_create_claimable_balance(self, usd):
        """Test claimant count limits."""
        claimant = Claimant(DESTINATION_ADDRESS)
        op = operation.create_claimable_balance(usd, 5, [claimant])
        assert len(op.body.create_claimable_balance_op.claimants) == 1

        with pytest.raises(InvalidFieldError):
            operation.create_claimable_balance(usd, 5, [])
        with pytest.raises(InvalidFieldError):
            operation.create_claimable_balance(usd, 5, [claimant] * 11)

    def test_invoke_contract_function(self):
        """Test an opaque contract invocation."""
        arg = stellar_xdr.SCVal(stellar_xdr.SCValType.SCV_U32, u32=stellar_xdr.Uint32(7))
        op = operation.invoke_contract_function(CONTRACT_ADDRESS, "increment", [arg])

        invoke = op.body.invoke_host_function_op.host_function.invoke_contract
        assert invoke.function_name.sc_symbol == b"increment"
        assert invoke.args == [arg]
        assert op.body.invoke_host_function_op.auth == []

    def test_invoke_rejects_muxed_contract(self):
        """Test that muxed addresses are not contract addresses."""
        with pytest.raises(InvalidAddressError):
            operation.invoke_contract_function(MUXED_ID_420, "f")

    def test_keypair_public_key_as_signer(self):
        """Test that keypair addresses decode as ed25519 signers."""
        key = Keypair.random()
        assert decode_address(key.public_key).ed25519.uint256 == key.raw_public_key
