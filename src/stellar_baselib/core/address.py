"""
Address canonicalization.

Converts between strkey strings (G..., M..., C...) and their XDR forms.
Strkey encoding and the XDR codec come from stellar_sdk; this module only
decides which form is valid where.
"""

from enum import Enum
from typing import Tuple, Union

from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.strkey import StrKey

from stellar_baselib.exceptions import InvalidAddressError

MAX_UINT64 = 2**64 - 1


def is_valid_account_id(address: str) -> bool:
    """Check whether ``address`` is a plain G... account address."""
    return isinstance(address, str) and StrKey.is_valid_ed25519_public_key(address)


def is_muxed_address(address: str) -> bool:
    """Check whether ``address`` is a well-formed M... address."""
    if not isinstance(address, str) or not address.startswith("M"):
        return False
    try:
        StrKey.decode_muxed_account(address)
    except ValueError:
        return False
    return True


def decode_account_id(address: str) -> bytes:
    """
    Decode a plain account address into its raw public key.

    Args:
        address: G... address

    Returns:
        32-byte Ed25519 public key

    Raises:
        InvalidAddressError: If the address is muxed, a contract or malformed
    """
    if is_muxed_address(address):
        raise InvalidAddressError(
            f"{address} is an M-address; use MuxedAccount instead"
        )
    if not is_valid_account_id(address):
        raise InvalidAddressError(f"Invalid account id: {address}")
    return StrKey.decode_ed25519_public_key(address)


def account_id_to_xdr(address: str) -> stellar_xdr.AccountID:
    """Convert a G... address into an XDR AccountID."""
    return raw_public_key_to_xdr(decode_account_id(address))


def raw_public_key_to_xdr(raw_public_key: bytes) -> stellar_xdr.AccountID:
    """Wrap a raw 32-byte public key as an XDR AccountID."""
    return stellar_xdr.AccountID(
        stellar_xdr.PublicKey(
            stellar_xdr.PublicKeyType.PUBLIC_KEY_TYPE_ED25519,
            ed25519=stellar_xdr.Uint256(raw_public_key),
        )
    )


def account_id_from_xdr(account_id: stellar_xdr.AccountID) -> str:
    """Convert an XDR AccountID back into its G... address."""
    return StrKey.encode_ed25519_public_key(account_id.account_id.ed25519.uint256)


# =============================================================================
# Multiplexed addresses
# =============================================================================

def parse_sub_id(sub_id: Union[int, str]) -> int:
    if isinstance(sub_id, str):
        if not (sub_id.isascii() and sub_id.isdigit()):
            raise InvalidAddressError(
                "id should be a string representing a number (uint64)"
            )
        sub_id = int(sub_id)
    if isinstance(sub_id, bool) or not isinstance(sub_id, int):
        raise InvalidAddressError("id should be an integer (uint64)")
    if not 0 <= sub_id <= MAX_UINT64:
        raise InvalidAddressError(f"id {sub_id} does not fit in a uint64")
    return sub_id


def encode_muxed_account(account_id: str, sub_id: Union[int, str]) -> stellar_xdr.MuxedAccount:
    """
    Build the XDR muxed account for a base account and sub-identifier.

    Args:
        account_id: Base G... address
        sub_id: uint64 sub-identifier (int or decimal string)

    Returns:
        MuxedAccount of type KEY_TYPE_MUXED_ED25519
    """
    raw_key = decode_account_id(account_id)
    return stellar_xdr.MuxedAccount(
        stellar_xdr.CryptoKeyType.KEY_TYPE_MUXED_ED25519,
        med25519=stellar_xdr.MuxedAccountMed25519(
            id=stellar_xdr.Uint64(parse_sub_id(sub_id)),
            ed25519=stellar_xdr.Uint256(raw_key),
        ),
    )


def encode_muxed_address(account_id: str, sub_id: Union[int, str]) -> str:
    """
    Encode a base account and sub-identifier as an M... address.

    Sub-id 0 still produces an M... address; it never collapses to the
    base G... address.
    """
    return StrKey.encode_muxed_account(encode_muxed_account(account_id, sub_id))


def decode_muxed_address(address: str) -> Tuple[str, int]:
    """
    Decode an M... address into its base account and sub-identifier.

    Args:
        address: M... address

    Returns:
        Tuple of (G... base address, uint64 id)

    Raises:
        InvalidAddressError: If the address is not a valid M... address
    """
    if not is_muxed_address(address):
        raise InvalidAddressError(f"Expected a muxed account (M...), got {address}")
    muxed = StrKey.decode_muxed_account(address)
    return (
        StrKey.encode_ed25519_public_key(muxed.med25519.ed25519.uint256),
        muxed.med25519.id.uint64,
    )


def muxed_account_from_address(address: str) -> stellar_xdr.MuxedAccount:
    """
    Convert a G... or M... address into an XDR MuxedAccount.

    G... addresses become KEY_TYPE_ED25519 accounts, M... addresses become
    KEY_TYPE_MUXED_ED25519 accounts.
    """
    if is_muxed_address(address):
        return StrKey.decode_muxed_account(address)
    return stellar_xdr.MuxedAccount(
        stellar_xdr.CryptoKeyType.KEY_TYPE_ED25519,
        ed25519=stellar_xdr.Uint256(decode_account_id(address)),
    )


def muxed_account_to_address(muxed_account: stellar_xdr.MuxedAccount) -> str:
    """Inverse of :func:`muxed_account_from_address`."""
    return StrKey.encode_muxed_account(muxed_account)


def extract_base_address(address: str) -> str:
    """Return the G... address underlying a G... or M... address."""
    if is_valid_account_id(address):
        return address
    base, _ = decode_muxed_address(address)
    return base


# =============================================================================
# Contract-call addresses
# =============================================================================

class AddressType(str, Enum):
    """Kinds of address a contract call can reference."""
    ACCOUNT = "account"
    CONTRACT = "contract"


class Address:
    """
    An account (G...) or contract (C...) address used in contract calls.

    Muxed addresses are rejected; they cannot appear as ScAddress values.
    """

    def __init__(self, address: str):
        if is_valid_account_id(address):
            self.type = AddressType.ACCOUNT
            self.key = StrKey.decode_ed25519_public_key(address)
        elif StrKey.is_valid_contract(address):
            self.type = AddressType.CONTRACT
            self.key = StrKey.decode_contract(address)
        elif is_muxed_address(address):
            raise InvalidAddressError("Unsupported address type MuxedAccount")
        else:
            raise InvalidAddressError(f"Unsupported address type: {address}")

    @classmethod
    def from_raw_account(cls, raw: bytes) -> "Address":
        return cls(StrKey.encode_ed25519_public_key(raw))

    @classmethod
    def from_raw_contract(cls, raw: bytes) -> "Address":
        return cls(StrKey.encode_contract(raw))

    @property
    def address(self) -> str:
        """Strkey form of the address."""
        if self.type == AddressType.ACCOUNT:
            return StrKey.encode_ed25519_public_key(self.key)
        return StrKey.encode_contract(self.key)

    def to_xdr_sc_address(self) -> stellar_xdr.SCAddress:
        if self.type == AddressType.ACCOUNT:
            return stellar_xdr.SCAddress(
                stellar_xdr.SCAddressType.SC_ADDRESS_TYPE_ACCOUNT,
                account_id=raw_public_key_to_xdr(self.key),
            )
        return stellar_xdr.SCAddress(
            stellar_xdr.SCAddressType.SC_ADDRESS_TYPE_CONTRACT,
            contract_id=stellar_xdr.Hash(self.key),
        )

    @classmethod
    def from_xdr_sc_address(cls, sc_address: stellar_xdr.SCAddress) -> "Address":
        if sc_address.type == stellar_xdr.SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
            return cls.from_raw_account(sc_address.account_id.account_id.ed25519.uint256)
        if sc_address.type == stellar_xdr.SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
            return cls.from_raw_contract(sc_address.contract_id.hash)
        raise InvalidAddressError(f"Unsupported ScAddress type: {sc_address.type}")

    def to_xdr_sc_val(self) -> stellar_xdr.SCVal:
        return stellar_xdr.SCVal(
            stellar_xdr.SCValType.SCV_ADDRESS,
            address=self.to_xdr_sc_address(),
        )

    @classmethod
    def from_xdr_sc_val(cls, sc_val: stellar_xdr.SCVal) -> "Address":
        if sc_val.type != stellar_xdr.SCValType.SCV_ADDRESS:
            raise InvalidAddressError(f"ScVal of type {sc_val.type} is not an address")
        return cls.from_xdr_sc_address(sc_val.address)

    def __eq__(self, other) -> bool:
        if isinstance(other, Address):
            return self.type == other.type and self.key == other.key
        return False

    def __hash__(self):
        return hash((self.type, self.key))

    def __str__(self) -> str:
        return self.address

    def __repr__(self) -> str:
        return f"Address({self.address!r})"
