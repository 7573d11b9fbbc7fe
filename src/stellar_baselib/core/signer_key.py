"""
Signer keys used as extra signers in transaction preconditions.
"""

from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.strkey import StrKey

from stellar_baselib.exceptions import InvalidAddressError


def decode_address(address: str) -> stellar_xdr.SignerKey:
    """
    Decode a signer key address into its XDR form.

    Accepts G... (ed25519), T... (pre-auth tx), X... (sha256 hash) and
    P... (ed25519 signed payload) addresses.

    Raises:
        InvalidAddressError: For any other or malformed address
    """
    types = stellar_xdr.SignerKeyType
    prefix = address[:1] if isinstance(address, str) else ""
    try:
        if prefix == "G":
            return stellar_xdr.SignerKey(
                types.SIGNER_KEY_TYPE_ED25519,
                ed25519=stellar_xdr.Uint256(StrKey.decode_ed25519_public_key(address)),
            )
        if prefix == "T":
            return stellar_xdr.SignerKey(
                types.SIGNER_KEY_TYPE_PRE_AUTH_TX,
                pre_auth_tx=stellar_xdr.Uint256(StrKey.decode_pre_auth_tx(address)),
            )
        if prefix == "X":
            return stellar_xdr.SignerKey(
                types.SIGNER_KEY_TYPE_HASH_X,
                hash_x=stellar_xdr.Uint256(StrKey.decode_sha256_hash(address)),
            )
        if prefix == "P":
            raw = StrKey.decode_ed25519_signed_payload(address)
            return stellar_xdr.SignerKey(
                types.SIGNER_KEY_TYPE_ED25519_SIGNED_PAYLOAD,
                ed25519_signed_payload=stellar_xdr.SignerKeyEd25519SignedPayload.from_xdr_bytes(raw),
            )
    except ValueError as e:
        raise InvalidAddressError(f"Invalid signer key address {address}: {e}")
    raise InvalidAddressError(f"Invalid signer key type: {address}")


def encode_signer_key(signer_key: stellar_xdr.SignerKey) -> str:
    """Encode an XDR signer key as its strkey address."""
    types = stellar_xdr.SignerKeyType
    if signer_key.type == types.SIGNER_KEY_TYPE_ED25519:
        return StrKey.encode_ed25519_public_key(signer_key.ed25519.uint256)
    if signer_key.type == types.SIGNER_KEY_TYPE_PRE_AUTH_TX:
        return StrKey.encode_pre_auth_tx(signer_key.pre_auth_tx.uint256)
    if signer_key.type == types.SIGNER_KEY_TYPE_HASH_X:
        return StrKey.encode_sha256_hash(signer_key.hash_x.uint256)
    return StrKey.encode_ed25519_signed_payload(
        signer_key.ed25519_signed_payload.to_xdr_bytes()
    )
