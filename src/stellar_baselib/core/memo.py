"""
Transaction memos.

A memo is a tagged value attached to a transaction for reference purposes.
Payload bounds are enforced when the memo is constructed, never later.
"""

from enum import Enum
from typing import Optional, Union

from stellar_sdk import xdr as stellar_xdr

from stellar_baselib.exceptions import InvalidMemoError

MAX_MEMO_TEXT_LEN = 28
MAX_HASH_LEN = 32
MAX_UINT64 = 2**64 - 1


class MemoType(str, Enum):
    """Memo variants."""
    NONE = "none"
    ID = "id"
    TEXT = "text"
    HASH = "hash"
    RETURN = "return"


class Memo:
    """
    Immutable memo value.

    Text memos keep their payload as raw bytes. Whether those bytes are
    valid UTF-8 is only checked when ``text_value`` is requested.
    """

    __slots__ = ("_type", "_value")

    def __init__(
        self,
        memo_type: MemoType = MemoType.NONE,
        value: Union[None, int, str, bytes] = None,
    ):
        """
        Args:
            memo_type: Memo variant
            value: Payload checked against the bounds of ``memo_type``

        Raises:
            InvalidMemoError: If the payload does not fit the variant
        """
        try:
            memo_type = MemoType(memo_type)
        except ValueError:
            raise InvalidMemoError(f"Unknown memo type: {memo_type!r}")

        if memo_type == MemoType.NONE:
            if value is not None:
                raise InvalidMemoError("A none memo carries no value")
        elif memo_type == MemoType.ID:
            value = self._check_id(value)
        elif memo_type == MemoType.TEXT:
            value = self._check_text(value)
        elif memo_type == MemoType.HASH:
            value = self._pad_hash(value, "Memo Hash")
        else:
            value = self._pad_hash(value, "Memo Return")

        object.__setattr__(self, "_type", memo_type)
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("Memo is immutable")

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def none(cls) -> "Memo":
        return cls(MemoType.NONE)

    @classmethod
    def id(cls, memo_id: int) -> "Memo":
        return cls(MemoType.ID, memo_id)

    @classmethod
    def text(cls, text: Union[str, bytes]) -> "Memo":
        return cls(MemoType.TEXT, text)

    @classmethod
    def hash(cls, memo_hash: Union[bytes, str]) -> "Memo":
        return cls(MemoType.HASH, memo_hash)

    @classmethod
    def return_hash(cls, memo_hash: Union[bytes, str]) -> "Memo":
        return cls(MemoType.RETURN, memo_hash)

    @staticmethod
    def _check_id(memo_id) -> int:
        if isinstance(memo_id, bool) or not isinstance(memo_id, int):
            raise InvalidMemoError("Memo id must be an integer")
        if not 0 <= memo_id <= MAX_UINT64:
            raise InvalidMemoError("Memo id must be a uint64")
        return memo_id

    @staticmethod
    def _check_text(text) -> bytes:
        if isinstance(text, str):
            raw = text.encode("utf-8")
        elif isinstance(text, (bytes, bytearray)):
            raw = bytes(text)
        else:
            raise InvalidMemoError("Memo text must be a string or bytes")
        if len(raw) > MAX_MEMO_TEXT_LEN:
            raise InvalidMemoError(
                f"Memo text must be at most {MAX_MEMO_TEXT_LEN} bytes, got {len(raw)}"
            )
        return raw

    @staticmethod
    def _pad_hash(value: Union[bytes, str], label: str) -> bytes:
        if isinstance(value, str):
            try:
                value = bytes.fromhex(value)
            except ValueError:
                raise InvalidMemoError(f"Invalid {label}: not a hex string")
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidMemoError(f"Invalid {label}: expected bytes or a hex string")
        if len(value) > MAX_HASH_LEN:
            raise InvalidMemoError(f"Invalid {label}: longer than {MAX_HASH_LEN} bytes")
        return bytes(value).ljust(MAX_HASH_LEN, b"\x00")

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def type(self) -> MemoType:
        return self._type

    @property
    def value(self) -> Union[None, int, bytes]:
        """Raw payload: None, an int id or bytes."""
        return self._value

    def is_none(self) -> bool:
        return self._type == MemoType.NONE

    @property
    def text_bytes(self) -> Optional[bytes]:
        return self._value if self._type == MemoType.TEXT else None

    @property
    def text_value(self) -> Optional[str]:
        """
        Text view of a text memo.

        Raises:
            InvalidMemoError: If the stored bytes are not valid UTF-8
        """
        if self._type != MemoType.TEXT:
            return None
        try:
            return self._value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidMemoError(f"Memo text is not valid UTF-8: {e}")

    # -------------------------------------------------------------------------
    # XDR conversion
    # -------------------------------------------------------------------------

    def to_xdr_object(self) -> stellar_xdr.Memo:
        if self._type == MemoType.NONE:
            return stellar_xdr.Memo(stellar_xdr.MemoType.MEMO_NONE)
        if self._type == MemoType.ID:
            return stellar_xdr.Memo(
                stellar_xdr.MemoType.MEMO_ID, id=stellar_xdr.Uint64(self._value)
            )
        if self._type == MemoType.TEXT:
            return stellar_xdr.Memo(stellar_xdr.MemoType.MEMO_TEXT, text=self._value)
        if self._type == MemoType.HASH:
            return stellar_xdr.Memo(
                stellar_xdr.MemoType.MEMO_HASH, hash=stellar_xdr.Hash(self._value)
            )
        return stellar_xdr.Memo(
            stellar_xdr.MemoType.MEMO_RETURN, ret_hash=stellar_xdr.Hash(self._value)
        )

    @classmethod
    def from_xdr_object(cls, xdr_object: stellar_xdr.Memo) -> "Memo":
        memo_type = xdr_object.type
        if memo_type == stellar_xdr.MemoType.MEMO_NONE:
            return cls.none()
        if memo_type == stellar_xdr.MemoType.MEMO_ID:
            return cls.id(xdr_object.id.uint64)
        if memo_type == stellar_xdr.MemoType.MEMO_TEXT:
            return cls.text(xdr_object.text)
        if memo_type == stellar_xdr.MemoType.MEMO_HASH:
            return cls.hash(xdr_object.hash.hash)
        return cls.return_hash(xdr_object.ret_hash.hash)

    def __eq__(self, other) -> bool:
        if isinstance(other, Memo):
            return self._type == other._type and self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash((self._type, self._value))

    def __repr__(self) -> str:
        return f"Memo(type={self._type.value}, value={self._value!r})"
