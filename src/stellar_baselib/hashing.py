"""SHA-256 helper shared by keys, pool ids and transaction hashing."""

from hashlib import sha256 as _sha256
from typing import Union


def sha256(data: Union[bytes, str]) -> bytes:
    """Return the 32-byte SHA-256 digest of ``data`` (str is UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _sha256(data).digest()
