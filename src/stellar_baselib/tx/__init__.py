"""
Transaction module.

Handles operation construction, transaction assembly and signing.
"""

from stellar_baselib.tx.builder import TIMEOUT_INFINITE, TransactionBuilder
from stellar_baselib.tx.preconditions import LedgerBounds, TimeBounds
from stellar_baselib.tx.signer import TransactionSigner
from stellar_baselib.tx.soroban import (
    SorobanDataBuilder,
    format_token_amount,
    parse_token_amount,
)
from stellar_baselib.tx.transaction import Transaction

__all__ = [
    "TIMEOUT_INFINITE",
    "TransactionBuilder",
    "LedgerBounds",
    "TimeBounds",
    "TransactionSigner",
    "SorobanDataBuilder",
    "format_token_amount",
    "parse_token_amount",
    "Transaction",
]
