"""
Stellar Baselib

Client-side construction and signing of Stellar transactions: canonical
assets and addresses, account sequence state, keypairs and the transaction
builder that produces the exact bytes the network hashes and executes.
"""

__version__ = "0.1.0"

from stellar_baselib.core.account import Account, AccountSnapshot, MuxedAccount
from stellar_baselib.core.address import Address
from stellar_baselib.core.asset import Asset
from stellar_baselib.core.claimant import Claimant
from stellar_baselib.core.contract import Contract
from stellar_baselib.core.liquidity_pool import (
    LiquidityPoolAsset,
    LiquidityPoolId,
    LiquidityPoolParameters,
)
from stellar_baselib.core.memo import Memo
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.network import Network
from stellar_baselib.tx.builder import TransactionBuilder
from stellar_baselib.tx.signer import TransactionSigner
from stellar_baselib.tx.soroban import SorobanDataBuilder
from stellar_baselib.tx.transaction import Transaction

__all__ = [
    "Account",
    "AccountSnapshot",
    "MuxedAccount",
    "Address",
    "Asset",
    "Claimant",
    "Contract",
    "LiquidityPoolAsset",
    "LiquidityPoolId",
    "LiquidityPoolParameters",
    "Memo",
    "Keypair",
    "Network",
    "TransactionBuilder",
    "TransactionSigner",
    "SorobanDataBuilder",
    "Transaction",
]
