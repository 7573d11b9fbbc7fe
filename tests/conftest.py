"""
Pytest configuration and shared fixtures for the test suite.
"""

from typing import List

import pytest

from stellar_baselib.config import (
    BaselibConfig,
    NetworkType,
    SigningBackendType,
    set_config,
)
from stellar_baselib.core.account import Account, MuxedAccount
from stellar_baselib.core.asset import Asset
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.network import Network


# ============================================================================
# Known Addresses
# ============================================================================

SOURCE_ADDRESS = "GCEZWKCA5VLDNRLN3RPRJMRZOX3Z6G5CHCGSNFHEYVXM3XOJMDS674JZ"
OTHER_ADDRESS = "GBBM6BKZPEHWYO3E3YKREDPQXMS4VK35YLNU7NFBRI26RAN7GI5POFBB"
DESTINATION_ADDRESS = "GDJJRRMBK4IWLEPJGIE6SXD2LP7REGZODU7WDC3I2D6MR37F4XSHBKX2"
SECOND_DESTINATION = "GC6ACGSA2NJGD6YWUNX2BYBL3VM4MZRSEU2RLIUZZL35NLV5IAHAX2E2"
ISSUER_ADDRESS = "GB7TAYRUZGE6TVT7NHP5SMIZRNQA6PLM423EYISAOAP3MKYIQMVYP2JO"

MUXED_BASE = "GA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVSGZ"
MUXED_ID_0 = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUQ"
MUXED_ID_420 = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAABUTGI4"

CONTRACT_ADDRESS = "CA3D5KRYM6CB7OWQ6TWYRR3Z4T7GNZLKERYNZGGA5SOAOPIFY6YQGAXE"

KNOWN_SECRET = "SD7X7LEHBNMUIKQGKPARG5TDJNBHKC346OUARHGZL5ITC6IJPXHILY36"
KNOWN_PUBLIC = "GDFQVQCYYB7GKCGSCUSIQYXTPLV5YJ3XWDMWGQMDNM4EAXAL7LITIBQ7"


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> BaselibConfig:
    """Create a test configuration."""
    return BaselibConfig(
        network=NetworkType.TESTNET,
        base_fee=100,
        signing_backend=SigningBackendType.NACL,
        log_level="DEBUG",
    )


@pytest.fixture(autouse=True)
def use_test_config(test_config):
    """Install the test configuration."""
    set_config(test_config)
    yield
    set_config(None)


@pytest.fixture
def testnet() -> str:
    return Network.TESTNET


# ============================================================================
# Account Fixtures
# ============================================================================

@pytest.fixture
def source_account() -> Account:
    """Source account with sequence 0."""
    return Account(SOURCE_ADDRESS, "0")


@pytest.fixture
def muxed_source() -> MuxedAccount:
    """Muxed account with id 420 on a base account at sequence 10."""
    return MuxedAccount(Account(MUXED_BASE, "10"), 420)


# ============================================================================
# Key Fixtures
# ============================================================================

@pytest.fixture
def keypair() -> Keypair:
    """Keypair with a known secret."""
    return Keypair.from_secret(KNOWN_SECRET)


@pytest.fixture
def keypairs() -> List[Keypair]:
    """Three random signing keypairs."""
    return [Keypair.random() for _ in range(3)]


# ============================================================================
# Asset Fixtures
# ============================================================================

@pytest.fixture
def usd() -> Asset:
    return Asset("USD", SOURCE_ADDRESS)


@pytest.fixture
def arst() -> Asset:
    return Asset("ARST", ISSUER_ADDRESS)
