"""
Network passphrases.

The passphrase is an opaque string; its SHA-256 is the network id that
prefixes every signature base.
"""

from stellar_baselib.hashing import sha256


class Network:
    """Passphrases of the well-known Stellar networks."""
    PUBLIC = "Public Global Stellar Network ; September 2015"
    TESTNET = "Test SDF Network ; September 2015"
    FUTURENET = "Test SDF Future Network ; October 2022"
    SANDBOX = "Local Sandbox Stellar Network ; September 2022"
    STANDALONE = "Standalone Network ; February 2017"


def network_id(network_passphrase: str) -> bytes:
    """
    Compute the network id for a passphrase.

    Args:
        network_passphrase: Network passphrase

    Returns:
        32-byte SHA-256 of the passphrase
    """
    return sha256(network_passphrase)
