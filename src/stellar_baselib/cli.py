"""
Command-line interface for stellar-baselib.

Provides commands for generating keys, computing network ids and transaction
hashes, and signing transaction envelopes.
"""

import argparse
import logging
import sys
from typing import List, Optional

import structlog

from stellar_baselib import __version__
from stellar_baselib.config import (
    NETWORK_PASSPHRASES,
    BaselibConfig,
    NetworkType,
    get_config,
    set_config,
)
from stellar_baselib.crypto.keypair import Keypair
from stellar_baselib.exceptions import StellarBaseError
from stellar_baselib.network import network_id
from stellar_baselib.tx.signer import TransactionSigner
from stellar_baselib.tx.transaction import Transaction

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so command output on stdout stays machine-readable
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def _add_network_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--network",
        choices=[network.value for network in NetworkType],
        help="Well-known network (default: from configuration)",
    )
    group.add_argument(
        "--passphrase",
        help="Custom network passphrase",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stellar-baselib",
        description="Build and sign Stellar transactions",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from configuration)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Keypair command
    keypair_parser = subparsers.add_parser("keypair", help="Generate or inspect a keypair")
    keypair_parser.add_argument(
        "--secret",
        help="S... secret seed to inspect (default: generate a random keypair)",
    )

    # Network id command
    network_parser = subparsers.add_parser("network-id", help="Print a network id")
    _add_network_arguments(network_parser)

    # Hash command
    hash_parser = subparsers.add_parser("hash", help="Print a transaction hash")
    hash_parser.add_argument("envelope", help="Base64 transaction envelope XDR")
    _add_network_arguments(hash_parser)

    # Sign command
    sign_parser = subparsers.add_parser("sign", help="Sign a transaction envelope")
    sign_parser.add_argument("envelope", help="Base64 transaction envelope XDR")
    sign_parser.add_argument(
        "--secret",
        action="append",
        help="S... secret seed (repeatable; default: signing key from configuration)",
    )
    _add_network_arguments(sign_parser)

    return parser


def resolve_passphrase(args: argparse.Namespace, config: BaselibConfig) -> str:
    """Pick the passphrase from --passphrase, --network or configuration."""
    if getattr(args, "passphrase", None):
        return args.passphrase
    if getattr(args, "network", None):
        return NETWORK_PASSPHRASES[NetworkType(args.network)]
    return config.passphrase


def run_keypair(args: argparse.Namespace) -> None:
    if args.secret:
        keypair = Keypair.from_secret(args.secret)
        print(f"Public key: {keypair.public_key}")
        return
    keypair = Keypair.random()
    print(f"Public key: {keypair.public_key}")
    print(f"Secret:     {keypair.secret}")


def run_network_id(args: argparse.Namespace, config: BaselibConfig) -> None:
    print(network_id(resolve_passphrase(args, config)).hex())


def run_hash(args: argparse.Namespace, config: BaselibConfig) -> None:
    tx = Transaction.from_envelope_xdr(args.envelope, resolve_passphrase(args, config))
    print(tx.hash_hex())


def run_sign(args: argparse.Namespace, config: BaselibConfig) -> None:
    tx = Transaction.from_envelope_xdr(args.envelope, resolve_passphrase(args, config))
    signer = TransactionSigner(config=config)
    if args.secret:
        for secret in args.secret:
            signer.load_key_from_secret(secret)
    else:
        signer.load_from_config()
    signer.sign(tx)
    print(tx.to_envelope_xdr())


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = get_config()
    if args.log_level or args.log_json:
        config = config.model_copy(
            update={
                "log_level": args.log_level or config.log_level,
                "log_json": args.log_json or config.log_json,
            }
        )
        set_config(config)

    # Setup logging
    setup_logging(config.log_level, config.log_json)

    try:
        if args.command == "keypair":
            run_keypair(args)
        elif args.command == "network-id":
            run_network_id(args, config)
        elif args.command == "hash":
            run_hash(args, config)
        elif args.command == "sign":
            run_sign(args, config)
    except StellarBaseError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
