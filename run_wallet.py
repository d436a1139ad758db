#!/usr/bin/env python3
"""
Signet wallet runner - sign and verify with a software key or a hardware
device reached through the local bridge.

Usage:
    python run_wallet.py address --private-key 0x...
    python run_wallet.py sign-message "hello" --mnemonic "word word ..."
    python run_wallet.py sign-message "hello" --hardware --path "m/44'/60'/0'/0/1"
    python run_wallet.py verify-message "hello" --address 0x... --signature 0x...
    python run_wallet.py blockie --keystore key.json --password secret

Environment variables (alternative to flags):
    SIGNET_PRIVATE_KEY, SIGNET_MNEMONIC, plus the SIGNET_* settings read by
    signet_core.config.load_config
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import os
import sys

from signet_core.channels import BridgeChannel
from signet_core.config import SignetConfig, load_config
from signet_core.errors import WalletError
from signet_core.logging_config import setup_logging_from_config
from signet_core.wallet import HardwareWallet, open_software_wallet

logger = logging.getLogger("wallet")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Signet Ethereum wallet")
    p.add_argument("--config", default=None, help="Path to signet.toml config file")

    keys = argparse.ArgumentParser(add_help=False)
    keys.add_argument("--private-key", default=os.environ.get("SIGNET_PRIVATE_KEY"),
                      help="Hex private key")
    keys.add_argument("--mnemonic", default=os.environ.get("SIGNET_MNEMONIC"),
                      help="BIP-39 mnemonic phrase")
    keys.add_argument("--keystore", default=None, help="Path to a v3 keystore JSON file")
    keys.add_argument("--password", default=None, help="Keystore password")
    keys.add_argument("--path", default=None, help="Derivation path")
    keys.add_argument("--hardware", action="store_true",
                      help="Use the hardware device instead of a software key")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("address", parents=[keys], help="Print the wallet address")
    sub.add_parser("blockie", parents=[keys], help="Print the address blockie as a data URI")
    sign = sub.add_parser("sign-message", parents=[keys], help="Sign a message")
    sign.add_argument("message")
    verify = sub.add_parser("verify-message", parents=[keys], help="Verify a signed message")
    verify.add_argument("message")
    verify.add_argument("--signature", required=True)
    verify.add_argument("--address", default=None,
                        help="Signer address (defaults to the wallet's own)")
    return p.parse_args(argv)


async def open_wallet(args: argparse.Namespace, cfg: SignetConfig):
    path = args.path or cfg.hardware.derivation_path
    if args.hardware:
        channel = BridgeChannel.from_config(cfg.bridge, cfg.hardware)
        return await HardwareWallet.open(
            channel, path,
            cancel_message=cfg.hardware.cancel_message,
            gas_price=cfg.hardware.gas_price,
        )

    keystore = None
    if args.keystore:
        with open(args.keystore) as f:
            keystore = json.load(f)
    if not (args.private_key or args.mnemonic or keystore):
        raise WalletError("Provide --private-key, --mnemonic, --keystore or --hardware")
    return open_software_wallet(
        private_key=args.private_key,
        mnemonic=args.mnemonic,
        derivation_path=path,
        keystore=keystore,
        password=args.password,
    )


async def run(args: argparse.Namespace, cfg: SignetConfig) -> int:
    wallet = await open_wallet(args, cfg)
    if wallet is None:
        print("Cancelled on the device.")
        return 1

    if args.command == "address":
        print(wallet.address)
    elif args.command == "blockie":
        print(wallet.blockie())
    elif args.command == "sign-message":
        signature = await wallet.sign_message(args.message)
        if signature is None:
            print("Cancelled on the device.")
            return 1
        print(signature)
    elif args.command == "verify-message":
        valid = await wallet.verify_message(args.message, args.signature, address=args.address)
        print("valid" if valid else "INVALID")
        return 0 if valid else 2
    return 0


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config)
    setup_logging_from_config(cfg.logging)
    try:
        return await run(args, cfg)
    except WalletError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        sys.exit(asyncio.run(main()))


def main_sync():
    """Synchronous entry point for console_scripts."""
    with contextlib.suppress(KeyboardInterrupt):
        sys.exit(asyncio.run(main()))
