"""
Default values, patterns and user-facing message prefixes.

Everything here is immutable; per-call payloads are built from these by
copying, never by mutating a shared object.
"""

from __future__ import annotations

import re
from types import MappingProxyType

GWEI = 10**9

# ---- derivation paths ----

PATH_HEADER = "m"
PATH_SPLITTER = "/"
PATH_HARDENED = "'"
HARDENED_OFFSET = 0x80000000
COIN_MAINNET = 60
COIN_TESTNET = 1
DEFAULT_ADDRESS_INDEX = 0
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"

# m / purpose' / coin_type' / account' / change [/ address_index]
DERIVATION_PATH_PATTERN = re.compile(
    r"^m/44'/\d+'/\d+'/\d+(/\d+)?$",
    re.IGNORECASE,
)

# ---- hex / addresses ----

HEX_PREFIX = "0x"
HEX_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]*$")
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
SIGNATURE_HEX_LENGTH = 130  # r (32) + s (32) + v (1) bytes

MAX_SAFE_INTEGER = 2**53 - 1

# ---- transactions ----

TRANSACTION = MappingProxyType({
    "gas_price": 9 * GWEI,
    "gas_limit": 21000,
    "chain_id": 1,
    "nonce": 0,
    "value": 1,
    "input_data": "0x",
})

HARDWARE_GAS_PRICE = 10 * GWEI

# ---- device errors ----

STD_ERRORS = MappingProxyType({
    "CANCEL_TX_SIGN": "Action cancelled by user",
    "CANCEL_ACC_EXPORT": "Export cancelled",
})

# ---- messages ----

MESSAGES = MappingProxyType({
    "cannot_sign": "Could not sign the transaction.",
    "cannot_sign_message": "Could not sign the message.",
    "cannot_verify_message": "Could not verify the message.",
    "cannot_get_address": "Could not get the address from the device.",
    "user_sign_tx_cancel": "The user cancelled signing the transaction on the device.",
    "user_sign_msg_cancel": "The user cancelled signing the message on the device.",
    "user_verify_msg_cancel": "The user cancelled verifying the message on the device.",
    "user_export_cancel": "The user cancelled exporting the address from the device.",
    "no_address_blockie": "Could not create the blockie: the wallet has no address set.",
})
