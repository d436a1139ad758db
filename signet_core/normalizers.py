"""
Normalizers: turn already-validated input into its canonical wire form.

These never validate; pass values through signet_core.validators first.
"""

from __future__ import annotations

from signet_core.defaults import (
    DEFAULT_ADDRESS_INDEX,
    HEX_PREFIX,
    PATH_SPLITTER,
)
from signet_core.utils import keccak256


def strip_hex_prefix(value: str) -> str:
    if value[:2].lower() == HEX_PREFIX:
        return value[2:]
    return value


def address_normalizer(address: str, prefix: bool = True) -> str:
    """
    Return the EIP-55 mixed-case checksum form of *address*.

    The checksum upper-cases every hex letter whose matching nibble in
    keccak256(lowercase_hex) is >= 8.
    """
    hex_lower = strip_hex_prefix(address.strip()).lower()
    address_hash = keccak256(hex_lower.encode("ascii")).hex()
    checksummed = "".join(
        ch.upper() if ch.isalpha() and int(address_hash[i], 16) >= 8 else ch
        for i, ch in enumerate(hex_lower)
    )
    return (HEX_PREFIX if prefix else "") + checksummed


def multiple_of_two_hex_value_normalizer(value: str) -> str:
    """Left-pad an unprefixed hex string to whole bytes: '3' -> '03'."""
    return value if len(value) % 2 == 0 else "0" + value


def hex_sequence_normalizer(value: str | bytes | bytearray, prefix: bool = True) -> str:
    """
    Canonical hex string: even digit count, with (or without) a 0x prefix.

    Accepts raw bytes as well, since signing backends return either.
    """
    if isinstance(value, (bytes, bytearray)):
        digits = bytes(value).hex()
    else:
        digits = multiple_of_two_hex_value_normalizer(strip_hex_prefix(value.strip()))
    return (HEX_PREFIX if prefix else "") + digits


def int_to_hex(value: int, prefix: bool = False) -> str:
    """Whole-byte hex for a non-negative integer: 300 -> '012c'."""
    return hex_sequence_normalizer(format(value, "x"), prefix=prefix)


def derivation_path_normalizer(path: str) -> str:
    """
    Canonical textual derivation path.

    Whitespace is removed, the header is lower-cased and a shorthand path
    that stops at the change level gets the default address index, so
    "M / 44'/60'/0'/0" becomes "m/44'/60'/0'/0/0".
    """
    parts = [part.strip() for part in path.strip().split(PATH_SPLITTER)]
    parts[0] = parts[0].lower()
    if len(parts) == 5:
        parts.append(str(DEFAULT_ADDRESS_INDEX))
    return PATH_SPLITTER.join(parts)


def recovery_param_normalizer(v: int) -> int:
    """Map a raw recovery id (0/1) to the legacy 27/28 form."""
    return v + 27 if v in (0, 1) else v
