"""
Shared helpers: deterministic serialisation for error messages, keccak-256
and BIP-32 derivation path parsing.
"""

from __future__ import annotations

import json
from typing import Any

from Crypto.Hash import keccak

from signet_core.defaults import (
    HARDENED_OFFSET,
    PATH_HARDENED,
    PATH_HEADER,
    PATH_SPLITTER,
)


def keccak256(data: bytes) -> bytes:
    """Compute keccak-256 (the Ethereum flavour, not NIST SHA3-256)."""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return str(value)


def object_to_error_string(obj: Any) -> str:
    """
    Serialise *obj* for inclusion in an error message.

    Keys are sorted so the same request always produces the same text.
    Private keys are never part of a request object, so nothing is redacted.
    """
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    return json.dumps(obj, sort_keys=True, default=_jsonable)


def derivation_path_to_array(path: str) -> tuple[int, ...]:
    """
    Parse "m/44'/60'/0'/0/0" into its integer segments.

    Hardened segments carry the 0x80000000 bit, so every index must fit in
    31 bits.  The path is expected to be validated already; a malformed or
    out-of-range segment raises ValueError.
    """
    parts = path.strip().split(PATH_SPLITTER)
    if parts and parts[0].strip().lower() == PATH_HEADER:
        parts = parts[1:]

    segments = []
    for part in parts:
        part = part.strip()
        hardened = part.endswith(PATH_HARDENED)
        index = int(part[:-1] if hardened else part)
        if not 0 <= index < HARDENED_OFFSET:
            raise ValueError(f"Path segment out of range: {part}")
        segments.append(index + HARDENED_OFFSET if hardened else index)
    return tuple(segments)


def derivation_path_from_array(segments: tuple[int, ...] | list[int]) -> str:
    """Inverse of derivation_path_to_array."""
    parts = [PATH_HEADER]
    for index in segments:
        if index >= HARDENED_OFFSET:
            parts.append(f"{index - HARDENED_OFFSET}{PATH_HARDENED}")
        else:
            parts.append(str(index))
    return PATH_SPLITTER.join(parts)
