"""
Request and response value objects.

These are transient: they live for the duration of a single signing call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Union

from signet_core.defaults import DEFAULT_DERIVATION_PATH

Message = Union[str, bytes]


@dataclass(frozen=True)
class TransactionRequest:
    """A validated transaction with defaults applied."""
    to: Optional[str]
    gas_price: int
    gas_limit: int
    chain_id: int
    nonce: int
    value: int
    input_data: str = "0x"
    derivation_path: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MessageRequest:
    message: Message
    derivation_path: str = DEFAULT_DERIVATION_PATH

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VerifyRequest:
    address: str
    message: Message
    signature: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SignatureComponents:
    """ECDSA signature split into r, s and the recovery parameter v."""
    r: str
    s: str
    v: int

    def to_dict(self) -> dict:
        return asdict(self)

    def to_hex(self) -> str:
        """Concatenated 65-byte signature, 0x-prefixed."""
        return "0x" + self.r[2:].rjust(64, "0") + self.s[2:].rjust(64, "0") + format(self.v, "02x")
