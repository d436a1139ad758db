"""
Validators for caller input.

Each validator either returns the accepted (possibly coerced) value or
raises ValidationError naming the field and the constraint it broke.
Nothing here talks to a backend; validation always happens before dispatch.
"""

from __future__ import annotations

from dataclasses import fields as dataclass_fields
from typing import Any, Mapping, Optional

from signet_core.defaults import (
    ADDRESS_PATTERN,
    DERIVATION_PATH_PATTERN,
    HARDENED_OFFSET,
    HEX_PATTERN,
    MAX_SAFE_INTEGER,
    SIGNATURE_HEX_LENGTH,
    TRANSACTION,
)
from signet_core.errors import ValidationError
from signet_core.models import TransactionRequest
from signet_core.normalizers import (
    address_normalizer,
    derivation_path_normalizer,
    hex_sequence_normalizer,
    strip_hex_prefix,
)


def derivation_path_validator(path: Any) -> str:
    if not isinstance(path, str):
        raise ValidationError("derivation path", "a string like m/44'/60'/0'/0/0", path)
    compact = "".join(path.split())
    if not DERIVATION_PATH_PATTERN.match(compact):
        raise ValidationError(
            "derivation path", "the m/44'/coin'/account'/change[/index] format", path,
        )
    # hardened segments take the top bit, so each index gets 31 bits
    for segment in compact[2:].split("/"):
        if int(segment.rstrip("'")) >= HARDENED_OFFSET:
            raise ValidationError(
                "derivation path", f"segment indexes below {HARDENED_OFFSET}", path,
            )
    return path


def safe_integer_validator(value: Any, field: str = "integer") -> int:
    # bool is an int subclass, but True is never a meaningful nonce
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "a non-negative safe integer", value)
    if not 0 <= value <= MAX_SAFE_INTEGER:
        raise ValidationError(field, f"an integer between 0 and {MAX_SAFE_INTEGER}", value)
    return value


def big_number_validator(value: Any, field: str = "big number") -> int:
    """
    Accept a non-negative int, or a decimal / 0x-hex string holding one.
    """
    if isinstance(value, bool):
        raise ValidationError(field, "a non-negative integer", value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == "0x":
                number = int(text[2:], 16)
            else:
                number = int(text, 10)
        except ValueError:
            raise ValidationError(field, "a decimal or 0x-hex integer string", value) from None
    else:
        raise ValidationError(field, "a non-negative integer", value)
    if number < 0:
        raise ValidationError(field, "a non-negative integer", value)
    return number


def hex_sequence_validator(value: Any, field: str = "hex sequence") -> str:
    if not isinstance(value, str) or not HEX_PATTERN.match(value.strip()):
        raise ValidationError(field, "a hex string", value)
    return value


def address_validator(address: Any) -> str:
    """
    A 0x-prefixed 20-byte hex address.

    All-lower or all-upper addresses carry no checksum and are accepted
    as-is; a mixed-case address must match its EIP-55 checksum.
    """
    if not isinstance(address, str) or not ADDRESS_PATTERN.match(address.strip()):
        raise ValidationError("address", "0x followed by 40 hex digits", address)
    address = address.strip()
    digits = address[2:]
    if digits != digits.lower() and digits != digits.upper():
        if address_normalizer(address) != address:
            raise ValidationError("address", "a valid EIP-55 checksum", address)
    return address


def message_validator(message: Any) -> Any:
    if not isinstance(message, (str, bytes, bytearray)):
        raise ValidationError("message", "a string or bytes", message)
    if not message:
        raise ValidationError("message", "a non-empty message", message)
    return message


def signature_validator(signature: Any) -> str:
    if isinstance(signature, (bytes, bytearray)):
        signature = hex_sequence_normalizer(signature)
    hex_sequence_validator(signature, "signature")
    if len(strip_hex_prefix(signature.strip())) != SIGNATURE_HEX_LENGTH:
        raise ValidationError("signature", f"{SIGNATURE_HEX_LENGTH // 2} bytes of hex", signature)
    return signature


def transaction_object_validator(
    to: Optional[str] = None,
    gas_price: Any = None,
    gas_limit: Any = None,
    chain_id: Optional[int] = None,
    nonce: Optional[int] = None,
    value: Any = None,
    input_data: Optional[str] = None,
    derivation_path: Optional[str] = None,
) -> TransactionRequest:
    """
    Validate a transaction's fields, filling in defaults for absent ones.

    ``to`` may only be omitted when ``input_data`` carries contract
    creation code.
    """
    input_data = TRANSACTION["input_data"] if input_data is None else input_data
    hex_sequence_validator(input_data, "input data")

    if to is None:
        if not strip_hex_prefix(input_data.strip()):
            raise ValidationError("to", "a recipient address (or contract creation data)", to)
    else:
        address_validator(to)

    extra = {}
    if derivation_path is not None:
        derivation_path_validator(derivation_path)
        extra["derivation_path"] = derivation_path_normalizer(derivation_path)

    return TransactionRequest(
        to=to,
        gas_price=big_number_validator(
            TRANSACTION["gas_price"] if gas_price is None else gas_price, "gas price",
        ),
        gas_limit=big_number_validator(
            TRANSACTION["gas_limit"] if gas_limit is None else gas_limit, "gas limit",
        ),
        chain_id=safe_integer_validator(
            TRANSACTION["chain_id"] if chain_id is None else chain_id, "chain id",
        ),
        nonce=safe_integer_validator(
            TRANSACTION["nonce"] if nonce is None else nonce, "nonce",
        ),
        value=big_number_validator(
            TRANSACTION["value"] if value is None else value, "value",
        ),
        input_data=input_data,
        **extra,
    )


_TRANSACTION_FIELDS = frozenset(f.name for f in dataclass_fields(TransactionRequest))


def transaction_request_validator(request: TransactionRequest | Mapping[str, Any]) -> dict[str, Any]:
    """
    Return the fields of *request* as a fresh dict.

    A mapping may only carry TransactionRequest's field names.
    """
    if isinstance(request, TransactionRequest):
        return request.to_dict()
    if not isinstance(request, Mapping):
        raise ValidationError("transaction", "a TransactionRequest or a mapping of its fields", request)
    unknown = sorted(str(key) for key in request if key not in _TRANSACTION_FIELDS)
    if unknown:
        raise ValidationError(
            "transaction", f"known fields ({', '.join(sorted(_TRANSACTION_FIELDS))})", unknown,
        )
    return dict(request)
