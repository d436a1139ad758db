"""
Software-wallet signing.

The signing itself happens in an injected callback (normally a bound
eth_account method); this module validates and normalises what goes in
and what comes out, and turns backend failures into BackendError.

Callbacks may be plain functions or coroutine functions.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Union

from signet_core.defaults import MESSAGES
from signet_core.errors import BackendError
from signet_core.models import Message, TransactionRequest
from signet_core.normalizers import address_normalizer, hex_sequence_normalizer
from signet_core.utils import object_to_error_string
from signet_core.validators import (
    address_validator,
    message_validator,
    signature_validator,
    transaction_object_validator,
    transaction_request_validator,
)

logger = logging.getLogger(__name__)

SignerResult = Union[str, bytes]
TransactionSigner = Callable[[dict], Union[SignerResult, Awaitable[SignerResult]]]
MessageSigner = Callable[[Message], Union[SignerResult, Awaitable[SignerResult]]]
MessageRecoverer = Callable[[Message, str], Union[str, Awaitable[str]]]


async def _invoke(callback: Callable[..., Any], *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def to_eth_transaction(tx: TransactionRequest) -> dict[str, Any]:
    """The legacy transaction dict eth_account's sign_transaction expects."""
    eth_tx = {
        "gasPrice": tx.gas_price,
        "gas": tx.gas_limit,
        "chainId": tx.chain_id,
        "nonce": tx.nonce,
        "value": tx.value,
        "data": hex_sequence_normalizer(tx.input_data),
    }
    if tx.to is not None:
        eth_tx["to"] = address_normalizer(tx.to)
    return eth_tx


async def sign_transaction(
    request: TransactionRequest | Mapping[str, Any],
    callback: TransactionSigner,
) -> str:
    """
    Sign a transaction and return the serialized signed transaction as hex.

    *request* may be a TransactionRequest or a mapping of its fields;
    missing fields get the defaults from transaction_object_validator.
    """
    fields = transaction_request_validator(request)
    tx = transaction_object_validator(**fields)
    try:
        signed = await _invoke(callback, to_eth_transaction(tx))
    except Exception as exc:
        raise BackendError(
            f"{MESSAGES['cannot_sign']} {object_to_error_string(fields)} {exc}"
        ) from exc
    logger.debug("Signed transaction nonce=%d chain_id=%d", tx.nonce, tx.chain_id,
                 extra={"operation": "signtx"})
    return hex_sequence_normalizer(signed)


async def sign_message(message: Message, callback: MessageSigner) -> str:
    """Sign *message* and return the 65-byte signature as 0x hex."""
    message_validator(message)
    try:
        signature = await _invoke(callback, message)
    except Exception as exc:
        raise BackendError(
            f"{MESSAGES['cannot_sign_message']}: {message!r} Error: {exc}"
        ) from exc
    return hex_sequence_normalizer(signature)


async def verify_message(
    address: str,
    message: Message,
    signature: str | bytes,
    recover: MessageRecoverer,
) -> bool:
    """
    Check that *signature* over *message* was produced by *address*.

    *recover* returns the address that produced the signature.
    """
    address_validator(address)
    message_validator(message)
    signature = hex_sequence_normalizer(signature_validator(signature))
    try:
        recovered = await _invoke(recover, message, signature)
    except Exception as exc:
        raise BackendError(
            f"{MESSAGES['cannot_verify_message']} "
            f"{object_to_error_string({'address': address, 'message': message, 'signature': signature})} "
            f"{exc}"
        ) from exc
    return address_normalizer(recovered) == address_normalizer(address)
