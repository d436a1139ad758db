"""
Hardware-wallet signing.

Every operation builds a payload from its template and hands it to a
DeviceChannel.  The device may take as long as the user needs to confirm
on screen.  When the user declines, the call logs a warning and returns
None instead of raising, since declining is part of a normal workflow.
Any other device failure is raised as BackendError.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from signet_core.channels import DeviceChannel
from signet_core.defaults import HARDWARE_GAS_PRICE, MESSAGES, STD_ERRORS
from signet_core.errors import BackendError, UserCancelledError, ValidationError
from signet_core.models import MessageRequest, SignatureComponents, TransactionRequest, VerifyRequest
from signet_core.normalizers import (
    address_normalizer,
    derivation_path_normalizer,
    hex_sequence_normalizer,
    int_to_hex,
    recovery_param_normalizer,
    strip_hex_prefix,
)
from signet_core.payloads import (
    PAYLOAD_GETADDRESS,
    PAYLOAD_SIGNMSG,
    PAYLOAD_SIGNTX,
    PAYLOAD_VERIFYMSG,
    build_payload,
)
from signet_core.utils import derivation_path_to_array, object_to_error_string
from signet_core.validators import (
    address_validator,
    derivation_path_validator,
    message_validator,
    signature_validator,
    transaction_object_validator,
    transaction_request_validator,
)

logger = logging.getLogger(__name__)

CANCEL_MESSAGE = STD_ERRORS["CANCEL_TX_SIGN"]


def _is_cancellation(exc: Exception, cancel_message: str) -> bool:
    return isinstance(exc, UserCancelledError) or str(exc) == cancel_message


async def _dispatch(
    channel: DeviceChannel,
    payload: dict[str, Any],
    failure: str,
    cancel_warning: str,
    cancel_message: str,
) -> Optional[dict[str, Any]]:
    """Send *payload*; None means the user cancelled on the device."""
    try:
        response = await channel.send(payload)
    except Exception as exc:
        if _is_cancellation(exc, cancel_message):
            logger.warning(cancel_warning, extra={"operation": payload["type"]})
            return None
        raise BackendError(f"{failure} {object_to_error_string(payload)} {exc}") from exc
    if not isinstance(response, dict):
        raise BackendError(f"{failure} Unexpected device response: {response!r}")
    return response


def _path_array(path: str) -> list[int]:
    return list(derivation_path_to_array(derivation_path_normalizer(path)))


def _message_text(message: Any) -> str:
    # the firmware takes the message as text
    if isinstance(message, (bytes, bytearray)):
        try:
            return bytes(message).decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("message", "UTF-8 text", message) from None
    return message


def _signature_part(value: Any) -> str:
    if isinstance(value, int):
        return int_to_hex(value, prefix=True)
    return hex_sequence_normalizer(value)


async def sign_transaction(
    request: TransactionRequest | Mapping[str, Any],
    channel: DeviceChannel,
    default_gas_price: int = HARDWARE_GAS_PRICE,
    cancel_message: str = CANCEL_MESSAGE,
) -> Optional[SignatureComponents]:
    """
    Sign a transaction on the device.

    Returns the r, s and v signature components, or None if the user
    cancelled.  Numeric fields travel as unprefixed whole-byte hex, the
    derivation path as its integer segments.
    """
    fields = transaction_request_validator(request)
    derivation_path_validator(fields.get("derivation_path"))
    if fields.get("gas_price") is None:
        fields["gas_price"] = default_gas_price
    tx = transaction_object_validator(**fields)

    payload = build_payload(
        PAYLOAD_SIGNTX,
        address_n=_path_array(tx.derivation_path),
        gas_price=int_to_hex(tx.gas_price),
        gas_limit=int_to_hex(tx.gas_limit),
        chain_id=tx.chain_id,
        nonce=int_to_hex(tx.nonce),
        to=strip_hex_prefix(tx.to) if tx.to is not None else "",
        value=int_to_hex(tx.value),
        data=hex_sequence_normalizer(tx.input_data, prefix=False),
    )
    response = await _dispatch(
        channel, payload, MESSAGES["cannot_sign"], MESSAGES["user_sign_tx_cancel"], cancel_message,
    )
    if response is None:
        return None
    try:
        return SignatureComponents(
            r=_signature_part(response["r"]),
            s=_signature_part(response["s"]),
            v=recovery_param_normalizer(int(response["v"])),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise BackendError(f"{MESSAGES['cannot_sign']} Malformed device response: {response!r}") from exc


async def sign_message(
    request: MessageRequest,
    channel: DeviceChannel,
    cancel_message: str = CANCEL_MESSAGE,
) -> Optional[str]:
    """Sign a message on the device; returns the 0x hex signature or None."""
    derivation_path_validator(request.derivation_path)
    message_validator(request.message)
    message = _message_text(request.message)
    payload = build_payload(
        PAYLOAD_SIGNMSG,
        path=_path_array(request.derivation_path),
        message=message,
    )
    response = await _dispatch(
        channel, payload, MESSAGES["cannot_sign_message"], MESSAGES["user_sign_msg_cancel"],
        cancel_message,
    )
    if response is None:
        return None
    if "signature" not in response:
        raise BackendError(f"{MESSAGES['cannot_sign_message']} Malformed device response: {response!r}")
    return hex_sequence_normalizer(response["signature"])


async def verify_message(
    request: VerifyRequest,
    channel: DeviceChannel,
    cancel_message: str = CANCEL_MESSAGE,
) -> Optional[bool]:
    """
    Ask the device whether *signature* over *message* belongs to *address*.

    The firmware expects the address and signature without the 0x prefix.
    """
    address_validator(request.address)
    message_validator(request.message)
    signature = signature_validator(request.signature)
    message = _message_text(request.message)
    payload = build_payload(
        PAYLOAD_VERIFYMSG,
        address=address_normalizer(request.address, prefix=False),
        message=message,
        signature=hex_sequence_normalizer(signature, prefix=False),
    )
    response = await _dispatch(
        channel, payload, MESSAGES["cannot_verify_message"], MESSAGES["user_verify_msg_cancel"],
        cancel_message,
    )
    if response is None:
        return None
    return bool(response.get("success", False))


async def get_address(
    derivation_path: str,
    channel: DeviceChannel,
    show_display: bool = False,
    cancel_message: str = STD_ERRORS["CANCEL_ACC_EXPORT"],
) -> Optional[str]:
    """Checksummed address the device derives at *derivation_path*."""
    derivation_path_validator(derivation_path)
    payload = build_payload(
        PAYLOAD_GETADDRESS,
        path=_path_array(derivation_path),
        show_display=show_display,
    )
    response = await _dispatch(
        channel, payload, MESSAGES["cannot_get_address"], MESSAGES["user_export_cancel"],
        cancel_message,
    )
    if response is None:
        return None
    try:
        return address_normalizer(address_validator(
            hex_sequence_normalizer(response["address"]).lower()
        ))
    except (KeyError, AttributeError, ValueError) as exc:
        raise BackendError(f"{MESSAGES['cannot_get_address']} Malformed device response: {response!r}") from exc
