"""
Tests for signet_core.hardware - payload building and device dispatch.
"""

import logging

import pytest

from signet_core import hardware
from signet_core.defaults import GWEI, HARDENED_OFFSET as H, MESSAGES
from signet_core.errors import BackendError, DeviceError, ValidationError
from signet_core.models import MessageRequest, SignatureComponents, VerifyRequest

from conftest import FakeChannel, RECIPIENT

PATH = "m/44'/60'/0'/0/0"
PATH_ARRAY = [44 + H, 60 + H, 0 + H, 0, 0]
SIGNATURE = "0x" + "ab" * 65


class TestSignTransaction:

    @pytest.mark.asyncio
    async def test_payload_shape(self, channel):
        await hardware.sign_transaction(
            {"derivation_path": PATH, "to": RECIPIENT, "nonce": 300, "chain_id": 3,
             "gas_limit": 21000, "value": 10**18, "input_data": "0xabc"},
            channel,
        )
        assert channel.last == {
            "type": "signethtx",
            "address_n": PATH_ARRAY,
            "nonce": "012c",
            "gas_price": "02540be400",
            "gas_limit": "5208",
            "to": RECIPIENT[2:],
            "value": "0de0b6b3a7640000",
            "data": "0abc",
            "chain_id": 3,
        }

    @pytest.mark.asyncio
    async def test_default_gas_price_is_ten_gwei(self, channel):
        await hardware.sign_transaction({"derivation_path": PATH, "to": RECIPIENT}, channel)
        assert int(channel.last["gas_price"], 16) == 10 * GWEI
        assert channel.last["nonce"] == "00"

    @pytest.mark.asyncio
    async def test_shorthand_path(self, channel):
        await hardware.sign_transaction(
            {"derivation_path": "m/44'/60'/0'/0", "to": RECIPIENT}, channel,
        )
        assert channel.last["address_n"] == PATH_ARRAY

    @pytest.mark.asyncio
    async def test_returns_components(self):
        channel = FakeChannel(response={"r": "abc", "s": 5, "v": "28"})
        result = await hardware.sign_transaction(
            {"derivation_path": PATH, "to": RECIPIENT}, channel,
        )
        assert result == SignatureComponents(r="0x0abc", s="0x05", v=28)

    @pytest.mark.asyncio
    async def test_path_required(self, channel):
        with pytest.raises(ValidationError):
            await hardware.sign_transaction({"to": RECIPIENT}, channel)
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_out_of_range_path_segment(self, channel):
        with pytest.raises(ValidationError) as exc:
            await hardware.sign_transaction(
                {"derivation_path": "m/44'/60'/0'/0/4294967296", "to": RECIPIENT}, channel,
            )
        assert exc.value.field == "derivation path"
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, channel):
        with pytest.raises(ValidationError) as exc:
            await hardware.sign_transaction(
                {"derivation_path": PATH, "to": RECIPIENT, "gasPrice": 1}, channel,
            )
        assert exc.value.field == "transaction"
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_bad_nonce(self, channel):
        with pytest.raises(ValidationError):
            await hardware.sign_transaction(
                {"derivation_path": PATH, "to": RECIPIENT, "nonce": 1.5}, channel,
            )

    @pytest.mark.asyncio
    async def test_cancel_sentinel_resolves_none(self, cancelled_channel, caplog):
        with caplog.at_level(logging.WARNING, logger="signet_core.hardware"):
            result = await hardware.sign_transaction(
                {"derivation_path": PATH, "to": RECIPIENT}, cancelled_channel,
            )
        assert result is None
        assert MESSAGES["user_sign_tx_cancel"] in caplog.text

    @pytest.mark.asyncio
    async def test_user_cancelled_error_resolves_none(self, user_cancelled_channel):
        result = await hardware.sign_transaction(
            {"derivation_path": PATH, "to": RECIPIENT}, user_cancelled_channel,
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_configurable_sentinel(self):
        channel = FakeChannel(error=DeviceError("Denied"))
        result = await hardware.sign_transaction(
            {"derivation_path": PATH, "to": RECIPIENT}, channel, cancel_message="Denied",
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_other_device_errors_propagate(self):
        channel = FakeChannel(error=DeviceError("Device disconnected"))
        with pytest.raises(BackendError) as info:
            await hardware.sign_transaction({"derivation_path": PATH, "to": RECIPIENT}, channel)
        assert "Device disconnected" in str(info.value)
        assert str(info.value).startswith(MESSAGES["cannot_sign"])

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        channel = FakeChannel(response={"signature": "00"})
        with pytest.raises(BackendError):
            await hardware.sign_transaction({"derivation_path": PATH, "to": RECIPIENT}, channel)


class TestSignMessage:

    @pytest.mark.asyncio
    async def test_payload_and_result(self):
        channel = FakeChannel(response={"signature": "ab" * 65})
        result = await hardware.sign_message(MessageRequest(message="hello", derivation_path=PATH), channel)
        assert result == SIGNATURE
        assert channel.last == {"type": "signethmsg", "path": PATH_ARRAY, "message": "hello"}

    @pytest.mark.asyncio
    async def test_bytes_message_sent_as_text(self):
        channel = FakeChannel(response={"signature": "ab" * 65})
        await hardware.sign_message(MessageRequest(message=b"hello", derivation_path=PATH), channel)
        assert channel.last["message"] == "hello"

    @pytest.mark.asyncio
    async def test_non_utf8_bytes_rejected(self, channel):
        with pytest.raises(ValidationError) as exc:
            await hardware.sign_message(MessageRequest(message=b"\xff\xfe", derivation_path=PATH), channel)
        assert exc.value.field == "message"
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_cancel(self, cancelled_channel):
        assert await hardware.sign_message(MessageRequest(message="x", derivation_path=PATH), cancelled_channel) is None

    @pytest.mark.asyncio
    async def test_invalid_path(self, channel):
        with pytest.raises(ValidationError):
            await hardware.sign_message(MessageRequest(message="x", derivation_path="m/0"), channel)


class TestVerifyMessage:

    @pytest.mark.asyncio
    async def test_prefix_stripped(self):
        channel = FakeChannel(response={"success": True})
        address = "0x" + RECIPIENT[2:].upper()
        valid = await hardware.verify_message(
            VerifyRequest(address=address, message="hello", signature=SIGNATURE), channel,
        )
        assert valid is True
        sent = channel.last
        assert sent["type"] == "verifyethmsg"
        assert sent["address"] == RECIPIENT[2:]
        assert not sent["address"].startswith("0x")
        assert sent["signature"] == "ab" * 65

    @pytest.mark.asyncio
    async def test_invalid_flag(self):
        channel = FakeChannel(response={"success": False})
        valid = await hardware.verify_message(
            VerifyRequest(address=RECIPIENT, message="hello", signature=SIGNATURE), channel,
        )
        assert valid is False

    @pytest.mark.asyncio
    async def test_non_utf8_bytes_rejected(self, channel):
        with pytest.raises(ValidationError) as exc:
            await hardware.verify_message(
                VerifyRequest(address=RECIPIENT, message=b"\xff\xfe", signature=SIGNATURE), channel,
            )
        assert exc.value.field == "message"
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_bad_address(self, channel):
        with pytest.raises(ValidationError):
            await hardware.verify_message(
                VerifyRequest(address="0x12", message="hello", signature=SIGNATURE), channel,
            )


class TestGetAddress:

    @pytest.mark.asyncio
    async def test_checksummed(self):
        channel = FakeChannel(response={"address": RECIPIENT[2:].lower()})
        assert await hardware.get_address(PATH, channel) == RECIPIENT
        assert channel.last == {"type": "getethaddress", "path": PATH_ARRAY, "show_display": False}

    @pytest.mark.asyncio
    async def test_export_cancelled(self):
        channel = FakeChannel(error=DeviceError("Export cancelled"))
        assert await hardware.get_address(PATH, channel) is None

    @pytest.mark.asyncio
    async def test_garbage_address(self):
        channel = FakeChannel(response={"address": "nothex"})
        with pytest.raises(BackendError):
            await hardware.get_address(PATH, channel)


class TestRecoveryParam:

    @pytest.mark.asyncio
    async def test_raw_recovery_id_mapped(self):
        channel = FakeChannel(response={"r": "01", "s": "02", "v": 1})
        result = await hardware.sign_transaction({"derivation_path": PATH, "to": RECIPIENT}, channel)
        assert result.v == 28

    def test_components_to_hex(self):
        sig = SignatureComponents(r="0x01", s="0x02", v=27)
        assert sig.to_hex() == "0x" + "00" * 31 + "01" + "00" * 31 + "02" + "1b"
