"""
Device channels: how a built payload reaches a hardware wallet.

A channel is anything with ``async send(payload) -> dict``.  It resolves
with the device's response payload, or raises DeviceError; a user
declining on the device raises UserCancelledError.  A send may wait
indefinitely for the user to press a button on the device.

BridgeChannel talks to a local device bridge over HTTP: the payload is
POSTed as JSON and the bridge answers ``{"success": bool, "payload": {...}}``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, runtime_checkable

import aiohttp

from signet_core.config import BridgeConfig, HardwareConfig
from signet_core.defaults import STD_ERRORS
from signet_core.errors import DeviceError, UserCancelledError

logger = logging.getLogger(__name__)


@runtime_checkable
class DeviceChannel(Protocol):
    async def send(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...


def device_error_from_text(message: str, cancel_message: str = STD_ERRORS["CANCEL_TX_SIGN"]) -> DeviceError:
    """Map the device's error text onto the error taxonomy."""
    if message == cancel_message:
        return UserCancelledError(message)
    return DeviceError(message)


class BridgeChannel:
    """HTTP channel to a device bridge daemon."""

    def __init__(
        self,
        url: str = "http://127.0.0.1:21325",
        endpoint: str = "/call",
        timeout_seconds: float = 0.0,
        cancel_message: str = STD_ERRORS["CANCEL_TX_SIGN"],
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.url = url.rstrip("/") + endpoint
        self.timeout_seconds = timeout_seconds
        self.cancel_message = cancel_message
        self._session = session

    @classmethod
    def from_config(
        cls,
        bridge: BridgeConfig,
        hardware: HardwareConfig | None = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> BridgeChannel:
        hardware = hardware or HardwareConfig()
        return cls(
            url=bridge.url,
            endpoint=bridge.endpoint,
            timeout_seconds=bridge.timeout_seconds,
            cancel_message=hardware.cancel_message,
            session=session,
        )

    async def send(self, payload: dict[str, Any]) -> dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds or None)
        logger.debug("Sending %s to bridge at %s", payload.get("type"), self.url,
                     extra={"operation": payload.get("type")})
        try:
            if self._session is not None:
                body = await self._post(self._session, payload, timeout)
            else:
                async with aiohttp.ClientSession() as session:
                    body = await self._post(session, payload, timeout)
        except aiohttp.ClientError as exc:
            raise DeviceError(f"Device bridge request failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise DeviceError(
                f"Device bridge did not answer within {self.timeout_seconds}s"
            ) from exc
        return self._unwrap(body)

    async def _post(
        self,
        session: aiohttp.ClientSession,
        payload: dict[str, Any],
        timeout: aiohttp.ClientTimeout,
    ) -> Any:
        async with session.post(self.url, json=payload, timeout=timeout) as resp:
            resp.raise_for_status()
            return await resp.json()

    def _unwrap(self, body: Any) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise DeviceError(f"Malformed bridge response: {body!r}")
        response = body.get("payload") or {}
        if body.get("success"):
            if not isinstance(response, dict):
                raise DeviceError(f"Malformed bridge payload: {response!r}")
            return response
        message = response.get("error") if isinstance(response, dict) else None
        raise device_error_from_text(message or "Unknown device error", self.cancel_message)
