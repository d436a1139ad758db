"""
Shared pytest fixtures for the Signet test suite.
"""

import pytest

from signet_core.errors import DeviceError, UserCancelledError

# Well-known throwaway key; never holds funds.
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

# EIP-55 reference vectors.
CHECKSUM_ADDRESSES = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]

RECIPIENT = CHECKSUM_ADDRESSES[0]


class FakeChannel:
    """Device channel double: records payloads, answers from a script."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {}
        self.error = error
        self.sent: list[dict] = []

    async def send(self, payload):
        self.sent.append(payload)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self) -> dict:
        return self.sent[-1]


class FakeIconGenerator:
    """Icon generator double that counts calls."""

    def __init__(self, image: bytes = b"\x89PNG-fake"):
        self.image = image
        self.seeds: list[str] = []

    def create(self, seed: str) -> bytes:
        self.seeds.append(seed)
        return self.image


@pytest.fixture
def private_key():
    return PRIVATE_KEY


@pytest.fixture
def channel():
    return FakeChannel(response={"r": "0x01", "s": "0x02", "v": 27})


@pytest.fixture
def cancelled_channel():
    return FakeChannel(error=DeviceError("Action cancelled by user"))


@pytest.fixture
def user_cancelled_channel():
    return FakeChannel(error=UserCancelledError("declined"))


@pytest.fixture
def icons():
    return FakeIconGenerator()
