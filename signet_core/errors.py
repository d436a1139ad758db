"""
Error taxonomy for Signet.

    WalletError
      +-- ValidationError      malformed caller input, raised before dispatch
      +-- BackendError         signer callback / device failure, wrapped
      +-- DeviceError          raised by device channels
            +-- UserCancelledError   the user declined on the device
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(WalletError, ValueError):
    """A caller-supplied value failed validation."""

    def __init__(self, field: str, expected: str, value: object = None):
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(f"Invalid {field}: expected {expected}, got {value!r}")


class BackendError(WalletError):
    """The signing backend (callback or device) failed."""


class DeviceError(WalletError):
    """A device channel reported a transport or firmware error."""


class UserCancelledError(DeviceError):
    """The user cancelled the request on the physical device."""
