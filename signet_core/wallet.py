"""
Wallet facades for Signet.

SoftwareWallet wraps a secp256k1 private key and provides:
  - Address and public key derivation
  - Transaction and message signing (through eth_account)
  - Message verification
  - Keystore (v3 JSON) import / export
  - A blockie identicon for the address

HardwareWallet wraps a device channel and a derivation path and provides
the same signing surface, with the keys staying on the device.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ecdsa import SECP256k1, SigningKey
from eth_account import Account
from eth_account.messages import encode_defunct

from signet_core import hardware, software
from signet_core.blockie import IconGenerator, PydenticonGenerator, blockie_data_uri
from signet_core.channels import DeviceChannel
from signet_core.defaults import DEFAULT_DERIVATION_PATH, HARDWARE_GAS_PRICE, MESSAGES, STD_ERRORS
from signet_core.errors import BackendError, ValidationError
from signet_core.models import (
    Message,
    MessageRequest,
    SignatureComponents,
    TransactionRequest,
    VerifyRequest,
)
from signet_core.normalizers import (
    address_normalizer,
    derivation_path_normalizer,
    hex_sequence_normalizer,
)
from signet_core.utils import keccak256
from signet_core.validators import derivation_path_validator, hex_sequence_validator

logger = logging.getLogger(__name__)


def _signable(message: Message):
    if isinstance(message, str):
        return encode_defunct(text=message)
    return encode_defunct(primitive=bytes(message))


def _private_key_bytes(private_key: str | bytes) -> bytes:
    if isinstance(private_key, str):
        hex_sequence_validator(private_key, "private key")
        private_key = bytes.fromhex(hex_sequence_normalizer(private_key, prefix=False))
    if len(private_key) != 32:
        raise ValidationError("private key", "32 bytes", f"<{len(private_key)} bytes>")
    return bytes(private_key)


def address_from_public_key(public_key: bytes) -> str:
    """Checksummed address: last 20 bytes of keccak256 over the raw X||Y point."""
    if len(public_key) == 65:
        public_key = public_key[1:]
    return address_normalizer(keccak256(public_key)[-20:].hex())


def wallet_blockie(address: Optional[str], generator: IconGenerator) -> Optional[str]:
    """
    Blockie data URI for *address*, or None (with a warning) when the
    wallet has no address yet.  The generator is not called in that case.
    """
    if not address:
        logger.warning(MESSAGES["no_address_blockie"])
        return None
    return blockie_data_uri(address, generator)


# ===================================================================
#  Software wallet
# ===================================================================

@dataclass
class SoftwareWallet:
    """A wallet whose private key is held in process memory."""

    private_key: bytes = field(repr=False)
    address: Optional[str] = None
    derivation_path: Optional[str] = None
    icon_generator: IconGenerator = field(
        default_factory=PydenticonGenerator, repr=False, compare=False,
    )
    _blockie: Optional[tuple[str, str]] = field(
        default=None, init=False, repr=False, compare=False,
    )

    # ---- factory methods ----

    @classmethod
    def from_private_key(cls, private_key: str | bytes, **kwargs: Any) -> SoftwareWallet:
        """Open a wallet from a raw 32-byte key or its hex form."""
        key = _private_key_bytes(private_key)
        wallet = cls(private_key=key, **kwargs)
        wallet.address = address_from_public_key(wallet.public_key_bytes)
        return wallet

    @classmethod
    def create(cls, entropy: str = "", **kwargs: Any) -> SoftwareWallet:
        """Generate a brand-new random wallet."""
        account = Account.create(extra_entropy=entropy)
        return cls.from_private_key(bytes(account.key), **kwargs)

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        derivation_path: str = DEFAULT_DERIVATION_PATH,
        passphrase: str = "",
        **kwargs: Any,
    ) -> SoftwareWallet:
        """
        Open the account at *derivation_path* of a BIP-39 mnemonic.

        Derivation is done by eth_account.
        """
        derivation_path_validator(derivation_path)
        path = derivation_path_normalizer(derivation_path)
        Account.enable_unaudited_hdwallet_features()
        try:
            account = Account.from_mnemonic(mnemonic, passphrase=passphrase, account_path=path)
        except Exception as exc:
            raise ValidationError("mnemonic", "a valid BIP-39 phrase", "<redacted>") from exc
        return cls.from_private_key(bytes(account.key), derivation_path=path, **kwargs)

    @classmethod
    def import_encrypted(cls, keystore: Mapping[str, Any] | str, password: str, **kwargs: Any) -> SoftwareWallet:
        """Open a wallet from an encrypted v3 keystore (dict or JSON text)."""
        try:
            key = Account.decrypt(keystore, password)
        except Exception as exc:
            raise BackendError(f"Could not decrypt the keystore: {exc}") from exc
        return cls.from_private_key(bytes(key), **kwargs)

    # ---- keys ----

    @property
    def public_key_bytes(self) -> bytes:
        """Uncompressed secp256k1 public key (65 bytes, 0x04 prefix)."""
        sk = SigningKey.from_string(self.private_key, curve=SECP256k1)
        return b"\x04" + sk.get_verifying_key().to_string()

    @property
    def public_key(self) -> str:
        return hex_sequence_normalizer(self.public_key_bytes)

    # ---- signing ----

    def _sign_transaction_callback(self, tx: dict) -> bytes:
        return bytes(Account.sign_transaction(tx, self.private_key).raw_transaction)

    def _sign_message_callback(self, message: Message) -> bytes:
        return bytes(Account.sign_message(_signable(message), self.private_key).signature)

    @staticmethod
    def _recover_callback(message: Message, signature: str) -> str:
        return Account.recover_message(_signable(message), signature=signature)

    async def sign_transaction(
        self,
        request: TransactionRequest | Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> str:
        """
        Sign a transaction and return the serialized signed transaction (0x hex).

        Pass either a TransactionRequest / mapping or its fields as keywords.
        """
        return await software.sign_transaction(
            request if request is not None else fields, self._sign_transaction_callback,
        )

    async def sign_message(self, message: Message) -> str:
        return await software.sign_message(message, self._sign_message_callback)

    async def verify_message(
        self,
        message: Message,
        signature: str | bytes,
        address: Optional[str] = None,
    ) -> bool:
        """Verify *signature* against *address* (this wallet's, by default)."""
        return await software.verify_message(
            address or self.address, message, signature, self._recover_callback,
        )

    # ---- blockie ----

    def blockie(self) -> Optional[str]:
        """
        Identicon for the wallet's address as a base64 PNG data URI.

        Generated on first use and cached until the address changes.
        """
        if self._blockie is not None and self._blockie[0] == self.address:
            return self._blockie[1]
        uri = wallet_blockie(self.address, self.icon_generator)
        if uri is not None:
            self._blockie = (self.address, uri)
        return uri

    # ---- serialisation ----

    def export_encrypted(self, password: str, kdf: str = "scrypt", iterations: Optional[int] = None) -> dict:
        """Encrypt the private key into a v3 keystore dict."""
        return Account.encrypt(self.private_key, password, kdf=kdf, iterations=iterations)

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "public_key": self.public_key,
            "derivation_path": self.derivation_path,
        }

    def __repr__(self) -> str:
        return f"SoftwareWallet({self.address})"


def open_software_wallet(
    private_key: str | bytes | None = None,
    mnemonic: str | None = None,
    derivation_path: str = DEFAULT_DERIVATION_PATH,
    keystore: Mapping[str, Any] | str | None = None,
    password: str | None = None,
    entropy: str = "",
    **kwargs: Any,
) -> SoftwareWallet:
    """
    Open a software wallet from whichever secret is supplied.

    Precedence: private key, then mnemonic, then keystore.  With none of
    them a new random wallet is generated.
    """
    if private_key is not None:
        return SoftwareWallet.from_private_key(private_key, **kwargs)
    if mnemonic is not None:
        return SoftwareWallet.from_mnemonic(mnemonic, derivation_path, **kwargs)
    if keystore is not None:
        if password is None:
            raise ValidationError("password", "a password to decrypt the keystore", None)
        return SoftwareWallet.import_encrypted(keystore, password, **kwargs)
    return SoftwareWallet.create(entropy=entropy, **kwargs)


# ===================================================================
#  Hardware wallet
# ===================================================================

@dataclass
class HardwareWallet:
    """A wallet whose key lives on a device reached through *channel*."""

    channel: DeviceChannel = field(repr=False)
    derivation_path: str = DEFAULT_DERIVATION_PATH
    address: Optional[str] = None
    cancel_message: str = STD_ERRORS["CANCEL_TX_SIGN"]
    gas_price: int = HARDWARE_GAS_PRICE
    icon_generator: IconGenerator = field(
        default_factory=PydenticonGenerator, repr=False, compare=False,
    )

    @classmethod
    async def open(
        cls,
        channel: DeviceChannel,
        derivation_path: str = DEFAULT_DERIVATION_PATH,
        show_display: bool = False,
        **kwargs: Any,
    ) -> Optional[HardwareWallet]:
        """
        Ask the device for the address at *derivation_path*.

        Returns None if the user cancels the export on the device.
        """
        derivation_path_validator(derivation_path)
        path = derivation_path_normalizer(derivation_path)
        address = await hardware.get_address(path, channel, show_display=show_display)
        if address is None:
            return None
        return cls(channel=channel, derivation_path=path, address=address, **kwargs)

    async def sign_transaction(
        self,
        request: TransactionRequest | Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Optional[SignatureComponents]:
        if isinstance(request, TransactionRequest):
            tx_fields = request.to_dict()
        else:
            tx_fields = dict(request if request is not None else fields)
        if tx_fields.get("derivation_path") is None:
            tx_fields["derivation_path"] = self.derivation_path
        return await hardware.sign_transaction(
            tx_fields, self.channel,
            default_gas_price=self.gas_price,
            cancel_message=self.cancel_message,
        )

    async def sign_message(self, message: Message) -> Optional[str]:
        return await hardware.sign_message(
            MessageRequest(message=message, derivation_path=self.derivation_path),
            self.channel,
            cancel_message=self.cancel_message,
        )

    async def verify_message(
        self,
        message: Message,
        signature: str | bytes,
        address: Optional[str] = None,
    ) -> Optional[bool]:
        if isinstance(signature, (bytes, bytearray)):
            signature = hex_sequence_normalizer(signature)
        return await hardware.verify_message(
            VerifyRequest(address=address or self.address, message=message, signature=signature),
            self.channel,
            cancel_message=self.cancel_message,
        )

    def blockie(self) -> Optional[str]:
        return wallet_blockie(self.address, self.icon_generator)

    def __repr__(self) -> str:
        return f"HardwareWallet({self.address} @ {self.derivation_path})"
