"""
Signet - Ethereum transaction and message signing for software and hardware wallets.

Key features:
- Input validation and normalization (addresses, hex values, derivation paths)
- Software wallets backed by eth_account
- Hardware wallets reached through a device bridge channel
- Deterministic identicons (blockies) for wallet addresses
"""

__version__ = "0.4.0"
__all__ = [
    "errors",
    "defaults",
    "utils",
    "models",
    "validators",
    "normalizers",
    "payloads",
    "channels",
    "software",
    "hardware",
    "blockie",
    "wallet",
    "config",
    "logging_config",
]
