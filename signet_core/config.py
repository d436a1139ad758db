"""
TOML-based configuration for Signet.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from signet_core.config import load_config
    cfg = load_config("signet.toml")
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from signet_core.defaults import (
    DEFAULT_DERIVATION_PATH,
    HARDWARE_GAS_PRICE,
    STD_ERRORS,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]


@dataclass
class BridgeConfig:
    """Where the hardware device bridge listens."""
    url: str = "http://127.0.0.1:21325"
    endpoint: str = "/call"
    # Device round-trips wait for a human; 0 disables the timeout.
    timeout_seconds: float = 0.0


@dataclass
class HardwareConfig:
    """Hardware wallet behaviour."""
    derivation_path: str = DEFAULT_DERIVATION_PATH
    gas_price: int = HARDWARE_GAS_PRICE
    # Error text the device firmware reports when the user declines.
    cancel_message: str = STD_ERRORS["CANCEL_TX_SIGN"]


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class SignetConfig:
    """Top-level configuration container."""
    bridge: BridgeConfig = field(default_factory=BridgeConfig)
    hardware: HardwareConfig = field(default_factory=HardwareConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> SignetConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        SIGNET_BRIDGE_URL       -> bridge.url
        SIGNET_BRIDGE_TIMEOUT   -> bridge.timeout_seconds
        SIGNET_DERIVATION_PATH  -> hardware.derivation_path
        SIGNET_CANCEL_MESSAGE   -> hardware.cancel_message
        SIGNET_LOG_LEVEL        -> logging.level
        SIGNET_LOG_FMT          -> logging.format
        SIGNET_LOG_FILE         -> logging.file
    """
    cfg = SignetConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("bridge", cfg.bridge),
                ("hardware", cfg.hardware),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("SIGNET_BRIDGE_URL"):
        cfg.bridge.url = v.rstrip("/")
    if v := os.environ.get("SIGNET_BRIDGE_TIMEOUT"):
        cfg.bridge.timeout_seconds = float(v)
    if v := os.environ.get("SIGNET_DERIVATION_PATH"):
        cfg.hardware.derivation_path = v
    if v := os.environ.get("SIGNET_CANCEL_MESSAGE"):
        cfg.hardware.cancel_message = v
    if v := os.environ.get("SIGNET_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("SIGNET_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("SIGNET_LOG_FILE"):
        cfg.logging.file = v

    return cfg
