"""
Blockies: deterministic identicons derived from a wallet address.

The image itself comes from an IconGenerator (pydenticon by default);
this module only turns the generated PNG into a base64 data URI.
"""

from __future__ import annotations

import base64
import hashlib
from typing import Protocol, runtime_checkable

import pydenticon

# Palette in the spirit of ethereum-blockies.
_FOREGROUND = [
    "rgb(45,79,255)",
    "rgb(254,180,44)",
    "rgb(226,121,234)",
    "rgb(30,179,253)",
    "rgb(232,77,65)",
    "rgb(49,203,115)",
    "rgb(141,69,170)",
]
_BACKGROUND = "rgb(224,224,224)"


@runtime_checkable
class IconGenerator(Protocol):
    def create(self, seed: str) -> bytes:
        """Return PNG image bytes for *seed*."""
        ...


class PydenticonGenerator:
    """8x8 symmetric identicon, seeded by the lower-cased address."""

    def __init__(self, size: int = 64, cells: int = 8):
        self.size = size
        self._generator = pydenticon.Generator(
            cells, cells,
            digest=hashlib.sha256,
            foreground=_FOREGROUND,
            background=_BACKGROUND,
        )

    def create(self, seed: str) -> bytes:
        return self._generator.generate(
            seed.lower(), self.size, self.size, output_format="png",
        )


def blockie_data_uri(address: str, generator: IconGenerator) -> str:
    png = generator.create(address)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
