"""
Device payload templates.

Each template is a read-only mapping describing the full shape of one
device request.  build_payload() returns a fresh dict with the caller's
fields merged on top, so templates are never mutated between calls.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

PAYLOAD_SIGNTX: Mapping[str, Any] = MappingProxyType({
    "type": "signethtx",
    "address_n": (),
    "nonce": "00",
    "gas_price": "",
    "gas_limit": "",
    "to": "",
    "value": "",
    "data": "",
    "chain_id": 1,
})

PAYLOAD_SIGNMSG: Mapping[str, Any] = MappingProxyType({
    "type": "signethmsg",
    "path": (),
    "message": "",
})

PAYLOAD_VERIFYMSG: Mapping[str, Any] = MappingProxyType({
    "type": "verifyethmsg",
    "address": "",
    "message": "",
    "signature": "",
})

PAYLOAD_GETADDRESS: Mapping[str, Any] = MappingProxyType({
    "type": "getethaddress",
    "path": (),
    "show_display": False,
})


def build_payload(template: Mapping[str, Any], **fields: Any) -> dict[str, Any]:
    """
    Merge *fields* onto a copy of *template*.

    Only keys already present in the template may be set; ``type`` is
    fixed per template.
    """
    unknown = set(fields) - set(template)
    if unknown:
        raise KeyError(f"Unknown payload field(s) for {template['type']}: {sorted(unknown)}")
    if "type" in fields:
        raise KeyError("The payload type is fixed by its template")
    payload = dict(template)
    payload.update(fields)
    return payload
