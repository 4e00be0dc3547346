"""Hex, binary and base64 transcoding for downlink payloads."""

from __future__ import annotations

import base64
import binascii
import re

from downlinkctl.core.errors import MalformedPayloadError

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def is_hex(value: str) -> bool:
    return _HEX_RE.fullmatch(value) is not None


def hex_to_bytes(hex_payload: str) -> bytes:
    if len(hex_payload) % 2 != 0:
        raise MalformedPayloadError("Payload must have even-length hex")
    if hex_payload and not is_hex(hex_payload):
        raise MalformedPayloadError("Payload must contain only [0-9a-fA-F]")
    return bytes.fromhex(hex_payload)


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_hex(value: str) -> str:
    try:
        return base64.b64decode(value, validate=True).hex()
    except binascii.Error as exc:
        raise MalformedPayloadError(f"Invalid base64 payload: {exc}") from exc


def encode_payload(hex_payload: str) -> str:
    """Return the ``frm_payload`` form of a hex payload string."""
    return bytes_to_base64(hex_to_bytes(hex_payload))
