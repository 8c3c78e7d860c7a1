"""Serial numbers derived from a device's factory MAC address."""

from __future__ import annotations

import logging
from collections.abc import Sequence

_log = logging.getLogger(__name__)

_MAC_LENGTH = 6


def _mac_bytes(mac: Sequence[int]) -> bytes:
    try:
        data = bytes(mac)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid MAC address: {mac!r}") from exc
    if len(data) != _MAC_LENGTH:
        raise ValueError(f"a MAC address has {_MAC_LENGTH} bytes, got {len(data)}")
    return data


def _format_mac(data: bytes) -> str:
    return ":".join(f"{b:02x}" for b in data)


def short_serial_number(mac: Sequence[int]) -> int:
    """Return the 21-bit serial number made from the last three MAC bytes.

    The top three bytes are dropped and the fourth byte is cut to its low
    five bits, leaving a value that fits the ISO NAME identity number.
    """
    data = _mac_bytes(mac)
    short = bytes((0, 0, 0, data[3] & 0x1F, data[4], data[5]))
    _log.info("SHORT-MAC = ## %s ##", _format_mac(short))
    return short[3] << 16 | short[4] << 8 | short[5]


def serial_number_string(mac: Sequence[int]) -> str:
    """Return the full MAC as a serial number string like ``##MAC:..##``."""
    data = _mac_bytes(mac)
    _log.info("MAC = ## %s ##", _format_mac(data))
    return f"##MAC:{_format_mac(data)}##"