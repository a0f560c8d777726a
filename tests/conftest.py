"""Shared test helpers."""

import pytest

from ddc_brightness.transport.edid import EDID_HEADER


def _pack_manufacturer(letters: str) -> bytes:
    a, b, c = (ord(ch) - ord("A") + 1 for ch in letters)
    return ((a << 10) | (b << 5) | c).to_bytes(2, "big")


def _build_edid(
    manufacturer: str = "DEL",
    product: int = 0xA0F3,
    serial: int = 0x4C4B4A30,
    week: int = 12,
    year: int = 30,
    name: str | None = "DELL U2720Q",
) -> bytes:
    """Build a minimal but valid 128-byte EDID base block."""
    block = bytearray(128)
    block[0:8] = EDID_HEADER
    block[8:10] = _pack_manufacturer(manufacturer)
    block[10:12] = product.to_bytes(2, "little")
    block[12:16] = serial.to_bytes(4, "little")
    block[16] = week
    block[17] = year
    block[18:20] = b"\x01\x04"
    # First descriptor: a detailed timing (non-zero pixel clock)
    block[54:56] = b"\x01\x1d"
    if name is not None:
        text = (name.encode("ascii") + b"\n").ljust(13, b" ")
        block[72:90] = b"\x00\x00\x00\xfc\x00" + text
    block[127] = (-sum(block[:127])) % 256
    return bytes(block)


@pytest.fixture
def make_edid():
    """Factory for valid EDID blocks with overridable fields."""
    return _build_edid
