"""EDID base block parsing and lookup of a monitor's EDID on Linux.

Only the fields needed to identify a display are decoded: the PNP
manufacturer id, product code, serial number, manufacture date and the
monitor name descriptor.
"""

import logging
from pathlib import Path

from ddc_brightness.transport.base import DisplayMetadata

logger = logging.getLogger(__name__)

EDID_HEADER = b"\x00\xff\xff\xff\xff\xff\xff\x00"
EDID_BLOCK_SIZE = 128

_DESCRIPTOR_OFFSETS = (54, 72, 90, 108)
_DESCRIPTOR_SIZE = 18
_MONITOR_NAME_TAG = 0xFC

_DRM_ROOT = Path("/sys/class/drm")


class EdidError(ValueError):
    """Raised when a byte string is not a valid EDID base block."""


def _decode_manufacturer_id(raw: bytes) -> str:
    """Decode the three 5-bit letters packed big-endian into two bytes."""
    packed = int.from_bytes(raw, "big")
    letters = [(packed >> shift) & 0x1F for shift in (10, 5, 0)]
    if any(not 1 <= letter <= 26 for letter in letters):
        raise EdidError(f"Invalid manufacturer id bytes: {raw.hex()}")
    return "".join(chr(ord("A") + letter - 1) for letter in letters)


def _monitor_name(block: bytes) -> str | None:
    for offset in _DESCRIPTOR_OFFSETS:
        descriptor = block[offset:offset + _DESCRIPTOR_SIZE]
        # Display descriptors start with a zero pixel clock
        if descriptor[:3] != b"\x00\x00\x00" or descriptor[3] != _MONITOR_NAME_TAG:
            continue
        text = descriptor[5:].split(b"\n", 1)[0]
        name = text.decode("ascii", errors="replace").strip()
        return name or None
    return None


def parse_edid(data: bytes) -> DisplayMetadata:
    """Decode identification fields from an EDID base block.

    Args:
        data: Raw EDID bytes; only the first 128-byte block is read.

    Returns:
        Metadata with every field that the block specifies.

    Raises:
        EdidError: If the header or checksum is invalid.
    """
    block = bytes(data[:EDID_BLOCK_SIZE])
    if len(block) < EDID_BLOCK_SIZE:
        raise EdidError(f"EDID too short: {len(block)} bytes")
    if block[:8] != EDID_HEADER:
        raise EdidError("Missing EDID header")
    if sum(block) % 256 != 0:
        raise EdidError("EDID checksum mismatch")

    serial = int.from_bytes(block[12:16], "little")
    week = block[16]
    return DisplayMetadata(
        model_name=_monitor_name(block),
        manufacturer_id=_decode_manufacturer_id(block[8:10]),
        model_id=int.from_bytes(block[10:12], "little"),
        serial=serial or None,
        # 0 = unspecified, 0xFF = year is a model year
        manufacture_week=week if 1 <= week <= 54 else None,
        manufacture_year=block[17],
    )


def read_edid_for_bus(bus_number: int, drm_root: Path = _DRM_ROOT) -> bytes | None:
    """Find the EDID of the DRM connector whose DDC channel is ``i2c-<bus>``.

    Returns:
        Raw EDID bytes, or None if no connector matches.
    """
    target = f"i2c-{bus_number}"
    for connector in sorted(drm_root.glob("card*-*")):
        try:
            if (connector / "ddc").resolve().name != target:
                continue
            data = (connector / "edid").read_bytes()
        except OSError as e:
            logger.debug("Skipping %s: %s", connector.name, e)
            continue
        if data:
            logger.debug("EDID for %s found at %s", target, connector.name)
            return data
    return None
