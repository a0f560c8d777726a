"""DDC/CI transport built on the monitorcontrol library.

Each monitor is opened only for the duration of its own session and closed
before the next one is touched; commands are paced with a fixed settle delay.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

import monitorcontrol
from monitorcontrol.vcp import VCPError, VCPIOError

from ddc_brightness.transport.base import (
    DeviceRejectedWriteError,
    DeviceUnresponsiveError,
    DisplayEnumerationError,
    DisplayMetadata,
    DisplayTransport,
)
from ddc_brightness.transport.edid import EdidError, parse_edid, read_edid_for_bus

logger = logging.getLogger(__name__)

# Host pacing between two DDC/CI commands to the same display (seconds)
SETTLE_SECONDS = 0.05


class MonitorControlTransport(DisplayTransport):
    """DDC/CI over monitorcontrol (I2C on Linux, the monitor API on Windows)."""

    name = "monitorcontrol"

    def enumerate_displays(self) -> list[monitorcontrol.Monitor]:
        try:
            monitors = monitorcontrol.get_monitors()
        except (VCPError, OSError) as e:
            raise DisplayEnumerationError(f"Could not enumerate displays: {e}") from e
        logger.info("Enumerated %d display(s) via %s", len(monitors), self.name)
        return monitors

    @contextmanager
    def session(self, handle: monitorcontrol.Monitor) -> Iterator[monitorcontrol.Monitor]:
        try:
            handle.__enter__()
        except (VCPError, OSError) as e:
            raise DeviceUnresponsiveError(None, f"could not open display: {e}") from e
        try:
            yield handle
        finally:
            try:
                handle.__exit__(None, None, None)
            except (VCPError, OSError) as e:
                raise DeviceUnresponsiveError(None, f"could not close display: {e}") from e

    def read_metadata(self, handle: monitorcontrol.Monitor) -> DisplayMetadata:
        metadata = self._edid_metadata(handle)
        if metadata.model_name:
            return metadata
        try:
            capabilities = handle.get_vcp_capabilities()
        except (VCPError, OSError, ValueError) as e:
            logger.debug("Capabilities unavailable: %s", e)
            return metadata
        finally:
            # The capabilities request is a DDC/CI command like any other
            self.settle(handle)
        return metadata.merged(DisplayMetadata(model_name=capabilities.get("model")))

    def _edid_metadata(self, handle: monitorcontrol.Monitor) -> DisplayMetadata:
        bus_number = getattr(handle.vcp, "bus_number", None)
        if bus_number is None:
            return DisplayMetadata()
        data = read_edid_for_bus(bus_number)
        if data is None:
            return DisplayMetadata()
        try:
            return parse_edid(data)
        except EdidError as e:
            logger.debug("Ignoring EDID of i2c-%s: %s", bus_number, e)
            return DisplayMetadata()

    def read_value(self, handle: monitorcontrol.Monitor, feature_code: int) -> int:
        try:
            current, maximum = handle.vcp.get_vcp_feature(feature_code)
        except VCPError as e:
            raise DeviceUnresponsiveError(feature_code, str(e)) from e
        logger.debug("VCP 0x%02X read: %d (max %d)", feature_code, current, maximum)
        return current

    def write_value(self, handle: monitorcontrol.Monitor, feature_code: int, value: int) -> None:
        try:
            handle.vcp.set_vcp_feature(feature_code, value)
        except VCPIOError as e:
            raise DeviceUnresponsiveError(feature_code, str(e)) from e
        except VCPError as e:
            raise DeviceRejectedWriteError(feature_code, value, str(e)) from e
        logger.debug("VCP 0x%02X written: %d", feature_code, value)

    def settle(self, handle: monitorcontrol.Monitor) -> None:
        time.sleep(SETTLE_SECONDS)
