"""Display transport contract and the exceptions raised through it."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

# VCP feature code for brightness/luminance
LUMINANCE_FEATURE_CODE = 0x10

UNKNOWN_MODEL = "Unknown Model"

# --- Exceptions ---


class DisplayError(Exception):
    """Base exception for all display control errors."""


class DeviceUnresponsiveError(DisplayError):
    """Raised when a read or write on the control channel did not complete."""

    def __init__(self, feature_code: int | None, message: str = "no response") -> None:
        self.feature_code = feature_code
        if feature_code is not None:
            message = f"VCP 0x{feature_code:02X}: {message}"
        super().__init__(message)


class DeviceRejectedWriteError(DisplayError):
    """Raised when a display answers a write with a protocol-level error."""

    def __init__(self, feature_code: int, value: int, message: str) -> None:
        self.feature_code = feature_code
        self.value = value
        super().__init__(f"VCP 0x{feature_code:02X} = {value}: {message}")


class DisplayNotFoundError(DisplayError):
    """Raised when a requested display index is outside the enumerated set."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"No display {index}")


class DisplayEnumerationError(DisplayError):
    """Raised when the transport cannot list displays at all."""


# --- Metadata ---


@dataclass
class DisplayMetadata:
    """Identification data for one display. Every field may be missing."""

    model_name: str | None = None
    manufacturer_id: str | None = None
    model_id: int | None = None
    serial: int | None = None
    manufacture_week: int | None = None
    manufacture_year: int | None = None  # years since 1990, as stored in EDID

    @property
    def label(self) -> str:
        """Model name, or a placeholder when the display did not report one."""
        return self.model_name or UNKNOWN_MODEL

    def merged(self, other: "DisplayMetadata") -> "DisplayMetadata":
        """Fill fields missing here from ``other``."""
        return DisplayMetadata(
            model_name=self.model_name or other.model_name,
            manufacturer_id=self.manufacturer_id or other.manufacturer_id,
            model_id=self.model_id if self.model_id is not None else other.model_id,
            serial=self.serial if self.serial is not None else other.serial,
            manufacture_week=(
                self.manufacture_week
                if self.manufacture_week is not None
                else other.manufacture_week
            ),
            manufacture_year=(
                self.manufacture_year
                if self.manufacture_year is not None
                else other.manufacture_year
            ),
        )


# --- Abstract Base Class ---


class DisplayTransport(ABC):
    """Abstract base class for display control channels (DDC/CI and alike).

    Handles returned by ``enumerate_displays`` are opaque to callers. Every
    other method must be called inside ``session(handle)``.
    """

    name: str

    @abstractmethod
    def enumerate_displays(self) -> list[Any]:
        """List addressable displays in a stable order.

        Raises:
            DisplayEnumerationError: When displays cannot be listed.
        """

    @contextmanager
    def session(self, handle: Any) -> Iterator[Any]:
        """Hold the display's channel open for the duration of the block.

        Raises:
            DeviceUnresponsiveError: When the channel cannot be opened.
        """
        yield handle

    @abstractmethod
    def read_metadata(self, handle: Any) -> DisplayMetadata:
        """Return identification data. Never raises; unknown fields stay None."""

    @abstractmethod
    def read_value(self, handle: Any, feature_code: int) -> int:
        """Read the current value of a VCP feature.

        Raises:
            DeviceUnresponsiveError: On timeout or no response.
        """

    @abstractmethod
    def write_value(self, handle: Any, feature_code: int, value: int) -> None:
        """Write a VCP feature value.

        Raises:
            DeviceUnresponsiveError: On timeout or I/O failure.
            DeviceRejectedWriteError: When the display rejects the write.
        """

    @abstractmethod
    def settle(self, handle: Any) -> None:
        """Block for the protocol-mandated interval between two commands."""
