"""Batch controller: runs the read/apply/write cycle on each target display.

Displays are visited strictly one after another in enumeration order. Device
errors are caught per display and turned into a reported outcome; only a bad
target index or a failed enumeration stops a run before any display I/O.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.console import Console

from ddc_brightness.brightness import BrightnessChange
from ddc_brightness.transport.base import (
    LUMINANCE_FEATURE_CODE,
    UNKNOWN_MODEL,
    DisplayEnumerationError,
    DisplayError,
    DisplayMetadata,
    DisplayNotFoundError,
    DisplayTransport,
)

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    """Result of one display's cycle."""

    QUERIED = "queried"
    NO_RESPONSE = "no-device-response"
    UNCHANGED = "no-change-needed"
    CHANGED = "changed"
    CHANGE_FAILED = "change-failed"


_FAILED_KINDS = (OutcomeKind.NO_RESPONSE, OutcomeKind.CHANGE_FAILED)


@dataclass(frozen=True)
class DisplayOutcome:
    """What happened to a single display during a run."""

    index: int
    label: str
    kind: OutcomeKind
    old_value: int | None = None
    new_value: int | None = None
    cause: DisplayError | None = None

    @property
    def failed(self) -> bool:
        return self.kind in _FAILED_KINDS


@dataclass
class RunResult:
    """Aggregated result of one invocation."""

    success: bool
    outcomes: list[DisplayOutcome] = field(default_factory=list)
    error: DisplayError | None = None  # pre-flight failure, no display touched

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def describe_display(index: int, model: str) -> str:
    """Human-readable display name used in every status line."""
    return f"display {index} ({model})"


def format_listing_line(index: int, metadata: DisplayMetadata) -> str:
    """One line of the ``--list`` output, with placeholders for unknown fields."""
    manufacturer = metadata.manufacturer_id or "???"
    model_id = f"{metadata.model_id:04X}" if metadata.model_id is not None else "????"
    serial = f"{metadata.serial:08X}" if metadata.serial is not None else "????????"
    week = str(metadata.manufacture_week) if metadata.manufacture_week is not None else "??"
    year = (
        str(1990 + metadata.manufacture_year)
        if metadata.manufacture_year is not None
        else "????"
    )
    return (
        f"  - [{index}]: {metadata.label} - ({manufacturer}:{model_id}:{serial}), "
        f"manufactured week {week} of {year}"
    )


class BatchController:
    """Applies one brightness change to one or all displays of a transport."""

    def __init__(
        self,
        transport: DisplayTransport,
        console: Console | None = None,
        err_console: Console | None = None,
        strict_sweep: bool = True,
    ) -> None:
        """Initialize the controller.

        Args:
            transport: Display control channel used for every command.
            console: Destination of status lines.
            err_console: Destination of failure lines.
            strict_sweep: If True, a display that does not answer during an
                all-displays sweep fails the whole run. If False, such
                displays are reported skips and the run only fails when no
                display in the sweep succeeded.
        """
        self.transport = transport
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)
        self.strict_sweep = strict_sweep

    # ── Output ───────────────────────────────────────────────────────

    def _say(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def _complain(self, message: str) -> None:
        self.err_console.print(
            message, style="red", markup=False, highlight=False, soft_wrap=True,
        )

    # ── Entry points ─────────────────────────────────────────────────

    def _discover(self) -> list[Any]:
        displays = self.transport.enumerate_displays()
        logger.debug("Discovered %d display(s)", len(displays))
        return displays

    def list_displays(self) -> RunResult:
        """Print enumerated displays and their metadata. Never touches brightness."""
        try:
            displays = self._discover()
        except DisplayEnumerationError as e:
            self._complain(str(e))
            return RunResult(success=False, error=e)

        self._say("Detected displays:")
        for index, handle in enumerate(displays):
            metadata = None
            try:
                with self.transport.session(handle):
                    metadata = self.transport.read_metadata(handle)
            except DisplayError as e:
                logger.warning("Display %d session failed during listing: %s", index, e)
            self._say(format_listing_line(index, metadata or DisplayMetadata()))
        return RunResult(success=True)

    def run(self, change: BrightnessChange, display: int | None = None) -> RunResult:
        """Apply ``change`` to display ``display``, or to every display if None.

        Args:
            change: Requested change; a relative zero only reports the value.
            display: 0-based index in enumeration order, or None for all.

        Returns:
            The aggregated result with one outcome per visited display.
        """
        try:
            displays = self._discover()
        except DisplayEnumerationError as e:
            self._complain(str(e))
            return RunResult(success=False, error=e)

        if display is not None:
            if not 0 <= display < len(displays):
                error = DisplayNotFoundError(display, len(displays))
                self._complain(str(error))
                return RunResult(success=False, error=error)
            outcome = self._run_cycle(display, displays[display], change)
            return RunResult(success=not outcome.failed, outcomes=[outcome])

        if not displays:
            logger.warning("No displays detected")

        outcomes = [
            self._run_cycle(index, handle, change)
            for index, handle in enumerate(displays)
        ]
        return RunResult(success=self._sweep_succeeded(outcomes), outcomes=outcomes)

    def _sweep_succeeded(self, outcomes: Sequence[DisplayOutcome]) -> bool:
        if any(o.kind is OutcomeKind.CHANGE_FAILED for o in outcomes):
            return False
        if not any(o.kind is OutcomeKind.NO_RESPONSE for o in outcomes):
            return True
        if self.strict_sweep:
            return False
        return any(not o.failed for o in outcomes)

    # ── Per-display cycle ────────────────────────────────────────────

    def _run_cycle(self, index: int, handle: Any, change: BrightnessChange) -> DisplayOutcome:
        outcome = None
        try:
            with self.transport.session(handle):
                outcome = self._cycle(index, handle, change)
        except DisplayError as e:
            if outcome is not None:
                logger.warning("Could not close %s: %s", outcome.label, e)
                return outcome
            disp = describe_display(index, UNKNOWN_MODEL)
            logger.info("Could not open %s: %s", disp, e)
            self._complain(f"Timed out waiting for response from {disp}: {e}")
            return DisplayOutcome(index, disp, OutcomeKind.NO_RESPONSE, cause=e)
        return outcome

    def _cycle(self, index: int, handle: Any, change: BrightnessChange) -> DisplayOutcome:
        disp = describe_display(index, self.transport.read_metadata(handle).label)

        try:
            old_value = self.transport.read_value(handle, LUMINANCE_FEATURE_CODE)
        except DisplayError as e:
            logger.info("Read failed on %s: %s", disp, e)
            self._complain(f"Timed out waiting for response from {disp}")
            return DisplayOutcome(index, disp, OutcomeKind.NO_RESPONSE, cause=e)
        self.transport.settle(handle)

        if change.is_noop():
            self._say(f"{disp} is set to {old_value}% brightness")
            return DisplayOutcome(index, disp, OutcomeKind.QUERIED, old_value=old_value)

        new_value = change.apply(old_value)
        if new_value == old_value:
            self._say(f"No change needed for {disp}")
            return DisplayOutcome(
                index, disp, OutcomeKind.UNCHANGED, old_value=old_value, new_value=new_value,
            )

        self._say(f"Changing brightness of {disp} from {old_value} to {new_value}")
        try:
            self.transport.write_value(handle, LUMINANCE_FEATURE_CODE, new_value)
        except DisplayError as e:
            logger.info("Write failed on %s: %s", disp, e)
            self._complain(f"Failed to set brightness for {disp}: {e}")
            outcome = DisplayOutcome(
                index, disp, OutcomeKind.CHANGE_FAILED,
                old_value=old_value, new_value=new_value, cause=e,
            )
        else:
            outcome = DisplayOutcome(
                index, disp, OutcomeKind.CHANGED, old_value=old_value, new_value=new_value,
            )
        finally:
            self.transport.settle(handle)
        return outcome
