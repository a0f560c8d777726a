"""Brightness model: requested changes and the arithmetic that applies them.

Pure logic, no I/O. A change is either relative (offset in percentage points)
or absolute (exact percentage). Every computed value is clamped into 0-100.
"""

from dataclasses import dataclass
from enum import Enum

MIN_PERCENT = 0
MAX_PERCENT = 100

# Native ranges of the request values (signed / unsigned 16-bit)
RELATIVE_MIN = -(2**15)
RELATIVE_MAX = 2**15 - 1
ABSOLUTE_MIN = 0
ABSOLUTE_MAX = 2**16 - 1

# Width of the value register read back from a display
_REGISTER_MAX = 2**16 - 1


class InvalidChangeError(ValueError):
    """Raised when a requested change does not fit its numeric range."""


class ChangeKind(Enum):
    """How a change amount is interpreted."""

    RELATIVE = "relative"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class BrightnessChange:
    """A requested brightness change, created once per invocation."""

    kind: ChangeKind
    amount: int

    def __post_init__(self) -> None:
        if self.kind is ChangeKind.RELATIVE:
            low, high = RELATIVE_MIN, RELATIVE_MAX
        else:
            low, high = ABSOLUTE_MIN, ABSOLUTE_MAX
        if not low <= self.amount <= high:
            raise InvalidChangeError(
                f"{self.kind.value} value {self.amount} is out of range "
                f"[{low}, {high}]"
            )

    @classmethod
    def relative(cls, offset: int) -> "BrightnessChange":
        """Increase (positive) or decrease (negative) by ``offset`` points."""
        return cls(ChangeKind.RELATIVE, offset)

    @classmethod
    def absolute(cls, value: int) -> "BrightnessChange":
        """Set brightness to exactly ``value`` percent."""
        return cls(ChangeKind.ABSOLUTE, value)

    @classmethod
    def query(cls) -> "BrightnessChange":
        """The query-only request: a relative change of zero."""
        return cls(ChangeKind.RELATIVE, 0)

    def apply(self, current: int) -> int:
        """Compute the new brightness for a display currently at ``current``.

        Relative offsets that leave the register range saturate toward the
        sign of the offset. The result is always clamped into 0-100, even
        when the display reported an out-of-range current value.

        Args:
            current: Value read back from the display.

        Returns:
            The new brightness percentage.
        """
        if self.kind is ChangeKind.RELATIVE:
            new_value = current + self.amount
            if not 0 <= new_value <= _REGISTER_MAX:
                new_value = MIN_PERCENT if self.amount < 0 else MAX_PERCENT
        else:
            new_value = self.amount
        return max(MIN_PERCENT, min(new_value, MAX_PERCENT))

    def is_noop(self) -> bool:
        """True only for a relative change of exactly zero (a query)."""
        return self.kind is ChangeKind.RELATIVE and self.amount == 0

    def __str__(self) -> str:
        if self.kind is ChangeKind.ABSOLUTE:
            return f"set {self.amount}%"
        if self.is_noop():
            return "query"
        return f"{self.amount:+d}%"
