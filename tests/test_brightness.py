"""Tests for the brightness model: change construction, apply, and is_noop."""

import pytest

from ddc_brightness.brightness import (
    ABSOLUTE_MAX,
    RELATIVE_MAX,
    RELATIVE_MIN,
    BrightnessChange,
    ChangeKind,
    InvalidChangeError,
)


class TestConstruction:
    def test_relative_factory(self):
        change = BrightnessChange.relative(-5)
        assert change.kind is ChangeKind.RELATIVE
        assert change.amount == -5

    def test_absolute_factory(self):
        change = BrightnessChange.absolute(70)
        assert change.kind is ChangeKind.ABSOLUTE
        assert change.amount == 70

    def test_query_is_relative_zero(self):
        assert BrightnessChange.query() == BrightnessChange.relative(0)

    def test_is_immutable(self):
        change = BrightnessChange.relative(10)
        with pytest.raises(AttributeError):
            change.amount = 20

    def test_relative_range_limits_accepted(self):
        BrightnessChange.relative(RELATIVE_MIN)
        BrightnessChange.relative(RELATIVE_MAX)

    @pytest.mark.parametrize("offset", [RELATIVE_MIN - 1, RELATIVE_MAX + 1])
    def test_relative_out_of_range_rejected(self, offset):
        with pytest.raises(InvalidChangeError, match="out of range"):
            BrightnessChange.relative(offset)

    @pytest.mark.parametrize("value", [-1, ABSOLUTE_MAX + 1])
    def test_absolute_out_of_range_rejected(self, value):
        with pytest.raises(InvalidChangeError, match="out of range"):
            BrightnessChange.absolute(value)

    def test_invalid_change_is_value_error(self):
        with pytest.raises(ValueError):
            BrightnessChange.absolute(-3)


class TestApplyRelative:
    def test_increase(self):
        assert BrightnessChange.relative(10).apply(50) == 60

    def test_decrease(self):
        assert BrightnessChange.relative(-20).apply(50) == 30

    def test_zero_offset_keeps_current(self):
        for current in range(0, 101):
            assert BrightnessChange.relative(0).apply(current) == current

    def test_saturates_at_100(self):
        assert BrightnessChange.relative(10).apply(95) == 100

    def test_saturates_at_0(self):
        assert BrightnessChange.relative(-10).apply(5) == 0

    def test_extreme_offsets_do_not_wrap(self):
        assert BrightnessChange.relative(RELATIVE_MAX).apply(100) == 100
        assert BrightnessChange.relative(RELATIVE_MIN).apply(0) == 0
        assert BrightnessChange.relative(RELATIVE_MAX).apply(ABSOLUTE_MAX) == 100
        # 65535 - 32768 is still inside the register, then clamped
        assert BrightnessChange.relative(RELATIVE_MIN).apply(ABSOLUTE_MAX) == 100

    @pytest.mark.parametrize("offset", [-300, -101, -50, -1, 1, 37, 99, 250])
    def test_result_always_in_percent_range(self, offset):
        change = BrightnessChange.relative(offset)
        for current in range(0, 101):
            result = change.apply(current)
            assert 0 <= result <= 100
            assert result == max(0, min(current + offset, 100))

    def test_out_of_range_current_value_is_clamped(self):
        # Some displays report values above 100
        assert BrightnessChange.relative(-10).apply(250) == 100
        assert BrightnessChange.relative(0).apply(250) == 100


class TestApplyAbsolute:
    def test_ignores_current(self):
        for current in (0, 13, 50, 100, 400):
            assert BrightnessChange.absolute(40).apply(current) == 40

    def test_every_percentage_is_exact(self):
        for value in range(0, 101):
            assert BrightnessChange.absolute(value).apply(77) == value

    def test_above_100_is_clamped(self):
        assert BrightnessChange.absolute(150).apply(20) == 100

    def test_idempotent(self):
        change = BrightnessChange.absolute(65)
        assert change.apply(change.apply(10)) == 65


class TestIsNoop:
    def test_relative_zero_is_noop(self):
        assert BrightnessChange.relative(0).is_noop() is True

    @pytest.mark.parametrize(
        "change",
        [
            BrightnessChange.relative(1),
            BrightnessChange.relative(-1),
            BrightnessChange.absolute(0),
            BrightnessChange.absolute(50),
        ],
    )
    def test_other_changes_are_not_noop(self, change):
        assert change.is_noop() is False

    def test_absolute_equal_to_current_is_not_noop(self):
        change = BrightnessChange.absolute(40)
        assert change.apply(40) == 40
        assert change.is_noop() is False


class TestDescribe:
    def test_str(self):
        assert str(BrightnessChange.query()) == "query"
        assert str(BrightnessChange.relative(5)) == "+5%"
        assert str(BrightnessChange.relative(-5)) == "-5%"
        assert str(BrightnessChange.absolute(30)) == "set 30%"
