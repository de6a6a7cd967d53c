"""Tests for microsecond to output time conversion."""

import pytest

from a2d2convert.core.timestamp import (
    OutputTime,
    is_representable,
    to_microseconds,
    to_output_time,
)

LAST_REPRESENTABLE = 4_294_967_295_999_999
FIRST_UNREPRESENTABLE = 4_294_967_296_000_000


class TestIsRepresentable:
    @pytest.mark.parametrize("us", [0, 1, 1_000_000, 1_533_651_000_000_000, LAST_REPRESENTABLE])
    def test_in_range(self, us):
        assert is_representable(us)

    @pytest.mark.parametrize("us", [FIRST_UNREPRESENTABLE, FIRST_UNREPRESENTABLE + 1, 2**64 - 1])
    def test_out_of_range(self, us):
        assert not is_representable(us)

    def test_negative_not_representable(self):
        assert not is_representable(-1)


class TestToOutputTime:
    def test_zero(self):
        assert to_output_time(0) == OutputTime(0, 0)

    @pytest.mark.parametrize("secs,micros", [(0, 1), (1, 500_000), (1_533_651_000, 999_999), (4_294_967_295, 0)])
    def test_split(self, secs, micros):
        stamp = to_output_time(1_000_000 * secs + micros)
        assert stamp.secs == secs
        assert stamp.nsecs == micros * 1000

    def test_last_representable(self):
        assert to_output_time(LAST_REPRESENTABLE) == OutputTime(4_294_967_295, 999_999_000)

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="unsigned"):
            to_output_time(-5)

    def test_inverse(self):
        us = 1_533_651_234_567_891
        assert to_microseconds(to_output_time(us)) == us


class TestOutputTime:
    def test_ordering_is_chronological(self):
        assert OutputTime(1, 999_999_000) < OutputTime(2, 0)
        assert OutputTime(2, 1000) > OutputTime(2, 0)

    def test_to_sec(self):
        assert OutputTime(3, 250_000_000).to_sec() == pytest.approx(3.25)

    def test_str(self):
        assert str(OutputTime(12, 5000)) == "12.000005000"
