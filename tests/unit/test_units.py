"""Tests for mm_common.units: exact decimal <-> smallest-unit conversion."""

import pytest

from src.mm_common.errors import InvalidAmountError, InvalidBasisPointsError
from src.mm_common.units import (
    UNIT,
    apply_basis_points,
    bps_to_percent,
    from_smallest_unit,
    to_smallest_unit,
    validate_bps,
)


class TestToSmallestUnit:
    def test_fractional(self) -> None:
        assert to_smallest_unit("0.1") == 100_000_000_000_000_000

    def test_whole(self) -> None:
        assert to_smallest_unit("2") == 2 * UNIT

    def test_int_means_whole_units(self) -> None:
        assert to_smallest_unit(3) == 3 * UNIT

    def test_leading_dot(self) -> None:
        assert to_smallest_unit(".5") == UNIT // 2

    def test_smallest_representable(self) -> None:
        assert to_smallest_unit("0.000000000000000001") == 1

    def test_trailing_zeros_beyond_precision_tolerated(self) -> None:
        assert to_smallest_unit("1.0000000000000000000000") == UNIT

    def test_nineteenth_digit_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            to_smallest_unit("0.0000000000000000001")

    @pytest.mark.parametrize("bad", ["", ".", "-1", "1e18", "abc", "1.2.3"])
    def test_malformed_rejected(self, bad: str) -> None:
        with pytest.raises(InvalidAmountError):
            to_smallest_unit(bad)

    def test_float_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            to_smallest_unit(0.1)  # type: ignore[arg-type]

    def test_bool_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            to_smallest_unit(True)

    def test_error_code(self) -> None:
        with pytest.raises(InvalidAmountError) as exc_info:
            to_smallest_unit("x")
        assert exc_info.value.code == 1001


class TestFromSmallestUnit:
    def test_fee_example(self) -> None:
        assert from_smallest_unit(2_500_000_000_000_000) == "0.0025"

    def test_whole_has_no_fraction(self) -> None:
        assert from_smallest_unit(5 * UNIT) == "5"

    def test_zero(self) -> None:
        assert from_smallest_unit(0) == "0"

    def test_one_wei(self) -> None:
        assert from_smallest_unit(1) == "0.000000000000000001"

    def test_negative(self) -> None:
        assert from_smallest_unit(-UNIT // 4) == "-0.25"

    @pytest.mark.parametrize("amount", [0, 1, 10**17, 123_456_789_012_345_678_901, 10**30 + 7])
    def test_lossless(self, amount: int) -> None:
        assert to_smallest_unit(from_smallest_unit(amount)) == amount


class TestBasisPoints:
    def test_platform_fee(self) -> None:
        assert apply_basis_points(to_smallest_unit("0.1"), 250) == to_smallest_unit("0.0025")

    def test_floor(self) -> None:
        assert apply_basis_points(3, 2500) == 0

    def test_validate_bounds(self) -> None:
        validate_bps(0)
        validate_bps(10_000)

    @pytest.mark.parametrize("bad", [-1, 10_001, True])
    def test_validate_rejects(self, bad: int) -> None:
        with pytest.raises(InvalidBasisPointsError):
            validate_bps(bad)

    def test_percent_display(self) -> None:
        assert bps_to_percent(250) == 2.5
