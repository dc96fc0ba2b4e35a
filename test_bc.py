"""
test_bc.py

Tests for decimal string arithmetic.
"""

from decimal import Decimal

import pytest

from toolkits import BC, InvalidArgumentError


class TestArithmetic:

    def test_add_is_exact(self):
        assert BC.add(["0.1", "0.2"]) == "0.3"
        assert BC.add([0.1, 0.2, 1]) == "1.3"

    def test_empty_input(self):
        assert BC.add([]) == "0"
        assert BC.div([]) == "0"

    def test_sub_and_mul(self):
        assert BC.sub(["10", "2.5", "0.5"]) == "7.0"
        assert BC.mul(["1.5", "2"], scale=2) == "3.00"

    def test_scale_truncates(self):
        assert BC.div(["10", "3"], scale=4) == "3.3333"
        assert BC.div(["2", "3"], scale=2) == "0.66"
        assert BC.add(["-1.999"], scale=2) == "-1.99"

    def test_div_skips_zero_divisors(self):
        assert BC.div(["12", "0", "4"]) == "3"

    def test_mod(self):
        assert BC.mod("10", "3") == "1"
        assert BC.mod("-7", "3") == "-1"
        assert BC.mod("5.5", "2", scale=1) == "1.5"

    def test_mod_by_zero(self):
        with pytest.raises(InvalidArgumentError):
            BC.mod("1", "0")

    def test_invalid_operand(self):
        with pytest.raises(InvalidArgumentError):
            BC.add(["1", "abc"])

    def test_long_operands_are_exact(self):
        assert BC.add(["12345678901234567890123456789012345", "1"]) == "12345678901234567890123456789012346"
        assert BC.sub(["0.0000000000000000000000000000000001", "1"]) == "-0.9999999999999999999999999999999999"
        assert BC.mul(["99999999999999999999", "99999999999999999999"]) == "9999999999999999999800000000000000000001"

    def test_large_scale(self):
        assert BC.mul(["123456789012345678901234567890", "1"], scale=2) == "123456789012345678901234567890.00"
        assert BC.div(["1", "3"], scale=40) == "0." + "3" * 40
        assert BC.div(["2", "3"], scale=50) == "0." + "6" * 50

    def test_mod_with_long_quotient(self):
        assert BC.mod("100000000000000000000000000000000000001", "7") == "3"

    def test_non_finite_operand(self):
        with pytest.raises(InvalidArgumentError):
            BC.add(["inf", "1"])

    def test_accepts_decimals(self):
        assert BC.add([Decimal("1.25"), "1"]) == "2.25"


class TestComparison:

    def test_precision(self):
        assert BC.precision("3.1400") == "1400"
        assert BC.precision("3") == ""

    def test_cmp(self):
        assert BC.cmp("1.001", "1.0") == 1
        assert BC.cmp("1.0", "1.00") == 0
        assert BC.cmp("2", "10") == -1

    def test_cmp_with_scale(self):
        assert BC.cmp("1.001", "1.0", scale=2) == 0

    def test_helpers(self):
        assert BC.equal("1.50", "1.5")
        assert BC.less("1", "2")
        assert not BC.less("2", "1")
        assert BC.greater("2", "1")
