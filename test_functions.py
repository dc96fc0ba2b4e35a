"""
test_functions.py

Tests for the module-level helpers and text utilities.
"""

import pytest

from toolkits import Collection, collect, strings, sum_distance


class TestCollect:

    def test_returns_collection(self):
        c = collect([1, 2])
        assert isinstance(c, Collection)
        assert c.to_list() == [1, 2]

    def test_without_items(self):
        assert collect().is_empty()


class TestSumDistance:

    def test_same_point(self):
        assert sum_distance(10, 20, 10, 20) == 0

    def test_quarter_meridian(self):
        assert sum_distance(0, 0, 90, 0) == pytest.approx(6371 * 3.141592653589793 / 2)

    def test_paris_london(self):
        assert sum_distance(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343.5, abs=1)


class TestStrings:

    def test_as_array(self):
        assert strings.as_array(" a, b\tc ,, d ") == ["a", "b", "c", "d"]
        assert strings.as_array("") == []
        assert strings.as_array("a|b||c", r"\|") == ["a", "b", "c"]

    def test_is_json(self):
        assert strings.is_json('{"a": 1}')
        assert strings.is_json("12")
        assert not strings.is_json("hello world")
