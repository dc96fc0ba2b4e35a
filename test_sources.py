"""
test_sources.py

Tests for source classification and the total coercion into ordered items.
"""

import logging
from collections import namedtuple
from dataclasses import dataclass

import pytest

from toolkits import Collection, CollectionConfig, SourceKind
from toolkits.collection import classify, to_items


@dataclass
class Point:
    x: int
    y: int


class Exportable:
    def to_dict(self):
        return {"name": "exported"}


Pair = namedtuple("Pair", ["left", "right"])


class TestClassify:

    @pytest.mark.parametrize("source,kind", [
        (Collection([1]), SourceKind.COLLECTION),
        ({"a": 1}, SourceKind.MAPPING),
        (Point(1, 2), SourceKind.SERIALIZABLE),
        (Exportable(), SourceKind.SERIALIZABLE),
        (Pair(1, 2), SourceKind.SERIALIZABLE),
        ("text", SourceKind.TEXT),
        (b"bytes", SourceKind.TEXT),
        ([1, 2], SourceKind.ITERABLE),
        (range(3), SourceKind.ITERABLE),
        (None, SourceKind.OTHER),
        (3.5, SourceKind.OTHER),
        (Point, SourceKind.OTHER),
    ])
    def test_kinds(self, source, kind):
        assert classify(source) is kind


class TestToItems:

    config = CollectionConfig()

    def test_serializable_sources(self):
        assert to_items(Point(1, 2), self.config) == {"x": 1, "y": 2}
        assert to_items(Exportable(), self.config) == {"name": "exported"}
        assert to_items(Pair("l", "r"), self.config) == {"left": "l", "right": "r"}

    def test_bytes_json(self):
        assert to_items(b'{"a": 1}', self.config) == {"a": 1}

    def test_empty_text(self):
        assert to_items("", self.config) == {}

    def test_custom_pattern(self):
        config = CollectionConfig(string_pattern=r";")
        assert to_items("a b;c", config) == {0: "a b", 1: "c"}

    def test_text_fallback_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="toolkits.collection._sources"):
            to_items("not json", self.config)
        assert "not JSON" in caplog.text

    def test_unsupported_source_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="toolkits.collection._sources"):
            assert to_items(12, self.config) == {}
        assert "int" in caplog.text

    def test_result_is_a_fresh_dict(self):
        source = {"a": 1}
        items = to_items(source, self.config)
        items["b"] = 2
        assert source == {"a": 1}
