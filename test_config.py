"""
test_config.py

Tests for class-level Collection configuration.
"""

import json
import logging

import pytest

from toolkits import Collection, CollectionConfig


class Pretty(Collection):
    _config = Collection.config(json_indent=2)


class Piped(Collection):
    _config = Collection.config(string_pattern=r"\|")


class PrettyPiped(Pretty, Piped):
    _config = Collection.config(json_sort_keys=True)


class SortedJson(Collection):
    _config = Collection.config(json_sort_keys=True)


class TestCollectionConfig:

    def test_defaults(self):
        config = CollectionConfig()
        assert config.string_pattern == r"[\s,]+"
        assert config.json_indent is None
        assert not config.json_ensure_ascii
        assert not config.json_sort_keys

    def test_unknown_field(self):
        with pytest.raises(TypeError):
            CollectionConfig(colour="blue")

    def test_merge_only_takes_explicit_fields(self):
        base = CollectionConfig(json_indent=4, string_pattern=";")
        merged = base.merge(CollectionConfig(json_indent=1))
        assert merged.json_indent == 1
        assert merged.string_pattern == ";"

    def test_merge_can_be_layered_again(self):
        layered = CollectionConfig(json_indent=1).merge(CollectionConfig(string_pattern=";"))
        again = CollectionConfig(json_sort_keys=True).merge(layered)
        assert (again.json_indent, again.string_pattern, again.json_sort_keys) == (1, ";", True)
        assert CollectionConfig().merge(layered) == layered

    def test_frozen(self):
        with pytest.raises(Exception):
            CollectionConfig().json_indent = 3


class TestClassConfig:

    def test_base_class_gets_defaults(self):
        assert Collection._config == CollectionConfig()

    def test_subclass_config_is_used(self):
        assert Piped("a|b|c").to_list() == ["a", "b", "c"]
        assert Pretty([1]).to_json() == "[\n  1\n]"

    def test_config_inherits_along_bases(self):
        config = PrettyPiped._config
        assert config.json_indent == 2
        assert config.string_pattern == r"\|"
        assert config.json_sort_keys
        assert PrettyPiped({"b": 1, "a": 2}).to_json(indent=None) == '{"a": 2, "b": 1}'

    def test_derived_collections_keep_config(self):
        assert Pretty([1, 2]).map(lambda v, k: v).to_json() == json.dumps([1, 2], indent=2)

    def test_sorted_json_with_mixed_keys(self):
        c = SortedJson({"x": 1, 0: "a", "b": Collection({1: "n", "a": 2})})
        assert c.to_json() == '{"0": "a", "b": {"1": "n", "a": 2}, "x": 1}'
        assert SortedJson({"x": 1}).merge(["a"]).to_json() == '{"0": "a", "x": 1}'
        assert SortedJson([2, 1]).to_json() == "[2, 1]"

    def test_colliding_json_keys_keep_the_later_value(self, caplog):
        with caplog.at_level(logging.WARNING, logger="toolkits.collection._collection"):
            assert SortedJson({0: "int", "0": "str"}).to_json() == '{"0": "str"}'
        assert "collides" in caplog.text

    def test_config_must_be_a_collection_config(self):
        with pytest.raises(TypeError):
            class Broken(Collection):
                _config = {"json_indent": 2}


class TestFromEnv:

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TOOLKITS_JSON_INDENT", "3")
        monkeypatch.setenv("TOOLKITS_JSON_SORT_KEYS", "yes")
        config = CollectionConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))
        assert config.json_indent == 3
        assert config.json_sort_keys
        assert config.string_pattern == r"[\s,]+"

    def test_reads_dotenv_file(self, monkeypatch, tmp_path):
        # registered with monkeypatch so the values loaded from the file are removed afterwards
        for name in ("APPTEST_STRING_PATTERN", "APPTEST_JSON_INDENT"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        dotenv = tmp_path / ".env"
        dotenv.write_text("APPTEST_STRING_PATTERN=;\nAPPTEST_JSON_INDENT=none\n")
        config = CollectionConfig.from_env(prefix="APPTEST_", dotenv_path=str(dotenv))
        assert config.string_pattern == ";"
        assert config.json_indent is None
        assert config.merge(CollectionConfig(json_indent=5)).json_indent == 5
