"""Tests for output formatters."""

import json
from datetime import datetime

import pytest
import yaml

from tictail_client.formatters import format_output, registry


def test_json_output():
    text = format_output({"id": "x2j", "created": datetime(2014, 1, 2, 3, 4, 5)}, "json")

    assert json.loads(text) == {"id": "x2j", "created": "2014-01-02 03:04:05"}


def test_yaml_output():
    assert yaml.safe_load(format_output({"id": "x2j", "tags": ["a"]}, "yaml")) == {"id": "x2j", "tags": ["a"]}


def test_table_output_contains_fields():
    text = format_output({"store_id": "x2j", "active": True}, "table")

    assert "Store Id" in text
    assert "x2j" in text


def test_table_output_for_list_of_records():
    text = format_output([{"id": "a"}, {"id": "b", "name": "Shop"}], "table")

    assert "Name" in text
    assert "Shop" in text


def test_unknown_format():
    with pytest.raises(ValueError):
        format_output({}, "xml")


def test_auto_is_json_when_not_a_terminal():
    assert json.loads(format_output({"a": 1}, "auto")) == {"a": 1}
    assert registry.list_formats() == ["json", "table", "yaml"]


def test_compact_json_is_one_line():
    assert format_output({"a": 1, "b": [1, 2]}, "json", compact=True) == '{"a": 1, "b": [1, 2]}'
