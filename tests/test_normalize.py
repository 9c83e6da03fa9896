from collections import OrderedDict
from datetime import datetime
from types import SimpleNamespace

import pytest

from kt_client.normalize import normalize, normalize_list


class CompoundValue:
    """Stand-in for a zeep compound value: fields live in __values__."""

    def __init__(self, **fields):
        self.__values__ = OrderedDict(fields)


def _only_plain(value):
    if isinstance(value, dict):
        return all(type(k) is str and _only_plain(v) for k, v in value.items())
    if isinstance(value, list):
        return all(_only_plain(v) for v in value)
    return value is None or isinstance(value, (str, bytes, int, float, bool, datetime))


def test_nested_objects_become_dicts_and_lists():
    wire = SimpleNamespace(
        status_code=0,
        hits=[
            CompoundValue(document_id=4, title="Report", tags=("a", "b")),
            OrderedDict(document_id=9, title="Memo", owner=SimpleNamespace(name="admin")),
        ],
    )
    result = normalize(wire)
    assert result == {
        "status_code": 0,
        "hits": [
            {"document_id": 4, "title": "Report", "tags": ["a", "b"]},
            {"document_id": 9, "title": "Memo", "owner": {"name": "admin"}},
        ],
    }
    assert type(result["hits"][1]) is dict
    assert _only_plain(result)


def test_mapping_keys_and_sequence_order_are_kept():
    wire = {"z": 1, "a": [3, 2, 1], "m": {"y": None, "b": ""}}
    result = normalize(wire)
    assert list(result) == ["z", "a", "m"]
    assert result["a"] == [3, 2, 1]
    assert result["m"] == {"y": None, "b": ""}


def test_scalars_inside_containers_pass_through():
    stamp = datetime(2010, 4, 1, 12, 30)
    assert normalize([0, "", None, False, stamp]) == [0, "", None, False, stamp]


def test_private_attributes_are_dropped():
    obj = SimpleNamespace(name="Root Folder", _cache={"x": 1})
    assert normalize(obj) == {"name": "Root Folder"}


class TestBareScalarPolicy:
    def test_non_empty_scalar_is_wrapped(self):
        assert normalize("Root Folder") == ["Root Folder"]
        assert normalize(42) == [42]
        assert normalize(0) == [0]

    def test_empty_scalar_becomes_empty_list(self):
        assert normalize(None) == []
        assert normalize("") == []

    def test_strict_mode_rejects_bare_scalars(self):
        with pytest.raises(TypeError):
            normalize("Root Folder", strict=True)
        with pytest.raises(TypeError):
            normalize(None, strict=True)

    def test_strict_mode_still_normalizes_containers(self):
        assert normalize(CompoundValue(id=1), strict=True) == {"id": 1}


class TestListings:
    def test_lone_record_is_wrapped(self):
        assert normalize_list(CompoundValue(id=4, name="Editor")) == [{"id": 4, "name": "Editor"}]
        assert normalize_list({"id": 4}) == [{"id": 4}]

    def test_lists_pass_through(self):
        assert normalize_list([{"id": 1}, {"id": 2}]) == [{"id": 1}, {"id": 2}]
        assert normalize_list(None) == []
