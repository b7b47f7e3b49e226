import zlib

import pytest

from actionhub.core.ids import fmt_id, get_id


def test_get_id_is_stable_crc32():
    assert get_id("ExampleAction") == zlib.crc32(b"ExampleAction")
    assert get_id("ExampleAction") == get_id("ExampleAction")
    assert 0 <= get_id("ExampleAction") <= 0xFFFFFFFF


def test_distinct_names_distinct_ids():
    names = ["ExampleAction", "ExampleAction2", "ScriptCategory", "Input", "Window", "Debug"]
    assert len({get_id(n) for n in names}) == len(names)


def test_get_id_handles_unicode():
    assert get_id("ทดสอบ") == zlib.crc32("ทดสอบ".encode("utf-8"))


def test_get_id_rejects_non_string():
    with pytest.raises(TypeError):
        get_id(42)


def test_fmt_id():
    assert fmt_id(0x1F) == "0x0000001f"
