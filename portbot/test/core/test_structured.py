from __future__ import annotations

from portbot.core.structured import as_str_dict, get_bool, get_str, get_str_list, get_table


def test_as_str_dict() -> None:
    assert as_str_dict({"name": "dpp"}) == {"name": "dpp"}
    assert as_str_dict({1: "x"}) is None
    assert as_str_dict(["name"]) is None


def test_get_table() -> None:
    data: dict[str, object] = {"vcpkg": {"root": "/opt/vcpkg"}, "git": "not a table"}
    assert get_table(data, "vcpkg") == {"root": "/opt/vcpkg"}
    assert get_table(data, "git") is None
    assert get_table(data, "paths") is None


def test_get_str_strips_and_rejects_blank() -> None:
    data: dict[str, object] = {"slug": "  brainboxdotcc/DPP ", "blank": "  ", "num": 3}
    assert get_str(data, "slug") == "brainboxdotcc/DPP"
    assert get_str(data, "blank") is None
    assert get_str(data, "num") is None


def test_get_bool() -> None:
    data: dict[str, object] = {"sudo": False, "text": "false"}
    assert get_bool(data, "sudo") is False
    assert get_bool(data, "text") is None


def test_get_str_list() -> None:
    assert get_str_list({"deps": [" zlib", "opus"]}, "deps") == ("zlib", "opus")
    assert get_str_list({"deps": []}, "deps") == ()
    assert get_str_list({"deps": ["zlib", 1]}, "deps") is None
    assert get_str_list({"deps": "zlib"}, "deps") is None
    assert get_str_list({}, "deps") is None
