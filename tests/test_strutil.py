import binascii

import pytest

from onexutil.strutil import (
    add,
    camel_case_to_underscore,
    contains,
    contains_equal_fold,
    decode_base64,
    diff,
    find_string,
    frequency_sort,
    include,
    remove_all,
    reverse,
    string_in,
    underscore_to_camel_case,
    unique,
)


def test_diff():
    result = diff(["foo", "bar", "hello"], ["foo", "bar", "world"])
    assert result == ["hello"]


def test_diff_nothing_left():
    assert diff(["a"], ["a", "b"]) == []


def test_include_keeps_order_of_include():
    assert include(["a", "b", "c"], ["c", "x", "a"]) == ["c", "a"]


def test_unique():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("MyFunc", "my_func"),
        ("ABC", "a_b_c"),
        ("already_snake", "already_snake"),
        ("Version2Go", "version2_go"),
        ("", ""),
    ],
)
def test_camel_case_to_underscore(text, expected):
    assert camel_case_to_underscore(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("my_func", "MyFunc"),
        ("MY_FUNC", "MyFunc"),
        ("hello world", "HelloWorld"),
        ("a1b_c", "A1bC"),
    ],
)
def test_underscore_to_camel_case(text, expected):
    assert underscore_to_camel_case(text) == expected


def test_camel_round_trip():
    assert underscore_to_camel_case(camel_case_to_underscore("UserName")) == "UserName"


def test_find_string_and_string_in():
    items = ["a", "b", "c"]
    assert find_string(items, "c") == 2
    assert find_string(items, "z") == -1
    assert string_in("b", items) is True
    assert string_in("z", items) is False


def test_reverse_handles_multibyte_characters():
    assert reverse("héllo世") == "世olléh"
    assert reverse(reverse("abc")) == "abc"


def test_remove_all():
    assert remove_all(["a", "b", "a", "c"], "a") == ["b", "c"]


def test_add():
    items = ["a", "b"]
    assert add(items, "a") == ["a", "b"]
    assert add(items, "c") == ["a", "b", "c"]
    assert items == ["a", "b"]


def test_contains():
    assert contains(["x", "y"], "y") is True
    assert contains(["x", "y"], "Y") is False


def test_frequency_sort_least_frequent_first():
    result = frequency_sort(["a", "b", "b", "c", "c", "c"])
    assert result == ["a", "b", "c"]


def test_frequency_sort_distinct_items():
    items = ["x", "y", "x", "z", "y", "x"]
    result = frequency_sort(items)
    assert sorted(result) == sorted(set(items))
    assert result[-1] == "x"


def test_contains_equal_fold():
    assert contains_equal_fold(["Go", "Python"], "PYTHON") is True
    assert contains_equal_fold(["Go"], "rust") is False


def test_decode_base64():
    assert decode_base64("aGVsbG8=") == b"hello"


def test_decode_base64_ignores_newlines():
    assert decode_base64("aGVs\r\nbG8=") == b"hello"


@pytest.mark.parametrize("text", ["aGVsbG8", "not base64!"])
def test_decode_base64_errors(text):
    with pytest.raises(binascii.Error):
        decode_base64(text)