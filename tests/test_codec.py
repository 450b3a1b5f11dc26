import base64
import os

import pytest

from edgekit.codec import (
    base64url_to_bytes,
    bytes_to_base64url,
    bytes_to_latin1_string,
    is_base64url,
    latin1_string_to_bytes,
)
from edgekit.errors import CodePointError, FormatError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("QQ", True),
        ("QQ_-test-123", True),
        ("test-123/@==", False),
        ("a/b", False),
        ("test-non-latin1-Ā", False),
        ("trailing-newline\n", False),
        ("", False),
    ],
)
def test_is_base64url(text, expected):
    assert is_base64url(text) is expected


def test_latin1_string_rejects_code_point_256():
    with pytest.raises(CodePointError) as exc_info:
        latin1_string_to_bytes(chr(256))

    assert str(exc_info.value) == "string contains character with code point higher than 255"
    assert isinstance(exc_info.value, ValueError)


def test_latin1_string_error_does_not_leak_value():
    with pytest.raises(CodePointError) as exc_info:
        latin1_string_to_bytes("secret-€-value", "token")

    assert "secret" not in str(exc_info.value)
    assert exc_info.value.parameter == "token"


def test_latin1_conversions_are_inverse():
    every_char = "".join(chr(i) for i in range(256))
    assert bytes_to_latin1_string(latin1_string_to_bytes(every_char)) == every_char

    data = os.urandom(32)
    assert latin1_string_to_bytes(bytes_to_latin1_string(data)) == data


def test_bytes_to_latin1_string_accepts_bytes_like():
    assert bytes_to_latin1_string(bytearray(b"\x00\xff")) == "\x00\xff"
    assert bytes_to_latin1_string(memoryview(b"ab")) == "ab"


@pytest.mark.parametrize("value", [[1, 2, 3], "abc", 42, None])
def test_bytes_to_latin1_string_rejects_non_bytes(value):
    with pytest.raises(TypeError):
        bytes_to_latin1_string(value)


def test_bytes_to_base64url_rejects_non_bytes():
    with pytest.raises(TypeError):
        bytes_to_base64url([256, 1])


def test_bytes_to_base64url_substitutes_and_strips_padding():
    data = b"\xfb\xff"
    assert base64.b64encode(data) == b"+/8="
    assert bytes_to_base64url(data) == "-_8"


def test_bytes_to_base64url_output_is_base64url():
    assert is_base64url(bytes_to_base64url(os.urandom(32)))


@pytest.mark.parametrize("length", [1, 2, 3, 32, 36, 64, 256])
def test_base64url_round_trip(length):
    data = os.urandom(length)
    assert base64url_to_bytes(bytes_to_base64url(data)) == data


def test_empty_bytes_encode_to_empty_string():
    assert bytes_to_base64url(b"") == ""


@pytest.mark.parametrize("text", ["Test_With-invalid_char@1", "", "QQ=="])
def test_base64url_to_bytes_rejects_invalid_format(text):
    with pytest.raises(FormatError) as exc_info:
        base64url_to_bytes(text)

    assert str(exc_info.value) == (
        "string is empty or contains character not in the base64URL character set"
    )
    assert exc_info.value.parameter == "string"


def test_base64url_to_bytes_names_parameter():
    with pytest.raises(FormatError) as exc_info:
        base64url_to_bytes("a/b", "signature")

    assert exc_info.value.parameter == "signature"
    assert str(exc_info.value).startswith("signature is empty")


def test_base64url_to_bytes_rejects_impossible_length():
    with pytest.raises(FormatError) as exc_info:
        base64url_to_bytes("QUJDR", "expected_token_hash")

    assert exc_info.value.parameter == "expected_token_hash"
    assert "length" in str(exc_info.value)
