"""
Pytest configuration and shared fixtures for urlform tests.

Provides immutable test data fixtures for well-formed and malformed
form-urlencoded inputs.
"""

from dataclasses import dataclass
from dataclasses import field

import pytest

import urlform


@dataclass(frozen=True)
class FormTestCase:
    """
    Immutable container for form decoding test case data.

    Holds raw input and either the expected mapping or the expected error.
    """

    description: str
    input_data: bytes
    expected_output: dict[str, str] = field(default_factory=dict)
    expected_error: type[urlform.URLDecodeError] | None = None
    expected_pos: int = 0


@pytest.fixture
def form_pass_cases() -> list[FormTestCase]:
    """
    Provides inputs that must decode successfully.

    Covers plain pairs, empty values, escapes, ``+`` spaces and duplicate
    keys.
    """
    return [
        FormTestCase("empty input", b"", {}),
        FormTestCase("single pair", b"key=val", {"key": "val"}),
        FormTestCase(
            "two pairs",
            b"key=val&key1=val1",
            {"key": "val", "key1": "val1"},
        ),
        FormTestCase("empty value", b"key=", {"key": ""}),
        FormTestCase(
            "two empty values", b"key=&key1=", {"key": "", "key1": ""}
        ),
        FormTestCase("trailing ampersand", b"key=val&", {"key": "val"}),
        FormTestCase(
            "escaped key", b"%E6%97%A9%E3%81%8F=val", {"早く": "val"}
        ),
        FormTestCase(
            "escaped value", b"key=%E6%97%A9%E3%81%8F", {"key": "早く"}
        ),
        FormTestCase("emoji key", b"%F0%9F%98%B1=val", {"😱": "val"}),
        FormTestCase("emoji value", b"key=%F0%9F%98%B1", {"key": "😱"}),
        FormTestCase(
            "plus in key",
            b"%E6%97%A9%E3%81%8F+test=val",
            {"早く test": "val"},
        ),
        FormTestCase(
            "plus in value",
            b"key=%E6%97%A9%E3%81%8F+test",
            {"key": "早く test"},
        ),
        FormTestCase("only plus", b"+=+", {" ": " "}),
        FormTestCase(
            "escaped delimiters",
            b"a%3Db=c%26d%2Be",
            {"a=b": "c&d+e"},
        ),
        FormTestCase(
            "duplicate key last wins",
            b"a=1&b=2&a=3",
            {"a": "3", "b": "2"},
        ),
        FormTestCase(
            "raw utf-8 bytes", "ключ=знач".encode(), {"ключ": "знач"}
        ),
        FormTestCase("null byte escape", b"k=%00", {"k": "\x00"}),
        FormTestCase(
            "literal specials",
            b"path=/a/b?c;d",
            {"path": "/a/b?c;d"},
        ),
    ]


@pytest.fixture
def form_fail_cases() -> list[FormTestCase]:
    """
    Provides inputs that must be rejected, with the error and byte offset.
    """
    return [
        FormTestCase(
            "empty key", b"=val", expected_error=urlform.EmptyKeyError
        ),
        FormTestCase(
            "empty key after pair",
            b"a=b&=c",
            expected_error=urlform.EmptyKeyError,
            expected_pos=4,
        ),
        FormTestCase(
            "bare ampersand",
            b"&",
            expected_error=urlform.InvalidInputError,
        ),
        FormTestCase(
            "ampersand in key",
            b"ke&y=val",
            expected_error=urlform.InvalidInputError,
            expected_pos=2,
        ),
        FormTestCase(
            "double ampersand",
            b"a=b&&c=d",
            expected_error=urlform.InvalidInputError,
            expected_pos=4,
        ),
        FormTestCase(
            "second equals in value",
            b"a=b=c",
            expected_error=urlform.InvalidInputError,
            expected_pos=3,
        ),
        FormTestCase(
            "key without separator",
            b"key",
            expected_error=urlform.EndOfInputError,
            expected_pos=3,
        ),
        FormTestCase(
            "key without separator after pair",
            b"a=b&c",
            expected_error=urlform.EndOfInputError,
            expected_pos=5,
        ),
        FormTestCase(
            "truncated escape one digit",
            b"key=%4",
            expected_error=urlform.EndOfInputError,
            expected_pos=6,
        ),
        FormTestCase(
            "truncated escape no digits",
            b"key=%",
            expected_error=urlform.EndOfInputError,
            expected_pos=5,
        ),
        FormTestCase(
            "truncated escape in key",
            b"%E",
            expected_error=urlform.EndOfInputError,
            expected_pos=2,
        ),
        FormTestCase(
            "non hex escape",
            b"key=%GZ",
            expected_error=urlform.InvalidHexError,
            expected_pos=4,
        ),
        FormTestCase(
            "half hex escape",
            b"key=%4G",
            expected_error=urlform.InvalidHexError,
            expected_pos=4,
        ),
        FormTestCase(
            "lowercase hex escape",
            b"key=%e6",
            expected_error=urlform.InvalidHexError,
            expected_pos=4,
        ),
        FormTestCase(
            "invalid utf-8 key",
            b"%C3%28=x",
            expected_error=urlform.TextDecodingError,
        ),
        FormTestCase(
            "invalid utf-8 value",
            b"ok=1&k=%FF",
            expected_error=urlform.TextDecodingError,
            expected_pos=7,
        ),
        FormTestCase(
            "truncated utf-8 sequence",
            b"k=%E6%97",
            expected_error=urlform.TextDecodingError,
            expected_pos=2,
        ),
    ]
