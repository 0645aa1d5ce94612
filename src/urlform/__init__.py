"""
Single-pass decoder for application/x-www-form-urlencoded data.

Turns ``key=value&key=value`` byte strings, as found in HTTP query strings
and form bodies, into a dictionary of decoded keys and values. Handles ``+``
as an encoded space and ``%XY`` hex escapes, and validates every completed
key and value as UTF-8.
"""

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any
from typing import ClassVar

from ._utf8_mapper import UTF8PositionMapper

__version__ = "0.1.0"

type Position = int
FormData = dict[str, str]
BytesLike = bytes | bytearray | memoryview

logger = logging.getLogger(__name__)

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "URLFORM_PROFILE" in os.environ

PLUS = ord("+")
SPACE = ord(" ")
PERCENT = ord("%")
EQUALS = ord("=")
AMPERSAND = ord("&")

_UPPER_HEX: dict[int, int] = {
    byte: int(chr(byte), 16) for byte in b"0123456789ABCDEF"
}
_ANY_CASE_HEX: dict[int, int] = _UPPER_HEX | {
    byte: int(chr(byte), 16) for byte in b"abcdef"
}


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during decoding."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    bytes_processed: int = 0

    def record_call(self, duration_ns: int, nbytes: int = 0) -> None:
        """Records a function call with timing and byte processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.bytes_processed += nbytes


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, bytes_to_process: int = 0):
            self.func_name = func_name
            self.nbytes = bytes_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.nbytes)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, bytes_to_process: int = 0) -> None:
            self.nbytes = bytes_to_process

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ErrorKind(Enum):
    """Tags identifying which decoding rule a failure violated."""

    EMPTY_KEY = "empty_key"
    INVALID_INPUT = "invalid_input"
    END_OF_INPUT = "end_of_input"
    INVALID_HEX = "invalid_hex"
    TEXT_DECODING = "text_decoding"
    INPUT_TOO_LARGE = "input_too_large"


class URLDecodeError(ValueError):
    """
    Reports a malformed form-urlencoded input and where it went wrong.

    Carries the message, the raw input and the byte offset of the failure.
    Subclasses pin down the violated rule through ``kind``.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, msg: str, doc: bytes = b"", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos
        # Filled in by decode_str, which knows the original text
        self.char_pos: Position | None = None

        super().__init__(f"{msg} at byte {pos}")


class EmptyKeyError(URLDecodeError):
    """A ``=`` was found with nothing before it."""

    kind = ErrorKind.EMPTY_KEY


class InvalidInputError(URLDecodeError):
    """A ``&`` inside a key or a second ``=`` inside a value."""

    kind = ErrorKind.INVALID_INPUT


class EndOfInputError(URLDecodeError):
    """Input ended inside a key or inside a hex escape."""

    kind = ErrorKind.END_OF_INPUT


class InvalidHexError(URLDecodeError):
    """A ``%`` was not followed by two hex digits."""

    kind = ErrorKind.INVALID_HEX


class TextDecodingError(URLDecodeError):
    """
    The decoded bytes of a key or value are not valid UTF-8.

    The underlying ``UnicodeDecodeError`` is chained as ``__cause__``.
    """

    kind = ErrorKind.TEXT_DECODING

    def __init__(
        self,
        msg: str,
        doc: bytes = b"",
        pos: Position = 0,
        reason: str = "",
    ) -> None:
        super().__init__(msg, doc, pos)
        self.reason = reason


class InputTooLargeError(URLDecodeError):
    """The input is longer than the configured ``max_input_size``."""

    kind = ErrorKind.INPUT_TOO_LARGE


@dataclass(frozen=True)
class DecodeConfig:
    """
    Configures decoding behavior with immutable settings.

    ``allow_lowercase_hex`` relaxes the default uppercase-only escape policy.
    ``max_input_size`` rejects inputs longer than the given number of bytes
    before any scanning happens.
    """

    allow_lowercase_hex: bool = False
    max_input_size: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.allow_lowercase_hex, bool):
            raise TypeError("allow_lowercase_hex must be a boolean")
        if self.max_input_size is not None:
            if isinstance(self.max_input_size, bool) or not isinstance(
                self.max_input_size, int
            ):
                raise TypeError("max_input_size must be an integer or None")
            if self.max_input_size < 0:
                raise ValueError("max_input_size must be non-negative")

    @property
    def hex_digits(self) -> dict[int, int]:
        """Lookup table from accepted hex digit bytes to their values."""
        return _ANY_CASE_HEX if self.allow_lowercase_hex else _UPPER_HEX


def _decode_hex(
    data: bytes, pos: Position, config: DecodeConfig
) -> tuple[int, Position]:
    """
    Decodes the two hex digits starting at ``pos`` into one byte.

    ``pos`` points just past the ``%``. Returns the byte value and the
    position after the second digit.
    """
    if pos + 2 > len(data):
        raise EndOfInputError(
            "Unexpected end of input in percent escape", data, len(data)
        )

    digits = config.hex_digits
    high = digits.get(data[pos])
    low = digits.get(data[pos + 1])
    if high is None or low is None:
        escape = data[pos : pos + 2].decode("ascii", "backslashreplace")
        raise InvalidHexError(
            f"Invalid percent escape %{escape}", data, pos - 1
        )

    return high << 4 | low, pos + 2


def _decode_text(buf: bytearray, data: bytes, start: Position) -> str:
    """Validates a completed key or value as UTF-8 text."""
    try:
        return buf.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextDecodingError(
            f"Field is not valid UTF-8: {e.reason}", data, start, e.reason
        ) from e


def _read_key(
    data: bytes, pos: Position, config: DecodeConfig
) -> tuple[str, Position]:
    """
    Reads a key up to and including the next unescaped ``=``.

    Returns the decoded key and the position just past the ``=``.
    """
    with ProfileContext("read_key") as ctx:
        start = pos
        length = len(data)
        buf = bytearray()

        while pos < length:
            byte = data[pos]
            if byte == PLUS:
                buf.append(SPACE)
                pos += 1
            elif byte == PERCENT:
                decoded, pos = _decode_hex(data, pos + 1, config)
                buf.append(decoded)
            elif byte == EQUALS:
                if not buf:
                    raise EmptyKeyError("Expecting non-empty key", data, pos)
                ctx.nbytes = pos + 1 - start
                return _decode_text(buf, data, start), pos + 1
            elif byte == AMPERSAND:
                raise InvalidInputError(
                    "Expecting '=' before '&' in key", data, pos
                )
            else:
                buf.append(byte)
                pos += 1

        raise EndOfInputError(
            "Unexpected end of input while reading key", data, pos
        )


def _read_value(
    data: bytes, pos: Position, config: DecodeConfig
) -> tuple[str, Position]:
    """
    Reads a value up to and including the next unescaped ``&``.

    Running out of input is not an error here: whatever was accumulated,
    possibly nothing, becomes the last value and the returned position is
    the input length.
    """
    with ProfileContext("read_value") as ctx:
        start = pos
        length = len(data)
        buf = bytearray()

        while pos < length:
            byte = data[pos]
            if byte == PLUS:
                buf.append(SPACE)
                pos += 1
            elif byte == PERCENT:
                decoded, pos = _decode_hex(data, pos + 1, config)
                buf.append(decoded)
            elif byte == AMPERSAND:
                ctx.nbytes = pos + 1 - start
                return _decode_text(buf, data, start), pos + 1
            elif byte == EQUALS:
                raise InvalidInputError(
                    "Unexpected '=' in value", data, pos
                )
            else:
                buf.append(byte)
                pos += 1

        ctx.nbytes = length - start
        return _decode_text(buf, data, start), length


def _parse_form(data: bytes, config: DecodeConfig) -> FormData:
    """
    Main decoding loop alternating key and value reads.

    Duplicate keys overwrite earlier ones.
    """
    with ProfileContext("decode", len(data)):
        if (
            config.max_input_size is not None
            and len(data) > config.max_input_size
        ):
            logger.debug(
                "Rejecting %d bytes of form data (max %d)",
                len(data),
                config.max_input_size,
            )
            raise InputTooLargeError(
                f"Input of {len(data)} bytes exceeds the limit of "
                f"{config.max_input_size}",
                data,
                config.max_input_size,
            )

        form: FormData = {}
        pos = 0
        length = len(data)
        while pos < length:
            key, pos = _read_key(data, pos, config)
            value, pos = _read_value(data, pos, config)
            form[key] = value

        return form


def decode(data: BytesLike, **kwargs: Any) -> FormData:
    """
    Decodes form-urlencoded bytes into a dictionary of strings.

    Raises a ``URLDecodeError`` subclass describing the first violation
    found; no partial result is returned.
    """
    if isinstance(data, str):
        raise TypeError("the form data must be bytes-like, not str")
    if not isinstance(data, bytes | bytearray | memoryview):
        raise TypeError(
            f"the form data must be bytes-like, not {type(data).__name__}"
        )

    config = DecodeConfig(**kwargs)
    raw = bytes(data)
    try:
        return _parse_form(raw, config)
    except URLDecodeError as e:
        logger.debug("Rejected form data (%s): %s", e.kind.value, e)
        raise


def decode_str(text: str, **kwargs: Any) -> FormData:
    """
    Decodes a form-urlencoded string.

    The text is encoded as UTF-8 and handed to ``decode``. Errors gain a
    ``char_pos`` pointing into ``text`` rather than into its bytes.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the form data must be str, not {type(text).__name__}"
        )

    try:
        return decode(text.encode("utf-8"), **kwargs)
    except URLDecodeError as e:
        e.char_pos = UTF8PositionMapper(text).byte_to_char(e.pos)
        e.add_note(f"at character {e.char_pos} of the input text")
        raise


def load(fp: IO[bytes], **kwargs: Any) -> FormData:
    """
    Decodes form-urlencoded data read from a binary file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return decode(fp.read(), **kwargs)


__all__ = [
    "DecodeConfig",
    "EmptyKeyError",
    "EndOfInputError",
    "ErrorKind",
    "HotPathStats",
    "InputTooLargeError",
    "InvalidHexError",
    "InvalidInputError",
    "TextDecodingError",
    "URLDecodeError",
    "clear_hot_path_stats",
    "decode",
    "decode_str",
    "get_hot_path_stats",
    "load",
]
