"""
Adapters giving every benchmarked parser the same bytes -> dict signature.
"""

from urllib.parse import parse_qsl
from urllib.parse import unquote_plus

from python_multipart import QuerystringParser

import urlform


def stdlib_decode(data: bytes) -> dict[str, str]:
    """Decodes with urllib.parse, keeping blank values like urlform does."""
    return dict(
        parse_qsl(
            data.decode("ascii"), keep_blank_values=True, strict_parsing=True
        )
    )


def multipart_decode(data: bytes) -> dict[str, str]:
    """Decodes with python-multipart's callback-driven state machine."""
    fields: dict[str, str] = {}
    name = bytearray()
    value = bytearray()

    def on_field_start() -> None:
        name.clear()
        value.clear()

    def on_field_name(chunk: bytes, start: int, end: int) -> None:
        name.extend(chunk[start:end])

    def on_field_data(chunk: bytes, start: int, end: int) -> None:
        value.extend(chunk[start:end])

    def on_field_end() -> None:
        fields[unquote_plus(name.decode("ascii"))] = unquote_plus(
            value.decode("ascii")
        )

    parser = QuerystringParser(
        {
            "on_field_start": on_field_start,
            "on_field_name": on_field_name,
            "on_field_data": on_field_data,
            "on_field_end": on_field_end,
        },
        strict_parsing=True,
    )
    parser.write(data)
    parser.finalize()
    return fields


PARSERS = [
    ("stdlib_parse_qsl", stdlib_decode),
    ("python_multipart", multipart_decode),
    ("urlform", urlform.decode),
]
