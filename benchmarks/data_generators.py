"""
Test data generators for form decoding benchmarks.

Creates form-urlencoded bodies of different shapes:
- Different sizes (small login form / large multi-field form)
- Escape-heavy content with many percent escapes and ``+`` spaces
- Non-ASCII content encoded as multi-byte UTF-8 escapes
"""

import random
import string
from urllib.parse import urlencode

_ESCAPE_PROBABILITY = 0.3
_RESERVED = "&=+%/?#:;@ "
_NON_ASCII = "äöüßéèçñ早く東京😱"


def generate_test_data(data_type: str) -> bytes:
    """Generates form-urlencoded test data based on specified type."""
    generators = {
        "small_form": _generate_small_form,
        "large_form": _generate_large_form,
        "escape_heavy": _generate_escape_heavy,
        "unicode_heavy": _generate_unicode_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]().encode("ascii")


def _generate_small_form() -> str:
    """Generates a small login-style form (< 200 bytes)."""
    data = {
        "username": "alice.johnson",
        "password": "correct horse battery staple",
        "remember": "on",
        "next": "/account/settings?tab=profile",
    }
    return urlencode(data)


def _generate_large_form() -> str:
    """Generates a large form (> 10KB) with many mostly-plain fields."""
    data = {
        f"field_{i:04d}": _random_string(random.randint(5, 40))
        for i in range(400)
    }
    return urlencode(data)


def _generate_escape_heavy() -> str:
    """Generates fields where a large share of characters need escaping."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(60):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(_RESERVED))
            else:
                chars.append(random.choice(string.ascii_letters))
        return "".join(chars)

    data = {f"q{i}": create_escaped_string() for i in range(150)}
    return urlencode(data)


def _generate_unicode_heavy() -> str:
    """Generates keys and values made of multi-byte characters."""
    data = {
        f"{random.choice(_NON_ASCII)}{i}": "".join(
            random.choice(_NON_ASCII) for _ in range(20)
        )
        for i in range(150)
    }
    return urlencode(data)


def _random_string(length: int) -> str:
    """Generates a random string of given length."""
    return "".join(
        random.choices(string.ascii_letters + string.digits + " ", k=length)
    )
