"""Hashing utilities."""

import string

BASE36_DIGITS = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _utf16_code_units(text: str) -> list[int]:
    data = text.encode("utf-16-le")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def stable_id(title: str, url: str) -> str:
    """Generate a short, deterministic article ID from title and URL.

    Accumulates ``h = h * 31 + c`` over the UTF-16 code units of
    ``title + url`` with signed 32-bit wraparound, then base-36 encodes the
    absolute value. Not collision free.
    """
    h = 0
    for unit in _utf16_code_units(f"{title}{url}"):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))
