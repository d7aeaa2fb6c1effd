"""Content-derived cache keys.

The key is a 32-bit rolling hash (``h = h * 31 + unit``) over the UTF-16 code
units of the content, read as a signed integer, made positive and written in
base 36. Distinct contents may collide.
"""

from __future__ import annotations


DEFAULT_KEY_PREFIX = "md-"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_MASK_32 = 0xFFFFFFFF


def _utf16_units(content: str) -> list[int]:
    payload = content.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(payload[i : i + 2], "little") for i in range(0, len(payload), 2)]


def rolling_hash(content: str) -> int:
    """Return the signed 32-bit rolling hash of ``content``."""
    value = 0
    for unit in _utf16_units(content):
        value = (value * 31 + unit) & _MASK_32
    if value & 0x80000000:
        value -= 1 << 32
    return value


def to_base36(value: int) -> str:
    """Render a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("Base 36 rendering expects a non-negative integer.")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def cache_key(content: str, *, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Return the cache key of ``content``."""
    return f"{prefix}{to_base36(abs(rolling_hash(content)))}"


__all__ = ["DEFAULT_KEY_PREFIX", "cache_key", "rolling_hash", "to_base36"]
