"""Helpers for literal values and signal paths."""

from __future__ import annotations

import string

from .ir import CodegenError

_U128_MAX = (1 << 128) - 1
_DIGITS = {
    16: set(string.hexdigits.lower()),
    10: set(string.digits),
    8: set("01234567"),
    2: set("01"),
}
_BASES = {"h": 16, "d": 10, "b": 2, "o": 8}


def _parse_unsigned(digits: str, radix: int, text: str) -> int:
    body = digits[1:] if digits.startswith("+") else digits
    if not body or not set(body) <= _DIGITS[radix]:
        raise CodegenError(f"invalid digits in literal: {text}")
    value = int(body, radix)
    if value > _U128_MAX:
        raise CodegenError(f"literal too large: {text}")
    return value


def _as_i128(value: int) -> int:
    value &= _U128_MAX
    return value - (1 << 128) if value >> 127 else value


def literal_to_css_int(text: str) -> str:
    """Turn a sized literal (``8'shff``) or plain decimal into a CSS integer."""
    normalized = text.strip().replace("_", "").lower()

    if "x" in normalized or "z" in normalized:
        raise CodegenError(f"x/z literal is unsupported: {text}")

    if "'" in normalized:
        width_str, rhs = normalized.split("'", 1)
        signed = rhs.startswith("s")
        rest = rhs[1:] if signed else rhs
        if not rest:
            raise CodegenError(f"missing literal base in: {text}")
        base_ch, digits = rest[0], rest[1:]
        width = int(width_str) if width_str.isascii() and width_str.isdigit() else None

        radix = _BASES.get(base_ch)
        if radix is None:
            raise CodegenError(f"unsupported literal base in: {text}")
        unsigned_val = _parse_unsigned(digits, radix, text)

        if signed and width is not None and 0 < width <= 128 and (unsigned_val >> (width - 1)) & 1:
            extended = unsigned_val | ((_U128_MAX << width) & _U128_MAX)
            return str(_as_i128(extended))
        return str(_as_i128(unsigned_val))

    if normalized.startswith("-") or all(c in string.digits for c in normalized):
        return normalized

    raise CodegenError(f"unsupported literal syntax: {text}")


def last_path_segment(path: str) -> str:
    """Return the part of a dotted path after the last dot."""
    return path.rsplit(".", 1)[-1]