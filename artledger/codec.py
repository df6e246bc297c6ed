"""
artledger.codec
===============

Text encoders used to assemble token metadata by hand:

- u24_to_hex(v)        24-bit value -> six lowercase hex digits (no '#', no '0x')
- uint_to_decimal(n)   non-negative int -> base-10 digits ("0" for zero)
- json_escape(s)       escape '"' and '\\' only

The metadata document is built by string concatenation, so these encoders
define the exact output byte-for-byte; fixtures depend on them.

json_escape copies every character other than '"' and '\\' unchanged,
control characters included. It is only correct for text that cannot contain
them: the configured description, the generated name and the generated SVG.
"""
from __future__ import annotations

HEX_ALPHABET = "0123456789abcdef"
DEC_ALPHABET = "0123456789"
U24_MAX = 0xFFFFFF


def u24_to_hex(value: int) -> str:
    """Six hex digits, most-significant nibble first."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"u24_to_hex expects int, got {type(value).__name__}")
    if value < 0 or value > U24_MAX:
        raise ValueError(f"value out of 24-bit range: {value}")
    out = []
    for shift in range(20, -4, -4):
        out.append(HEX_ALPHABET[(value >> shift) & 0xF])
    return "".join(out)


def uint_to_decimal(value: int) -> str:
    """Base-10 digits with no leading zeros."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"uint_to_decimal expects int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"value must be non-negative: {value}")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 10)
        digits.append(DEC_ALPHABET[rem])
    return "".join(reversed(digits))


def json_escape(text: str) -> str:
    """Replace '"' with '\\"' and '\\' with '\\\\'; copy everything else."""
    out = []
    for ch in text:
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        else:
            out.append(ch)
    return "".join(out)


def color_hex(value: int) -> str:
    """'#' + u24_to_hex(value), the form used in fill attributes and traits."""
    return "#" + u24_to_hex(value)


__all__ = ["u24_to_hex", "uint_to_decimal", "json_escape", "color_hex", "HEX_ALPHABET", "U24_MAX"]
