"""
artledger.render — SVG artwork for a token.

The document is a fixed 400x400 canvas:

- background: linear gradient color_a -> color_b (top-left to bottom-right)
- foreground: one of three shape layers picked by Attributes.shape
- label:      "<prefix> #<id>" centered at (200, 380)

Output is a single line with no control characters, so it can be embedded in
the metadata JSON after quote/backslash escaping alone.
"""

from __future__ import annotations

from typing import Callable, Dict

from .codec import color_hex, uint_to_decimal
from .config import DEFAULT_NAME_PREFIX
from .seed import Attributes, Shape

CANVAS = 400
CENTER = 200

# Five outer tips (r=140) alternating with five inner vertices (r=60),
# starting straight up, rounded to whole pixels.
STAR_POINTS = "200,60 235,151 333,157 257,219 282,313 200,260 118,313 143,219 67,157 165,151"


def _circles(a: str, b: str) -> str:
    return (
        f'<circle cx="{CENTER}" cy="{CENTER}" r="120" fill="{a}" fill-opacity="0.95"/>'
        f'<circle cx="{CENTER}" cy="{CENTER}" r="70" fill="{b}" fill-opacity="0.85"/>'
    )


def _rectangles(a: str, b: str) -> str:
    return (
        f'<g transform="rotate(25 {CENTER} {CENTER})">'
        f'<rect x="80" y="80" width="240" height="240" rx="30" ry="30" fill="{a}"/>'
        f'<rect x="110" y="110" width="180" height="180" rx="25" ry="25" fill="{b}" fill-opacity="0.9"/>'
        "</g>"
    )


def _star(a: str, b: str) -> str:
    return (
        f'<polygon points="{STAR_POINTS}" fill="{a}"/>'
        f'<circle cx="{CENTER}" cy="{CENTER}" r="45" fill="{b}"/>'
    )


_SHAPE_LAYERS: Dict[Shape, Callable[[str, str], str]] = {
    Shape.CIRCLES: _circles,
    Shape.RECTANGLES: _rectangles,
    Shape.STAR_POLYGON: _star,
}


def label_for(token_id: int, prefix: str = DEFAULT_NAME_PREFIX) -> str:
    return prefix + " #" + uint_to_decimal(token_id)


def render_svg(token_id: int, attrs: Attributes, *, label_prefix: str = DEFAULT_NAME_PREFIX) -> str:
    a = color_hex(attrs.color_a)
    b = color_hex(attrs.color_b)
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CANVAS}" height="{CANVAS}" viewBox="0 0 {CANVAS} {CANVAS}">',
        '<defs><linearGradient id="bg" x1="0" y1="0" x2="1" y2="1">',
        f'<stop offset="0%" stop-color="{a}"/>',
        f'<stop offset="100%" stop-color="{b}"/>',
        "</linearGradient></defs>",
        f'<rect width="{CANVAS}" height="{CANVAS}" fill="url(#bg)"/>',
        _SHAPE_LAYERS[attrs.shape](a, b),
        f'<text x="{CENTER}" y="380" text-anchor="middle" font-family="monospace" font-size="18" fill="#ffffff">',
        label_for(token_id, label_prefix),
        "</text></svg>",
    ]
    return "".join(parts)


__all__ = ["render_svg", "label_for", "STAR_POINTS", "CANVAS"]
