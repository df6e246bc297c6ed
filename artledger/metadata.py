"""
artledger.metadata — assemble the token metadata data URI.

    data:application/json;utf8,{"name":"AI Artwork #<id>","description":"<const>",
      "attributes":[{"trait_type":"palette","value":"#<hexA> / #<hexB>"},
                    {"trait_type":"shape","value":"<ShapeName>"}],
      "image":"data:image/svg+xml;utf8,<svg ...>"}

(one line in practice). The document is concatenated by hand; name,
description and image go through `json_escape` before insertion. It is rebuilt
on every query and never cached.
"""

from __future__ import annotations

from .codec import color_hex, json_escape
from .config import DEFAULT_DESCRIPTION, DEFAULT_NAME_PREFIX
from .render import label_for, render_svg
from .seed import Attributes

JSON_URI_PREFIX = "data:application/json;utf8,"
SVG_URI_PREFIX = "data:image/svg+xml;utf8,"


def palette_value(attrs: Attributes) -> str:
    return color_hex(attrs.color_a) + " / " + color_hex(attrs.color_b)


def image_uri(token_id: int, attrs: Attributes, *, name_prefix: str = DEFAULT_NAME_PREFIX) -> str:
    return SVG_URI_PREFIX + render_svg(token_id, attrs, label_prefix=name_prefix)


def build_token_json(
    token_id: int,
    attrs: Attributes,
    *,
    name_prefix: str = DEFAULT_NAME_PREFIX,
    description: str = DEFAULT_DESCRIPTION,
) -> str:
    name = json_escape(label_for(token_id, name_prefix))
    desc = json_escape(description)
    image = json_escape(image_uri(token_id, attrs, name_prefix=name_prefix))
    return (
        '{"name":"' + name + '",'
        '"description":"' + desc + '",'
        '"attributes":['
        '{"trait_type":"palette","value":"' + palette_value(attrs) + '"},'
        '{"trait_type":"shape","value":"' + attrs.shape.display_name + '"}'
        "],"
        '"image":"' + image + '"}'
    )


def token_uri(
    token_id: int,
    attrs: Attributes,
    *,
    name_prefix: str = DEFAULT_NAME_PREFIX,
    description: str = DEFAULT_DESCRIPTION,
) -> str:
    return JSON_URI_PREFIX + build_token_json(token_id, attrs, name_prefix=name_prefix, description=description)


__all__ = [
    "JSON_URI_PREFIX",
    "SVG_URI_PREFIX",
    "palette_value",
    "image_uri",
    "build_token_json",
    "token_uri",
]
