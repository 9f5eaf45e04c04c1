"""
SVG badge rendering.

Badges follow the familiar two-segment "shields" look: a dark label on the
left, a green value on the right, each with a one-unit drop shadow.  Text
width is approximated with a fixed per-character advance rather than real
font metrics, which keeps the output a pure function of its inputs.
"""
from __future__ import annotations

from typing import Iterable
from xml.sax.saxutils import escape

CHAR_WIDTH = 8
TEXT_PADDING = 10
BADGE_HEIGHT = 20

LABEL_COLOR = "#555"
VALUE_COLOR = "#4c1"
FONT_FAMILY = "DejaVu Sans,Verdana,Geneva,sans-serif"


def text_width(text: str) -> int:
    return len(text) * CHAR_WIDTH + TEXT_PADDING


def metadata_comment(item: str) -> str:
    # "--" may not appear inside an XML comment, so "-->" can never close it early
    return f"<!-- METADATA: {item.replace('--', '—')} -->"


def _text(x: int, content: str) -> list[str]:
    return [
        f'<text x="{x}" y="15" fill="#010101" fill-opacity=".3">{content}</text>',
        f'<text x="{x}" y="14">{content}</text>',
    ]


def render_badge(label: str, value: str, metadata: Iterable[str] = ()) -> str:
    """Render a badge as an SVG document.

    Parameters:
        label: text of the left segment
        value: text of the right segment, usually a formatted count
        metadata: extra strings embedded as XML comments, e.g. the page paths
            that contributed to the count

    Returns:
        The SVG document.  Identical inputs always produce identical output.
    """
    label_width = text_width(label)
    value_width = text_width(value)
    total_width = label_width + value_width
    label_text = escape(label)
    value_text = escape(value)

    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    lines.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="{BADGE_HEIGHT}">'
    )
    lines.extend("  " + metadata_comment(item) for item in metadata)
    lines.extend(
        [
            '  <linearGradient id="b" x2="0" y2="100%">',
            '    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>',
            '    <stop offset="1" stop-opacity=".1"/>',
            "  </linearGradient>",
            '  <mask id="a">',
            f'    <rect width="{total_width}" height="{BADGE_HEIGHT}" rx="3" fill="#fff"/>',
            "  </mask>",
            '  <g mask="url(#a)">',
            f'    <rect width="{label_width}" height="{BADGE_HEIGHT}" fill="{LABEL_COLOR}"/>',
            f'    <rect x="{label_width}" width="{value_width}" height="{BADGE_HEIGHT}" fill="{VALUE_COLOR}"/>',
            f'    <rect width="{total_width}" height="{BADGE_HEIGHT}" fill="url(#b)"/>',
            "  </g>",
            f'  <g fill="#fff" text-anchor="middle" font-family="{FONT_FAMILY}" font-size="13">',
        ]
    )
    lines.extend("    " + t for t in _text(label_width // 2, label_text))
    lines.extend("    " + t for t in _text(label_width + value_width // 2, value_text))
    lines.extend(["  </g>", "</svg>"])
    return "\n".join(lines)
