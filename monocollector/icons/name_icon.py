"""
Name-based icon generation

Builds a small SVG avatar for an item from its name alone. The same name
always gives the same icon: style, colors and pattern all come from the
name hash.

Styles:
- geometric: pastel background, one of five shape patterns, initials
- abstract: three-stop diagonal gradient with white initials
- pixel: mirrored 5x5 identicon grid
- gradient: two-stop gradient in one of four directions
- ring: 2-5 arcs on a circle around the initials
"""

from enum import Enum
from typing import Dict, Optional
import logging
import math
import re

from pydantic import BaseModel

from monocollector.icons.svg import (
    fmt,
    gradient_direction,
    linear_gradient,
    svg_document,
    text_element,
    to_data_url,
)
from monocollector.observability.metrics import icons_generated_total
from monocollector.utils.hashing import hash_string, hsl_to_hex

logger = logging.getLogger(__name__)

_JAPANESE_PATTERN = re.compile("[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_WORD_SEPARATORS = re.compile(r"[\s\-_]+")

DEFAULT_ICON_SIZE = 64


class IconStyle(str, Enum):
    GEOMETRIC = "geometric"
    ABSTRACT = "abstract"
    PIXEL = "pixel"
    GRADIENT = "gradient"
    RING = "ring"


ICON_STYLES = tuple(IconStyle)


class GeneratedIcon(BaseModel):
    """SVG icon generated from an item name"""
    svg: str
    data_url: str
    primary_color: str
    secondary_color: str
    style: IconStyle


def get_initials(name: str) -> str:
    """
    Initials shown inside the icon

    Japanese names keep their first two characters; otherwise the first
    letters of the first two words, or the first two characters, upper-cased.
    """
    if _JAPANESE_PATTERN.search(name):
        return name[:2]

    words = [w for w in _WORD_SEPARATORS.split(name) if w]
    if len(words) >= 2:
        return (words[0][0] + words[1][0]).upper()
    return name[:2].upper()


def _hsl(h: int, s: int, lightness: int) -> str:
    return f"hsl({h}, {s}%, {lightness}%)"


def _hexagon_points(cx: float, cy: float, radius: float) -> str:
    points = []
    for i in range(6):
        angle = math.radians(i * 60 - 30)
        points.append(f"{fmt(cx + radius * math.cos(angle))},{fmt(cy + radius * math.sin(angle))}")
    return " ".join(points)


def _geometric_svg(name: str, size: int) -> str:
    h = hash_string(name)
    primary_hue = h % 360
    primary = _hsl(primary_hue, 70, 55)
    secondary = _hsl((primary_hue + 120) % 360, 60, 65)
    bg = _hsl(primary_hue, 25, 95)
    cx = cy = size / 2

    pattern = h % 5
    if pattern == 0:
        shapes = [
            f'<circle cx="{fmt(cx)}" cy="{fmt(cy)}" r="{fmt(size * 0.4)}" fill="{primary}" opacity="0.3"/>',
            f'<circle cx="{fmt(cx)}" cy="{fmt(cy)}" r="{fmt(size * 0.25)}" fill="{secondary}" opacity="0.5"/>',
        ]
    elif pattern == 1:
        shapes = [f'<polygon points="{_hexagon_points(cx, cy, size * 0.35)}" fill="{primary}" opacity="0.4"/>']
    elif pattern == 2:
        points = (
            f"{fmt(cx)},{fmt(cy - size * 0.3)} "
            f"{fmt(cx - size * 0.26)},{fmt(cy + size * 0.2)} "
            f"{fmt(cx + size * 0.26)},{fmt(cy + size * 0.2)}"
        )
        shapes = [f'<polygon points="{points}" fill="{primary}" opacity="0.4"/>']
    elif pattern == 3:
        shapes = [
            f'<rect x="{fmt(cx - size * 0.2)}" y="{fmt(cy - size * 0.2)}" width="{fmt(size * 0.4)}" '
            f'height="{fmt(size * 0.4)}" fill="{primary}" opacity="0.4" transform="rotate(45 {fmt(cx)} {fmt(cy)})"/>'
        ]
    else:
        shapes = [
            f'<circle cx="{fmt(cx - size * 0.15)}" cy="{fmt(cy - size * 0.15)}" r="{fmt(size * 0.15)}" '
            f'fill="{primary}" opacity="0.3"/>',
            f'<circle cx="{fmt(cx + size * 0.15)}" cy="{fmt(cy + size * 0.15)}" r="{fmt(size * 0.15)}" '
            f'fill="{secondary}" opacity="0.3"/>',
        ]

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.15)}"/>',
        *shapes,
        text_element(cx, cy, get_initials(name), font_family="system-ui, sans-serif",
                     font_size=fmt(size * 0.35), font_weight="600", fill=primary),
    ])


def _abstract_svg(name: str, size: int) -> str:
    h = hash_string(name)
    hue1 = h % 360
    hue2 = (hue1 + 40 + h % 80) % 360
    hue3 = (hue2 + 40 + h % 80) % 360
    gradient_id = f"grad-{h}"

    defs = linear_gradient(
        gradient_id,
        [("0%", _hsl(hue1, 80, 65)), ("50%", _hsl(hue2, 75, 60)), ("100%", _hsl(hue3, 70, 55))],
        ("0%", "0%", "100%", "100%"),
    )
    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="url(#{gradient_id})" rx="{fmt(size * 0.15)}"/>',
        text_element(size / 2, size / 2, get_initials(name), font_family="system-ui, sans-serif",
                     font_size=fmt(size * 0.35), font_weight="700", fill="white",
                     style="text-shadow: 0 1px 2px rgba(0,0,0,0.3)"),
    ], defs=defs)


def _pixel_svg(name: str, size: int) -> str:
    h = hash_string(name)
    hue = h % 360
    primary = _hsl(hue, 70, 55)
    secondary = _hsl(hue, 50, 75)
    bg = _hsl(hue, 20, 95)

    grid = 5
    cell = size / (grid + 2)
    pixels = []
    for y in range(grid):
        for x in range(math.ceil(grid / 2)):
            if not (h >> (y * 3 + x)) & 1:
                continue
            color = primary if (h >> (y + x)) & 1 else secondary
            for column in sorted({x, grid - 1 - x}):
                pixels.append(
                    f'<rect x="{fmt((column + 1) * cell)}" y="{fmt((y + 1) * cell)}" '
                    f'width="{fmt(cell * 0.9)}" height="{fmt(cell * 0.9)}" fill="{color}" rx="1"/>'
                )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.12)}"/>',
        *pixels,
        text_element(size / 2, size / 2, get_initials(name), font_family="monospace",
                     font_size=fmt(size * 0.25), font_weight="700", fill=primary, opacity="0.8"),
    ])


def _gradient_svg(name: str, size: int) -> str:
    h = hash_string(name)
    hue = h % 360
    gradient_id = f"ring-grad-{h}"

    defs = linear_gradient(
        gradient_id,
        [("0%", _hsl(hue, 85, 60)), ("100%", _hsl((hue + 60) % 360, 80, 50))],
        gradient_direction(h),
    )
    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="url(#{gradient_id})" rx="{fmt(size * 0.2)}"/>',
        text_element(size / 2, size / 2, get_initials(name), font_family="system-ui, sans-serif",
                     font_size=fmt(size * 0.38), font_weight="700", fill="white"),
    ], defs=defs)


def _ring_svg(name: str, size: int) -> str:
    h = hash_string(name)
    hue = h % 360
    primary = _hsl(hue, 75, 55)
    secondary = _hsl((hue + 180) % 360, 65, 60)
    bg = _hsl(hue, 15, 97)
    cx = cy = size / 2
    r = size * 0.38

    arc_count = 2 + h % 4
    arcs = []
    for i in range(arc_count):
        start = math.radians(360 / arc_count * i + h % 30)
        end = start + (math.pi / arc_count) * 1.5
        color = primary if i % 2 == 0 else secondary
        arcs.append(
            f'<path d="M {fmt(cx + r * math.cos(start))} {fmt(cy + r * math.sin(start))} '
            f'A {fmt(r)} {fmt(r)} 0 0 1 {fmt(cx + r * math.cos(end))} {fmt(cy + r * math.sin(end))}" '
            f'stroke="{color}" stroke-width="{fmt(size * 0.06)}" fill="none" stroke-linecap="round" opacity="0.7"/>'
        )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.15)}"/>',
        *arcs,
        text_element(cx, cy, get_initials(name), font_family="system-ui, sans-serif",
                     font_size=fmt(size * 0.32), font_weight="600", fill=primary),
    ])


_RENDERERS = {
    IconStyle.GEOMETRIC: _geometric_svg,
    IconStyle.ABSTRACT: _abstract_svg,
    IconStyle.PIXEL: _pixel_svg,
    IconStyle.GRADIENT: _gradient_svg,
    IconStyle.RING: _ring_svg,
}


def generate_icon(name: str, style: Optional[IconStyle] = None, size: int = DEFAULT_ICON_SIZE) -> GeneratedIcon:
    """
    Generate an icon for an item name

    Args:
        name: Item name (any string, including empty)
        style: Icon style; picked from the name hash when omitted
        size: Width and height in pixels

    Returns:
        GeneratedIcon with SVG markup, data URL and the two theme colors
    """
    h = hash_string(name)
    selected = IconStyle(style) if style else ICON_STYLES[h % len(ICON_STYLES)]
    svg = _RENDERERS[selected](name, size)

    primary_hue = h % 360
    icons_generated_total.labels(source="name", style=selected.value).inc()

    return GeneratedIcon(
        svg=svg,
        data_url=to_data_url(svg),
        primary_color=hsl_to_hex(primary_hue, 70, 55),
        secondary_color=hsl_to_hex((primary_hue + 120) % 360, 60, 65),
        style=selected,
    )


def generate_all_styles(name: str, size: int = DEFAULT_ICON_SIZE) -> Dict[IconStyle, GeneratedIcon]:
    """Preview of every style for one name"""
    return {style: generate_icon(name, style, size) for style in ICON_STYLES}
