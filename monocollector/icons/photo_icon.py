"""
Photo-based icon generation

Analyzes an item photo with Pillow and turns its dominant colors into an
SVG icon. A perceptual hash (8x8 grayscale) makes the pattern stable for
the same picture.

Undecodable images do not fail the request: color extraction returns an
empty palette (styles fall back to fixed colors) and the hash falls back
to the raw bytes.
"""

from collections import Counter
from datetime import datetime
from enum import Enum
from io import BytesIO
from typing import Dict, List, Optional, Sequence
import base64
import binascii
import logging
import math
import re

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from monocollector import config
from monocollector.exceptions import ImageDecodeError, ValidationError
from monocollector.icons.svg import (
    fmt,
    gradient_direction,
    linear_gradient,
    svg_document,
    to_data_url,
)
from monocollector.observability.metrics import icons_generated_total
from monocollector.utils.hashing import (
    fold_hash,
    hash_bytes,
    quantize_channel,
    rgb_to_hex,
    rgb_to_hsl,
)

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 50
HASH_SIZE = 8
DEFAULT_ICON_SIZE = 64

_DATA_URL_PATTERN = re.compile(r"^data:image/[\w.+-]+;base64,(?P<payload>.+)$", re.DOTALL)


class PhotoIconStyle(str, Enum):
    MOSAIC = "mosaic"
    GRADIENT = "gradient"
    GEOMETRIC = "geometric"
    ABSTRACT = "abstract"
    PIXEL = "pixel"


PHOTO_ICON_STYLES = tuple(PhotoIconStyle)


class ColorInfo(BaseModel):
    """One quantized color and how many sampled pixels had it"""
    hex: str
    rgb: tuple[int, int, int]
    hsl: tuple[int, int, int]
    count: int


class PhotoIcon(BaseModel):
    """SVG icon generated from a photo"""
    id: str
    svg: str
    data_url: str
    colors: List[str] = Field(default_factory=list)
    style: PhotoIconStyle
    created_at: datetime = Field(default_factory=datetime.now)


# ============================================
# Image analysis
# ============================================

def _open_image(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(image_bytes))
        width, height = image.size
        if width * height > config.MAX_IMAGE_PIXELS:
            raise ImageDecodeError(
                f"Image too large: {width}x{height} exceeds {config.MAX_IMAGE_PIXELS} pixels",
                context={"width": width, "height": height},
            )
        image.load()
        return image
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Could not decode image ({len(image_bytes)} bytes): {e}") from e


def decode_data_url(data_url: str) -> bytes:
    """
    Extract image bytes from a `data:image/...;base64,` URL

    Raises:
        ValidationError: If the URL is not a base64 image data URL
    """
    match = _DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ValidationError("Expected a base64 image data URL", field="image")
    try:
        return base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 payload: {e}", field="image") from e


def extract_colors_from_image(image_bytes: bytes, sample_size: int = 5) -> List[ColorInfo]:
    """
    Most frequent quantized colors of an image

    The image is resized to 50x50, each channel is rounded to a multiple
    of 32 and colors are ranked by pixel count (ties keep first-seen order).

    Returns:
        Up to sample_size colors, or [] when the image cannot be decoded
    """
    try:
        image = _open_image(image_bytes)
    except ImageDecodeError:
        logger.warning("Color extraction skipped: image could not be decoded")
        return []

    sample = image.convert("RGB").resize((SAMPLE_SIZE, SAMPLE_SIZE))
    counts: Counter = Counter()
    for r, g, b in sample.getdata():
        counts[(quantize_channel(r), quantize_channel(g), quantize_channel(b))] += 1

    return [
        ColorInfo(hex=rgb_to_hex(*rgb), rgb=rgb, hsl=rgb_to_hsl(*rgb), count=count)
        for rgb, count in counts.most_common(max(0, sample_size))
    ]


def get_image_hash(image_bytes: bytes) -> int:
    """Fold the 8x8 grayscale thumbnail into a 32-bit hash"""
    try:
        image = _open_image(image_bytes)
    except ImageDecodeError:
        logger.warning("Image hash falls back to raw bytes")
        return hash_bytes(image_bytes)

    thumb = image.convert("RGB").resize((HASH_SIZE, HASH_SIZE))
    return fold_hash(int((r + g + b) / 3 + 0.5) for r, g, b in thumb.getdata())


# ============================================
# Styles
# ============================================

def _pick(colors: Sequence[str], index: int, fallback: str) -> str:
    return colors[index] if 0 <= index < len(colors) else fallback


def _mosaic_svg(colors: Sequence[str], h: int, size: int) -> str:
    grid = 4
    cell = size / grid
    bg = _pick(colors, 0, "#e5e7eb")

    cells = []
    for y in range(grid):
        for x in range(grid):
            color = colors[(h + x * 3 + y * 7) % len(colors)] if colors else bg
            opacity = 0.6 + ((h >> (x + y)) & 3) / 10
            cells.append(
                f'<rect x="{fmt(x * cell)}" y="{fmt(y * cell)}" width="{fmt(cell)}" height="{fmt(cell)}" '
                f'fill="{color}" opacity="{fmt(opacity)}"/>'
            )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.12)}"/>',
        *cells,
        f'<rect width="{size}" height="{size}" fill="none" stroke="{_pick(colors, 1, "#9ca3af")}" '
        f'stroke-width="2" rx="{fmt(size * 0.12)}"/>',
    ])


def _gradient_svg(colors: Sequence[str], h: int, size: int) -> str:
    gradient_id = f"grad-{h}"
    defs = linear_gradient(
        gradient_id,
        [
            ("0%", _pick(colors, 0, "#6366f1")),
            ("50%", _pick(colors, 1, "#8b5cf6")),
            ("100%", _pick(colors, 2, "#a855f7")),
        ],
        gradient_direction(h),
    )

    cx = cy = size / 2
    pattern = h % 4
    if pattern == 0:
        decoration = f'<circle cx="{fmt(cx)}" cy="{fmt(cy)}" r="{fmt(size * 0.25)}" fill="white" opacity="0.2"/>'
    elif pattern == 1:
        points = (
            f"{fmt(cx)},{fmt(cy - size * 0.2)} "
            f"{fmt(cx - size * 0.17)},{fmt(cy + size * 0.12)} "
            f"{fmt(cx + size * 0.17)},{fmt(cy + size * 0.12)}"
        )
        decoration = f'<polygon points="{points}" fill="white" opacity="0.2"/>'
    elif pattern == 2:
        decoration = (
            f'<rect x="{fmt(cx - size * 0.15)}" y="{fmt(cy - size * 0.15)}" width="{fmt(size * 0.3)}" '
            f'height="{fmt(size * 0.3)}" fill="white" opacity="0.2" transform="rotate(45 {fmt(cx)} {fmt(cy)})"/>'
        )
    else:
        points = " ".join(
            f"{fmt(cx + size * 0.2 * math.cos(math.radians(i * 60 - 30)))},"
            f"{fmt(cy + size * 0.2 * math.sin(math.radians(i * 60 - 30)))}"
            for i in range(6)
        )
        decoration = f'<polygon points="{points}" fill="white" opacity="0.2"/>'

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="url(#{gradient_id})" rx="{fmt(size * 0.15)}"/>',
        decoration,
    ], defs=defs)


def _geometric_svg(colors: Sequence[str], h: int, size: int) -> str:
    cx = cy = size / 2
    bg = _pick(colors, 0, "#f3f4f6")
    primary = _pick(colors, 1, "#6366f1")
    secondary = _pick(colors, 2, "#8b5cf6")

    shape_count = 3 + h % 4
    shapes = []
    for i in range(shape_count):
        shape = (h >> (i * 2)) % 4
        offset = (i - shape_count / 2) * size * 0.1
        color = primary if i % 2 == 0 else secondary
        opacity = fmt(0.4 + i * 0.1)

        if shape == 0:
            shapes.append(
                f'<circle cx="{fmt(cx + offset)}" cy="{fmt(cy + offset * 0.5)}" r="{fmt(size * (0.15 + i * 0.05))}" '
                f'fill="{color}" opacity="{opacity}"/>'
            )
        elif shape == 1:
            angle = (h + i * 45) % 360
            shapes.append(
                f'<rect x="{fmt(cx - size * 0.1)}" y="{fmt(cy - size * 0.1)}" width="{fmt(size * 0.2)}" '
                f'height="{fmt(size * 0.2)}" fill="{color}" opacity="{opacity}" '
                f'transform="rotate({angle} {fmt(cx)} {fmt(cy)})"/>'
            )
        elif shape == 2:
            tri = size * (0.15 + i * 0.03)
            points = (
                f"{fmt(cx)},{fmt(cy - tri)} "
                f"{fmt(cx - tri * 0.87)},{fmt(cy + tri * 0.5)} "
                f"{fmt(cx + tri * 0.87)},{fmt(cy + tri * 0.5)}"
            )
            shapes.append(f'<polygon points="{points}" fill="{color}" opacity="{opacity}"/>')
        else:
            shapes.append(
                f'<ellipse cx="{fmt(cx + offset)}" cy="{fmt(cy)}" rx="{fmt(size * 0.2)}" ry="{fmt(size * 0.1)}" '
                f'fill="{color}" opacity="{opacity}"/>'
            )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.15)}"/>',
        *shapes,
    ])


def _abstract_svg(colors: Sequence[str], h: int, size: int) -> str:
    cx = cy = size / 2
    bg = _pick(colors, 0, "#fef3c7")

    paths = []
    path_count = 2 + h % 3
    for i in range(path_count):
        color = colors[(i + 1) % len(colors)] if colors else "#f59e0b"
        start_x = (h >> i) % (size * 0.3)
        start_y = size * 0.3 + (h >> (i + 4)) % (size * 0.4)
        cp1x = size * 0.3 + (h >> (i + 2)) % (size * 0.4)
        cp1y = (h >> (i + 6)) % (size * 0.5)
        cp2x = size * 0.5 + (h >> (i + 3)) % (size * 0.3)
        cp2y = size - (h >> (i + 5)) % (size * 0.3)
        end_x = size - (h >> (i + 1)) % (size * 0.2)
        end_y = size * 0.5 + (h >> (i + 7)) % (size * 0.3)
        paths.append(
            f'<path d="M {fmt(start_x)} {fmt(start_y)} C {fmt(cp1x)} {fmt(cp1y)}, {fmt(cp2x)} {fmt(cp2y)}, '
            f'{fmt(end_x)} {fmt(end_y)}" stroke="{color}" stroke-width="{3 + i}" fill="none" '
            f'opacity="{fmt(0.5 + i * 0.15)}" stroke-linecap="round"/>'
        )

    accent = colors[-1] if colors else "#fbbf24"
    paths.append(
        f'<circle cx="{fmt(cx + h % 10 - 5)}" cy="{fmt(cy + (h >> 4) % 10 - 5)}" r="{fmt(size * 0.08)}" '
        f'fill="{accent}" opacity="0.7"/>'
    )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.15)}"/>',
        *paths,
    ])


def _pixel_svg(colors: Sequence[str], h: int, size: int) -> str:
    grid = 6
    cell = size / grid
    bg = _pick(colors, 0, "#f5f5f5")
    fallback = _pick(colors, 1, "#6366f1")

    pixels = []
    for y in range(grid):
        for x in range(math.ceil(grid / 2)):
            if not ((h >> (y * 3 + x)) & 1 or (h >> (y + x * 2)) & 1):
                continue
            if len(colors) > 1:
                color = colors[1 + (h >> (y + x)) % (len(colors) - 1)]
            else:
                color = fallback
            for column in sorted({x, grid - 1 - x}):
                pixels.append(
                    f'<rect x="{fmt(column * cell)}" y="{fmt(y * cell)}" width="{fmt(cell * 0.9)}" '
                    f'height="{fmt(cell * 0.9)}" fill="{color}" rx="1"/>'
                )

    return svg_document(size, [
        f'<rect width="{size}" height="{size}" fill="{bg}" rx="{fmt(size * 0.12)}"/>',
        *pixels,
    ])


_RENDERERS = {
    PhotoIconStyle.MOSAIC: _mosaic_svg,
    PhotoIconStyle.GRADIENT: _gradient_svg,
    PhotoIconStyle.GEOMETRIC: _geometric_svg,
    PhotoIconStyle.ABSTRACT: _abstract_svg,
    PhotoIconStyle.PIXEL: _pixel_svg,
}


def _build_icon(colors: List[str], h: int, style: PhotoIconStyle, size: int) -> PhotoIcon:
    svg = _RENDERERS[style](colors, h, size)
    icons_generated_total.labels(source="photo", style=style.value).inc()
    return PhotoIcon(
        id=f"icon-{h}-{style.value}",
        svg=svg,
        data_url=to_data_url(svg),
        colors=colors,
        style=style,
    )


def generate_icon_from_photo(
    image_bytes: bytes,
    style: Optional[PhotoIconStyle] = None,
    size: int = DEFAULT_ICON_SIZE,
) -> PhotoIcon:
    """
    Generate an icon from a photo

    Args:
        image_bytes: Encoded image (PNG, JPEG, ...)
        style: Icon style; picked from the image hash when omitted
        size: Width and height in pixels

    Returns:
        PhotoIcon with SVG markup, data URL and the extracted palette
    """
    colors = [c.hex for c in extract_colors_from_image(image_bytes)]
    h = get_image_hash(image_bytes)
    selected = PhotoIconStyle(style) if style else PHOTO_ICON_STYLES[h % len(PHOTO_ICON_STYLES)]

    logger.debug(f"Photo icon: style={selected.value}, palette={colors}")
    return _build_icon(colors, h, selected, size)


def generate_all_photo_icon_styles(
    image_bytes: bytes,
    size: int = DEFAULT_ICON_SIZE,
) -> Dict[PhotoIconStyle, PhotoIcon]:
    """Preview of every style; the image is analyzed only once"""
    colors = [c.hex for c in extract_colors_from_image(image_bytes)]
    h = get_image_hash(image_bytes)
    return {style: _build_icon(colors, h, style, size) for style in PHOTO_ICON_STYLES}
