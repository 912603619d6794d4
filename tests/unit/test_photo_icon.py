"""Unit tests for photo-based icons (monocollector/icons/photo_icon.py)"""
import base64
import xml.etree.ElementTree as ET

import pytest

from monocollector import config
from monocollector.exceptions import ValidationError
from monocollector.icons.photo_icon import (
    PHOTO_ICON_STYLES,
    PhotoIconStyle,
    decode_data_url,
    extract_colors_from_image,
    generate_all_photo_icon_styles,
    generate_icon_from_photo,
    get_image_hash,
)
from monocollector.utils.hashing import hash_bytes


# ============================================================================
# Color Extraction Tests
# ============================================================================

def test_solid_image_has_one_color(red_png):
    """A solid red image quantizes to a single red bucket"""
    colors = extract_colors_from_image(red_png)

    assert len(colors) == 1
    assert colors[0].hex == "#ff0000"
    assert colors[0].count == 50 * 50


def test_colors_sorted_by_frequency(mostly_green_png):
    """Most frequent color comes first"""
    colors = extract_colors_from_image(mostly_green_png, sample_size=5)

    assert colors[0].hex == "#00ff00"
    assert "#0000ff" in [c.hex for c in colors]
    assert len(colors) <= 5
    counts = [c.count for c in colors]
    assert counts == sorted(counts, reverse=True)


def test_sample_size_limits_palette(mostly_green_png):
    """sample_size caps the number of colors"""
    assert len(extract_colors_from_image(mostly_green_png, sample_size=1)) == 1


def test_undecodable_bytes_give_empty_palette():
    """Garbage input returns no colors instead of raising"""
    assert extract_colors_from_image(b"definitely not an image") == []


def test_decompression_bomb_gives_empty_palette(make_forged_png):
    """A header claiming 20000x20000 pixels is refused, not raised"""
    bomb = make_forged_png(20000, 20000)

    assert extract_colors_from_image(bomb) == []
    assert get_image_hash(bomb) == hash_bytes(bomb)

    icon = generate_icon_from_photo(bomb, style=PhotoIconStyle.GRADIENT)
    assert icon.colors == []
    ET.fromstring(icon.svg)


def test_images_over_pixel_cap_are_not_decoded(make_forged_png):
    """Headers over MAX_IMAGE_PIXELS are rejected before decoding"""
    assert extract_colors_from_image(make_forged_png(9000, 9000)) == []


def test_pixel_cap_is_configurable(monkeypatch, red_png):
    """Lowering the cap rejects even small photos"""
    monkeypatch.setattr(config, "MAX_IMAGE_PIXELS", 100)
    assert extract_colors_from_image(red_png) == []


# ============================================================================
# Image Hash Tests
# ============================================================================

def test_image_hash_is_stable(red_png):
    """Same image, same hash"""
    assert get_image_hash(red_png) == get_image_hash(red_png)


def test_image_hash_differs_by_content(make_png):
    """Different brightness gives different hashes"""
    assert get_image_hash(make_png((10, 10, 10))) != get_image_hash(make_png((200, 200, 200)))


def test_image_hash_falls_back_to_bytes():
    """Undecodable input hashes its raw bytes"""
    data = b"\x00\x01broken"
    assert get_image_hash(data) == hash_bytes(data)


# ============================================================================
# Icon Tests
# ============================================================================

@pytest.mark.parametrize("style", list(PhotoIconStyle))
def test_every_style_is_well_formed(style, mostly_green_png):
    """All styles produce parseable SVG with a square viewBox"""
    icon = generate_icon_from_photo(mostly_green_png, style=style, size=96)
    root = ET.fromstring(icon.svg)

    assert root.get("viewBox") == "0 0 96 96"
    assert icon.style == style
    assert icon.colors[0] == "#00ff00"


@pytest.mark.parametrize("style", list(PhotoIconStyle))
def test_fallback_colors_for_undecodable_image(style):
    """Broken photos still produce an icon with fallback colors"""
    icon = generate_icon_from_photo(b"broken", style=style)

    assert icon.colors == []
    ET.fromstring(icon.svg)


@pytest.mark.parametrize("style", list(PhotoIconStyle))
def test_single_color_palette(style, red_png):
    """One-color palettes fill the missing slots with fallbacks"""
    icon = generate_icon_from_photo(red_png, style=style)
    assert icon.colors == ["#ff0000"]
    ET.fromstring(icon.svg)


def test_default_style_from_hash(red_png):
    """Without a style the image hash picks one"""
    icon = generate_icon_from_photo(red_png)
    assert icon.style == PHOTO_ICON_STYLES[get_image_hash(red_png) % 5]


def test_generate_all_photo_icon_styles(red_png):
    """One icon per style sharing the palette"""
    icons = generate_all_photo_icon_styles(red_png)
    assert set(icons) == set(PhotoIconStyle)
    assert {icon.id for icon in icons.values()} == {f"icon-{get_image_hash(red_png)}-{s.value}" for s in PhotoIconStyle}


# ============================================================================
# Data URL Tests
# ============================================================================

def test_decode_data_url(red_png):
    """Base64 payload is returned as bytes"""
    url = "data:image/png;base64," + base64.b64encode(red_png).decode("ascii")
    assert decode_data_url(url) == red_png


@pytest.mark.parametrize("url", ["hello", "data:text/plain;base64,aGk=", "data:image/png;base64,***"])
def test_decode_data_url_rejects_bad_input(url):
    """Non-image or malformed URLs raise ValidationError"""
    with pytest.raises(ValidationError):
        decode_data_url(url)
