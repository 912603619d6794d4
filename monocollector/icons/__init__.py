"""SVG icon generation from item names and photos"""

from monocollector.icons.name_icon import GeneratedIcon, IconStyle, generate_icon, generate_all_styles
from monocollector.icons.photo_icon import (
    PhotoIcon,
    PhotoIconStyle,
    generate_icon_from_photo,
    generate_all_photo_icon_styles,
)

__all__ = [
    "GeneratedIcon",
    "IconStyle",
    "generate_icon",
    "generate_all_styles",
    "PhotoIcon",
    "PhotoIconStyle",
    "generate_icon_from_photo",
    "generate_all_photo_icon_styles",
]
