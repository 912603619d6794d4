"""SVG helpers shared by the icon generators"""

import base64
from xml.sax.saxutils import escape, quoteattr

SVG_NS = "http://www.w3.org/2000/svg"


def fmt(value: float) -> str:
    """Format a coordinate: integers without a decimal point, floats to 2 places"""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def text_element(x: float, y: float, content: str, **attrs: str) -> str:
    """Centered <text> element; content is XML-escaped"""
    rendered = " ".join(f"{name.replace('_', '-')}={quoteattr(str(v))}" for name, v in attrs.items())
    return (
        f'<text x="{fmt(x)}" y="{fmt(y)}" {rendered} text-anchor="middle" '
        f'dominant-baseline="central">{escape(content)}</text>'
    )


def svg_document(size: int, body: list[str], defs: str = "") -> str:
    """Wrap elements in a square <svg> with a matching viewBox"""
    parts = [f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" viewBox="0 0 {size} {size}">']
    if defs:
        parts.append(f"<defs>{defs}</defs>")
    parts.extend(body)
    parts.append("</svg>")
    return "\n  ".join(parts[:-1]) + "\n" + parts[-1]


def linear_gradient(gradient_id: str, stops: list[tuple[str, str]], direction: tuple[str, str, str, str]) -> str:
    """<linearGradient> with (offset, color) stops"""
    x1, y1, x2, y2 = direction
    rendered = "".join(f'<stop offset="{offset}" style="stop-color:{color}"/>' for offset, color in stops)
    return (
        f'<linearGradient id="{gradient_id}" x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}">'
        f"{rendered}</linearGradient>"
    )


def gradient_direction(hash_value: int) -> tuple[str, str, str, str]:
    """One of four diagonal directions picked by the hash"""
    angle = (hash_value % 4) * 90
    x1 = "100%" if angle in (90, 180) else "0%"
    y1 = "100%" if angle in (180, 270) else "0%"
    x2 = "100%" if angle in (270, 0) else "0%"
    y2 = "100%" if angle in (0, 90) else "0%"
    return x1, y1, x2, y2


def to_data_url(svg: str) -> str:
    """Base64 data URL for an SVG string"""
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
