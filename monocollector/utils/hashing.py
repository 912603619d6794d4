"""
Deterministic hashing and color helpers

Shared by the rarity classifier and both icon generators: the same
string always folds to the same non-negative 32-bit integer, and colors are
quantized the same way everywhere.
"""

from typing import Iterable


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def fold_hash(values: Iterable[int]) -> int:
    """Fold integers with hash = hash * 31 + v in signed 32-bit arithmetic, then abs()"""
    h = 0
    for v in values:
        h = _to_int32((h << 5) - h + v)
    return abs(h)


def hash_string(text: str) -> int:
    """
    Hash a string over its UTF-16 code units

    Non-BMP characters (most emoji) contribute their surrogate pair, so the
    value matches hashes computed by browser clients for the same name.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    units = (int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2))
    return fold_hash(units)


def hash_bytes(data: bytes) -> int:
    """Hash raw bytes (used when an image cannot be decoded)"""
    return fold_hash(data)


def quantize_channel(value: int, step: int = 32) -> int:
    """Round a 0-255 channel to the nearest multiple of step (half rounds up)"""
    return int(value / step + 0.5) * step


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#" + "".join(f"{min(255, max(0, c)):02x}" for c in (r, g, b))


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[int, int, int]:
    """RGB (0-255) to HSL (degrees, percent, percent), rounded"""
    rf, gf, bf = r / 255, g / 255, b / 255
    mx, mn = max(rf, gf, bf), min(rf, gf, bf)
    h = s = 0.0
    lightness = (mx + mn) / 2

    if mx != mn:
        d = mx - mn
        s = d / (2 - mx - mn) if lightness > 0.5 else d / (mx + mn)
        if mx == rf:
            h = ((gf - bf) / d + (6 if gf < bf else 0)) / 6
        elif mx == gf:
            h = ((bf - rf) / d + 2) / 6
        else:
            h = ((rf - gf) / d + 4) / 6

    return int(h * 360 + 0.5), int(s * 100 + 0.5), int(lightness * 100 + 0.5)


def hsl_to_hex(h: float, s: float, lightness: float) -> str:
    """HSL (degrees, percent, percent) to #rrggbb"""
    s /= 100
    lightness /= 100
    a = s * min(lightness, 1 - lightness)

    def channel(n: int) -> str:
        k = (n + h / 30) % 12
        color = lightness - a * max(min(k - 3, 9 - k, 1), -1)
        return f"{int(255 * color + 0.5):02x}"

    return f"#{channel(0)}{channel(8)}{channel(4)}"
