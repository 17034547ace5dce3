"""Color space conversions: RGB to HSL, hex strings and relative luminance."""
import math

from .types import HSL, RGB, RGBLike

# sRGB linearization cutoff on normalized input
SRGB_LINEAR_CUTOFF = 0.03928

LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _channels(rgb: RGBLike):
    r, g, b = rgb
    return float(r), float(g), float(b)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def round_rgb(rgb: RGBLike) -> RGB:
    """Round each channel to the nearest integer."""
    r, g, b = _channels(rgb)
    return RGB(round_half_up(r), round_half_up(g), round_half_up(b))


def rgb_to_hex(rgb: RGBLike) -> str:
    """Convert an RGB color to a lowercase ``#rrggbb`` string.

    Channels are rounded to the nearest integer and clamped to [0, 255]
    so the result always has exactly two hex digits per channel.

    Args:
        rgb: RGB color or (r, g, b) sequence

    Returns:
        Hex string such as ``#ff0000``
    """
    parts = []
    for value in _channels(rgb):
        channel = min(255, max(0, round_half_up(value)))
        parts.append(f"{channel:02x}")
    return "#" + "".join(parts)


def rgb_to_hsl(rgb: RGBLike) -> HSL:
    """Convert an RGB color (0-255 channels) to HSL.

    Hue is in degrees [0, 360), saturation and lightness in [0, 1].
    Achromatic colors (max == min) get hue 0 and saturation 0. When two
    channels share the maximum, red is checked before green, green before
    blue.

    Args:
        rgb: RGB color or (r, g, b) sequence

    Returns:
        HSL color
    """
    r, g, b = (c / 255.0 for c in _channels(rgb))

    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2
    hue = 0.0
    saturation = 0.0

    if high != low:
        delta = high - low
        if lightness > 0.5:
            saturation = delta / (2 - high - low)
        else:
            saturation = delta / (high + low)

        if high == r:
            hue = (g - b) / delta + (6 if g < b else 0)
        elif high == g:
            hue = (b - r) / delta + 2
        else:
            hue = (r - g) / delta + 4
        hue /= 6

    return HSL(hue * 360, saturation, lightness)


def _linearize(channel: float) -> float:
    v = channel / 255.0
    if v <= SRGB_LINEAR_CUTOFF:
        return v / 12.92
    return ((v + 0.055) / 1.055) ** 2.4


def get_luminance(rgb: RGBLike) -> float:
    """Relative luminance of an sRGB color, in [0, 1]."""
    r, g, b = (_linearize(c) for c in _channels(rgb))
    wr, wg, wb = LUMINANCE_WEIGHTS
    # weights sum to 1.0 only up to float error
    return min(1.0, max(0.0, r * wr + g * wg + b * wb))


def text_color_for(hsl: HSL) -> tuple:
    """Pick a readable label color for text drawn on top of ``hsl``."""
    # dark text on light swatches
    if hsl.l > 0.5:
        return (24, 24, 27)
    return (255, 255, 255)
