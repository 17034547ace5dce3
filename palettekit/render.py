"""Swatch sheet rendering for extracted palettes."""
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .color import text_color_for
from .types import Palette, PaletteColor, ROLE_LABELS, ROLE_NAMES

BACKGROUND = (9, 9, 11)
PADDING = 12
CARD_HEIGHT = 120
STRIP_HEIGHT = 48


def strip_segments(colors: List[PaletteColor], width: int) -> List[Tuple[int, int]]:
    """Split ``width`` into (x0, x1) spans proportional to population.

    Spans are contiguous and the last one ends exactly at ``width``.
    """
    total = sum(c.population for c in colors)
    if total == 0:
        return []

    segments = []
    running = 0
    x0 = 0
    for color in colors:
        running += color.population
        x1 = round(width * running / total)
        segments.append((x0, x1))
        x0 = x1
    return segments


def min_render_width(n_cards: int = len(ROLE_NAMES)) -> int:
    """Smallest width that leaves every card at least one pixel wide."""
    return PADDING * (n_cards + 1) + n_cards


def _draw_label(draw: ImageDraw.ImageDraw, xy, lines, fill, font):
    x, y = xy
    for line in lines:
        draw.text((x, y), line, fill=fill, font=font)
        y += 14


def render_swatches(
    palette: Palette,
    path: Optional[Union[str, Path]] = None,
    width: int = 640,
) -> Image.Image:
    """Render role cards above a population-proportional spectrum strip.

    Roles without a candidate are drawn with the dominant color.

    Args:
        palette: Palette to render
        path: Optional PNG output path
        width: Image width in pixels

    Returns:
        Rendered PIL image

    Raises:
        ValueError: If width is too small to fit one pixel per card
    """
    n_cards = len(ROLE_NAMES)
    min_width = min_render_width(n_cards)
    if width < min_width:
        raise ValueError(f"width must be >= {min_width}, got {width}")

    height = CARD_HEIGHT + STRIP_HEIGHT + PADDING * 3
    img = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()

    card_width = (width - PADDING * (n_cards + 1)) // n_cards
    for i, role in enumerate(ROLE_NAMES):
        color = palette.resolve(role)
        x0 = PADDING + i * (card_width + PADDING)
        box = (x0, PADDING, x0 + card_width, PADDING + CARD_HEIGHT)
        draw.rectangle(box, fill=tuple(int(c) for c in color.rgb))
        _draw_label(
            draw,
            (x0 + 6, PADDING + CARD_HEIGHT - 34),
            [ROLE_LABELS[role], color.hex],
            text_color_for(color.hsl),
            font,
        )

    strip_top = PADDING * 2 + CARD_HEIGHT
    strip_width = width - PADDING * 2
    for color, (x0, x1) in zip(palette.all_colors, strip_segments(palette.all_colors, strip_width)):
        if x1 <= x0:
            continue
        draw.rectangle(
            (PADDING + x0, strip_top, PADDING + x1 - 1, strip_top + STRIP_HEIGHT),
            fill=tuple(int(c) for c in color.rgb),
        )

    if path is not None:
        img.save(path, format="PNG")

    return img
