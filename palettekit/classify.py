"""Assign semantic roles (vibrant, muted, ...) to quantized colors."""
import logging
from typing import Callable, Optional, Sequence

from .types import Palette, PaletteColor, PaletteUnavailableError

logger = logging.getLogger(__name__)


def is_vibrant_candidate(color: PaletteColor) -> bool:
    s, l = color.hsl.s, color.hsl.l
    return 0.3 < s <= 1 and 0.3 < l < 0.8


def is_dark_vibrant_candidate(color: PaletteColor) -> bool:
    return color.hsl.l < 0.4 and color.hsl.s > 0.2


def is_light_vibrant_candidate(color: PaletteColor) -> bool:
    return color.hsl.l > 0.7 and color.hsl.s > 0.2


def is_muted_candidate(color: PaletteColor) -> bool:
    return color.hsl.s < 0.3 and 0.2 < color.hsl.l < 0.8


def vibrant_score(color: PaletteColor, dominant: PaletteColor) -> float:
    """Saturation weighted by population relative to the dominant color."""
    pop_ratio = color.population / (dominant.population or 1)
    return color.hsl.s * (1 + pop_ratio * 0.5)


def _most_populated(
    colors: Sequence[PaletteColor],
    eligible: Callable[[PaletteColor], bool],
) -> Optional[PaletteColor]:
    best = None
    for color in colors:
        if eligible(color) and (best is None or color.population > best.population):
            best = color
    return best


def select_vibrant(colors: Sequence[PaletteColor]) -> PaletteColor:
    """Pick the vibrant role, falling back when no color qualifies.

    Fallback order: the dominant color if it is flagged vibrant, otherwise
    the second-ranked color, otherwise the dominant color.
    """
    dominant = colors[0]
    best = None
    best_score = -1.0
    for color in colors:
        if not is_vibrant_candidate(color):
            continue
        score = vibrant_score(color, dominant)
        if score > best_score:
            best_score = score
            best = color

    if best is not None:
        return best
    if dominant.is_vibrant:
        return dominant
    if len(colors) > 1:
        return colors[1]
    return dominant


def classify_palette(colors: Sequence[PaletteColor]) -> Palette:
    """Build a labeled Palette from population-ranked colors.

    Args:
        colors: Output of ``quantize_colors``, sorted by population descending

    Returns:
        Palette whose role fields point into ``all_colors``

    Raises:
        PaletteUnavailableError: If ``colors`` is empty
    """
    if not colors:
        raise PaletteUnavailableError("No colors to classify; palette unavailable")

    all_colors = list(colors)
    palette = Palette(
        dominant=all_colors[0],
        vibrant=select_vibrant(all_colors),
        muted=_most_populated(all_colors, is_muted_candidate),
        dark_vibrant=_most_populated(all_colors, is_dark_vibrant_candidate),
        light_vibrant=_most_populated(all_colors, is_light_vibrant_candidate),
        all_colors=all_colors,
    )

    logger.debug(
        f"Classified {len(all_colors)} colors: "
        f"dominant={palette.dominant.hex} vibrant={palette.vibrant.hex}"
    )
    return palette
