"""palettekit: labeled color palette extraction.

Clusters the pixels of an RGBA bitmap with bounded-iteration k-means and
labels the resulting colors as dominant, vibrant, dark vibrant, light
vibrant and muted.
"""
from palettekit.types import (
    RGB,
    HSL,
    PaletteColor,
    Palette,
    ExtractorConfig,
    ExtractionResult,
    DecodedImage,
    PaletteError,
    DecodeError,
    PaletteUnavailableError,
)
from palettekit.color import rgb_to_hex, rgb_to_hsl, get_luminance
from palettekit.quantize import quantize_colors
from palettekit.classify import classify_palette
from palettekit.ingest import ImageDecoder
from palettekit.pipeline import PaletteExtractor, extract_palette

__version__ = "0.1.0"

__all__ = [
    "RGB",
    "HSL",
    "PaletteColor",
    "Palette",
    "ExtractorConfig",
    "ExtractionResult",
    "DecodedImage",
    "PaletteError",
    "DecodeError",
    "PaletteUnavailableError",
    "rgb_to_hex",
    "rgb_to_hsl",
    "get_luminance",
    "quantize_colors",
    "classify_palette",
    "ImageDecoder",
    "PaletteExtractor",
    "extract_palette",
]
