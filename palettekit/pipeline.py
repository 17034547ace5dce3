"""Palette extraction pipeline: decode, quantize, classify."""
import logging
import time
from typing import Optional

from .classify import classify_palette
from .ingest import ImageDecoder, ImageSource
from .quantize import quantize_colors
from .types import ExtractionResult, ExtractorConfig, Palette, PixelBuffer

logger = logging.getLogger(__name__)


class PaletteExtractor:
    """Main palette extraction pipeline."""

    def __init__(self, config: Optional[ExtractorConfig] = None):
        """Initialize pipeline with configuration.

        Args:
            config: Extractor configuration. Uses defaults if None.
        """
        self.config = config or ExtractorConfig()
        self.decoder = ImageDecoder(self.config.target_size)

    def process(self, source: ImageSource) -> ExtractionResult:
        """Extract a palette from an encoded image.

        Args:
            source: Image path, encoded bytes or binary file object

        Returns:
            ExtractionResult with the palette and timing

        Raises:
            FileNotFoundError: If input file doesn't exist
            DecodeError: If the image cannot be decoded
            PaletteUnavailableError: If the image has no opaque pixels
        """
        start = time.perf_counter()

        decoded = self.decoder.decode(source)
        palette = self.process_pixels(decoded.pixels)

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            f"Extracted {len(palette.all_colors)} colors from {decoded.source} "
            f"in {duration_ms:.1f} ms"
        )
        return ExtractionResult(
            palette=palette,
            width=decoded.width,
            height=decoded.height,
            duration_ms=duration_ms,
        )

    def process_pixels(self, pixels: PixelBuffer) -> Palette:
        """Quantize and classify an already decoded RGBA buffer."""
        colors = quantize_colors(
            pixels,
            k=self.config.n_colors,
            iterations=self.config.iterations,
            random_state=self.config.random_state,
            alpha_threshold=self.config.alpha_threshold,
        )
        return classify_palette(colors)


def extract_palette(source: ImageSource, **config_overrides) -> Palette:
    """Convenience function to extract a palette with a one-off config.

    Args:
        source: Image path, encoded bytes or binary file object
        **config_overrides: ExtractorConfig fields to override

    Returns:
        Palette
    """
    config = ExtractorConfig(**config_overrides)
    return PaletteExtractor(config).process(source).palette
