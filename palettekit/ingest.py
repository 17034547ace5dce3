"""Image decoding and downsampling into a flat RGBA pixel buffer."""
import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image
from PIL import ImageOps

from .types import DecodedImage, DecodeError

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, bytearray, BinaryIO]

DEFAULT_TARGET_SIZE = 128


def fit_size(width: int, height: int, target_size: int):
    """
    Compute the downsampled size so the longer side equals ``target_size``.

    Images that already fit are returned unchanged (never upscaled).

    Args:
        width: Source width in pixels
        height: Source height in pixels
        target_size: Maximum length of the longer side

    Returns:
        (width, height) tuple, each at least 1
    """
    if max(width, height) <= target_size:
        return width, height

    scale = min(target_size / width, target_size / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


class ImageDecoder:
    """Decodes encoded images into RGBA buffers ready for quantization.

    The decoder is usable as soon as it is constructed; there is no separate
    loading step to wait on.
    """

    def __init__(self, target_size: int = DEFAULT_TARGET_SIZE):
        if target_size <= 0:
            raise ValueError(f"target_size must be > 0, got {target_size}")
        self.target_size = target_size

    def decode(self, source: ImageSource) -> DecodedImage:
        """
        Decode an image source.

        Args:
            source: File path, encoded image bytes, or binary file object

        Returns:
            DecodedImage with unpremultiplied RGBA pixels

        Raises:
            FileNotFoundError: If a path source doesn't exist
            DecodeError: If the source cannot be decoded
        """
        name, stream = self._open_source(source)

        try:
            with Image.open(stream) as img:
                # Apply EXIF orientation transformation to handle rotation
                img = ImageOps.exif_transpose(img)
                img = img.convert("RGBA")

                size = fit_size(img.width, img.height, self.target_size)
                if size != img.size:
                    logger.debug(f"Resizing {name} from {img.size} to {size}")
                    img = img.resize(size, Image.BILINEAR)

                pixels = np.asarray(img, dtype=np.uint8).reshape(-1).copy()
                width, height = img.size

        except (IOError, OSError) as e:
            raise DecodeError(f"Failed to decode image {name}: {e}") from e

        logger.info(f"Decoded {name}: {width}x{height} RGBA")
        return DecodedImage(pixels=pixels, width=width, height=height, source=name)

    def _open_source(self, source: ImageSource):
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Image file not found: {path}")
            if not path.is_file():
                raise DecodeError(f"Path is not a file: {path}")
            return str(path), path

        if isinstance(source, (bytes, bytearray)):
            return "<bytes>", io.BytesIO(source)

        if hasattr(source, "read"):
            return getattr(source, "name", "<stream>"), source

        raise TypeError(f"Unsupported image source type: {type(source).__name__}")
