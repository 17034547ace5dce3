"""Core types and exceptions for palette extraction."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

# Type aliases
PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray, Sequence[int]]


@dataclass(frozen=True)
class RGB:
    """RGB color, channels nominally in [0, 255] (may be fractional)."""
    r: float
    g: float
    b: float

    def __iter__(self):
        return iter((self.r, self.g, self.b))


@dataclass(frozen=True)
class HSL:
    """HSL color: hue in degrees [0, 360), saturation and lightness in [0, 1]."""
    h: float
    s: float
    l: float

    def __iter__(self):
        return iter((self.h, self.s, self.l))


RGBLike = Union[RGB, Sequence[float]]


@dataclass
class PaletteColor:
    """One quantized color with its population and classification flags."""
    rgb: RGB
    hsl: HSL
    hex: str
    population: int  # pixels assigned to this cluster
    score: float  # ranking value, population at quantization time
    is_vibrant: bool
    is_dark: bool
    is_light: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hex": self.hex,
            "rgb": [int(c) for c in self.rgb],
            "hsl": [round(c, 4) for c in self.hsl],
            "population": self.population,
            "score": self.score,
            "is_vibrant": self.is_vibrant,
            "is_dark": self.is_dark,
            "is_light": self.is_light,
        }


ROLE_NAMES = ("dominant", "vibrant", "dark_vibrant", "light_vibrant", "muted")

ROLE_LABELS = {
    "dominant": "Dominant",
    "vibrant": "Vibrant",
    "dark_vibrant": "Dark Vibrant",
    "light_vibrant": "Light Vibrant",
    "muted": "Muted",
}


@dataclass
class Palette:
    """Labeled palette. Role fields alias entries of ``all_colors``.

    Read-only after it is returned: the role fields and ``all_colors``
    share the same ``PaletteColor`` objects.
    """
    dominant: PaletteColor
    vibrant: Optional[PaletteColor] = None
    muted: Optional[PaletteColor] = None
    dark_vibrant: Optional[PaletteColor] = None
    light_vibrant: Optional[PaletteColor] = None
    all_colors: List[PaletteColor] = field(default_factory=list)

    def resolve(self, role: str) -> PaletteColor:
        """Return the color for ``role``, or ``dominant`` if the role is empty."""
        if role not in ROLE_NAMES:
            raise KeyError(f"Unknown palette role: {role!r}")
        color = getattr(self, role)
        return color if color is not None else self.dominant

    def roles(self) -> List[Tuple[str, Optional[PaletteColor]]]:
        """Return (label, color) pairs in display order."""
        return [(ROLE_LABELS[name], getattr(self, name)) for name in ROLE_NAMES]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in ROLE_NAMES:
            color = getattr(self, name)
            data[name] = color.hex if color is not None else None
        data["all_colors"] = [c.to_dict() for c in self.all_colors]
        return data


@dataclass
class ExtractorConfig:
    """Configuration for the palette extraction pipeline."""

    # Clustering
    n_colors: int = 8
    iterations: int = 5  # fixed budget, no convergence check
    alpha_threshold: int = 128  # pixels below this alpha are ignored

    # Decoding
    target_size: int = 128  # longest side after downsampling

    # Reproducibility
    random_state: Optional[int] = None

    def __post_init__(self):
        """Validate configuration values."""
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if not 0 <= self.alpha_threshold <= 256:
            raise ValueError(
                f"alpha_threshold must be in [0, 256], got {self.alpha_threshold}"
            )
        if self.target_size <= 0:
            raise ValueError(f"target_size must be > 0, got {self.target_size}")


@dataclass
class DecodedImage:
    """RGBA pixels handed from the decoder to the quantizer."""
    pixels: np.ndarray  # flat uint8, interleaved R,G,B,A
    width: int
    height: int
    source: str = "<buffer>"

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass
class ExtractionResult:
    """Result of one pipeline run."""
    palette: Palette
    width: int
    height: int
    duration_ms: float


class PaletteError(Exception):
    """Base exception for palette extraction errors."""
    pass


class DecodeError(PaletteError):
    """Exception raised when an image source cannot be decoded."""
    pass


class PaletteUnavailableError(PaletteError):
    """Raised when no palette can be formed (no opaque pixels were clustered)."""
    pass
