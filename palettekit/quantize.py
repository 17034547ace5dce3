"""Color quantization using bounded-iteration K-means over an RGBA buffer."""
import logging
from typing import List, Tuple

import numpy as np

from .color import rgb_to_hex, rgb_to_hsl, round_rgb
from .types import PaletteColor, PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_K = 8
DEFAULT_ITERATIONS = 5
ALPHA_THRESHOLD = 128


def as_pixel_array(pixels: PixelBuffer) -> np.ndarray:
    """View a flat RGBA buffer as an (N, 4) uint8 array.

    Args:
        pixels: Interleaved R,G,B,A bytes (bytes-like, sequence or ndarray)

    Returns:
        Array of shape (N, 4)

    Raises:
        ValueError: If the buffer length is not a multiple of 4, or the
            values are not integers in [0, 255]
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = np.asarray(pixels).reshape(-1)
        if flat.size == 0:
            flat = flat.astype(np.uint8)
        elif flat.dtype != np.uint8:
            if flat.dtype.kind not in "iu":
                raise ValueError(f"Pixel values must be integers, got dtype {flat.dtype}")
            if flat.min() < 0 or flat.max() > 255:
                raise ValueError("Pixel values must be in [0, 255]")
            flat = flat.astype(np.uint8)

    if flat.size % 4 != 0:
        raise ValueError(f"Pixel buffer length must be a multiple of 4, got {flat.size}")

    return flat.reshape(-1, 4)


def _resolve_random_source(random_state):
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    return random_state


def sample_centroids(rgba: np.ndarray, k: int, random_state=None) -> np.ndarray:
    """Pick ``k`` initial centroids uniformly at random, with replacement.

    Alpha is ignored, so transparent pixels may be picked too.

    Args:
        rgba: (N, 4) pixel array, N > 0
        k: Number of centroids
        random_state: None, an int seed, a numpy Generator, or any object
            with an ``integers(low, high, size=...)`` method

    Returns:
        (k, 3) float64 array of centroids
    """
    rng = _resolve_random_source(random_state)
    indices = np.asarray(rng.integers(0, len(rgba), size=k), dtype=np.intp)
    return rgba[indices, :3].astype(np.float64)


def assign_pixels(rgb: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Label each pixel with its nearest centroid (squared Euclidean distance).

    Ties resolve to the lowest centroid index. Works one centroid at a time
    so memory stays proportional to the number of pixels.
    """
    labels = np.zeros(len(rgb), dtype=np.intp)
    best = None

    for index, centroid in enumerate(centroids):
        distances = np.zeros(len(rgb), dtype=np.float64)
        for channel in range(3):
            diff = rgb[:, channel].astype(np.float64)
            diff -= centroid[channel]
            diff *= diff
            distances += diff

        if best is None:
            best = distances
            continue

        # strict < keeps the earlier centroid on ties
        closer = distances < best
        labels[closer] = index
        best[closer] = distances[closer]

    return labels


def kmeans(
    rgb: np.ndarray,
    centroids: np.ndarray,
    iterations: int = DEFAULT_ITERATIONS,
) -> Tuple[np.ndarray, np.ndarray]:
    """Refine centroids for a fixed number of iterations.

    No early stopping. A cluster that receives no pixels keeps its previous
    centroid and is never reseeded.

    Args:
        rgb: (N, 3) opaque pixels (uint8 or float)
        centroids: (k, 3) float64 initial centroids
        iterations: Exact number of assignment/update rounds

    Returns:
        Tuple of (centroids, counts) after the final iteration, where counts
        holds the number of pixels assigned to each cluster
    """
    k = len(centroids)
    centroids = centroids.copy()
    counts = np.zeros(k, dtype=np.int64)

    for iteration in range(iterations):
        labels = assign_pixels(rgb, centroids)

        # Per-call accumulators, reset every iteration
        counts = np.bincount(labels, minlength=k)
        sums = np.stack(
            [np.bincount(labels, weights=rgb[:, c], minlength=k) for c in range(3)],
            axis=1,
        )

        filled = counts > 0
        centroids[filled] = sums[filled] / counts[filled][:, None]

        logger.debug(
            f"K-means iteration {iteration + 1}/{iterations}: "
            f"{int(filled.sum())}/{k} clusters populated"
        )

    return centroids, counts


def make_palette_color(centroid, population: int) -> PaletteColor:
    """Materialize one cluster into a PaletteColor with classification flags."""
    rgb = round_rgb(centroid)
    hsl = rgb_to_hsl(rgb)
    return PaletteColor(
        rgb=rgb,
        hsl=hsl,
        hex=rgb_to_hex(rgb),
        population=population,
        score=population,
        is_vibrant=hsl.s > 0.5 and 0.3 < hsl.l < 0.8,
        is_dark=hsl.l < 0.4,
        is_light=hsl.l > 0.7,
    )


def quantize_colors(
    pixels: PixelBuffer,
    k: int = DEFAULT_K,
    iterations: int = DEFAULT_ITERATIONS,
    random_state=None,
    alpha_threshold: int = ALPHA_THRESHOLD,
) -> List[PaletteColor]:
    """Quantize an RGBA buffer into at most ``k`` ranked colors.

    Centroids are seeded by sampling ``k`` pixels uniformly at random and
    refined for exactly ``iterations`` rounds. Pixels with alpha below
    ``alpha_threshold`` take no part in clustering. Empty clusters are
    dropped from the result.

    Args:
        pixels: Interleaved R,G,B,A bytes
        k: Number of clusters (<= 0 yields an empty result)
        iterations: Fixed number of refinement rounds
        random_state: Seed, numpy Generator or injectable index source
        alpha_threshold: Minimum alpha for a pixel to be clustered

    Returns:
        Colors sorted by population, descending; equal populations keep
        cluster index order

    Raises:
        ValueError: If the buffer length is not a multiple of 4
    """
    rgba = as_pixel_array(pixels)

    if k <= 0 or len(rgba) == 0:
        logger.debug(f"Nothing to quantize (k={k}, pixels={len(rgba)})")
        return []

    centroids = sample_centroids(rgba, k, random_state)

    opaque = rgba[rgba[:, 3] >= alpha_threshold, :3]
    if len(opaque) == 0:
        logger.warning("No opaque pixels to quantize; palette is empty")
        return []

    centroids, counts = kmeans(opaque, centroids, iterations)

    colors = [
        make_palette_color(centroids[i], int(counts[i]))
        for i in range(k)
        if counts[i] > 0
    ]

    stranded = k - len(colors)
    if stranded:
        logger.debug(f"Dropped {stranded} empty cluster(s)")

    # sorted() is stable, so equal populations keep cluster order
    return sorted(colors, key=lambda c: c.population, reverse=True)
