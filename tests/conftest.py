"""Pytest configuration and fixtures."""

import numpy as np
import pytest
from PIL import Image


class FixedIndices:
    """Random source that hands out predetermined centroid indices."""

    def __init__(self, indices):
        self.indices = list(indices)

    def integers(self, low, high, size=None):
        assert len(self.indices) == size
        assert all(low <= i < high for i in self.indices)
        return np.array(self.indices)


def build_pixels(runs):
    """Build a flat RGBA buffer from (rgba, count) runs."""
    data = bytearray()
    for rgba, count in runs:
        data.extend(bytes(rgba) * count)
    return bytes(data)


@pytest.fixture
def make_pixels():
    """Factory for flat RGBA buffers."""
    return build_pixels


@pytest.fixture
def fixed_indices():
    """Factory for deterministic centroid index sources."""
    return FixedIndices


@pytest.fixture
def solid_red():
    """100 opaque red pixels."""
    return build_pixels([((255, 0, 0, 255), 100)])


@pytest.fixture
def transparent_pixels():
    """100 fully transparent pixels."""
    return build_pixels([((12, 200, 40, 0), 100)])


@pytest.fixture
def blue_and_white():
    """70% saturated blue, 30% near-white (10 pixels)."""
    return build_pixels([((20, 60, 230, 255), 7), ((245, 240, 250, 255), 3)])


@pytest.fixture
def image_file(tmp_path):
    """Factory that writes a solid-color PNG and returns its path."""

    def _make(size=(64, 64), color=(255, 0, 0, 255), name="solid.png"):
        path = tmp_path / name
        Image.new("RGBA", size, color).save(path)
        return path

    return _make
