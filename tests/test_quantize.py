"""Tests for color quantization module."""
import re
import tracemalloc

import numpy as np
import pytest

from palettekit.quantize import (
    as_pixel_array,
    assign_pixels,
    kmeans,
    quantize_colors,
    sample_centroids,
)
from palettekit.types import RGB

RED = (255, 0, 0, 255)
BLUE = (0, 0, 200, 255)
DARK_RED = (200, 0, 0, 255)


class TestPixelArray:
    """Test cases for as_pixel_array."""

    def test_bytes_buffer(self, make_pixels):
        rgba = as_pixel_array(make_pixels([(RED, 3)]))
        assert rgba.shape == (3, 4)
        assert rgba.dtype == np.uint8

    def test_image_shaped_array(self):
        image = np.zeros((4, 5, 4), dtype=np.uint8)
        assert as_pixel_array(image).shape == (20, 4)

    def test_list_of_ints(self):
        assert as_pixel_array([1, 2, 3, 4, 5, 6, 7, 8]).shape == (2, 4)

    def test_length_must_be_multiple_of_four(self):
        with pytest.raises(ValueError, match="multiple of 4"):
            as_pixel_array(b"\x00" * 7)

    def test_float_arrays_are_rejected(self):
        image = np.full((2, 2, 4), 0.5, dtype=np.float32)
        with pytest.raises(ValueError, match="integers"):
            as_pixel_array(image)

    def test_out_of_range_values_are_rejected(self):
        with pytest.raises(ValueError, match="0, 255"):
            as_pixel_array(np.array([300, 0, 0, 255]))
        with pytest.raises(ValueError, match="0, 255"):
            as_pixel_array([-1, 0, 0, 255])

    def test_wide_int_array_in_range(self):
        rgba = as_pixel_array(np.array([[255, 128, 0, 255]], dtype=np.int64))
        assert rgba.dtype == np.uint8
        np.testing.assert_array_equal(rgba, [[255, 128, 0, 255]])

    def test_empty_list(self):
        assert as_pixel_array([]).shape == (0, 4)


class TestKMeansSteps:
    """Test cases for the assignment and update steps."""

    def test_ties_go_to_lowest_index(self):
        rgb = np.array([[10.0, 10.0, 10.0]])
        centroids = np.array([[0.0, 0.0, 0.0], [20.0, 20.0, 20.0]])
        assert assign_pixels(rgb, centroids)[0] == 0

    def test_duplicate_centroids(self):
        rgb = np.array([[5.0, 5.0, 5.0], [100.0, 0.0, 0.0]])
        centroids = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
        np.testing.assert_array_equal(assign_pixels(rgb, centroids), [0, 0])

    def test_empty_cluster_keeps_centroid(self):
        rgb = np.array([[10.0, 10.0, 10.0], [20.0, 20.0, 20.0]])
        centroids = np.array([[0.0, 0.0, 0.0], [250.0, 250.0, 250.0]])

        new_centroids, counts = kmeans(rgb, centroids, iterations=3)

        np.testing.assert_array_equal(counts, [2, 0])
        np.testing.assert_allclose(new_centroids[0], [15.0, 15.0, 15.0])
        np.testing.assert_array_equal(new_centroids[1], [250.0, 250.0, 250.0])

    def test_input_centroids_not_mutated(self):
        rgb = np.array([[10.0, 10.0, 10.0]])
        centroids = np.array([[0.0, 0.0, 0.0]])
        kmeans(rgb, centroids, iterations=1)
        np.testing.assert_array_equal(centroids, [[0.0, 0.0, 0.0]])

    def test_sample_centroids_uses_injected_indices(self, make_pixels, fixed_indices):
        rgba = as_pixel_array(make_pixels([(RED, 2), (BLUE, 2)]))
        centroids = sample_centroids(rgba, 3, fixed_indices([3, 0, 3]))
        np.testing.assert_array_equal(
            centroids, [[0, 0, 200], [255, 0, 0], [0, 0, 200]]
        )


class TestQuantizeColors:
    """Test cases for quantize_colors function."""

    def test_solid_red(self, solid_red):
        colors = quantize_colors(solid_red, 8, random_state=0)

        assert len(colors) == 1
        red = colors[0]
        assert red.population == 100
        assert red.score == 100
        assert red.hex == "#ff0000"
        assert red.rgb == RGB(255, 0, 0)
        assert red.hsl.h == pytest.approx(0)
        assert red.hsl.s == pytest.approx(1)
        assert red.hsl.l == pytest.approx(0.5)
        assert red.is_vibrant
        assert not red.is_dark
        assert not red.is_light

    def test_fully_transparent(self, transparent_pixels):
        assert quantize_colors(transparent_pixels, 8, random_state=0) == []

    def test_empty_buffer(self):
        assert quantize_colors(b"", 8) == []

    def test_non_positive_k(self, solid_red):
        assert quantize_colors(solid_red, 0) == []
        assert quantize_colors(solid_red, -3) == []

    def test_transparent_pixels_are_ignored(self, make_pixels, fixed_indices):
        pixels = make_pixels([(RED, 10), ((0, 255, 0, 0), 10)])

        # second centroid seeded from a transparent green pixel
        colors = quantize_colors(pixels, 2, random_state=fixed_indices([0, 15]))

        assert len(colors) == 1
        assert colors[0].hex == "#ff0000"
        assert colors[0].population == 10

    def test_alpha_threshold_boundary(self, make_pixels):
        pixels = make_pixels([((255, 0, 0, 128), 4), ((0, 0, 255, 127), 4)])
        colors = quantize_colors(pixels, 1, random_state=1)

        assert len(colors) == 1
        assert colors[0].population == 4
        assert colors[0].hex == "#ff0000"

    def test_two_colors_separate(self, blue_and_white, fixed_indices):
        colors = quantize_colors(blue_and_white, 2, random_state=fixed_indices([0, 9]))

        assert [c.hex for c in colors] == ["#143ce6", "#f5f0fa"]
        assert [c.population for c in colors] == [7, 3]

    def test_stranded_duplicate_cluster_is_dropped(self, make_pixels, fixed_indices):
        pixels = make_pixels([(DARK_RED, 5), (BLUE, 5)])

        colors = quantize_colors(pixels, 3, random_state=fixed_indices([0, 0, 5]))

        assert len(colors) == 2
        assert sum(c.population for c in colors) == 10

    def test_equal_populations_keep_cluster_order(self, make_pixels, fixed_indices):
        pixels = make_pixels([(DARK_RED, 5), (BLUE, 5)])

        forward = quantize_colors(pixels, 2, random_state=fixed_indices([0, 5]))
        backward = quantize_colors(pixels, 2, random_state=fixed_indices([5, 0]))

        assert [c.hex for c in forward] == ["#c80000", "#0000c8"]
        assert [c.hex for c in backward] == ["#0000c8", "#c80000"]

    def test_centroid_mean_rounds_half_up(self, make_pixels):
        pixels = make_pixels([((0, 0, 0, 255), 1), ((1, 1, 1, 255), 1)])
        colors = quantize_colors(pixels, 1, random_state=0)

        assert colors[0].rgb == RGB(1, 1, 1)
        assert colors[0].hex == "#010101"

    def test_zero_iterations_yield_nothing(self, solid_red):
        assert quantize_colors(solid_red, 4, iterations=0, random_state=0) == []

    def test_reproducible_with_seed(self):
        pixels = np.random.default_rng(7).integers(0, 256, (400, 4), dtype=np.uint8)

        first = quantize_colors(pixels, 6, random_state=42)
        second = quantize_colors(pixels, 6, random_state=42)

        assert [(c.hex, c.population) for c in first] == [
            (c.hex, c.population) for c in second
        ]

    def test_accepts_numpy_generator(self, solid_red):
        colors = quantize_colors(solid_red, 3, random_state=np.random.default_rng(5))
        assert [c.population for c in colors] == [100]

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    @pytest.mark.parametrize("k", [1, 3, 8])
    def test_output_invariants(self, seed, k):
        pixels = np.random.default_rng(seed).integers(0, 256, (300, 4), dtype=np.uint8)
        opaque = int(np.sum(pixels[:, 3] >= 128))

        colors = quantize_colors(pixels, k, random_state=seed)

        assert 1 <= len(colors) <= k
        assert all(c.population >= 1 for c in colors)
        assert sum(c.population for c in colors) == opaque
        populations = [c.population for c in colors]
        assert populations == sorted(populations, reverse=True)
        for c in colors:
            assert re.match(r"^#[0-9a-f]{6}$", c.hex)
            assert c.score == c.population

    def test_single_color_round_trip(self, make_pixels):
        pixels = make_pixels([((18, 52, 86, 255), 37)])
        colors = quantize_colors(pixels, 5, random_state=3)

        assert len(colors) == 1
        assert colors[0].population == 37
        assert colors[0].hex == "#123456"


class TestMemoryUse:
    """Test cases for memory use on full-size buffers."""

    def test_peak_memory_scales_with_pixels(self):
        pixels = np.zeros((1080 * 1920, 4), dtype=np.uint8)
        pixels[:, 0] = np.arange(len(pixels)) % 256
        pixels[:, 3] = 255

        tracemalloc.start()
        try:
            colors = quantize_colors(pixels, 8, iterations=2, random_state=0)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert sum(c.population for c in colors) == len(pixels)
        assert peak < 20 * pixels.nbytes

    def test_uint8_pixels_match_float_assignment(self):
        rgb = np.array([[0, 0, 0], [10, 10, 10], [255, 255, 255]], dtype=np.uint8)
        centroids = np.array([[0.0, 0.0, 0.0], [250.0, 250.0, 250.0], [5.0, 5.0, 5.0]])

        np.testing.assert_array_equal(assign_pixels(rgb, centroids), [0, 2, 1])
        np.testing.assert_array_equal(
            assign_pixels(rgb.astype(np.float64), centroids), [0, 2, 1]
        )
