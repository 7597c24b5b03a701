"""Tests for the green-indexed palette."""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add paths for imports
sys.path.insert(0, str(Path(__file__).parents[4] / "python"))
sys.path.insert(0, str(Path(__file__).parents[1]))

from palette_index import INDEX_SIZE, GreenIndexedPalette, build_colormap
from neuquant.core.utils import MAX_CHANNEL, find_nearest_color, squared_distance


def random_colormap(n_colors, seed=0, high=1 << 16):
    rng = np.random.default_rng(seed)
    return rng.integers(0, high, size=(n_colors, 4))


class TestBuildColormap:
    """Test rounding and clamping of trained weights."""

    def test_rounds_half_away_from_zero(self):
        """Test .5 values round up and others to nearest."""
        weights = np.array([[0.5, 1.5, 2.4999, 2.5001]])
        np.testing.assert_array_equal(build_colormap(weights), [[1, 2, 2, 3]])

    def test_clamps_to_wide_range(self):
        """Test negatives clamp to 0 and huge values to 2**31 - 1."""
        weights = np.array([[-0.5, -3.2, 3e9, 70000.0]])
        np.testing.assert_array_equal(
            build_colormap(weights), [[0, 0, MAX_CHANNEL, 70000]]
        )

    def test_index_aligned(self):
        """Test colormap rows correspond to weight rows."""
        weights = np.array([[10.2, 20.7, 30.0, 255.0], [1.0, 0.0, 2.0, 3.0]])
        cmap = build_colormap(weights)
        assert cmap.dtype == np.int64
        np.testing.assert_array_equal(cmap, [[10, 21, 30, 255], [1, 0, 2, 3]])


class TestGreenIndexedPalette:
    """Test cases for the sorted palette and its index."""

    def test_sorted_by_green(self):
        """Test colormap is ascending by green after building."""
        pal = GreenIndexedPalette(random_colormap(64))
        greens = pal.colormap[:, 1]
        assert np.all(np.diff(greens) >= 0)

    def test_sort_keeps_colors(self):
        """Test sorting permutes rows without altering them."""
        cmap = random_colormap(32, seed=3)
        pal = GreenIndexedPalette(cmap)
        assert sorted(map(tuple, cmap.tolist())) == sorted(
            map(tuple, pal.colormap.tolist())
        )

    def test_index_points_at_first_entry(self):
        """Test index[v] is the first position with green >= v."""
        cmap = random_colormap(40, seed=1)
        cmap[5, 1] = cmap[6, 1]  # duplicate green values
        pal = GreenIndexedPalette(cmap)

        greens = pal.colormap[:, 1]
        values = np.arange(INDEX_SIZE)
        expected = np.minimum(
            np.searchsorted(greens, values, side="left"), len(greens) - 1
        )
        np.testing.assert_array_equal(pal.index, expected)

    def test_index_boundaries(self):
        """Test values below the smallest green map to 0, above the largest to n-1."""
        cmap = np.array(
            [[0, 1000, 0, 0], [0, 5000, 0, 0], [0, 3000, 0, 0]]
        )
        pal = GreenIndexedPalette(cmap)
        assert pal.index[0] == 0
        assert pal.index[1000] == 0
        assert pal.index[1001] == 1
        assert pal.index[3000] == 1
        assert pal.index[4999] == 2
        assert pal.index[5000] == 2
        assert pal.index[5001] == 2
        assert pal.index[INDEX_SIZE - 1] == 2

    def test_search_matches_brute_force(self):
        """Test index search finds a nearest entry for random queries."""
        rng = np.random.default_rng(7)
        pal = GreenIndexedPalette(random_colormap(100, seed=2))

        for query in rng.integers(0, 1 << 16, size=(300, 4)):
            b, g, r, a = query.tolist()
            found = pal.index_search(b, g, r, a)
            _, best_dist = find_nearest_color(query, pal.colormap)
            assert squared_distance(pal.colormap[found], query) == best_dist

    def test_search_clustered_greens(self):
        """Test search with many equal greens and varied other channels."""
        rng = np.random.default_rng(11)
        cmap = rng.integers(0, 1 << 16, size=(60, 4))
        cmap[:, 1] = rng.choice([0, 100, 65535], size=60)
        pal = GreenIndexedPalette(cmap)

        for query in rng.integers(0, 1 << 16, size=(200, 4)):
            found = pal.index_search(*query.tolist())
            _, best_dist = find_nearest_color(query, pal.colormap)
            assert squared_distance(pal.colormap[found], query) == best_dist

    def test_search_reaches_first_position(self):
        """Test the lowest palette position is reachable from above."""
        cmap = np.array(
            [[0, 0, 0, 0], [60000, 10, 60000, 60000], [60000, 20, 60000, 60000]]
        )
        pal = GreenIndexedPalette(cmap)
        assert pal.index_search(0, 30, 0, 0) == 0

    def test_tie_prefers_upward_side(self):
        """Test equal distances above and below resolve to the upward entry."""
        pal = GreenIndexedPalette([[0, 90, 0, 0], [0, 110, 0, 0]])
        assert pal.index_search(0, 100, 0, 0) == 1

    def test_duplicates_resolve_to_lowest_position(self):
        """Test repeated equal colors return the first one walked upward."""
        cmap = [[9, 50, 9, 9], [5, 100, 5, 5], [5, 100, 5, 5], [5, 100, 5, 5]]
        pal = GreenIndexedPalette(cmap)
        assert pal.index_search(5, 100, 5, 5) == 1
        assert pal.index_search(5, 99, 5, 5) == 1

    def test_search_green_above_index_range(self):
        """Test queries with green past 65535 start at the right position."""
        cmap = [[0, 66000, 0, 0], [0, 66000, 0, 0], [0, 70000, 0, 0]]
        pal = GreenIndexedPalette(cmap)
        assert pal.index_search(0, 70000, 0, 0) == 2
        assert pal.index_search(0, 90000, 0, 0) == 2
        assert pal.index_search(0, 66000, 0, 0) == 0

    def test_search_wide_colormap_matches_brute_force(self):
        """Test search over colors clamped beyond 16 bits."""
        rng = np.random.default_rng(13)
        pal = GreenIndexedPalette(random_colormap(40, seed=4, high=200000))

        for query in rng.integers(0, 200000, size=(200, 4)):
            found = pal.index_search(*query.tolist())
            _, best_dist = find_nearest_color(query, pal.colormap)
            assert squared_distance(pal.colormap[found], query) == best_dist

    def test_exact_match(self):
        """Test querying a palette color returns its position."""
        pal = GreenIndexedPalette(random_colormap(50, seed=5))
        for pos, (b, g, r, a) in enumerate(pal.colormap.tolist()):
            found = pal.index_search(b, g, r, a)
            assert pal.colormap[found].tolist() == [b, g, r, a]

    def test_search_is_idempotent(self):
        """Test repeated queries return the same index."""
        pal = GreenIndexedPalette(random_colormap(30, seed=9))
        first = pal.index_search(1234, 40000, 999, 65535)
        for _ in range(5):
            assert pal.index_search(1234, 40000, 999, 65535) == first

    def test_single_entry(self):
        """Test a one-color palette answers every query with 0."""
        pal = GreenIndexedPalette([[1, 2, 3, 4]])
        assert pal.index_search(0, 0, 0, 0) == 0
        assert pal.index_search(65535, 65535, 65535, 65535) == 0

    def test_read_only(self):
        """Test the built structures cannot be modified."""
        pal = GreenIndexedPalette(random_colormap(8))
        with pytest.raises(ValueError):
            pal.colormap[0, 0] = 1
        with pytest.raises(ValueError):
            pal.index[0] = 1

    def test_invalid_colormap(self):
        """Test wrong shapes are rejected."""
        with pytest.raises(ValueError):
            GreenIndexedPalette(np.zeros((4, 3)))
        with pytest.raises(ValueError):
            GreenIndexedPalette(np.zeros((0, 4)))

    def test_to_rgba8(self):
        """Test export shifts each channel and reorders to RGBA."""
        # (b, g, r, a)
        pal = GreenIndexedPalette([[0x1234, 0xFFFF, 0x80FF, 0x00FF]])
        np.testing.assert_array_equal(pal.to_rgba8(), [[0x80, 0xFF, 0x12, 0x00]])
        assert pal.to_rgba8().dtype == np.uint8

    def test_to_image(self):
        """Test the palette image carries the exported colors."""
        pal = GreenIndexedPalette([[0, 0, 0xFFFF, 0xFFFF], [0xFFFF, 0x8000, 0, 0xFFFF]])
        img = pal.to_image()
        assert img.mode == "P"
        assert img.getpalette()[:6] == [255, 0, 0, 0, 128, 255]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
