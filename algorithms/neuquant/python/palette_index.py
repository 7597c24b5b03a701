"""Green-sorted palette with a dense lookup index.

Based on the "inxbuild" / "inxsearch" stage of:
    Dekker, A. H. (1994). "Kohonen neural networks for optimal colour
    quantization". Network: Computation in Neural Systems, 5, 351-367.

The trained weights are rounded into integer colors, selection-sorted by
the green channel, and a 65536-entry table maps every green value to a
starting position. Nearest-color search walks outward from that position
and stops in each direction once the green difference alone rules out
every remaining entry.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

import sys
from pathlib import Path

# Add python path for imports
sys.path.insert(0, str(Path(__file__).parents[3] / "python"))

from neuquant.core.utils import round_and_clamp

INDEX_SIZE = 1 << 16

# Column layout of colormap rows
B, G, R, A = 0, 1, 2, 3


class GreenIndexedPalette:
    """Read-only palette sorted ascending by green.

    Attributes:
        colormap: Integer colors in (b, g, r, a) order, shape (n_colors, 4).
        index: Start position per green value, shape (65536,).

    Examples
    --------
    >>> import numpy as np
    >>> from palette_index import GreenIndexedPalette
    >>> weights = np.array([[0, 65535, 0, 65535], [0, 0, 0, 65535]], float)
    >>> pal = GreenIndexedPalette.from_weights(weights)
    >>> pal.index_search(0, 60000, 0, 65535)
    1
    """

    def __init__(self, colormap: np.ndarray):
        """Sort colormap by green and build the index.

        Args:
            colormap: Integer colors in (b, g, r, a) order. Copied.
        """
        self.colormap = np.array(colormap, dtype=np.int64)
        if self.colormap.ndim != 2 or self.colormap.shape[1] != 4:
            raise ValueError(
                f"Colormap must have shape (n_colors, 4), got {self.colormap.shape}"
            )
        if len(self.colormap) == 0:
            raise ValueError("Colormap must contain at least one color.")
        self.index = np.zeros(INDEX_SIZE, dtype=np.int64)
        self._build_index()

        self.colormap.setflags(write=False)
        self.index.setflags(write=False)
        self._rows = self.colormap.tolist()

    @classmethod
    def from_weights(cls, weights: np.ndarray) -> GreenIndexedPalette:
        """Build the palette from trained neuron weights.

        Args:
            weights: Float weights in (b, g, r, a) order, shape (n_colors, 4).

        Returns:
            A sorted, indexed palette.
        """
        return cls(build_colormap(weights))

    def __len__(self) -> int:
        return len(self.colormap)

    def _build_index(self) -> None:
        """Selection sort by green, filling the index as each slot settles."""
        cmap = self.colormap
        n = len(cmap)
        next_col = 0
        for i in range(n):
            smallpos = i
            smallval = int(cmap[i, G])
            for j in range(i + 1, n):
                if cmap[j, G] < smallval:
                    smallpos = j
                    smallval = int(cmap[j, G])
            if smallpos != i:
                cmap[[i, smallpos]] = cmap[[smallpos, i]]

            # Green values in [next_col, smallval] first reach position i
            if smallval >= next_col:
                self.index[next_col : smallval + 1] = i
                next_col = smallval + 1

        self.index[next_col:] = n - 1

    def _start_position(self, g: int) -> int:
        """First position with green >= g, or n - 1 past the largest green."""
        if g < INDEX_SIZE:
            return int(self.index[max(g, 0)])
        # Greens above 16 bits are not covered by the index
        pos = int(np.searchsorted(self.colormap[:, G], g, side="left"))
        return min(pos, len(self.colormap) - 1)

    def index_search(self, b: int, g: int, r: int, a: int) -> int:
        """Find the closest palette entry by squared Euclidean distance.

        Args:
            b, g, r, a: Query channels on the palette's integer scale.

        Returns:
            Position of the nearest entry in the sorted colormap.
            On equal distances the entry found first is kept; at each step
            the upward side is checked before the downward side.
        """
        b, g, r, a = int(b), int(g), int(r), int(a)
        rows = self._rows
        n = len(rows)
        bestd = float("inf")
        best = 0
        i = self._start_position(g)
        j = i - 1
        up = i < n
        down = j >= 0

        while up or down:
            if up:
                p = rows[i]
                e = p[G] - g
                dist = e * e
                if dist >= bestd:
                    up = False
                else:
                    e = p[B] - b
                    dist += e * e
                    if dist < bestd:
                        e = p[R] - r
                        dist += e * e
                        if dist < bestd:
                            e = p[A] - a
                            dist += e * e
                            if dist < bestd:
                                bestd = dist
                                best = i
                    i += 1
                    up = i < n
            if down:
                p = rows[j]
                e = p[G] - g
                dist = e * e
                if dist >= bestd:
                    down = False
                else:
                    e = p[B] - b
                    dist += e * e
                    if dist < bestd:
                        e = p[R] - r
                        dist += e * e
                        if dist < bestd:
                            e = p[A] - a
                            dist += e * e
                            if dist < bestd:
                                bestd = dist
                                best = j
                    j -= 1
                    down = j >= 0
        return best

    def to_rgba8(self) -> np.ndarray:
        """Export as 8-bit RGBA, each 16-bit channel shifted right by 8.

        Returns:
            uint8 array of shape (n_colors, 4) in (r, g, b, a) order.
        """
        shifted = self.colormap[:, [R, G, B, A]] >> 8
        return shifted.astype(np.uint8)

    def to_image(self) -> Image.Image:
        """1x1 "P" mode image carrying the palette, for PIL's quantize()."""
        rgb = self.to_rgba8()[:, :3].reshape(-1).tolist()
        rgb.extend([0] * (256 * 3 - len(rgb)))
        pimage = Image.new("P", (1, 1), 0)
        pimage.putpalette(rgb[: 256 * 3])
        return pimage


def build_colormap(weights: np.ndarray) -> np.ndarray:
    """Quantize trained weights to integer colors, index-aligned with weights.

    Args:
        weights: Float weights of shape (n_colors, 4).

    Returns:
        int64 colors of shape (n_colors, 4).
    """
    return round_and_clamp(weights)
