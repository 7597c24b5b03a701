"""NeuQuant neural-network color quantizer.

Based on:
    - Dekker, A. H. (1994). "Kohonen neural networks for optimal colour
      quantization". Network: Computation in Neural Systems, 5, 351-367.
    - DeSieno, D. (1988). "Adding a conscience to competitive learning"

NeuQuant is a one-dimensional self-organizing map over (b, g, r, a)
colors. Each pixel is presented once, in column order. Winner selection
is frequency-sensitive: neurons that win often accumulate a bias penalty,
so rarely used neurons still get pulled into the color distribution.
Learning rate and neighborhood radius decay over exactly 600 cycles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

import sys
from pathlib import Path

# Add python path for imports
sys.path.insert(0, str(Path(__file__).parents[3] / "python"))

from neuquant.core.base import BasePaletteQuantizer

try:
    from .palette_index import GreenIndexedPalette
except ImportError:
    from palette_index import GreenIndexedPalette

logger = logging.getLogger(__name__)

NCYCLES = 600  # Number of learning-rate decay cycles per image

RADIUS_BIAS_SHIFT = 6
RADIUS_BIAS = 1 << RADIUS_BIAS_SHIFT
RADIUS_DEC = 30  # Radius shrinks by 1/30 each cycle

ALPHA_BIAS_SHIFT = 10
INIT_ALPHA = 1 << ALPHA_BIAS_SHIFT  # Learning rate 1.0, biased by 10 bits

GAMMA = 1024.0
BETA = 1.0 / GAMMA
BETA_GAMMA = BETA * GAMMA


@dataclass
class NeuQuantParams:
    """NeuQuant hyperparameters.

    Attributes:
        netsize: Number of neurons, i.e. palette colors. Tuned for 26..256.
        samplefrac: Sampling density divisor (1 = every pixel counts fully).
        use_pruning: Skip green/alpha terms for neurons that cannot win.
    """

    netsize: int = 256
    samplefrac: int = 1
    use_pruning: bool = True


@dataclass
class _ContestState:
    """Running minima of a single contest."""

    bestd: float = float("inf")
    bestpos: int = -1
    bestbiasd: float = float("inf")
    bestbiaspos: int = -1


class NeuQuant(BasePaletteQuantizer):
    """Frequency-sensitive self-organizing map for palette generation.

    Attributes:
        params: NeuQuant hyperparameters.
        weights: Neuron weights in (b, g, r, a) order, shape (netsize, 4).
        freq: Recent win frequency per neuron, shape (netsize,).
        bias: Winner-selection bias per neuron, shape (netsize,).
        palette_index: Sorted palette built by fit(), None before.
        n_learning: Number of samples presented.

    Examples
    --------
    >>> import numpy as np
    >>> from model import NeuQuant, NeuQuantParams
    >>> surface = np.random.randint(0, 65536, size=(32, 32, 4))
    >>> nq = NeuQuant(NeuQuantParams(netsize=64, samplefrac=1))
    >>> nq.fit(surface)
    >>> idx = nq.nearest(surface[0, 0])
    >>> nq.palette()[idx]
    """

    def __init__(self, params: NeuQuantParams | None = None):
        """Initialize NeuQuant.

        Args:
            params: NeuQuant hyperparameters. Uses defaults if None.
        """
        self.params = params or NeuQuantParams()
        p = self.params
        if p.netsize < 1:
            raise ValueError(f"netsize must be at least 1, got {p.netsize}")
        if p.samplefrac < 1:
            raise ValueError(f"samplefrac must be at least 1, got {p.samplefrac}")

        super().__init__(p.netsize)

        # Diagonal ramp, fully opaque
        ramp = np.arange(p.netsize, dtype=np.float64)
        self.weights = np.column_stack(
            [ramp, ramp, ramp, np.full(p.netsize, 255.0)]
        )
        self.freq = np.full(p.netsize, 1.0 / p.netsize)
        self.bias = np.zeros(p.netsize)

        self.palette_index: GreenIndexedPalette | None = None

        # Learning schedule
        self.alphadec = float(30 * 256 + (p.samplefrac - 1) // 3)
        self.alpha = float(INIT_ALPHA)
        self.bias_radius = (p.netsize // 8) * RADIUS_BIAS
        self.radius = self._radius_from_bias(self.bias_radius)

        # Counters
        self.n_learning = 0
        self.n_cycles = 0

    @staticmethod
    def _radius_from_bias(bias_radius: int) -> int:
        rad = bias_radius >> RADIUS_BIAS_SHIFT
        return 0 if rad <= 1 else rad

    def contest(self, b: float, g: float, r: float, a: float) -> int:
        """Find the bias-adjusted winner and update frequency and bias.

        The closest neuron (min distance) gets its frequency raised; the
        returned neuron is the one with min distance - bias. For frequently
        chosen neurons freq[i] is high and bias[i] is negative.

        Args:
            b, g, r, a: Sample channels.

        Returns:
            Index of the neuron to move toward the sample.
        """
        state = _ContestState()
        bias = self.bias.tolist()
        prune = self.params.use_pruning

        for i, (nb, ng, nr, na) in enumerate(self.weights.tolist()):
            dist = abs(nb - b) + abs(nr - r)
            if (
                not prune
                or dist < state.bestd
                or dist < state.bestbiasd + bias[i]
            ):
                dist += abs(ng - g) + abs(na - a)
                if dist < state.bestd:
                    state.bestd = dist
                    state.bestpos = i
                biasdist = dist - bias[i]
                if biasdist < state.bestbiasd:
                    state.bestbiasd = biasdist
                    state.bestbiaspos = i

        # Every neuron decays each call
        self.freq -= BETA * self.freq
        self.bias += BETA_GAMMA * self.freq

        self.freq[state.bestpos] += BETA
        self.bias[state.bestpos] -= BETA_GAMMA
        return state.bestbiaspos

    def alter_single(self, alpha: float, i: int, sample: np.ndarray) -> None:
        """Move neuron i towards sample by factor alpha.

        Args:
            alpha: Fraction of the distance to move.
            i: Neuron index.
            sample: Target in (b, g, r, a) order.
        """
        w = self.weights[i]
        w -= alpha * (w - sample)

    def alter_neighbours(
        self, alpha: float, radius: int, i: int, sample: np.ndarray
    ) -> None:
        """Move the neurons around i towards sample with quadratic falloff.

        Neurons i +/- q for q in 1..radius-1 move by
        alpha * (radius^2 - q^2) / radius^2, clipped at the array bounds.

        Args:
            alpha: Learning rate at the winner.
            radius: Neighborhood radius in neuron positions.
            i: Winner index.
            sample: Target in (b, g, r, a) order.
        """
        q = np.arange(1, radius)
        if len(q) == 0:
            return
        rad_sq = float(radius * radius)
        a = alpha * (rad_sq - q * q) / rad_sq
        n = self.params.netsize

        for pos in (i + q, i - q):
            inside = (pos >= 0) & (pos < n)
            pos, factor = pos[inside], a[inside]
            if len(pos):
                w = self.weights[pos]
                self.weights[pos] = w - factor[:, np.newaxis] * (w - sample)

    def _one_train_update(self, sample: np.ndarray) -> None:
        """Present one (b, g, r, a) sample at the current rate and radius."""
        b, g, r, a = (float(v) for v in sample)
        j = self.contest(b, g, r, a)

        alpha = self.alpha / INIT_ALPHA
        self.alter_single(alpha, j, sample)
        if self.radius > 0:
            self.alter_neighbours(alpha, self.radius, j, sample)

        self.n_learning += 1

    def _decay(self) -> None:
        """One learning cycle: shrink learning rate and radius."""
        self.alpha -= self.alpha / self.alphadec
        self.bias_radius -= self.bias_radius // RADIUS_DEC
        self.radius = self._radius_from_bias(self.bias_radius)
        self.n_cycles += 1

    def learn(
        self,
        surface: np.ndarray,
        callback: Callable[[NeuQuant, int], None] | None = None,
    ) -> NeuQuant:
        """Main learning loop over every pixel of a surface.

        Pixels are visited column by column. A decay cycle runs whenever
        x > 0, y > 0 and x * y is a multiple of delta.

        Args:
            surface: Pixels of shape (height, width, 4) in (r, g, b, a) order.
            callback: Optional callback(self, step) called after each pixel.

        Returns:
            self for chaining.
        """
        surface = _check_surface(surface)
        height, width = surface.shape[:2]

        delta = width * height // self.params.samplefrac // NCYCLES
        if delta <= 0:
            delta = 1

        # (r, g, b, a) -> (b, g, r, a)
        bgra = surface[:, :, [2, 1, 0, 3]].astype(np.float64)

        logger.debug(
            "Beginning learning: %dx%d pixels, delta=%d, radius=%d",
            width,
            height,
            delta,
            self.radius,
        )

        step = 0
        for x in range(width):
            for y in range(height):
                self._one_train_update(bgra[y, x])
                if x > 0 and y > 0 and (x * y) % delta == 0:
                    self._decay()
                if callback is not None:
                    callback(self, step)
                step += 1

        logger.debug(
            "Finished learning: final alpha=%.6f, %d cycles",
            self.alpha / INIT_ALPHA,
            self.n_cycles,
        )
        return self

    def fit(
        self,
        surface: np.ndarray,
        callback: Callable[[NeuQuant, int], None] | None = None,
    ) -> NeuQuant:
        """Train on a surface and build the sorted palette.

        Args:
            surface: Pixels of shape (height, width, 4) in (r, g, b, a) order,
                conventionally on a 16-bit scale.
            callback: Optional callback(self, step) called after each pixel.

        Returns:
            self for chaining.
        """
        self.learn(surface, callback=callback)
        self.build_palette()
        return self

    def partial_fit(self, sample: np.ndarray) -> NeuQuant:
        """Single online learning step at the current rate and radius.

        Does not advance the decay schedule; call build_palette() to
        refresh the palette afterwards.

        Args:
            sample: Pixel (r, g, b, a).

        Returns:
            self for chaining.
        """
        r, g, b, a = (float(v) for v in sample)
        self._one_train_update(np.array([b, g, r, a]))
        return self

    def build_palette(self) -> GreenIndexedPalette:
        """Quantize the current weights into a sorted, indexed palette."""
        self.palette_index = GreenIndexedPalette.from_weights(self.weights)
        self._is_fitted = True
        return self.palette_index

    def nearest(self, color) -> int:
        """Index of the palette entry closest to an (r, g, b, a) color.

        Args:
            color: Color on the training scale (16-bit per channel).

        Returns:
            Position in palette().
        """
        self._check_fitted()
        r, g, b, a = color
        return self.palette_index.index_search(b, g, r, a)

    def remap(self, surface: np.ndarray) -> np.ndarray:
        """Map every pixel of a surface to its nearest palette index.

        Args:
            surface: Pixels of shape (height, width, 4) in (r, g, b, a) order.

        Returns:
            int array of shape (height, width).
        """
        self._check_fitted()
        surface = _check_surface(surface)
        height, width = surface.shape[:2]
        flat = surface.reshape(-1, 4).tolist()

        memo: dict[tuple, int] = {}
        out = np.empty(len(flat), dtype=np.int64)
        for k, px in enumerate(flat):
            key = tuple(px)
            idx = memo.get(key)
            if idx is None:
                idx = self.nearest(key)
                memo[key] = idx
            out[k] = idx
        return out.reshape(height, width)

    def palette(self) -> np.ndarray:
        """Palette as 8-bit (r, g, b, a), shape (netsize, 4)."""
        self._check_fitted()
        return self.palette_index.to_rgba8()

    def colormap(self) -> np.ndarray:
        """Sorted integer colormap in (b, g, r, a) order."""
        self._check_fitted()
        return self.palette_index.colormap.copy()

    def palette_image(self):
        """1x1 "P" image carrying the palette, for downstream encoders."""
        self._check_fitted()
        return self.palette_index.to_image()


def _check_surface(surface: np.ndarray) -> np.ndarray:
    surface = np.asarray(surface)
    if surface.ndim != 3 or surface.shape[2] != 4:
        raise ValueError(
            f"Surface must have shape (height, width, 4), got {surface.shape}"
        )
    if surface.shape[0] == 0 or surface.shape[1] == 0:
        raise ValueError("Surface must contain at least one pixel.")
    return surface


def quantize(
    surface: np.ndarray, netsize: int = 256, samplefrac: int = 1
) -> NeuQuant:
    """Train a network on a surface and return it with its palette built.

    Args:
        surface: Pixels of shape (height, width, 4) in (r, g, b, a) order.
        netsize: Number of palette colors.
        samplefrac: Sampling density divisor.

    Returns:
        Fitted NeuQuant.
    """
    return NeuQuant(NeuQuantParams(netsize=netsize, samplefrac=samplefrac)).fit(
        surface
    )


