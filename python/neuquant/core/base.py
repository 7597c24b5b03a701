"""Base class for palette quantizers."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class BasePaletteQuantizer(ABC):
    """Abstract base class for palette-producing networks.

    This class defines the common interface that palette quantizers
    follow: train on a pixel surface, then answer nearest-color queries
    against a fixed palette.
    """

    def __init__(self, n_colors: int):
        """Initialize the quantizer base.

        Args:
            n_colors: Number of palette entries the network produces.
        """
        self.n_colors = n_colors
        self.weights: Optional[np.ndarray] = None
        self._is_fitted = False

    @abstractmethod
    def fit(self, surface: np.ndarray) -> "BasePaletteQuantizer":
        """Train on a full pixel surface and build the palette.

        Args:
            surface: Pixels of shape (height, width, 4) in (r, g, b, a) order.

        Returns:
            self
        """
        pass

    @abstractmethod
    def partial_fit(self, sample: np.ndarray) -> "BasePaletteQuantizer":
        """Train with a single (r, g, b, a) sample at the current rate.

        Args:
            sample: Single pixel of shape (4,).

        Returns:
            self
        """
        pass

    @abstractmethod
    def nearest(self, color) -> int:
        """Index of the palette entry closest to an (r, g, b, a) color."""
        pass

    @abstractmethod
    def palette(self) -> np.ndarray:
        """Palette as an (n_colors, 4) uint8 RGBA array."""
        pass

    def get_weights(self) -> np.ndarray:
        """Get current neuron weights.

        Weights exist from construction, so this is valid before fitting.

        Returns:
            Array of weights with shape (n_colors, 4).
        """
        return self.weights.copy()

    def _check_fitted(self) -> None:
        if not self._is_fitted:
            raise ValueError("Model has not been fitted yet.")

    @property
    def is_fitted(self) -> bool:
        """Whether a palette has been built."""
        return self._is_fitted
