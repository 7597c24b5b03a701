"""Core components for palette quantizers."""

from .base import BasePaletteQuantizer
from .utils import (
    MAX_CHANNEL,
    find_nearest_color,
    minkowski1_distance,
    round_and_clamp,
    squared_distance,
)

__all__ = [
    "BasePaletteQuantizer",
    "MAX_CHANNEL",
    "find_nearest_color",
    "minkowski1_distance",
    "round_and_clamp",
    "squared_distance",
]
