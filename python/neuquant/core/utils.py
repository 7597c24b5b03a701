"""Utility functions for palette quantizers."""

import numpy as np

MAX_CHANNEL = (1 << 31) - 1


def minkowski1_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Sum of absolute channel differences between two colors.

    Args:
        a: First color.
        b: Second color.

    Returns:
        Minkowski-1 (city block) distance.
    """
    return float(np.sum(np.abs(np.asarray(a, dtype=np.float64) - b)))


def squared_distance(a: np.ndarray, b: np.ndarray) -> int:
    """Calculate squared Euclidean distance between two integer colors.

    Computed on Python ints so 16-bit channels cannot overflow.

    Args:
        a: First color.
        b: Second color.

    Returns:
        Squared Euclidean distance.
    """
    return sum((int(x) - int(y)) ** 2 for x, y in zip(a, b))


def round_and_clamp(values: np.ndarray) -> np.ndarray:
    """Round half away from zero and clamp to [0, 2**31 - 1].

    Args:
        values: Float array of any shape.

    Returns:
        int64 array of the same shape.
    """
    values = np.asarray(values, dtype=np.float64)
    rounded = np.sign(values) * np.floor(np.abs(values) + 0.5)
    return np.clip(rounded, 0, MAX_CHANNEL).astype(np.int64)


def find_nearest_color(color: np.ndarray, colors: np.ndarray) -> tuple[int, int]:
    """Linear scan for the closest color by squared Euclidean distance.

    Ties go to the lowest index.

    Args:
        color: Query color of shape (4,).
        colors: Candidate colors of shape (n_colors, 4).

    Returns:
        Tuple of (index, squared distance).
    """
    diff = colors.astype(np.int64) - np.asarray(color, dtype=np.int64)
    distances = np.sum(diff * diff, axis=1)
    idx = int(np.argmin(distances))
    return idx, int(distances[idx])


def calculate_quantization_error(pixels: np.ndarray, colors: np.ndarray) -> float:
    """Calculate mean squared distance from each pixel to its nearest color.

    Args:
        pixels: Samples of shape (n_samples, 4).
        colors: Palette colors of shape (n_colors, 4).

    Returns:
        Mean squared Euclidean error.
    """
    total_error = 0.0
    for p in pixels:
        total_error += find_nearest_color(p, colors)[1]
    return total_error / len(pixels)
