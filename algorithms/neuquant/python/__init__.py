"""NeuQuant - neural-network color quantization.

Based on:
    Dekker, A. H. (1994).
    "Kohonen neural networks for optimal colour quantization"
    Network: Computation in Neural Systems.
"""

from .model import NeuQuant, NeuQuantParams, quantize
from .palette_index import GreenIndexedPalette

__all__ = ["NeuQuant", "NeuQuantParams", "GreenIndexedPalette", "quantize"]
