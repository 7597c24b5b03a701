"""Shared components for neural-network palette quantization."""
