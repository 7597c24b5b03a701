"""Generate synthetic images for palette quantization testing."""

import argparse

import numpy as np
from PIL import Image


def generate_solid(
    output_path: str | None = None,
    size: tuple[int, int] = (32, 32),
    color: tuple[int, int, int, int] = (135, 206, 235, 255),
) -> Image.Image:
    """Generate a single-color RGBA image.

    Args:
        output_path: Path to save the image, or None to only return it.
        size: Image (width, height).
        color: RGBA fill color.

    Returns:
        The generated image.
    """
    img = Image.new("RGBA", size, color)
    _maybe_save(img, output_path)
    return img


def generate_quadrants(
    output_path: str | None = None,
    size: int = 2,
    colors: tuple = (
        (255, 0, 0, 255),
        (0, 255, 0, 255),
        (0, 0, 255, 255),
        (0, 0, 0, 255),
    ),
) -> Image.Image:
    """Generate an image split into four solid quadrants.

    Args:
        output_path: Path to save the image, or None to only return it.
        size: Width and height (even).
        colors: Top-left, bottom-left, top-right, bottom-right RGBA colors.

    Returns:
        The generated image.
    """
    half = size // 2
    arr = np.zeros((size, size, 4), dtype=np.uint8)
    arr[:half, :half] = colors[0]
    arr[half:, :half] = colors[1]
    arr[:half, half:] = colors[2]
    arr[half:, half:] = colors[3]

    img = Image.fromarray(arr)
    _maybe_save(img, output_path)
    return img


def generate_gradient(
    output_path: str | None = None,
    width: int = 128,
    height: int = 64,
) -> Image.Image:
    """Generate a hue gradient blended toward black at the bottom.

    Args:
        output_path: Path to save the image, or None to only return it.
        width: Image width.
        height: Image height.

    Returns:
        The generated image.
    """
    x = np.linspace(0.0, 1.0, width)
    y = np.linspace(1.0, 0.0, height)[:, np.newaxis]

    r = np.clip(np.abs(x * 6 - 3) - 1, 0, 1)
    g = np.clip(2 - np.abs(x * 6 - 2), 0, 1)
    b = np.clip(2 - np.abs(x * 6 - 4), 0, 1)

    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, 0] = np.round(255 * r * y)
    arr[:, :, 1] = np.round(255 * g * y)
    arr[:, :, 2] = np.round(255 * b * y)
    arr[:, :, 3] = 255

    img = Image.fromarray(arr)
    _maybe_save(img, output_path)
    return img


def generate_stripes(
    output_path: str | None = None,
    width: int = 64,
    height: int = 64,
    n_stripes: int = 8,
    seed: int | None = None,
) -> Image.Image:
    """Generate vertical stripes of random opaque colors.

    Args:
        output_path: Path to save the image, or None to only return it.
        width: Image width.
        height: Image height.
        n_stripes: Number of stripes.
        seed: Random seed for reproducibility.

    Returns:
        The generated image.
    """
    rng = np.random.default_rng(seed)
    colors = rng.integers(0, 256, size=(n_stripes, 3), dtype=np.uint8)
    stripe = np.minimum(np.arange(width) * n_stripes // width, n_stripes - 1)

    arr = np.full((height, width, 4), 255, dtype=np.uint8)
    arr[:, :, :3] = colors[stripe][np.newaxis, :, :]

    img = Image.fromarray(arr)
    _maybe_save(img, output_path)
    return img


def _maybe_save(img: Image.Image, output_path: str | None) -> None:
    if output_path is not None:
        img.save(output_path)
        print(f"Saved: {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Generate images for palette testing")
    parser.add_argument(
        "shape",
        choices=["solid", "quadrants", "gradient", "stripes"],
        help="Image type to generate",
    )
    parser.add_argument("-o", "--output", type=str, default=None, help="Output path")

    args = parser.parse_args()

    output = args.output or f"{args.shape}.png"

    if args.shape == "solid":
        generate_solid(output)
    elif args.shape == "quadrants":
        generate_quadrants(output, size=64)
    elif args.shape == "gradient":
        generate_gradient(output)
    elif args.shape == "stripes":
        generate_stripes(output, seed=42)


if __name__ == "__main__":
    main()
