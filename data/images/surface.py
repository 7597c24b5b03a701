"""Convert images into 16-bit premultiplied RGBA pixel surfaces."""

import argparse
from pathlib import Path

import numpy as np
from PIL import Image


def image_to_surface(image: Image.Image) -> np.ndarray:
    """Convert a PIL image to a (height, width, 4) 16-bit RGBA surface.

    Each 8-bit channel is widened to 16 bits (v * 0x101) and the color
    channels are premultiplied by alpha, the scale NeuQuant trains on.

    Args:
        image: Any PIL image; converted to RGBA first.

    Returns:
        int64 array of shape (height, width, 4) in (r, g, b, a) order.
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.int64) * 0x101
    alpha = rgba[:, :, 3:4]
    surface = rgba.copy()
    surface[:, :, :3] = rgba[:, :, :3] * alpha // 0xFFFF
    return surface


def load_surface(image_path: str) -> np.ndarray:
    """Open an image file and convert it to a 16-bit RGBA surface.

    Args:
        image_path: Path to the input image.

    Returns:
        int64 array of shape (height, width, 4) in (r, g, b, a) order.
    """
    with Image.open(image_path) as img:
        return image_to_surface(img)


def surface_to_image(surface: np.ndarray) -> Image.Image:
    """Inverse of image_to_surface for fully opaque surfaces."""
    return Image.fromarray((np.asarray(surface) >> 8).astype(np.uint8))


def save_surface(surface: np.ndarray, output_path: str) -> None:
    """Save a surface to file (.npy).

    Args:
        surface: Array of shape (height, width, 4).
        output_path: Output file path.
    """
    path = Path(output_path)
    if path.suffix != ".npy":
        raise ValueError(f"Unsupported format: {path.suffix}")
    np.save(output_path, surface)
    print(f"Saved {surface.shape[1]}x{surface.shape[0]} surface to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Convert an image to a 16-bit RGBA surface")
    parser.add_argument("image", type=str, help="Input image path")
    parser.add_argument("-o", "--output", type=str, default="surface.npy", help="Output path")

    args = parser.parse_args()

    save_surface(load_surface(args.image), args.output)


if __name__ == "__main__":
    main()
