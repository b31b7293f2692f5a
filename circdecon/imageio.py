"""Raster image loading and saving for grayscale experiments."""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

__all__ = ["load_grayscale", "save_grayscale"]


# Pillow modes holding unsigned 16-bit samples
SIXTEEN_BIT_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def load_grayscale(image_path: Union[str, Path]) -> np.ndarray:
    """Load an image from disk as a grayscale float array in [0, 1].

    8-bit, palette and colour images are converted to 8-bit grayscale and
    divided by 255. 16-bit grayscale ("I;16" and "I" modes) is divided by
    65535. Floating-point images ("F" mode) are taken as they are and must
    already lie in [0, 1].

    Args:
        image_path: Path to any raster format Pillow can decode.

    Returns:
        float64 array of shape (M, N).

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If the file cannot be decoded as an image, or its
            intensities fall outside the mode's range.
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    logger.debug(f"Loading image: {image_path}")
    try:
        with Image.open(path) as img:
            mode = img.mode
            if mode in SIXTEEN_BIT_MODES:
                img_array = np.array(img).astype(np.float64) / 65535.0
            elif mode == "F":
                img_array = np.array(img).astype(np.float64)
            else:
                if mode != "L":
                    logger.debug(f"Converting image from {mode} to grayscale")
                    img = img.convert("L")
                img_array = np.array(img, dtype=np.uint8).astype(np.float64) / 255.0
    except OSError as e:
        raise ValueError(f"Failed to load image {image_path}: {e}") from e

    if not np.all(np.isfinite(img_array)):
        raise ValueError(f"Image {image_path} contains non-finite values")
    if img_array.min() < 0.0 or img_array.max() > 1.0:
        raise ValueError(
            f"Image {image_path} (mode {mode}) has intensities outside [0, 1] "
            f"after scaling: [{img_array.min():.3g}, {img_array.max():.3g}]"
        )
    return img_array


def save_grayscale(
    image: np.ndarray,
    image_path: Union[str, Path],
    clip: bool = True,
) -> Path:
    """Write a [0, 1] float image as an 8-bit grayscale file.

    Args:
        image: 2D array with intensities in [0, 1].
        image_path: Output path; format is taken from the suffix.
        clip: If True, clip to [0, 1] before quantizing. If False, values
            outside the range raise ValueError.

    Returns:
        The path written.
    """
    image = np.asarray(image, dtype=np.float64)
    if image.ndim != 2:
        raise ValueError(f"Expected 2D array, got {image.ndim}D array with shape {image.shape}")
    if not np.all(np.isfinite(image)):
        raise ValueError("Image contains non-finite values")

    if clip:
        image = np.clip(image, 0.0, 1.0)
    elif image.min() < 0.0 or image.max() > 1.0:
        raise ValueError(
            f"Image values must lie in [0, 1], got [{image.min():.3g}, {image.max():.3g}]"
        )

    path = Path(image_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.round(image * 255.0).astype(np.uint8)).save(path)
    logger.info(f"Saved image to {path}")
    return path
