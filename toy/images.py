"""Synthetic ground-truth images and noise for deblurring experiments.

All images are deterministic, have values in [0, 1], and contain both
flat regions and sharp edges, so that blur and noise amplification are
both visible.
"""

import numpy as np

__all__ = ["make_test_image", "add_gaussian_noise", "IMAGE_KINDS"]

IMAGE_KINDS = ("blocks", "disks", "checkerboard")


def _blocks(M: int, N: int) -> np.ndarray:
    """Nested rectangles of different intensities."""
    img = np.zeros((M, N))
    img[M // 8 : 7 * M // 8, N // 8 : 7 * N // 8] = 0.3
    img[M // 4 : M // 2, N // 4 : 3 * N // 4] = 0.8
    img[5 * M // 8 : 3 * M // 4, 3 * N // 8 : 5 * N // 8] = 1.0
    return img


def _disks(M: int, N: int) -> np.ndarray:
    """Three overlapping disks on a dark background."""
    y, x = np.mgrid[0:M, 0:N]
    img = np.full((M, N), 0.1)
    r = min(M, N)
    for cy, cx, radius, value in (
        (0.35, 0.35, 0.20, 0.6),
        (0.60, 0.65, 0.15, 1.0),
        (0.70, 0.30, 0.10, 0.8),
    ):
        mask = (y - cy * M) ** 2 + (x - cx * N) ** 2 <= (radius * r) ** 2
        img[mask] = value
    return img


def _checkerboard(M: int, N: int, squares: int = 8) -> np.ndarray:
    y, x = np.mgrid[0:M, 0:N]
    return (((y * squares) // M + (x * squares) // N) % 2).astype(float)


def make_test_image(M: int = 64, N: int = 64, kind: str = "blocks") -> np.ndarray:
    """Generate a synthetic ground-truth image.

    Args:
        M: Number of rows.
        N: Number of columns.
        kind: One of "blocks", "disks", "checkerboard".

    Returns:
        float64 array of shape (M, N) with values in [0, 1].

    Example:
        >>> x_true = make_test_image(64, 64, kind="disks")
    """
    if M < 8 or N < 8:
        raise ValueError(f"Image must be at least 8x8, got {M}x{N}")
    if kind == "blocks":
        return _blocks(M, N)
    elif kind == "disks":
        return _disks(M, N)
    elif kind == "checkerboard":
        return _checkerboard(M, N)
    else:
        raise ValueError(f"Unknown image kind: {kind}. Use one of {', '.join(IMAGE_KINDS)}.")


def add_gaussian_noise(
    image: np.ndarray,
    sigma: float = 0.01,
    rng: np.random.Generator = None,
) -> np.ndarray:
    """Add white Gaussian noise of absolute standard deviation sigma.

    Args:
        image: Exact (noise-free) data.
        sigma: Noise standard deviation in image units. Must be >= 0.
        rng: NumPy random generator. If None, uses default.

    Returns:
        New array ``image + sigma * n`` with n ~ N(0, 1).

    Example:
        >>> noisy = add_gaussian_noise(blurred, sigma=1e-3, rng=np.random.default_rng(1))
    """
    if sigma < 0:
        raise ValueError(f"Noise sigma must be nonnegative, got {sigma}")
    if rng is None:
        rng = np.random.default_rng()

    return image + sigma * rng.standard_normal(np.shape(image))
