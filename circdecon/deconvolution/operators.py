"""Periodic (circular) forward operators.

Every operator here treats the image as one period of a doubly periodic
signal, so each is a BCCB matrix and is diagonalized by the 2D DFT. None of
them is ever materialized as a dense matrix; they exist only as functions
mapping an (M, N) image to an (M, N) image.

Kernels are described by a ``KernelSpec`` and sampled onto the full grid
with their origin at index (0, 0) (see ``make_kernel``), matching the
``numpy.fft`` layout.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np
from scipy.ndimage import gaussian_filter

from ..utils import place_at_origin

logger = logging.getLogger(__name__)

__all__ = [
    "KernelSpec",
    "make_kernel",
    "apply_periodic_blur",
    "apply_periodic_laplacian",
    "convolve_periodic",
]

KERNEL_KINDS = ("gaussian", "box", "three_tap", "identity")

# Gaussian support, in standard deviations (same default as scipy.ndimage)
GAUSSIAN_TRUNCATE = 4.0


@dataclass(frozen=True)
class KernelSpec:
    """Immutable description of a periodic blur kernel.

    Attributes:
        kind: One of "gaussian", "box", "three_tap", "identity".
        sigma: Gaussian standard deviation in pixels (gaussian only).
        size: Side length of the square averaging window, odd (box only).
        weights: Taps (w[-1], w[0], w[+1]) along ``axis`` (three_tap only).
        axis: Axis the three-tap stencil runs along. Default 1 (columns).

    Example:
        ```python
        spec = KernelSpec("gaussian", sigma=5.0)
        blurred = apply_periodic_blur(image, spec)
        ```
    """

    kind: str
    sigma: Optional[float] = None
    size: Optional[int] = None
    weights: Optional[Tuple[float, float, float]] = None
    axis: int = 1

    def __post_init__(self) -> None:
        """Validate parameters for the selected kind."""
        if self.kind not in KERNEL_KINDS:
            raise ValueError(
                f"Unknown kernel kind: {self.kind}. Use one of {', '.join(KERNEL_KINDS)}."
            )
        if self.kind == "gaussian":
            if self.sigma is None or self.sigma <= 0:
                raise ValueError(f"Gaussian sigma must be positive, got {self.sigma}")
        elif self.kind == "box":
            if self.size is None or self.size < 1 or self.size % 2 == 0:
                raise ValueError(f"Box size must be a positive odd integer, got {self.size}")
        elif self.kind == "three_tap":
            if self.weights is None or len(self.weights) != 3:
                raise ValueError(f"three_tap needs exactly 3 weights, got {self.weights}")
            object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))
        if self.axis not in (0, 1):
            raise ValueError(f"Axis must be 0 or 1, got {self.axis}")

    @classmethod
    def gaussian(cls, sigma: float) -> "KernelSpec":
        """Shorthand for ``KernelSpec("gaussian", sigma=sigma)``."""
        return cls("gaussian", sigma=sigma)

    @property
    def is_symmetric(self) -> bool:
        """True if the kernel is point-symmetric, i.e. its eigenvalues are real."""
        if self.kind == "three_tap":
            return self.weights[0] == self.weights[2]
        return True


def _as_spec(kernel_spec: Union[KernelSpec, float]) -> KernelSpec:
    """Accept a bare number as a Gaussian sigma."""
    if isinstance(kernel_spec, KernelSpec):
        return kernel_spec
    return KernelSpec.gaussian(float(kernel_spec))


def _require_2d(image: np.ndarray) -> np.ndarray:
    image = np.asarray(image)
    if image.ndim != 2:
        raise ValueError(f"Expected 2D image, got {image.ndim}D array with shape {image.shape}")
    if image.size == 0:
        raise ValueError("Image array is empty")
    return image


def _gaussian_taps(sigma: float, n: int) -> np.ndarray:
    """1D truncated Gaussian, normalized, aliased onto a length-n period."""
    radius = int(GAUSSIAN_TRUNCATE * sigma + 0.5)
    x = np.arange(-radius, radius + 1)
    phi = np.exp(-0.5 / sigma**2 * x**2)
    phi /= phi.sum()

    taps = np.zeros(n)
    np.add.at(taps, x % n, phi)
    return taps


def make_kernel(
    kernel_spec: Union[KernelSpec, float],
    shape: Tuple[int, int],
) -> np.ndarray:
    """Sample a kernel on the full periodic grid with origin at (0, 0).

    The Gaussian is the separable, truncated kernel that
    ``scipy.ndimage.gaussian_filter`` applies, so ``fft2(make_kernel(...))``
    gives the exact eigenvalues of ``apply_periodic_blur``.

    Args:
        kernel_spec: KernelSpec, or a float taken as a Gaussian sigma.
        shape: Grid shape (M, N).

    Returns:
        Real array of the given shape. Gaussian, box and identity kernels
        sum to 1; three-tap weights are used as given.

    Example:
        >>> k = make_kernel(KernelSpec("three_tap", weights=(0.2, 0.6, 0.2)), (8, 8))
        >>> k[0, :2], k[0, -1]
        (array([0.6, 0.2]), 0.2)
    """
    spec = _as_spec(kernel_spec)
    M, N = shape

    if spec.kind == "identity":
        kernel = np.zeros(shape)
        kernel[0, 0] = 1.0
    elif spec.kind == "gaussian":
        kernel = np.outer(_gaussian_taps(spec.sigma, M), _gaussian_taps(spec.sigma, N))
    elif spec.kind == "box":
        if spec.size > min(M, N):
            raise ValueError(f"Box size {spec.size} exceeds grid shape {shape}")
        window = np.full((spec.size, spec.size), 1.0 / spec.size**2)
        kernel = place_at_origin(window, (M, N))
    else:
        # y[n] = w[-1] x[n+1] + w[0] x[n] + w[+1] x[n-1]; kernel taps at -1, 0, +1
        stencil = np.asarray(spec.weights).reshape((1, 3) if spec.axis == 1 else (3, 1))
        kernel = place_at_origin(stencil, (M, N))

    logger.debug(f"Built {spec.kind} kernel on grid {shape}")
    return kernel


def convolve_periodic(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Circular convolution of an image with a corner-origin kernel of the same shape."""
    image = _require_2d(image)
    if kernel.shape != image.shape:
        raise ValueError(
            f"Kernel shape {kernel.shape} must match image shape {image.shape}"
        )
    return np.fft.irfft2(np.fft.rfft2(image) * np.fft.rfft2(kernel), s=image.shape)


def apply_periodic_blur(
    image: np.ndarray,
    kernel_spec: Union[KernelSpec, float],
) -> np.ndarray:
    """Apply a periodic blur with wraparound boundaries.

    Gaussian kernels go through ``scipy.ndimage.gaussian_filter`` with
    ``mode="wrap"``. Other kernels are applied by FFT circular convolution.

    Args:
        image: Real 2D image, shape (M, N).
        kernel_spec: KernelSpec, or a float taken as a Gaussian sigma.

    Returns:
        New blurred image of the same shape. The input is not modified.

    Example:
        >>> blurred = apply_periodic_blur(image, KernelSpec.gaussian(5.0))
        >>> blurred = apply_periodic_blur(image, 1.5)
    """
    image = _require_2d(image)
    spec = _as_spec(kernel_spec)

    if spec.kind == "identity":
        return image.astype(float, copy=True)
    if spec.kind == "gaussian":
        return gaussian_filter(
            image.astype(float), spec.sigma, mode="wrap", truncate=GAUSSIAN_TRUNCATE
        )
    return convolve_periodic(image, make_kernel(spec, image.shape))


def apply_periodic_laplacian(image: np.ndarray) -> np.ndarray:
    """5-point discrete Laplacian with circular boundary.

    L x[i, j] = x[i+1, j] + x[i-1, j] + x[i, j+1] + x[i, j-1] - 4 x[i, j]
    """
    image = _require_2d(image)
    return (
        np.roll(image, -1, axis=0)
        + np.roll(image, 1, axis=0)
        + np.roll(image, -1, axis=1)
        + np.roll(image, 1, axis=1)
        - 4.0 * image
    )
