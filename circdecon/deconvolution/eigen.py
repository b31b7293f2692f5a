"""Fourier-domain eigenvalues of periodic operators.

A BCCB operator A satisfies A = F^H diag(Λ) F, with F the unitary 2D DFT.
Two ways to obtain Λ are provided:

- Probing: apply the operator once to F^H v for a random v and read off
  Λ = (F A F^H v) / v. Needs only the operator's action.
- Analytic: Λ = fft2(k) for a corner-origin kernel k (unnormalized FFT),
  and the closed form for the periodic 5-point Laplacian.

Both give the eigenvalues of the operator itself. Regularization
eigenvalues Π are those of L (not L^T L); the solver squares them.
"""

import logging
from typing import Callable, Union

import numpy as np

from ..errors import OperatorNotDiagonalizable
from ..utils import fft2c, fourier_meshgrid, ifft2c
from .operators import KernelSpec, apply_periodic_blur, make_kernel

logger = logging.getLogger(__name__)

__all__ = [
    "estimate_operator_eigenvalues",
    "kernel_eigenvalues",
    "laplacian_eigenvalues",
    "blur_eigenvalues",
]

RngLike = Union[np.random.Generator, int, None]


def _apply_real_operator(
    apply_operator: Callable[[np.ndarray], np.ndarray],
    z: np.ndarray,
) -> np.ndarray:
    """Apply a real linear operator to a complex image, one part at a time."""
    return apply_operator(z.real) + 1j * apply_operator(z.imag)


def _real_spectrum(spectrum: np.ndarray, imag_tol: float) -> np.ndarray:
    """Real part of a spectrum whose imaginary part must be negligible.

    The tolerance is relative to the largest magnitude in the spectrum, so
    it does not depend on the operator's overall scale.
    """
    max_imag = float(np.max(np.abs(spectrum.imag)))
    tolerance = imag_tol * max(float(np.max(np.abs(spectrum))), np.finfo(float).tiny)
    if max_imag > tolerance:
        raise OperatorNotDiagonalizable(max_imag, tolerance)
    logger.debug(f"Spectrum max |Im| = {max_imag:.3e} (tolerance {tolerance:.3e})")
    return spectrum.real


def estimate_operator_eigenvalues(
    apply_operator: Callable[[np.ndarray], np.ndarray],
    M: int,
    N: int,
    rng: RngLike = None,
    imag_tol: float = 1e-6,
) -> np.ndarray:
    """Estimate the eigenvalues of a periodic operator by random probing.

    Draws v ~ N(0, 1) on the (M, N) grid and computes

        w = FFT2(apply_operator(IFFT2(v)))      (both "ortho")
        Λ = Re(w / v)

    For an operator that is exactly diagonal in the 2D Fourier basis this
    recovers every eigenvalue, whatever the draw. For any other operator
    the ratio is meaningless, which shows up as a large imaginary part.

    Args:
        apply_operator: Real linear map from an (M, N) image to an (M, N)
            image. It is only ever called with real arrays.
        M: Number of rows.
        N: Number of columns.
        rng: ``numpy.random.Generator`` or integer seed for the probe draw.
            None draws fresh OS entropy. Global random state is never used.
        imag_tol: Largest allowed ``max|Im(w / v)|``, relative to
            ``max|w / v|``.

    Returns:
        Real (M, N) array of eigenvalues in ``numpy.fft`` frequency order.

    Raises:
        ValueError: If M or N is not a positive integer.
        OperatorNotDiagonalizable: If the imaginary part exceeds the tolerance.

    Note:
        Entries of v close to zero amplify floating-point error in the
        division. Exact zeros have probability zero, so this is left as a
        known limitation; the smallest |v| is logged at DEBUG level.

    Example:
        >>> rng = np.random.default_rng(0)
        >>> lam = estimate_operator_eigenvalues(
        ...     lambda x: apply_periodic_blur(x, 5.0), 64, 64, rng=rng
        ... )
    """
    for name, n in (("M", M), ("N", N)):
        if int(n) != n or n < 1:
            raise ValueError(f"{name} must be a positive integer, got {n}")
    M, N = int(M), int(N)

    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    v = rng.standard_normal((M, N))
    logger.debug(f"Probing operator on {M}x{N} grid, min |v| = {np.min(np.abs(v)):.3e}")

    response = _apply_real_operator(apply_operator, ifft2c(v))
    if response.shape != (M, N):
        raise ValueError(
            f"Operator returned shape {response.shape}, expected {(M, N)}"
        )
    ratio = fft2c(response) / v
    lam = _real_spectrum(ratio, imag_tol)

    logger.debug(f"Eigenvalue range [{lam.min():.3e}, {lam.max():.3e}]")
    return lam


def kernel_eigenvalues(kernel: np.ndarray, imag_tol: float = 1e-6) -> np.ndarray:
    """Exact eigenvalues of circular convolution with a corner-origin kernel.

    Under the unitary DFT convention used throughout, convolution with k
    multiplies each coefficient by the unnormalized ``fft2(k)``.

    Args:
        kernel: Real 2D kernel with its origin at index (0, 0), e.g. from
            ``make_kernel``.
        imag_tol: Largest allowed ``max|Im(fft2(k))|``, relative to
            ``max|fft2(k)|``.

    Returns:
        Real (M, N) array ``fft2(kernel).real``.

    Raises:
        OperatorNotDiagonalizable: If the kernel is not point-symmetric, so
            its spectrum has a significant imaginary part.
    """
    return _real_spectrum(np.fft.fft2(kernel), imag_tol)


def laplacian_eigenvalues(M: int, N: int) -> np.ndarray:
    """Eigenvalues of the periodic 5-point Laplacian on an (M, N) grid.

    Π[k, l] = 2 cos(2πk/M) + 2 cos(2πl/N) - 4, which lies in [-8, 0]
    and vanishes only at the zero frequency.
    """
    ky, kx = fourier_meshgrid(M, N)
    return 2.0 * np.cos(2.0 * np.pi * ky) + 2.0 * np.cos(2.0 * np.pi * kx) - 4.0


def blur_eigenvalues(
    kernel_spec: Union[KernelSpec, float],
    M: int,
    N: int,
    rng: RngLike = None,
    method: str = "probe",
) -> np.ndarray:
    """Blur eigenvalues for a kernel description.

    Args:
        kernel_spec: KernelSpec, or a float taken as a Gaussian sigma.
        M: Number of rows.
        N: Number of columns.
        rng: Generator or seed, used by the "probe" method only.
        method: "probe" applies ``apply_periodic_blur`` to a random probe;
            "analytic" transforms the sampled kernel directly.

    Returns:
        Real (M, N) eigenvalue grid.

    Raises:
        OperatorNotDiagonalizable: With either method, if the kernel's
            eigenvalues are complex (e.g. a lopsided three-tap stencil).
    """
    if method == "probe":
        return estimate_operator_eigenvalues(
            lambda x: apply_periodic_blur(x, kernel_spec), M, N, rng=rng
        )
    elif method == "analytic":
        return kernel_eigenvalues(make_kernel(kernel_spec, (M, N)))
    else:
        raise ValueError(f"Unknown method: {method}. Use 'probe' or 'analytic'.")
