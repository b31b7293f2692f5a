"""circdecon - Image deblurring for periodic (BCCB) blur operators.

A spatially invariant blur with wraparound boundaries is a
block-circulant-with-circulant-blocks (BCCB) matrix, diagonalized by the
2D discrete Fourier transform. This library estimates such an operator's
eigenvalues from its action alone and uses them to solve the
Tikhonov-regularized deblurring problem in closed form.

The library is organized into these modules:

- **deconvolution**: operators, eigenvalue probing and the regularized solve
  (NumPy; a PyTorch backend lives in ``deconvolution.torch_ops``)
- **metrics**: relative error, gradient energy, PSNR
- **imageio**: grayscale raster load/save (Pillow)
- **viz**: restoration and spectrum figures (matplotlib, import explicitly)
- **utils**: unitary FFT wrappers, frequency grids, kernel padding

Example:
    >>> import numpy as np
    >>> from circdecon import (
    ...     KernelSpec, apply_periodic_blur, estimate_operator_eigenvalues,
    ...     laplacian_eigenvalues, solve_regularized, relative_error,
    ... )
    >>>
    >>> rng = np.random.default_rng(0)
    >>> spec = KernelSpec.gaussian(5.0)
    >>> observed = apply_periodic_blur(image, spec)
    >>> observed += 1e-3 * rng.standard_normal(observed.shape)
    >>>
    >>> lam = estimate_operator_eigenvalues(
    ...     lambda x: apply_periodic_blur(x, spec), *observed.shape, rng=rng
    ... )
    >>> pi = laplacian_eigenvalues(*observed.shape)
    >>> restored = solve_regularized(observed, lam, pi, gamma=0.01)
    >>> relative_error(restored, image)

Reference:
    Hansen, P.C., Nagy, J.G. and O'Leary, D.P. (2006). "Deblurring Images:
    Matrices, Spectra, and Filtering". SIAM.
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from .errors import ShapeMismatch, OperatorNotDiagonalizable

# =============================================================================
# Deconvolution Module - NumPy path
# =============================================================================
from .deconvolution import (
    DeconvolutionResult,
    KernelSpec,
    make_kernel,
    apply_periodic_blur,
    apply_periodic_laplacian,
    convolve_periodic,
    estimate_operator_eigenvalues,
    kernel_eigenvalues,
    laplacian_eigenvalues,
    blur_eigenvalues,
    solve_regularized,
    deblur,
    sweep_gamma,
)

# =============================================================================
# Metrics and image I/O
# =============================================================================
from .metrics import relative_error, gradient_energy, psnr
from .imageio import load_grayscale, save_grayscale

# =============================================================================
# Utils Module
# =============================================================================
from .utils import fft2c, ifft2c, fourier_meshgrid, place_at_origin

# Note: the PyTorch backend and matplotlib figures are imported explicitly:
#   from circdecon.deconvolution.torch_ops import solve_regularized_torch
#   from circdecon.viz import plot_restoration

__all__ = [
    # Version
    "__version__",
    # Errors
    "ShapeMismatch",
    "OperatorNotDiagonalizable",
    # Deconvolution
    "DeconvolutionResult",
    "KernelSpec",
    "make_kernel",
    "apply_periodic_blur",
    "apply_periodic_laplacian",
    "convolve_periodic",
    "estimate_operator_eigenvalues",
    "kernel_eigenvalues",
    "laplacian_eigenvalues",
    "blur_eigenvalues",
    "solve_regularized",
    "deblur",
    "sweep_gamma",
    # Metrics
    "relative_error",
    "gradient_energy",
    "psnr",
    # Image I/O
    "load_grayscale",
    "save_grayscale",
    # Utils
    "fft2c",
    "ifft2c",
    "fourier_meshgrid",
    "place_at_origin",
]
