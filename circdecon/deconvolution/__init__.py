"""Regularized deconvolution for periodic (BCCB) blur.

The deconvolution problem is formulated as:
    y = A x + noise

where:
    - y: observed blurred image
    - x: unknown original image
    - A: periodic blur (circular convolution), diagonal in the 2D DFT basis

The restored image minimizes ||A x - y||^2 + gamma ||L x||^2 with L the
periodic Laplacian, computed in closed form frequency by frequency.

Example:
    >>> import numpy as np
    >>> from circdecon.deconvolution import (
    ...     KernelSpec, apply_periodic_blur, blur_eigenvalues,
    ...     laplacian_eigenvalues, solve_regularized,
    ... )
    >>>
    >>> spec = KernelSpec.gaussian(5.0)
    >>> observed = apply_periodic_blur(image, spec) + 1e-3 * noise
    >>> lam = blur_eigenvalues(spec, *observed.shape, rng=np.random.default_rng(0))
    >>> pi = laplacian_eigenvalues(*observed.shape)
    >>> restored = solve_regularized(observed, lam, pi, gamma=0.01)

The PyTorch backend lives in ``circdecon.deconvolution.torch_ops`` and is
imported explicitly.
"""

from .base import (
    DeconvolutionResult,
)
from .operators import (
    KernelSpec,
    make_kernel,
    apply_periodic_blur,
    apply_periodic_laplacian,
    convolve_periodic,
)
from .eigen import (
    estimate_operator_eigenvalues,
    kernel_eigenvalues,
    laplacian_eigenvalues,
    blur_eigenvalues,
)
from .tikhonov import (
    solve_regularized,
    deblur,
    sweep_gamma,
)

__all__ = [
    # Base types
    "DeconvolutionResult",
    # Operators
    "KernelSpec",
    "make_kernel",
    "apply_periodic_blur",
    "apply_periodic_laplacian",
    "convolve_periodic",
    # Eigenvalues
    "estimate_operator_eigenvalues",
    "kernel_eigenvalues",
    "laplacian_eigenvalues",
    "blur_eigenvalues",
    # Tikhonov
    "solve_regularized",
    "deblur",
    "sweep_gamma",
]
