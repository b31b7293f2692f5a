"""Synthetic test problems for deblurring experiments.

Example:
    >>> import numpy as np
    >>> from toy import make_test_image, add_gaussian_noise
    >>> from circdecon import KernelSpec, apply_periodic_blur, deblur
    >>>
    >>> rng = np.random.default_rng(0)
    >>> x_true = make_test_image(64, 64, kind="blocks")
    >>> spec = KernelSpec.gaussian(5.0)
    >>> observed = add_gaussian_noise(apply_periodic_blur(x_true, spec), 1e-3, rng=rng)
    >>> result = deblur(observed, spec, gamma=0.01, rng=rng, truth=x_true)
"""

from .images import (
    make_test_image,
    add_gaussian_noise,
    IMAGE_KINDS,
)

__all__ = [
    "make_test_image",
    "add_gaussian_noise",
    "IMAGE_KINDS",
]
