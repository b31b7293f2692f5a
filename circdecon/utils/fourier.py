"""Fourier transform utilities.

All 2D transforms here use unitary ("ortho") normalization, so that
``ifft2c(fft2c(x)) == x`` and Parseval's identity holds without scale
factors. Under this convention, circular convolution with a kernel ``k``
becomes element-wise multiplication by the *unnormalized* ``fft2(k)``.
"""

import numpy as np

__all__ = ["fourier_meshgrid", "fft2c", "ifft2c"]


def fft2c(x: np.ndarray) -> np.ndarray:
    """Unitary 2D FFT over the last two axes."""
    return np.fft.fft2(x, norm="ortho")


def ifft2c(x: np.ndarray) -> np.ndarray:
    """Unitary inverse 2D FFT over the last two axes."""
    return np.fft.ifft2(x, norm="ortho")


def fourier_meshgrid(M: int, N: int) -> tuple[np.ndarray, np.ndarray]:
    """Row and column frequencies of an (M, N) grid.

    Returns:
        (ky, kx), each of shape (M, N), in cycles per sample and
        ``numpy.fft`` ordering.

    Example:
        >>> ky, kx = fourier_meshgrid(64, 64)
    """
    ky, kx = np.meshgrid(np.fft.fftfreq(M), np.fft.fftfreq(N), indexing="ij")
    return ky, kx
