"""Fourier and padding utilities shared by the solver modules."""

from .fourier import fourier_meshgrid, fft2c, ifft2c
from .padding import place_at_origin

__all__ = [
    # Fourier utilities
    "fourier_meshgrid",
    "fft2c",
    "ifft2c",
    # Padding
    "place_at_origin",
]
