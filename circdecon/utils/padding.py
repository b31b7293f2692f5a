"""Placing small centred kernels on a full periodic grid."""

import numpy as np

__all__ = ["place_at_origin"]


def place_at_origin(taps: np.ndarray, shape: tuple[int, ...]) -> np.ndarray:
    """Embed centred taps in a zero grid with the centre tap at index 0.

    The tap at index ``n // 2`` along each axis lands on index 0, and taps at
    negative offsets wrap to the high-index end. This is the layout FFT-based
    circular convolution expects. Integer rolls keep every tap exact.

    Args:
        taps: Kernel taps, origin-centred, one axis per grid axis.
        shape: Grid shape, at least as large as ``taps`` along every axis.

    Returns:
        float array of the given shape.

    Raises:
        ValueError: If the dimensions differ or the taps do not fit.

    Example:
        >>> taps = np.array([[0.0, 0.25, 0.0], [0.25, 0.0, 0.25], [0.0, 0.25, 0.0]])
        >>> grid = place_at_origin(taps, (64, 64))
        >>> grid[0, 1], grid[0, -1]
        (0.25, 0.25)
    """
    taps = np.asarray(taps, dtype=float)
    shape = tuple(shape)
    if taps.ndim != len(shape):
        raise ValueError(
            f"Kernel has {taps.ndim} dimensions but the grid has {len(shape)}"
        )
    if any(t > s for t, s in zip(taps.shape, shape)):
        raise ValueError(f"Kernel shape {taps.shape} exceeds grid shape {shape}")

    grid = np.zeros(shape)
    grid[tuple(slice(0, t) for t in taps.shape)] = taps
    shifts = tuple(-(t // 2) for t in taps.shape)
    return np.roll(grid, shifts, axis=tuple(range(taps.ndim)))
