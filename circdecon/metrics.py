"""Image quality measures for restoration experiments."""

import numpy as np

from .errors import ShapeMismatch

__all__ = ["relative_error", "gradient_energy", "psnr"]


def _check_same_shape(estimate: np.ndarray, truth: np.ndarray) -> None:
    if estimate.shape != truth.shape:
        raise ShapeMismatch(
            f"Estimate shape {estimate.shape} does not match truth shape {truth.shape}",
            estimate.shape,
            truth.shape,
        )


def relative_error(estimate: np.ndarray, truth: np.ndarray) -> float:
    """Relative L2 error ||estimate - truth|| / ||truth||."""
    estimate = np.asarray(estimate)
    truth = np.asarray(truth)
    _check_same_shape(estimate, truth)

    truth_norm = np.linalg.norm(truth)
    if truth_norm == 0:
        raise ValueError("Relative error is undefined for an all-zero truth image")
    return float(np.linalg.norm(estimate - truth) / truth_norm)


def gradient_energy(image: np.ndarray) -> float:
    """Sum of squared circular forward differences along both axes.

    Used as the smoothness measure of a restored image: lower is smoother.
    """
    image = np.asarray(image)
    d_y = np.roll(image, -1, axis=0) - image
    d_x = np.roll(image, -1, axis=1) - image
    return float(np.sum(d_y**2) + np.sum(d_x**2))


def psnr(estimate: np.ndarray, truth: np.ndarray, data_range: float = 1.0) -> float:
    """Peak signal-to-noise ratio in dB.

    Args:
        estimate: Restored image.
        truth: Reference image.
        data_range: Peak-to-peak range of the reference. Default 1.0 for
            images normalized to [0, 1].

    Returns:
        PSNR in dB; ``inf`` for identical images.
    """
    estimate = np.asarray(estimate)
    truth = np.asarray(truth)
    _check_same_shape(estimate, truth)
    if data_range <= 0:
        raise ValueError(f"data_range must be positive, got {data_range}")

    mse = np.mean((estimate - truth) ** 2)
    if mse == 0:
        return float("inf")
    return float(10.0 * np.log10(data_range**2 / mse))
