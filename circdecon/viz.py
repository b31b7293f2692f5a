"""Figures for deblurring experiments (requires matplotlib)."""

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import numpy as np

from .metrics import relative_error

logger = logging.getLogger(__name__)

__all__ = ["plot_restoration", "plot_eigenvalues"]


def _finish(fig, output_path: Optional[Union[str, Path]], show: bool) -> None:
    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        logger.info(f"Saved figure to {output_path}")

    if show:
        backend = plt.get_backend()
        if backend.lower() != "agg":
            plt.show()
        else:
            logger.debug(f"Skipping plt.show() - non-interactive backend: {backend}")
    else:
        plt.close(fig)


def plot_restoration(
    truth: np.ndarray,
    observed: np.ndarray,
    restored: np.ndarray,
    title: Optional[str] = None,
    output_path: Optional[Union[str, Path]] = None,
    show: bool = False,
):
    """Side-by-side view of ground truth, observation and restoration.

    Panel titles carry the relative error of the observation and of the
    restoration against the truth.

    Returns:
        The matplotlib Figure.
    """
    fig, axes = plt.subplots(1, 3, figsize=(12, 4))
    panels = [
        ("Ground truth", truth),
        (f"Observed (rel. err {relative_error(observed, truth):.3f})", observed),
        (f"Restored (rel. err {relative_error(restored, truth):.3f})", restored),
    ]
    for ax, (label, img) in zip(axes, panels):
        ax.imshow(img, cmap="gray", vmin=0.0, vmax=1.0)
        ax.set_title(label, fontweight="bold")
        ax.axis("off")

    if title:
        fig.suptitle(title)
    fig.tight_layout()
    _finish(fig, output_path, show)
    return fig


def plot_eigenvalues(
    lam: np.ndarray,
    pi: Optional[np.ndarray] = None,
    output_path: Optional[Union[str, Path]] = None,
    show: bool = False,
):
    """Show |Λ| (and |Π|) on a log scale, zero frequency at the centre.

    Returns:
        The matplotlib Figure.
    """
    grids = [("|Λ| (blur)", lam)]
    if pi is not None:
        grids.append(("|Π| (regularization)", pi))

    fig, axes = plt.subplots(1, len(grids), figsize=(5 * len(grids), 4), squeeze=False)
    tiny = np.finfo(float).tiny
    for ax, (label, grid) in zip(axes[0], grids):
        im = ax.imshow(np.log10(np.abs(np.fft.fftshift(grid)) + tiny), cmap="viridis")
        ax.set_title(label, fontweight="bold")
        ax.set_xlabel("kx", fontweight="bold")
        ax.set_ylabel("ky", fontweight="bold")
        plt.colorbar(im, ax=ax, label="log10")

    fig.tight_layout()
    _finish(fig, output_path, show)
    return fig
