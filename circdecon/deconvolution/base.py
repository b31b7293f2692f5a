"""Base types for deconvolution results."""

from dataclasses import dataclass, field
from typing import Any, Optional

__all__ = ["DeconvolutionResult"]


@dataclass
class DeconvolutionResult:
    """Result from a regularized deconvolution.

    Attributes:
        restored: The restored image (NumPy array, or tensor for the
            PyTorch backend).
        gamma: Regularization weight used for the solve.
        relative_error: ``||restored - truth|| / ||truth||`` when a ground
            truth was supplied, otherwise None.
        metadata: Optional algorithm-specific metadata.
    """

    restored: Any
    gamma: float
    relative_error: Optional[float] = None
    metadata: dict = field(default_factory=dict)
