"""Exceptions raised by circdecon."""

__all__ = ["ShapeMismatch", "OperatorNotDiagonalizable"]


class ShapeMismatch(ValueError):
    """Arrays that must share a grid have different shapes."""

    def __init__(self, message: str, *shapes: tuple):
        super().__init__(message)
        self.shapes = shapes

    def __reduce__(self):
        return self.__class__, (self.args[0], *self.shapes)


class OperatorNotDiagonalizable(ValueError):
    """Probed operator is not a real circulant (imaginary eigenvalues).

    Attributes:
        max_imag: Largest imaginary part found in the probed ratio.
        tolerance: Threshold it was compared against.
    """

    def __init__(self, max_imag: float, tolerance: float):
        super().__init__(
            f"Operator is not diagonal in the 2D Fourier basis with real "
            f"eigenvalues: max |Im| = {max_imag:.3e} exceeds tolerance "
            f"{tolerance:.3e}"
        )
        self.max_imag = max_imag
        self.tolerance = tolerance

    def __reduce__(self):
        return self.__class__, (self.max_imag, self.tolerance)
