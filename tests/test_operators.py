"""Tests for periodic blur operators, kernel construction and padding."""

import numpy as np
import pytest

from circdecon.deconvolution import (
    KernelSpec,
    apply_periodic_blur,
    apply_periodic_laplacian,
    convolve_periodic,
    make_kernel,
)
from circdecon.utils import fft2c, fourier_meshgrid, ifft2c, place_at_origin


def dot_product_test(forward, x_shape, rtol=1e-10, seed=42):
    """Check that a real operator is self-adjoint: <A x, y> = <x, A y>.

    Symmetric kernels give symmetric BCCB matrices.
    """
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(x_shape)
    y = rng.standard_normal(x_shape)

    lhs = np.sum(forward(x) * y)
    rhs = np.sum(x * forward(y))
    rel_error = abs(lhs - rhs) / (0.5 * (abs(lhs) + abs(rhs)) + 1e-12)

    assert rel_error < rtol, (
        f"Dot-product test failed: <Ax, y> = {lhs:.12e}, <x, Ay> = {rhs:.12e}, "
        f"relative error = {rel_error:.2e} (tolerance = {rtol:.2e})"
    )


class TestKernelSpec:
    """Validation of kernel descriptions."""

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown kernel kind"):
            KernelSpec("motion")

    @pytest.mark.parametrize("sigma", [None, 0.0, -1.0])
    def test_gaussian_sigma(self, sigma):
        with pytest.raises(ValueError, match="sigma must be positive"):
            KernelSpec("gaussian", sigma=sigma)

    @pytest.mark.parametrize("size", [None, 0, 4])
    def test_box_size(self, size):
        with pytest.raises(ValueError, match="positive odd integer"):
            KernelSpec("box", size=size)

    def test_three_tap_weights(self):
        with pytest.raises(ValueError, match="exactly 3 weights"):
            KernelSpec("three_tap", weights=(0.5, 0.5))

    def test_axis(self):
        with pytest.raises(ValueError, match="Axis must be 0 or 1"):
            KernelSpec("three_tap", weights=(0.25, 0.5, 0.25), axis=2)

    def test_frozen(self):
        """Specs are immutable."""
        spec = KernelSpec.gaussian(2.0)
        with pytest.raises(AttributeError):
            spec.sigma = 3.0

    def test_symmetry(self):
        assert KernelSpec.gaussian(1.0).is_symmetric
        assert KernelSpec("three_tap", weights=[0.25, 0.5, 0.25]).is_symmetric
        assert not KernelSpec("three_tap", weights=(0.1, 0.5, 0.4)).is_symmetric


class TestMakeKernel:
    """Kernels sampled on the full grid with origin at (0, 0)."""

    @pytest.mark.parametrize(
        "spec",
        [KernelSpec.gaussian(0.7), KernelSpec.gaussian(5.0), KernelSpec("box", size=3), KernelSpec("identity")],
    )
    def test_unit_sum(self, spec):
        kernel = make_kernel(spec, (64, 48))

        assert kernel.shape == (64, 48)
        assert kernel.sum() == pytest.approx(1.0)

    def test_gaussian_peak_at_origin(self):
        """Largest tap sits at (0, 0) and the kernel is point-symmetric."""
        kernel = make_kernel(3.0, (32, 32))

        assert np.unravel_index(np.argmax(kernel), kernel.shape) == (0, 0)
        flipped = np.roll(kernel[::-1, ::-1], 1, axis=(0, 1))
        np.testing.assert_allclose(kernel, flipped, atol=1e-15)

    def test_gaussian_spectrum_is_real(self):
        kernel = make_kernel(KernelSpec.gaussian(4.0), (64, 64))

        assert np.max(np.abs(np.fft.fft2(kernel).imag)) < 1e-12

    def test_three_tap_layout(self):
        kernel = make_kernel(KernelSpec("three_tap", weights=(0.1, 0.7, 0.2)), (8, 8))

        assert kernel[0, 0] == pytest.approx(0.7)
        assert kernel[0, -1] == pytest.approx(0.1)
        assert kernel[0, 1] == pytest.approx(0.2)
        assert np.count_nonzero(kernel) == 3

    def test_box_larger_than_grid(self):
        with pytest.raises(ValueError, match="exceeds grid shape"):
            make_kernel(KernelSpec("box", size=9), (8, 8))


class TestPeriodicBlur:
    """Forward blur with wraparound."""

    def test_gaussian_filter_equals_fft_convolution(self):
        """scipy's wrapped Gaussian filter and FFT convolution agree."""
        rng = np.random.default_rng(0)
        image = rng.random((40, 56))
        spec = KernelSpec.gaussian(2.5)

        np.testing.assert_allclose(
            apply_periodic_blur(image, spec),
            convolve_periodic(image, make_kernel(spec, image.shape)),
            atol=1e-12,
        )

    def test_wraparound(self):
        """A point at the corner spreads to the opposite edges."""
        image = np.zeros((32, 32))
        image[0, 0] = 1.0

        blurred = apply_periodic_blur(image, 2.0)

        assert blurred[-1, -1] > 0.01
        assert blurred[-1, 0] == pytest.approx(blurred[1, 0])
        assert blurred.sum() == pytest.approx(1.0)

    def test_input_not_modified(self):
        image = np.random.default_rng(1).random((16, 16))
        original = image.copy()

        for spec in (2.0, KernelSpec("box", size=3), KernelSpec("identity")):
            out = apply_periodic_blur(image, spec)
            assert out is not image

        np.testing.assert_array_equal(image, original)

    def test_accepts_integer_image(self):
        image = np.full((16, 16), 3, dtype=np.uint8)

        blurred = apply_periodic_blur(image, 1.0)

        np.testing.assert_allclose(blurred, 3.0)

    @pytest.mark.parametrize(
        "spec", [KernelSpec.gaussian(1.5), KernelSpec("box", size=5), KernelSpec("three_tap", weights=(0.3, 0.4, 0.3))]
    )
    def test_symmetric_kernels_are_self_adjoint(self, spec):
        dot_product_test(lambda x: apply_periodic_blur(x, spec), (24, 32))

    def test_rejects_non_2d(self):
        with pytest.raises(ValueError, match="Expected 2D image"):
            apply_periodic_blur(np.zeros((4, 4, 4)), 1.0)

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="empty"):
            apply_periodic_blur(np.zeros((0, 4)), 1.0)

    def test_convolve_shape_mismatch(self):
        with pytest.raises(ValueError, match="must match image shape"):
            convolve_periodic(np.zeros((8, 8)), np.zeros((8, 4)))


class TestLaplacian:
    """Periodic 5-point Laplacian."""

    def test_constant_image(self):
        np.testing.assert_allclose(apply_periodic_laplacian(np.full((8, 8), 0.4)), 0.0, atol=1e-15)

    def test_stencil_wraps(self):
        image = np.zeros((6, 6))
        image[0, 0] = 1.0

        lap = apply_periodic_laplacian(image)

        assert lap[0, 0] == -4.0
        for idx in [(1, 0), (-1, 0), (0, 1), (0, -1)]:
            assert lap[idx] == 1.0
        assert lap.sum() == 0.0

    def test_self_adjoint(self):
        dot_product_test(apply_periodic_laplacian, (16, 20))


class TestFourierUtils:
    """Unitary transforms, frequency grids and kernel placement."""

    def test_unitary_round_trip(self):
        x = np.random.default_rng(2).random((12, 18))

        np.testing.assert_allclose(ifft2c(fft2c(x)).real, x, atol=1e-14)
        assert np.linalg.norm(fft2c(x)) == pytest.approx(np.linalg.norm(x))

    def test_frequency_grid(self):
        """Row frequencies vary down axis 0, column frequencies along axis 1."""
        ky, kx = fourier_meshgrid(4, 6)

        assert ky.shape == kx.shape == (4, 6)
        np.testing.assert_array_equal(ky[:, 0], [0.0, 0.25, -0.5, -0.25])
        np.testing.assert_array_equal(kx[0], np.fft.fftfreq(6))
        assert np.all(ky[:, 1:] == ky[:, :1])

    def test_place_at_origin(self):
        taps = np.arange(1.0, 10.0).reshape(3, 3)

        grid = place_at_origin(taps, (8, 8))

        assert grid[0, 0] == 5.0
        assert grid[-1, -1] == 1.0
        assert grid[1, 1] == 9.0
        assert grid.sum() == taps.sum()

    def test_place_at_origin_one_axis(self):
        """A (1, 3) stencil only occupies row 0."""
        grid = place_at_origin(np.array([[0.1, 0.7, 0.2]]), (4, 5))

        np.testing.assert_allclose(grid[0], [0.7, 0.2, 0.0, 0.0, 0.1])
        assert np.count_nonzero(grid[1:]) == 0

    def test_place_at_origin_errors(self):
        with pytest.raises(ValueError, match="exceeds grid shape"):
            place_at_origin(np.ones((5, 5)), (3, 8))
        with pytest.raises(ValueError, match="dimensions"):
            place_at_origin(np.ones((3, 3)), (8, 8, 8))
