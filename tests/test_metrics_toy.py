"""Tests for image metrics and synthetic test problems."""

import numpy as np
import pytest

from circdecon import ShapeMismatch
from circdecon.metrics import gradient_energy, psnr, relative_error
from toy import IMAGE_KINDS, add_gaussian_noise, make_test_image


class TestMetrics:
    def test_relative_error(self):
        truth = np.ones((4, 4))

        assert relative_error(truth, truth) == 0.0
        assert relative_error(2 * truth, truth) == pytest.approx(1.0)

    def test_relative_error_shape_mismatch(self):
        with pytest.raises(ShapeMismatch):
            relative_error(np.ones((4, 4)), np.ones((4, 5)))

    def test_relative_error_zero_truth(self):
        with pytest.raises(ValueError, match="all-zero"):
            relative_error(np.ones((2, 2)), np.zeros((2, 2)))

    def test_gradient_energy(self):
        assert gradient_energy(np.full((8, 8), 0.7)) == 0.0

        stripes = np.zeros((4, 4))
        stripes[:, 0] = 1.0
        # two jumps per row along x, none along y
        assert gradient_energy(stripes) == pytest.approx(8.0)

    def test_psnr(self):
        truth = np.zeros((10, 10))
        estimate = np.full((10, 10), 0.1)

        assert psnr(truth, truth) == float("inf")
        assert psnr(estimate, truth) == pytest.approx(20.0)
        with pytest.raises(ValueError, match="data_range"):
            psnr(estimate, truth, data_range=0.0)


class TestToyImages:
    @pytest.mark.parametrize("kind", IMAGE_KINDS)
    def test_range_and_shape(self, kind):
        image = make_test_image(48, 64, kind=kind)

        assert image.shape == (48, 64)
        assert image.min() >= 0.0
        assert image.max() <= 1.0
        assert image.std() > 0.0

    def test_deterministic(self):
        np.testing.assert_array_equal(make_test_image(kind="disks"), make_test_image(kind="disks"))

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown image kind"):
            make_test_image(kind="lena")

    def test_too_small(self):
        with pytest.raises(ValueError, match="at least 8x8"):
            make_test_image(4, 4)

    def test_noise_reproducible(self):
        image = make_test_image(32, 32)

        a = add_gaussian_noise(image, 0.1, rng=np.random.default_rng(3))
        b = add_gaussian_noise(image, 0.1, rng=np.random.default_rng(3))

        np.testing.assert_array_equal(a, b)
        assert np.std(a - image) == pytest.approx(0.1, rel=0.1)

    def test_zero_noise(self):
        image = make_test_image(16, 16)

        np.testing.assert_array_equal(add_gaussian_noise(image, 0.0, rng=np.random.default_rng(0)), image)

    def test_negative_noise(self):
        with pytest.raises(ValueError, match="nonnegative"):
            add_gaussian_noise(np.zeros((4, 4)), -0.1)
