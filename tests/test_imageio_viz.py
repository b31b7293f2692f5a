"""Tests for image I/O and figures."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
from PIL import Image

from circdecon.imageio import load_grayscale, save_grayscale
from circdecon.viz import plot_eigenvalues, plot_restoration
from circdecon.deconvolution import apply_periodic_blur, blur_eigenvalues, laplacian_eigenvalues
from toy import make_test_image


class TestImageIO:
    """Grayscale load/save through Pillow."""

    def test_round_trip(self, tmp_path):
        """Saved then loaded image differs by at most half a quantization step."""
        image = np.random.default_rng(0).random((20, 30))
        path = save_grayscale(image, tmp_path / "out" / "img.png")

        loaded = load_grayscale(path)

        assert loaded.shape == (20, 30)
        assert loaded.dtype == np.float64
        assert np.max(np.abs(loaded - image)) <= 0.5 / 255 + 1e-12

    def test_rgb_converted_to_gray(self, tmp_path):
        rgb = np.zeros((8, 8, 3), dtype=np.uint8)
        rgb[..., 1] = 255
        Image.fromarray(rgb).save(tmp_path / "green.png")

        loaded = load_grayscale(tmp_path / "green.png")

        assert loaded.shape == (8, 8)
        assert 0.0 < loaded.mean() < 1.0

    def test_sixteen_bit_png(self, tmp_path):
        """16-bit grayscale is scaled by 65535, not clipped to 8 bits."""
        ramp = np.linspace(0, 65535, 64).astype(np.uint16).reshape(8, 8)
        Image.fromarray(ramp).save(tmp_path / "ramp16.png")

        loaded = load_grayscale(tmp_path / "ramp16.png")

        np.testing.assert_allclose(loaded, ramp / 65535.0, atol=1e-12)
        assert loaded.min() == 0.0
        assert loaded.max() == 1.0

    def test_float_tiff(self, tmp_path):
        """Floating-point images are read without requantizing."""
        ramp = np.linspace(0.0, 1.0, 64, dtype=np.float32).reshape(8, 8)
        Image.fromarray(ramp).save(tmp_path / "ramp.tif")

        loaded = load_grayscale(tmp_path / "ramp.tif")

        assert loaded.dtype == np.float64
        np.testing.assert_allclose(loaded, ramp, atol=1e-7)

    def test_float_tiff_out_of_range(self, tmp_path):
        Image.fromarray(np.full((4, 4), 3.5, dtype=np.float32)).save(tmp_path / "hot.tif")

        with pytest.raises(ValueError, match=r"outside \[0, 1\]"):
            load_grayscale(tmp_path / "hot.tif")

    def test_clipping(self, tmp_path):
        image = np.array([[-0.5, 0.5], [1.5, 1.0]])

        loaded = load_grayscale(save_grayscale(image, tmp_path / "clip.png"))

        np.testing.assert_allclose(loaded, [[0.0, 128 / 255], [1.0, 1.0]])

    def test_no_clip_rejects_out_of_range(self, tmp_path):
        with pytest.raises(ValueError, match=r"must lie in \[0, 1\]"):
            save_grayscale(np.array([[2.0]]), tmp_path / "bad.png", clip=False)

    def test_rejects_non_finite(self, tmp_path):
        with pytest.raises(ValueError, match="non-finite"):
            save_grayscale(np.array([[np.nan, 0.0]]), tmp_path / "nan.png")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_grayscale(tmp_path / "missing.png")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "notes.png"
        path.write_text("not an image")

        with pytest.raises(ValueError, match="Failed to load image"):
            load_grayscale(path)


class TestFigures:
    """matplotlib figures are written to disk."""

    def test_plot_restoration(self, tmp_path):
        truth = make_test_image(32, 32)
        observed = apply_periodic_blur(truth, 2.0)
        output = tmp_path / "figs" / "restoration.png"

        fig = plot_restoration(truth, observed, truth, title="check", output_path=output)

        assert output.exists()
        assert len(fig.axes) == 3

    def test_plot_eigenvalues(self, tmp_path):
        lam = blur_eigenvalues(2.0, 32, 32, rng=0)
        output = tmp_path / "spectrum.png"

        fig = plot_eigenvalues(lam, laplacian_eigenvalues(32, 32), output_path=output)

        assert output.exists()
        # two images plus their colorbars
        assert len(fig.axes) == 4
