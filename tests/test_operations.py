"""Tests for myproc.operations module."""

from pathlib import Path
from unittest.mock import patch

import cv2
import numpy as np
import pytest

from myproc.config import (
    MAX_KERNEL_SIZE,
    MAX_SIGMA,
    BinarizeParams,
    BlurParams,
    EdgeParams,
    FilterConfig,
    Operation,
)
from myproc.errors import NoOutputProduced, ProcessingError, UnsupportedChannelCount
from myproc.operations import apply_filter, binarize, detect_edges, gaussian_blur, kernel_size


def _config(params: BlurParams | EdgeParams | BinarizeParams) -> FilterConfig:
    return FilterConfig(Path("in.png"), Path("out.png"), params)


@pytest.fixture
def gray_gradient() -> np.ndarray:
    """Horizontal 0..255 ramp, 16 rows high."""
    return np.tile(np.arange(256, dtype=np.uint8), (16, 1))


@pytest.fixture
def white_square() -> np.ndarray:
    """Black BGR canvas with a filled white square in the middle."""
    img = np.zeros((64, 64, 3), dtype=np.uint8)
    img[16:48, 16:48] = 255
    return img


class TestKernelSize:
    """Tests for kernel_size function."""

    @pytest.mark.parametrize(
        ("sigma", "expected"),
        [(0.1, 3), (1.0, 7), (1.5, 11), (2.0, 13), (2.1, 15)],
    )
    def test_known_values(self, sigma: float, expected: int) -> None:
        """k = 1 + 2 * ceil(3 * sigma)."""
        assert kernel_size(sigma) == expected

    @pytest.mark.parametrize("sigma", [1e-6, 0.01, 0.33, 0.5, 0.77, 1.5, 3.3, 10.0, 42.42])
    def test_odd_and_at_least_three(self, sigma: float) -> None:
        """Kernel size is always odd and at least 3."""
        k = kernel_size(sigma)
        assert k % 2 == 1
        assert k >= 3

    def test_largest_accepted_sigma_fits_int32(self) -> None:
        """The largest accepted sigma yields a kernel that still fits a 32-bit int."""
        assert kernel_size(MAX_SIGMA) == MAX_KERNEL_SIZE == 2**31 - 1


class TestGaussianBlur:
    """Tests for gaussian_blur function."""

    def test_output_is_three_channel_same_size(self, gray_gradient: np.ndarray) -> None:
        """Grayscale input is blurred into a 3-channel image of the same size."""
        out, ksize = gaussian_blur(gray_gradient, BlurParams(sigma=2.0))

        assert out.shape == (16, 256, 3)
        assert out.dtype == np.uint8
        assert ksize == 13

    def test_constant_image_unchanged(self) -> None:
        """Blurring a flat image leaves it flat, including at the borders."""
        img = np.full((20, 30, 3), 77, dtype=np.uint8)
        out, _ = gaussian_blur(img, BlurParams(sigma=3.0))
        assert np.abs(out.astype(int) - 77).max() <= 1

    def test_alpha_dropped(self) -> None:
        """BGRA input produces BGR output."""
        img = np.zeros((10, 10, 4), dtype=np.uint8)
        out, _ = gaussian_blur(img, BlurParams())
        assert out.shape == (10, 10, 3)

    def test_smooths_edges(self, white_square: np.ndarray) -> None:
        """A hard edge gets intermediate values after blurring."""
        out, _ = gaussian_blur(white_square, BlurParams(sigma=2.0))
        row = out[32, :, 0]

        assert 0 < row[16] < 255
        assert row[32] >= 254
        assert row[0] == 0


class TestDetectEdges:
    """Tests for detect_edges function."""

    def test_binary_single_channel_output(self, white_square: np.ndarray) -> None:
        """Canny returns a 2-D map of 0 and 255 only."""
        out = detect_edges(white_square, EdgeParams())

        assert out.shape == (64, 64)
        assert set(np.unique(out).tolist()) == {0, 255}

    def test_edges_on_square_border(self, white_square: np.ndarray) -> None:
        """Edges are found near the square's outline and nowhere in flat areas."""
        out = detect_edges(white_square, EdgeParams())

        assert out[32, 14:18].any()
        assert not out[32, 24:40].any()
        assert not out[0:8, 0:8].any()

    def test_flat_image_has_no_edges(self) -> None:
        """A uniform image has no edges."""
        out = detect_edges(np.full((32, 32), 128, dtype=np.uint8), EdgeParams())
        assert not out.any()


class TestBinarize:
    """Tests for binarize function."""

    def test_fixed_threshold(self, gray_gradient: np.ndarray) -> None:
        """Pixels strictly above the threshold become 255."""
        out, used = binarize(gray_gradient, BinarizeParams(threshold=100))

        assert used == 100
        expected = np.where(gray_gradient > 100, 255, 0).astype(np.uint8)
        np.testing.assert_array_equal(out, expected)

    @pytest.mark.parametrize("threshold", [0, 1, 127, 128, 254, 255])
    def test_inverted_is_complement(self, gray_gradient: np.ndarray, threshold: int) -> None:
        """Inverted output swaps 0 and 255 for the same threshold."""
        normal, _ = binarize(gray_gradient, BinarizeParams(threshold=threshold))
        inverted, _ = binarize(gray_gradient, BinarizeParams(threshold=threshold, invert=True))

        np.testing.assert_array_equal(inverted, 255 - normal)

    def test_color_input_uses_luminance(self) -> None:
        """Color images are thresholded on their luminance."""
        img = np.zeros((1, 2, 3), dtype=np.uint8)
        img[0, 0] = (0, 0, 255)  # red, luminance ~76
        img[0, 1] = (0, 255, 0)  # green, luminance ~150

        out, _ = binarize(img, BinarizeParams(threshold=100))

        assert out.tolist() == [[0, 255]]

    def test_otsu_ignores_supplied_threshold(self) -> None:
        """Otsu separates a bimodal image regardless of -th."""
        img = np.full((10, 10), 50, dtype=np.uint8)
        img[:, 5:] = 200

        out, used = binarize(img, BinarizeParams(threshold=250, otsu=True))

        assert 50 <= used < 200
        expected = np.where(img > used, 255, 0).astype(np.uint8)
        np.testing.assert_array_equal(out, expected)
        assert out[:, 5:].all()
        assert not out[:, :5].any()


class TestApplyFilter:
    """Tests for apply_filter dispatch."""

    def test_blur_dispatch(self, white_square: np.ndarray) -> None:
        """Blur config yields a blur result with the kernel size."""
        result = apply_filter(_config(BlurParams(sigma=1.5)), white_square)

        assert result.operation is Operation.BLUR
        assert result.detail == 11
        assert result.image.shape == white_square.shape

    def test_edge_dispatch(self, white_square: np.ndarray) -> None:
        """Edge config yields a 1-channel result."""
        result = apply_filter(_config(EdgeParams()), white_square)

        assert result.operation is Operation.EDGE
        assert result.detail is None
        assert result.image.ndim == 2

    def test_binarize_dispatch(self, white_square: np.ndarray) -> None:
        """Binarize config yields the applied threshold."""
        result = apply_filter(_config(BinarizeParams(threshold=10)), white_square)

        assert result.operation is Operation.BINARIZE
        assert result.detail == 10
        assert result.image.ndim == 2

    def test_source_not_mutated(self, white_square: np.ndarray) -> None:
        """The input buffer is never modified."""
        before = white_square.copy()
        for params in (BlurParams(), EdgeParams(), BinarizeParams()):
            apply_filter(_config(params), white_square)
        np.testing.assert_array_equal(white_square, before)

    def test_unsupported_channels(self) -> None:
        """Two-channel images cannot be normalized."""
        with pytest.raises(UnsupportedChannelCount):
            apply_filter(_config(EdgeParams()), np.zeros((4, 4, 2), dtype=np.uint8))

    def test_empty_output_raises(self, white_square: np.ndarray) -> None:
        """An empty transform result is reported as NoOutputProduced."""
        empty = np.zeros((0, 0), dtype=np.uint8)
        with patch("myproc.operations.cv2.Canny", return_value=empty):
            with pytest.raises(NoOutputProduced):
                apply_filter(_config(EdgeParams()), white_square)

    def test_opencv_error_becomes_processing_error(self, white_square: np.ndarray) -> None:
        """An OpenCV failure maps to ProcessingError (exit code 4)."""
        with patch("myproc.operations.cv2.GaussianBlur", side_effect=cv2.error("bad kernel")):
            with pytest.raises(ProcessingError, match="blur failed") as exc_info:
                apply_filter(_config(BlurParams(sigma=2.0)), white_square)

        assert exc_info.value.exit_code == 4
        assert isinstance(exc_info.value.__cause__, cv2.error)
