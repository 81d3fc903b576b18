"""Dispatch a filter configuration to the matching OpenCV transform."""

import math
from dataclasses import dataclass

import cv2
import numpy as np

from .channels import to_single_channel, to_three_channel
from .config import BinarizeParams, BlurParams, EdgeParams, FilterConfig, Operation
from .errors import NoOutputProduced, ProcessingError


@dataclass
class FilterResult:
    """Output of a filter run.

    ``detail`` holds the derived parameter worth reporting: the kernel size
    for blur and the threshold OpenCV actually applied for binarize (the
    computed one when Otsu is used). It is None for edge detection.
    """

    operation: Operation
    image: np.ndarray
    detail: int | float | None = None


def kernel_size(sigma: float) -> int:
    """Odd Gaussian kernel size covering +-3 sigma."""
    k = 1 + 2 * math.ceil(3.0 * sigma)
    if k % 2 == 0:
        k += 1
    return k


def gaussian_blur(img: np.ndarray, params: BlurParams) -> tuple[np.ndarray, int]:
    """Blur a 3-channel copy of ``img``; returns the image and kernel size used."""
    bgr = to_three_channel(img)
    ksize = kernel_size(params.sigma)
    out = cv2.GaussianBlur(
        bgr,
        (ksize, ksize),
        params.sigma,
        sigmaY=params.sigma,
        borderType=cv2.BORDER_DEFAULT,
    )
    return out, ksize


def detect_edges(img: np.ndarray, params: EdgeParams) -> np.ndarray:
    """Canny edges of the luminance image, 0 or 255 per pixel."""
    gray = to_single_channel(img)
    return cv2.Canny(
        gray,
        params.low,
        params.high,
        apertureSize=params.aperture,
        L2gradient=params.l2_gradient,
    )


def binarize(img: np.ndarray, params: BinarizeParams) -> tuple[np.ndarray, float]:
    """Threshold the luminance image.

    Pixels above the threshold become 255 (0 when inverted). With ``otsu`` set
    the threshold is computed from the histogram and ``params.threshold`` is
    ignored.

    Returns:
        The binary image and the threshold that was applied.
    """
    gray = to_single_channel(img)
    thresh_type = cv2.THRESH_BINARY_INV if params.invert else cv2.THRESH_BINARY
    thresh = 0.0 if params.otsu else float(params.threshold)
    if params.otsu:
        thresh_type |= cv2.THRESH_OTSU
    used, out = cv2.threshold(gray, thresh, 255.0, thresh_type)
    return out, used


def apply_filter(config: FilterConfig, img: np.ndarray) -> FilterResult:
    """Run the operation selected by ``config`` on ``img``.

    Raises:
        NoOutputProduced: if the transform yielded no image.
        UnsupportedChannelCount: if ``img`` cannot be normalized.
        ProcessingError: if OpenCV rejects the image or parameters.
    """
    params = config.params
    out: np.ndarray | None = None
    detail: int | float | None = None

    try:
        if isinstance(params, BlurParams):
            out, detail = gaussian_blur(img, params)
        elif isinstance(params, EdgeParams):
            out = detect_edges(img, params)
        elif isinstance(params, BinarizeParams):
            out, detail = binarize(img, params)
    except cv2.error as e:
        raise ProcessingError(f"{config.operation.value} failed: {str(e).strip()}") from e

    if out is None or out.size == 0:
        raise NoOutputProduced("No output produced.")

    return FilterResult(operation=config.operation, image=out, detail=detail)
