"""Channel count and depth normalization for image buffers."""

import cv2
import numpy as np

from .errors import UnsupportedChannelCount, UnsupportedDepth


def channel_count(img: np.ndarray) -> int:
    """Return the number of channels in an image buffer."""
    if img.ndim == 2:
        return 1
    return int(img.shape[2])


def to_three_channel(img: np.ndarray) -> np.ndarray:
    """Return a 3-channel BGR version of the image.

    Args:
        img: Grayscale, BGR or BGRA buffer.

    Returns:
        The input unchanged if it already has 3 channels, otherwise a new
        converted buffer. Alpha is dropped, grayscale is replicated.

    Raises:
        UnsupportedChannelCount: for any other channel count.
    """
    channels = channel_count(img)
    if channels == 3:
        return img
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    if channels == 1:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    raise UnsupportedChannelCount(channels)


def to_single_channel(img: np.ndarray) -> np.ndarray:
    """Return a single-channel luminance version of the image.

    Raises:
        UnsupportedChannelCount: if the image is not 1, 3 or 4 channels.
    """
    channels = channel_count(img)
    if channels == 1:
        # (H, W, 1) buffers are flattened so every 1-channel result is 2-D
        return img if img.ndim == 2 else img[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    raise UnsupportedChannelCount(channels)


def to_8bit(img: np.ndarray) -> np.ndarray:
    """Reduce a decoded image to 8-bit elements.

    16-bit images are rescaled to the 0-255 range, float images are assumed
    to hold values in [0, 1].
    """
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return cv2.convertScaleAbs(img, alpha=255.0 / 65535.0)
    if np.issubdtype(img.dtype, np.floating):
        # NaN maps to 0; clipping before scaling keeps huge values finite
        unit = np.clip(np.nan_to_num(img, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)
        return (unit * 255.0 + 0.5).astype(np.uint8)
    raise UnsupportedDepth(img.dtype)
