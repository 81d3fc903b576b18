"""Intensity line profiles and single-pixel readouts."""

import csv
from dataclasses import dataclass
from typing import Literal, TextIO

import numpy as np

from .channels import channel_count, to_three_channel
from .errors import InvalidParameter, UnsupportedChannelCount

Axis = Literal["row", "column"]


@dataclass
class LineProfile:
    """Pixel values sampled along one row or column."""

    axis: Axis
    index: int
    columns: tuple[str, ...]
    values: np.ndarray  # shape (N, len(columns))

    def __len__(self) -> int:
        return int(self.values.shape[0])


@dataclass
class PixelSample:
    """Color and luminance of a single pixel."""

    x: int
    y: int
    r: int
    g: int
    b: int
    gray: int


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))


def luminance(img: np.ndarray) -> np.ndarray:
    """Rounded 0.299R + 0.587G + 0.114B luminance as an int64 array.

    Computed in float64 and rounded half to even, so values match a plain
    double-precision weighted sum exactly. cv2.cvtColor uses fixed-point
    weights and differs by one on some colors. Grayscale input is returned
    as is.
    """
    channels = channel_count(img)
    if channels == 1:
        return (img if img.ndim == 2 else img[:, :, 0]).astype(np.int64)
    if channels not in (3, 4):
        raise UnsupportedChannelCount(channels)

    bgr = img[..., :3].astype(np.float64)
    b, g, r = bgr[..., 0], bgr[..., 1], bgr[..., 2]
    return np.rint(0.299 * r + 0.587 * g + 0.114 * b).astype(np.int64)


def extract_profile(
    img: np.ndarray,
    index: int,
    axis: Axis = "row",
    rgb: bool = False,
) -> LineProfile:
    """Sample one row or column of an image.

    Args:
        img: Decoded 8-bit image with 1, 3 or 4 channels.
        index: Row or column number. Out-of-range values are clamped to the
            nearest edge.
        axis: "row" for a horizontal line, "column" for a vertical one.
        rgb: Report separate R, G, B values instead of luminance.

    Returns:
        The sampled profile, with the index after clamping.
    """
    if axis not in ("row", "column"):
        raise ValueError(f"axis must be 'row' or 'column', got '{axis}'")

    height, width = img.shape[:2]
    limit = height - 1 if axis == "row" else width - 1
    index = _clamp(index, 0, limit)

    if rgb:
        # OpenCV stores BGR; report in R, G, B order
        plane = to_three_channel(img)[:, :, ::-1].astype(np.int64)
        columns: tuple[str, ...] = ("R", "G", "B")
    else:
        plane = luminance(img)[:, :, np.newaxis]
        columns = ("gray",)

    line = plane[index, :, :] if axis == "row" else plane[:, index, :]
    return LineProfile(axis=axis, index=index, columns=columns, values=line)


def sample_pixel(img: np.ndarray, x: int, y: int) -> PixelSample:
    """Read the color and luminance at (x, y).

    Raises:
        InvalidParameter: if the coordinate lies outside the image.
    """
    height, width = img.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise InvalidParameter(f"pixel ({x}, {y}) is outside the {width}x{height} image")

    b, g, r = (int(v) for v in to_three_channel(img)[y, x])
    gray = int(luminance(img[y : y + 1, x : x + 1])[0, 0])
    return PixelSample(x=x, y=y, r=r, g=g, b=b, gray=gray)


def write_profile_csv(profile: LineProfile, stream: TextIO) -> None:
    """Write a profile as CSV with an ``index`` column followed by the values."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["index", *profile.columns])
    for i, row in enumerate(profile.values):
        writer.writerow([i, *(int(v) for v in row)])


def write_pixel_csv(sample: PixelSample, stream: TextIO) -> None:
    """Write a single pixel readout as a two-line CSV."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["x", "y", "R", "G", "B", "gray"])
    writer.writerow([sample.x, sample.y, sample.r, sample.g, sample.b, sample.gray])
