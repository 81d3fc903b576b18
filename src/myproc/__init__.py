"""Command-line image filters (Gaussian blur, Canny edges, binarize) on OpenCV."""

from .channels import channel_count, to_8bit, to_single_channel, to_three_channel
from .cli import main, profile_main, run
from .config import (
    BinarizeParams,
    BlurParams,
    EdgeParams,
    FilterConfig,
    Operation,
    ProfileConfig,
    parse_args,
    parse_profile_args,
)
from .errors import (
    ImageIOError,
    InvalidParameter,
    MissingArgument,
    MyProcError,
    NoOutputProduced,
    ProcessingError,
    ReadFailure,
    UnsupportedChannelCount,
    UnsupportedDepth,
    UnsupportedOperation,
    UsageError,
    WriteFailure,
)
from .imageio import read_image, write_image
from .operations import FilterResult, apply_filter, kernel_size
from .profile import (
    LineProfile,
    PixelSample,
    extract_profile,
    luminance,
    sample_pixel,
    write_pixel_csv,
    write_profile_csv,
)

__all__ = [
    "FilterConfig",
    "ProfileConfig",
    "Operation",
    "BlurParams",
    "EdgeParams",
    "BinarizeParams",
    "parse_args",
    "parse_profile_args",
    "channel_count",
    "to_three_channel",
    "to_single_channel",
    "to_8bit",
    "FilterResult",
    "apply_filter",
    "kernel_size",
    "read_image",
    "write_image",
    "LineProfile",
    "extract_profile",
    "write_profile_csv",
    "PixelSample",
    "sample_pixel",
    "write_pixel_csv",
    "luminance",
    "run",
    "main",
    "profile_main",
    "MyProcError",
    "UsageError",
    "MissingArgument",
    "UnsupportedOperation",
    "InvalidParameter",
    "ImageIOError",
    "ReadFailure",
    "WriteFailure",
    "ProcessingError",
    "UnsupportedChannelCount",
    "UnsupportedDepth",
    "NoOutputProduced",
]
