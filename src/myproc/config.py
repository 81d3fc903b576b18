"""Argument parsing and the validated filter configuration."""

import argparse
import math
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import NoReturn

from .errors import InvalidParameter, MissingArgument, UnsupportedOperation, UsageError

DEFAULT_SIGMA = 1.5
DEFAULT_THRESHOLD = 128

# Canny settings are fixed; they are not exposed on the command line
CANNY_LOW = 100.0
CANNY_HIGH = 200.0
CANNY_APERTURE = 3
CANNY_L2_GRADIENT = True

# OpenCV kernel sizes are 32-bit ints; 1 + 2*ceil(3*sigma) must stay within that
MAX_KERNEL_SIZE = 2**31 - 1
MAX_SIGMA = (MAX_KERNEL_SIZE - 1) / 6

USAGE = """\
MyProc - simple CLI image processor (OpenCV)

Usage:
  myproc -op blur -sigma 2 -in <input> -out <output>
  myproc -op edge              -in <input> -out <output>
  myproc -op bin  [-th 128] [-otsu] [-inv] -in <input> -out <output>

Options:
  -op <blur|edge|bin>
  -sigma <float>   (blur) Gaussian sigma (default 1.5)
  -th <0..255>     (bin)  fixed threshold (default 128)
  -otsu            (bin)  use Otsu's method (ignore -th)
  -inv             (bin)  invert output (black/white swap)
  -in <path>       input image file (png/jpg/bmp/tif...)
  -out <path>      output image file
"""

PROFILE_USAGE = """\
MyProc profile - export a row/column intensity profile or one pixel as CSV

Usage:
  myproc-profile -in <input> -row <y> [-rgb] [-out <csv>]
  myproc-profile -in <input> -col <x> [-rgb] [-out <csv>]
  myproc-profile -in <input> -x <x> -y <y> [-out <csv>]

Options:
  -row <int>       sample image row y
  -col <int>       sample image column x
  -x, -y <int>     inspect the single pixel at (x, y)
  -rgb             report R,G,B instead of gray
  -in <path>       input image file
  -out <path>      CSV file to write (default: stdout)
"""


class Operation(Enum):
    """Supported image operations, keyed by their -op name."""

    BLUR = "blur"
    EDGE = "edge"
    BINARIZE = "bin"


@dataclass(frozen=True)
class BlurParams:
    """Gaussian blur settings."""

    sigma: float = DEFAULT_SIGMA


@dataclass(frozen=True)
class EdgeParams:
    """Canny edge detection settings."""

    low: float = CANNY_LOW
    high: float = CANNY_HIGH
    aperture: int = CANNY_APERTURE
    l2_gradient: bool = CANNY_L2_GRADIENT


@dataclass(frozen=True)
class BinarizeParams:
    """Binary threshold settings. ``threshold`` is ignored when ``otsu`` is set."""

    threshold: int = DEFAULT_THRESHOLD
    otsu: bool = False
    invert: bool = False


Params = BlurParams | EdgeParams | BinarizeParams

_PARAMS_FOR: dict[type, Operation] = {
    BlurParams: Operation.BLUR,
    EdgeParams: Operation.EDGE,
    BinarizeParams: Operation.BINARIZE,
}


@dataclass(frozen=True)
class FilterConfig:
    """Validated configuration for a single filter run."""

    input_path: Path
    output_path: Path
    params: Params

    @property
    def operation(self) -> Operation:
        return _PARAMS_FOR[type(self.params)]

    @property
    def sigma(self) -> float:
        if isinstance(self.params, BlurParams):
            return self.params.sigma
        return DEFAULT_SIGMA

    @property
    def threshold(self) -> int:
        if isinstance(self.params, BinarizeParams):
            return self.params.threshold
        return DEFAULT_THRESHOLD

    @property
    def use_auto_threshold(self) -> bool:
        return isinstance(self.params, BinarizeParams) and self.params.otsu

    @property
    def invert_output(self) -> bool:
        return isinstance(self.params, BinarizeParams) and self.params.invert


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the flat option parser for the filter command."""
    parser = _ArgumentParser(
        prog="myproc",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-op", dest="op", default="")
    parser.add_argument("-in", dest="input", default="")
    parser.add_argument("-out", dest="output", default="")
    parser.add_argument("-sigma", dest="sigma")
    parser.add_argument("-th", dest="threshold")
    parser.add_argument("-otsu", dest="otsu", action="store_true")
    parser.add_argument("-inv", dest="invert", action="store_true")
    return parser


# Plain decimal literals only; Python extras such as "1_000" are rejected
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:nan|inf|infinity)",
    re.IGNORECASE,
)


def _parse_float(name: str, raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise InvalidParameter(f"{name} must be a number, got '{raw}'")
    return float(raw)


def _parse_int(name: str, raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise InvalidParameter(f"{name} must be an integer, got '{raw}'")
    try:
        return int(raw)
    except ValueError:
        # int() refuses literals past sys.get_int_max_str_digits()
        raise InvalidParameter(f"{name} is out of range") from None


def parse_args(argv: list[str]) -> FilterConfig:
    """Parse raw arguments into a validated FilterConfig.

    Numeric options are converted whenever they are given, but their ranges
    are only checked for the operation that uses them.

    Args:
        argv: Argument list without the program name.

    Returns:
        Immutable configuration for the requested operation.

    Raises:
        MissingArgument: -op, -in or -out is absent or empty.
        UnsupportedOperation: -op is not blur, edge or bin.
        InvalidParameter: -sigma or -th is malformed or out of range.
        UsageError: unrecognized tokens or an option missing its value.
    """
    if not argv:
        raise MissingArgument("No arguments.")

    args = build_parser().parse_args(argv)

    sigma = DEFAULT_SIGMA if args.sigma is None else _parse_float("-sigma", args.sigma)
    threshold = DEFAULT_THRESHOLD if args.threshold is None else _parse_int("-th", args.threshold)

    if not args.op or not args.input or not args.output:
        raise MissingArgument("Missing required arguments.")

    try:
        operation = Operation(args.op)
    except ValueError:
        raise UnsupportedOperation(f"Unsupported -op: {args.op}") from None

    params: Params
    if operation is Operation.BLUR:
        if not (sigma > 0.0) or not math.isfinite(sigma):
            raise InvalidParameter("sigma must be > 0")
        if sigma > MAX_SIGMA:
            raise InvalidParameter(f"sigma must be <= {MAX_SIGMA:g}")
        params = BlurParams(sigma=sigma)
    elif operation is Operation.EDGE:
        params = EdgeParams()
    else:
        if not args.otsu and not 0 <= threshold <= 255:
            raise InvalidParameter("-th must be 0..255")
        params = BinarizeParams(threshold=threshold, otsu=args.otsu, invert=args.invert)

    return FilterConfig(
        input_path=Path(args.input),
        output_path=Path(args.output),
        params=params,
    )


@dataclass(frozen=True)
class ProfileConfig:
    """Validated configuration for a line profile or pixel export.

    ``axis`` is "row", "column", or "pixel"; in pixel mode ``point`` holds
    the (x, y) coordinate and ``index`` is unused.
    """

    input_path: Path
    axis: str
    index: int
    rgb: bool = False
    output_path: Path | None = None
    point: tuple[int, int] | None = None


def build_profile_parser() -> argparse.ArgumentParser:
    """Build the flat option parser for the profile command."""
    parser = _ArgumentParser(
        prog="myproc-profile",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-in", dest="input", default="")
    line = parser.add_mutually_exclusive_group()
    line.add_argument("-row", dest="row")
    line.add_argument("-col", dest="col")
    parser.add_argument("-x", dest="x")
    parser.add_argument("-y", dest="y")
    parser.add_argument("-rgb", dest="rgb", action="store_true")
    parser.add_argument("-out", dest="output", default="")
    return parser


def parse_profile_args(argv: list[str]) -> ProfileConfig:
    """Parse raw arguments for the profile command.

    Raises:
        MissingArgument: -in is absent or empty, or no arguments were given.
        InvalidParameter: -row, -col, -x or -y is not an integer.
        UsageError: no line or pixel selected, -x without -y (or the reverse),
            a pixel combined with -row/-col, or unknown tokens.
    """
    if not argv:
        raise MissingArgument("No arguments.")

    args = build_profile_parser().parse_args(argv)
    if not args.input:
        raise MissingArgument("Missing required argument: -in")

    point: tuple[int, int] | None = None
    if args.x is not None or args.y is not None:
        if args.x is None or args.y is None:
            raise UsageError("-x and -y must be given together")
        if args.row is not None or args.col is not None:
            raise UsageError("-x/-y cannot be combined with -row or -col")
        point = (_parse_int("-x", args.x), _parse_int("-y", args.y))
        axis, index = "pixel", 0
    elif args.row is not None:
        axis, index = "row", _parse_int("-row", args.row)
    elif args.col is not None:
        axis, index = "column", _parse_int("-col", args.col)
    else:
        raise UsageError("one of -row, -col or -x/-y is required")

    return ProfileConfig(
        input_path=Path(args.input),
        axis=axis,
        index=index,
        rgb=args.rgb,
        output_path=Path(args.output) if args.output else None,
        point=point,
    )
