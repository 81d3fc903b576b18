#!/usr/bin/env python3
"""Command-line entry points for myproc."""

import sys
from collections.abc import Callable
from functools import partial
from typing import TextIO

from .channels import channel_count, to_8bit
from .config import (
    PROFILE_USAGE,
    USAGE,
    FilterConfig,
    Operation,
    parse_args,
    parse_profile_args,
)
from .errors import MissingArgument, MyProcError, UnsupportedOperation, WriteFailure
from .imageio import read_image, write_image
from .operations import FilterResult, apply_filter
from .profile import extract_profile, sample_pixel, write_pixel_csv, write_profile_csv

_HELP_FLAGS = ("-h", "-help", "--help")


def _describe(config: FilterConfig, result: FilterResult) -> str:
    """One-line summary of a finished run."""
    if result.operation is Operation.BLUR:
        label = f"Gaussian blur (sigma={config.sigma:g}, ksize={result.detail})"
    elif result.operation is Operation.EDGE:
        label = "Edge detection (Canny)"
    else:
        mode = "otsu" if config.use_auto_threshold else "fixed"
        inverted = ", inverted" if config.invert_output else ""
        label = f"Binarize ({mode} threshold={result.detail:g}{inverted})"
    return f"{label}: {config.input_path} -> {config.output_path}"


def run(config: FilterConfig) -> FilterResult:
    """Read, filter and write one image.

    Raises:
        MyProcError: on the first failing stage; nothing is written.
    """
    src = to_8bit(read_image(config.input_path))
    result = apply_filter(config, src)
    write_image(config.output_path, result.image)
    return result


def main() -> int:
    """Run the image filter."""
    argv = sys.argv[1:]
    if any(arg in _HELP_FLAGS for arg in argv):
        print(USAGE)
        return 0

    try:
        config = parse_args(argv)
        result = run(config)
    except (MissingArgument, UnsupportedOperation) as e:
        print(USAGE, file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except MyProcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        print(f"Unknown error: {e}", file=sys.stderr)
        return 99

    print(_describe(config, result))
    return 0


def profile_main() -> int:
    """Export a row/column intensity profile or a single pixel as CSV."""
    argv = sys.argv[1:]
    if any(arg in _HELP_FLAGS for arg in argv):
        print(PROFILE_USAGE)
        return 0

    try:
        config = parse_profile_args(argv)
        img = to_8bit(read_image(config.input_path))

        emit: Callable[[TextIO], None]
        if config.point is not None:
            sample = sample_pixel(img, *config.point)
            emit = partial(write_pixel_csv, sample)
            summary = (
                f"Pixel ({sample.x}, {sample.y}): R={sample.r} G={sample.g} "
                f"B={sample.b} gray={sample.gray}"
            )
        else:
            profile = extract_profile(img, config.index, axis=config.axis, rgb=config.rgb)
            emit = partial(write_profile_csv, profile)
            channels = "RGB" if config.rgb else "gray"
            summary = (
                f"Profile ({config.axis} {profile.index}, {len(profile)} samples, "
                f"{channels}, {channel_count(img)}ch source)"
            )

        if config.output_path is None:
            emit(sys.stdout)
            return 0

        try:
            with open(config.output_path, "w", newline="", encoding="utf-8") as f:
                emit(f)
        except OSError as e:
            raise WriteFailure(f"Failed to write: {config.output_path} ({e.strerror})") from e
    except MissingArgument as e:
        print(PROFILE_USAGE, file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except MyProcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        print(f"Unknown error: {e}", file=sys.stderr)
        return 99

    print(f"{summary}: {config.input_path} -> {config.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
