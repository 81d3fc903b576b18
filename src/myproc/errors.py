"""Error types and the exit codes they map to."""


class MyProcError(Exception):
    """Base class for all myproc failures."""

    exit_code = 99


class UsageError(MyProcError):
    """Bad or missing command-line arguments."""

    exit_code = 1


class MissingArgument(UsageError):
    """A required option (-op, -in, -out) is absent or empty."""


class UnsupportedOperation(UsageError):
    """The -op value is not a known operation."""


class InvalidParameter(UsageError):
    """A numeric option is malformed or out of range."""


class ImageIOError(MyProcError):
    """Reading or writing an image file failed."""


class ReadFailure(ImageIOError):
    """Input file is missing or cannot be decoded."""

    exit_code = 2


class WriteFailure(ImageIOError):
    """Output file cannot be created or encoded."""

    exit_code = 3


class ProcessingError(MyProcError):
    """The image could not be transformed."""

    exit_code = 4


class UnsupportedChannelCount(ProcessingError):
    """Image has a channel count the operation cannot handle."""

    def __init__(self, channels: int) -> None:
        super().__init__(f"Unsupported channel count: {channels}")
        self.channels = channels


class UnsupportedDepth(ProcessingError):
    """Image element type cannot be reduced to 8-bit."""

    def __init__(self, dtype: object) -> None:
        super().__init__(f"Unsupported pixel type: {dtype}")
        self.dtype = dtype


class NoOutputProduced(ProcessingError):
    """The dispatched operation returned no image."""
