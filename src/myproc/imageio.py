"""Reading and writing image files through OpenCV codecs."""

from pathlib import Path

import cv2
import numpy as np

from .errors import ReadFailure, WriteFailure


def read_image(path: Path) -> np.ndarray:
    """Decode an image file, keeping its channel layout and alpha.

    Args:
        path: Image file to load. The codec is chosen from the file content.

    Returns:
        Decoded pixel buffer.

    Raises:
        ReadFailure: if the file does not exist or cannot be decoded.
    """
    if not path.is_file():
        raise ReadFailure(f"Failed to read image: {path} (file not found)")

    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None or img.size == 0:
        raise ReadFailure(f"Failed to read image: {path}")
    return img


def write_image(path: Path, img: np.ndarray) -> None:
    """Encode ``img`` to ``path``, choosing the format from the extension.

    The parent directory must already exist. Nothing is left at ``path`` if
    encoding fails.

    Raises:
        WriteFailure: if the extension has no encoder or the file cannot be
            written.
    """
    if not cv2.haveImageWriter(str(path)):
        raise WriteFailure(f"Failed to write: {path} (unsupported format)")

    existed = path.exists()
    try:
        ok = cv2.imwrite(str(path), img)
    except cv2.error as e:
        ok = False
        reason = str(e).strip() or "encoder error"
    else:
        reason = "could not create file"

    if not ok:
        if not existed and path.exists():
            path.unlink()
        raise WriteFailure(f"Failed to write: {path} ({reason})")
