"""Frame I/O and composition helpers.

Frames are ``H x W x 3`` uint8 RGB numpy arrays throughout ffvideo.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from .error_handling import ProcessingError, ValidationError, error_context

logger = logging.getLogger(__name__)


def load_frame(path: Path) -> np.ndarray:
    """Load an image file as an RGB array.

    PNG frames decoded by ffmpeg may carry an alpha channel. Converting to
    RGB keeps the first three channels only.

    Raises:
        ProcessingError: If the image cannot be read
    """
    with error_context("load frame", ProcessingError, context={"file": str(path)}, logger=logger):
        with Image.open(path) as img:
            return np.array(img.convert("RGB"))


def to_uint8(frame: np.ndarray) -> np.ndarray:
    """Return *frame* as uint8, scaling floating point data from [0, 1]."""
    frame = np.asarray(frame)
    if frame.dtype == np.uint8:
        return frame
    if np.issubdtype(frame.dtype, np.floating):
        return (np.clip(frame, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
    return np.clip(frame, 0, 255).astype(np.uint8)


def save_frame(frame: np.ndarray, path: Path) -> Path:
    """Write *frame* to *path* in the format implied by its suffix."""
    data = to_uint8(frame)
    if data.ndim == 3 and data.shape[2] == 1:
        data = data[:, :, 0]
    if data.ndim not in (2, 3):
        raise ValidationError(f"Cannot save frame with shape {data.shape}")

    path = Path(path)
    with error_context("save frame", ProcessingError, context={"file": str(path)}, logger=logger):
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(data).save(path)
    return path


def _first_channel(frame: np.ndarray) -> np.ndarray:
    return frame if frame.ndim == 2 else frame[:, :, 0]


def anaglyph(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """Merge a stereo pair into a red/cyan anaglyph.

    Red comes from the left view, green and blue from the right view.
    """
    left_channel = _first_channel(to_uint8(left))
    right_channel = _first_channel(to_uint8(right))
    if left_channel.shape != right_channel.shape:
        raise ValidationError(
            f"Stereo frames differ in size: {left_channel.shape} vs {right_channel.shape}"
        )

    merged = np.empty(left_channel.shape + (3,), dtype=np.uint8)
    merged[:, :, 0] = left_channel
    merged[:, :, 1] = right_channel
    merged[:, :, 2] = right_channel
    return merged


def _as_rgb(frame: np.ndarray) -> np.ndarray:
    frame = to_uint8(frame)
    if frame.ndim == 2:
        return np.stack([frame] * 3, axis=2)
    if frame.shape[2] == 1:
        return np.repeat(frame, 3, axis=2)
    return frame[:, :, :3]


def _fit(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    if frame.shape[1] == width and frame.shape[0] == height:
        return frame
    return cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)


def side_by_side(left: np.ndarray, right: np.ndarray, width: int, height: int) -> np.ndarray:
    """Place a stereo pair in the two halves of a ``height x width`` frame.

    Each view is rescaled bilinearly only when it does not already match
    the half-frame size.
    """
    half = width // 2
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :half] = _fit(_as_rgb(left), half, height)
    frame[:, half : 2 * half] = _fit(_as_rgb(right), half, height)
    return frame


def zoom_frame(frame: np.ndarray, zoom: float) -> np.ndarray:
    """Nearest-neighbour scale for display."""
    if zoom == 1:
        return frame
    height, width = frame.shape[:2]
    size = (max(1, int(round(width * zoom))), max(1, int(round(height * zoom))))
    return cv2.resize(frame, size, interpolation=cv2.INTER_NEAREST)
