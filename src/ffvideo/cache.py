"""Scratch directory management for decoded frames.

ffmpeg writes each decoded stream into its own directory whose name encodes
every decoding parameter, so a second Video with the same settings reuses
the frames instead of invoking ffmpeg again.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

# ffmpeg's image2 muxer numbers files from 1
FRAME_FORMAT = "frame-%06d."


def format_number(value: float) -> str:
    """Format *value* without a trailing ``.0`` for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def frame_pattern(encoding: str) -> str:
    """Return the printf-style file name for frames stored as *encoding*."""
    return f"{FRAME_FORMAT}{encoding}"


def frame_path(directory: Path, index: int, encoding: str) -> Path:
    """Return the path of the 1-based frame *index* inside *directory*."""
    return Path(directory) / (frame_pattern(encoding) % index)


def cache_dir_name(
    source: str | Path,
    *,
    fps: float,
    width: int,
    height: int,
    length: float,
    channel: int,
    seek: float,
    encoding: str,
) -> str:
    """Build the scratch directory name for one decoded stream."""
    return (
        f"{Path(source).name}_{format_number(fps)}fps_"
        f"{width}x{height}_{format_number(length)}s_"
        f"c{channel}_sk{format_number(seek)}_{encoding}"
    )


def cache_path(dest_folder: str | Path, source: str | Path, **params) -> Path:
    """Join :func:`cache_dir_name` under *dest_folder*."""
    return Path(dest_folder) / cache_dir_name(source, **params)


def is_cache_fresh(directory: Path, source: Path, encoding: str) -> bool:
    """Return True when *directory* holds frames at least as new as *source*."""
    directory = Path(directory)
    if not directory.is_dir():
        return False

    first_frame = frame_path(directory, 1, encoding)
    if not first_frame.is_file():
        return False

    try:
        return Path(source).stat().st_mtime <= first_frame.stat().st_mtime
    except OSError:
        return False


def list_frame_files(directory: Path, encoding: str) -> list[Path]:
    """Return consecutive frame files starting at 1, stopping at the first gap."""
    files = []
    index = 1
    while True:
        candidate = frame_path(directory, index, encoding)
        if not candidate.is_file():
            break
        files.append(candidate)
        index += 1
    return files


def clear_cache_dir(directory: Path) -> bool:
    """Remove *directory* and its frames. Returns True if something was removed."""
    directory = Path(directory)
    if not directory.exists():
        return False
    shutil.rmtree(directory)
    logger.debug(f"Removed scratch directory {directory}")
    return True
