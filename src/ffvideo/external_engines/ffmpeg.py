from __future__ import annotations

import glob
import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..cache import format_number
from ..error_handling import ValidationError
from ..system_tools import ToolInfo, discover_tool
from .common import run_command

__all__ = [
    "build_encode_command",
    "build_extract_command",
    "encode_video",
    "extract_frames",
    "require_ffmpeg",
    "uses_legacy_map",
]

logger = logging.getLogger(__name__)


def require_ffmpeg(engine_config=None) -> ToolInfo:
    """Return the discovered ffmpeg binary, raising *EngineError* when missing."""
    info = discover_tool("ffmpeg", engine_config)
    info.require()
    return info


def uses_legacy_map(version: tuple[int, ...] | None) -> bool:
    """ffmpeg releases before 0.9 address streams as ``0.N`` instead of ``0:v:N``."""
    if not version or len(version) < 2:
        return False
    return version[0] == 0 and version[1] < 9


def _frame_glob(frame_pattern: str) -> str:
    return re.sub(r"%0?\d*d", "*", frame_pattern)


# ----------------------------------------------------------------------------
# Command builders
# ----------------------------------------------------------------------------


def build_extract_command(
    ffmpeg: str,
    source: Path,
    output_pattern: Path,
    *,
    fps: float,
    length: float,
    width: int,
    height: int,
    seek: float = 0,
    channel: int = 0,
    legacy_map: bool = False,
) -> list[str]:
    """Build the argv that decodes *channel* of *source* into numbered images."""
    cmd = [
        ffmpeg,
        "-y",
        "-v",
        "error",
        "-i",
        str(source),
        "-r",
        format_number(fps),
        "-t",
        format_number(length),
    ]

    if seek > 0:
        cmd.extend(["-ss", format_number(seek)])

    if legacy_map:
        cmd.extend(["-map", f"0.{channel}"])
    else:
        cmd.extend(["-map", f"0:v:{channel}"])

    cmd.extend(
        [
            "-s",
            f"{width}x{height}",
            "-q:v",
            "1",
            str(output_pattern),
        ]
    )
    return cmd


def build_encode_command(
    ffmpeg: str,
    input_patterns: Sequence[Path],
    output_path: Path,
    *,
    fps: float,
    zoom: float = 1,
) -> list[str]:
    """Build the argv that muxes one or more frame sequences into an MJPEG AVI.

    Each input becomes its own video stream. The frame rate has to be given
    before every ``-i`` so that it applies to the image sequence demuxer.
    """
    if not input_patterns:
        raise ValidationError("At least one frame sequence is required to encode a video")

    cmd = [ffmpeg, "-y", "-v", "error"]
    for pattern in input_patterns:
        cmd.extend(["-r", format_number(fps), "-i", str(pattern)])

    for index in range(len(input_patterns)):
        cmd.extend(["-map", f"{index}:v"])

    if zoom != 1:
        z = format_number(zoom)
        cmd.extend(["-sws_flags", "neighbor", "-vf", f"scale={z}*iw:{z}*ih"])

    cmd.extend(["-c:v", "mjpeg", "-q:v", "1", "-an", str(output_path)])
    return cmd


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------


def extract_frames(
    source: Path,
    output_dir: Path,
    *,
    frame_pattern: str,
    fps: float,
    length: float,
    width: int,
    height: int,
    seek: float = 0,
    channel: int = 0,
    tool: ToolInfo | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Decode a video stream into an image sequence inside *output_dir*.

    Args:
        source: Input video file
        output_dir: Directory to store the frames (created if needed)
        frame_pattern: printf-style file name, e.g. ``frame-%06d.png``
        tool: Pre-discovered ffmpeg (discovered on demand when None)

    Returns:
        Metadata dict from :func:`run_command` extended with ``frame_dir``
        and ``frame_count``
    """
    if tool is None:
        tool = require_ffmpeg()

    output_dir.mkdir(parents=True, exist_ok=True)
    output_pattern = output_dir / frame_pattern

    cmd = build_extract_command(
        tool.name,
        source,
        output_pattern,
        fps=fps,
        length=length,
        width=width,
        height=height,
        seek=seek,
        channel=channel,
        legacy_map=uses_legacy_map(tool.version_tuple),
    )

    metadata = run_command(cmd, engine="ffmpeg", output_path=output_pattern, timeout=timeout)

    frame_files = glob.glob(str(output_dir / _frame_glob(frame_pattern)))
    metadata.update(
        {
            "frame_dir": str(output_dir),
            "frame_count": len(frame_files),
            "frame_pattern": frame_pattern,
        }
    )
    return metadata


def encode_video(
    input_patterns: Sequence[Path],
    output_path: Path,
    *,
    fps: float,
    zoom: float = 1,
    tool: ToolInfo | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Encode frame sequences into *output_path* (MJPEG, no audio)."""
    if tool is None:
        tool = require_ffmpeg()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = build_encode_command(tool.name, input_patterns, output_path, fps=fps, zoom=zoom)
    return run_command(cmd, engine="ffmpeg", output_path=output_path, timeout=timeout)
