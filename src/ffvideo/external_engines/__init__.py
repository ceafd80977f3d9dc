from .common import run_command
from .ffmpeg import encode_video, extract_frames, require_ffmpeg

__all__ = [
    "encode_video",
    "extract_frames",
    "require_ffmpeg",
    "run_command",
]
