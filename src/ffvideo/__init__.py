"""ffvideo - decode, play and re-encode videos as numpy frames through ffmpeg."""

__version__: str = "0.1.0"
__author__: str = "ffvideo Team"
__email__: str = "team@ffvideo.example"

from .config import EngineConfig, PlaybackConfig, VideoConfig
from .error_handling import (
    EngineError,
    FFVideoError,
    ProcessingError,
    ValidationError,
)
from .player import PlaybackState, Player
from .video import Channel, Video

__all__ = [
    "Channel",
    "EngineConfig",
    "EngineError",
    "FFVideoError",
    "PlaybackConfig",
    "PlaybackState",
    "Player",
    "ProcessingError",
    "ValidationError",
    "Video",
    "VideoConfig",
    "__version__",
]
