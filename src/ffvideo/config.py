"""Configuration settings for ffvideo."""

import os
from dataclasses import dataclass, field

SUPPORTED_ENCODINGS = ("png", "jpg", "jpeg", "bmp", "ppm", "tiff")


@dataclass
class EngineConfig:
    """Configuration for the ffmpeg executable with environment variable overrides."""

    # Path to the FFmpeg executable.
    # Usually "ffmpeg" works if installed via package manager
    # Override with: FFVIDEO_FFMPEG_PATH
    FFMPEG_PATH: str = "ffmpeg"

    # Hard timeout for a single ffmpeg invocation, in seconds (None = no limit)
    FFMPEG_TIMEOUT: int | None = None

    def __post_init__(self) -> None:
        """Apply environment variable overrides after initialization."""
        env_value = os.getenv("FFVIDEO_FFMPEG_PATH")
        if env_value:
            self.FFMPEG_PATH = env_value


@dataclass
class VideoConfig:
    """Default decoding options for a Video.

    Every field can be overridden per video through keyword arguments.
    """

    width: int = 320
    height: int = 240
    zoom: float = 1
    fps: float = 10
    length: float = 10  # seconds
    seek: float = 0  # seconds
    channel: int | list[int] = 0
    load: bool = True  # load frames into memory after conversion
    delete: bool = True  # remove scratch frames once loaded
    encoding: str = "png"
    # Override with: FFVIDEO_SCRATCH_DIR
    dest_folder: str = field(default_factory=lambda: os.getenv("FFVIDEO_SCRATCH_DIR", "scratch"))
    silent: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Geometry must be positive, got {self.width}x{self.height}"
            )
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.length <= 0:
            raise ValueError(f"length must be positive, got {self.length}")
        if self.seek < 0:
            raise ValueError(f"seek must be non-negative, got {self.seek}")

        channels = self.channel if isinstance(self.channel, list) else [self.channel]
        if not channels or any(c < 0 for c in channels):
            raise ValueError(f"channel must be a non-negative stream index, got {self.channel}")

        if not isinstance(self.encoding, str):
            raise ValueError(f"Unsupported frame encoding: {self.encoding!r}")
        self.encoding = self.encoding.lower()
        if self.encoding not in SUPPORTED_ENCODINGS:
            raise ValueError(
                f"Unsupported frame encoding: {self.encoding} "
                f"(expected one of {', '.join(SUPPORTED_ENCODINGS)})"
            )

    @property
    def channels(self) -> list[int]:
        """Requested video streams as a list."""
        if isinstance(self.channel, list):
            return list(self.channel)
        return [self.channel]


@dataclass
class PlaybackConfig:
    """Configuration for the interactive player window."""

    WINDOW_NAME: str = "ffvideo"

    # Key codes as returned by cv2.waitKeyEx
    KEY_PAUSE: tuple[int, ...] = (ord(" "),)
    KEY_LOOP: tuple[int, ...] = (ord("l"), ord("L"))
    # Right arrow on GTK/Qt backends, Windows and macOS, then "d"
    KEY_STEP_FORWARD: tuple[int, ...] = (65363, 2555904, 63235, ord("d"))
    KEY_STEP_BACKWARD: tuple[int, ...] = (65361, 2424832, 63234, ord("a"))
    # "q", ESC, Ctrl+W
    KEY_CLOSE: tuple[int, ...] = (ord("q"), 27, 23)

    # Seconds subtracted from the side-by-side frame delay to account for
    # per-frame loading and scaling time
    LOAD_TIME_COMPENSATION: float = 0.08

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.LOAD_TIME_COMPENSATION < 0:
            raise ValueError(
                f"LOAD_TIME_COMPENSATION must be non-negative, got {self.LOAD_TIME_COMPENSATION}"
            )


# Default configuration instances
DEFAULT_ENGINE_CONFIG = EngineConfig()
DEFAULT_VIDEO_CONFIG = VideoConfig()
DEFAULT_PLAYBACK_CONFIG = PlaybackConfig()
