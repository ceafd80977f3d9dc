"""Video objects backed by ffmpeg-decoded frame sequences.

A :class:`Video` asks ffmpeg to decode one or more video streams of a file
into numbered images in a scratch directory, then reads them back as numpy
arrays (or keeps the file paths when ``load=False``). The frames can be
stepped through, exported, played back in a window or re-encoded into an
AVI file through ffmpeg again.

Example:
    >>> video = Video("clip.mp4", width=640, height=360, fps=5, length=4)
    >>> frame = video.forward()          # first frame, H x W x 3 uint8
    >>> clip = video.to_array()          # N x H x W x 3
    >>> video.play(zoom=2, loop=True)
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import cv2
import numpy as np
from tqdm import tqdm

from .cache import (
    cache_path,
    clear_cache_dir,
    frame_path,
    frame_pattern,
    is_cache_fresh,
    list_frame_files,
)
from .config import (
    DEFAULT_ENGINE_CONFIG,
    DEFAULT_PLAYBACK_CONFIG,
    DEFAULT_VIDEO_CONFIG,
    EngineConfig,
    PlaybackConfig,
    VideoConfig,
)
from .error_handling import (
    FFVideoError,
    ProcessingError,
    ValidationError,
    log_info_with_context,
    log_warning_with_context,
)
from .external_engines.ffmpeg import encode_video, extract_frames, require_ffmpeg
from .frames import anaglyph, load_frame, save_frame, side_by_side, zoom_frame
from .player import Player
from .system_tools import ToolInfo

logger = logging.getLogger(__name__)


@dataclass
class Channel:
    """One decoded video stream: where its frames live and the frames themselves.

    ``frames`` holds arrays when the video was loaded, frame file paths otherwise.
    """

    stream: int
    path: Path | None
    pattern: str
    frames: list[Any] = field(default_factory=list)


class Video:
    """A sequence of frames decoded by ffmpeg, one list per video stream."""

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        frames: np.ndarray | None = None,
        config: VideoConfig | None = None,
        engine_config: EngineConfig | None = None,
        **options: Any,
    ) -> None:
        try:
            self.config = replace(config or DEFAULT_VIDEO_CONFIG, **options)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid video options: {e}", cause=e) from e

        cfg = self.config
        self.engine_config = engine_config or DEFAULT_ENGINE_CONFIG
        self.width = cfg.width
        self.height = cfg.height
        self.zoom = cfg.zoom
        self.fps = cfg.fps
        self.length = cfg.length
        self.seek = cfg.seek
        self.load = cfg.load
        self.delete = cfg.delete
        self.encoding = cfg.encoding
        self.dest_folder = Path(cfg.dest_folder)
        self.silent = cfg.silent

        self.channels: list[Channel] = []
        self.current = 0
        self._tool: ToolInfo | None = None

        if frames is not None:
            self._init_from_frames(frames)
            return

        if path is None:
            raise ValidationError("A video path or a frames array is required")

        # ffmpeg cannot scale to odd dimensions
        width = self.width // 2 * 2
        height = self.height // 2 * 2
        if width == 0 or height == 0:
            raise ValidationError(f"Geometry {self.width}x{self.height} is too small")
        if (width, height) != (self.width, self.height):
            self.width, self.height = width, height
            if not self.silent:
                log_warning_with_context(
                    f"Geometry has been changed to accommodate ffmpeg [{width}x{height}]",
                    logger=logger,
                )

        self.path = Path(path).expanduser()
        if not self.path.is_file():
            raise ValidationError(f"File {self.path} could not be found")

        self._require_tool()

        for stream in cfg.channels:
            channel = Channel(
                stream=stream,
                path=self._scratch_path(stream),
                pattern=frame_pattern(self.encoding),
            )
            self._load_channel(channel)
            self.channels.append(channel)

        if self.load and self.delete:
            self.clear()

    def _init_from_frames(self, frames: np.ndarray) -> None:
        data = np.asarray(frames)
        if data.ndim not in (3, 4) or data.shape[0] == 0:
            raise ValidationError(
                f"Frames must be an N x H x W or N x H x W x C array, got shape {data.shape}"
            )

        self.height = int(data.shape[1])
        self.width = int(data.shape[2])
        self.path = Path(f"tensor-{random.getrandbits(31)}")
        self.load = True
        self.channels.append(
            Channel(
                stream=0,
                path=None,
                pattern=frame_pattern(self.encoding),
                frames=[data[i] for i in range(data.shape[0])],
            )
        )

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _require_tool(self) -> ToolInfo:
        if self._tool is None:
            self._tool = require_ffmpeg(self.engine_config)
        return self._tool

    def _scratch_path(self, stream: int, encoding: str | None = None) -> Path:
        return cache_path(
            self.dest_folder,
            self.path,
            fps=self.fps,
            width=self.width,
            height=self.height,
            length=self.length,
            channel=stream,
            seek=self.seek,
            encoding=encoding or self.encoding,
        )

    def _load_channel(self, channel: Channel) -> None:
        if channel.path is None:
            raise ProcessingError(f"Channel {channel.stream} has no scratch directory")

        # Only decode when the scratch copy is missing or older than the source
        if not is_cache_fresh(channel.path, self.path, self.encoding):
            clear_cache_dir(channel.path)
            try:
                metadata = extract_frames(
                    self.path,
                    channel.path,
                    frame_pattern=channel.pattern,
                    fps=self.fps,
                    length=self.length,
                    width=self.width,
                    height=self.height,
                    seek=self.seek,
                    channel=channel.stream,
                    tool=self._require_tool(),
                    timeout=self.engine_config.FFMPEG_TIMEOUT,
                )
            except (FFVideoError, KeyboardInterrupt):
                # A partial decode must not pass for a fresh cache next time
                clear_cache_dir(channel.path)
                raise
            if not self.silent:
                logger.info(f"🎬 {metadata['command']} ({metadata['render_ms']} ms)")
        elif not self.silent:
            log_info_with_context(
                "Reusing decoded frames", context={"dir": channel.path}, logger=logger
            )

        if not self.silent:
            logger.info(f"📁 Using frames in {channel.path / channel.pattern}")

        files = list_frame_files(channel.path, self.encoding)
        if not files:
            log_warning_with_context(
                "ffmpeg produced no frames",
                context={"source": self.path, "stream": channel.stream},
                logger=logger,
            )

        if self.load:
            channel.frames = [load_frame(f) for f in files]
        else:
            channel.frames = files

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def n_channels(self) -> int:
        return len(self.channels)

    @property
    def nframes(self) -> int:
        if not self.channels:
            return 0
        return min(len(channel.frames) for channel in self.channels)

    def __len__(self) -> int:
        return self.nframes

    def __iter__(self) -> Iterator[Any]:
        for index in range(self.nframes):
            if self.n_channels == 1:
                yield self.get_frame(0, index)
            else:
                yield [self.get_frame(c, index) for c in range(self.n_channels)]

    def __repr__(self) -> str:
        return (
            f"Video(path={str(self.path)!r}, channels={self.n_channels}, "
            f"nframes={self.nframes}, {self.width}x{self.height} @ {self.fps}fps)"
        )

    def get_frame(self, channel: int, index: int) -> np.ndarray:
        """Return frame *index* of *channel*, reading it from disk if not loaded."""
        item = self.channels[channel].frames[index]
        if isinstance(item, np.ndarray):
            return item
        return load_frame(item)

    def forward(self) -> np.ndarray | list[np.ndarray]:
        """Return the next frame (one per channel when there are several).

        The position wraps to the first frame after the last one.
        """
        if self.nframes == 0:
            raise ValidationError("Video has no frames")
        if self.current >= self.nframes:
            self.current = 0

        output = [self.get_frame(c, self.current) for c in range(self.n_channels)]

        self.current += 1
        if self.current >= self.nframes:
            self.current = 0

        if self.n_channels == 1:
            return output[0]
        return output

    def to_array(
        self, channel: int = 0, offset: int = 0, nframes: int | None = None
    ) -> np.ndarray:
        """Stack frames of *channel* into an ``N x H x W x C`` array.

        Starts at *offset* and stops at the last available frame.
        """
        if nframes is not None and nframes < 1:
            raise ValidationError(f"nframes must be at least 1, got {nframes}")

        available = len(self.channels[channel].frames) - offset
        if offset < 0 or available <= 0:
            raise ValidationError(
                f"Offset {offset} is outside the {len(self.channels[channel].frames)} frames of channel {channel}"
            )

        count = available if nframes is None else min(nframes, available)
        stacked = np.stack([self.get_frame(channel, offset + i) for i in range(count)])
        if stacked.ndim == 3:
            stacked = stacked[..., np.newaxis]
        return stacked

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _write_channel(self, channel: int, directory: Path) -> None:
        clear_cache_dir(directory)
        directory.mkdir(parents=True, exist_ok=True)
        frames = range(len(self.channels[channel].frames))
        for index in tqdm(frames, desc=f"💾 Channel {channel}", unit="frame", disable=self.silent):
            save_frame(self.get_frame(channel, index), frame_path(directory, index + 1, "png"))

    def dump(self, path: str | Path) -> list[Path]:
        """Write every channel as a PNG sequence under *path*.

        Returns the directories written, one per channel.
        """
        path = Path(path).expanduser()
        if not self.silent:
            logger.info(f"💾 Dumping frames into {path}...")

        written = []
        for index, channel in enumerate(self.channels):
            directory = path / self._scratch_path(channel.stream, encoding="png").name
            self._write_channel(index, directory)
            written.append(directory)
        return written

    def save(self, outpath: str | Path, keep: bool = False) -> Path:
        """Encode all channels into ``<outpath>.avi`` (MJPEG, one stream per channel).

        Args:
            outpath: Output path without the ``.avi`` extension
            keep: Keep the intermediate frames dumped to the scratch folder

        Returns:
            Path of the written AVI file
        """
        if not outpath or not str(outpath).strip():
            raise ValidationError("You must provide a path to save the video")

        tool = self._require_tool()

        if self.load:
            if not self.silent:
                logger.info("💾 Dumping frames into disk...")
            for index, channel in enumerate(self.channels):
                channel.path = self._scratch_path(channel.stream, encoding="png")
                channel.pattern = frame_pattern("png")
                self._write_channel(index, channel.path)

        patterns = [channel.path / channel.pattern for channel in self.channels]

        target = Path(f"{Path(outpath).expanduser()}.avi")
        if target.exists():
            if not self.silent:
                log_warning_with_context(
                    f"{target} exists and will be overwritten...", logger=logger
                )
            target.unlink()

        metadata = encode_video(
            patterns,
            target,
            fps=self.fps,
            zoom=self.zoom,
            tool=tool,
            timeout=self.engine_config.FFMPEG_TIMEOUT,
        )
        if not self.silent:
            logger.info(f"🎬 {metadata['command']} ({metadata['render_ms']} ms)")

        if self.load and not keep:
            self.clear()

        return target

    def clear(self) -> None:
        """Remove the scratch directories of every channel."""
        for channel in self.channels:
            if channel.path is None:
                continue
            if clear_cache_dir(channel.path) and not self.silent:
                logger.info(f"🧹 Cleared {channel.path}")

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _require_stereo(self) -> None:
        if self.n_channels < 2:
            raise ValidationError(
                "Stereo playback needs two channels (load the video with channel=[0, 1])"
            )

    def play(
        self,
        zoom: float = 1,
        loop: bool = False,
        fps: float | None = None,
        channel: int = 0,
        playback_config: PlaybackConfig | None = None,
    ) -> Player:
        """Play *channel* in a window until it is closed."""
        player = Player(
            lambda index: self.get_frame(channel, index),
            len(self.channels[channel].frames),
            fps=fps or self.fps,
            zoom=zoom,
            legend="playing sequence",
            loop=loop,
            silent=self.silent,
            config=playback_config,
        )
        player.run()
        return player

    def show(self) -> Player:
        return self.play()

    def play_3d(
        self,
        zoom: float = 1,
        loop: bool = False,
        fps: float | None = None,
        playback_config: PlaybackConfig | None = None,
    ) -> Player:
        """Play channels 0 (left) and 1 (right) as a red/cyan anaglyph."""
        self._require_stereo()
        player = Player(
            lambda index: anaglyph(self.get_frame(0, index), self.get_frame(1, index)),
            self.nframes,
            fps=fps or self.fps,
            zoom=zoom,
            legend="playing 3D sequence [left=RED, right=CYAN]",
            loop=loop,
            allow_step=False,
            allow_loop_toggle=False,
            silent=self.silent,
            config=playback_config,
        )
        player.run()
        return player

    def play_youtube_3d(
        self,
        zoom: float = 1,
        save_path: str | Path | None = None,
        playback_config: PlaybackConfig | None = None,
    ) -> Path | None:
        """Show channels 0/1 side by side in a 16:9 frame, once.

        When *save_path* is given the composed frames are also encoded to
        ``<save_path>.avi``, a layout accepted by YouTube for 3D uploads.
        """
        self._require_stereo()
        config = playback_config or DEFAULT_PLAYBACK_CONFIG

        height = self.height
        width = int(height * 16 / 9) // 2 * 2
        delay_ms = max(1, int(round((1.0 / self.fps - config.LOAD_TIME_COMPENSATION) * 1000)))
        if not self.silent:
            logger.info(f"🖼️  Side-by-side frame [{height}x{width}x3]")

        composed: list[np.ndarray] | None = [] if save_path else None
        name = config.WINDOW_NAME
        cv2.namedWindow(name, cv2.WINDOW_AUTOSIZE)
        cv2.setWindowTitle(name, "playing 3D sequence")
        try:
            for index in range(self.nframes):
                frame = side_by_side(
                    self.get_frame(0, index), self.get_frame(1, index), width, height
                )
                cv2.imshow(name, cv2.cvtColor(zoom_frame(frame, zoom), cv2.COLOR_RGB2BGR))
                if composed is not None:
                    composed.append(frame)
                if cv2.waitKeyEx(delay_ms) in config.KEY_CLOSE:
                    break
                if cv2.getWindowProperty(name, cv2.WND_PROP_VISIBLE) < 1:
                    break
        finally:
            cv2.destroyWindow(name)

        if not composed:
            return None

        output = Video(
            frames=np.stack(composed),
            fps=self.fps,
            length=self.length,
            dest_folder=self.dest_folder,
            silent=self.silent,
            engine_config=self.engine_config,
        )
        return output.save(save_path)
