"""Interactive frame sequence playback in an OpenCV window.

:class:`PlaybackState` holds the play/pause/step/loop logic and knows nothing
about windows, so it can be driven by tests. :class:`Player` wires it to
HighGUI: ``cv2.waitKeyEx`` doubles as the redraw timer and the keyboard
handler, and a mouse click toggles pause.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import cv2
import numpy as np

from .config import DEFAULT_PLAYBACK_CONFIG, PlaybackConfig
from .error_handling import ValidationError
from .frames import to_uint8, zoom_frame

logger = logging.getLogger(__name__)


class PlaybackState:
    """Frame pointer and transport flags of a running player."""

    def __init__(
        self,
        nframes: int,
        loop: bool = False,
        allow_step: bool = True,
        allow_loop_toggle: bool = True,
    ) -> None:
        if nframes <= 0:
            raise ValidationError("Nothing to play: the sequence has no frames")
        self.nframes = nframes
        self.loop = loop
        self.allow_step = allow_step
        self.allow_loop_toggle = allow_loop_toggle
        self.index = 0
        self.paused = False
        self.step = False
        self.running = True

    def tick(self) -> int | None:
        """Advance one timer interval; return the frame index to display, if any."""
        if not self.paused:
            shown = self.index
            if self.index < self.nframes - 1:
                self.index += 1
            elif self.loop:
                self.index = 0
            else:
                # End of sequence: rewind and wait for the user to restart
                self.index = 0
                self.paused = True
            return shown

        if self.step:
            self.step = False
            if self.index > self.nframes - 1:
                self.index = 0 if self.loop else self.nframes - 1
            elif self.index < 0:
                self.index = self.nframes - 1 if self.loop else 0
            return self.index

        return None

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def toggle_loop(self) -> bool:
        if self.allow_loop_toggle:
            self.loop = not self.loop
        return self.loop

    def step_forward(self) -> None:
        if self.allow_step:
            self.paused = True
            self.index += 1
            self.step = True

    def step_backward(self) -> None:
        if self.allow_step:
            self.paused = True
            self.index -= 1
            self.step = True

    def close(self) -> None:
        self.running = False

    def handle_key(self, code: int, config: PlaybackConfig = DEFAULT_PLAYBACK_CONFIG) -> str | None:
        """Apply the action bound to key *code*; return its name or None."""
        if code in config.KEY_CLOSE:
            self.close()
            return "close"
        if code in config.KEY_PAUSE:
            self.toggle_pause()
            return "pause"
        if code in config.KEY_LOOP and self.allow_loop_toggle:
            self.toggle_loop()
            return "loop"
        if code in config.KEY_STEP_FORWARD and self.allow_step:
            self.step_forward()
            return "step_forward"
        if code in config.KEY_STEP_BACKWARD and self.allow_step:
            self.step_backward()
            return "step_backward"
        return None


class Player:
    """Timer-driven display of ``render(index)`` frames in a HighGUI window."""

    def __init__(
        self,
        render: Callable[[int], np.ndarray],
        nframes: int,
        *,
        fps: float,
        zoom: float = 1,
        legend: str = "playing sequence",
        loop: bool = False,
        allow_step: bool = True,
        allow_loop_toggle: bool = True,
        silent: bool = False,
        config: PlaybackConfig | None = None,
    ) -> None:
        if fps <= 0:
            raise ValidationError(f"Playback fps must be positive, got {fps}")
        self.render = render
        self.fps = fps
        self.zoom = zoom
        self.legend = legend
        self.silent = silent
        self.config = config or DEFAULT_PLAYBACK_CONFIG
        self.state = PlaybackState(
            nframes,
            loop=loop,
            allow_step=allow_step,
            allow_loop_toggle=allow_loop_toggle,
        )

    @property
    def interval_ms(self) -> int:
        return max(1, int(round(1000.0 / self.fps)))

    def help_text(self) -> str:
        text = "[space] to pause/resume/restart"
        if self.state.allow_loop_toggle:
            text += ", [L] to loop"
        if self.state.allow_step:
            text += ", [right,left] to step"
        return text + ", [q/esc/ctrl+w] to close"

    def _on_mouse(self, event: int, x: int, y: int, flags: int, param: object) -> None:
        if event == cv2.EVENT_LBUTTONDOWN:
            self.state.toggle_pause()

    def show(self, index: int) -> None:
        frame = zoom_frame(to_uint8(self.render(index)), self.zoom)
        if frame.ndim == 3 and frame.shape[2] == 3:
            frame = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
        cv2.imshow(self.config.WINDOW_NAME, frame)

    def _window_closed(self) -> bool:
        return cv2.getWindowProperty(self.config.WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1

    def run(self) -> None:
        """Block until the window is closed or a close key is pressed."""
        name = self.config.WINDOW_NAME
        cv2.namedWindow(name, cv2.WINDOW_AUTOSIZE)
        cv2.setWindowTitle(name, self.legend)
        cv2.setMouseCallback(name, self._on_mouse)

        if not self.silent:
            logger.info(f"▶️  Playback started - {self.help_text()}")

        shown_once = False
        try:
            while self.state.running:
                index = self.state.tick()
                if index is not None:
                    self.show(index)
                    shown_once = True

                key = cv2.waitKeyEx(self.interval_ms)
                if key != -1:
                    action = self.state.handle_key(key, self.config)
                    if action == "loop" and not self.silent:
                        logger.info(f"🔁 Looping - {'on' if self.state.loop else 'off'}")

                if shown_once and self.state.running and self._window_closed():
                    self.state.close()
        finally:
            cv2.destroyWindow(name)
