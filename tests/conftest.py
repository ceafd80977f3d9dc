from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from ffvideo.system_tools import ToolInfo

# Number of frames the fake ffmpeg "decodes" per stream
FAKE_FRAME_COUNT = 5


def fake_pixel(index: int, stream: int) -> tuple[int, int, int, int]:
    """Colour of 1-based frame *index* of *stream* as written by the fake decoder."""
    return (index * 10, stream * 100, 50, 255)


def _stream_from_map(cmd: list[str]) -> int:
    map_arg = cmd[cmd.index("-map") + 1]
    return int(map_arg.replace(":", ".").split(".")[-1])


@pytest.fixture
def fake_ffmpeg():
    """Stand in for the ffmpeg binary.

    Decoding writes FAKE_FRAME_COUNT solid-colour RGBA PNGs into the output
    pattern; encoding writes a placeholder file. The mock records every argv.
    """

    def _run(cmd, *, engine, output_path, timeout=None):
        output = Path(cmd[-1])
        if "%06d" in output.name:
            width, height = (int(v) for v in cmd[cmd.index("-s") + 1].split("x"))
            stream = _stream_from_map(cmd)
            for index in range(1, FAKE_FRAME_COUNT + 1):
                image = Image.new("RGBA", (width, height), fake_pixel(index, stream))
                if output.suffix != ".png":
                    image = image.convert("RGB")
                image.save(output.parent / (output.name % index))
        else:
            output.write_bytes(b"RIFF....AVI ")
        return {"render_ms": 1, "engine": engine, "command": " ".join(cmd), "kilobytes": 0}

    tool = ToolInfo(name="ffmpeg", available=True, version="6.0")
    with patch("ffvideo.external_engines.ffmpeg.discover_tool", return_value=tool), patch(
        "ffvideo.external_engines.ffmpeg.run_command", side_effect=_run
    ) as mock_run:
        yield mock_run


@pytest.fixture
def source_video(tmp_path):
    """An input file for Video; its content never reaches a real decoder."""
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return path


@pytest.fixture
def scratch_dir(tmp_path):
    return tmp_path / "scratch"
