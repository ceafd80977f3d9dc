"""Tests for ffvideo.cache module."""

import os
from pathlib import Path

from ffvideo.cache import (
    cache_dir_name,
    cache_path,
    clear_cache_dir,
    format_number,
    frame_path,
    frame_pattern,
    is_cache_fresh,
    list_frame_files,
)


def _touch_frames(directory: Path, indices, encoding="png"):
    directory.mkdir(parents=True, exist_ok=True)
    for index in indices:
        frame_path(directory, index, encoding).write_bytes(b"frame")


class TestNaming:
    def test_format_number(self):
        assert format_number(10) == "10"
        assert format_number(10.0) == "10"
        assert format_number(2.5) == "2.5"

    def test_frame_pattern_and_path(self):
        assert frame_pattern("jpg") == "frame-%06d.jpg"
        assert frame_path(Path("d"), 1, "png") == Path("d") / "frame-000001.png"

    def test_cache_dir_name(self):
        name = cache_dir_name(
            "/videos/clip.mp4",
            fps=10.0,
            width=320,
            height=240,
            length=5,
            channel=1,
            seek=2.5,
            encoding="png",
        )

        assert name == "clip.mp4_10fps_320x240_5s_c1_sk2.5_png"

    def test_cache_path_joins_dest_folder(self):
        path = cache_path(
            "scratch", "clip.mp4", fps=5, width=2, height=2, length=1, channel=0, seek=0,
            encoding="jpg",
        )

        assert path == Path("scratch") / "clip.mp4_5fps_2x2_1s_c0_sk0_jpg"


class TestIsCacheFresh:
    def test_missing_directory(self, tmp_path):
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"v")

        assert is_cache_fresh(tmp_path / "nope", source, "png") is False

    def test_missing_first_frame(self, tmp_path):
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"v")
        _touch_frames(tmp_path / "cache", [2, 3])

        assert is_cache_fresh(tmp_path / "cache", source, "png") is False

    def test_frames_newer_than_source(self, tmp_path):
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"v")
        os.utime(source, (1_000_000, 1_000_000))
        _touch_frames(tmp_path / "cache", [1])

        assert is_cache_fresh(tmp_path / "cache", source, "png") is True

    def test_source_modified_after_decoding(self, tmp_path):
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"v")
        _touch_frames(tmp_path / "cache", [1])
        first = frame_path(tmp_path / "cache", 1, "png")
        os.utime(first, (1_000_000, 1_000_000))

        assert is_cache_fresh(tmp_path / "cache", source, "png") is False

    def test_other_encoding_is_not_a_hit(self, tmp_path):
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"v")
        os.utime(source, (1_000_000, 1_000_000))
        _touch_frames(tmp_path / "cache", [1], encoding="jpg")

        assert is_cache_fresh(tmp_path / "cache", source, "png") is False


class TestListAndClear:
    def test_list_stops_at_first_gap(self, tmp_path):
        _touch_frames(tmp_path, [1, 2, 3, 5])
        (tmp_path / "notes.txt").write_text("ignored")

        files = list_frame_files(tmp_path, "png")

        assert [f.name for f in files] == [
            "frame-000001.png",
            "frame-000002.png",
            "frame-000003.png",
        ]

    def test_list_empty_directory(self, tmp_path):
        assert list_frame_files(tmp_path / "missing", "png") == []

    def test_clear(self, tmp_path):
        directory = tmp_path / "cache"
        _touch_frames(directory, [1, 2])

        assert clear_cache_dir(directory) is True
        assert not directory.exists()
        assert clear_cache_dir(directory) is False
