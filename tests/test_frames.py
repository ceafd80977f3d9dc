"""Tests for ffvideo.frames module."""

import numpy as np
import pytest
from PIL import Image

from ffvideo.error_handling import ProcessingError, ValidationError
from ffvideo.frames import (
    anaglyph,
    load_frame,
    save_frame,
    side_by_side,
    to_uint8,
    zoom_frame,
)


class TestLoadFrame:
    def test_rgba_png_is_reduced_to_rgb(self, tmp_path):
        path = tmp_path / "frame.png"
        Image.new("RGBA", (8, 6), (10, 20, 30, 128)).save(path)

        frame = load_frame(path)

        assert frame.shape == (6, 8, 3)
        assert frame.dtype == np.uint8
        assert tuple(frame[0, 0]) == (10, 20, 30)

    def test_grayscale_is_expanded(self, tmp_path):
        path = tmp_path / "gray.png"
        Image.new("L", (4, 4), 77).save(path)

        frame = load_frame(path)

        assert frame.shape == (4, 4, 3)
        assert tuple(frame[1, 1]) == (77, 77, 77)

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")

        with pytest.raises(ProcessingError, match="Failed to load frame"):
            load_frame(path)


class TestSaveFrame:
    def test_round_trip_uint8(self, tmp_path):
        frame = np.zeros((5, 7, 3), dtype=np.uint8)
        frame[:, :, 1] = 200

        path = save_frame(frame, tmp_path / "sub" / "out.png")

        assert path.exists()
        assert np.array_equal(load_frame(path), frame)

    def test_single_channel_frame(self, tmp_path):
        frame = np.full((4, 4, 1), 90, dtype=np.uint8)

        path = save_frame(frame, tmp_path / "gray.png")

        with Image.open(path) as img:
            assert img.mode == "L"

    def test_invalid_shape(self, tmp_path):
        with pytest.raises(ValidationError):
            save_frame(np.zeros((2, 2, 2, 2), dtype=np.uint8), tmp_path / "x.png")


def test_to_uint8_scales_floats():
    frame = np.array([[0.0, 0.5, 1.0, 2.0]], dtype=np.float32)

    result = to_uint8(frame)

    assert result.dtype == np.uint8
    assert result.tolist() == [[0, 128, 255, 255]]


def test_to_uint8_clips_integers():
    assert to_uint8(np.array([-5, 300], dtype=np.int32)).tolist() == [0, 255]


class TestAnaglyph:
    def test_channels(self):
        left = np.zeros((2, 3, 3), dtype=np.uint8)
        right = np.zeros((2, 3, 3), dtype=np.uint8)
        left[:, :, 0] = 200
        left[:, :, 1] = 1  # ignored
        right[:, :, 0] = 40

        merged = anaglyph(left, right)

        assert merged.shape == (2, 3, 3)
        assert tuple(merged[0, 0]) == (200, 40, 40)

    def test_size_mismatch(self):
        with pytest.raises(ValidationError, match="differ in size"):
            anaglyph(np.zeros((2, 2, 3)), np.zeros((3, 3, 3)))


class TestSideBySide:
    def test_halves_at_native_size(self):
        left = np.full((9, 8, 3), 10, dtype=np.uint8)
        right = np.full((9, 8, 3), 250, dtype=np.uint8)

        frame = side_by_side(left, right, 16, 9)

        assert frame.shape == (9, 16, 3)
        assert (frame[:, :8] == 10).all()
        assert (frame[:, 8:] == 250).all()

    def test_rescales_mismatched_views(self):
        left = np.full((4, 4, 3), 100, dtype=np.uint8)
        right = np.full((4, 4), 50, dtype=np.uint8)

        frame = side_by_side(left, right, 32, 18)

        assert frame.shape == (18, 32, 3)
        assert (frame[:, :16] == 100).all()
        assert (frame[:, 16:] == 50).all()


def test_zoom_frame():
    frame = np.arange(4, dtype=np.uint8).reshape(2, 2)

    assert zoom_frame(frame, 1) is frame
    zoomed = zoom_frame(frame, 2)
    assert zoomed.shape == (4, 4)
    assert zoomed[0, 0] == zoomed[1, 1] == 0
    assert zoomed[3, 3] == 3
