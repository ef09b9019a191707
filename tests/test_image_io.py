"""Tests for image output."""

import io

import pytest
import numpy as np

from rayforge.vec3 import Color
from rayforge.image_io import (
    PPMWriter, quantize_color, to_ldr, format_ppm, write_ppm, save_image
)


class TestQuantize:
    """Test gamma correction and 8-bit quantization."""

    def test_black(self):
        assert quantize_color(Color(0, 0, 0)) == (0, 0, 0)

    def test_white_maps_to_255(self):
        assert quantize_color(Color(1, 1, 1)) == (255, 255, 255)

    def test_overbright_is_clamped(self):
        assert quantize_color(Color(4.0, 1.5, 1.0)) == (255, 255, 255)

    def test_negative_is_clamped(self):
        assert quantize_color(Color(-0.5, 0, 0)) == (0, 0, 0)

    def test_gamma_two_is_square_root(self):
        # sqrt(0.25) = 0.5 -> int(256 * 0.5) = 128
        assert quantize_color(Color(0.25, 0.25, 0.25)) == (128, 128, 128)

    def test_to_ldr_matches_quantize_color(self):
        colors = [Color(0.25, 0.5, 0.75), Color(0.01, 0.99, 2.0), Color(0.0, 0.3, 0.6)]
        image = np.array([c.to_array() for c in colors])
        ldr = to_ldr(image)
        assert ldr.dtype == np.uint8
        for c, row in zip(colors, ldr):
            assert tuple(int(x) for x in row) == quantize_color(c)

    def test_to_ldr_custom_gamma(self):
        ldr = to_ldr(np.array([[[0.5, 0.5, 0.5]]]), gamma=1.0)
        assert ldr[0, 0, 0] == 128

    def test_nan_channel_is_black(self):
        nan = float('nan')
        assert quantize_color(Color(nan, 0.25, 0.25)) == (0, 128, 128)

    def test_to_ldr_nan_matches_quantize_color(self):
        nan = float('nan')
        colors = [Color(nan, 0.25, 0.25), Color(0.5, nan, float('inf'))]
        ldr = to_ldr(np.array([c.to_array() for c in colors]))
        for c, row in zip(colors, ldr):
            assert tuple(int(x) for x in row) == quantize_color(c)


class TestPPM:
    """Test plain-text P3 encoding."""

    def test_format_layout(self):
        image = np.zeros((2, 3, 3))
        image[0, 0] = [1.0, 0.0, 0.0]
        image[1, 2] = [0.0, 0.0, 1.0]

        lines = format_ppm(image).splitlines()
        assert lines[:3] == ["P3", "3 2", "255"]
        assert len(lines) == 3 + 6
        # Row-major, top row first, left to right
        assert lines[3] == "255 0 0"
        assert lines[-1] == "0 0 255"

    def test_values_in_range(self):
        rng = np.random.default_rng(0)
        image = rng.uniform(-1, 3, (4, 5, 3))
        for line in format_ppm(image).splitlines()[3:]:
            values = [int(v) for v in line.split()]
            assert len(values) == 3
            assert all(0 <= v <= 255 for v in values)

    def test_write_ppm(self):
        stream = io.StringIO()
        write_ppm(np.ones((2, 2, 3)), stream)
        assert stream.getvalue().startswith("P3\n2 2\n255\n255 255 255\n")


class TestPPMWriter:
    """Test the streaming scanline sink."""

    def test_streamed_matches_whole_image(self):
        rng = np.random.default_rng(1)
        image = rng.uniform(0, 1, (3, 4, 3))

        stream = io.StringIO()
        writer = PPMWriter(stream, 4, 3)
        for row in image:
            writer.write_scanline(row)

        assert writer.complete
        assert stream.getvalue() == format_ppm(image)

    def test_header_written_first(self):
        stream = io.StringIO()
        PPMWriter(stream, 7, 5)
        assert stream.getvalue() == "P3\n7 5\n255\n"

    def test_callable(self):
        stream = io.StringIO()
        writer = PPMWriter(stream, 1, 1)
        writer(np.zeros((1, 3)))
        assert stream.getvalue().endswith("0 0 0\n")

    def test_too_many_rows(self):
        writer = PPMWriter(io.StringIO(), 2, 1)
        writer.write_scanline(np.zeros((2, 3)))
        with pytest.raises(ValueError):
            writer.write_scanline(np.zeros((2, 3)))

    def test_wrong_width(self):
        writer = PPMWriter(io.StringIO(), 2, 2)
        with pytest.raises(ValueError):
            writer.write_scanline(np.zeros((3, 3)))


class TestSaveImage:
    """Test saving images to disk."""

    def test_save_ppm(self, tmp_path):
        path = tmp_path / "out.ppm"
        image = np.full((2, 3, 3), 0.25)
        save_image(image, path)
        assert path.read_text() == format_ppm(image)

    def test_save_png(self, tmp_path):
        from PIL import Image

        path = tmp_path / "out.png"
        image = np.zeros((4, 6, 3))
        image[:, :, 1] = 1.0
        save_image(image, str(path))

        with Image.open(path) as img:
            assert img.size == (6, 4)
            assert img.getpixel((0, 0)) == (0, 255, 0)

    def test_save_stdout(self, capsys):
        save_image(np.zeros((1, 2, 3)), '-')
        assert capsys.readouterr().out == "P3\n2 1\n255\n0 0 0\n0 0 0\n"
