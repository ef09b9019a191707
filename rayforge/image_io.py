"""
Image output: gamma correction, 8-bit quantization and encoders.

Supports:
- Plain-text PPM (P3), whole images or streamed scanline by scanline
- Any format Pillow can write (PNG, JPEG, BMP, ...)
"""

from __future__ import annotations
import math
import sys
from pathlib import Path
from typing import IO, Union
import numpy as np

from .vec3 import Color

MAX_CHANNEL = 255


def quantize_color(color: Color, gamma: float = 2.0) -> tuple[int, int, int]:
    """Convert one averaged linear color to 8-bit channel values.

    Each channel is gamma corrected, clamped to [0, 0.999] and scaled by
    256, so 1.0 maps to 255 instead of overflowing to 256. NaN channels
    come out as 0, matching to_ldr.
    """
    inv_gamma = 1.0 / gamma
    channels = []
    for c in color:
        if math.isnan(c):
            c = 0.0
        c = max(c, 0.0) ** inv_gamma
        channels.append(int(256 * min(max(c, 0.0), 0.999)))
    return channels[0], channels[1], channels[2]


def to_ldr(image: np.ndarray, gamma: float = 2.0) -> np.ndarray:
    """Convert a linear float image to 8-bit with gamma correction.

    Args:
        image: Float array of shape (..., 3)
        gamma: Display gamma (2.0 means a square root per channel)

    Returns:
        uint8 array with the same shape
    """
    # NaN samples quantize to black
    linear = np.where(np.isnan(image), 0.0, image)
    corrected = np.power(np.clip(linear, 0.0, None), 1.0 / gamma)
    return (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)


def ppm_header(width: int, height: int) -> str:
    return f"P3\n{width} {height}\n{MAX_CHANNEL}\n"


def format_ppm_rows(ldr_rows: np.ndarray) -> str:
    """Format quantized pixels as 'R G B' lines, one pixel per line."""
    pixels = np.asarray(ldr_rows, dtype=np.uint8).reshape(-1, 3)
    return ''.join(f"{r} {g} {b}\n" for r, g, b in pixels.tolist())


def format_ppm(image: np.ndarray, gamma: float = 2.0) -> str:
    """Encode a whole linear image as P3 text."""
    height, width = image.shape[:2]
    return ppm_header(width, height) + format_ppm_rows(to_ldr(image, gamma))


def write_ppm(image: np.ndarray, stream: IO[str], gamma: float = 2.0) -> None:
    stream.write(format_ppm(image, gamma))


class PPMWriter:
    """Scanline sink that streams a P3 image as rows are finished.

    The header is written on construction; rows must arrive top to bottom.
    """

    def __init__(self, stream: IO[str], width: int, height: int, gamma: float = 2.0):
        self.stream = stream
        self.width = width
        self.height = height
        self.gamma = gamma
        self.rows_written = 0
        self.stream.write(ppm_header(width, height))

    def write_scanline(self, scanline: np.ndarray) -> None:
        """Quantize and write one row of averaged linear colors."""
        if self.rows_written >= self.height:
            raise ValueError(f"Image already has all {self.height} scanlines")
        if len(scanline) != self.width:
            raise ValueError(f"Scanline has {len(scanline)} pixels, expected {self.width}")

        self.stream.write(format_ppm_rows(to_ldr(scanline, self.gamma)))
        self.rows_written += 1

    def __call__(self, scanline: np.ndarray) -> None:
        self.write_scanline(scanline)

    @property
    def complete(self) -> bool:
        return self.rows_written == self.height


def save_image(image: np.ndarray, filename: Union[str, Path], gamma: float = 2.0) -> None:
    """Save image to file.

    Args:
        image: Linear float image or an already quantized uint8 image
        filename: Output filename (extension determines format, '-' writes
            P3 to stdout)
        gamma: Display gamma used when quantizing a float image
    """
    filename = str(filename)
    if image.dtype != np.uint8:
        image = to_ldr(image, gamma)

    if filename == '-':
        sys.stdout.write(ppm_header(image.shape[1], image.shape[0]) + format_ppm_rows(image))
        return

    if filename.lower().endswith('.ppm'):
        height, width = image.shape[:2]
        Path(filename).write_text(ppm_header(width, height) + format_ppm_rows(image))
        return

    from PIL import Image as PILImage

    pil_image = PILImage.fromarray(image, 'RGB')
    pil_image.save(filename)
