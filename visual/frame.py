"""
Frame Module
Decoded raster frames captured from a browser session.
"""

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image


@dataclass
class Frame:
    index: int
    pixels: np.ndarray  # (height, width, 4) uint8, RGBA

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def rgb(self) -> np.ndarray:
        """Pixel data with the alpha channel dropped (not composited)."""
        return self.pixels[:, :, :3]

    @classmethod
    def from_png(cls, index: int, data: bytes) -> "Frame":
        """Decode encoded image bytes into an RGBA frame."""
        with Image.open(io.BytesIO(data)) as image:
            pixels = np.asarray(image.convert("RGBA"), dtype=np.uint8)
        return cls(index=index, pixels=pixels)
