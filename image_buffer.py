# image_buffer.py

import numpy as np
from numpy.typing import NDArray

from config import global_config

class ImageBuffer:
    """
    Fixed-size 2D grid of RGB color samples, stored row-major as a numpy array
    of shape (height, width, 3).

    Pixel (x, y) lives at `data[y, x]`. Access outside `0 <= x < width`,
    `0 <= y < height` is a programmer error and raises IndexError; it is never
    clamped or wrapped (numpy would happily wrap negative indices).

    Colors are plain (3,) arrays, so they support +, +=, scalar * and /
    without any wrapper type.
    """
    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"image size must be non-negative, got {width}x{height}")
        self.data: NDArray[np.float32]  # shape: (height, width, 3)
        self.data = np.zeros((height, width, 3), dtype=global_config.color_dtype.val)

    @classmethod
    def from_array(cls, array) -> "ImageBuffer":
        """Build an image from an (h, w, 3) array-like. The values are copied."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"expected an (h, w, 3) array, got shape {array.shape}")
        image = cls(array.shape[1], array.shape[0])
        image.data[...] = array
        return image

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def _check_bounds(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")

    def at(self, x: int, y: int) -> NDArray[np.float32]:
        """Color at pixel (x, y). The result is a view: writing to it writes the image."""
        self._check_bounds(x, y)
        return self.data[y, x]

    def set(self, x: int, y: int, color) -> None:
        self._check_bounds(x, y)
        self.data[y, x] = color

    def copy(self) -> "ImageBuffer":
        """Independent deep copy."""
        return ImageBuffer.from_array(self.data)

    def to_rgb8(self, exposure: float = 1.0) -> NDArray[np.uint8]:
        """Scale by `exposure`, clip to [0,1] and quantize to 8 bits for display."""
        scaled = np.clip(self.data * exposure, 0.0, 1.0)
        return np.round(scaled * 255.0).astype(np.uint8)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ImageBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and bool(np.array_equal(self.data, other.data))

    def __repr__(self) -> str:
        return f"ImageBuffer({self.width}x{self.height})"
