import numpy as np

from image_buffer import ImageBuffer


def index_image(width: int, height: int) -> ImageBuffer:
    """Every channel of pixel (x, y) holds its row-major index y * width + x."""
    index = np.arange(width * height, dtype=np.float32).reshape(height, width)
    return ImageBuffer.from_array(np.repeat(index[..., np.newaxis], 3, axis=2))


def random_image(width: int, height: int, seed: int = 0) -> ImageBuffer:
    rng = np.random.default_rng(seed)
    return ImageBuffer.from_array(rng.random((height, width, 3), dtype=np.float32))


def pixel_center(image: ImageBuffer, x: int, y: int) -> tuple[float, float]:
    return ((x + 0.5) / image.width, (y + 0.5) / image.height)
