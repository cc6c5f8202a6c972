# texture.py

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from config import global_config
from image_buffer import ImageBuffer
from logger import get_logger
from mipmap import generate_mipmap
from samplers import sample_bilinear, sample_nearest, sample_trilinear

log = get_logger(__name__)

class Sampler(Enum):
    NEAREST = "nearest"
    BILINEAR = "bilinear"
    TRILINEAR = "trilinear"

def _batch_shape(uv) -> tuple[int, ...]:
    uv = np.asarray(uv)
    if uv.shape[-1:] != (2,):
        raise ValueError(f"uv must have a trailing axis of size 2, got shape {uv.shape}")
    return uv.shape[:-1]

class ImageTexture:
    """
    An image sampled with one of the Sampler modes.

    The base image is copied in and owned by the texture. The mip pyramid is
    derived from it and only kept while the sampler is TRILINEAR; it is rebuilt
    when the texture switches to TRILINEAR and dropped when it switches away.
    Callers that write to `image` directly must call make_valid() before the
    next evaluate() so the pyramid catches up.
    """
    def __init__(self, image: ImageBuffer, sampler: Sampler | str | None = None):
        if sampler is None:
            sampler = global_config.default_sampler.val
        self._sampler: Sampler = Sampler(sampler)
        self.image: ImageBuffer = image.copy()
        self._levels: list[ImageBuffer] = []
        self.update_mipmap()

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    @sampler.setter
    def sampler(self, sampler: Sampler | str):
        sampler = Sampler(sampler)
        previous = self._sampler
        self._sampler = sampler
        if sampler == previous:
            return
        log.debug("Sampler %s -> %s", previous.value, sampler.value)
        if sampler == Sampler.TRILINEAR or previous == Sampler.TRILINEAR:
            self.update_mipmap()

    @property
    def levels(self) -> tuple[ImageBuffer, ...]:
        """Current mip pyramid, finest first. Empty unless sampling trilinearly.
        The level pixels are read-only."""
        return tuple(self._levels)

    def evaluate(self, uv, lod: float = 0.0) -> NDArray[np.float32]:
        if self.image.is_empty:
            return np.zeros(_batch_shape(uv) + (3,), dtype=self.image.data.dtype)
        if self._sampler == Sampler.NEAREST:
            return sample_nearest(self.image, uv)
        if self._sampler == Sampler.BILINEAR:
            return sample_bilinear(self.image, uv)
        return sample_trilinear(self.image, self._levels, uv, lod)

    def update_mipmap(self) -> None:
        if self._sampler == Sampler.TRILINEAR:
            # Build completely before swapping in: evaluate never sees a half
            # filled pyramid.
            levels = generate_mipmap(self.image)
            # read-only: edit the base image and call make_valid() instead
            for level in levels:
                level.data.flags.writeable = False
            self._levels = levels
        else:
            self._levels = []

    def make_valid(self) -> None:
        """Re-derive the pyramid after the base image was modified in place."""
        self.update_mipmap()

    def to_display(self) -> NDArray[np.uint8]:
        return self.image.to_rgb8(1.0)

    def __eq__(self, other) -> bool:
        # The pyramid and the sampler are derived/presentation state.
        if not isinstance(other, ImageTexture):
            return NotImplemented
        return self.image == other.image

class ConstantTexture:
    """The same color everywhere, at every lod."""
    def __init__(self, color: Sequence[float] = (1.0, 1.0, 1.0), scale: float = 1.0):
        self.color = np.array(color, dtype=global_config.color_dtype.val)
        if self.color.shape != (3,):
            raise ValueError(f"color must have 3 components, got shape {self.color.shape}")
        self.scale = float(scale)

    def evaluate(self, uv, lod: float = 0.0) -> NDArray[np.float32]:
        value = (self.color * self.scale).astype(self.color.dtype)
        return np.broadcast_to(value, _batch_shape(uv) + (3,)).copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConstantTexture):
            return NotImplemented
        return bool(np.array_equal(self.color, other.color)) and self.scale == other.scale

class TextureKind(Enum):
    CONSTANT = "constant"
    IMAGE = "image"

@dataclass(slots=True, eq=False)
class Texture:
    """Either a ConstantTexture or an ImageTexture, told apart by `kind`.
    evaluate() dispatches on the tag rather than through a shared base class."""
    kind: TextureKind
    data: ConstantTexture | ImageTexture

    def __post_init__(self):
        expected = ConstantTexture if self.kind == TextureKind.CONSTANT else ImageTexture
        if not isinstance(self.data, expected):
            raise TypeError(f"{self.kind.name} texture needs a {expected.__name__}, got {type(self.data).__name__}")

    @classmethod
    def constant(cls, color: Sequence[float] = (1.0, 1.0, 1.0), scale: float = 1.0) -> "Texture":
        return cls(TextureKind.CONSTANT, ConstantTexture(color, scale))

    @classmethod
    def image(cls, image: ImageBuffer, sampler: Sampler | str | None = None) -> "Texture":
        return cls(TextureKind.IMAGE, ImageTexture(image, sampler))

    def evaluate(self, uv, lod: float = 0.0) -> NDArray[np.float32]:
        match self.kind:
            case TextureKind.CONSTANT:
                return self.data.evaluate(uv)
            case TextureKind.IMAGE:
                return self.data.evaluate(uv, lod)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Texture):
            return NotImplemented
        return self.kind == other.kind and self.data == other.data
