# samplers.py

# Texture filtering. Every sampler takes either one uv coordinate (shape (2,))
# or a whole grid of them (shape (..., 2)) the way the fragment stage hands
# them over, and returns colors of shape (3,) or (..., 3).
# uv is normalized: (0,0) is the top-left corner of pixel (0,0) and (1,1) is the
# bottom-right corner of pixel (w-1,h-1). Anything outside [0,1] is clamped.

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from image_buffer import ImageBuffer
from profiler import Profiler

def _to_pixel_space(image: ImageBuffer, uv) -> tuple[np.ndarray, np.ndarray]:
    """Clamp uv to [0,1] and scale it to continuous [0,w]x[0,h] pixel space."""
    uv = np.asarray(uv, dtype=np.float64)
    if uv.shape[-1:] != (2,):
        raise ValueError(f"uv must have a trailing axis of size 2, got shape {uv.shape}")
    uv = np.clip(uv, 0.0, 1.0)
    x = np.asarray(uv[..., 0] * image.width)
    y = np.asarray(uv[..., 1] * image.height)
    return x, y

def clamp_texel(image: ImageBuffer, ix: np.ndarray, iy: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Edge-clamp integer texel indices into [0,w-1]x[0,h-1].
    Shared by all samplers so they agree on boundary behaviour. Never wraps."""
    return np.clip(ix, 0, image.width - 1), np.clip(iy, 0, image.height - 1)

def _fetch(image: ImageBuffer, ix: np.ndarray, iy: np.ndarray) -> np.ndarray:
    # fancy indexing, so this is always a copy
    return image.data[iy, ix].astype(np.float64)

def _lerp(a: np.ndarray, b: np.ndarray, t) -> np.ndarray:
    # a + (b - a) * t returns `a` bit-exactly at t == 0
    return a + (b - a) * t

def _as_color(values: np.ndarray, image: ImageBuffer) -> NDArray[np.float32]:
    return values.astype(image.data.dtype, copy=False)

@Profiler.timed()
def sample_nearest(image: ImageBuffer, uv) -> NDArray[np.float32]:
    """Color of the pixel whose area contains uv."""
    x, y = _to_pixel_space(image, uv)
    # The pixel with the nearest center is the one containing (x,y).
    # uv of exactly 1 lands on w (or h) and clamp_texel pulls it back in.
    ix, iy = clamp_texel(image, np.floor(x).astype(np.int64), np.floor(y).astype(np.int64))
    return _as_color(_fetch(image, ix, iy), image)

def _bilinear(image: ImageBuffer, uv) -> np.ndarray:
    x, y = _to_pixel_space(image, uv)

    # Pixel (i,j) holds the signal at (i+0.5, j+0.5). Shift so that pixel
    # centers land on integers, then split into cell index and fraction.
    x = x - 0.5
    y = y - 0.5
    i = np.floor(x)
    j = np.floor(y)
    fx = np.expand_dims(x - i, -1)
    fy = np.expand_dims(y - j, -1)
    i = i.astype(np.int64)
    j = j.astype(np.int64)

    i0, j0 = clamp_texel(image, i, j)
    i1, j1 = clamp_texel(image, i + 1, j + 1)

    top = _lerp(_fetch(image, i0, j0), _fetch(image, i1, j0), fx)
    bottom = _lerp(_fetch(image, i0, j1), _fetch(image, i1, j1), fx)
    return _lerp(top, bottom, fy)

@Profiler.timed()
def sample_bilinear(image: ImageBuffer, uv) -> NDArray[np.float32]:
    """Interpolate the four pixel centers surrounding uv.

    Neighbours past the border are edge-clamped, so near the border the result
    degenerates to a 1D (or 0D) interpolation of the edge pixels. Sampling
    exactly at a pixel center returns that pixel."""
    return _as_color(_bilinear(image, uv), image)

@Profiler.timed()
def sample_trilinear(base: ImageBuffer, levels: Sequence[ImageBuffer], uv, lod: float) -> NDArray[np.float32]:
    """Bilinear sample blended between the two mip levels around `lod`.

    lod <= 0 reads the base image. Otherwise lod k (integral) reads levels[k]
    and fractional lods blend levels[floor(lod)] and levels[ceil(lod)], with
    both clamped to the last (1x1) level. An empty `levels` always reads the
    base image.
    """
    lod = float(lod)
    if not levels or lod <= 0.0 or np.isnan(lod):
        return sample_bilinear(base, uv)

    last = len(levels) - 1
    lo = int(np.clip(np.floor(lod), 0, last))
    hi = int(np.clip(np.ceil(lod), 0, last))
    if lo == hi:
        return _as_color(_bilinear(levels[lo], uv), base)

    fine = _bilinear(levels[lo], uv)
    coarse = _bilinear(levels[hi], uv)
    return _as_color(_lerp(fine, coarse, lod - lo), base)
