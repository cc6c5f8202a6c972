# mipmap.py

"""Mip pyramid generation.

A pyramid for a `w x h` base holds `floor(log2(max(w, h)))` levels. Level k is
`max(1, prev_w // 2) x max(1, prev_h // 2)` where prev is the base for k=0 and
level k-1 otherwise, so the last level is always 1x1. Each level is a box
filtered copy of the level before it: destination pixel (x, y) averages the
2x2 source block starting at (2x, 2y). When a source axis has odd length the
last destination column/row also takes the leftover source column/row (3
wide instead of 2), so every source pixel lands in exactly one average.
"""

import logging

import numpy as np

from config import global_config
from image_buffer import ImageBuffer
from logger import get_logger
from profiler import Profiler

log = get_logger(__name__)

def level_count(width: int, height: int) -> int:
    """Number of levels below the base, i.e. floor(log2(max(w, h))).
    Zero for 1x1 and for images with a zero dimension."""
    if width <= 0 or height <= 0:
        return 0
    # exact integer log2, no float rounding near powers of two
    return max(width, height).bit_length() - 1

def level_sizes(width: int, height: int) -> list[tuple[int, int]]:
    """(width, height) of every pyramid level, finest first."""
    sizes = []
    for _ in range(level_count(width, height)):
        assert not (width == 1 and height == 1)
        width = max(1, width // 2)
        height = max(1, height // 2)
        sizes.append((width, height))
    assert not sizes or sizes[-1] == (1, 1)
    return sizes

def _block_starts(src_len: int, dst_len: int) -> tuple[np.ndarray, np.ndarray]:
    """Start index and length of the source run folded into each destination
    index along one axis. Runs are 2 long except the last, which absorbs
    whatever is left (1 for a length-1 source, 3 for an odd one)."""
    starts = 2 * np.arange(dst_len)
    lengths = np.diff(np.append(starts, src_len))
    return starts, lengths

def downsample(src: ImageBuffer, dst: ImageBuffer) -> None:
    """Fill `dst` with the box-filtered low frequencies of `src`."""
    expected = (max(1, src.width // 2), max(1, src.height // 2))
    if (dst.width, dst.height) != expected:
        raise ValueError(f"destination must be {expected[0]}x{expected[1]} for a "
                         f"{src.width}x{src.height} source, got {dst.width}x{dst.height}")

    x_starts, x_lengths = _block_starts(src.width, dst.width)
    y_starts, y_lengths = _block_starts(src.height, dst.height)

    # Sum each run of rows, then each run of columns: (dst_h, dst_w, 3) block sums.
    sums = np.add.reduceat(src.data.astype(np.float64), y_starts, axis=0)
    sums = np.add.reduceat(sums, x_starts, axis=1)
    counts = y_lengths[:, np.newaxis] * x_lengths[np.newaxis, :]
    dst.data[...] = sums / counts[..., np.newaxis]

@Profiler.timed()
def generate_mipmap(base: ImageBuffer) -> list[ImageBuffer]:
    """Build the whole pyramid for `base`, finest level first.

    Returns an empty list for 1x1 (or zero-sized) images: there is nothing
    coarser to build.
    """
    levels = [ImageBuffer(w, h) for w, h in level_sizes(base.width, base.height)]
    if not levels:
        return levels

    chain = " -> ".join(f"[{level.width}x{level.height}]" for level in levels)
    level_no = logging.INFO if global_config.log_mipmap_generation.val else logging.DEBUG
    log.log(level_no, "Regenerating mipmap (%d levels): [%dx%d] -> %s",
            len(levels), base.width, base.height, chain)

    for i, dst in enumerate(levels):
        src = base if i == 0 else levels[i - 1]
        downsample(src, dst)
    return levels
