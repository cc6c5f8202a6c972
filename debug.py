# debug.py
# Helpers for looking at image data while poking around in a debugger or a
# notebook. Every function returns the figure; pass show=True to pop a window.

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.colors import Normalize
from matplotlib.figure import Figure

from image_buffer import ImageBuffer
from texture import ImageTexture

def _pixels(image: ImageBuffer | np.ndarray) -> np.ndarray:
    if isinstance(image, ImageBuffer):
        return image.data
    return np.asarray(image)

def _imshow(ax, pixels: np.ndarray, title: str | None = None):
    h, w = pixels.shape[:2]
    if pixels.size:
        norm = Normalize(vmin=float(pixels.min()), vmax=float(pixels.max()))
        if pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] == 1):
            ax.imshow(pixels.squeeze(axis=-1) if pixels.ndim == 3 else pixels, norm=norm, interpolation="nearest")
        elif pixels.ndim == 3 and pixels.shape[2] == 3:
            ax.imshow(np.clip(norm(pixels), 0.0, 1.0), interpolation="nearest")
        else:
            raise ValueError(f"Unsupported shape {pixels.shape}")
    # outline around the pixel area, pixel (x,y) covers [x-0.5, x+0.5]
    rect = patches.Rectangle((-0.5, -0.5), w, h, linewidth=1, edgecolor='red', facecolor='none')
    ax.add_patch(rect)
    ax.set_xlim(-0.5, max(w, 1) - 0.5)
    ax.set_ylim(max(h, 1) - 0.5, -0.5)
    ax.axis('off')
    if title:
        ax.set_title(title, fontsize=8)

def draw_array(image: ImageBuffer | np.ndarray, show=False) -> Figure:
    """Draw one image with a hover readout of the raw pixel value."""
    pixels = _pixels(image)
    h, w = pixels.shape[:2]
    fig, ax = plt.subplots()
    _imshow(ax, pixels, f"{w}x{h}")

    def format_coord(x: float, y: float) -> str:
        xi, yi = int(x + 0.5), int(y + 0.5)
        if 0 <= yi < h and 0 <= xi < w:
            val = pixels[yi, xi]
            return f"x={xi}, y={yi}, val={val}"
        return ""

    ax.format_coord = format_coord
    if show:
        plt.show()
    return fig

def plot_mip_chain(source: ImageTexture | list[ImageBuffer], show=False) -> Figure:
    """
    Base image followed by every mip level, side by side. Accepts a texture
    (base + its current pyramid) or a plain list of levels.
    Levels are drawn at the same on-screen size so the box filtering is easy
    to compare by eye.
    """
    if isinstance(source, ImageTexture):
        images = [source.image, *source.levels]
        titles = ["base"] + [f"level {i}" for i in range(len(source.levels))]
    else:
        images = list(source)
        titles = [f"level {i}" for i in range(len(images))]

    fig, axes = plt.subplots(1, max(1, len(images)), figsize=(2.5 * max(1, len(images)), 2.5), squeeze=False)
    for ax, image, title in zip(axes[0], images, titles):
        _imshow(ax, image.data, f"{title} [{image.width}x{image.height}]")
    if not images:
        axes[0][0].axis('off')
    if show:
        plt.show()
    return fig
