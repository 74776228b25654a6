# debug.py
# Meant to be used while the debugger is paused on a frame. Render lists and
# buffers are too much to read as numbers, so these plot them with matplotlib.

from typing import Iterable, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.colors import Normalize

from triangle import RenderMode, Triangle


def draw_array(image: np.ndarray, show: bool = True):
    """Shows a depth buffer (h, w) or frame buffer (h, w, 3). Returns the figure."""
    h, w = image.shape[:2]
    fig, ax = plt.subplots()

    norm = Normalize(vmin=float(image.min()), vmax=float(image.max()))

    if image.ndim == 2 or (image.ndim == 3 and image.shape[2] == 1):
        ax.imshow(image.squeeze(), norm=norm)
    elif image.ndim == 3 and image.shape[2] == 3:
        if image.dtype == np.uint8:
            ax.imshow(image)
        else:
            ax.imshow(norm(image))
    else:
        raise ValueError(f"Unsupported shape {image.shape}")

    rect = patches.Rectangle((0, 0), w - 1, h - 1, linewidth=1, edgecolor='red', facecolor='none')
    ax.add_patch(rect)
    ax.axis('off')

    # Hover shows the raw value under the cursor
    def format_coord(x: float, y: float) -> str:
        xi, yi = int(x + 0.5), int(y + 0.5)
        if 0 <= yi < h and 0 <= xi < w:
            val = image[yi, xi]
            return f"x={xi}, y={yi}, val={val}"
        return ""

    ax.format_coord = format_coord
    if show:
        plt.show()
    return fig


def plot_render_list(triangles: Iterable[Triangle], viewport: Optional[Tuple[int, int, int, int]] = None,
                     show: bool = True):
    """
    Plots screen-space triangles the way the frame buffer would draw them.

    triangles: render list from Camera.rasterize_triangles (drawn in list order)
    viewport: optional (x1, y1, x2, y2), outlined in yellow
    """
    fig, ax = plt.subplots(figsize=(8, 6))
    count = 0
    for tri in triangles:
        xy = tri.points[:, :2]
        face = np.array(tri.color) / 255.0
        filled = tri.render_mode.is_filled
        edge = face if tri.render_mode == RenderMode.WIREFRAME_RGB else 'k'
        ax.add_patch(patches.Polygon(xy, closed=True, fill=filled,
                                     facecolor=face if filled else 'none', edgecolor=edge, linewidth=0.5))
        count += 1

    if viewport is not None:
        x1, y1, x2, y2 = viewport
        ax.add_patch(patches.Rectangle((x1, y1), x2 - x1, y2 - y1, linewidth=1,
                                       edgecolor='yellow', facecolor='none'))
    ax.autoscale_view()
    ax.set_aspect('equal')
    ax.invert_yaxis()  # screen y grows downwards
    ax.set_title(f'Render list ({count} triangles)')
    if show:
        plt.show()
    return fig


def plot_profile(report: dict, show: bool = True):
    """
    Bar chart of a Profiler.profile_accumulate_report() result (ms per frame).
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    names = list(report)
    totals = [report[n][0] for n in names]
    ax.barh(names, totals)
    ax.set_xlabel('ms per frame')
    ax.set_title('Profile')
    ax.grid(True, linestyle='--', alpha=0.5)
    if show:
        plt.show()
    return fig
