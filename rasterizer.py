# rasterizer.py

# Screen pixels live in an RGB numpy buffer. The geometry side hands over
# render-ready screen-space triangles; this module only fills and outlines them.
# Lines and text go through OpenCV, triangle fills through skimage.

import logging
from typing import Iterable, Optional, Tuple

import cv2
import numpy as np
from numpy.typing import NDArray
from skimage.draw import polygon

from config import COLOR_BLACK
from profiler import Profiler
from triangle import COLOR_WHITE, Color, RenderMode, Triangle

logger = logging.getLogger(__name__)


class FrameBuffer:
    def __init__(self, width: int, height: int, background: Color = COLOR_BLACK):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid frame buffer size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.rgb_buffer: NDArray[np.uint8] = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self.clear()

    def clear(self, color: Optional[Color] = None):
        self.rgb_buffer[:] = self.background if color is None else color

    def _is_bounded(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> Color:
        if not self._is_bounded((x, y)):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return tuple(int(c) for c in self.rgb_buffer[y, x])

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color):
        """Fills w x h pixels starting at (x, y), clamped to the buffer."""
        x1, y1 = max(int(x), 0), max(int(y), 0)
        x2, y2 = min(int(x + w), self.width), min(int(y + h), self.height)
        if x1 < x2 and y1 < y2:
            self.rgb_buffer[y1:y2, x1:x2] = color

    def draw_rect(self, x: int, y: int, w: int, h: int, color: Color):
        """Outlines the rectangle from (x, y) to (x + w, y + h) inclusive."""
        cv2.rectangle(self.rgb_buffer, (int(x), int(y)), (int(x + w), int(y + h)), color, thickness=1)

    def draw_string(self, x: int, y: int, text: str, color: Color = COLOR_WHITE, scale: float = 0.4):
        """Draws text with its top left corner near (x, y)."""
        (_, text_h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, 1)
        # putText anchors at the baseline
        cv2.putText(self.rgb_buffer, text, (int(x), int(y) + text_h), cv2.FONT_HERSHEY_SIMPLEX,
                    scale, color, 1, cv2.LINE_AA)

    def draw_line(self, start, end, color: Color = COLOR_WHITE, width: int = 1):
        """
        Draws a line on the RGB buffer using OpenCV.

        Args:
            start: (x1, y1) starting pixel coordinates.
            end: (x2, y2) ending pixel coordinates.
            color: RGB color tuple (R, G, B).
            width: Thickness of the line in pixels.
        """
        x1, y1 = map(int, np.round(start[:2]))
        x2, y2 = map(int, np.round(end[:2]))
        cv2.line(self.rgb_buffer, (x1, y1), (x2, y2), color, thickness=width)

    def draw_triangle(self, p1, p2, p3, color: Color = COLOR_WHITE):
        self.draw_line(p1, p2, color)
        self.draw_line(p2, p3, color)
        self.draw_line(p3, p1, color)

    def fill_triangle(self, p1, p2, p3, color: Color = COLOR_WHITE) -> int:
        """Fills the triangle and returns how many pixels were written."""
        xs = np.array([p1[0], p2[0], p3[0]], dtype=np.float64)
        ys = np.array([p1[1], p2[1], p3[1]], dtype=np.float64)
        rr, cc = polygon(ys, xs, shape=self.rgb_buffer.shape[:2])
        self.rgb_buffer[rr, cc] = color
        return len(rr)

    @Profiler.timed()
    def render_triangles(self, render_list: Iterable[Triangle], frame_color: Color = COLOR_WHITE) -> int:
        """
        Draws screen-space triangles in list order (the list is already sorted back to front).

        Each triangle is drawn according to its own render mode:
            INVISIBLE                     nothing
            GREY_FILLED, TEXTURED         filled with the triangle colour
            GREY_FILLED_PLUS, TEXTURED_PLUS
                                          filled, then outlined in `frame_color`
            WIREFRAME                     outlined in `frame_color`
            WIREFRAME_RGB                 outlined in the triangle colour

        Textured modes draw flat: no sampler exists yet, so the sprite is ignored.

        Returns:
            int: number of triangles that produced any drawing.
        """
        drawn = 0
        for tri in render_list:
            mode = tri.render_mode
            p1, p2, p3 = tri.points[:, :2]
            if mode.is_filled:
                self.fill_triangle(p1, p2, p3, tri.color)
            if mode.has_outline:
                outline = tri.color if mode == RenderMode.WIREFRAME_RGB else frame_color
                self.draw_triangle(p1, p2, p3, outline)
            if mode.is_filled or mode.has_outline:
                drawn += 1
        logger.debug("Drew %d triangles", drawn)
        return drawn
