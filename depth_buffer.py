# depth_buffer.py

# Every pixel on the screen has one float depth value. The buffer is allocated
# once and each camera clears its own viewport slice per frame. Draw order comes
# from the painter's sort in Camera.rasterize_triangles; nothing reads this
# buffer back during clipping, culling or ordering.

import numpy as np
from numpy.typing import NDArray


class DepthBuffer:
    def __init__(self, screen_width: int, screen_height: int):
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError(f"Invalid depth buffer size {screen_width}x{screen_height}")
        self.width = int(screen_width)
        self.height = int(screen_height)
        self.buffer: NDArray[np.float32] = np.zeros(self.width * self.height, dtype=np.float32)

    @property
    def values(self) -> NDArray[np.float32]:
        """(height, width) view onto the flat buffer."""
        return self.buffer.reshape(self.height, self.width)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def at(self, x: int, y: int) -> float:
        return float(self.buffer[self.index(x, y)])

    def clear(self, x1: int, y1: int, x2: int, y2: int, value: float = 0.0):
        """
        Clears the region [x1, x2) x [y1, y2) in absolute screen coordinates.

        The region is clamped to the screen so a viewport hanging over the edge is fine.
        """
        x1, x2 = max(int(x1), 0), min(int(x2), self.width)
        y1, y2 = max(int(y1), 0), min(int(y2), self.height)
        if x1 >= x2 or y1 >= y2:
            return
        self.values[y1:y2, x1:x2] = value

    def clear_all(self, value: float = 0.0):
        self.buffer.fill(value)
