# texture.py

# Textures (sprites) are owned by a TextureStore. Triangles only borrow a
# reference; the pipeline passes it along and never copies or samples it.

from typing import Dict, Iterator

import numpy as np
from numpy.typing import NDArray


class Texture:
    def __init__(self, image, name: str = "UnnamedTexture"):
        self.image: NDArray[np.float32]  # shape: (height, width, 3) in [0, 1]
        self.image = np.array(image, dtype=np.float32)
        if self.image.ndim != 3 or self.image.shape[2] != 3:
            raise ValueError(f"Texture image must be (h, w, 3), got {self.image.shape}")
        self.width: int = self.image.shape[1]
        self.height: int = self.image.shape[0]
        self.name = name

    @staticmethod
    def from_array(pixels: np.ndarray, name: str = "UnnamedTexture") -> "Texture":
        """Builds a texture from 8-bit (0..255) or float (0..1) RGB pixels."""
        pixels = np.asarray(pixels)
        if pixels.dtype == np.uint8:
            return Texture(pixels.astype(np.float32) / 255.0, name)
        return Texture(pixels, name)

    @staticmethod
    def solid(width: int, height: int, color=(255, 255, 255), name: str = "UnnamedTexture") -> "Texture":
        image = np.empty((height, width, 3), dtype=np.float32)
        image[:] = np.array(color, dtype=np.float32) / 255.0
        return Texture(image, name)

    def __repr__(self) -> str:
        return f"Texture({self.name!r}, {self.width}x{self.height})"


class TextureStore:
    """The asset table. Lookups hand out the stored object itself."""
    def __init__(self):
        self._textures: Dict[str, Texture] = {}

    def register(self, name: str, texture: Texture) -> Texture:
        if name in self._textures:
            raise KeyError(f"Texture {name!r} is already registered")
        self._textures[name] = texture
        return texture

    def get(self, name: str) -> Texture:
        return self._textures[name]

    def __contains__(self, name: str) -> bool:
        return name in self._textures

    def __len__(self) -> int:
        return len(self._textures)

    def __iter__(self) -> Iterator[str]:
        return iter(self._textures)
