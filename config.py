# config.py

from typing import Generic, TypeVar

import numpy as np

from triangle import COLOR_WHITE, RenderMode

T = TypeVar('T')

COLOR_BLACK = (0, 0, 0)
COLOR_YELLOW = (255, 255, 0)
DEFAULT_LIGHT_DIRECTION = (1.0, 1.0, 1.0)


class ConfigEntry(Generic[T]):
    def __init__(self, default_val: T, name=None, mutable=True):
        self._mutable = True  # Allow it to be mutable at the start
        if name is None:
            name = f"UnnamedConfigEntry_{id(self)}"
        self.name = name
        self.val = default_val
        self._mutable = mutable  # Then decide whether to remain mutable

    @property
    def val(self) -> T:
        return self._val

    @val.setter
    def val(self, new_val: T):
        if not self._mutable:
            raise AttributeError(f"{self.name} is immutable")
        self._val = new_val

    @property
    def mutable(self) -> bool:
        return self._mutable

    def __repr__(self) -> str:
        return f"ConfigEntry({self.name}={self._val!r})"


class Config:
    """
    Settings for one running pipeline.

    There is no global instance: whoever drives the frames (usually
    `render.FrameRenderer`) owns a Config and passes the values it needs into
    the cameras each frame. Keyword overrides set the initial values, including
    those that are immutable afterwards:

        cfg = Config(screen_width=320, screen_height=200)
        cfg.render_mode.val = RenderMode.WIREFRAME
    """
    def __init__(self, **overrides):
        self._build(overrides)

    def _build(self, overrides: dict):
        values = dict(overrides)

        def entry(name, default, mutable=True):
            e = ConfigEntry(values.pop(name, default), name=name, mutable=mutable)
            setattr(self, name, e)

        # === Initial settings ===
        # These settings are set once. Changing them would require new buffers.
        entry("screen_width", 1280, mutable=False)
        entry("screen_height", 720, mutable=False)

        # === Projection defaults for new cameras ===
        entry("fov", 90.0)  # In degrees
        entry("near_plane", 0.1)
        entry("far_plane", 1000.0)

        # === Rendering ===
        # Render mode and light are read once per frame, so they can be changed between frames.
        entry("render_mode", RenderMode.GREY_FILLED_PLUS)
        entry("light_direction", np.array(DEFAULT_LIGHT_DIRECTION, dtype=np.float64))
        entry("rgb_range", (32, 255))  # grey range for the demo camera, faces away from the light stay visible
        entry("frame_color", COLOR_WHITE)
        entry("background_color", COLOR_BLACK)
        entry("drop_non_finite", True)
        entry("viewport_border", False)

        # === Diagnostics ===
        entry("profile_interval", 60)  # log the profiler once per N frames, 0 disables
        entry("log_level", "WARNING")

        if values:
            raise KeyError(f"Unknown config entries: {sorted(values)}")
        self._overrides = dict(overrides)

    def reset_defaults(self):
        """Resets all configs to their default values (keeping construction overrides)."""
        self._build(self._overrides)

    def as_dict(self) -> dict:
        return {name: e.val for name, e in vars(self).items() if isinstance(e, ConfigEntry)}
