#!/usr/bin/python
# render.py

# Matrix transform demo: a unit cube seen through one camera, with its
# scale / rotation / translation and the projection settings editable live.
# The second viewport shows the values and the resulting matrix.
#
# F1 - F7       select render mode (invisible, grey, grey+, wire, wire rgb, textured, textured+)
# hold Q, W, E  for scale x, y, z
#      A, S, D  for angle x, y, z
#      Z, X, C  for translation x, y, z
#   and use the arrow keys: left/right change the value, up sets it to 1, down to 0
# hold V, N, F  for field of view, near plane and far plane
#   and use + / - (num pad) to change the value

import argparse
import ctypes
import logging
import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

import matrix_helpers as mh
import profiler
import scenes
from camera import Camera, cameras_overlap
from config import COLOR_YELLOW, Config
from depth_buffer import DepthBuffer
from profiler import Profiler
from rasterizer import FrameBuffer
from transform import ANGLE_ROW, SCALE_ROW, TRANSLATION_ROW, Transform
from triangle import RenderMode, Triangle

logger = logging.getLogger(__name__)

# ========== Common Colors ==========
COLOR_DARK_RED = (128, 0, 0)
COLOR_GREY = (192, 192, 192)
COLOR_GREEN = (0, 255, 0)


class FrameRenderer:
    """
    Runs one mesh through every camera and draws the result.

    The renderer owns the depth buffer (one per screen) and, when given one, draws
    into `frame`. Without a frame it is purely geometric, which is what the tests use.
    """
    def __init__(self, config: Config, cameras: Sequence[Camera], mesh: Sequence[Triangle],
                 frame: Optional[FrameBuffer] = None):
        self.config = config
        self.cameras = list(cameras)
        self.mesh = list(mesh)
        self.frame = frame
        self.depth_buffer = DepthBuffer(config.screen_width.val, config.screen_height.val)

        self.frame_count = 0
        self.last_counts: Dict[str, Tuple[int, int]] = {}  # camera name -> (projected, rendered)
        self.last_render_list: List[Triangle] = []

        for i, a in enumerate(self.cameras):
            for b in self.cameras[i + 1:]:
                if cameras_overlap(a, b):
                    logger.warning("Viewports of %s and %s overlap", a.name, b.name)

    @Profiler.timed()
    def render_frame(self, world_matrix=None) -> List[Triangle]:
        """
        Renders the mesh with `world_matrix` as its model->world transform.

        Returns:
            list[Triangle]:
                The combined render list, camera after camera, each camera's part
                sorted back to front and clipped to its viewport.
        """
        if world_matrix is None:
            world_matrix = mh.make_identity()
        self.frame_count += 1

        render_mode = RenderMode(self.config.render_mode.val)
        light_dir = self.config.light_direction.val
        drop_non_finite = self.config.drop_non_finite.val

        # The world transform does not depend on the camera, so do it once
        Profiler.profile_accumulate_start("render_frame: world transform")
        world_tris = [Camera.world_transform(tri, world_matrix) for tri in self.mesh]
        Profiler.profile_accumulate_end("render_frame: world transform")

        render_list: List[Triangle] = []
        self.last_counts = {}
        for cam in self.cameras:
            to_raster: List[Triangle] = []
            Profiler.profile_accumulate_start("render_frame: cull, view and project")
            for tri in world_tris:
                cam.cull_view_and_project_triangle(tri, to_raster, light_dir, render_mode)
            Profiler.profile_accumulate_end("render_frame: cull, view and project")

            to_render = cam.rasterize_triangles(to_raster, drop_non_finite)
            self.last_counts[cam.name] = (len(to_raster), len(to_render))
            render_list.extend(to_render)

        Profiler.profile_accumulate_start("render_frame: clear")
        for cam in self.cameras:
            cam.clear_viewport(self.depth_buffer, self.frame, border=self.config.viewport_border.val,
                               color=self.config.background_color.val)
        Profiler.profile_accumulate_end("render_frame: clear")

        if self.frame is not None:
            self.frame.render_triangles(render_list, self.config.frame_color.val)

        logger.debug("Frame %d: %s", self.frame_count, self.last_counts)
        interval = self.config.profile_interval.val
        if interval and self.frame_count % interval == 0:
            Profiler.profile_accumulate_report(intervals=interval)

        self.last_render_list = render_list
        return render_list


def _mkstr(value: float) -> str:
    return f"{value:f}"[:5]


# Keys selecting a cell of the scale / angle / translation grid, as (row, axis)
SELECT_KEYS = {
    pygame.K_q: (SCALE_ROW, 0), pygame.K_w: (SCALE_ROW, 1), pygame.K_e: (SCALE_ROW, 2),
    pygame.K_a: (ANGLE_ROW, 0), pygame.K_s: (ANGLE_ROW, 1), pygame.K_d: (ANGLE_ROW, 2),
    pygame.K_z: (TRANSLATION_ROW, 0), pygame.K_x: (TRANSLATION_ROW, 1), pygame.K_c: (TRANSLATION_ROW, 2),
}

RENDER_MODE_KEYS = {
    pygame.K_F1: RenderMode.INVISIBLE,
    pygame.K_F2: RenderMode.GREY_FILLED,
    pygame.K_F3: RenderMode.GREY_FILLED_PLUS,
    pygame.K_F4: RenderMode.WIREFRAME,
    pygame.K_F5: RenderMode.WIREFRAME_RGB,
    pygame.K_F6: RenderMode.TEXTURED,
    pygame.K_F7: RenderMode.TEXTURED_PLUS,
}

PLUS_KEYS = (pygame.K_KP_PLUS, pygame.K_EQUALS)
MINUS_KEYS = (pygame.K_KP_MINUS, pygame.K_MINUS)


class MatrixTransformDemo:
    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        width = self.config.screen_width.val
        height = self.config.screen_height.val

        mesh, cameras = scenes.matrix_demo_scene(self.config)
        self.cube_cam, self.info_cam = cameras
        self.frame = FrameBuffer(width, height, background=COLOR_DARK_RED)
        self.renderer = FrameRenderer(self.config, [self.cube_cam], mesh, self.frame)

        self.fov = self.cube_cam.fov
        self.near = self.cube_cam.near_plane
        self.far = self.cube_cam.far_plane

        self.values = Transform()
        self.transform_matrix = self.values.get_matrix()
        self.running = True
        self._draw_instructions()

    def _draw_instructions(self):
        x, y = self.info_cam.x1, self.info_cam.y1
        self.frame.draw_string(x + 10, y - 120, "hold Q, W, E for scale")
        self.frame.draw_string(x + 10, y - 100, "     A, S, D for angle")
        self.frame.draw_string(x + 10, y - 80, "     Z, X, C for trnsl")
        self.frame.draw_string(x + 10, y - 40, "change value: arrow keys")

        self.frame.draw_string(x + 300, y - 120, "hold V for Field of View")
        self.frame.draw_string(x + 300, y - 100, "     N for Near plane")
        self.frame.draw_string(x + 300, y - 80, "     F for Far  plane")
        self.frame.draw_string(x + 300, y - 40, "change value: + / - (num pad)")

    # ========== Input ==========

    @staticmethod
    def selected_cell(held) -> Optional[Tuple[int, int]]:
        """The (row, axis) of the grid cell whose key is held, the later key in q..c wins."""
        selected = None
        for key, cell in SELECT_KEYS.items():
            if held[key]:
                selected = cell
        return selected

    def handle_key_down(self, key: int):
        if key in RENDER_MODE_KEYS:
            self.config.render_mode.val = RENDER_MODE_KEYS[key]
            logger.info("Render mode %s", self.config.render_mode.val.name)

    def handle_key_up(self, key: int, held):
        cell = self.selected_cell(held)
        if cell is None:
            return
        if key == pygame.K_UP:
            self.values.set_component(*cell, 1.0)
        elif key == pygame.K_DOWN:
            self.values.set_component(*cell, 0.0)

    def apply_held_keys(self, held, elapsed: float):
        cell = self.selected_cell(held)
        if cell is not None:
            value = self.values.get_component(*cell)
            if held[pygame.K_LEFT]:
                value -= 0.5 * elapsed
            if held[pygame.K_RIGHT]:
                value += 0.5 * elapsed
            self.values.set_component(*cell, value)

        plus = any(held[k] for k in PLUS_KEYS)
        minus = any(held[k] for k in MINUS_KEYS)
        step = (1.0 if plus else 0.0) - (1.0 if minus else 0.0)
        if step:
            if held[pygame.K_v]:
                self.fov = min(max(self.fov + 2.0 * elapsed * step, 1.0), 179.0)
            if held[pygame.K_n]:
                self.near = max(self.near + 2.0 * elapsed * step, 0.01)
            if held[pygame.K_f]:
                self.far = max(self.far + 10.0 * elapsed * step, self.near + 0.1)

    # ========== Frame ==========

    def step(self) -> List[Triangle]:
        """Renders one frame with the current values into the frame buffer."""
        self.cube_cam.update_camera(self.fov, self.near, self.far)
        self.transform_matrix = self.values.get_matrix()

        render_list = self.renderer.render_frame(self.transform_matrix)

        self.info_cam.clear_viewport(self.renderer.depth_buffer, self.frame,
                                     color=self.config.background_color.val)
        self.draw_matrix_info(self.info_cam.x1 + 10, self.info_cam.y1 + 10)
        self.frame.draw_string(10, 10, "F1 - F7: select render mode")
        self.draw_projection_info(self.info_cam.x1 + 300, self.info_cam.y1 + 10)
        return render_list

    def draw_matrix_info(self, x: int, y: int):
        scale, angles, offset = self.values.scale_factors, self.values.angles, self.values.offset
        self.frame.draw_string(x + 5, y + 30, "           x     y     z   ")
        self.frame.draw_string(x + 5, y + 50, "scale:   " + " ".join(_mkstr(c) for c in scale), COLOR_GREY)
        self.frame.draw_string(x + 5, y + 70, "angle:   " + " ".join(_mkstr(c) for c in angles), COLOR_YELLOW)
        self.frame.draw_string(x + 5, y + 90, "trnsl:   " + " ".join(_mkstr(c) for c in offset), COLOR_GREEN)

        self.frame.draw_string(x + 15, y + 150, "Transformation matrix")
        for r in range(4):
            row = " ".join(_mkstr(c) for c in self.transform_matrix[r])
            self.frame.draw_string(x + 15, y + 170 + 20 * r, row)

    def draw_projection_info(self, x: int, y: int):
        self.frame.draw_string(x + 5, y + 50, "FoV:    " + _mkstr(self.fov))
        self.frame.draw_string(x + 5, y + 70, "Fnear:  " + _mkstr(self.near))
        self.frame.draw_string(x + 5, y + 90, "Ffar:   " + _mkstr(self.far))

    def render_buffer(self, screen):
        surface = pygame.surfarray.make_surface(self.frame.rgb_buffer.swapaxes(0, 1))
        screen.blit(surface, (0, 0))

    def run(self):
        # Make windows not scale this window (pixels do have to be perfect)
        if sys.platform == "win32":
            ctypes.windll.user32.SetProcessDPIAware()
        pygame.init()
        pygame.display.set_caption("MatrixTransformDemo")
        screen = pygame.display.set_mode((self.frame.width, self.frame.height))
        clock = pygame.time.Clock()
        elapsed = 0.0

        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        self.running = False
                    self.handle_key_down(event.key)
                elif event.type == pygame.KEYUP:
                    self.handle_key_up(event.key, pygame.key.get_pressed())
            self.apply_held_keys(pygame.key.get_pressed(), elapsed)

            self.step()
            self.render_buffer(screen)
            pygame.display.flip()
            elapsed = clock.tick(60) / 1000.0

        pygame.quit()


def _configure_logging(verbose: bool = False, default_level: str = "WARNING") -> None:
    """Configure logging for the demo (stderr, level from --verbose or RENDER_LOG)."""
    level = logging.DEBUG if verbose else getattr(logging, default_level.upper(), logging.WARNING)
    env_level = os.environ.get('RENDER_LOG', '').upper()
    if not verbose and env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="geometry-demo",
        description="Interactive matrix transform demo for the software geometry pipeline.",
    )
    parser.add_argument("--width", type=int, default=1280, help="screen width in pixels")
    parser.add_argument("--height", type=int, default=720, help="screen height in pixels")
    parser.add_argument("--no-profile", action="store_true", help="disable the stage profiler")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    config = Config(screen_width=args.width, screen_height=args.height)
    _configure_logging(verbose=args.verbose, default_level=config.log_level.val)
    profiler.enabled_profiler = not args.no_profile

    MatrixTransformDemo(config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
