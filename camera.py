# camera.py

# A camera is defined by its location and orientation (both in world space).
# Pitch, yaw and roll determine the orientation, the projection and view
# matrices follow from them, and for practical reasons the viewport the camera
# draws into is part of the camera as well.
#
# Per triangle the camera runs:
#   world -> view -> cull + light -> clip near -> clip far -> project -> divide + screen map
# and, per frame, sorts what survived and clips it against its viewport edges.

import logging
from typing import List, Sequence, Tuple

import numpy as np

import matrix_helpers as mh
import vertex_helpers as v
from clipping import clip_against_plane
from config import COLOR_BLACK, COLOR_YELLOW, DEFAULT_LIGHT_DIRECTION
from depth_buffer import DepthBuffer
from profiler import Profiler
from triangle import Color, RenderMode, Triangle, centroid_depth, is_finite, transform_triangle

logger = logging.getLogger(__name__)

VIEW_ORIGIN = v.point(0.0, 0.0, 0.0)


class Camera:
    def __init__(self, name: str, x1: int, y1: int, x2: int, y2: int,
                 fov: float = 90.0, near: float = 0.1, far: float = 1000.0):
        """
        Creates a camera drawing into the viewport with top left (x1, y1) and
        bottom right (x2, y2) in screen pixels. Pitch, yaw and roll start at 0,
        so the camera looks down +z with +y up.
        """
        self.name = name

        self.position = v.point(0.0, 0.0, 0.0)
        self.prev_position = self.position.copy()  # available for collision checks
        # Camera axes, refreshed by recalculate_camera()
        self.look_dir = v.point(0.0, 0.0, 1.0)
        self.up = v.point(0.0, 1.0, 0.0)
        self.right = v.point(1.0, 0.0, 0.0)

        self.pitch = 0.0
        self.yaw = 0.0
        self.roll = 0.0

        self.x1, self.y1 = int(x1), int(y1)
        self.x2, self.y2 = int(x2), int(y2)
        if self.x2 <= self.x1 or self.y2 <= self.y1:
            raise ValueError(f"Invalid viewport ({x1}, {y1}) - ({x2}, {y2}) for camera {name!r}")
        self.width = self.x2 - self.x1
        self.height = self.y2 - self.y1

        # Grey shade output range, see set_rgb_range()
        self.min_rgb = 0
        self.max_rgb = 255

        self.fov = fov
        self.near_plane = near
        self.far_plane = far
        self.projection_matrix = mh.make_projection(fov, self.height / self.width, near, far)
        self.view_matrix = mh.make_identity()
        self.recalculate_camera()

    def __repr__(self) -> str:
        return f"Camera({self.name!r}, viewport={self.viewport}, position={self.position[:3].tolist()})"

    @property
    def viewport(self) -> Tuple[int, int, int, int]:
        return self.x1, self.y1, self.x2, self.y2

    # ========== Setup ==========

    def set_rgb_range(self, min_val: int = 0, max_val: int = 255) -> bool:
        """
        Sets the grey range used for lit faces. Narrowing it (e.g. 32..255) keeps
        faces turned away from the light from going fully black.

        Values that do not satisfy 0 <= min_val < max_val <= 255 are ignored and
        the current range is kept. Returns whether the range was applied.
        """
        if 0 <= min_val < max_val <= 255:
            self.min_rgb = int(min_val)
            self.max_rgb = int(max_val)
            return True
        logger.warning("Camera %s: ignoring invalid RGB range (%s, %s)", self.name, min_val, max_val)
        return False

    def update_camera(self, fov: float, near: float, far: float):
        """Rebuilds the projection matrix. Call between frames."""
        self.fov = fov
        self.near_plane = near
        self.far_plane = far
        self.projection_matrix = mh.make_projection(fov, self.height / self.width, near, far)

    def recalculate_camera(self):
        """
        Recomputes the camera axes and view matrix from position, pitch, yaw and roll.

        Not called automatically; do it after changing any of them.
        """
        # y is the parent axis and z the grandchild, which keeps gimbal lock out of the common moves
        rotation = mh.make_rotation_z(self.roll) @ mh.make_rotation_x(self.pitch) @ mh.make_rotation_y(self.yaw)

        self.look_dir = mh.multiply_vector(rotation, v.point(0.0, 0.0, 1.0))
        self.up = mh.multiply_vector(rotation, v.point(0.0, 1.0, 0.0))
        self.right = v.vector_cross(self.look_dir, self.up)

        target = v.vector_add(self.position, self.look_dir)
        camera_matrix = mh.point_at(self.position, target, self.up)
        self.view_matrix = mh.quick_inverse(camera_matrix)

    def move_to(self, position):
        """Moves the camera, remembering where it came from. Call recalculate_camera() afterwards."""
        self.prev_position = self.position
        self.position = v.as_point(position)

    # ========== Colour ==========

    @staticmethod
    def vary_shade(a: float, a_min: float, a_max: float, b_min: int, b_max: int) -> int:
        """Maps `a` in [a_min, a_max] proportionally onto [b_min, b_max] (truncating)."""
        return int(((a - a_min) / (a_max - a_min)) * float(b_max - b_min)) + b_min

    @staticmethod
    def vary_shade_reversed(a: float, a_min: float, a_max: float, b_min: int, b_max: int) -> int:
        """Like vary_shade() but measured from the top, so a == a_min gives b_max."""
        return b_max - Camera.vary_shade(a, a_min, a_max, b_min, b_max)

    def shade_color(self, lum: float) -> Color:
        grey = self.vary_shade(lum, 0.0, 1.0, self.min_rgb, self.max_rgb)
        return grey, grey, grey

    # ========== Triangle transforms ==========

    @staticmethod
    def world_transform(tri: Triangle, world_matrix) -> Triangle:
        """Model -> world. Static since it does not depend on any camera."""
        return transform_triangle(tri, world_matrix)

    def view_transform(self, tri: Triangle) -> Triangle:
        return transform_triangle(tri, self.view_matrix)

    def project_transform(self, tri: Triangle) -> Triangle:
        return transform_triangle(tri, self.projection_matrix)

    def scale_into_view(self, tri: Triangle) -> Triangle:
        """
        Perspective divide and viewport mapping of a projected triangle.

        Texture u and v are divided by the projected w and 1/w is kept in the
        texture's third component for perspective correct interpolation later on.
        Positions go from [-1, 1] to absolute pixels inside this camera's viewport,
        with y flipped since world up is screen down.
        """
        w = tri.points[:, 3]
        with np.errstate(divide='ignore', invalid='ignore'):
            tex = np.empty((3, 3), dtype=np.float64)
            tex[:, 0] = tri.tex[:, 0] / w
            tex[:, 1] = tri.tex[:, 1] / w
            tex[:, 2] = 1.0 / w

            xyz = tri.points[:, :3] / w[:, None]

        xyz[:, 1] *= -1.0
        # [-1, 1] -> [0, 2] -> viewport pixels
        xyz[:, 0] = (xyz[:, 0] + 1.0) * 0.5 * self.width + self.x1
        xyz[:, 1] = (xyz[:, 1] + 1.0) * 0.5 * self.height + self.y1

        points = np.hstack([xyz, np.ones((3, 1))])
        return Triangle(points, tex, tri.color, tri.render_mode, tri.sprite)

    # ========== Pipeline ==========

    @Profiler.timed()
    def cull_view_and_project_triangle(self, tri: Triangle, output: List[Triangle],
                                       light_dir: Sequence[float] = DEFAULT_LIGHT_DIRECTION,
                                       render_mode: RenderMode = RenderMode.GREY_FILLED_PLUS) -> int:
        """
        Runs one world-space triangle through cull, light, near/far clip and projection.

        Parameters:
            tri (Triangle):
                Triangle in world space. It is not modified.
            output (list[Triangle]):
                Screen-space triangles are appended here (0 to 4 of them), ready
                for rasterize_triangles().
            light_dir:
                Direction of the single directional light, world space.
            render_mode (RenderMode):
                Mode for triangles that do not carry their own (RenderMode.UNKNOWN).

        Wireframe modes are never culled. WIREFRAME_RGB triangles are not lit either:
        they keep their own color, which is what that mode draws the edges with.

        Returns:
            int: how many triangles were appended.
        """
        mode = tri.render_mode if tri.render_mode != RenderMode.UNKNOWN else RenderMode(render_mode)
        if mode == RenderMode.INVISIBLE:
            return 0
        if mode != tri.render_mode:
            tri = tri.with_render_mode(mode)

        viewed = self.view_transform(tri)

        # Cull faces pointing away: the camera sits at the view space origin, so the
        # ray from the camera to any vertex is the vertex itself.
        normal = v.get_normal(*viewed.points)
        camera_ray = v.vector_sub(viewed.points[0], VIEW_ORIGIN)
        if not mode.is_wireframe and not v.vector_dot(normal, camera_ray) < 0.0:
            return 0

        # Light in world space, where the light direction is given
        if mode != RenderMode.WIREFRAME_RGB:
            world_normal = v.get_normal(*tri.points)
            light = v.vector_normalize(v.as_point(light_dir))
            lum = max(0.0, v.vector_dot(light, world_normal))
            viewed = viewed.with_color(self.shade_color(lum))

        added = 0
        for near_clipped in clip_against_plane((0.0, 0.0, self.near_plane), (0.0, 0.0, 1.0), viewed):
            for far_clipped in clip_against_plane((0.0, 0.0, self.far_plane), (0.0, 0.0, -1.0), near_clipped):
                projected = self.project_transform(far_clipped)
                output.append(self.scale_into_view(projected))
                added += 1
        return added

    def viewport_planes(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        """The four viewport edges as (point, inward normal): top, bottom, left, right."""
        return [
            (v.point(0.0, self.y1 + 0.1, 0.0), v.point(0.0, 1.0, 0.0)),
            (v.point(0.0, self.y2 - 1.0, 0.0), v.point(0.0, -1.0, 0.0)),
            (v.point(self.x1 + 0.1, 0.0, 0.0), v.point(1.0, 0.0, 0.0)),
            (v.point(self.x2 - 1.0, 0.0, 0.0), v.point(-1.0, 0.0, 0.0)),
        ]

    def clip_to_viewport(self, tri: Triangle) -> List[Triangle]:
        """
        Clips one screen-space triangle against the four viewport edges.

        Each edge only sees the triangles the previous edge produced, so at most
        2**4 triangles come out of a single input.
        """
        pending = [tri]
        for plane_p, plane_n in self.viewport_planes():
            clipped: List[Triangle] = []
            for candidate in pending:
                clipped.extend(clip_against_plane(plane_p, plane_n, candidate))
            pending = clipped
            if not pending:
                break
        return pending

    @Profiler.timed()
    def rasterize_triangles(self, to_raster: Sequence[Triangle], drop_non_finite: bool = True) -> List[Triangle]:
        """
        Orders the projected triangles back to front and clips them to the viewport.

        Parameters:
            to_raster (Sequence[Triangle]):
                Output of cull_view_and_project_triangle(). Not modified.
            drop_non_finite (bool):
                Skip triangles with inf/nan coordinates (degenerate input upstream).

        Returns:
            list[Triangle]:
                Render-ready triangles, farthest (largest mean z) first.
        """
        candidates = list(to_raster)
        if drop_non_finite:
            finite = [t for t in candidates if is_finite(t)]
            if len(finite) != len(candidates):
                logger.debug("Camera %s: dropped %d non-finite triangle(s)",
                             self.name, len(candidates) - len(finite))
            candidates = finite

        # Painter's algorithm: farthest first
        ordered = sorted(candidates, key=centroid_depth, reverse=True)

        to_render: List[Triangle] = []
        for tri in ordered:
            to_render.extend(self.clip_to_viewport(tri))
        return to_render

    def clear_viewport(self, depth_buffer: DepthBuffer, frame=None, border: bool = False,
                       color: Color = COLOR_BLACK):
        """
        Clears this camera's part of the screen and of the depth buffer.

        Parameters:
            depth_buffer (DepthBuffer):
                Shared buffer; only the slice under this viewport is touched.
            frame (rasterizer.FrameBuffer, optional):
                When given, the viewport is filled with `color` and, with `border`,
                outlined in yellow with the camera name in the corner.
        """
        x1, y1, x2, y2 = self.viewport
        if frame is not None:
            frame.fill_rect(x1 - 1, y1 - 1, x2 - x1 + 1, y2 - y1 + 1, color)
            if border:
                for i in range(2):
                    frame.draw_rect(x1 - 1 - i, y1 - 1 - i, (x2 + i) - (x1 - 1 - i), (y2 + i) - (y1 - 1 - i),
                                    COLOR_YELLOW)
                if self.name:
                    frame.draw_string(x1 + 2, y1 + 2, self.name, COLOR_YELLOW)
        depth_buffer.clear(x1, y1, x2 + 1, y2 + 1)


def cameras_overlap(a: Camera, b: Camera) -> bool:
    """True when two viewports share pixels. Viewports are expected not to."""
    return a.x1 < b.x2 and b.x1 < a.x2 and a.y1 < b.y2 and b.y1 < a.y2
