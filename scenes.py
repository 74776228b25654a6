

from typing import List, Tuple

from camera import Camera
from config import Config
from triangle import Triangle


def _tri(p0, p1, p2, t0, t1, t2) -> Triangle:
    return Triangle.from_points(p0, p1, p2, tex=(t0, t1, t2))


def unit_cube() -> List[Triangle]:
    # Two clockwise triangles per face, outward normals. Texture coordinates are
    # carried along but nothing samples them yet.
    return [
        # SOUTH
        _tri((0, 0, 0), (0, 1, 0), (1, 1, 0), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((0, 0, 0), (1, 1, 0), (1, 0, 0), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
        # EAST
        _tri((1, 0, 0), (1, 1, 0), (1, 1, 1), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((1, 0, 0), (1, 1, 1), (1, 0, 1), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
        # NORTH
        _tri((1, 0, 1), (1, 1, 1), (0, 1, 1), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((1, 0, 1), (0, 1, 1), (0, 0, 1), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
        # WEST
        _tri((0, 0, 1), (0, 1, 1), (0, 1, 0), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((0, 0, 1), (0, 1, 0), (0, 0, 0), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
        # TOP
        _tri((0, 1, 0), (0, 1, 1), (1, 1, 1), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((0, 1, 0), (1, 1, 1), (1, 1, 0), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
        # BOTTOM
        _tri((1, 0, 1), (0, 0, 1), (0, 0, 0), (0, 1, 1), (0, 0, 1), (1, 0, 1)),
        _tri((1, 0, 1), (0, 0, 0), (1, 0, 0), (0, 1, 1), (1, 0, 1), (1, 1, 1)),
    ]


def matrix_demo_scene(config: Config) -> Tuple[List[Triangle], List[Camera]]:
    """
    The matrix transform demo: one camera looking at the unit cube and a second
    viewport that only shows the transform and projection values as text.
    """
    width = config.screen_width.val
    height = config.screen_height.val

    cube_cam = Camera("camera 1", 0.01 * width, 0.05 * height, 0.54 * width, 0.95 * height,
                      fov=90.0, near=0.1, far=20.0)
    # A little offset to put the camera close to, but not on, the cube
    cube_cam.move_to((0.5, 0.5, -2.0))
    cube_cam.recalculate_camera()
    cube_cam.set_rgb_range(*config.rgb_range.val)

    info_cam = Camera("camera 2", 0.55 * width, 0.35 * height, 0.99 * width, 0.95 * height,
                      fov=config.fov.val, near=config.near_plane.val, far=config.far_plane.val)

    return unit_cube(), [cube_cam, info_cam]
