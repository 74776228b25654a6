"""End-to-end tests: frame orchestration and the matrix transform demo."""

import logging
from collections import defaultdict

import numpy as np
import pygame
import pytest
from numpy.testing import assert_allclose

import matrix_helpers as mh
import scenes
from camera import Camera
from config import Config
from rasterizer import FrameBuffer
from render import FrameRenderer, MatrixTransformDemo, _mkstr
from transform import SCALE_ROW, TRANSLATION_ROW
from triangle import RenderMode, centroid_depth


def _cube_renderer(mode: RenderMode, frame=None) -> FrameRenderer:
    config = Config(render_mode=mode, profile_interval=0)
    mesh, cameras = scenes.matrix_demo_scene(config)
    return FrameRenderer(config, cameras[:1], mesh, frame)


def test_cube_wireframe_keeps_every_triangle() -> None:
    """Without culling all 12 cube triangles survive and fit in the viewport."""
    renderer = _cube_renderer(RenderMode.WIREFRAME)
    out = renderer.render_frame(mh.make_identity())
    assert len(out) == 12
    assert renderer.last_counts == {"camera 1": (12, 12)}
    assert all(t.render_mode == RenderMode.WIREFRAME for t in out)


def test_cube_filled_shows_only_the_front_face() -> None:
    """Seen from z = -2 only the two south triangles face the camera."""
    renderer = _cube_renderer(RenderMode.GREY_FILLED_PLUS)
    out = renderer.render_frame()
    assert len(out) == 2
    xs = np.concatenate([t.points[:, 0] for t in out])
    ys = np.concatenate([t.points[:, 1] for t in out])
    assert xs.min() == pytest.approx(270.5) and xs.max() == pytest.approx(432.5)
    assert ys.min() == pytest.approx(279.0) and ys.max() == pytest.approx(441.0)
    # Both face away from the default light, so they get the bottom of the rgb range
    assert all(t.color == (32, 32, 32) for t in out)


def test_invisible_mode_renders_nothing() -> None:
    renderer = _cube_renderer(RenderMode.INVISIBLE)
    assert renderer.render_frame() == []


def test_cube_behind_camera_disappears() -> None:
    renderer = _cube_renderer(RenderMode.WIREFRAME)
    assert renderer.render_frame(mh.make_translation(0, 0, -10)) == []


def test_render_list_is_sorted_back_to_front() -> None:
    renderer = _cube_renderer(RenderMode.WIREFRAME)
    depths = [centroid_depth(t) for t in renderer.render_frame(mh.make_rotation_y(0.4))]
    assert depths == sorted(depths, reverse=True)


def test_each_camera_sorts_and_clips_its_own_part() -> None:
    """Two side by side cameras give two render lists, concatenated in camera order."""
    config = Config(render_mode=RenderMode.WIREFRAME, profile_interval=0)
    left = Camera("left", 0, 0, 100, 100)
    right = Camera("right", 100, 0, 200, 100)
    for cam in (left, right):
        cam.move_to((0.5, 0.5, -2.0))
        cam.recalculate_camera()

    renderer = FrameRenderer(config, [left, right], scenes.unit_cube())
    out = renderer.render_frame()
    assert len(out) == 24
    assert renderer.last_counts == {"left": (12, 12), "right": (12, 12)}
    assert all((t.points[:, 0] <= 99.0 + 1e-9).all() for t in out[:12])
    assert all((t.points[:, 0] >= 100.1 - 1e-9).all() for t in out[12:])
    for part in (out[:12], out[12:]):
        depths = [centroid_depth(t) for t in part]
        assert depths == sorted(depths, reverse=True)


def test_mesh_is_not_modified() -> None:
    renderer = _cube_renderer(RenderMode.GREY_FILLED)
    before = [t.points.copy() for t in renderer.mesh]
    renderer.render_frame(mh.make_transform_complete((2, 2, 2), (0.1, 0.2, 0.3), (1, 0, 0)))
    for tri, points in zip(renderer.mesh, before):
        assert_allclose(tri.points, points)


def test_frame_and_depth_are_cleared_and_drawn() -> None:
    frame = FrameBuffer(1280, 720, background=(128, 0, 0))
    renderer = _cube_renderer(RenderMode.GREY_FILLED_PLUS, frame)
    renderer.depth_buffer.buffer.fill(1.0)
    renderer.render_frame()

    assert frame.pixel(300, 300) == (32, 32, 32)  # inside the south face
    assert frame.pixel(100, 100) == (0, 0, 0)  # cleared viewport
    assert frame.pixel(1000, 20) == (128, 0, 0)  # outside every viewport
    assert renderer.depth_buffer.at(100, 100) == 0.0
    assert renderer.depth_buffer.at(1000, 20) == 1.0


def test_overlapping_viewports_are_reported(caplog) -> None:  # type: ignore[no-untyped-def]
    config = Config()
    with caplog.at_level(logging.WARNING, logger="render"):
        FrameRenderer(config, [Camera("a", 0, 0, 100, 100), Camera("b", 50, 50, 150, 150)], [])
    assert "overlap" in caplog.text


def test_profile_report_every_interval(caplog) -> None:  # type: ignore[no-untyped-def]
    config = Config(profile_interval=2)
    mesh, cameras = scenes.matrix_demo_scene(config)
    renderer = FrameRenderer(config, cameras[:1], mesh)
    with caplog.at_level(logging.INFO, logger="profiler"):
        renderer.render_frame()
        assert "Profile report" not in caplog.text
        renderer.render_frame()
    assert "Profile report" in caplog.text
    assert renderer.frame_count == 2


def _held(*keys):
    held = defaultdict(bool)
    for key in keys:
        held[key] = True
    return held


def test_demo_renders_the_cube() -> None:
    demo = MatrixTransformDemo(Config(profile_interval=0))
    out = demo.step()
    assert len(out) == 2
    assert demo.frame.pixel(300, 300) == (32, 32, 32)


def test_demo_render_mode_keys() -> None:
    demo = MatrixTransformDemo(Config(profile_interval=0))
    demo.handle_key_down(pygame.K_F4)
    assert demo.config.render_mode.val == RenderMode.WIREFRAME
    assert len(demo.step()) == 12
    demo.handle_key_down(pygame.K_F1)
    assert demo.step() == []


def test_demo_edits_transform_values() -> None:
    demo = MatrixTransformDemo(Config(profile_interval=0))

    demo.apply_held_keys(_held(pygame.K_q, pygame.K_RIGHT), 1.0)
    assert demo.values.get_component(SCALE_ROW, 0) == pytest.approx(1.5)

    demo.apply_held_keys(_held(pygame.K_z, pygame.K_LEFT), 2.0)
    assert demo.values.get_component(TRANSLATION_ROW, 0) == pytest.approx(-1.0)

    demo.handle_key_up(pygame.K_UP, _held(pygame.K_z))
    assert demo.values.get_component(TRANSLATION_ROW, 0) == 1.0
    demo.handle_key_up(pygame.K_DOWN, _held(pygame.K_q))
    assert demo.values.get_component(SCALE_ROW, 0) == 0.0

    demo.step()
    assert_allclose(demo.transform_matrix, demo.values.get_matrix())


def test_demo_later_selection_key_wins() -> None:
    assert MatrixTransformDemo.selected_cell(_held(pygame.K_q, pygame.K_c)) == (TRANSLATION_ROW, 2)
    assert MatrixTransformDemo.selected_cell(_held()) is None


def test_demo_projection_keys() -> None:
    demo = MatrixTransformDemo(Config(profile_interval=0))
    demo.apply_held_keys(_held(pygame.K_v, pygame.K_KP_PLUS), 0.5)
    demo.apply_held_keys(_held(pygame.K_f, pygame.K_KP_MINUS), 0.5)
    assert demo.fov == pytest.approx(91.0)
    assert demo.far == pytest.approx(15.0)
    demo.step()
    assert demo.cube_cam.fov == pytest.approx(91.0)
    assert demo.cube_cam.far_plane == pytest.approx(15.0)


def test_mkstr_truncates_like_the_info_panel() -> None:
    assert _mkstr(1.0) == "1.000"
    assert _mkstr(-0.123456) == "-0.12"
